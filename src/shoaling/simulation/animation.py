"""Animation loop driving the sea surface and the repeating wave packet.

Each set of inputs runs as one *generation* of two cooperative asyncio
tasks on a single event loop:

┌──────────────────┐   every frame    ┌─────────────────┐
│  surface ticker  │ ───────────────▶ │                 │
│  (runs forever)  │                  │                 │
└──────────────────┘                  │     Surface     │
┌──────────────────┐   every frame    │  (matplotlib,   │
│   packet loop    │ ───────────────▶ │   recorder...)  │
│  packet N: t 0→1 │   on t = 1:      │                 │
│  then packet N+1 │ ─ remove packet ▶│                 │
└──────────────────┘                  └─────────────────┘

Changing inputs cancels and awaits both tasks of the current generation,
clears the surface, then starts the next generation. The tasks capture the
scene of their own generation, so a packet drawn with stale slope, intensity
or depth can never coexist with one from the new inputs.
"""

import asyncio
import logging
import sys
import time
from typing import Protocol

from shoaling.core.config import AnimationSettings, CanvasSettings, get_settings
from shoaling.core.types import FloatArray, SimulationInputs
from shoaling.simulation.scene import Scene, WavePacket, build_scene, surface_layers

# Configure module logger
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


class Clock(Protocol):
    """Time source for the animation loop (seconds)."""

    def now(self) -> float: ...

    async def sleep(self, seconds: float) -> None: ...


class MonotonicClock:
    """Wall-clock time on the running event loop."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ManualClock:
    """Virtual clock that only moves when advanced.

    Sleepers are woken in deadline order as `advance()` walks time forward,
    which makes frame sequences exactly reproducible for tests and offline
    video rendering.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._waiters: list[tuple[float, asyncio.Future]] = []

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        self._waiters.append((self._now + max(seconds, 0.0), future))
        await future

    async def advance(self, seconds: float) -> None:
        """Move time forward, waking every sleeper whose deadline passes."""
        target = self._now + seconds
        while True:
            self._waiters = [(d, f) for d, f in self._waiters if not f.done()]
            due = [d for d, _ in self._waiters if d <= target]
            if not due:
                break
            self._now = max(self._now, min(due))
            for deadline, future in self._waiters:
                if deadline <= self._now:
                    future.set_result(None)
            await self._settle()
        self._now = target
        await self._settle()

    @staticmethod
    async def _settle(rounds: int = 3) -> None:
        # Let woken tasks run until they block on their next sleep
        for _ in range(rounds):
            await asyncio.sleep(0)


class Surface(Protocol):
    """Drawing target exclusively owned by one AnimationController."""

    def clear(self) -> None: ...

    def draw_static(self, scene: Scene) -> None: ...

    def draw_surface(self, body: FloatArray, highlight: FloatArray) -> None: ...

    def draw_packet(self, packet: WavePacket) -> None: ...

    def remove_packet(self, generation: int, packet_id: int) -> None: ...


class AnimationController:
    """Owns the drawing surface and the timers of the current generation.

    `start`, `update` and `stop` are serialized by a lock: the previous
    generation is fully stopped before the next one draws anything.
    """

    def __init__(
        self,
        surface: Surface,
        canvas: CanvasSettings | None = None,
        settings: AnimationSettings | None = None,
        clock: Clock | None = None,
        log_fn=None,
    ):
        if canvas is None or settings is None:
            defaults = get_settings()
            canvas = canvas or defaults.canvas
            settings = settings or defaults.animation

        self.surface = surface
        self.canvas = canvas
        self.settings = settings
        self.clock = clock or MonotonicClock()
        self.log = log_fn or logger.info

        self._lock = asyncio.Lock()
        self._tasks: list[asyncio.Task] = []
        self._generation = 0
        self._scene: Scene | None = None
        self._recommended_height: float | None = None

        self.packets_started = 0
        self.packets_completed = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def scene(self) -> Scene | None:
        return self._scene

    @property
    def inputs(self) -> SimulationInputs | None:
        return self._scene.inputs if self._scene else None

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    async def start(
        self,
        inputs: SimulationInputs,
        recommended_height: float | None = None,
    ) -> None:
        """Stop any running generation and start one for `inputs`."""
        async with self._lock:
            await self._stop_generation()
            self._start_generation(inputs, recommended_height)

    async def update(
        self,
        inputs: SimulationInputs | None = None,
        recommended_height: float | None = None,
    ) -> bool:
        """Restart with new inputs or seawall height.

        Args:
            inputs: New inputs. None keeps the current ones.
            recommended_height: New seawall height. None keeps the current one.

        Returns:
            True if a new generation was started.
        """
        async with self._lock:
            new_inputs = inputs or self.inputs
            if new_inputs is None:
                raise RuntimeError("No inputs to animate; call start() first")

            new_height = (
                recommended_height if recommended_height is not None else self._recommended_height
            )
            if (
                self.running
                and new_inputs == self.inputs
                and new_height == self._recommended_height
            ):
                return False

            await self._stop_generation()
            self._start_generation(new_inputs, new_height)
            return True

    async def stop(self) -> None:
        """Stop the current generation. Safe to call repeatedly."""
        async with self._lock:
            await self._stop_generation()

    async def run_for(self, seconds: float) -> None:
        """Keep the current generation running for `seconds` of clock time."""
        await self.clock.sleep(seconds)

    async def __aenter__(self) -> "AnimationController":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def _start_generation(
        self,
        inputs: SimulationInputs,
        recommended_height: float | None,
    ) -> None:
        self._generation += 1
        generation = self._generation
        scene = build_scene(inputs, recommended_height, self.canvas)
        self._scene = scene
        self._recommended_height = recommended_height

        self.surface.clear()
        self.surface.draw_static(scene)

        self.log(
            f"Generation {generation}: slope={inputs.slope} intensity={inputs.intensity} "
            f"depth={inputs.depth:g}m gain=x{inputs.visual_gain:.1f}"
        )
        self._tasks = [
            asyncio.create_task(
                self._surface_loop(scene), name=f"surface-{generation}"
            ),
            asyncio.create_task(
                self._packet_loop(scene, generation), name=f"packets-{generation}"
            ),
        ]

    async def _stop_generation(self) -> None:
        tasks, self._tasks = self._tasks, []
        if not tasks:
            return

        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        logger.debug(f"Generation {self._generation} stopped")
        for result in results:
            if isinstance(result, Exception):
                raise result

    async def _surface_loop(self, scene: Scene) -> None:
        """Redraw the layered sea surface every frame until cancelled."""
        start = self.clock.now()
        intensity = scene.inputs.intensity
        while True:
            elapsed = self.clock.now() - start
            body, highlight = surface_layers(
                elapsed, intensity, scene.canvas, self.settings.surface_step
            )
            self.surface.draw_surface(body, highlight)
            await self.clock.sleep(self.settings.frame_interval_s)

    async def _packet_loop(self, scene: Scene, generation: int) -> None:
        """Spawn packets back to back: the next starts when the last ends."""
        packet_id = 0
        start = self.clock.now()
        while True:
            await self._run_packet(scene, generation, packet_id, start)
            start += self.settings.packet_duration_s
            packet_id += 1

    async def _run_packet(
        self,
        scene: Scene,
        generation: int,
        packet_id: int,
        start: float,
    ) -> None:
        """Animate one packet from deep water to the shore with linear easing."""
        duration = self.settings.packet_duration_s
        self.packets_started += 1
        logger.debug(f"Packet {generation}.{packet_id} spawned")
        try:
            while True:
                t = min(max((self.clock.now() - start) / duration, 0.0), 1.0)
                self.surface.draw_packet(scene.packet_at(t, packet_id, generation))
                if t >= 1.0:
                    break
                await self.clock.sleep(self.settings.frame_interval_s)
        finally:
            self.surface.remove_packet(generation, packet_id)
        self.packets_completed += 1
