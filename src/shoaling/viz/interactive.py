"""Live matplotlib window with parameter sliders.

The animation controller runs on an asyncio event loop; the GUI is pumped
from a task on the same loop so slider callbacks, the surface ticker and the
packet loop all share one thread.
"""

import asyncio

import matplotlib.pyplot as plt
from matplotlib.widgets import Slider

from shoaling.core.config import get_settings
from shoaling.core.constants import (
    MAX_DEPTH_M,
    MAX_INTENSITY,
    MAX_SLOPE,
    MAX_VISUAL_GAIN,
    MIN_DEPTH_M,
    MIN_INTENSITY,
    MIN_SLOPE,
    MIN_VISUAL_GAIN,
    SKY_COLOR,
)
from shoaling.core.types import SimulationInputs
from shoaling.simulation.animation import AnimationController
from shoaling.viz.render import MatplotlibSurface


def show_interactive(
    inputs: SimulationInputs | None = None,
    recommended_height: float | None = None,
) -> None:
    """Open the live simulation window and block until it is closed."""
    asyncio.run(_run_interactive(inputs or SimulationInputs(), recommended_height))


async def _run_interactive(
    inputs: SimulationInputs,
    recommended_height: float | None,
) -> None:
    settings = get_settings()
    canvas = settings.canvas
    frame_interval = settings.animation.frame_interval_s

    fig = plt.figure(figsize=(10, 6.5))
    fig.patch.set_facecolor(SKY_COLOR)
    ax = fig.add_axes((0.02, 0.3, 0.96, 0.68))
    ax.set_xlim(0, canvas.width)
    ax.set_ylim(canvas.height, 0)
    ax.set_aspect("equal")
    ax.set_facecolor(SKY_COLOR)
    ax.set_axis_off()

    def slider(row: int, label: str, vmin: float, vmax: float, value: float, step: float) -> Slider:
        slider_ax = fig.add_axes((0.2, 0.2 - row * 0.05, 0.6, 0.03))
        widget = Slider(slider_ax, label, vmin, vmax, valinit=value, valstep=step)
        widget.label.set_color("white")
        widget.valtext.set_color("white")
        return widget

    sliders = {
        "slope": slider(0, "Slope", MIN_SLOPE, MAX_SLOPE, inputs.slope, 1),
        "intensity": slider(1, "Intensity", MIN_INTENSITY, MAX_INTENSITY, inputs.intensity, 1),
        "depth": slider(2, "Depth (m)", MIN_DEPTH_M, MAX_DEPTH_M, inputs.depth, 1),
        "visual_gain": slider(3, "Visual height", MIN_VISUAL_GAIN, MAX_VISUAL_GAIN, inputs.visual_gain, 0.1),
    }

    controller = AnimationController(MatplotlibSurface(ax), canvas=canvas)
    loop = asyncio.get_running_loop()
    pending: set[asyncio.Task] = set()

    def on_change(_value) -> None:
        new_inputs = SimulationInputs(
            slope=int(sliders["slope"].val),
            intensity=int(sliders["intensity"].val),
            depth=float(sliders["depth"].val),
            visual_gain=round(float(sliders["visual_gain"].val), 1),
        )
        task = loop.create_task(controller.update(new_inputs))
        pending.add(task)
        task.add_done_callback(pending.discard)

    for widget in sliders.values():
        widget.on_changed(on_change)

    closed = asyncio.Event()
    fig.canvas.mpl_connect("close_event", lambda _event: closed.set())

    plt.show(block=False)
    async with controller:
        await controller.start(inputs, recommended_height)
        while not closed.is_set():
            fig.canvas.draw_idle()
            fig.canvas.flush_events()
            await asyncio.sleep(frame_interval)

        if pending:
            await asyncio.gather(*pending)
