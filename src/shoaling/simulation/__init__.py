"""Animation loop, scene geometry and simulation history."""

from shoaling.simulation.animation import AnimationController, ManualClock, MonotonicClock
from shoaling.simulation.history import SimulationHistory, SimulationRecord
from shoaling.simulation.scene import Scene, SeawallOverlay, WavePacket, build_scene

__all__ = [
    "AnimationController",
    "ManualClock",
    "MonotonicClock",
    "Scene",
    "SeawallOverlay",
    "SimulationHistory",
    "SimulationRecord",
    "WavePacket",
    "build_scene",
]
