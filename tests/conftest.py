"""Shared fixtures for the shoaling test suite."""

import matplotlib
import pytest

from shoaling.core.config import AnimationSettings, CanvasSettings
from shoaling.core.types import SimulationInputs

matplotlib.use("Agg")


class RecordingSurface:
    """Animation surface that records every drawing call."""

    def __init__(self):
        self.clears = 0
        self.static_scenes = []
        self.surface_frames = 0
        self.last_body = None
        self.last_highlight = None
        self.packets = {}
        self.drawn = []
        self.removed = []
        self.mixed_generations = 0

    def clear(self):
        self.clears += 1
        self.packets.clear()

    def draw_static(self, scene):
        self.static_scenes.append(scene)

    def draw_surface(self, body, highlight):
        self.surface_frames += 1
        self.last_body = body
        self.last_highlight = highlight

    def draw_packet(self, packet):
        self.packets[(packet.generation, packet.packet_id)] = packet
        self.drawn.append(packet)
        if len({generation for generation, _ in self.packets}) > 1:
            self.mixed_generations += 1

    def remove_packet(self, generation, packet_id):
        self.packets.pop((generation, packet_id), None)
        self.removed.append((generation, packet_id))


@pytest.fixture
def canvas():
    return CanvasSettings()


@pytest.fixture
def animation_settings():
    """Coarse frames so virtual-time tests stay short and exact."""
    return AnimationSettings(packet_duration_s=5.0, frame_interval_s=0.5, surface_step=8.0)


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def default_inputs():
    return SimulationInputs(slope=5, intensity=5, depth=40.0)
