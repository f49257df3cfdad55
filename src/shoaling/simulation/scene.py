"""Renderer-agnostic scene geometry.

Everything here returns plain numpy vertex arrays in canvas units so that
the same geometry feeds matplotlib, video export, and the tests.
"""

from dataclasses import dataclass, field

import numpy as np

from shoaling.core.config import CanvasSettings, get_settings
from shoaling.core.constants import (
    HIGHLIGHT_OFFSET_Y,
    HIGHLIGHT_PHASE,
    PACKET_BASE_HALF_WIDTH,
    PACKET_CREST_SCALE,
    PACKET_HALF_WIDTH_PER_INTENSITY,
    SEAWALL_DEFAULT_COLOR,
    SEAWALL_DEFAULT_PX,
    SEAWALL_PX_PER_METER,
    SEAWALL_RECOMMENDED_COLOR,
    SEAWALL_WIDTH,
    SURFACE_AMPLITUDE_PER_INTENSITY,
    SURFACE_BASE_AMPLITUDE,
    SURFACE_BASE_FREQ,
    SURFACE_BASE_RATE,
    SURFACE_BASE_WEIGHT,
    SURFACE_CHOP_FREQ,
    SURFACE_CHOP_RATE,
    SURFACE_CHOP_WEIGHT,
)
from shoaling.core.types import FloatArray, SimulationInputs
from shoaling.models.shoaling import ShoalingModel


def surface_amplitude(intensity: float) -> float:
    """Sea-surface chop amplitude: ~2px when calm, ~10px when rough."""
    return SURFACE_BASE_AMPLITUDE + intensity * SURFACE_AMPLITUDE_PER_INTENSITY


def surface_path(
    elapsed_s: float,
    intensity: float,
    canvas: CanvasSettings,
    step: float = 8.0,
    offset_y: float = 0.0,
    phase: float = 0.0,
) -> FloatArray:
    """Closed polygon of the noisy sea surface at a point in time.

    Two sinusoids (a slow swell and a faster chop moving the other way) are
    summed along x; the polygon is closed along the bottom of the canvas.

    Returns:
        (N, 2) array of vertices.
    """
    elapsed_ms = elapsed_s * 1000.0
    amp = surface_amplitude(intensity)

    xs = np.arange(0.0, canvas.width + 1e-9, step)
    ys = (
        canvas.sea_level
        + np.sin(xs * SURFACE_BASE_FREQ + elapsed_ms * SURFACE_BASE_RATE + phase)
        * (amp * SURFACE_BASE_WEIGHT)
        + np.cos(xs * SURFACE_CHOP_FREQ - elapsed_ms * SURFACE_CHOP_RATE)
        * (amp * SURFACE_CHOP_WEIGHT)
        + offset_y
    )

    head = np.array([[0.0, canvas.height], [0.0, canvas.sea_level]])
    tail = np.array([[canvas.width, canvas.height]])
    return np.vstack([head, np.column_stack([xs, ys]), tail])


def surface_layers(
    elapsed_s: float,
    intensity: float,
    canvas: CanvasSettings,
    step: float = 8.0,
) -> tuple[FloatArray, FloatArray]:
    """Water body and translucent highlight polygons.

    Returns:
        Tuple of (body, highlight).
    """
    body = surface_path(elapsed_s, intensity, canvas, step)
    highlight = surface_path(
        elapsed_s, intensity, canvas, step, offset_y=HIGHLIGHT_OFFSET_Y, phase=HIGHLIGHT_PHASE
    )
    return body, highlight


def packet_half_width(intensity: float) -> float:
    return PACKET_BASE_HALF_WIDTH + intensity * PACKET_HALF_WIDTH_PER_INTENSITY


def packet_polygon(
    x: float,
    height: float,
    intensity: float,
    sea_level: float,
    n: int = 24,
) -> FloatArray:
    """Wave packet outline: a quadratic hump centred on x.

    The curve runs from (x - w, sea) to (x + w, sea) with its control point
    at (x, sea - 2 * height), so the visible crest peaks at `height`.
    """
    w = packet_half_width(intensity)
    s = np.linspace(0.0, 1.0, n)[:, np.newaxis]
    p0 = np.array([x - w, sea_level])
    p1 = np.array([x, sea_level - height * PACKET_CREST_SCALE])
    p2 = np.array([x + w, sea_level])
    return (1 - s) ** 2 * p0 + 2 * (1 - s) * s * p1 + s**2 * p2


@dataclass
class WavePacket:
    """One animated wave instance travelling from deep water to the shore."""

    packet_id: int
    generation: int
    slope: int
    t: float = 0.0
    x: float = 0.0
    height: float = 0.0
    half_width: float = 0.0
    polygon: FloatArray = field(default_factory=lambda: np.zeros((0, 2)))

    @property
    def finished(self) -> bool:
        return self.t >= 1.0


@dataclass(frozen=True)
class SeawallOverlay:
    """Seawall drawn at the shoreline.

    A recommended height (m) is drawn to scale in green with a dashed marker
    and label; without one a default grey wall and a parameter caption are
    shown instead.
    """

    x: float
    top_y: float
    pixel_height: float
    width: float
    color: str
    recommended_height: float | None
    caption: str | None

    @property
    def is_recommended(self) -> bool:
        return self.recommended_height is not None

    @property
    def label(self) -> str | None:
        if self.recommended_height is None:
            return None
        return f"{self.recommended_height:g}m"


def seawall_overlay(
    recommended_height: float | None,
    shore_x: float,
    sea_level: float,
    inputs: SimulationInputs | None = None,
) -> SeawallOverlay:
    """Derive the seawall overlay from a recommended height in meters."""
    if recommended_height is not None and recommended_height > 0:
        pixel_height = recommended_height * SEAWALL_PX_PER_METER
        return SeawallOverlay(
            x=shore_x,
            top_y=sea_level - pixel_height,
            pixel_height=pixel_height,
            width=SEAWALL_WIDTH,
            color=SEAWALL_RECOMMENDED_COLOR,
            recommended_height=recommended_height,
            caption=None,
        )

    caption = None
    if inputs is not None:
        caption = f"Slope: {inputs.slope} ({inputs.slope_label}) | Depth: {inputs.depth:g}m"
    return SeawallOverlay(
        x=shore_x,
        top_y=sea_level - SEAWALL_DEFAULT_PX,
        pixel_height=SEAWALL_DEFAULT_PX,
        width=SEAWALL_WIDTH,
        color=SEAWALL_DEFAULT_COLOR,
        recommended_height=None,
        caption=caption,
    )


@dataclass(frozen=True)
class Scene:
    """Static scene content for one generation: model, seabed and seawall."""

    model: ShoalingModel
    canvas: CanvasSettings
    seabed: FloatArray
    seawall: SeawallOverlay

    @property
    def inputs(self) -> SimulationInputs:
        return self.model.inputs

    def packet_at(self, t: float, packet_id: int = 0, generation: int = 0) -> WavePacket:
        """Sample a packet at normalized progress t."""
        t = min(max(t, 0.0), 1.0)
        x, height = self.model.sample(t)
        intensity = self.inputs.intensity
        return WavePacket(
            packet_id=packet_id,
            generation=generation,
            slope=self.inputs.slope,
            t=t,
            x=float(x),
            height=float(height),
            half_width=packet_half_width(intensity),
            polygon=packet_polygon(float(x), float(height), intensity, self.canvas.sea_level),
        )


def build_scene(
    inputs: SimulationInputs,
    recommended_height: float | None = None,
    canvas: CanvasSettings | None = None,
) -> Scene:
    """Build the static scene for a set of inputs."""
    if canvas is None:
        canvas = get_settings().canvas
    model = ShoalingModel.create(inputs, canvas)
    return Scene(
        model=model,
        canvas=canvas,
        seabed=model.profile.seabed_polygon(),
        seawall=seawall_overlay(
            recommended_height, model.profile.shore_x, canvas.sea_level, inputs
        ),
    )
