"""Matplotlib drawing of the shoaling scene."""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Polygon, Rectangle

from shoaling.core.config import CanvasSettings, get_settings
from shoaling.core.constants import (
    HIGHLIGHT_COLOR,
    PACKET_EDGE,
    PACKET_FILL,
    SEABED_EDGE,
    SEABED_FILL,
    SEAWALL_RECOMMENDED_COLOR,
    SEAWALL_RECOMMENDED_EDGE,
    SKY_COLOR,
    WATER_COLOR,
)
from shoaling.core.types import FloatArray, SimulationInputs
from shoaling.models.shoaling import ShoalingModel
from shoaling.simulation.scene import Scene, WavePacket, build_scene, surface_layers

# Draw order, back to front
Z_WATER = 1
Z_HIGHLIGHT = 2
Z_SEABED = 3
Z_PACKET = 4
Z_SEAWALL = 5


def create_figure(
    canvas: CanvasSettings,
    dpi: int = 100,
    scale: float = 1.0,
) -> tuple[Figure, Axes]:
    """Create a borderless figure whose axes map 1:1 onto canvas units.

    The y axis is inverted so canvas y grows downward.
    """
    fig = plt.figure(figsize=(canvas.width * scale / dpi, canvas.height * scale / dpi), dpi=dpi)
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(0, canvas.width)
    ax.set_ylim(canvas.height, 0)
    ax.set_facecolor(SKY_COLOR)
    ax.set_axis_off()
    fig.patch.set_facecolor(SKY_COLOR)
    return fig, ax


class MatplotlibSurface:
    """Animation surface backed by persistent matplotlib artists.

    Artists are created once and updated in place each frame; `clear()`
    removes everything the surface has drawn.
    """

    def __init__(self, ax: Axes):
        self.ax = ax
        self._static: list = []
        self._body: Polygon | None = None
        self._highlight: Polygon | None = None
        self._packets: dict[tuple[int, int], Polygon] = {}

    @property
    def packet_keys(self) -> list[tuple[int, int]]:
        return list(self._packets)

    def clear(self) -> None:
        for artist in self._static + list(self._packets.values()):
            artist.remove()
        for artist in (self._body, self._highlight):
            if artist is not None:
                artist.remove()
        self._static = []
        self._packets = {}
        self._body = None
        self._highlight = None

    def draw_static(self, scene: Scene) -> None:
        seabed = Polygon(
            scene.seabed,
            closed=True,
            facecolor=SEABED_FILL,
            edgecolor=SEABED_EDGE,
            linewidth=2,
            zorder=Z_SEABED,
        )
        self.ax.add_patch(seabed)
        self._static.append(seabed)

        wall = scene.seawall
        rect = Rectangle(
            (wall.x, wall.top_y),
            wall.width,
            wall.pixel_height,
            facecolor=wall.color,
            edgecolor=SEAWALL_RECOMMENDED_EDGE if wall.is_recommended else "none",
            linewidth=1,
            zorder=Z_SEAWALL,
        )
        self.ax.add_patch(rect)
        self._static.append(rect)

        if wall.is_recommended:
            (marker,) = self.ax.plot(
                [wall.x - 40, wall.x + 20],
                [wall.top_y, wall.top_y],
                color=SEAWALL_RECOMMENDED_COLOR,
                linewidth=1,
                linestyle=(0, (4, 2)),
                zorder=Z_SEAWALL,
            )
            label = self.ax.text(
                wall.x - 45,
                wall.top_y + 4,
                wall.label,
                color=SEAWALL_RECOMMENDED_COLOR,
                fontsize=9,
                fontweight="bold",
                ha="right",
                va="center",
                zorder=Z_SEAWALL,
            )
            self._static.extend([marker, label])
        elif wall.caption:
            caption = self.ax.text(
                15,
                30,
                wall.caption,
                color=(1.0, 1.0, 1.0, 0.5),
                fontsize=9,
                zorder=Z_SEAWALL,
            )
            self._static.append(caption)

    def draw_surface(self, body: FloatArray, highlight: FloatArray) -> None:
        if self._body is None:
            self._body = Polygon(body, closed=True, facecolor=WATER_COLOR, zorder=Z_WATER)
            self._highlight = Polygon(
                highlight, closed=True, facecolor=HIGHLIGHT_COLOR, zorder=Z_HIGHLIGHT
            )
            self.ax.add_patch(self._body)
            self.ax.add_patch(self._highlight)
        else:
            self._body.set_xy(body)
            self._highlight.set_xy(highlight)

    def draw_packet(self, packet: WavePacket) -> None:
        key = (packet.generation, packet.packet_id)
        artist = self._packets.get(key)
        if artist is None:
            artist = Polygon(
                packet.polygon,
                closed=True,
                facecolor=PACKET_FILL,
                edgecolor=PACKET_EDGE,
                linewidth=2,
                zorder=Z_PACKET,
            )
            self.ax.add_patch(artist)
            self._packets[key] = artist
        else:
            artist.set_xy(packet.polygon)

    def remove_packet(self, generation: int, packet_id: int) -> None:
        artist = self._packets.pop((generation, packet_id), None)
        if artist is not None:
            artist.remove()


def render_frame(
    inputs: SimulationInputs,
    elapsed_s: float = 0.0,
    progress: float | None = None,
    recommended_height: float | None = None,
    canvas: CanvasSettings | None = None,
    save_path: Path | None = None,
    dpi: int = 100,
    scale: float = 2.0,
) -> Figure:
    """Render a single still frame of the animation.

    Args:
        inputs: Simulation inputs.
        elapsed_s: Time since the animation started; sets the sea-surface phase.
        progress: Packet progress in [0, 1]. Defaults to the position of the
            packet loop at `elapsed_s`.
        recommended_height: Seawall height in meters, if assessed.
        canvas: Drawing surface geometry.
        save_path: Optional path to save figure.
        dpi: Figure resolution.
        scale: Output pixels per canvas unit.

    Returns:
        Matplotlib figure.
    """
    settings = get_settings()
    canvas = canvas or settings.canvas
    if progress is None:
        duration = settings.animation.packet_duration_s
        progress = (elapsed_s % duration) / duration

    scene = build_scene(inputs, recommended_height, canvas)
    fig, ax = create_figure(canvas, dpi=dpi, scale=scale)
    surface = MatplotlibSurface(ax)
    surface.draw_static(scene)
    surface.draw_surface(*surface_layers(elapsed_s, inputs.intensity, canvas, settings.animation.surface_step))
    surface.draw_packet(scene.packet_at(progress))

    if save_path:
        fig.savefig(save_path, dpi=dpi, facecolor=fig.get_facecolor())

    return fig


def plot_wave_run(
    model: ShoalingModel,
    n: int = 201,
    save_path: Path | None = None,
) -> Figure:
    """Plot the packet's deep-to-shore run: seabed, position and crest height.

    Args:
        model: Wave model for one set of inputs.
        n: Number of progress samples.
        save_path: Optional path to save figure.

    Returns:
        Matplotlib figure.
    """
    series = model.sample_series(n)
    profile = model.profile
    inputs = model.inputs

    fig, (ax_bed, ax_pos, ax_height) = plt.subplots(3, 1, figsize=(10, 10))

    # Seabed profile (depth below sea level, canvas units)
    xs, ys = profile.outline(200)
    ax_bed.fill_between(xs, -(ys - profile.sea_level), -(profile.height - profile.sea_level), color="tan", alpha=0.6)
    ax_bed.plot(xs, -(ys - profile.sea_level), "k-", linewidth=1.5)
    ax_bed.axvline(profile.shelf_knee_x, color="r", linestyle="--", alpha=0.7, label="Shelf knee")
    ax_bed.axhline(0, color="b", linewidth=0.5)
    ax_bed.set_xlim(0, profile.width)
    ax_bed.set_ylabel("Seabed (canvas units)")
    ax_bed.set_title(
        f"Slope {inputs.slope} | Intensity {inputs.intensity} | Depth {inputs.depth:g} m"
    )
    ax_bed.legend()
    ax_bed.grid(True, alpha=0.3)

    # Position vs progress
    ax_pos.plot(series["t"], series["x"], "b-", linewidth=2)
    ax_pos.axvline(model.schedule.knee_progress, color="r", linestyle="--", alpha=0.7)
    ax_pos.set_xlabel("Packet progress t")
    ax_pos.set_ylabel("Position x")
    ax_pos.grid(True, alpha=0.3)

    # Crest height vs position
    ax_height.plot(series["x"], series["height"], "c-", linewidth=2, label="Crest height")
    ax_height.axhline(model.wave_amp, color="gray", linestyle=":", label="Deep-water amplitude")
    ax_height.axvline(profile.shelf_knee_x, color="r", linestyle="--", alpha=0.7)
    ax_height.set_xlim(0, profile.width)
    ax_height.set_ylim(0, max(np.max(series["height"]), model.wave_amp) * 1.2)
    ax_height.set_xlabel("Position x")
    ax_height.set_ylabel("Height (canvas units)")
    ax_height.legend()
    ax_height.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig
