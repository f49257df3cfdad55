"""Seabed profile geometry.

The seabed is flat at the deep-ocean depth out to the shelf knee, then rises
to the shoreline along a single quadratic Bezier curve. The control point
sits at the deep depth, `run * tension` past the knee, so gentle slopes rise
gradually while steep slopes stay deep and climb abruptly near the shore.
"""

from dataclasses import dataclass

import numpy as np

from shoaling.core.config import CanvasSettings, get_settings
from shoaling.core.constants import (
    LAND_RISE,
    LAND_RUN,
    MAX_DEPTH_M,
    MAX_SLOPE,
    MAX_TENSION,
    MIN_DEPTH_M,
    MIN_SLOPE,
    MIN_TENSION,
)
from shoaling.core.types import ArrayLike, FloatArray


def slope_fraction(slope: float) -> float:
    """Map slope 1..10 onto 0..1."""
    return (slope - MIN_SLOPE) / (MAX_SLOPE - MIN_SLOPE)


def depth_to_pixels(depth: float, canvas: CanvasSettings) -> float:
    """Map water depth (m) linearly onto the visual depth range, clamped."""
    fraction = (depth - MIN_DEPTH_M) / (MAX_DEPTH_M - MIN_DEPTH_M)
    fraction = min(max(fraction, 0.0), 1.0)
    return canvas.min_depth_px + fraction * (canvas.max_depth_px - canvas.min_depth_px)


@dataclass(frozen=True)
class SeabedProfile:
    """Derived seabed geometry for one slope/depth pair.

    Coordinates are canvas units with y growing downward, so the deep floor
    has a larger y than the shoreline.
    """

    slope: float
    depth: float  # meters

    width: float
    height: float
    sea_level: float

    run: float  # horizontal extent of the slope region
    shore_x: float
    shelf_knee_x: float
    tension: float

    deep_depth_y: float
    shore_depth_y: float

    @property
    def control_x(self) -> float:
        return self.shelf_knee_x + self.run * self.tension

    @property
    def control_y(self) -> float:
        return self.deep_depth_y

    def curve_points(self, s: ArrayLike) -> tuple[FloatArray, FloatArray]:
        """Evaluate the Bezier rise at curve parameter(s) s in [0, 1]."""
        s = np.asarray(s, dtype=np.float64)
        a = (1 - s) ** 2
        b = 2 * (1 - s) * s
        c = s**2
        x = a * self.shelf_knee_x + b * self.control_x + c * self.shore_x
        y = a * self.deep_depth_y + b * self.control_y + c * self.shore_depth_y
        return x, y

    def curve_parameter(self, x: ArrayLike) -> FloatArray:
        """Invert x(s) of the Bezier rise.

        x(s) = x0 + 2 s (cx - x0) + s^2 (x0 - 2 cx + x2) is strictly
        increasing on [0, 1] because the control point lies between the
        endpoints, so the root in [0, 1] is unique.
        """
        x = np.clip(np.asarray(x, dtype=np.float64), self.shelf_knee_x, self.shore_x)
        x0, cx, x2 = self.shelf_knee_x, self.control_x, self.shore_x
        a = x0 - 2 * cx + x2
        b = 2 * (cx - x0)
        dx = x - x0

        if abs(a) < 1e-12:
            s = dx / b
        else:
            disc = np.maximum(b * b + 4 * a * dx, 0.0)
            # Numerically stable form of (-b + sqrt(disc)) / (2a)
            s = 2 * dx / (b + np.sqrt(disc))
        return np.clip(s, 0.0, 1.0)

    def depth_at(self, x: ArrayLike) -> FloatArray | float:
        """Seabed y at canvas position(s) x.

        Deep depth up to the knee, the Bezier rise up to the shore, and the
        shore depth beyond.
        """
        x_arr = np.asarray(x, dtype=np.float64)
        _, curve_y = self.curve_points(self.curve_parameter(x_arr))
        y = np.where(x_arr <= self.shelf_knee_x, self.deep_depth_y, curve_y)
        y = np.where(x_arr >= self.shore_x, self.shore_depth_y, y)
        if y.ndim == 0:
            return float(y)
        return y

    def outline(self, n: int = 100) -> tuple[FloatArray, FloatArray]:
        """Polyline from x=0 along the flat floor and the rise to the shore."""
        s = np.linspace(0.0, 1.0, n)
        curve_x, curve_y = self.curve_points(s)
        xs = np.concatenate([[0.0], curve_x])
        ys = np.concatenate([[self.deep_depth_y], curve_y])
        return xs, ys

    def seabed_polygon(self, n: int = 100) -> FloatArray:
        """Closed seabed polygon including the land shelf behind the shore.

        Returns:
            (N, 2) array of vertices.
        """
        xs, ys = self.outline(n)
        land_y = self.shore_depth_y - LAND_RISE
        tail = np.array(
            [
                [self.shore_x + LAND_RUN, land_y],
                [self.width, land_y],
                [self.width, self.height],
                [0.0, self.height],
            ]
        )
        return np.vstack([np.column_stack([xs, ys]), tail])


def build_profile(
    slope: float,
    depth: float,
    canvas: CanvasSettings | None = None,
) -> SeabedProfile:
    """Build the seabed profile for a slope (1..10) and depth (m).

    Args:
        slope: Seabed slope score, 1 (gentle) to 10 (steep).
        depth: Offshore depth in meters. Values outside 10..80 are clamped
            by the depth-to-pixel mapping.
        canvas: Drawing surface geometry. Defaults to the configured canvas.

    Returns:
        SeabedProfile shared by the renderer and the wave sampler.
    """
    if canvas is None:
        canvas = get_settings().canvas

    fraction = slope_fraction(slope)
    run = canvas.max_run - fraction * (canvas.max_run - canvas.min_run)
    shore_x = canvas.shore_x
    tension = MIN_TENSION + fraction * (MAX_TENSION - MIN_TENSION)

    return SeabedProfile(
        slope=slope,
        depth=depth,
        width=canvas.width,
        height=canvas.height,
        sea_level=canvas.sea_level,
        run=run,
        shore_x=shore_x,
        shelf_knee_x=shore_x - run,
        tension=tension,
        deep_depth_y=canvas.sea_level + depth_to_pixels(depth, canvas),
        shore_depth_y=canvas.sea_level,
    )
