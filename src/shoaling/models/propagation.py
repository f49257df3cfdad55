"""Propagation timing model.

Travel from deep water to the shore is split into two regimes: a fast,
constant deep-water speed that scales with sqrt(depth) like a shallow-water
wave (c = sqrt(g d)), and a slower averaged speed on the slope that stands in
for shoaling deceleration. Normalized progress t in [0, 1] maps onto
virtual time, giving a two-slope piecewise-linear position curve.
"""

import math
from dataclasses import dataclass

import numpy as np

from shoaling.core.constants import BASE_DEEP_SPEED, REFERENCE_DEPTH_M, SLOPE_SPEED
from shoaling.core.types import ArrayLike, FloatArray
from shoaling.models.profile import SeabedProfile


def deep_water_speed(depth: float) -> float:
    """Deep-water speed; equals the base speed at the reference depth."""
    return BASE_DEEP_SPEED * math.sqrt(depth / REFERENCE_DEPTH_M)


@dataclass(frozen=True)
class PropagationSchedule:
    """Time budget for one wave packet crossing the canvas."""

    deep_dist: float
    slope_dist: float
    speed_deep: float
    speed_slope: float
    time_deep: float
    time_slope: float
    shore_x: float

    @property
    def total_time_units(self) -> float:
        return self.time_deep + self.time_slope

    @property
    def knee_progress(self) -> float:
        """Normalized progress at which the packet reaches the shelf knee."""
        if self.total_time_units == 0:
            return 0.0
        return self.time_deep / self.total_time_units

    def position_at(self, t: ArrayLike | float) -> FloatArray | float:
        """Map normalized progress t (clipped to [0, 1]) to canvas x.

        Args:
            t: Progress scalar or array.

        Returns:
            x position(s), never beyond the shoreline.
        """
        t_arr = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
        virtual_time = t_arr * self.total_time_units

        deep_x = virtual_time * self.speed_deep
        slope_x = self.deep_dist + (virtual_time - self.time_deep) * self.speed_slope
        x = np.where(virtual_time < self.time_deep, deep_x, slope_x)
        x = np.minimum(x, self.shore_x)

        if x.ndim == 0:
            return float(x)
        return x


def build_schedule(profile: SeabedProfile, depth: float) -> PropagationSchedule:
    """Build the propagation schedule for a seabed profile.

    Args:
        profile: Seabed geometry (knee and shore positions).
        depth: Offshore depth in meters; drives the deep-water speed.

    Returns:
        PropagationSchedule with per-regime speeds and times.
    """
    deep_dist = max(0.0, profile.shelf_knee_x)
    slope_dist = profile.shore_x - deep_dist

    speed_deep = deep_water_speed(depth)
    speed_slope = SLOPE_SPEED

    return PropagationSchedule(
        deep_dist=deep_dist,
        slope_dist=slope_dist,
        speed_deep=speed_deep,
        speed_slope=speed_slope,
        time_deep=deep_dist / speed_deep,
        time_slope=slope_dist / speed_slope,
        shore_x=profile.shore_x,
    )
