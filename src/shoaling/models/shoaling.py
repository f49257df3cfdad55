"""Shoaling height model.

Wave height grows as the wave runs into shallower water following Green's
law, H ~ d^(-1/4). Depth is expressed as a depth ratio (1 at the shelf knee,
falling toward the shore along the same curvature as the drawn seabed) with a
floor of 0.1. Steep slopes (above 6) reflect rather than stack energy, so
their shoaling factor is cut by 15% per slope step: gentle-slope waves must
always come out taller than steep-slope waves of equal intensity and depth.
"""

from dataclasses import dataclass

import numpy as np

from shoaling.core.config import CanvasSettings
from shoaling.core.constants import (
    AMPLITUDE_PER_INTENSITY,
    GREEN_LAW_EXPONENT,
    MIN_DEPTH_RATIO,
    PROGRESS_POWER_PER_TENSION,
    STEEP_REDUCTION_PER_STEP,
    STEEP_SLOPE_THRESHOLD,
)
from shoaling.core.types import ArrayLike, FloatArray, SimulationInputs
from shoaling.models.profile import SeabedProfile, build_profile
from shoaling.models.propagation import PropagationSchedule, build_schedule


def _as_result(arr: np.ndarray) -> FloatArray | float:
    if arr.ndim == 0:
        return float(arr)
    return arr


def wave_amplitude(intensity: float, visual_gain: float = 1.0) -> float:
    """Base (deep-water) amplitude in canvas units."""
    return intensity * AMPLITUDE_PER_INTENSITY * visual_gain


def steep_factor(slope: float) -> float:
    """Fractional reduction of shoaling on steep slopes (0 for slope <= 6)."""
    if slope > STEEP_SLOPE_THRESHOLD:
        return (slope - STEEP_SLOPE_THRESHOLD) * STEEP_REDUCTION_PER_STEP
    return 0.0


def depth_ratio(x: ArrayLike | float, profile: SeabedProfile) -> FloatArray | float:
    """Normalized remaining depth at canvas position(s) x.

    1.0 up to the shelf knee, then 1 - progress^(1 + 1.5 * tension) on the
    slope, never below 0.1.
    """
    x_arr = np.asarray(x, dtype=np.float64)
    span = profile.shore_x - profile.shelf_knee_x
    progress = np.clip((x_arr - profile.shelf_knee_x) / span, 0.0, 1.0)
    power = 1 + profile.tension * PROGRESS_POWER_PER_TENSION
    ratio = np.maximum(MIN_DEPTH_RATIO, 1 - progress**power)
    ratio = np.where(x_arr <= profile.shelf_knee_x, 1.0, ratio)
    return _as_result(ratio)


def shoaling_factor(
    x: ArrayLike | float,
    profile: SeabedProfile,
    corrected: bool = True,
) -> FloatArray | float:
    """Green's-law amplification at x, with the steep-slope correction.

    Args:
        x: Canvas position(s).
        profile: Seabed geometry.
        corrected: Apply the steep-slope reduction. Disable to inspect the
            raw Green's-law factor.
    """
    ratio = np.asarray(depth_ratio(x, profile))
    factor = (1 / ratio) ** GREEN_LAW_EXPONENT
    if corrected:
        factor = factor * (1 - steep_factor(profile.slope))
    return _as_result(factor)


def height_at(
    x: ArrayLike | float,
    profile: SeabedProfile,
    wave_amp: float,
) -> FloatArray | float:
    """Wave crest height at x in canvas units."""
    factor = np.asarray(shoaling_factor(x, profile))
    return _as_result(wave_amp * factor)


@dataclass(frozen=True)
class ShoalingModel:
    """Wave model for one set of simulation inputs.

    Profile and schedule are computed once and shared by the renderer (which
    draws the seabed) and the sampler (which moves the packet), so the drawn
    curve and the simulated wave path never drift apart.
    """

    inputs: SimulationInputs
    profile: SeabedProfile
    schedule: PropagationSchedule

    @classmethod
    def create(
        cls,
        inputs: SimulationInputs,
        canvas: CanvasSettings | None = None,
    ) -> "ShoalingModel":
        profile = build_profile(inputs.slope, inputs.depth, canvas)
        schedule = build_schedule(profile, inputs.depth)
        return cls(inputs=inputs, profile=profile, schedule=schedule)

    @property
    def wave_amp(self) -> float:
        return wave_amplitude(self.inputs.intensity, self.inputs.visual_gain)

    def sample(self, t: ArrayLike | float) -> tuple[FloatArray | float, FloatArray | float]:
        """Packet position and crest height at normalized progress t.

        Returns:
            Tuple of (x, height).
        """
        x = self.schedule.position_at(t)
        return x, height_at(x, self.profile, self.wave_amp)

    def sample_series(self, n: int = 101) -> dict[str, FloatArray]:
        """Sample the full deep-to-shore run at n evenly spaced progress values."""
        t = np.linspace(0.0, 1.0, n)
        x = np.asarray(self.schedule.position_at(t))
        return {
            "t": t,
            "x": x,
            "seabed_y": np.asarray(self.profile.depth_at(x)),
            "depth_ratio": np.asarray(depth_ratio(x, self.profile)),
            "shoaling_factor": np.asarray(shoaling_factor(x, self.profile)),
            "height": np.asarray(height_at(x, self.profile, self.wave_amp)),
        }

    @property
    def peak_height(self) -> float:
        """Crest height when the packet reaches the shore."""
        return float(height_at(self.profile.shore_x, self.profile, self.wave_amp))
