"""Wave shoaling models."""

from shoaling.models.profile import SeabedProfile, build_profile
from shoaling.models.propagation import PropagationSchedule, build_schedule
from shoaling.models.shoaling import (
    ShoalingModel,
    depth_ratio,
    height_at,
    shoaling_factor,
    wave_amplitude,
)

__all__ = [
    "PropagationSchedule",
    "SeabedProfile",
    "ShoalingModel",
    "build_profile",
    "build_schedule",
    "depth_ratio",
    "height_at",
    "shoaling_factor",
    "wave_amplitude",
]
