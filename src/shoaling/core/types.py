"""Type definitions for the shoaling visualizer."""

from typing import TYPE_CHECKING, TypeAlias

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from shoaling.core.constants import (
    DEFAULT_DEPTH_M,
    DEFAULT_INTENSITY,
    DEFAULT_SLOPE,
    DEFAULT_VISUAL_GAIN,
    MAX_DEPTH_M,
    MAX_INTENSITY,
    MAX_SLOPE,
    MAX_VISUAL_GAIN,
    MIN_DEPTH_M,
    MIN_INTENSITY,
    MIN_SLOPE,
    MIN_VISUAL_GAIN,
)

if TYPE_CHECKING:
    from shoaling.data.assessment import LocationData

# Scalar types
Scalar: TypeAlias = float | np.floating

# Array types
FloatArray: TypeAlias = np.ndarray
ArrayLike: TypeAlias = FloatArray | list[float] | tuple[float, ...]


class SimulationInputs(BaseModel):
    """User-controlled simulation parameters.

    One value of this model drives one generation of the animation loop.
    `visual_gain` only scales the drawn amplitude; it never changes timing.
    """

    model_config = ConfigDict(frozen=True)

    slope: int = Field(default=DEFAULT_SLOPE, ge=MIN_SLOPE, le=MAX_SLOPE)
    intensity: int = Field(default=DEFAULT_INTENSITY, ge=MIN_INTENSITY, le=MAX_INTENSITY)
    depth: float = Field(default=DEFAULT_DEPTH_M, ge=MIN_DEPTH_M, le=MAX_DEPTH_M)  # meters
    visual_gain: float = Field(
        default=DEFAULT_VISUAL_GAIN, ge=MIN_VISUAL_GAIN, le=MAX_VISUAL_GAIN
    )

    @property
    def slope_label(self) -> str:
        return "Gentle" if self.slope < 5 else "Steep"

    @classmethod
    def from_location(
        cls,
        location: "LocationData",
        intensity: int = DEFAULT_INTENSITY,
        visual_gain: float = DEFAULT_VISUAL_GAIN,
    ) -> "SimulationInputs":
        """Build inputs from a picked map location.

        The location's slope score sets the slope and its depth is limited to
        the simulated range.
        """
        slope = int(round(location.slope_score))
        slope = min(max(slope, MIN_SLOPE), MAX_SLOPE)
        depth = min(max(location.depth_meters, MIN_DEPTH_M), MAX_DEPTH_M)
        return cls(slope=slope, intensity=intensity, depth=depth, visual_gain=visual_gain)
