"""Core data structures and utilities."""

from shoaling.core.config import Settings
from shoaling.core.types import (
    ArrayLike,
    FloatArray,
    Scalar,
    SimulationInputs,
)

__all__ = [
    "ArrayLike",
    "FloatArray",
    "Scalar",
    "Settings",
    "SimulationInputs",
]
