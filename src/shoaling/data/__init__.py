"""External hazard assessment service."""

from shoaling.data.assessment import (
    AnalysisResult,
    HazardAssessmentClient,
    LocationData,
    MapLocation,
    parse_analysis_text,
)

__all__ = [
    "AnalysisResult",
    "HazardAssessmentClient",
    "LocationData",
    "MapLocation",
    "parse_analysis_text",
]
