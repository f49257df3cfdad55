"""Hazard assessment from the Gemini generative-language API.

The wave model itself never depends on these calls: the assessment only
provides the recommended seawall height drawn as an overlay, reference
locations, and location lookups that seed the slope and depth inputs.
"""

import json
import logging
import re
import sys
from typing import Self

import httpx
from pydantic import BaseModel, Field

from shoaling.core.config import AssessmentSettings, get_settings

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

# Machine-readable line the model is asked to append to its report
DATA_LINE = re.compile(r"DATA\|WaveHeight:([\d.]+)\|SeawallHeight:([\d.]+)")
SEAWALL_FALLBACK = re.compile(r"recommended.*?(\d+(?:\.\d+)?)\s*(?:meters|m)\b", re.IGNORECASE)
WAVE_FALLBACK = re.compile(r"wave height.*?(\d+(?:\.\d+)?)\s*(?:meters|m)\b", re.IGNORECASE)

NO_ANALYSIS_TEXT = "Unable to generate an analysis."
ANALYSIS_ERROR_TEXT = "The analysis failed. Check the API key or try again later."


class AnalysisResult(BaseModel):
    """Hazard assessment for one simulation."""

    markdown: str
    estimated_wave_height: float = 0.0  # meters
    recommended_seawall_height: float = 0.0  # meters

    @property
    def has_recommendation(self) -> bool:
        return self.recommended_seawall_height > 0


class MapLocation(BaseModel):
    """Real-world reference location for a slope type."""

    title: str
    uri: str


class LocationData(BaseModel):
    """Result of analysing a picked map coordinate."""

    name: str
    lat: float
    lng: float
    depth_meters: float = 0.0
    slope_score: float = Field(default=5.0, description="Score 1-10")
    is_land: bool = False


def describe_slope(slope: int) -> str:
    if slope < 4:
        return "gentle slope"
    if slope < 7:
        return "moderate slope"
    return "steep slope"


def parse_analysis_text(text: str) -> AnalysisResult:
    """Extract wave and seawall heights from a model report.

    The trailing `DATA|WaveHeight:<m>|SeawallHeight:<m>` line is preferred
    and removed from the displayed markdown. Without it, the first
    "recommended ... N m" and "wave height ... N m" phrases are used, and
    heights default to 0 when neither is found.
    """
    if not text:
        return AnalysisResult(markdown=NO_ANALYSIS_TEXT)

    match = DATA_LINE.search(text)
    if match:
        wave_height = float(match.group(1))
        seawall_height = float(match.group(2))
    else:
        seawall_match = SEAWALL_FALLBACK.search(text)
        wave_match = WAVE_FALLBACK.search(text)
        seawall_height = float(seawall_match.group(1)) if seawall_match else 0.0
        wave_height = float(wave_match.group(1)) if wave_match else 0.0

    markdown = DATA_LINE.sub("", text, count=1).strip()
    return AnalysisResult(
        markdown=markdown,
        estimated_wave_height=wave_height,
        recommended_seawall_height=seawall_height,
    )


def build_analysis_prompt(
    slope: int,
    intensity: int,
    depth: float,
    location_name: str | None = None,
) -> str:
    """Prompt for a short coastal-hazard report on one scenario."""
    location = f"Location: {location_name}" if location_name else "Location: generic coastal model"
    return f"""
You are a coastal disaster-prevention expert. Write a very concise key report
(under 100 words) for the following tsunami scenario:
- {location}
- Seabed slope: {slope}/10 ({describe_slope(slope)})
- Offshore seabed depth: {depth:g} m
- Tsunami intensity: {intensity}/10

Physics to respect:
1. Slope is the dominant factor (about 70% weight). Gentle slopes (1-4) shoal
   strongly and give very high waves; steep slopes (7-10) reflect energy and
   give lower waves.
2. Intensity is secondary (about 30% weight). It only moves the wave height
   by about 30% within the range set by the terrain.
3. A gentle-slope wave must always be higher than a steep-slope wave.

Answer as bullet points:
1. Wave dynamics: how the wave height evolves.
2. Threat assessment: hazard level.
3. Figures: estimated maximum wave height / run-up X m and recommended seawall
   height Y m (including a safety margin).

On the very last line, output the two figures in exactly this format:
DATA|WaveHeight:12.5|SeawallHeight:15.0
"""


def build_locations_prompt(slope: int) -> str:
    slope_type = "shallow continental shelves" if slope < 5 else "steep coastal slopes or rias coastlines"
    return f"List 3 real-world coastal locations known for tsunami risks that have {slope_type}."


def build_coordinates_prompt(lat: float, lng: float) -> str:
    return f"""
Analyze the geographical coordinates: {lat}, {lng}.
1. Identify the specific location name (Ocean, Bay, Strait, or nearest coastal city).
2. Determine if this exact coordinate is on LAND or WATER.
3. If it is water, estimate the average seabed depth in meters at this location.
4. Estimate the continental shelf slope score from 1 (very shallow/gentle, like a
   long beach shelf) to 10 (very steep, like a trench or cliff drop-off).

Return pure JSON.
"""


COORDINATES_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "locationName": {"type": "STRING"},
        "isLand": {"type": "BOOLEAN"},
        "depthMeters": {"type": "NUMBER"},
        "slopeScore": {"type": "NUMBER", "description": "Score 1-10"},
    },
}


def _response_text(payload: dict) -> str:
    """Concatenate the text parts of the first candidate."""
    candidates = payload.get("candidates") or []
    if not candidates:
        return ""
    parts = candidates[0].get("content", {}).get("parts", [])
    return "".join(part.get("text", "") for part in parts)


class HazardAssessmentClient:
    """Async client for the generative-language `generateContent` endpoint."""

    def __init__(
        self,
        settings: AssessmentSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings().assessment
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.settings.timeout_s)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def configured(self) -> bool:
        return bool(self.settings.api_key)

    async def _generate(self, body: dict) -> dict:
        """POST a generateContent request and return the decoded response."""
        url = f"{self.settings.base_url}/models/{self.settings.text_model}:generateContent"
        response = await self._client.post(
            url,
            json=body,
            headers={"x-goog-api-key": self.settings.api_key},
        )
        response.raise_for_status()
        return response.json()

    async def analyze_simulation(
        self,
        slope: int,
        intensity: int,
        depth: float,
        location_name: str | None = None,
    ) -> AnalysisResult:
        """Request a hazard report and recommended seawall height.

        Returns:
            Parsed AnalysisResult; an error message with zero heights if the
            request fails.
        """
        prompt = build_analysis_prompt(slope, intensity, depth, location_name)
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"thinkingConfig": {"thinkingBudget": 0}},
        }
        if not self.configured:
            logger.warning("GEMINI_API_KEY is not set; skipping analysis")
            return AnalysisResult(markdown=ANALYSIS_ERROR_TEXT)

        try:
            payload = await self._generate(body)
        except httpx.HTTPError as e:
            logger.warning(f"Analysis request failed: {e}")
            return AnalysisResult(markdown=ANALYSIS_ERROR_TEXT)

        return parse_analysis_text(_response_text(payload))

    async def find_reference_locations(self, slope: int) -> list[MapLocation]:
        """Real-world coastlines with a similar slope, from map grounding."""
        body = {
            "contents": [{"parts": [{"text": build_locations_prompt(slope)}]}],
            "tools": [{"googleMaps": {}}],
        }
        if not self.configured:
            return []

        try:
            payload = await self._generate(body)
        except httpx.HTTPError as e:
            logger.warning(f"Location request failed: {e}")
            return []

        candidates = payload.get("candidates") or []
        if not candidates:
            return []
        chunks = candidates[0].get("groundingMetadata", {}).get("groundingChunks", [])

        locations = []
        for chunk in chunks:
            source = chunk.get("web") or chunk.get("maps") or {}
            if source.get("uri") and source.get("title"):
                locations.append(MapLocation(title=source["title"], uri=source["uri"]))
        return locations

    async def analyze_coordinates(self, lat: float, lng: float) -> LocationData | None:
        """Name, depth and slope score for a picked coordinate.

        Returns:
            LocationData, or None if the request or its JSON fails.
        """
        body = {
            "contents": [{"parts": [{"text": build_coordinates_prompt(lat, lng)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": COORDINATES_SCHEMA,
            },
        }
        if not self.configured:
            logger.warning("GEMINI_API_KEY is not set; skipping coordinate analysis")
            return None

        try:
            payload = await self._generate(body)
            text = _response_text(payload)
            if not text:
                return None
            data = json.loads(text)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Coordinate analysis failed: {e}")
            return None

        return LocationData(
            name=data.get("locationName") or f"{lat:.3f}, {lng:.3f}",
            lat=lat,
            lng=lng,
            depth_meters=data.get("depthMeters") or 0.0,
            slope_score=data.get("slopeScore") or 5.0,
            is_land=bool(data.get("isLand")),
        )
