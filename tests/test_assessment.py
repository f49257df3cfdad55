"""Tests for the hazard assessment client and report parsing."""

import json

import httpx
import pytest

from shoaling.core.config import AssessmentSettings
from shoaling.data.assessment import (
    ANALYSIS_ERROR_TEXT,
    NO_ANALYSIS_TEXT,
    HazardAssessmentClient,
    build_analysis_prompt,
    describe_slope,
    parse_analysis_text,
)


def gemini_text(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def make_client(handler, api_key="test-key"):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HazardAssessmentClient(AssessmentSettings(api_key=api_key), client=http)


class TestParseAnalysis:
    """Tests for extracting figures from a report."""

    def test_data_line(self):
        text = "- Wave dynamics: strong shoaling.\nDATA|WaveHeight:12.5|SeawallHeight:15.0"
        result = parse_analysis_text(text)

        assert result.estimated_wave_height == 12.5
        assert result.recommended_seawall_height == 15.0
        assert result.markdown == "- Wave dynamics: strong shoaling."
        assert result.has_recommendation

    def test_fallback_phrases(self):
        text = "Estimated wave height about 8.5 m. Recommended seawall: 11 m."
        result = parse_analysis_text(text)

        assert result.estimated_wave_height == 8.5
        assert result.recommended_seawall_height == 11.0
        assert result.markdown == text

    def test_no_figures(self):
        result = parse_analysis_text("The coast is exposed.")

        assert result.estimated_wave_height == 0.0
        assert result.recommended_seawall_height == 0.0
        assert not result.has_recommendation

    def test_empty(self):
        result = parse_analysis_text("")

        assert result.markdown == NO_ANALYSIS_TEXT
        assert not result.has_recommendation


class TestPrompts:
    """Tests for prompt construction."""

    @pytest.mark.parametrize("slope,label", [(1, "gentle"), (3, "gentle"), (4, "moderate"), (7, "steep")])
    def test_describe_slope(self, slope, label):
        assert describe_slope(slope) == f"{label} slope"

    def test_analysis_prompt(self):
        prompt = build_analysis_prompt(2, 6, 35.0, "Sendai Bay")

        assert "Location: Sendai Bay" in prompt
        assert "Seabed slope: 2/10 (gentle slope)" in prompt
        assert "Offshore seabed depth: 35 m" in prompt
        assert "Tsunami intensity: 6/10" in prompt
        assert "DATA|WaveHeight:" in prompt

    def test_generic_location(self):
        assert "generic coastal model" in build_analysis_prompt(5, 5, 40)


class TestAnalyzeSimulation:
    """Tests for the simulation report request."""

    async def test_success(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=gemini_text("Report\nDATA|WaveHeight:9|SeawallHeight:12"))

        async with make_client(handler) as client:
            result = await client.analyze_simulation(2, 5, 40)

        assert seen["path"].endswith("/models/gemini-2.5-flash:generateContent")
        assert seen["key"] == "test-key"
        assert "Seabed slope: 2/10" in seen["body"]["contents"][0]["parts"][0]["text"]
        assert result.recommended_seawall_height == 12.0
        assert result.estimated_wave_height == 9.0
        assert result.markdown == "Report"

    async def test_http_error_falls_back(self):
        def handler(request):
            return httpx.Response(500, json={"error": "boom"})

        async with make_client(handler) as client:
            result = await client.analyze_simulation(5, 5, 40)

        assert result.markdown == ANALYSIS_ERROR_TEXT
        assert result.recommended_seawall_height == 0.0

    async def test_missing_key_skips_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        async with make_client(handler, api_key="") as client:
            result = await client.analyze_simulation(5, 5, 40)

        assert not client.configured
        assert result.markdown == ANALYSIS_ERROR_TEXT
        assert not result.has_recommendation


class TestReferenceLocations:
    """Tests for map-grounded reference locations."""

    async def test_grounding_chunks(self):
        payload = {
            "candidates": [
                {
                    "content": {"parts": [{"text": "Here are three."}]},
                    "groundingMetadata": {
                        "groundingChunks": [
                            {"maps": {"title": "Sendai", "uri": "https://maps.example/sendai"}},
                            {"web": {"title": "Banda Aceh", "uri": "https://example.org/aceh"}},
                            {"maps": {"title": "No link"}},
                        ]
                    },
                }
            ]
        }

        def handler(request):
            body = json.loads(request.content)
            assert body["tools"] == [{"googleMaps": {}}]
            return httpx.Response(200, json=payload)

        async with make_client(handler) as client:
            locations = await client.find_reference_locations(2)

        assert [loc.title for loc in locations] == ["Sendai", "Banda Aceh"]
        assert locations[0].uri == "https://maps.example/sendai"

    async def test_error_returns_empty(self):
        def handler(request):
            return httpx.Response(503)

        async with make_client(handler) as client:
            assert await client.find_reference_locations(8) == []

    async def test_unconfigured_returns_empty(self):
        def handler(request):
            raise AssertionError("no request expected")

        async with make_client(handler, api_key="") as client:
            assert await client.find_reference_locations(8) == []


class TestAnalyzeCoordinates:
    """Tests for coordinate lookups."""

    async def test_water_location(self):
        data = {"locationName": "Sagami Bay", "isLand": False, "depthMeters": 60, "slopeScore": 7}

        def handler(request):
            body = json.loads(request.content)
            assert body["generationConfig"]["responseMimeType"] == "application/json"
            return httpx.Response(200, json=gemini_text(json.dumps(data)))

        async with make_client(handler) as client:
            location = await client.analyze_coordinates(35.2, 139.4)

        assert location.name == "Sagami Bay"
        assert location.lat == 35.2
        assert location.depth_meters == 60
        assert location.slope_score == 7
        assert not location.is_land

    async def test_defaults_for_missing_fields(self):
        def handler(request):
            return httpx.Response(200, json=gemini_text(json.dumps({"isLand": True})))

        async with make_client(handler) as client:
            location = await client.analyze_coordinates(1.23456, 2.5)

        assert location.name == "1.235, 2.500"
        assert location.is_land
        assert location.depth_meters == 0.0
        assert location.slope_score == 5.0

    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, json=gemini_text("not json"))

        async with make_client(handler) as client:
            assert await client.analyze_coordinates(0, 0) is None

    async def test_empty_response(self):
        def handler(request):
            return httpx.Response(200, json={"candidates": []})

        async with make_client(handler) as client:
            assert await client.analyze_coordinates(0, 0) is None
