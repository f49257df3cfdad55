"""Tests for the simulation history store."""

import json

import pytest

from shoaling.core.config import HistorySettings
from shoaling.core.types import SimulationInputs
from shoaling.data.assessment import AnalysisResult
from shoaling.simulation.history import SimulationHistory


@pytest.fixture
def settings(tmp_path):
    return HistorySettings(path=tmp_path / "cache" / "history.json", max_records=3)


def result(seawall=12.0, wave=9.5):
    return AnalysisResult(
        markdown="report",
        estimated_wave_height=wave,
        recommended_seawall_height=seawall,
    )


class TestSimulationHistory:
    """Tests for adding, persisting and restoring records."""

    def test_open_missing_file(self, settings):
        history = SimulationHistory.open(settings)

        assert len(history) == 0
        assert not settings.path.exists()

    def test_add_persists(self, settings):
        history = SimulationHistory.open(settings)
        record = history.add(SimulationInputs(slope=2, intensity=7, depth=35), result(), "Sendai Bay")

        assert settings.path.exists()
        assert record.location_name == "Sendai Bay"
        assert record.params.slope == 2
        assert record.result.recommended_height == 12.0
        assert record.result.wave_height == 9.5

        with open(settings.path) as f:
            data = json.load(f)
        assert data[0]["id"] == record.id
        assert data[0]["params"] == {"slope": 2, "intensity": 7, "depth": 35.0}

    def test_reopen_round_trip(self, settings):
        history = SimulationHistory.open(settings)
        first = history.add(SimulationInputs(slope=2), result())
        second = history.add(SimulationInputs(slope=9), result(seawall=4.0))

        reopened = SimulationHistory.open(settings)

        assert [r.id for r in reopened.records] == [second.id, first.id]
        assert reopened.records[0].timestamp == second.timestamp
        assert reopened.records[1].location_name == "Custom area"

    def test_ids_are_unique(self, settings):
        history = SimulationHistory.open(settings)
        ids = {history.add(SimulationInputs(), result()).id for _ in range(3)}

        assert len(ids) == 3

    def test_oldest_dropped_beyond_limit(self, settings):
        history = SimulationHistory.open(settings)
        for slope in range(1, 6):
            history.add(SimulationInputs(slope=slope), result())

        assert len(history) == 3
        assert [r.params.slope for r in history.records] == [5, 4, 3]
        assert len(SimulationHistory.open(settings)) == 3

    def test_restore(self, settings):
        history = SimulationHistory.open(settings)
        record = history.add(SimulationInputs(slope=8, intensity=3, depth=70, visual_gain=2.5), result())

        inputs = history.restore(record.id)

        assert inputs == SimulationInputs(slope=8, intensity=3, depth=70)

    def test_restore_unknown(self, settings):
        with pytest.raises(KeyError):
            SimulationHistory.open(settings).restore("missing")

    def test_clear(self, settings):
        history = SimulationHistory.open(settings)
        history.add(SimulationInputs(), result())
        history.clear()

        assert len(history) == 0
        assert len(SimulationHistory.open(settings)) == 0

    def test_in_memory_history(self):
        history = SimulationHistory()
        history.add(SimulationInputs(), result())

        assert len(history) == 1
