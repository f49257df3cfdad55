"""Simulation history: assessed scenarios, newest first, persisted as JSON."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from shoaling.core.config import HistorySettings, get_settings
from shoaling.core.types import SimulationInputs
from shoaling.data.assessment import AnalysisResult

DEFAULT_LOCATION_NAME = "Custom area"


class RecordParams(BaseModel):
    slope: int
    intensity: int
    depth: float


class RecordResult(BaseModel):
    recommended_height: float
    wave_height: float


class SimulationRecord(BaseModel):
    """One assessed scenario."""

    id: str
    timestamp: datetime = Field(default_factory=datetime.now)
    location_name: str = DEFAULT_LOCATION_NAME
    params: RecordParams
    result: RecordResult

    def to_inputs(self) -> SimulationInputs:
        """Inputs that reproduce this scenario (visual gain at its default)."""
        return SimulationInputs(
            slope=self.params.slope,
            intensity=self.params.intensity,
            depth=self.params.depth,
        )


@dataclass
class SimulationHistory:
    """Newest-first list of simulation records.

    Changes are written straight back to `path` when one is set.
    """

    path: Path | None = None
    max_records: int = 50
    records: list[SimulationRecord] = field(default_factory=list)

    @classmethod
    def open(cls, settings: HistorySettings | None = None) -> "SimulationHistory":
        """Load the history file, or start empty if it does not exist."""
        if settings is None:
            settings = get_settings().history

        history = cls(path=settings.path, max_records=settings.max_records)
        if settings.path.exists():
            with open(settings.path) as f:
                data = json.load(f)
            history.records = [SimulationRecord.model_validate(r) for r in data]
        return history

    def __len__(self) -> int:
        return len(self.records)

    def add(
        self,
        inputs: SimulationInputs,
        result: AnalysisResult,
        location_name: str | None = None,
    ) -> SimulationRecord:
        """Record an assessed scenario at the top of the history."""
        now = datetime.now()
        record = SimulationRecord(
            id=str(int(now.timestamp() * 1000)),
            timestamp=now,
            location_name=location_name or DEFAULT_LOCATION_NAME,
            params=RecordParams(slope=inputs.slope, intensity=inputs.intensity, depth=inputs.depth),
            result=RecordResult(
                recommended_height=result.recommended_seawall_height,
                wave_height=result.estimated_wave_height,
            ),
        )
        # Keep ids unique when two records land in the same millisecond
        existing = {r.id for r in self.records}
        while record.id in existing:
            record.id = str(int(record.id) + 1)

        self.records.insert(0, record)
        del self.records[self.max_records :]
        self.save()
        return record

    def get(self, record_id: str) -> SimulationRecord:
        for record in self.records:
            if record.id == record_id:
                return record
        raise KeyError(record_id)

    def restore(self, record_id: str) -> SimulationInputs:
        """Inputs of a stored record.

        Raises:
            KeyError: No record with this id.
        """
        return self.get(record_id).to_inputs()

    def clear(self) -> None:
        self.records = []
        self.save()

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump([r.model_dump(mode="json") for r in self.records], f, indent=2)
