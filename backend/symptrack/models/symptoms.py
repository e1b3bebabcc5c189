from datetime import datetime, timezone
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator

from symptrack.models.base import CamelModel, ensure_aware

DurationType = Literal["minutes", "hours", "days"]


class SeverityBand(str, Enum):
    mild = "Mild"
    moderate = "Moderate"
    severe = "Severe"


# Inclusive (min, max) per band; shared by summary, weekly trend and insights.
SEVERITY_LEVELS: dict[SeverityBand, tuple[int, int]] = {
    SeverityBand.mild: (1, 3),
    SeverityBand.moderate: (4, 7),
    SeverityBand.severe: (8, 10),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SymptomCreate(CamelModel):
    name: str = Field(min_length=1, description="Symptom name, e.g. 'Headache'")
    severity: int = Field(ge=1, le=10, description="Severity on a 1–10 scale")
    duration: float = Field(gt=0, description="How long the symptom lasted")
    duration_type: DurationType = Field(description="Unit for duration")
    date: datetime = Field(
        default_factory=_utcnow,
        description="When the symptom occurred; defaults to now (UTC)",
    )
    triggers: list[str] = Field(default_factory=list)
    notes: str | None = None
    relief_methods: list[str] = Field(default_factory=list)
    relief_effectiveness: int | None = Field(default=None, ge=1, le=10)
    client_id: UUID | None = Field(
        default=None,
        description="Client-generated identifier; replays with a known id are deduplicated",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name cannot be blank")
        return value

    @field_validator("date")
    @classmethod
    def date_as_utc(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @field_validator("triggers", "relief_methods")
    @classmethod
    def drop_blank_entries(cls, values: list[str]) -> list[str]:
        return [v.strip() for v in values if v and v.strip()]

    @field_validator("notes")
    @classmethod
    def empty_notes_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class Symptom(SymptomCreate):
    id: int
    client_id: UUID


class LocalSymptom(Symptom):
    """A symptom held in the local cache, plus its push state."""

    remote_id: int | None = None
    synced_at: datetime | None = None

    @property
    def is_synced(self) -> bool:
        return self.remote_id is not None

    def to_create(self) -> SymptomCreate:
        return SymptomCreate.model_validate(
            self.model_dump(exclude={"id", "remote_id", "synced_at"})
        )
