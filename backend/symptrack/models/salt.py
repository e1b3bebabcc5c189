from datetime import datetime, timezone
from typing import Literal

from pydantic import Field, field_validator

from symptrack.models.base import CamelModel, ensure_aware

SaltStatus = Literal["danger", "warning", "success", "caution"]


class SaltIntakeCreate(CamelModel):
    amount: float = Field(ge=0.1, le=10, description="Grams of salt")
    source: str = Field(min_length=1, description="e.g. 'salt_tablet', 'electrolyte_drink'")
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    notes: str | None = None

    @field_validator("date")
    @classmethod
    def date_as_utc(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class SaltIntake(SaltIntakeCreate):
    id: int


class SaltRecommendation(CamelModel):
    daily_target: float = Field(default=3.0, ge=1, le=10)
    max_single_dose: float = Field(default=1.0, ge=0.1, le=5)
    min_daily_amount: float = Field(default=2.0, ge=0.5, le=5)
    recommended_sources: list[str] = Field(default_factory=list)
    doctor_notes: str | None = None


class SaltRecommendationUpdate(CamelModel):
    daily_target: float | None = Field(default=None, ge=1, le=10)
    max_single_dose: float | None = Field(default=None, ge=0.1, le=5)
    min_daily_amount: float | None = Field(default=None, ge=0.5, le=5)
    recommended_sources: list[str] | None = None
    doctor_notes: str | None = None


class DailySaltProgress(CamelModel):
    total_today: float
    daily_target: float
    min_daily_amount: float
    progress_percentage: int
    status: SaltStatus
    message: str
    intake_count: int
