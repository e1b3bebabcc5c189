from datetime import date

from pydantic import Field

from symptrack.models.base import CamelModel


class MedicationCreate(CamelModel):
    name: str = Field(min_length=1)
    dosage: str = Field(min_length=1)
    frequency: str = Field(min_length=1, description="e.g. 'daily', 'twice_daily', 'as_needed'")
    time_of_day: list[str] = Field(default_factory=list)
    start_date: date
    end_date: date | None = None
    notes: str | None = None
    active: bool = True
    reminder_enabled: bool = False
    reminder_times: list[str] = Field(default_factory=list)


class MedicationUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    dosage: str | None = Field(default=None, min_length=1)
    frequency: str | None = Field(default=None, min_length=1)
    time_of_day: list[str] | None = None
    start_date: date | None = None
    end_date: date | None = None
    notes: str | None = None
    active: bool | None = None
    reminder_enabled: bool | None = None
    reminder_times: list[str] | None = None


class Medication(MedicationCreate):
    id: int
