from datetime import date, datetime

from symptrack.models.base import CamelModel


class UserProfileUpdate(CamelModel):
    display_name: str | None = None
    condition: str | None = None
    diagnosis_date: date | None = None
    healthcare_provider: str | None = None
    notes: str | None = None


class UserProfile(UserProfileUpdate):
    updated_at: datetime
