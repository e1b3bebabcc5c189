from datetime import date, datetime
from typing import Literal

from symptrack.models.base import CamelModel

Period = Literal["week", "month", "quarter"]


class SeverityCounts(CamelModel):
    mild: int = 0
    moderate: int = 0
    severe: int = 0

    @property
    def total(self) -> int:
        return self.mild + self.moderate + self.severe


class DayBucket(SeverityCounts):
    day: str
    date: date


class NameCount(CamelModel):
    name: str
    count: int


class InsightsResponse(CamelModel):
    period: Period
    range_start: datetime
    range_end: datetime
    total_symptoms: int
    severity_distribution: SeverityCounts
    symptoms_by_type: list[NameCount]
    weekly_distribution: list[DayBucket]
    common_triggers: list[NameCount]


class DashboardSummary(CamelModel):
    recent: SeverityCounts
    weekly_trend: list[DayBucket]
