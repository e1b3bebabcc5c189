"""Pure calculation functions for the dashboard, history and insights views.

Stateless helpers that operate on an already-fetched sequence of symptom
records: no I/O, no caching between calls. ``now`` is injectable so results
are deterministic under test; every function defaults it to the current UTC
time. An empty input is always valid and yields zero/empty output.

Day bucketing uses the timezone of ``now``: record timestamps are converted
into it before their calendar date is taken.
"""
import calendar
import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone

from symptrack.models.base import ensure_aware
from symptrack.models.insights import (
    DashboardSummary,
    DayBucket,
    InsightsResponse,
    NameCount,
    Period,
    SeverityCounts,
)
from symptrack.models.symptoms import SEVERITY_LEVELS, SeverityBand, Symptom

logger = logging.getLogger(__name__)

MAX_SYMPTOM_TYPES = 10
MAX_TRIGGERS = 5
RECENT_WINDOW = timedelta(days=7)

_PERIOD_MONTHS = {"month": 1, "quarter": 3}


def _now(now: datetime | None) -> datetime:
    return ensure_aware(now) if now is not None else datetime.now(timezone.utc)


def _local(dt: datetime, now: datetime) -> datetime:
    return ensure_aware(dt).astimezone(now.tzinfo)


def classify_severity(severity: int) -> SeverityBand:
    """Map a 1–10 severity to its band. Boundaries: 3/4 and 7/8.

    Raises:
        ValueError: if severity is outside 1–10.
    """
    for band, (low, high) in SEVERITY_LEVELS.items():
        if low <= severity <= high:
            return band
    raise ValueError(f"severity must be between 1 and 10, got {severity}")


def count_by_severity(records: Iterable[Symptom]) -> SeverityCounts:
    counts = SeverityCounts()
    for record in records:
        band = classify_severity(record.severity)
        if band is SeverityBand.mild:
            counts.mild += 1
        elif band is SeverityBand.moderate:
            counts.moderate += 1
        else:
            counts.severe += 1
    return counts


def severity_summary(
    records: Sequence[Symptom], now: datetime | None = None
) -> SeverityCounts:
    """Count records per severity band over the trailing 7 days."""
    now = _now(now)
    cutoff = now - RECENT_WINDOW
    return count_by_severity(r for r in records if ensure_aware(r.date) >= cutoff)


def week_start(now: datetime) -> date:
    """Monday of the calendar week containing ``now``."""
    today = now.date()
    return today - timedelta(days=today.weekday())


def weekly_trend(
    records: Sequence[Symptom], now: datetime | None = None
) -> list[DayBucket]:
    """Bucket records into the 7 days (Monday first) of the current week.

    Always returns exactly 7 buckets; days without records report zeros.
    """
    now = _now(now)
    monday = week_start(now)
    days = [monday + timedelta(days=i) for i in range(7)]

    by_day: dict[date, list[Symptom]] = {d: [] for d in days}
    for record in records:
        record_day = _local(record.date, now).date()
        if record_day in by_day:
            by_day[record_day].append(record)

    buckets: list[DayBucket] = []
    for day in days:
        counts = count_by_severity(by_day[day])
        buckets.append(
            DayBucket(
                day=day.strftime("%a"),
                date=day,
                mild=counts.mild,
                moderate=counts.moderate,
                severe=counts.severe,
            )
        )
    return buckets


def _top(keys: Iterable[str], limit: int) -> list[NameCount]:
    # Counter preserves first-seen order and most_common() sorts stably, so
    # ties keep first-seen order.
    counts: Counter[str] = Counter(keys)
    return [NameCount(name=name, count=count) for name, count in counts.most_common(limit)]


def top_symptom_types(
    records: Sequence[Symptom], limit: int = MAX_SYMPTOM_TYPES
) -> list[NameCount]:
    """Most frequently logged symptom names, counted by exact name."""
    return _top((r.name for r in records), limit)


def top_triggers(
    records: Sequence[Symptom], limit: int = MAX_TRIGGERS
) -> list[NameCount]:
    """Most frequent triggers; a record contributes once per listed trigger."""
    return _top((t for r in records for t in (r.triggers or [])), limit)


def _subtract_months(moment: datetime, months: int) -> datetime:
    """Calendar month subtraction, clamping the day to the target month's length."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_range(period: Period, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the inclusive ``(start, end)`` window for a period, ending at ``now``."""
    now = _now(now)
    if period == "week":
        return now - timedelta(weeks=1), now
    if period in _PERIOD_MONTHS:
        return _subtract_months(now, _PERIOD_MONTHS[period]), now
    raise ValueError(f"Unknown period: {period!r}")


def filter_by_period(
    records: Sequence[Symptom], period: Period, now: datetime | None = None
) -> list[Symptom]:
    start, end = period_range(period, now)
    return [r for r in records if start <= ensure_aware(r.date) <= end]


def build_dashboard(
    records: Sequence[Symptom], now: datetime | None = None
) -> DashboardSummary:
    now = _now(now)
    return DashboardSummary(
        recent=severity_summary(records, now),
        weekly_trend=weekly_trend(records, now),
    )


def build_insights(
    records: Sequence[Symptom], period: Period = "week", now: datetime | None = None
) -> InsightsResponse:
    """Apply the period filter, then compute every insights aggregate."""
    now = _now(now)
    start, end = period_range(period, now)
    filtered = filter_by_period(records, period, now)
    logger.debug(
        "Insights: period=%s records=%d filtered=%d", period, len(records), len(filtered)
    )
    return InsightsResponse(
        period=period,
        range_start=start,
        range_end=end,
        total_symptoms=len(filtered),
        severity_distribution=count_by_severity(filtered),
        symptoms_by_type=top_symptom_types(filtered),
        weekly_distribution=weekly_trend(filtered, now),
        common_triggers=top_triggers(filtered),
    )
