"""Daily salt-intake progress against the saved recommendation — pure, no I/O."""
from collections.abc import Sequence
from datetime import datetime, timezone

from symptrack.models.base import ensure_aware
from symptrack.models.salt import DailySaltProgress, SaltIntake, SaltRecommendation

# Totals at or above target * this factor are flagged as possibly too much.
EXCESS_FACTOR = 1.5


def daily_salt_progress(
    intakes: Sequence[SaltIntake],
    recommendation: SaltRecommendation,
    now: datetime | None = None,
) -> DailySaltProgress:
    """Summarise today's intake (calendar day of ``now``) against the targets.

    Status ladder: below the minimum is ``danger``; between minimum and target
    is ``warning``; from target up to 1.5x target is ``success``; beyond that
    is ``caution``.
    """
    now = ensure_aware(now) if now is not None else datetime.now(timezone.utc)
    today = now.date()
    todays = [
        i for i in intakes if ensure_aware(i.date).astimezone(now.tzinfo).date() == today
    ]
    total = round(sum(i.amount for i in todays), 2)

    target = recommendation.daily_target
    minimum = recommendation.min_daily_amount
    percentage = min(round(total / target * 100), 100) if target else 0

    if total < minimum:
        status = "danger"
        message = f"You're below your minimum ({minimum}g). Try adding more salt."
    elif total < target:
        status = "warning"
        message = "You're on track, but haven't reached your daily target yet."
    elif total < target * EXCESS_FACTOR:
        status = "success"
        message = "Great! You've reached your daily target."
    else:
        status = "caution"
        message = "You may have exceeded your recommended daily amount."

    return DailySaltProgress(
        total_today=total,
        daily_target=target,
        min_daily_amount=minimum,
        progress_percentage=percentage,
        status=status,
        message=message,
        intake_count=len(todays),
    )
