"""Unit tests for symptrack.services.salt.daily_salt_progress."""
from datetime import datetime, timedelta, timezone

import pytest

from symptrack.models.salt import SaltIntake, SaltRecommendation
from symptrack.services.salt import daily_salt_progress

NOW = datetime(2024, 5, 2, 15, 0, tzinfo=timezone.utc)
DEFAULTS = SaltRecommendation()  # target 3.0g, minimum 2.0g


def intake(amount, when=NOW, id=1) -> SaltIntake:
    return SaltIntake(id=id, amount=amount, source="salt_tablet", date=when)


class TestDailySaltProgress:
    def test_no_intakes(self):
        progress = daily_salt_progress([], DEFAULTS, NOW)
        assert progress.total_today == 0
        assert progress.progress_percentage == 0
        assert progress.status == "danger"
        assert progress.intake_count == 0

    @pytest.mark.parametrize(
        "amounts,status",
        [
            ([1.0], "danger"),
            ([1.0, 1.0], "warning"),
            ([1.0, 1.0, 1.0], "success"),
            ([2.0, 2.0], "success"),
            ([2.5, 2.0], "caution"),
        ],
    )
    def test_status_ladder(self, amounts, status):
        intakes = [intake(a, id=i) for i, a in enumerate(amounts)]
        assert daily_salt_progress(intakes, DEFAULTS, NOW).status == status

    def test_percentage_is_capped_at_100(self):
        progress = daily_salt_progress([intake(5.0)], DEFAULTS, NOW)
        assert progress.progress_percentage == 100

    def test_percentage_rounds(self):
        progress = daily_salt_progress([intake(1.0)], DEFAULTS, NOW)
        assert progress.progress_percentage == 33

    def test_only_todays_intakes_count(self):
        intakes = [
            intake(1.5, id=1),
            intake(2.0, when=NOW - timedelta(days=1), id=2),
            intake(0.5, when=NOW.replace(hour=0, minute=1), id=3),
        ]
        progress = daily_salt_progress(intakes, DEFAULTS, NOW)
        assert progress.total_today == 2.0
        assert progress.intake_count == 2

    def test_total_is_rounded_to_two_places(self):
        intakes = [intake(0.1, id=i) for i in range(3)]
        assert daily_salt_progress(intakes, DEFAULTS, NOW).total_today == 0.3

    def test_uses_custom_recommendation(self):
        rec = SaltRecommendation(daily_target=6, min_daily_amount=4)
        progress = daily_salt_progress([intake(3.0)], rec, NOW)
        assert progress.status == "danger"
        assert progress.daily_target == 6
        assert progress.progress_percentage == 50
        assert "4.0g" in progress.message
