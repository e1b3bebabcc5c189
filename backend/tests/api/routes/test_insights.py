"""Tests for the /api/insights endpoints."""
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from symptrack.main import app


def _log(client, name, severity, *, days_ago=0, triggers=()):
    when = datetime.now(timezone.utc) - timedelta(days=days_ago, minutes=5)
    client.post(
        "/api/symptoms",
        json={
            "name": name,
            "severity": severity,
            "duration": 1,
            "durationType": "hours",
            "date": when.isoformat(),
            "triggers": list(triggers),
        },
    )


class TestInsights:
    def test_empty_store_yields_zeroed_week(self, store):
        with TestClient(app) as client:
            response = client.get("/api/insights")

        assert response.status_code == 200
        body = response.json()
        assert body["period"] == "week"
        assert body["totalSymptoms"] == 0
        assert body["severityDistribution"] == {"mild": 0, "moderate": 0, "severe": 0}
        assert body["symptomsByType"] == []
        assert body["commonTriggers"] == []
        assert len(body["weeklyDistribution"]) == 7
        assert body["weeklyDistribution"][0]["day"] == "Mon"

    def test_top_symptom_types_sorted_by_count(self, store):
        with TestClient(app) as client:
            for _ in range(3):
                _log(client, "Headache", 5)
            for _ in range(5):
                _log(client, "Nausea", 2)
            body = client.get("/api/insights").json()

        assert body["totalSymptoms"] == 8
        assert body["symptomsByType"] == [
            {"name": "Nausea", "count": 5},
            {"name": "Headache", "count": 3},
        ]
        assert body["severityDistribution"] == {"mild": 5, "moderate": 3, "severe": 0}

    def test_period_filter_excludes_older_records(self, store):
        with TestClient(app) as client:
            _log(client, "Fatigue", 9, days_ago=1)
            _log(client, "Fatigue", 9, days_ago=20)
            _log(client, "Fatigue", 9, days_ago=80)
            week = client.get("/api/insights", params={"period": "week"}).json()
            month = client.get("/api/insights", params={"period": "month"}).json()
            quarter = client.get("/api/insights", params={"period": "quarter"}).json()

        assert week["totalSymptoms"] == 1
        assert month["totalSymptoms"] == 2
        assert quarter["totalSymptoms"] == 3

    def test_common_triggers(self, store):
        with TestClient(app) as client:
            _log(client, "Dizziness", 4, triggers=["Stress", "Heat"])
            _log(client, "Dizziness", 4, triggers=["Stress"])
            body = client.get("/api/insights").json()

        assert body["commonTriggers"][0] == {"name": "Stress", "count": 2}

    def test_unknown_period_returns_400(self, store):
        with TestClient(app) as client:
            response = client.get("/api/insights", params={"period": "year"})

        assert response.status_code == 400
        assert "period" in response.json()["message"]


class TestDashboard:
    def test_recent_counts_last_seven_days(self, store):
        with TestClient(app) as client:
            _log(client, "Headache", 2)
            _log(client, "Headache", 8, days_ago=2)
            _log(client, "Headache", 5, days_ago=10)
            body = client.get("/api/insights/dashboard").json()

        assert body["recent"] == {"mild": 1, "moderate": 0, "severe": 1}
        assert len(body["weeklyTrend"]) == 7
