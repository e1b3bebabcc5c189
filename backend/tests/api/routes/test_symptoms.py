"""Tests for the /api/symptoms endpoints.

The in-memory store is swapped for a fresh instance per test via the
`store` fixture (FastAPI dependency_overrides).
"""
import uuid

from fastapi.testclient import TestClient

from symptrack.main import app

# ---------------------------------------------------------------------------
# Shared fixtures / constants
# ---------------------------------------------------------------------------

HEADACHE = {
    "name": "Headache",
    "severity": 7,
    "duration": 2,
    "durationType": "hours",
    "triggers": ["Stress"],
    "notes": "Worse after standing",
}

DIZZY = {
    "name": "Dizziness",
    "severity": 4,
    "duration": 15,
    "durationType": "minutes",
    "date": "2024-03-15T10:00:00+00:00",
}


# ---------------------------------------------------------------------------
# POST /api/symptoms
# ---------------------------------------------------------------------------


class TestCreateSymptom:
    def test_returns_201_with_server_assigned_id(self, store):
        with TestClient(app) as client:
            response = client.post("/api/symptoms", json=HEADACHE)

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert body["name"] == "Headache"
        assert body["durationType"] == "hours"
        assert body["triggers"] == ["Stress"]
        assert body["reliefMethods"] == []
        assert body["reliefEffectiveness"] is None
        uuid.UUID(body["clientId"])

    def test_round_trip_preserves_submitted_fields(self, store):
        with TestClient(app) as client:
            created = client.post("/api/symptoms", json=HEADACHE).json()
            fetched = client.get(f"/api/symptoms/{created['id']}")

        assert fetched.status_code == 200
        body = fetched.json()
        for field in ("name", "severity", "durationType", "triggers", "notes"):
            assert body[field] == HEADACHE[field]
        assert body["duration"] == HEADACHE["duration"]

    def test_created_symptom_appears_in_list(self, store):
        with TestClient(app) as client:
            created = client.post("/api/symptoms", json=HEADACHE).json()
            listed = client.get("/api/symptoms").json()

        assert [s["id"] for s in listed] == [created["id"]]

    def test_ids_auto_increment(self, store):
        with TestClient(app) as client:
            first = client.post("/api/symptoms", json=HEADACHE).json()
            second = client.post("/api/symptoms", json=DIZZY).json()

        assert second["id"] == first["id"] + 1

    def test_client_id_is_preserved(self, store):
        client_id = str(uuid.uuid4())
        with TestClient(app) as client:
            body = client.post(
                "/api/symptoms", json={**HEADACHE, "clientId": client_id}
            ).json()

        assert body["clientId"] == client_id

    def test_replayed_client_id_returns_existing_record_with_200(self, store):
        payload = {**HEADACHE, "clientId": str(uuid.uuid4())}
        with TestClient(app) as client:
            first = client.post("/api/symptoms", json=payload)
            replay = client.post("/api/symptoms", json=payload)
            listed = client.get("/api/symptoms").json()

        assert first.status_code == 201
        assert replay.status_code == 200
        assert replay.json()["id"] == first.json()["id"]
        assert len(listed) == 1

    def test_severity_out_of_range_returns_400_with_message(self, store):
        with TestClient(app) as client:
            response = client.post("/api/symptoms", json={**HEADACHE, "severity": 11})

        assert response.status_code == 400
        message = response.json()["message"]
        assert message.startswith("Validation error:")
        assert "severity" in message

    def test_zero_duration_returns_400(self, store):
        with TestClient(app) as client:
            response = client.post("/api/symptoms", json={**HEADACHE, "duration": 0})

        assert response.status_code == 400

    def test_blank_name_returns_400(self, store):
        with TestClient(app) as client:
            response = client.post("/api/symptoms", json={**HEADACHE, "name": "   "})

        assert response.status_code == 400

    def test_unknown_duration_type_returns_400(self, store):
        with TestClient(app) as client:
            response = client.post(
                "/api/symptoms", json={**HEADACHE, "durationType": "weeks"}
            )

        assert response.status_code == 400

    def test_missing_required_fields_are_all_reported(self, store):
        with TestClient(app) as client:
            response = client.post("/api/symptoms", json={"name": "Headache"})

        assert response.status_code == 400
        message = response.json()["message"]
        assert "severity" in message
        assert "duration" in message

    def test_optional_fields_are_stored(self, store):
        payload = {
            **HEADACHE,
            "reliefMethods": ["Compression socks", "Fluids"],
            "reliefEffectiveness": 6,
        }
        with TestClient(app) as client:
            body = client.post("/api/symptoms", json=payload).json()

        assert body["reliefMethods"] == ["Compression socks", "Fluids"]
        assert body["reliefEffectiveness"] == 6

    def test_accepts_snake_case_field_names(self, store):
        payload = {**HEADACHE}
        payload["duration_type"] = payload.pop("durationType")
        with TestClient(app) as client:
            response = client.post("/api/symptoms", json=payload)

        assert response.status_code == 201


# ---------------------------------------------------------------------------
# GET /api/symptoms/{id}
# ---------------------------------------------------------------------------


class TestGetSymptom:
    def test_missing_id_returns_404(self, store):
        with TestClient(app) as client:
            response = client.get("/api/symptoms/999")

        assert response.status_code == 404
        assert response.json() == {"message": "Symptom not found"}

    def test_non_integer_id_returns_400(self, store):
        with TestClient(app) as client:
            response = client.get("/api/symptoms/abc")

        assert response.status_code == 400
        assert "message" in response.json()


# ---------------------------------------------------------------------------
# GET /api/symptoms/range
# ---------------------------------------------------------------------------


class TestSymptomRange:
    def _seed(self, client):
        for day in ("2024-03-01", "2024-03-15", "2024-03-31"):
            client.post("/api/symptoms", json={**DIZZY, "date": f"{day}T12:00:00+00:00"})

    def test_filters_inclusive_by_date(self, store):
        with TestClient(app) as client:
            self._seed(client)
            response = client.get(
                "/api/symptoms/range",
                params={"startDate": "2024-03-01", "endDate": "2024-03-15"},
            )

        assert response.status_code == 200
        dates = [s["date"][:10] for s in response.json()]
        assert dates == ["2024-03-01", "2024-03-15"]

    def test_accepts_full_timestamps(self, store):
        with TestClient(app) as client:
            self._seed(client)
            response = client.get(
                "/api/symptoms/range",
                params={
                    "startDate": "2024-03-15T12:00:00Z",
                    "endDate": "2024-03-15T12:00:00Z",
                },
            )

        assert len(response.json()) == 1

    def test_unparsable_dates_return_400(self, store):
        with TestClient(app) as client:
            response = client.get(
                "/api/symptoms/range",
                params={"startDate": "yesterday", "endDate": "2024-03-15"},
            )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid date range provided"}

    def test_missing_dates_return_400(self, store):
        with TestClient(app) as client:
            response = client.get("/api/symptoms/range")

        assert response.status_code == 400

    def test_start_after_end_matches_nothing(self, store):
        with TestClient(app) as client:
            self._seed(client)
            response = client.get(
                "/api/symptoms/range",
                params={"startDate": "2024-03-20", "endDate": "2024-03-01"},
            )

        assert response.status_code == 200
        assert response.json() == []


# ---------------------------------------------------------------------------
# DELETE /api/symptoms/{id}
# ---------------------------------------------------------------------------


class TestDeleteSymptom:
    def test_returns_204_and_removes_record(self, store):
        with TestClient(app) as client:
            created = client.post("/api/symptoms", json=HEADACHE).json()
            response = client.delete(f"/api/symptoms/{created['id']}")
            follow_up = client.get(f"/api/symptoms/{created['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert follow_up.status_code == 404

    def test_missing_id_returns_404(self, store):
        with TestClient(app) as client:
            response = client.delete("/api/symptoms/42")

        assert response.status_code == 404
        assert response.json() == {"message": "Symptom not found"}


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


class TestErrorEnvelope:
    def test_unknown_route_uses_message_envelope(self, store):
        with TestClient(app) as client:
            response = client.get("/api/nope")

        assert response.status_code == 404
        assert "message" in response.json()

    def test_unhandled_error_returns_500_envelope(self, store, monkeypatch):
        async def boom():
            raise RuntimeError("store exploded")

        monkeypatch.setattr(store, "get_symptoms", boom)
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/symptoms")

        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}
