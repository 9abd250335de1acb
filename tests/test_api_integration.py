"""
Integration tests for API endpoints.

Tests the full HTTP request/response cycle with in-memory storage, a fake
notification channel and a mocked weather client.
"""
import pytest
from unittest.mock import AsyncMock

from plantanim.main import app
from plantanim.infrastructure.weather_client import (
    WeatherAPIError,
    WeatherClient,
    get_weather_client,
)


# 06:30 on the farm (Asia/Manila)
NOW = "2025-06-10T06:30:00+08:00"


@pytest.fixture
def mock_weather_client():
    client = AsyncMock(spec=WeatherClient)

    def override():
        return client

    app.dependency_overrides[get_weather_client] = override
    yield client
    app.dependency_overrides.pop(get_weather_client, None)


# ============================================================
# Health Check Tests
# ============================================================

class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, test_client):
        """Root endpoint should return healthy status."""
        response = test_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "service" in data
        assert "version" in data

    def test_health_endpoint(self, test_client):
        """Health endpoint should return healthy status."""
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# ============================================================
# Suggestion Endpoint Tests
# ============================================================

class TestSuggestionEndpoints:
    """Tests for the suggestion endpoints."""

    def _body(self, weather):
        return {
            "weather": weather.model_dump(mode="json"),
            "location": {"municipality": "Pilar"},
            "crop_ids": ["rice"],
            "now": NOW,
        }

    def test_evaluate_suggestions(self, test_client, isolated_ports, make_weather):
        weather = make_weather(precipitation=[90, 10, 10], wind_kmh=60.0, typhoon=True)

        response = test_client.post("/api/v1/suggestions", json=self._body(weather))

        assert response.status_code == 200
        data = response.json()
        assert [s["title"] for s in data["suggestions"]] == ["Multiple Weather Risks"]
        assert data["suggestions"][0]["priority"] == "HIGH"
        assert "Final decisions remain with the farmer" in data["disclaimer"]

    def test_dismissed_suggestion_is_hidden(self, test_client, isolated_ports, make_weather):
        body = self._body(make_weather(precipitation=[50, 10, 10]))
        suggestion_id = test_client.post(
            "/api/v1/suggestions", json=body
        ).json()["suggestions"][0]["id"]

        dismiss = test_client.post(f"/api/v1/suggestions/{suggestion_id}/dismiss")
        after = test_client.post("/api/v1/suggestions", json=body).json()

        assert dismiss.status_code == 200
        assert dismiss.json() == {"id": suggestion_id, "saved": True}
        assert after["suggestions"] == []

    def test_invalid_snapshot_is_rejected(self, test_client, isolated_ports):
        response = test_client.post("/api/v1/suggestions", json={"location": {}})

        assert response.status_code == 422

    def test_live_suggestions(self, test_client, isolated_ports, mock_weather_client, make_weather):
        mock_weather_client.get_forecast_for_municipality.return_value = make_weather(
            typhoon=True
        )

        response = test_client.get(
            "/api/v1/suggestions/live", params={"municipality": "Mariveles"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["weather"]["typhoon_alert"] is True
        assert data["suggestions"][0]["title"] == "Typhoon Alert Active"
        mock_weather_client.get_forecast_for_municipality.assert_awaited_once_with("Mariveles")

    def test_live_suggestions_weather_failure(
        self, test_client, isolated_ports, mock_weather_client
    ):
        mock_weather_client.get_forecast_for_municipality.side_effect = WeatherAPIError(
            "Weather API unavailable: 503", status_code=502
        )

        response = test_client.get(
            "/api/v1/suggestions/live", params={"municipality": "Mariveles"}
        )

        assert response.status_code == 502
        assert "Weather API unavailable" in response.json()["detail"]


# ============================================================
# Task Endpoint Tests
# ============================================================

class TestTaskEndpoints:
    """Tests for crop and task endpoints."""

    def test_list_crops(self, test_client):
        response = test_client.get("/api/v1/crops")

        assert response.status_code == 200
        ids = [crop["id"] for crop in response.json()["crops"]]
        assert ids[:2] == ["rice", "corn"]
        assert len(ids) == 7

    def test_generate_tasks(self, test_client, isolated_ports):
        response = test_client.post("/api/v1/tasks", json={
            "plantings": [{"cropId": "rice", "plantingDate": "2025-06-10"}],
            "look_ahead_days": 7,
            "now": NOW,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["task_count"] == 2
        assert {t["task_type"] for t in data["tasks"]} == {"LandPreparation", "Planting"}
        assert all(t["date"] == "2025-06-10" for t in data["tasks"])

    def test_status_update_is_merged(self, test_client, isolated_ports):
        body = {
            "plantings": [{"cropId": "corn", "plantingDate": "2025-06-10"}],
            "look_ahead_days": 0,
            "now": NOW,
            "save": True,
        }
        task_id = test_client.post("/api/v1/tasks", json=body).json()["tasks"][0]["id"]

        update = test_client.put(
            f"/api/v1/tasks/{task_id}/status", json={"status": "Completed"}
        )
        # Stored plantings are used when none are posted
        tasks = test_client.post(
            "/api/v1/tasks", json={"look_ahead_days": 0, "now": NOW}
        ).json()["tasks"]

        assert update.status_code == 200
        assert {t["id"]: t["status"] for t in tasks}[task_id] == "Completed"

    def test_tasks_follow_the_farm_day(self, test_client, isolated_ports):
        # 02:00 on the 10th locally, still the 9th in UTC
        response = test_client.post("/api/v1/tasks", json={
            "plantings": [{"cropId": "corn", "plantingDate": "2025-06-01"}],
            "look_ahead_days": 0,
            "now": "2025-06-09T18:00:00Z",
        })

        tasks = response.json()["tasks"]
        assert [(t["date"], t["day_in_cycle"]) for t in tasks] == [("2025-06-10", 10)]

    def test_invalid_status_is_rejected(self, test_client, isolated_ports):
        response = test_client.put("/api/v1/tasks/x/status", json={"status": "Done"})

        assert response.status_code == 422

    def test_invalid_look_ahead_is_rejected(self, test_client, isolated_ports):
        response = test_client.post("/api/v1/tasks", json={"look_ahead_days": -1})

        assert response.status_code == 422


# ============================================================
# Notification Endpoint Tests
# ============================================================

class TestNotificationEndpoints:
    """Tests for notification reconciliation and settings."""

    def _tasks(self, test_client):
        return test_client.post("/api/v1/tasks", json={
            "plantings": [{"cropId": "rice", "plantingDate": "2025-06-10"}],
            "look_ahead_days": 0,
            "now": NOW,
        }).json()["tasks"]

    def test_reconcile_is_idempotent(self, test_client, isolated_ports):
        _, scheduler = isolated_ports
        body = {"tasks": self._tasks(test_client), "suggestions": [], "now": NOW}

        first = test_client.post("/api/v1/notifications/reconcile", json=body).json()
        second = test_client.post("/api/v1/notifications/reconcile", json=body).json()

        assert len(first["scheduled"]) == 2
        assert first["scheduled"][0]["type"] == "task"
        assert second["scheduled"] == []
        assert second["already_scheduled"] == 2
        assert len(scheduler.scheduled) == 2

        listed = test_client.get("/api/v1/notifications").json()["notifications"]
        assert {n["entityId"] for n in listed} == {t["id"] for t in body["tasks"]}

    def test_disable_notifications(self, test_client, isolated_ports):
        _, scheduler = isolated_ports
        body = {"tasks": self._tasks(test_client), "suggestions": [], "now": NOW}
        test_client.post("/api/v1/notifications/reconcile", json=body)

        response = test_client.put("/api/v1/settings/notifications", json={"enabled": False})
        reconcile = test_client.post("/api/v1/notifications/reconcile", json=body).json()

        assert response.json() == {"enabled": False}
        assert test_client.get("/api/v1/settings/notifications").json() == {"enabled": False}
        assert test_client.get("/api/v1/notifications").json()["notifications"] == []
        assert reconcile["cleared"] is True
        assert scheduler.cancel_all_calls == 2

    def test_cleanup(self, test_client, isolated_ports):
        response = test_client.post("/api/v1/notifications/cleanup")

        assert response.status_code == 200
        assert response.json() == {"pruned": 0}

    def test_cleanup_prunes_fired_reminders(self, test_client, isolated_ports):
        body = {"tasks": self._tasks(test_client), "suggestions": [], "now": NOW}
        test_client.post("/api/v1/notifications/reconcile", json=body)

        response = test_client.post("/api/v1/notifications/cleanup")

        assert response.json() == {"pruned": 2}
        assert test_client.get("/api/v1/notifications").json()["notifications"] == []

    def test_reminders_fire_at_local_morning(self, test_client, isolated_ports):
        body = {"tasks": self._tasks(test_client), "suggestions": [], "now": NOW}

        scheduled = test_client.post(
            "/api/v1/notifications/reconcile", json=body
        ).json()["scheduled"]

        assert {n["scheduledFor"] for n in scheduled} == {"2025-06-10T08:00:00+08:00"}

    def test_notifications_enabled_by_default(self, test_client, isolated_ports):
        response = test_client.get("/api/v1/settings/notifications")

        assert response.json() == {"enabled": True}


class TestErrorHandlerMiddleware:
    """Unhandled errors become JSON responses."""

    def test_value_error_returns_400(self, test_client, isolated_ports, mock_weather_client):
        mock_weather_client.get_forecast_for_municipality.side_effect = ValueError(
            "Invalid coordinates"
        )

        response = test_client.get(
            "/api/v1/suggestions/live", params={"municipality": "Orion"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request", "detail": "Invalid coordinates"}

    def test_unexpected_error_returns_500(self, test_client, isolated_ports, mock_weather_client):
        mock_weather_client.get_forecast_for_municipality.side_effect = RuntimeError("boom")

        response = test_client.get(
            "/api/v1/suggestions/live", params={"municipality": "Orion"}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
