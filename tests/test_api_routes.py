"""Tests for the grid API endpoints."""

import pytest
from fastapi.testclient import TestClient

import api.dependencies
import api.routes.calendar
from api.dependencies import get_api_client
from api.main import app

API_KEY = "test-key"


@pytest.fixture
def logged_requests(monkeypatch):
    captured = []
    monkeypatch.setattr(api.routes.calendar, "log_request", captured.append)
    return captured


@pytest.fixture
def http(client, monkeypatch, logged_requests):
    """TestClient with the upstream client swapped for the fake backend."""
    monkeypatch.setattr(api.dependencies, "PLANNER_API_KEY", API_KEY)
    app.dependency_overrides[get_api_client] = lambda: client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_reports_session_state(http, session):
    session.login("token-1")
    response = http.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["session_authenticated"] is True


def test_health_unhealthy_without_upstream_client():
    response = TestClient(app).get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_grid_requires_api_key(http):
    response = http.get("/v1/calendar/grid", params={"month": "2024-03"}, headers={"X-API-Key": "wrong"})
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "UNAUTHORIZED"


def test_grid_returns_42_cells_with_events(http, backend, session, sample_event_payload, logged_requests):
    session.login("token-1")
    backend.route("GET", "/calendar/events/", body=[sample_event_payload])

    response = http.get("/v1/calendar/grid", params={"month": "2024-03"}, headers={"X-API-Key": API_KEY})

    assert response.status_code == 200
    data = response.json()
    assert data["month"] == "2024-03"
    assert data["label"] == "March 2024"
    assert data["weekdays"][0] == "Sun"
    assert len(data["cells"]) == 42

    hosting = [c for c in data["cells"] if c["events"]]
    assert [c["date"] for c in hosting] == ["2024-03-10", "2024-03-11", "2024-03-12"]
    assert hosting[0]["events"][0]["is_start"] is True
    assert hosting[2]["events"][0]["is_end"] is True

    (log,) = logged_requests
    assert log.status_code == 200
    assert log.events_placed == 3


def test_grid_refreshes_expired_upstream_token(http, backend, session):
    session.login("expired")
    backend.route("GET", "/calendar/events/", body=[])

    response = http.get("/v1/calendar/grid", params={"month": "2024-02"}, headers={"X-API-Key": API_KEY})

    assert response.status_code == 200
    assert sum(c["in_current_month"] for c in response.json()["cells"]) == 29
    assert len(backend.sent("POST", "/auth/refresh/")) == 1


def test_grid_rejects_bad_month(http, session, logged_requests):
    session.login("token-1")
    response = http.get("/v1/calendar/grid", params={"month": "March"}, headers={"X-API-Key": API_KEY})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_REQUEST"
    assert logged_requests[0].error_code == "INVALID_REQUEST"


def test_bad_month_is_rejected_before_upstream_session(http, backend, logged_requests):
    backend.refresh_fails = True
    response = http.get("/v1/calendar/grid", params={"month": "bogus"}, headers={"X-API-Key": API_KEY})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_REQUEST"
    assert backend.requests == []
    (log,) = logged_requests
    assert (log.month, log.status_code) == ("bogus", 400)
    assert log.details == [("validation_error", "Expected format: YYYY-MM")]


def test_grid_without_upstream_session(http, backend):
    backend.refresh_fails = True
    response = http.get("/v1/calendar/grid", params={"month": "2024-03"}, headers={"X-API-Key": API_KEY})

    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "No upstream session"


def test_grid_maps_upstream_errors(http, backend, session, logged_requests):
    session.login("token-1")
    backend.route("GET", "/calendar/events/", status=503, body={"code": "SERVICE_UNAVAILABLE", "message": "down"})

    response = http.get("/v1/calendar/grid", params={"month": "2024-03"}, headers={"X-API-Key": API_KEY})

    assert response.status_code == 503
    assert response.json()["detail"] == {"error": "down", "code": "SERVICE_UNAVAILABLE", "details": ["RETRY"]}
    assert logged_requests[0].details == [("upstream_error", "RETRY")]
