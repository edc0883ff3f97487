"""
Pytest configuration and shared fixtures.
"""

import asyncio
import sys
from datetime import datetime
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.api_client import ApiClient  # noqa: E402
from core.session import SessionManager  # noqa: E402
from models.events import CalendarEvent  # noqa: E402

BASE_URL = "http://planner.test"


class FakeBackend:
    """
    Scripted stand-in for the planner backend.

    Protected routes answer 401 unless the request carries the token in
    `accepted_token`. The refresh endpoint hands out `issued_token`.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], tuple[int, object, bool]] = {}
        self.accepted_token = "token-1"
        self.issued_token = "token-1"
        self.refresh_fails = False
        self.refresh_delay = 0.0
        # Overrides the refresh answer when set; called once per refresh
        self.refresh_reply = None

    def route(self, method: str, path: str, status: int = 200, body=None, protected: bool = True):
        self.routes[(method, path)] = (status, body, protected)

    def sent(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)

        if key == ("POST", "/auth/refresh/"):
            if self.refresh_delay:
                await asyncio.sleep(self.refresh_delay)
            if self.refresh_reply is not None:
                return self.refresh_reply()
            if self.refresh_fails:
                return httpx.Response(
                    401, json={"code": "INVALID_REFRESH_TOKEN", "message": "Refresh token revoked"}
                )
            return httpx.Response(200, json={"access_token": self.issued_token})

        if key not in self.routes:
            return httpx.Response(404, json={"code": "NOT_FOUND", "message": "No such route"})

        status, body, protected = self.routes[key]
        if protected and request.headers.get("Authorization") != f"Bearer {self.accepted_token}":
            return httpx.Response(401, json={"code": "TOKEN_EXPIRED", "message": "Access token expired"})
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def session():
    return SessionManager()


@pytest.fixture
def client(backend, session):
    """ApiClient wired to the fake backend."""
    return ApiClient(session, base_url=BASE_URL, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def make_event():
    """Factory for CalendarEvent values."""

    def _make(event_id: str, start_at: datetime, end_at: datetime, title: str = "", **kwargs):
        return CalendarEvent(
            id=event_id,
            title=title or f"Event {event_id}",
            start_at=start_at,
            end_at=end_at,
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_event_payload():
    """Event dictionary as returned by GET /calendar/events/."""
    return {
        "id": "evt-1",
        "title": "Rent due",
        "start_at": "2024-03-10T23:00:00Z",
        "end_at": "2024-03-12T01:00:00Z",
        "estimated_cost": 1200,
        "color": "#EF4444",
    }
