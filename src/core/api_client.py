"""
HTTP client for the planner backend with transparent token refresh.

Every request carries the session's bearer token. A 401 on a non-auth endpoint
triggers exactly one refresh followed by one replay of the original request.
"""

import asyncio
import logging
from enum import Enum

import httpx

from core.config import API_BASE_URL, AUTH_ENDPOINTS, HTTP_CLIENT_TIMEOUT, REFRESH_ENDPOINT
from core.errors import AppError, create_app_error, response_body
from core.session import SessionManager

logger = logging.getLogger(__name__)


def build_async_http_client(
    base_url: str = API_BASE_URL, timeout: float | None = None, **kwargs
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient with the defaults the backend expects."""
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout or HTTP_CLIENT_TIMEOUT,
        headers={"Content-Type": "application/json"},
        follow_redirects=True,
        **kwargs,
    )


class RequestState(str, Enum):
    INITIAL = "initial"
    SENT = "sent"
    SUCCESS = "success"
    NEEDS_REFRESH = "needs_refresh"
    FAILED = "failed"


class RequestAttempt:
    """
    State of one logical request across its original send and optional replay.

    The retried flag lives here rather than on the outgoing request, so a
    single attempt can never refresh twice.
    """

    def __init__(self, method: str, path: str, json=None, params: dict | None = None):
        self.method = method.upper()
        self.path = path
        self.json = json
        self.params = params
        self.state = RequestState.INITIAL
        self.retried = False
        self.sends = 0

    @property
    def is_auth_endpoint(self) -> bool:
        return any(self.path.startswith(endpoint) for endpoint in AUTH_ENDPOINTS)

    def headers(self, access_token: str | None) -> dict[str, str]:
        if access_token:
            return {"Authorization": f"Bearer {access_token}"}
        return {}

    def mark_sent(self) -> None:
        self.state = RequestState.SENT
        self.sends += 1

    def record_status(self, status_code: int) -> RequestState:
        """Move out of SENT based on the response status."""
        if 200 <= status_code < 300:
            self.state = RequestState.SUCCESS
        elif status_code == 401 and not self.retried and not self.is_auth_endpoint:
            self.state = RequestState.NEEDS_REFRESH
        else:
            self.state = RequestState.FAILED
        return self.state

    def mark_retried(self) -> None:
        self.retried = True

    def fail(self) -> None:
        self.state = RequestState.FAILED


class ApiClient:
    """Session-aware wrapper around httpx.AsyncClient."""

    def __init__(
        self,
        session: SessionManager,
        base_url: str = API_BASE_URL,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.session = session
        self._http = build_async_http_client(base_url, timeout, transport=transport)
        self._refresh_task: asyncio.Task | None = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    async def _send(self, attempt: RequestAttempt) -> httpx.Response:
        attempt.mark_sent()
        try:
            response = await self._http.request(
                attempt.method,
                attempt.path,
                json=attempt.json,
                params=attempt.params,
                headers=attempt.headers(self.session.get_credential()),
            )
        except httpx.HTTPError as e:
            attempt.fail()
            logger.warning("%s %s failed: %s", attempt.method, attempt.path, e)
            raise create_app_error("NETWORK_ERROR") from e
        attempt.record_status(response.status_code)
        return response

    async def request(
        self, method: str, path: str, *, json=None, params: dict | None = None
    ) -> httpx.Response:
        """
        Send a request, refreshing the token and replaying once on 401.

        Raises:
            AppError: the mapped error of the final response, or of the
                refresh call when the refresh itself failed.
        """
        attempt = RequestAttempt(method, path, json=json, params=params)
        response = await self._send(attempt)

        if attempt.state is RequestState.NEEDS_REFRESH:
            try:
                await self.refresh_access_token()
            except AppError:
                attempt.fail()
                raise
            attempt.mark_retried()
            response = await self._send(attempt)

        if attempt.state is RequestState.FAILED:
            raise create_app_error(response)
        return response

    async def get(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)

    async def get_json(self, path: str, **kwargs):
        response = await self.get(path, **kwargs)
        return response.json()

    # -------------------------------------------------------------------------
    # Token refresh
    # -------------------------------------------------------------------------

    async def _refresh(self) -> str:
        try:
            # Refresh rides on the cookie jar only, never on a bearer header
            response = await self._http.post(REFRESH_ENDPOINT)
        except httpx.HTTPError as e:
            self.session.logout()
            raise create_app_error("NETWORK_ERROR") from e

        if not response.is_success:
            self.session.logout()
            raise create_app_error(response)

        access_token = response_body(response).get("access_token")
        if not access_token or not isinstance(access_token, str):
            self.session.logout()
            logger.warning("Refresh answered %s without an access token", response.status_code)
            raise create_app_error("INVALID_REFRESH_TOKEN")

        self.session.set_credential(access_token)
        logger.debug("Access token refreshed")
        return access_token

    async def refresh_access_token(self) -> str:
        """
        Exchange the refresh cookie for a new access token.

        Concurrent callers share the refresh already in flight.
        """
        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.ensure_future(self._refresh())
            self._refresh_task = task
        try:
            return await task
        finally:
            if self._refresh_task is task and task.done():
                self._refresh_task = None

    async def bootstrap(self) -> bool:
        return await self.session.bootstrap(self.refresh_access_token)

    async def ensure_authenticated(self) -> bool:
        """Return True if a token is held or one silent refresh succeeds."""
        if self.session.is_authenticated:
            return True
        try:
            await self.refresh_access_token()
        except AppError:
            return False
        return self.session.is_authenticated
