"""FastAPI dependencies for authentication and shared resources."""

import secrets

from fastapi import Depends, Header, HTTPException, Request, status

from api.models.responses import ErrorCodes
from core.api_client import ApiClient
from core.config import PLANNER_API_KEY


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: 401 if key is missing or invalid
    """
    if not PLANNER_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "API key not configured on server",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(x_api_key, PLANNER_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": ErrorCodes.UNAUTHORIZED,
                "details": [],
            },
        )

    return x_api_key


def get_api_client(request: Request) -> ApiClient | None:
    """Upstream client created at startup, or None if startup has not run."""
    return getattr(request.app.state, "api_client", None)


async def require_upstream_session(
    client: ApiClient | None = Depends(get_api_client),
) -> ApiClient:
    """
    Upstream client with an authenticated session.

    Tries one silent refresh when no token is held.

    Raises:
        HTTPException: 401 if no upstream session can be established
    """
    if client is None or not await client.ensure_authenticated():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "No upstream session",
                "code": ErrorCodes.UNAUTHORIZED,
                "details": ["Set PLANNER_EMAIL and PLANNER_PASSWORD for the grid API"],
            },
        )
    return client
