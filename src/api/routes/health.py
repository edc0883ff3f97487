"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_api_client
from api.models.responses import HealthResponse
from core.api_client import ApiClient
from core.config import API_VERSION

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(client: ApiClient | None = Depends(get_api_client)):
    """
    Health check endpoint for monitoring.

    Returns 200 if the upstream client is configured, 503 otherwise.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    if client is not None:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            session_authenticated=client.session.is_authenticated,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                session_authenticated=False,
                timestamp=timestamp,
                error="Upstream client not initialized",
            ).model_dump(),
        )
