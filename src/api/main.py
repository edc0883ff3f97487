"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import calendar_router, health_router
from core.api_client import ApiClient
from core.config import API_DEBUG, API_VERSION, PLANNER_EMAIL, PLANNER_PASSWORD
from core.errors import AppError
from core.session import SessionManager
from services.auth import login

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: open the upstream session
    client = ApiClient(SessionManager())
    if PLANNER_EMAIL and PLANNER_PASSWORD:
        try:
            await login(client, PLANNER_EMAIL, PLANNER_PASSWORD, remember_me=True)
        except AppError as e:
            logger.warning("Upstream login failed: %s (%s)", e.message, e.code)
    else:
        await client.bootstrap()
    app.state.api_client = client

    yield

    # Shutdown
    await client.aclose()
    app.state.api_client = None


app = FastAPI(
    title="Pocketplan Calendar Grid API",
    description="Serves month grids with the planner's calendar events laid out per day",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(calendar_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
