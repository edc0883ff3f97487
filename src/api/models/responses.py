"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    session_authenticated: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class EventSegmentResponse(BaseModel):
    id: str
    title: str
    color: str
    start_at: str
    end_at: str
    is_start: bool
    is_end: bool
    is_single_day: bool


class DayCellResponse(BaseModel):
    date: str | None  # YYYY-MM-DD, None outside the supported date range
    day: int
    in_current_month: bool
    is_today: bool
    events: list[EventSegmentResponse] = []


class MonthGridResponse(BaseModel):
    month: str  # YYYY-MM
    label: str
    weekdays: list[str]
    cells: list[DayCellResponse]


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
