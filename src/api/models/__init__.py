"""API Pydantic models."""

from .responses import (
    DayCellResponse,
    ErrorCodes,
    ErrorResponse,
    EventSegmentResponse,
    HealthResponse,
    MonthGridResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "DayCellResponse",
    "EventSegmentResponse",
    "MonthGridResponse",
]
