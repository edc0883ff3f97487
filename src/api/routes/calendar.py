"""Month grid endpoint."""

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from api.dependencies import require_upstream_session, verify_api_key
from api.logging import RequestLog, log_request
from api.models.responses import (
    DayCellResponse,
    ErrorCodes,
    EventSegmentResponse,
    MonthGridResponse,
)
from core.api_client import ApiClient
from core.config import WEEKDAY_LABELS
from core.errors import AppError
from models.events import DayCell
from services.calendar import fetch_calendar_events
from services.calendar_grid import build_month_grid, month_label

router = APIRouter(prefix="/v1")

GRID_ENDPOINT = "/v1/calendar/grid"


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def parse_month(month_str: str) -> date:
    """Parse a YYYY-MM string to the first day of that month."""
    try:
        return datetime.strptime(month_str, "%Y-%m").date()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Invalid month format",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": ["Expected format: YYYY-MM"],
            },
        )


def serialize_cell(cell: DayCell) -> DayCellResponse:
    return DayCellResponse(
        date=cell.date.isoformat() if cell.date else None,
        day=cell.day,
        in_current_month=cell.in_current_month,
        is_today=cell.is_today,
        events=[
            EventSegmentResponse(
                id=segment.event.id,
                title=segment.event.title,
                color=segment.event.color,
                start_at=segment.event.start_at.isoformat(),
                end_at=segment.event.end_at.isoformat(),
                is_start=segment.is_start,
                is_end=segment.is_end,
                is_single_day=segment.is_single_day,
            )
            for segment in cell.event_segments
        ],
    )


def _write_log(request_log: RequestLog) -> None:
    try:
        log_request(request_log)
    except Exception:
        # Don't fail the request if logging fails
        pass


def get_reference_month(
    request: Request,
    month: str | None = Query(None, description="Month to show (YYYY-MM), defaults to the current one"),
) -> date:
    """First day of the requested month; rejected requests are logged here."""
    if not month:
        return datetime.now(timezone.utc).date().replace(day=1)
    try:
        return parse_month(month)
    except HTTPException as e:
        request_log = RequestLog(endpoint=GRID_ENDPOINT, client_ip=get_client_ip(request), month=month)
        request_log.details.extend(("validation_error", detail) for detail in e.detail["details"])
        request_log.finish(e.status_code, e.detail["code"], e.detail["error"])
        _write_log(request_log)
        raise


@router.get("/calendar/grid", response_model=MonthGridResponse)
async def month_grid_endpoint(
    request: Request,
    _api_key: str = Depends(verify_api_key),
    reference_month: date = Depends(get_reference_month),
    client: ApiClient = Depends(require_upstream_session),
):
    """
    Lay out one month as 42 day cells with the user's events placed on them.
    """
    request_log = RequestLog(
        endpoint=GRID_ENDPOINT,
        client_ip=get_client_ip(request),
        month=reference_month.strftime("%Y-%m"),
    )

    try:
        events = await fetch_calendar_events(client)
        cells = build_month_grid(reference_month, events)

        request_log.events_placed = sum(len(c.event_segments) for c in cells)
        request_log.finish(200)

        return MonthGridResponse(
            month=reference_month.strftime("%Y-%m"),
            label=month_label(reference_month),
            weekdays=list(WEEKDAY_LABELS),
            cells=[serialize_cell(c) for c in cells],
        )

    except AppError as e:
        # Upstream failure, already mapped through the error catalog
        request_log.details.append(("upstream_error", e.action.value))
        request_log.finish(e.status, e.code, e.message)

        raise HTTPException(
            status_code=e.status,
            detail={
                "error": e.message,
                "code": e.code,
                "details": [e.action.value],
            },
        )

    except Exception as e:
        request_log.finish(500, ErrorCodes.INTERNAL_ERROR, str(e))

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        _write_log(request_log)
