"""
Calendar events and categories from the planner backend.
"""

import logging
from datetime import datetime, timezone

from core.api_client import ApiClient
from core.config import DEFAULT_EVENT_COLOR
from core.errors import AppError, create_app_error, response_body
from core.validation import validate_category_fields, validate_event_fields
from models.events import CalendarEvent, CalendarEventPayload, Category, CategoryPayload

logger = logging.getLogger(__name__)


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_event(payload: CalendarEventPayload) -> CalendarEvent:
    """Parse a backend event into a CalendarEvent with UTC timestamps."""
    estimated_cost = payload.get("estimated_cost")
    return CalendarEvent(
        id=str(payload["id"]),
        title=payload.get("title") or "",
        start_at=_parse_timestamp(payload["start_at"]),
        end_at=_parse_timestamp(payload["end_at"]),
        color=payload.get("color") or DEFAULT_EVENT_COLOR,
        estimated_cost=float(estimated_cost) if estimated_cost is not None else None,
        category_id=payload.get("category_id"),
    )


def serialize_event(
    title: str,
    start_at: datetime,
    end_at: datetime,
    color: str | None = None,
    estimated_cost: float | None = None,
    category_id: str | None = None,
) -> dict:
    """Build the request body for event create/update, timestamps as UTC 'Z' strings."""
    body = {
        "title": title.strip(),
        "start_at": _format_timestamp(start_at),
        "end_at": _format_timestamp(end_at),
    }
    if color:
        body["color"] = color
    if estimated_cost is not None:
        body["estimated_cost"] = estimated_cost
    if category_id:
        body["category_id"] = category_id
    return body


# =============================================================================
# CONNECTION
# =============================================================================


async def init_calendar(client: ApiClient) -> bool:
    """
    Ask the backend to set up the user's calendar.

    Non-critical: the backend may already be initialized, so failures are
    logged and reported as False.
    """
    try:
        await client.post("/calendar/init/")
    except AppError as e:
        logger.debug("Calendar init skipped: %s", e.code)
        return False
    return True


async def is_calendar_connected(client: ApiClient) -> bool:
    """Whether the user has a connected calendar (GET /calendar/me/)."""
    try:
        await client.get("/calendar/me/")
    except AppError as e:
        if e.status == 404:
            return False
        raise
    return True


# =============================================================================
# EVENTS
# =============================================================================


async def fetch_calendar_events(client: ApiClient) -> list[CalendarEvent]:
    payloads = await client.get_json("/calendar/events/")
    events = []
    for payload in payloads or []:
        try:
            events.append(parse_event(payload))
        except (KeyError, ValueError) as e:
            logger.warning("Skipping malformed event %r: %s", payload.get("id"), e)
    return events


async def create_event(
    client: ApiClient,
    title: str,
    start_at: datetime,
    end_at: datetime,
    color: str | None = None,
    estimated_cost: float | None = None,
    category_id: str | None = None,
) -> CalendarEvent | None:
    """
    Create an event. Returns the created event when the backend echoes it back.

    Raises:
        AppError: CLIENT_VALIDATION_ERROR before any request for an invalid draft
    """
    validate_event_fields(title, start_at, end_at)
    body = serialize_event(title, start_at, end_at, color, estimated_cost, category_id)
    response = await client.post("/calendar/events/create/", json=body)
    data = response_body(response)
    if "id" in data:
        return parse_event(data)
    return None


async def update_event(client: ApiClient, event: CalendarEvent) -> CalendarEvent:
    validate_event_fields(event.title, event.start_at, event.end_at)
    body = serialize_event(
        event.title,
        event.start_at,
        event.end_at,
        event.color,
        event.estimated_cost,
        event.category_id,
    )
    response = await client.put(f"/calendar/events/{event.id}/", json=body)
    data = response_body(response)
    if "id" in data:
        return parse_event(data)
    return event


async def delete_event(client: ApiClient, event_id: str) -> None:
    await client.delete(f"/calendar/events/{event_id}/")


# =============================================================================
# CATEGORIES
# =============================================================================


def parse_category(payload: CategoryPayload) -> Category:
    return Category(id=str(payload["id"]), name=payload["name"], color=payload["color"])


async def list_categories(client: ApiClient) -> list[Category]:
    payloads = await client.get_json("/calendar/categories/")
    return [parse_category(p) for p in payloads or []]


async def create_category(client: ApiClient, name: str, color: str) -> Category:
    validate_category_fields(name, color)
    response = await client.post("/calendar/categories/", json={"name": name.strip(), "color": color})
    data = response_body(response)
    if "id" not in data:
        raise create_app_error("INTERNAL_ERROR", "Category response did not include the created category")
    return parse_category(data)


async def delete_category(client: ApiClient, category_id: str) -> None:
    await client.delete(f"/calendar/categories/{category_id}/")
