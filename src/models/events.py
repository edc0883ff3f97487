"""
Data models for calendar events and the month grid.

TypedDicts describe payloads exactly as the backend sends them; dataclasses
hold the parsed values the grid engine works with.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import NotRequired, TypedDict

from core.config import DEFAULT_EVENT_COLOR


class CalendarEventPayload(TypedDict):
    """Event as returned by GET /calendar/events/."""
    id: str
    title: str
    start_at: str
    end_at: str
    estimated_cost: NotRequired[float | None]
    color: NotRequired[str | None]
    category_id: NotRequired[str | None]


class CategoryPayload(TypedDict):
    id: str
    name: str
    color: str


@dataclass(frozen=True)
class CalendarEvent:
    """Parsed calendar event; start_at and end_at are aware UTC datetimes."""

    id: str
    title: str
    start_at: datetime
    end_at: datetime
    color: str = DEFAULT_EVENT_COLOR
    estimated_cost: float | None = None
    category_id: str | None = None


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str


@dataclass(frozen=True)
class EventSegment:
    """The part of an event's bar that falls inside one day cell."""

    event: CalendarEvent
    is_start: bool
    is_end: bool
    is_single_day: bool


@dataclass(frozen=True)
class DayCell:
    """
    One square of the month grid.

    `date` is None only for filler days outside the representable range
    (before 0001-01-01 or after 9999-12-31).
    """

    day: int
    date: date | None
    in_current_month: bool
    is_today: bool = False
    event_segments: tuple[EventSegment, ...] = ()
