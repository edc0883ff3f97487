"""
Month grid layout and event placement.

All date math is done in UTC. Events are placed by calendar date only, so an
event ending at 01:00 UTC still occupies that whole day cell.
"""

import calendar
from datetime import date, datetime, timedelta, timezone

from core.config import GRID_CELLS, WEEKDAY_LABELS
from models.events import CalendarEvent, DayCell, EventSegment

__all__ = [
    "WEEKDAY_LABELS",
    "build_month_grid",
    "month_label",
    "shift_month",
    "utc_date",
    "weeks",
]


def utc_date(value: date | datetime | str) -> date:
    """
    Floor a timestamp to its UTC calendar date.

    Accepts ISO-8601 strings (with or without a trailing 'Z'), datetimes and
    dates. Naive datetimes are read as UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def _first_of_month(reference_month: date | datetime | str) -> date:
    return utc_date(reference_month).replace(day=1)


def shift_month(reference_month: date | datetime | str, delta: int) -> date:
    """Return the first day of the month `delta` months away (negative = back)."""
    first = _first_of_month(reference_month)
    index = first.year * 12 + (first.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def month_label(reference_month: date | datetime | str) -> str:
    """e.g. 'March 2024'."""
    first = _first_of_month(reference_month)
    return f"{calendar.month_name[first.month]} {first.year}"


def _segments_for_day(cell_date: date, events: list[CalendarEvent]) -> tuple[EventSegment, ...]:
    segments = []
    for event in events:
        start = utc_date(event.start_at)
        end = utc_date(event.end_at)
        if start <= cell_date <= end:
            segments.append(
                EventSegment(
                    event=event,
                    is_start=start == cell_date,
                    is_end=end == cell_date,
                    is_single_day=start == end,
                )
            )
    return tuple(segments)


def _days_in_previous_month(first: date) -> int:
    if first.month == 1:
        return 31
    return calendar.monthrange(first.year, first.month - 1)[1]


def _filler_date(anchor: date, days: int) -> date | None:
    try:
        return anchor + timedelta(days=days)
    except OverflowError:
        return None


def build_month_grid(
    reference_month: date | datetime | str,
    events: list[CalendarEvent],
    today: date | datetime | None = None,
) -> list[DayCell]:
    """
    Lay out a month as 42 day cells (6 weeks, Sunday first).

    Args:
        reference_month: Any instant inside the month to show.
        events: Events to place; order is kept within each day.
        today: Override for the current UTC date.

    Returns:
        Leading cells from the previous month, every day of this month, then
        trailing cells from the next month. Only current-month cells carry
        events or can be today.
    """
    first = _first_of_month(reference_month)
    today = utc_date(today) if today is not None else datetime.now(timezone.utc).date()

    days_in_month = calendar.monthrange(first.year, first.month)[1]
    days_in_prev_month = _days_in_previous_month(first)
    # calendar.weekday is Monday=0; shift so Sunday=0
    first_weekday = (first.weekday() + 1) % 7

    cells: list[DayCell] = []

    # Previous month tail
    for offset in range(first_weekday, 0, -1):
        cells.append(
            DayCell(
                day=days_in_prev_month - offset + 1,
                date=_filler_date(first, -offset),
                in_current_month=False,
            )
        )

    # Current month
    for day in range(1, days_in_month + 1):
        cell_date = first.replace(day=day)
        cells.append(
            DayCell(
                day=day,
                date=cell_date,
                in_current_month=True,
                is_today=cell_date == today,
                event_segments=_segments_for_day(cell_date, events),
            )
        )

    # Next month head
    last = cells[-1].date
    for day in range(1, GRID_CELLS - len(cells) + 1):
        cells.append(DayCell(day=day, date=_filler_date(last, day), in_current_month=False))

    return cells


def weeks(cells: list[DayCell]) -> list[list[DayCell]]:
    """Split a grid into rows of seven."""
    return [cells[i : i + 7] for i in range(0, len(cells), 7)]
