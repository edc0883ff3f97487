#!/usr/bin/env python3
"""
Print a month of the planner calendar as a text grid.

Logs in with PLANNER_EMAIL / PLANNER_PASSWORD, fetches events, lays them out
and prints one row per week followed by the events of each day.

Usage:
    uv run python src/scripts/show_month.py --month 2024-03
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.api_client import ApiClient
from core.config import PLANNER_EMAIL, PLANNER_PASSWORD, WEEKDAY_LABELS
from core.errors import AppError
from core.session import SessionManager
from models.events import DayCell, EventSegment
from services.auth import login, logout
from services.calendar import fetch_calendar_events
from services.calendar_grid import build_month_grid, month_label, weeks


def format_cell(cell: DayCell) -> str:
    """Five-character cell: day number, '*' for today, '+' when events exist."""
    if not cell.in_current_month:
        return f"({cell.day:2d}) "
    marker = "*" if cell.is_today else ("+" if cell.event_segments else " ")
    return f" {cell.day:2d}{marker} "


def format_segment(segment: EventSegment) -> str:
    if segment.is_single_day:
        shape = "[====]"
    elif segment.is_start:
        shape = "[===>"
    elif segment.is_end:
        shape = "<===]"
    else:
        shape = "<===>"
    return f"{shape} {segment.event.title}"


def render_month(cells: list[DayCell], reference_month) -> str:
    lines = [month_label(reference_month).center(7 * 6), ""]
    lines.append(" ".join(label.center(5) for label in WEEKDAY_LABELS))
    for row in weeks(cells):
        lines.append(" ".join(format_cell(c) for c in row))

    lines.append("")
    for cell in cells:
        if cell.in_current_month and cell.event_segments:
            lines.append(cell.date.isoformat())
            for segment in cell.event_segments:
                lines.append(f"  {format_segment(segment)}")
    return "\n".join(lines)


async def main(month_str: str | None):
    if month_str:
        reference_month = datetime.strptime(month_str, "%Y-%m").date()
    else:
        reference_month = datetime.now(timezone.utc).date().replace(day=1)

    async with ApiClient(SessionManager()) as client:
        if PLANNER_EMAIL and PLANNER_PASSWORD:
            await login(client, PLANNER_EMAIL, PLANNER_PASSWORD)
        elif not await client.bootstrap():
            print("No session: set PLANNER_EMAIL and PLANNER_PASSWORD")
            return 1

        events = await fetch_calendar_events(client)
        print(f"Fetched {len(events)} events\n")
        print(render_month(build_month_grid(reference_month, events), reference_month))

        await logout(client)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Print a month of the planner calendar")
    parser.add_argument("--month", help="Month to show (YYYY-MM), defaults to the current one")
    args = parser.parse_args()

    try:
        sys.exit(asyncio.run(main(args.month)))
    except AppError as e:
        print(f"\nError: {e.message} ({e.code})")
        sys.exit(1)
