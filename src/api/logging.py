"""SQLite log of grid API requests."""

import sqlite3
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from core.config import DB_PATH

COLUMNS = (
    "request_id",
    "timestamp",
    "endpoint",
    "client_ip",
    "month",
    "status_code",
    "error_code",
    "error_message",
    "processing_time_ms",
    "events_placed",
)


@dataclass
class RequestLog:
    """One grid request and how it ended."""

    endpoint: str = ""
    client_ip: str | None = None
    month: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    events_placed: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    started: float = field(default_factory=time.monotonic, repr=False)

    def finish(self, status_code: int, error_code: str | None = None, error_message: str | None = None) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.error_message = error_message
        self.processing_time_ms = int((time.monotonic() - self.started) * 1000)

    def row(self) -> tuple:
        return tuple(getattr(self, column) for column in COLUMNS)


def log_request(log: RequestLog) -> None:
    """Write request log to SQLite database."""
    conn = sqlite3.connect(DB_PATH)
    try:
        placeholders = ", ".join("?" for _ in COLUMNS)
        conn.execute(
            f"INSERT INTO api_requests ({', '.join(COLUMNS)}) VALUES ({placeholders})",
            log.row(),
        )
        conn.executemany(
            "INSERT INTO api_request_details (request_id, detail_type, message) VALUES (?, ?, ?)",
            [(log.request_id, detail_type, message) for detail_type, message in log.details],
        )
        conn.commit()
    finally:
        conn.close()
