"""
Time-related utilities for the application.

All timestamps are generated in UTC and carry timezone information so that
records created by different backing stores sort consistently.
"""

from datetime import datetime, timezone
import time


def utc_now() -> datetime:
    """Return the current UTC time as an aware datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return utc_now().isoformat()


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from the database.

    SQLite drops tzinfo on round-trip; every timestamp we write is UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def epoch_millis() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000
