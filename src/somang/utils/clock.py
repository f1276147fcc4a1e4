"""Timestamp helpers for post records."""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

_ONE_MICROSECOND = timedelta(microseconds=1)
_LAST_TIMESTAMP: datetime | None = None
_TIMESTAMP_LOCK = threading.Lock()


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def next_timestamp(not_before: datetime | None = None) -> datetime:
    """Return a UTC timestamp strictly later than any previously returned.

    Args:
        not_before: Lower bound; the result is strictly after it as well.

    Returns:
        A timezone-aware datetime with microsecond precision.
    """
    global _LAST_TIMESTAMP
    with _TIMESTAMP_LOCK:
        candidate = utcnow()
        floor = _LAST_TIMESTAMP
        if not_before is not None and (floor is None or not_before > floor):
            floor = not_before
        if floor is not None and candidate <= floor:
            candidate = floor + _ONE_MICROSECOND
        _LAST_TIMESTAMP = candidate
        return candidate
