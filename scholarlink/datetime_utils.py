"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from scholarlink.datetime_utils import monotonic_utc_now

    created_at = Column(DateTime(timezone=True), default=monotonic_utc_now, nullable=False)
"""
from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) and convert aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


_last_timestamp: Optional[datetime] = None


def monotonic_utc_now() -> datetime:
    """utc_now(), bumped by one microsecond when the clock has not moved past the previous value.

    Used for creation timestamps so records written back to back keep their
    creation order when sorted by time.
    """
    global _last_timestamp
    now = utc_now()
    if _last_timestamp is not None and now <= _last_timestamp:
        now = _last_timestamp + timedelta(microseconds=1)
    _last_timestamp = now
    return now
