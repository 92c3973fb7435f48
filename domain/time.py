"""
Domain time utilities (pure).

Centralized timestamp validation and local-day helpers.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces that stored timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def require_aware(name: str, value: datetime) -> None:
    """Reject naive datetimes used as the reference 'now' of a computation."""

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware")


def local_datetime(value: datetime, tz: Optional[tzinfo]) -> datetime:
    """Convert a UTC timestamp into the wall-clock time of `tz`."""

    return value.astimezone(tz)


def local_day(value: datetime, tz: Optional[tzinfo]) -> date:
    """
    Truncate a timestamp to the calendar day it falls on in `tz`.

    Time of day is discarded; only (year, month, day) remain.
    """

    return value.astimezone(tz).date()
