"""
Timestamp conversion between Supabase rows and domain entities.

Shared by all repository modules.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def to_iso_utc(dt: datetime) -> str:
    """
    Convert a timezone-aware datetime to an ISO-8601 string in UTC.

    Notes:
    - Domain objects require UTC timestamps (offset 0). We still normalize via
      `astimezone(timezone.utc)` for safety.
    """

    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("timestamp must be timezone-aware (UTC)")
    return dt.astimezone(timezone.utc).isoformat()


def parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        # Python's fromisoformat doesn't consistently accept 'Z' across versions.
        text = value.replace("Z", "+00:00")
        dt = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    # If the backend returns a naive timestamp, interpret it as UTC so that the
    # domain model's UTC invariant is satisfied.
    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_optional_utc_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_utc_datetime(value)


__all__ = ["parse_optional_utc_datetime", "parse_utc_datetime", "to_iso_utc"]
