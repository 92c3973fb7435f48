"""
Domain: Relative date windows.

A date window restricts requests to those created on or after a start day,
relative to "today" in the caller's local time zone:

- TODAY: created today.
- WEEK: created within the trailing 7 days, today included (today - 6 days).
- MONTH: created on or after the same day-of-month one calendar month ago.
  Calendar-month subtraction, not a fixed 30 days. When that day does not
  exist in the prior month (e.g. 31 March -> February) it is clamped to the
  last day of the prior month.
- ALL: no restriction.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from enum import Enum
from typing import Optional


class DateWindow(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


def subtract_one_month(day: date) -> date:
    """Same day one calendar month earlier, clamped to the prior month's length."""

    if day.month == 1:
        year, month = day.year - 1, 12
    else:
        year, month = day.year, day.month - 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def window_start(window: DateWindow, today: date) -> Optional[date]:
    """
    First calendar day included in `window`.

    Returns None for DateWindow.ALL (the predicate is inactive).
    """

    if window is DateWindow.ALL:
        return None
    if window is DateWindow.TODAY:
        return today
    if window is DateWindow.WEEK:
        return today - timedelta(days=6)
    if window is DateWindow.MONTH:
        return subtract_one_month(today)
    raise ValueError(f"Unknown date window: {window!r}")


def in_window(day: date, window: DateWindow, today: date) -> bool:
    """Check whether a (local) calendar day falls inside `window`."""

    if window is DateWindow.TODAY:
        return day == today
    start = window_start(window, today)
    if start is None:
        return True
    return day >= start


__all__ = ["DateWindow", "in_window", "subtract_one_month", "window_start"]
