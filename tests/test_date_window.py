"""
Tests for `domain/date_window.py`.

Covers contract rules:
- TODAY is the local day itself; WEEK starts 6 days back (7 days inclusive).
- MONTH is calendar-month subtraction, clamped to the prior month's length.
- ALL never restricts.
"""

from __future__ import annotations

from datetime import date

import pytest

from domain.date_window import DateWindow, in_window, subtract_one_month, window_start


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2026, 10, 19), date(2026, 9, 19)),
        (date(2026, 3, 31), date(2026, 2, 28)),
        (date(2024, 3, 31), date(2024, 2, 29)),
        (date(2026, 5, 31), date(2026, 4, 30)),
        (date(2026, 1, 15), date(2025, 12, 15)),
        (date(2026, 1, 31), date(2025, 12, 31)),
    ],
)
def test_subtract_one_month_clamps_to_month_end(day: date, expected: date) -> None:
    """Verify calendar-month subtraction, including leap years and year wrap."""

    assert subtract_one_month(day) == expected


def test_window_start_per_window() -> None:
    today = date(2026, 10, 19)

    assert window_start(DateWindow.ALL, today) is None
    assert window_start(DateWindow.TODAY, today) == today
    assert window_start(DateWindow.WEEK, today) == date(2026, 10, 13)
    assert window_start(DateWindow.MONTH, today) == date(2026, 9, 19)


@pytest.mark.parametrize(
    "window, day, expected",
    [
        (DateWindow.TODAY, date(2026, 10, 19), True),
        (DateWindow.TODAY, date(2026, 10, 18), False),
        (DateWindow.WEEK, date(2026, 10, 13), True),
        (DateWindow.WEEK, date(2026, 10, 12), False),
        (DateWindow.MONTH, date(2026, 9, 19), True),
        (DateWindow.MONTH, date(2026, 9, 18), False),
        (DateWindow.ALL, date(2000, 1, 1), True),
    ],
)
def test_in_window_boundaries(window: DateWindow, day: date, expected: bool) -> None:
    """Verify window boundaries are inclusive of the start day."""

    assert in_window(day, window, date(2026, 10, 19)) is expected


def test_date_window_from_string() -> None:
    assert DateWindow("week") is DateWindow.WEEK
    with pytest.raises(ValueError):
        DateWindow("year")
