"""
Request statistics service.

Derives a read-only statistics snapshot from a request collection:

- total counts by status with acceptance / rejection rates
- today / this week / this month counts by status (same date windows as filtering)
- a dense 24-entry hour-of-day histogram
- a zero-filled daily series over a fixed trailing window, for charting

Averages and the peak hour are derived from the snapshot, not stored in it.
Average-per-day and average-per-week use the fixed divisors 30 and 7.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Sequence

from domain.date_window import DateWindow, in_window
from domain.request import Request, RequestStatus
from domain.time import local_datetime, require_aware

DEFAULT_DAILY_DAYS = 30
MIN_DAILY_DAYS = 7
DAYS_PER_MONTH_DIVISOR = 30
DAYS_PER_WEEK_DIVISOR = 7


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative input."""

    return int(math.floor(value + 0.5))


def percentage(count: int, total: int) -> int:
    """round(100 * count / total), defined as 0 when total is 0."""

    if total == 0:
        return 0
    return round_half_up(100 * count / total)


@dataclass(frozen=True, slots=True)
class TotalStats:
    all: int
    accepted: int
    rejected: int
    new: int
    no_answer: int
    acceptance_rate: int
    rejection_rate: int


@dataclass(frozen=True, slots=True)
class PeriodStats:
    count: int
    accepted: int
    rejected: int
    new: int


@dataclass(frozen=True, slots=True)
class HourCount:
    hour: int
    count: int


@dataclass(frozen=True, slots=True)
class DayCount:
    date: date
    count: int


@dataclass(frozen=True, slots=True)
class RequestStatistics:
    total: TotalStats
    today: PeriodStats
    this_week: PeriodStats
    this_month: PeriodStats
    hourly_stats: List[HourCount]
    daily_stats: List[DayCount]

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot in the camelCase shape consumed by dashboards."""

        def period(stats: PeriodStats) -> Dict[str, int]:
            return {
                "count": stats.count,
                "accepted": stats.accepted,
                "rejected": stats.rejected,
                "new": stats.new,
            }

        return {
            "total": {
                "all": self.total.all,
                "accepted": self.total.accepted,
                "rejected": self.total.rejected,
                "new": self.total.new,
                "noAnswer": self.total.no_answer,
                "acceptanceRate": self.total.acceptance_rate,
                "rejectionRate": self.total.rejection_rate,
            },
            "today": period(self.today),
            "thisWeek": period(self.this_week),
            "thisMonth": period(self.this_month),
            "hourlyStats": [{"hour": h.hour, "count": h.count} for h in self.hourly_stats],
            "dailyStats": [{"date": d.date.isoformat(), "count": d.count} for d in self.daily_stats],
        }


def _count_status(requests: Sequence[Request], status: RequestStatus) -> int:
    return sum(1 for request in requests if request.status == status.value)


def _period_stats(requests: Sequence[Request]) -> PeriodStats:
    return PeriodStats(
        count=len(requests),
        accepted=_count_status(requests, RequestStatus.ACCEPTED),
        rejected=_count_status(requests, RequestStatus.REJECTED),
        new=_count_status(requests, RequestStatus.NEW),
    )


def compute_statistics(
    requests: Iterable[Request],
    now: datetime,
    daily_days: int = DEFAULT_DAILY_DAYS,
) -> RequestStatistics:
    """
    Compute the statistics snapshot for a request collection.

    Args:
        requests: Request collection (not mutated)
        now: Current instant (timezone-aware); its tzinfo defines local days and hours
        daily_days: Length of the trailing daily series, today included (>= 7)

    Returns:
        RequestStatistics

    Raises:
        ValueError: If now is naive or daily_days < 7
    """
    require_aware("now", now)
    if daily_days < MIN_DAILY_DAYS:
        raise ValueError(f"daily_days must be >= {MIN_DAILY_DAYS}")

    items = list(requests)
    tz = now.tzinfo
    today = now.date()

    local_times = [local_datetime(request.created_at, tz) for request in items]
    local_days = [moment.date() for moment in local_times]

    def in_period(window: DateWindow) -> List[Request]:
        return [request for request, day in zip(items, local_days) if in_window(day, window, today)]

    accepted = _count_status(items, RequestStatus.ACCEPTED)
    rejected = _count_status(items, RequestStatus.REJECTED)
    total = TotalStats(
        all=len(items),
        accepted=accepted,
        rejected=rejected,
        new=_count_status(items, RequestStatus.NEW),
        no_answer=_count_status(items, RequestStatus.NO_ANSWER),
        acceptance_rate=percentage(accepted, len(items)),
        rejection_rate=percentage(rejected, len(items)),
    )

    hour_counts = [0] * 24
    for moment in local_times:
        hour_counts[moment.hour] += 1

    first_day = today - timedelta(days=daily_days - 1)
    day_counts: Dict[date, int] = {first_day + timedelta(days=offset): 0 for offset in range(daily_days)}
    for day in local_days:
        if day in day_counts:
            day_counts[day] += 1

    return RequestStatistics(
        total=total,
        today=_period_stats(in_period(DateWindow.TODAY)),
        this_week=_period_stats(in_period(DateWindow.WEEK)),
        this_month=_period_stats(in_period(DateWindow.MONTH)),
        hourly_stats=[HourCount(hour=hour, count=count) for hour, count in enumerate(hour_counts)],
        daily_stats=[DayCount(date=day, count=count) for day, count in sorted(day_counts.items())],
    )


def peak_hour(hourly_stats: Sequence[HourCount]) -> HourCount:
    """
    Hour with the highest count.

    Left-to-right scan replacing the running maximum only on a strictly greater
    count, so ties resolve to the earliest hour.
    """

    if not hourly_stats:
        raise ValueError("hourly_stats must not be empty")
    best = hourly_stats[0]
    for entry in hourly_stats[1:]:
        if entry.count > best.count:
            best = entry
    return best


def average_per_day(stats: RequestStatistics) -> int:
    return round_half_up(stats.this_month.count / DAYS_PER_MONTH_DIVISOR)


def average_per_week(stats: RequestStatistics) -> int:
    return round_half_up(stats.this_week.count / DAYS_PER_WEEK_DIVISOR)


__all__ = [
    "DayCount",
    "HourCount",
    "PeriodStats",
    "RequestStatistics",
    "TotalStats",
    "average_per_day",
    "average_per_week",
    "compute_statistics",
    "peak_hour",
    "percentage",
    "round_half_up",
]
