"""
Date grouping service.

Buckets the still-unprocessed ("new") requests by the local calendar day they
were created on, most recent day first, and labels each bucket for display.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List

from domain.labels import DEFAULT_LOCALE, require_locale, text
from domain.request import Request, RequestStatus
from domain.time import local_day, require_aware

GROUP_DATE_FORMAT = "%d.%m.%Y"


@dataclass(frozen=True, slots=True)
class DayGroup:
    """Requests created on one local calendar day."""

    day: date
    label: str
    requests: List[Request] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.requests)


def day_label(day: date, today: date, locale: str = DEFAULT_LOCALE) -> str:
    """Label a day as "Today", "Yesterday" or its DD.MM.YYYY date."""

    if day == today:
        return text("today", locale)
    if day == today - timedelta(days=1):
        return text("yesterday", locale)
    return day.strftime(GROUP_DATE_FORMAT)


def group_new_requests_by_day(
    requests: Iterable[Request],
    now: datetime,
    locale: str = DEFAULT_LOCALE,
) -> List[DayGroup]:
    """
    Partition the status == "new" requests by local creation day.

    Groups are strictly descending by day; within a group the source order is
    kept. Requests in any other status are ignored. Empty input gives [].
    """
    require_aware("now", now)
    require_locale(locale)

    tz = now.tzinfo
    buckets: Dict[date, List[Request]] = {}
    for request in requests:
        if request.status != RequestStatus.NEW.value:
            continue
        buckets.setdefault(local_day(request.created_at, tz), []).append(request)

    today = now.date()
    return [
        DayGroup(day=day, label=day_label(day, today, locale), requests=buckets[day])
        for day in sorted(buckets, reverse=True)
    ]


__all__ = ["DayGroup", "day_label", "group_new_requests_by_day"]
