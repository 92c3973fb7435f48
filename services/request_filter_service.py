"""
Request filtering service.

Applies free-text, status and relative date-window predicates to an in-memory
request collection. Predicates are conjunctive; inactive predicates are skipped.

The result is a stable subsequence of the input: no re-sorting, no duplicates.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List

from domain.date_window import DateWindow, in_window
from domain.request import Request, RequestStatus
from domain.time import local_day, require_aware

ALL_STATUSES = "all"


@dataclass(frozen=True, slots=True)
class RequestFilter:
    """
    Filter configuration.

    - text_query: active when non-blank after trimming.
    - status: "all" or a RequestStatus value.
    - date_window: a DateWindow value ("all", "today", "week", "month").
    """

    text_query: str = ""
    status: str = ALL_STATUSES
    date_window: DateWindow = DateWindow.ALL

    def __post_init__(self) -> None:
        if self.status != ALL_STATUSES:
            # Raises ValueError for unknown statuses.
            object.__setattr__(self, "status", RequestStatus(self.status).value)
        object.__setattr__(self, "date_window", DateWindow(self.date_window))

    @property
    def normalized_query(self) -> str:
        return (self.text_query or "").strip().lower()

    @property
    def is_identity(self) -> bool:
        """True when no predicate is active."""
        return (
            not self.normalized_query
            and self.status == ALL_STATUSES
            and self.date_window is DateWindow.ALL
        )


def matches_text(request: Request, query: str) -> bool:
    """
    Case-insensitive substring match on full name, phone and comment.

    `query` must already be trimmed and lower-cased. Comment is only checked
    when present.
    """

    if query in (request.full_name or "").lower():
        return True
    if query in (request.phone or "").lower():
        return True
    return bool(request.comment) and query in request.comment.lower()


def filter_requests(
    requests: Iterable[Request],
    request_filter: RequestFilter,
    now: datetime,
) -> List[Request]:
    """
    Return the requests satisfying every active predicate, in input order.

    Args:
        requests: Request collection as fetched from the store
        request_filter: Filter configuration
        now: Current instant (timezone-aware); its tzinfo defines the local day

    Example:
        visible = filter_requests(requests, RequestFilter(text_query="22"), now)
    """
    require_aware("now", now)

    query = request_filter.normalized_query
    status = request_filter.status
    window = request_filter.date_window
    tz = now.tzinfo
    today = now.date()

    result: List[Request] = []
    for request in requests:
        if query and not matches_text(request, query):
            continue
        if status != ALL_STATUSES and request.status != status:
            continue
        if window is not DateWindow.ALL and not in_window(local_day(request.created_at, tz), window, today):
            continue
        result.append(request)
    return result


__all__ = ["ALL_STATUSES", "RequestFilter", "filter_requests", "matches_text"]
