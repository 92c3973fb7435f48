"""
Domain: Request (inbound lead) entity.

Contract excerpts implemented here:
- A Request is identified by an opaque id assigned by the store; it never changes.
- created_at is a UTC timestamp and is immutable.
- updated_at, when present, is a UTC timestamp and is never earlier than created_at.
- Every new Request starts in status "new". Any status may later be assigned;
  re-assignment between terminal statuses is permitted (no state machine).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple

from .labels import DEFAULT_LOCALE, text
from .time import require_utc_timestamp

BIRTH_DATE_FORMAT = "%d.%m.%Y"


class RequestStatus(str, Enum):
    NEW = "new"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    NO_ANSWER = "no_answer"

    def is_terminal(self) -> bool:
        return self is not RequestStatus.NEW


class RequestSource(str, Enum):
    YANDEX_SEARCH = "yandex_search"
    GOOGLE_SEARCH = "google_search"
    PHONE_CALL = "phone_call"


class RequestPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class Request:
    """
    Pure domain entity for an inbound request.

    Immutability:
    - Entities are frozen; mutations produce new instances (see `with_status`).

    Notes:
    - status and source are plain strings so that values unknown to this code
      (written by other clients of the store) survive a read. Known values are
      the members of RequestStatus / RequestSource.
    - Optional text fields default to empty strings; comment distinguishes
      "absent" (None) from empty.
    """

    id: str
    created_at: datetime
    full_name: str = ""
    phone: str = ""
    birth_date: str = ""
    status: str = RequestStatus.NEW.value
    source: str = ""
    comment: Optional[str] = None
    tags: Tuple[str, ...] = ()
    assigned_to: str = ""
    priority: str = RequestPriority.MEDIUM.value
    referrer: str = ""
    user_agent: str = ""
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if self.updated_at is not None:
            require_utc_timestamp("updated_at", self.updated_at)
            if self.updated_at < self.created_at:
                raise ValueError("updated_at must be >= created_at")

    def with_status(self, status: RequestStatus | str, updated_at: datetime) -> "Request":
        """Return a copy carrying the new status and a refreshed updated_at."""

        value = status.value if isinstance(status, RequestStatus) else RequestStatus(status).value
        return replace(self, status=value, updated_at=updated_at)


@dataclass(frozen=True, slots=True)
class RequestDraft:
    """A request not yet stored; the store assigns the id on insert."""

    created_at: datetime
    full_name: str = ""
    phone: str = ""
    birth_date: str = ""
    status: str = RequestStatus.NEW.value
    source: str = ""
    comment: Optional[str] = None
    tags: Tuple[str, ...] = ()
    assigned_to: str = ""
    priority: str = RequestPriority.MEDIUM.value
    referrer: str = ""
    user_agent: str = ""
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if self.updated_at is not None:
            require_utc_timestamp("updated_at", self.updated_at)


def parse_birth_date(birth_date: str) -> Optional[date]:
    """Parse a DD.MM.YYYY birth date; None when empty or malformed."""

    if not birth_date:
        return None
    try:
        return datetime.strptime(birth_date.strip(), BIRTH_DATE_FORMAT).date()
    except ValueError:
        return None


def format_birth_date(value: date) -> str:
    return value.strftime(BIRTH_DATE_FORMAT)


def age_on(birth_date: str, today: date) -> Optional[int]:
    """
    Whole years between the birth date and `today`.

    The birthday counts only once it has been reached in the current year.
    """

    born = parse_birth_date(birth_date)
    if born is None:
        return None
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def describe_birth_date(birth_date: str, today: date, locale: str = DEFAULT_LOCALE) -> str:
    """Render "DD.MM.YYYY (N years)"; the raw value is returned when it does not parse."""

    if not birth_date:
        return ""
    age = age_on(birth_date, today)
    if age is None:
        return birth_date
    return f"{birth_date} ({age} {text('years', locale)})"


__all__ = [
    "BIRTH_DATE_FORMAT",
    "Request",
    "RequestDraft",
    "RequestPriority",
    "RequestSource",
    "RequestStatus",
    "age_on",
    "describe_birth_date",
    "format_birth_date",
    "parse_birth_date",
]
