"""
Request intake and status service.

Creates manually entered requests and changes request status. Status changes
are unrestricted: a request may move from "new" to any terminal status and
between terminal statuses. Terminal-to-terminal changes are logged so they can
be reviewed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from domain.request import (
    Request,
    RequestDraft,
    RequestPriority,
    RequestStatus,
    format_birth_date,
)
from domain.time import require_aware
from repositories.request_repository import (
    get_request_by_id,
    insert_request,
    update_request_status,
)

logger = logging.getLogger(__name__)

MANUAL_REFERRER = "manual_entry"
MANUAL_USER_AGENT = "CRM Manual Entry"
MANUAL_COMMENT = "Request created manually via CRM"


class RequestNotFoundError(LookupError):
    """Raised when a request id does not exist in the store."""
    pass


@dataclass(frozen=True, slots=True)
class StatusChange:
    request_id: str
    previous_status: str
    status: str
    updated_at: datetime

    @property
    def is_retransition(self) -> bool:
        """True when a terminal status is replaced by a different terminal status."""
        if self.previous_status == self.status:
            return False
        return _is_terminal(self.previous_status) and _is_terminal(self.status)


def _is_terminal(status: str) -> bool:
    # Values unknown to RequestStatus are never terminal
    try:
        return RequestStatus(status).is_terminal()
    except ValueError:
        return False


def build_manual_request(
    full_name: str,
    phone: str,
    birth_date: Optional[date],
    source: str,
    now: datetime,
) -> RequestDraft:
    """
    Build the draft stored for a request entered by hand in the back office.

    New requests always start in status "new" with medium priority, no
    assignee and no tags; created_at and updated_at are both `now` (in UTC).
    """
    require_aware("now", now)
    created_at = now.astimezone(timezone.utc)

    return RequestDraft(
        created_at=created_at,
        updated_at=created_at,
        full_name=(full_name or "").strip(),
        phone=(phone or "").strip(),
        birth_date=format_birth_date(birth_date) if birth_date else "",
        status=RequestStatus.NEW.value,
        source=source,
        comment=MANUAL_COMMENT,
        tags=(),
        assigned_to="",
        priority=RequestPriority.MEDIUM.value,
        referrer=MANUAL_REFERRER,
        user_agent=MANUAL_USER_AGENT,
    )


def create_manual_request(
    full_name: str,
    phone: str,
    birth_date: Optional[date],
    source: str,
    now: datetime,
) -> Request:
    """Build and store a manual request; returns it with its store-assigned id."""

    draft = build_manual_request(full_name, phone, birth_date, source, now)
    request = insert_request(draft)
    logger.info(
        "Manual request created",
        extra={"request_id": request.id, "source": request.source},
    )
    return request


def change_status(request_id: str, status: RequestStatus | str, now: datetime) -> StatusChange:
    """
    Set a request's status.

    Raises:
        ValueError: If status is not a RequestStatus value
        RequestNotFoundError: If the request does not exist
    """
    require_aware("now", now)
    new_status = RequestStatus(status).value

    current = get_request_by_id(request_id)
    if current is None:
        raise RequestNotFoundError(f"Request not found: {request_id}")

    # Never stamp an update earlier than the creation time written by another clock
    updated = current.with_status(new_status, max(now.astimezone(timezone.utc), current.created_at))
    update_request_status(request_id, updated.status, updated.updated_at)

    change = StatusChange(
        request_id=request_id,
        previous_status=current.status,
        status=updated.status,
        updated_at=updated.updated_at,
    )
    if change.is_retransition:
        logger.info(
            "Request moved between terminal statuses",
            extra={
                "request_id": request_id,
                "previous_status": change.previous_status,
                "status": change.status,
            },
        )
    return change


__all__ = [
    "MANUAL_COMMENT",
    "MANUAL_REFERRER",
    "MANUAL_USER_AGENT",
    "RequestNotFoundError",
    "StatusChange",
    "build_manual_request",
    "change_status",
    "create_manual_request",
]
