"""
Request repository (persistence).

This module provides *only* persistence operations for the Request domain entity.
No business rules (filtering, grouping, statistics, status policy) belong here.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping

from domain.request import Request, RequestDraft
from repositories.client import get_client
from repositories.timestamps import parse_optional_utc_datetime, parse_utc_datetime, to_iso_utc

# Supabase table name for Request records.
# Keep this aligned with your database schema.
_REQUESTS_TABLE: str = "requests"


def _draft_to_row(draft: RequestDraft) -> dict[str, Any]:
    """Convert a RequestDraft to a Supabase insert payload (id is assigned by the database)."""

    return {
        "full_name": draft.full_name or "",
        "phone": draft.phone or "",
        "birth_date": draft.birth_date or "",
        "status": draft.status,
        "source": draft.source or "",
        "comment": draft.comment,
        "tags": list(draft.tags),
        "assigned_to": draft.assigned_to or "",
        "priority": draft.priority,
        "referrer": draft.referrer or "",
        "user_agent": draft.user_agent or "",
        "created_at": to_iso_utc(draft.created_at),
        "updated_at": to_iso_utc(draft.updated_at or draft.created_at),
    }


def _row_to_request(row: Mapping[str, Any]) -> Request:
    """Convert a Supabase row into a domain Request."""

    # Missing optional text fields read as empty strings
    def get_text(key: str) -> str:
        value = row.get(key)
        return str(value) if value else ""

    created_at = parse_utc_datetime(row["created_at"])
    updated_at = parse_optional_utc_datetime(row.get("updated_at"))
    # Writers with a skewed clock can store updated_at before created_at
    if updated_at is not None and updated_at < created_at:
        updated_at = created_at

    comment = row.get("comment")
    tags = row.get("tags") or []

    return Request(
        id=str(row["id"]),
        created_at=created_at,
        full_name=get_text("full_name"),
        phone=get_text("phone"),
        birth_date=get_text("birth_date"),
        status=get_text("status") or "new",
        source=get_text("source"),
        comment=str(comment) if comment is not None else None,
        tags=tuple(str(tag) for tag in tags),
        assigned_to=get_text("assigned_to"),
        priority=get_text("priority") or "medium",
        referrer=get_text("referrer"),
        user_agent=get_text("user_agent"),
        updated_at=updated_at,
    )


def _raise_on_error(response: Any, action: str) -> None:
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")


def list_requests() -> List[Request]:
    """
    Fetch the full request collection, newest first.

    This is the bulk read the analytics services operate on.
    """

    response = (
        get_client()
        .table(_REQUESTS_TABLE)
        .select("*")
        .order("created_at", desc=True)
        .execute()
    )
    _raise_on_error(response, "list requests")

    rows = getattr(response, "data", None) or []
    return [_row_to_request(row) for row in rows]


def get_request_by_id(request_id: str) -> Request | None:
    """
    Fetch a Request by ID.

    Returns:
    - Request if found
    - None if no record exists for the given ID
    """

    response = (
        get_client()
        .table(_REQUESTS_TABLE)
        .select("*")
        .eq("id", request_id)
        .limit(1)
        .execute()
    )
    _raise_on_error(response, "fetch request")

    rows = getattr(response, "data", None) or []
    if not rows:
        return None
    return _row_to_request(rows[0])


def insert_request(draft: RequestDraft) -> Request:
    """
    Insert a new request and return it with the id assigned by the database.

    Raises:
    - RuntimeError if Supabase returns an error response or no row.
    """

    response = get_client().table(_REQUESTS_TABLE).insert(_draft_to_row(draft)).execute()
    _raise_on_error(response, "insert request")

    rows = getattr(response, "data", None) or []
    if not rows:
        raise RuntimeError("Failed to insert request: no row returned")
    return _row_to_request(rows[0])


def update_request_status(request_id: str, status: str, updated_at: datetime) -> None:
    """Set the status of a request and refresh updated_at."""

    payload = {"status": status, "updated_at": to_iso_utc(updated_at)}
    response = get_client().table(_REQUESTS_TABLE).update(payload).eq("id", request_id).execute()
    _raise_on_error(response, "update request status")


__all__ = [
    "get_request_by_id",
    "insert_request",
    "list_requests",
    "update_request_status",
]
