"""
Courier repository (persistence).

company_id is stored as-is; no check is made that the company exists.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping

from domain.courier import Courier
from repositories.client import get_client
from repositories.timestamps import parse_optional_utc_datetime, parse_utc_datetime, to_iso_utc

_COURIERS_TABLE: str = "couriers"

COURIER_FIELDS = ("full_name", "phone", "email", "company_id", "is_active")


def _row_to_courier(row: Mapping[str, Any]) -> Courier:
    """Convert a Supabase row into a domain Courier."""

    company_id = row.get("company_id")
    return Courier(
        id=str(row["id"]),
        full_name=str(row.get("full_name") or ""),
        phone=str(row.get("phone") or ""),
        created_at=parse_utc_datetime(row["created_at"]),
        email=str(row.get("email") or ""),
        # Empty string and NULL both mean "no company"
        company_id=str(company_id) if company_id else None,
        is_active=row.get("is_active") is not False,
        updated_at=parse_optional_utc_datetime(row.get("updated_at")),
    )


def _writable(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(COURIER_FIELDS)
    if unknown:
        raise ValueError(f"Unknown courier field(s): {', '.join(sorted(unknown))}")
    payload = dict(fields)
    if "company_id" in payload and not payload["company_id"]:
        payload["company_id"] = None
    return payload


def list_couriers() -> List[Courier]:
    """All couriers ordered by full name."""

    response = get_client().table(_COURIERS_TABLE).select("*").order("full_name").execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to list couriers: {error}")

    rows = getattr(response, "data", None) or []
    return [_row_to_courier(row) for row in rows]


def get_courier_by_id(courier_id: str) -> Courier | None:
    response = (
        get_client()
        .table(_COURIERS_TABLE)
        .select("*")
        .eq("id", courier_id)
        .limit(1)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to fetch courier: {error}")

    rows = getattr(response, "data", None) or []
    if not rows:
        return None
    return _row_to_courier(rows[0])


def insert_courier(fields: Mapping[str, Any], now: datetime) -> Courier:
    """
    Insert a courier; created_at and updated_at are both set to `now`.

    Raises:
    - ValueError for fields outside COURIER_FIELDS.
    - RuntimeError if Supabase returns an error response or no row.
    """

    payload = _writable(fields)
    payload.setdefault("is_active", True)
    payload["created_at"] = to_iso_utc(now)
    payload["updated_at"] = to_iso_utc(now)

    response = get_client().table(_COURIERS_TABLE).insert(payload).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to insert courier: {error}")

    rows = getattr(response, "data", None) or []
    if not rows:
        raise RuntimeError("Failed to insert courier: no row returned")
    return _row_to_courier(rows[0])


def update_courier(courier_id: str, fields: Mapping[str, Any], now: datetime) -> None:
    """Partial update; updated_at is always refreshed."""

    payload = _writable(fields)
    payload["updated_at"] = to_iso_utc(now)

    response = get_client().table(_COURIERS_TABLE).update(payload).eq("id", courier_id).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to update courier: {error}")


def delete_courier(courier_id: str) -> None:
    response = get_client().table(_COURIERS_TABLE).delete().eq("id", courier_id).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to delete courier: {error}")


__all__ = [
    "COURIER_FIELDS",
    "delete_courier",
    "get_courier_by_id",
    "insert_courier",
    "list_couriers",
    "update_courier",
]
