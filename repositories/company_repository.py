"""
Company repository (persistence).

CRUD for Company records. Deletion is hard and does not touch couriers that
reference the company.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping

from domain.company import Company
from repositories.client import get_client
from repositories.timestamps import parse_optional_utc_datetime, parse_utc_datetime, to_iso_utc

_COMPANIES_TABLE: str = "companies"

# Columns a caller may write; id and timestamps are managed here.
COMPANY_FIELDS = ("name", "description", "address", "phone", "email", "website", "is_active")


def _row_to_company(row: Mapping[str, Any]) -> Company:
    """Convert a Supabase row into a domain Company."""

    def get_text(key: str) -> str:
        value = row.get(key)
        return str(value) if value else ""

    return Company(
        id=str(row["id"]),
        name=get_text("name"),
        created_at=parse_utc_datetime(row["created_at"]),
        description=get_text("description"),
        address=get_text("address"),
        phone=get_text("phone"),
        email=get_text("email"),
        website=get_text("website"),
        # Only an explicit false deactivates a company
        is_active=row.get("is_active") is not False,
        updated_at=parse_optional_utc_datetime(row.get("updated_at")),
    )


def _writable(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(COMPANY_FIELDS)
    if unknown:
        raise ValueError(f"Unknown company field(s): {', '.join(sorted(unknown))}")
    return dict(fields)


def list_companies() -> List[Company]:
    """All companies ordered by name."""

    response = get_client().table(_COMPANIES_TABLE).select("*").order("name").execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to list companies: {error}")

    rows = getattr(response, "data", None) or []
    return [_row_to_company(row) for row in rows]


def get_company_by_id(company_id: str) -> Company | None:
    response = (
        get_client()
        .table(_COMPANIES_TABLE)
        .select("*")
        .eq("id", company_id)
        .limit(1)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to fetch company: {error}")

    rows = getattr(response, "data", None) or []
    if not rows:
        return None
    return _row_to_company(rows[0])


def insert_company(fields: Mapping[str, Any], now: datetime) -> Company:
    """
    Insert a company; created_at and updated_at are both set to `now`.

    Raises:
    - ValueError for fields outside COMPANY_FIELDS.
    - RuntimeError if Supabase returns an error response or no row.
    """

    payload = _writable(fields)
    payload.setdefault("is_active", True)
    payload["created_at"] = to_iso_utc(now)
    payload["updated_at"] = to_iso_utc(now)

    response = get_client().table(_COMPANIES_TABLE).insert(payload).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to insert company: {error}")

    rows = getattr(response, "data", None) or []
    if not rows:
        raise RuntimeError("Failed to insert company: no row returned")
    return _row_to_company(rows[0])


def update_company(company_id: str, fields: Mapping[str, Any], now: datetime) -> None:
    """Partial update; updated_at is always refreshed."""

    payload = _writable(fields)
    payload["updated_at"] = to_iso_utc(now)

    response = get_client().table(_COMPANIES_TABLE).update(payload).eq("id", company_id).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to update company: {error}")


def delete_company(company_id: str) -> None:
    response = get_client().table(_COMPANIES_TABLE).delete().eq("id", company_id).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to delete company: {error}")


__all__ = [
    "COMPANY_FIELDS",
    "delete_company",
    "get_company_by_id",
    "insert_company",
    "list_companies",
    "update_company",
]
