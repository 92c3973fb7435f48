"""
Domain: Company accounts.

A Company has an independent lifecycle. Deletion is hard and does not cascade:
couriers may keep referencing a deleted company id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from .labels import DEFAULT_LOCALE, text
from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class Company:
    """Company record. `name` is unique by convention only."""

    id: str
    name: str
    created_at: datetime
    description: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    is_active: bool = True
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if self.updated_at is not None:
            require_utc_timestamp("updated_at", self.updated_at)
            if self.updated_at < self.created_at:
                raise ValueError("updated_at must be >= created_at")


def find_company(company_id: Optional[str], companies: Iterable[Company]) -> Optional[Company]:
    """Linear scan for a company by id."""

    if not company_id:
        return None
    for company in companies:
        if company.id == company_id:
            return company
    return None


def resolve_company_name(
    company_id: Optional[str],
    companies: Iterable[Company],
    locale: str = DEFAULT_LOCALE,
) -> str:
    """
    Resolve a courier's weak company reference to a display name.

    - empty id -> "Not assigned"
    - dangling id (company deleted or never existed) -> "Company not found"
    """

    if not company_id:
        return text("company_not_assigned", locale)
    company = find_company(company_id, companies)
    if company is None:
        return text("company_not_found", locale)
    return company.name


__all__ = ["Company", "find_company", "resolve_company_name"]
