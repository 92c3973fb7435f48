"""
Domain: Courier accounts.

company_id is an optional, weak reference into the Company collection. It is a
lookup key, not ownership: companies do not track their couriers and no
referential integrity is enforced.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class Courier:
    id: str
    full_name: str
    phone: str
    created_at: datetime
    email: str = ""
    company_id: Optional[str] = None
    is_active: bool = True
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if self.updated_at is not None:
            require_utc_timestamp("updated_at", self.updated_at)
            if self.updated_at < self.created_at:
                raise ValueError("updated_at must be >= created_at")


def count_active_couriers(company_id: str, couriers: Iterable[Courier]) -> int:
    """Number of active couriers referencing `company_id`."""

    return sum(1 for courier in couriers if courier.company_id == company_id and courier.is_active)


__all__ = ["Courier", "count_active_couriers"]
