"""
Pytest configuration and shared fixtures.

This file adds the project root to the Python path so that tests can import
the domain, repositories, services and api packages, and provides:

- `make_request`: factory for Request entities with sensible defaults
- `fake_supabase`: in-memory stand-in for the Supabase query builder, patched
  into every repository module
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.request import Request  # noqa: E402


@pytest.fixture
def make_request():
    """Build a Request; created_at defaults to 2026-10-19 09:00 UTC."""

    counter = {"value": 0}

    def factory(**overrides: Any) -> Request:
        counter["value"] += 1
        values: Dict[str, Any] = {
            "id": f"req-{counter['value']}",
            "created_at": datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc),
            "full_name": "Ivan Petrov",
            "phone": "+7 900 000-00-00",
        }
        values.update(overrides)
        return Request(**values)

    return factory


@dataclass
class FakeResponse:
    data: List[Dict[str, Any]]
    error: Optional[str] = None


@dataclass
class FakeQuery:
    """Minimal query builder: records the calls and filters rows on eq()."""

    store: "FakeSupabase"
    table_name: str
    action: str = "select"
    payload: Optional[Dict[str, Any]] = None
    filters: List[tuple] = field(default_factory=list)
    order_by: Optional[tuple] = None
    row_limit: Optional[int] = None

    def select(self, *_columns: str) -> "FakeQuery":
        self.action = "select"
        return self

    def insert(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.action = "insert"
        self.payload = dict(payload)
        return self

    def update(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.action = "update"
        self.payload = dict(payload)
        return self

    def delete(self) -> "FakeQuery":
        self.action = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (column, desc)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.row_limit = count
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self) -> FakeResponse:
        self.store.calls.append(self)
        if self.store.error:
            return FakeResponse(data=[], error=self.store.error)

        rows = self.store.tables.setdefault(self.table_name, [])
        if self.action == "insert":
            row = dict(self.payload or {})
            row.setdefault("id", f"{self.table_name}-{len(rows) + 1}")
            rows.append(row)
            return FakeResponse(data=[dict(row)])
        if self.action == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload or {})
                    updated.append(dict(row))
            return FakeResponse(data=updated)
        if self.action == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.store.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return FakeResponse(data=removed)

        result = [dict(row) for row in rows if self._matches(row)]
        if self.order_by is not None:
            column, desc = self.order_by
            result.sort(key=lambda row: row.get(column) or "", reverse=desc)
        if self.row_limit is not None:
            result = result[: self.row_limit]
        return FakeResponse(data=result)


@dataclass
class FakeSupabase:
    tables: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    calls: List[FakeQuery] = field(default_factory=list)
    error: Optional[str] = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(store=self, table_name=name)


@pytest.fixture
def fake_supabase(monkeypatch) -> FakeSupabase:
    """Replace get_client() in every repository module with an in-memory fake."""

    import repositories.company_repository as company_repository
    import repositories.courier_repository as courier_repository
    import repositories.request_repository as request_repository

    client = FakeSupabase()
    for module in (request_repository, company_repository, courier_repository):
        monkeypatch.setattr(module, "get_client", lambda: client)
    return client
