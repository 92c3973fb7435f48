"""
Tests for the repository modules.

Row mapping is tested directly; query flows run against the in-memory
`fake_supabase` fixture from conftest.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from domain.request import RequestDraft
from repositories.client import get_client
from repositories.company_repository import (
    _row_to_company,
    delete_company,
    get_company_by_id,
    insert_company,
    list_companies,
    update_company,
)
from repositories.courier_repository import (
    _row_to_courier,
    get_courier_by_id,
    insert_courier,
    list_couriers,
    update_courier,
)
from repositories.request_repository import (
    _draft_to_row,
    _row_to_request,
    get_request_by_id,
    insert_request,
    list_requests,
    update_request_status,
)
from repositories.timestamps import parse_optional_utc_datetime, parse_utc_datetime, to_iso_utc

NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


class TestTimestamps:
    def test_parse_z_suffix(self):
        assert parse_utc_datetime("2026-10-19T09:00:00Z") == NOW

    def test_parse_naive_is_utc(self):
        assert parse_utc_datetime("2026-10-19T09:00:00") == NOW

    def test_parse_offset_normalized_to_utc(self):
        parsed = parse_utc_datetime("2026-10-19T12:00:00+03:00")
        assert parsed == NOW
        assert parsed.utcoffset().total_seconds() == 0

    def test_parse_optional(self):
        assert parse_optional_utc_datetime(None) is None
        assert parse_optional_utc_datetime("") is None

    def test_parse_unsupported_type(self):
        with pytest.raises(TypeError):
            parse_utc_datetime(12345)

    def test_to_iso_utc_rejects_naive(self):
        with pytest.raises(ValueError):
            to_iso_utc(datetime(2026, 10, 19))


class TestRequestRows:
    def test_row_with_missing_optional_fields(self):
        request = _row_to_request({"id": 7, "created_at": "2026-10-19T09:00:00Z"})

        assert request.id == "7"
        assert request.status == "new"
        assert request.priority == "medium"
        assert request.full_name == ""
        assert request.source == ""
        assert request.comment is None
        assert request.tags == ()
        assert request.updated_at is None

    def test_row_with_all_fields(self):
        request = _row_to_request(
            {
                "id": "r1",
                "created_at": "2026-10-19T09:00:00+00:00",
                "updated_at": "2026-10-19T10:00:00+00:00",
                "full_name": "Anna",
                "phone": "+7 900",
                "status": "accepted",
                "source": "google_search",
                "comment": "",
                "tags": ["vip"],
                "priority": "high",
            }
        )

        assert request.status == "accepted"
        assert request.comment == ""
        assert request.tags == ("vip",)
        assert request.priority == "high"

    def test_updated_at_before_created_at_is_clamped(self):
        """A skewed writer clock must not make the row unreadable."""

        request = _row_to_request(
            {
                "id": "r1",
                "created_at": "2026-10-19T09:00:00+00:00",
                "updated_at": "2026-10-19T08:59:59+00:00",
            }
        )

        assert request.updated_at == request.created_at

    def test_draft_to_row(self):
        row = _draft_to_row(RequestDraft(created_at=NOW, full_name="Anna", tags=("a",)))

        assert "id" not in row
        assert row["created_at"] == "2026-10-19T09:00:00+00:00"
        assert row["updated_at"] == row["created_at"]
        assert row["tags"] == ["a"]
        assert row["status"] == "new"


class TestRequestRepository:
    def test_insert_then_get(self, fake_supabase):
        created = insert_request(RequestDraft(created_at=NOW, full_name="Anna"))

        assert created.id
        assert get_request_by_id(created.id).full_name == "Anna"
        assert get_request_by_id("missing") is None

    def test_list_orders_newest_first(self, fake_supabase):
        fake_supabase.tables["requests"] = [
            {"id": "old", "created_at": "2026-10-01T09:00:00+00:00"},
            {"id": "new", "created_at": "2026-10-19T09:00:00+00:00"},
        ]

        assert [r.id for r in list_requests()] == ["new", "old"]
        assert fake_supabase.calls[-1].order_by == ("created_at", True)

    def test_list_survives_row_with_skewed_updated_at(self, fake_supabase):
        fake_supabase.tables["requests"] = [
            {"id": "ok", "created_at": "2026-10-18T09:00:00+00:00"},
            {
                "id": "skewed",
                "created_at": "2026-10-19T09:00:00+00:00",
                "updated_at": "2026-10-19T08:55:00+00:00",
            },
        ]

        requests = list_requests()

        assert [r.id for r in requests] == ["skewed", "ok"]
        assert requests[0].updated_at == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)

    def test_update_status(self, fake_supabase):
        fake_supabase.tables["requests"] = [{"id": "r1", "created_at": "2026-10-19T09:00:00+00:00"}]

        update_request_status("r1", "rejected", NOW)

        assert fake_supabase.tables["requests"][0]["status"] == "rejected"
        assert fake_supabase.tables["requests"][0]["updated_at"] == "2026-10-19T09:00:00+00:00"

    def test_error_response_raises(self, fake_supabase):
        fake_supabase.error = "permission denied"

        with pytest.raises(RuntimeError, match="permission denied"):
            list_requests()


class TestCompanyRepository:
    def test_row_is_active_defaults_true(self):
        company = _row_to_company({"id": "c1", "name": "X", "created_at": "2026-10-19T09:00:00Z"})
        assert company.is_active is True

        inactive = _row_to_company(
            {"id": "c1", "name": "X", "created_at": "2026-10-19T09:00:00Z", "is_active": False}
        )
        assert inactive.is_active is False

    def test_crud_flow(self, fake_supabase):
        company = insert_company({"name": "Fast Delivery", "phone": "+7 900 000-00-00"}, NOW)

        assert company.is_active is True
        assert [c.name for c in list_companies()] == ["Fast Delivery"]

        later = datetime(2026, 10, 20, tzinfo=timezone.utc)
        update_company(company.id, {"name": "Faster Delivery"}, later)
        updated = get_company_by_id(company.id)
        assert updated.name == "Faster Delivery"
        assert updated.updated_at == later

        delete_company(company.id)
        assert get_company_by_id(company.id) is None

    def test_unknown_field_raises(self, fake_supabase):
        with pytest.raises(ValueError):
            insert_company({"name": "X", "owner": "me"}, NOW)


class TestCourierRepository:
    def test_empty_company_id_reads_as_none(self):
        courier = _row_to_courier(
            {"id": "k1", "full_name": "A", "phone": "1", "created_at": "2026-10-19T09:00:00Z", "company_id": ""}
        )
        assert courier.company_id is None

    def test_detach_company_stores_null(self, fake_supabase):
        courier = insert_courier({"full_name": "Oleg", "phone": "+7 900 111-11-11", "company_id": "c1"}, NOW)
        assert courier.company_id == "c1"

        update_courier(courier.id, {"company_id": ""}, NOW)

        assert fake_supabase.tables["couriers"][0]["company_id"] is None
        assert get_courier_by_id(courier.id).company_id is None
        assert fake_supabase.calls[-1].table_name == "couriers"

    def test_list_orders_by_full_name(self, fake_supabase):
        fake_supabase.tables["couriers"] = [
            {"id": "k2", "full_name": "Boris", "phone": "1", "created_at": "2026-10-19T09:00:00Z"},
            {"id": "k1", "full_name": "Anna", "phone": "1", "created_at": "2026-10-19T09:00:00Z"},
        ]

        assert [c.full_name for c in list_couriers()] == ["Anna", "Boris"]


def test_get_client_requires_credentials(monkeypatch) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
    get_client.cache_clear()

    with pytest.raises(RuntimeError, match="SUPABASE_URL"):
        get_client()
