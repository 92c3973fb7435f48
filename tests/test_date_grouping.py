"""
Tests for `services/date_grouping_service.py`.

Covers contract rules:
- Only "new" requests are grouped; each appears in exactly one group.
- Groups are keyed by distinct local days and strictly descending.
- Labels are "Today", "Yesterday" or DD.MM.YYYY.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from services.date_grouping_service import day_label, group_new_requests_by_day

NOW = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)


def test_empty_input_gives_no_groups() -> None:
    assert group_new_requests_by_day([], NOW) == []


def test_groups_partition_new_requests_descending(make_request) -> None:
    requests = [
        make_request(id="a", created_at=NOW - timedelta(days=2)),
        make_request(id="b", created_at=NOW),
        make_request(id="c", created_at=NOW - timedelta(days=1)),
        make_request(id="d", created_at=NOW - timedelta(hours=1)),
        make_request(id="e", created_at=NOW, status="accepted"),
        make_request(id="f", created_at=NOW - timedelta(days=2), status="no_answer"),
    ]

    groups = group_new_requests_by_day(requests, NOW)

    assert [g.day for g in groups] == [date(2026, 10, 19), date(2026, 10, 18), date(2026, 10, 17)]
    assert [[r.id for r in g.requests] for g in groups] == [["b", "d"], ["c"], ["a"]]
    assert [g.count for g in groups] == [2, 1, 1]

    grouped_ids = [r.id for g in groups for r in g.requests]
    assert sorted(grouped_ids) == ["a", "b", "c", "d"]


def test_group_labels(make_request) -> None:
    requests = [
        make_request(created_at=NOW),
        make_request(created_at=NOW - timedelta(days=1)),
        make_request(created_at=NOW - timedelta(days=5)),
    ]

    labels = [g.label for g in group_new_requests_by_day(requests, NOW)]

    assert labels == ["Today", "Yesterday", "14.10.2026"]


def test_group_labels_ru() -> None:
    today = date(2026, 10, 19)

    assert day_label(today, today, "ru") == "Сегодня"
    assert day_label(date(2026, 10, 18), today, "ru") == "Вчера"
    assert day_label(date(2026, 1, 2), today, "ru") == "02.01.2026"


def test_grouping_uses_local_day(make_request) -> None:
    """22:30 UTC on the 18th belongs to the 19th in Moscow."""

    moscow_now = datetime(2026, 10, 19, 12, 0, tzinfo=ZoneInfo("Europe/Moscow"))
    request = make_request(created_at=datetime(2026, 10, 18, 22, 30, tzinfo=timezone.utc))

    groups = group_new_requests_by_day([request], moscow_now)

    assert groups[0].day == date(2026, 10, 19)
    assert groups[0].label == "Today"
