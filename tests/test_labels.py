"""
Tests for `domain/labels.py`.
"""

from __future__ import annotations

import pytest

from domain.labels import (
    SUPPORTED_LOCALES,
    labels,
    priority_display_name,
    require_locale,
    source_display_name,
    source_from_display_name,
    status_display_name,
    status_from_display_name,
    text,
)
from domain.request import RequestSource, RequestStatus


def test_every_locale_has_the_same_keys() -> None:
    """Verify no locale is missing a label another locale has."""

    groups = ("status", "source", "priority", "text", "column", "summary")
    for group in groups:
        reference = set(labels(group, "en"))
        for locale in SUPPORTED_LOCALES:
            assert set(labels(group, locale)) == reference, (group, locale)


def test_unsupported_locale_raises() -> None:
    with pytest.raises(ValueError):
        require_locale("de")
    with pytest.raises(ValueError):
        text("today", "de")


@pytest.mark.parametrize("locale", SUPPORTED_LOCALES)
@pytest.mark.parametrize("status", [s.value for s in RequestStatus])
def test_status_display_name_round_trip(locale: str, status: str) -> None:
    """Verify the inverse lookup recovers every known status."""

    assert status_from_display_name(status_display_name(status, locale), locale) == status


@pytest.mark.parametrize("locale", SUPPORTED_LOCALES)
@pytest.mark.parametrize("source", [s.value for s in RequestSource] + [""])
def test_source_display_name_round_trip(locale: str, source: str) -> None:
    """Verify the inverse lookup recovers every known source, including the empty one."""

    assert source_from_display_name(source_display_name(source, locale), locale) == source


def test_display_names() -> None:
    assert status_display_name("no_answer") == "No answer"
    assert status_display_name("accepted", "ru") == "Принята"
    assert source_display_name("phone_call") == "Phone call"
    assert source_display_name("") == "Not specified"
    assert source_display_name(None, "ru") == "Не указан"


def test_unknown_values_pass_through() -> None:
    assert status_display_name("archived") == "archived"
    assert source_display_name("telegram") == "telegram"
    assert status_from_display_name("Archived") == "Archived"


@pytest.mark.parametrize(
    "priority, expected",
    [("high", "High"), ("low", "Low"), ("medium", "Medium"), ("", "Medium"), (None, "Medium"), ("urgent", "Medium")],
)
def test_priority_display_name_defaults_to_medium(priority, expected) -> None:
    assert priority_display_name(priority) == expected
