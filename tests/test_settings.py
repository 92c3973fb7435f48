"""
Tests for `api/settings.py`.

Settings are cached per process, so every test clears the cache before and after.
"""

from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from api.settings import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in ("CRM_TIMEZONE", "CRM_LOCALE", "CRM_SNAPSHOT_TTL_SECONDS", "CRM_CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = get_settings()

    assert settings.timezone == ZoneInfo("UTC")
    assert settings.locale == "en"
    assert settings.snapshot_ttl_seconds == 30
    assert settings.cors_origins == ("*",)


def test_cors_origins_from_comma_separated_list(monkeypatch) -> None:
    monkeypatch.setenv("CRM_CORS_ORIGINS", "https://crm.example.com, https://admin.example.com,")

    assert get_settings().cors_origins == ("https://crm.example.com", "https://admin.example.com")


@pytest.mark.parametrize(
    "name, value",
    [
        ("CRM_CORS_ORIGINS", " , "),
        ("CRM_TIMEZONE", "Mars/Olympus"),
        ("CRM_LOCALE", "de"),
        ("CRM_SNAPSHOT_TTL_SECONDS", "soon"),
    ],
)
def test_invalid_value_raises(monkeypatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(RuntimeError, match=name):
        get_settings()
