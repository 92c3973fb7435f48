"""
API settings.

Read from environment variables (a .env file at the project root is loaded
first):

- CRM_TIMEZONE: IANA time zone defining "today" and local hours (default: UTC)
- CRM_LOCALE: default label locale, "en" or "ru" (default: en)
- CRM_SNAPSHOT_TTL_SECONDS: how long a request snapshot is served before the
  store is read again (default: 30)
- CRM_CORS_ORIGINS: comma-separated origins allowed to call the API
  (default: *)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from domain.labels import DEFAULT_LOCALE, require_locale

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


@dataclass(frozen=True, slots=True)
class Settings:
    timezone: ZoneInfo
    locale: str
    snapshot_ttl_seconds: float
    cors_origins: Tuple[str, ...]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load settings once per process.

    Raises:
        RuntimeError: If a variable holds an invalid value
    """

    tz_name = os.getenv("CRM_TIMEZONE", "UTC")
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise RuntimeError(
            f"Invalid CRM_TIMEZONE '{tz_name}'. Use an IANA name such as 'Europe/Moscow'."
        ) from e

    locale = os.getenv("CRM_LOCALE", DEFAULT_LOCALE)
    try:
        require_locale(locale)
    except ValueError as e:
        raise RuntimeError(f"Invalid CRM_LOCALE: {e}") from e

    ttl_text = os.getenv("CRM_SNAPSHOT_TTL_SECONDS", "30")
    try:
        ttl = float(ttl_text)
    except ValueError as e:
        raise RuntimeError(f"Invalid CRM_SNAPSHOT_TTL_SECONDS '{ttl_text}': expected a number") from e

    origins = tuple(
        origin.strip() for origin in os.getenv("CRM_CORS_ORIGINS", "*").split(",") if origin.strip()
    )
    if not origins:
        raise RuntimeError("CRM_CORS_ORIGINS must list at least one origin (or '*')")

    return Settings(timezone=tz, locale=locale, snapshot_ttl_seconds=ttl, cors_origins=origins)


def get_now() -> datetime:
    """Current instant in the configured time zone."""

    return datetime.now(get_settings().timezone)


__all__ = ["Settings", "get_now", "get_settings"]
