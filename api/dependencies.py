"""
Shared API dependencies.

The request collection is served from the latest snapshot pushed by the
request feed. Mutating endpoints refresh the feed, which pushes the fresh
collection to every subscriber (the snapshot included).
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import HTTPException

from api.settings import get_settings
from domain.request import Request
from repositories.request_repository import list_requests
from services.request_feed import RequestFeed, RequestSnapshot

logger = logging.getLogger(__name__)

request_feed = RequestFeed(loader=lambda: list_requests())
request_snapshot = RequestSnapshot(max_age_seconds=get_settings().snapshot_ttl_seconds)
request_feed.subscribe(request_snapshot.update)


def get_requests() -> List[Request]:
    """
    Current request collection; reads the store when the snapshot is empty or stale.

    Raises:
        HTTPException: 500 if the store cannot be read
    """

    cached = request_snapshot.get()
    if cached is not None:
        return cached
    try:
        return request_feed.refresh()
    except Exception as e:
        logger.exception("Failed to load requests")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to load requests: {str(e)}"
        )


def notify_requests_changed() -> None:
    """
    Reload the collection after a write and push it to subscribers.

    A failed reload drops the cached snapshot so the next read goes to the store.
    """

    try:
        request_feed.refresh()
    except Exception:
        logger.exception("Failed to reload requests after a write")
        request_snapshot.invalidate()


def get_locale() -> str:
    return get_settings().locale


__all__ = [
    "get_locale",
    "get_requests",
    "notify_requests_changed",
    "request_feed",
    "request_snapshot",
]
