"""
Realtime request feed.

Push-based refresh for consumers of the request collection: each subscriber
receives the full, fresh collection every time it changes. The feed itself
keeps no derived state; subscribers recompute filters and statistics
synchronously on each push.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional, Sequence

from domain.request import Request

logger = logging.getLogger(__name__)

Subscriber = Callable[[List[Request]], None]
Loader = Callable[[], Sequence[Request]]


class RequestFeed:
    """
    Observer registry for request snapshots.

    Example:
        feed = RequestFeed(loader=list_requests)
        unsubscribe = feed.subscribe(lambda requests: print(len(requests)))
        feed.refresh()   # loads and pushes to every subscriber
        unsubscribe()
    """

    def __init__(self, loader: Optional[Loader] = None) -> None:
        self._loader = loader
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that removes it again."""

        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, requests: Sequence[Request]) -> None:
        """
        Push a snapshot to every subscriber.

        Each subscriber receives its own list copy. A subscriber that raises is
        logged and skipped; the remaining subscribers still receive the snapshot.
        """

        with self._lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(list(requests))
            except Exception:
                logger.exception(
                    "Request feed subscriber failed",
                    extra={"subscriber": getattr(callback, "__name__", repr(callback))},
                )

    def refresh(self) -> List[Request]:
        """
        Load the current collection and publish it.

        Raises:
            RuntimeError: If the feed was created without a loader
        """

        if self._loader is None:
            raise RuntimeError("RequestFeed has no loader configured")
        requests = list(self._loader())
        self.publish(requests)
        return requests


class RequestSnapshot:
    """
    Latest collection pushed by a RequestFeed.

    Subscribe `update` to a feed; `get` returns the cached collection, or None
    when nothing was received yet or the snapshot is older than `max_age_seconds`
    (None disables expiry).
    """

    def __init__(
        self,
        max_age_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_age_seconds = max_age_seconds
        self._clock = clock
        self._requests: Optional[List[Request]] = None
        self._received_at: float = 0.0
        self._lock = threading.Lock()

    def update(self, requests: List[Request]) -> None:
        with self._lock:
            self._requests = list(requests)
            self._received_at = self._clock()

    def invalidate(self) -> None:
        with self._lock:
            self._requests = None

    def get(self) -> Optional[List[Request]]:
        with self._lock:
            if self._requests is None:
                return None
            if self._max_age_seconds is not None and self._clock() - self._received_at > self._max_age_seconds:
                return None
            return list(self._requests)


__all__ = ["RequestFeed", "RequestSnapshot", "Subscriber"]
