"""
In-memory view cache.

Holds recent reads (period lists, period records) for a short freshness
window so repeated renders do not refetch. Writes invalidate entries through
the ViewCachePort methods.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from threading import Lock
from typing import Any

from koperasi.components.period import ClockPort

from .clock import SystemClock

logger = logging.getLogger(__name__)


class InMemoryViewCache:
    """Key/value cache with a freshness window, keyed by request path."""

    def __init__(self, ttl_seconds: float = 60.0, clock: ClockPort | None = None) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock if clock is not None else SystemClock()
        self._entries: dict[str, tuple[datetime, Any]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock.now_utc() - stored_at >= self._ttl:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        if self._ttl <= timedelta(0):
            return
        with self._lock:
            self._entries[key] = (self._clock.now_utc(), value)

    def invalidate(self, key: str) -> None:
        with self._lock:
            if self._entries.pop(key, None) is not None:
                logger.debug("View cache dropped %s", key)

    def invalidate_prefix(self, prefix: str) -> None:
        with self._lock:
            stale = [key for key in self._entries if key.startswith(prefix)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("View cache dropped %d entries under %s", len(stale), prefix)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
