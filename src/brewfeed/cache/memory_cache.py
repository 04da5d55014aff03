"""Process-local in-memory cache with absolute and sliding expiry.

Each entry has an absolute cutoff (written_at + ttl). When a sliding window
is configured, the entry also expires if it goes unread for longer than the
window; every hit renews the window but never past the absolute cutoff.

All operations are serialized by a lock so a reader never sees an entry that
is half-written.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached value with its expiry bookkeeping (monotonic seconds)."""

    key: str
    value: Any
    expires_at: float
    sliding: float | None
    last_access: float

    def is_expired(self, now: float) -> bool:
        if now >= self.expires_at:
            return True
        if self.sliding is not None and now >= self.last_access + self.sliding:
            return True
        return False


class MemoryCache:
    """Thread-safe in-memory cache.

    Args:
        default_sliding: Idle window applied to every entry (None = absolute only)
        clock: Monotonic time source in seconds (injectable for tests)
    """

    def __init__(
        self,
        default_sliding: timedelta | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.default_sliding = default_sliding

        # Statistics
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when missing or expired.

        A hit renews the sliding window.
        """
        if not key or not key.strip():
            logger.warning("Attempted to get cache value with empty key")
            return None

        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)

            if entry is None:
                self.misses += 1
                logger.debug("Cache MISS: %s", key)
                return None

            if entry.is_expired(now):
                del self._entries[key]
                self.misses += 1
                logger.debug("Cache MISS (expired): %s", key)
                return None

            entry.last_access = now
            self.hits += 1
            logger.debug("Cache HIT: %s", key)
            return entry.value

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        """Store value under key for at most ttl."""
        if not key or not key.strip():
            logger.warning("Attempted to set cache value with empty key")
            return
        if value is None:
            logger.warning("Attempted to cache None for key: %s", key)
            return
        if ttl.total_seconds() <= 0:
            logger.warning("Ignoring cache write for %s with non-positive ttl %s", key, ttl)
            return

        sliding = self.default_sliding.total_seconds() if self.default_sliding else None

        with self._lock:
            now = self._clock()
            self._entries[key] = CacheEntry(
                key=key,
                value=value,
                expires_at=now + ttl.total_seconds(),
                sliding=sliding,
                last_access=now,
            )
        logger.debug("Cached: %s (ttl=%s, sliding=%s)", key, ttl, self.default_sliding)

    def remove(self, key: str) -> None:
        """Drop key if present."""
        if not key or not key.strip():
            logger.warning("Attempted to remove cache value with empty key")
            return
        with self._lock:
            if self._entries.pop(key, None) is not None:
                logger.debug("Removed from cache: %s", key)

    def exists(self, key: str) -> bool:
        """True if key holds a live entry. Does not renew the sliding window."""
        if not key or not key.strip():
            return False
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return False
            return True

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cleared %d items from cache", count)

    def get_stats(self) -> dict[str, int]:
        """Hit/miss counters and current entry count."""
        with self._lock:
            return {
                "hits": self.hits,
                "misses": self.misses,
                "entries": len(self._entries),
            }
