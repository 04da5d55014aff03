"""Caching layer for brewfeed.

In-memory TTL cache for the live record set and an on-disk snapshot used as
a fallback when the remote source is down.
"""

from brewfeed.cache.memory_cache import CacheEntry, MemoryCache
from brewfeed.cache.snapshot_store import SnapshotStore

__all__ = ["CacheEntry", "MemoryCache", "SnapshotStore"]
