"""Orchestrator — cache → fetch → snapshot fallback → search → sort.

Read path for one request:
  1. Cache hit (non-empty) → working set, no fetch
  2. Miss → fetch; a non-empty result is cached and snapshotted
  3. Fetch failure → snapshot; empty snapshot raises NoDataSource
  4. Search, then sort the working set

Usage:
    orchestrator = Orchestrator.from_settings(settings)
    rows = await orchestrator.get_records(sort_by="name", search="denver")
"""

import logging
from datetime import timedelta

from brewfeed.cache import MemoryCache, SnapshotStore
from brewfeed.config import Settings
from brewfeed.engine import search_records, sort_records
from brewfeed.errors import NoDataSource
from brewfeed.models import DisplayRecord, SourceRecord
from brewfeed.pipeline.fetcher import Fetcher

logger = logging.getLogger(__name__)

CACHE_KEY = "brewery_data"
DEFAULT_CACHE_TTL = timedelta(minutes=10)


class Orchestrator:
    """Composes Fetcher, MemoryCache and SnapshotStore into one read operation.

    The cache and snapshot store are shared, process-wide objects owned by
    whoever builds the orchestrator. Concurrent calls are safe; concurrent
    cache misses may each fetch.

    Args:
        fetcher: Remote source reader
        cache: In-memory cache holding the working set
        snapshot_store: On-disk fallback
        cache_ttl: Absolute lifetime of a cached set (default: 10 minutes)
        fetch_filter: Filter passed to the fetcher ("" = base collection)
    """

    def __init__(
        self,
        fetcher: Fetcher,
        cache: MemoryCache,
        snapshot_store: SnapshotStore,
        cache_ttl: timedelta = DEFAULT_CACHE_TTL,
        fetch_filter: str = "",
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache
        self.snapshot_store = snapshot_store
        self.cache_ttl = cache_ttl
        self.fetch_filter = fetch_filter

    @classmethod
    def from_settings(cls, settings: Settings) -> "Orchestrator":
        """Build an orchestrator with default collaborators from configuration."""
        sliding = (
            timedelta(seconds=settings.cache_sliding_seconds)
            if settings.cache_sliding_seconds is not None
            else None
        )
        return cls(
            fetcher=Fetcher(
                base_url=settings.brewery_api_url,
                rate_limit=settings.rate_limit,
                timeout=settings.request_timeout,
                max_retries=settings.max_retries,
            ),
            cache=MemoryCache(default_sliding=sliding),
            snapshot_store=SnapshotStore(
                path=settings.snapshot_path,
                fmt=settings.snapshot_format,
            ),
            cache_ttl=timedelta(seconds=settings.cache_ttl_seconds),
            fetch_filter=settings.brewery_filter,
        )

    async def get_records(
        self,
        sort_by: str = "city",
        descending: bool = False,
        search: str | None = None,
    ) -> list[DisplayRecord]:
        """Return searched and sorted breweries.

        Args:
            sort_by: 'name', 'city' or 'phone'; anything else sorts by city
            descending: Reverse the sort order
            search: Case-insensitive substring over name, city and phone

        Returns:
            Ordered display records (possibly empty)

        Raises:
            NoDataSource: Fetch failed and no snapshot is available
        """
        logger.info(
            "Getting breweries (sort_by=%s, descending=%s, search=%r)",
            sort_by, descending, search,
        )

        working_set = await self._working_set()

        matched = search_records(working_set, search)
        result = sort_records(matched, sort_by, descending)

        logger.info("Returning %d breweries after search and sort", len(result))
        return result

    async def autocomplete(self, query: str, limit: int = 10) -> list[dict[str, str]]:
        """Suggest distinct (name, city) pairs matching query, in name order.

        Raises:
            ValueError: If query is blank or limit < 1
            NoDataSource: Fetch failed and no snapshot is available
        """
        if not query or not query.strip():
            raise ValueError("query is required")
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        records = await self.get_records(sort_by="name", descending=False, search=query)

        suggestions: list[dict[str, str]] = []
        seen: set[tuple[str, str]] = set()
        for record in records:
            pair = (record.name, record.city)
            if pair in seen:
                continue
            seen.add(pair)
            suggestions.append({"name": record.name, "city": record.city})
            if len(suggestions) >= limit:
                break
        return suggestions

    def invalidate(self) -> None:
        """Drop the cached working set so the next read refetches."""
        self.cache.remove(CACHE_KEY)
        logger.info("Invalidated cached brewery data")

    async def _working_set(self) -> list[SourceRecord]:
        cached = self.cache.get(CACHE_KEY)
        if cached:
            logger.debug("Using cached brewery data (%d breweries)", len(cached))
            return cached

        logger.debug("Cache miss, fetching from remote source")
        try:
            records = await self.fetcher.fetch(self.fetch_filter)
        except Exception as fetch_error:
            logger.warning("Remote fetch failed, attempting snapshot fallback: %s", fetch_error)
            return await self._fallback(fetch_error)

        if records:
            self.cache.set(CACHE_KEY, records, self.cache_ttl)
            await self.snapshot_store.save(records)
            logger.info("Fetched and cached %d breweries", len(records))
        else:
            logger.info("Remote source returned no breweries")
        return records

    async def _fallback(self, fetch_error: Exception) -> list[SourceRecord]:
        records = await self.snapshot_store.load()
        if not records:
            logger.error("No snapshot data available and remote fetch failed")
            raise NoDataSource(
                "Unable to retrieve brewery data from any source",
                cause=fetch_error,
            ) from fetch_error

        logger.info("Using snapshot data (%d breweries)", len(records))
        return records
