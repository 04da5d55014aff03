"""Fetcher — Open Brewery DB → SourceRecords.

Reads the brewery collection and validates it into typed records at the
boundary. Transport failures surface as RemoteUnavailable, unparseable
payloads as MalformedResponse. An empty payload is a successful empty read.
"""

import logging
from typing import Any

from pydantic import ValidationError

from brewfeed.clients import OpenBreweryClient
from brewfeed.clients.open_brewery import DEFAULT_BASE_URL
from brewfeed.errors import FetchError, MalformedResponse, RemoteUnavailable
from brewfeed.models import SourceRecord, SourceRecordList

logger = logging.getLogger(__name__)


class Fetcher:
    """Fetches brewery records from the remote source.

    A fresh client is opened per fetch as an async context manager.

    Usage:
        fetcher = Fetcher(base_url="https://api.openbrewerydb.org/v1/breweries")
        records = await fetcher.fetch()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        rate_limit: int = 5,
        timeout: float = 30.0,
        max_retries: int = 3,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.rate_limit = rate_limit
        self.timeout = timeout
        self.max_retries = max_retries

    def _client(self) -> OpenBreweryClient:
        return OpenBreweryClient(
            base_url=self.base_url,
            rate_limit=self.rate_limit,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )

    async def fetch(self, filter: str = "") -> list[SourceRecord]:
        """Fetch and parse brewery records.

        Args:
            filter: Path segment appended to the base URL ("" = base collection)

        Returns:
            Parsed records; empty if the source has none

        Raises:
            RemoteUnavailable: Network or transport failure
            MalformedResponse: Payload is not a list of brewery objects
        """
        logger.info("Fetching brewery data from %s (filter=%r)", self.base_url, filter)

        try:
            async with self._client() as client:
                payload = await client.get_breweries(filter)
        except FetchError:
            raise
        except Exception as e:
            logger.error("Unexpected error fetching brewery data: %s", e)
            raise RemoteUnavailable(f"Unexpected error: {e}") from e

        records = self._parse(payload)
        logger.info("Fetched %d breweries", len(records))
        return records

    @staticmethod
    def _parse(payload: Any) -> list[SourceRecord]:
        if payload is None:
            logger.warning("Empty response received from brewery API")
            return []
        if not isinstance(payload, list):
            raise MalformedResponse(
                f"Expected a JSON array of breweries, got {type(payload).__name__}",
                response_body=str(payload)[:500],
            )
        try:
            return SourceRecordList.validate_python(payload)
        except ValidationError as e:
            logger.error("Brewery payload failed validation: %s", e)
            raise MalformedResponse(
                f"Invalid brewery payload: {e.error_count()} validation error(s)",
                response_body=str(payload)[:500],
            ) from e
