"""Open Brewery DB API client.

API Documentation: https://www.openbrewerydb.org/documentation

Usage:
    from brewfeed.clients.open_brewery import OpenBreweryClient

    async with OpenBreweryClient() as client:
        rows = await client.get_breweries()
        rows = await client.get_breweries("random")
"""

from typing import Any

from brewfeed.clients.base import BaseAsyncClient

DEFAULT_BASE_URL = "https://api.openbrewerydb.org/v1/breweries"


class OpenBreweryClient(BaseAsyncClient):
    """Async client for the Open Brewery DB collection endpoint.

    Args:
        base_url: Collection endpoint (default: public v1 breweries)
        rate_limit: Max requests per second (default: 5)
        timeout: Request timeout in seconds (default: 30)
        max_retries: Retries for transient failures (default: 3)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        rate_limit: int = 5,
        timeout: float = 30.0,
        max_retries: int = 3,
    ) -> None:
        super().__init__(
            base_url=base_url,
            headers={"Accept": "application/json"},
            rate_limit=rate_limit,
            timeout=timeout,
            max_retries=max_retries,
        )

    async def get_breweries(self, filter: str = "") -> Any:
        """Read the brewery collection.

        Args:
            filter: Path segment appended to the base URL. Blank reads
                the base collection endpoint.

        Returns:
            Raw decoded JSON (expected: list of brewery objects), or None
            for an empty body
        """
        filter = filter.strip().strip("/")
        return await self.get(f"/{filter}" if filter else "")
