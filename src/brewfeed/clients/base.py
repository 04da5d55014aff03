"""Base async HTTP client with rate limiting and connection pooling.

All upstream clients inherit from this base to ensure consistent behavior:
- Async/await for non-blocking I/O
- Connection pooling for performance
- Rate limiting to stay polite with the upstream source
- Automatic retries with exponential backoff
- Transport failures mapped to RemoteUnavailable, bad JSON to MalformedResponse

Usage:
    class MyAPIClient(BaseAsyncClient):
        def __init__(self, rate_limit: int = 10):
            super().__init__(
                base_url="https://api.example.com",
                rate_limit=rate_limit,
            )

        async def get_items(self) -> list:
            return await self.get("/items")
"""

import asyncio
import logging
from typing import Any

import httpx

from brewfeed.errors import MalformedResponse, RemoteUnavailable

logger = logging.getLogger(__name__)

# Retry configuration
_RETRYABLE_STATUS_CODES = {429, 502, 503, 504}
_MAX_RETRIES = 3
_BASE_BACKOFF = 1.0  # seconds


class RateLimiter:
    """Token bucket rate limiter for async operations.

    Args:
        rate: Maximum requests per second
    """

    def __init__(self, rate: int) -> None:
        self.rate = rate
        self.tokens = rate
        self.updated_at: float = 0.0
        self._initialized: bool = False
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Acquire a token, waiting if necessary."""
        async with self._lock:
            loop = asyncio.get_running_loop()

            if not self._initialized:
                self.updated_at = loop.time()
                self._initialized = True

            while self.tokens < 1:
                now = loop.time()
                elapsed = now - self.updated_at
                self.tokens = min(self.rate, self.tokens + elapsed * self.rate)
                self.updated_at = now

                if self.tokens < 1:
                    wait_time = (1 - self.tokens) / self.rate
                    await asyncio.sleep(wait_time)

            self.tokens -= 1
            self.updated_at = loop.time()


class BaseAsyncClient:
    """Base async HTTP client with rate limiting and connection pooling.

    Args:
        base_url: Base URL for all requests
        headers: Default headers for all requests
        rate_limit: Maximum requests per second (default: 10)
        timeout: Request timeout in seconds (default: 30)
        max_retries: Retries for transient failures (default: 3)
        backoff: Base backoff in seconds, doubled per attempt (default: 1.0)
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        rate_limit: int = 10,
        timeout: float = 30.0,
        max_retries: int = _MAX_RETRIES,
        backoff: float = _BASE_BACKOFF,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self._rate_limiter = RateLimiter(rate=rate_limit)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BaseAsyncClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            headers=self.headers,
            timeout=self.timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _backoff_for(self, attempt: int) -> float:
        return self.backoff * (2 ** attempt)

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an HTTP request with rate limiting, retries, and error handling.

        Retries on transient failures (429, 502, 503, 504, timeouts, network
        errors) with exponential backoff. Non-retryable errors raise immediately.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: Path relative to base_url ("" targets base_url itself)
            params: Query parameters

        Returns:
            Parsed JSON body, or None when the body is empty

        Raises:
            RemoteUnavailable: If the request fails after all retries
            MalformedResponse: If the body is not valid JSON
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with context manager.")

        # Ensure non-empty endpoint starts with /
        if endpoint and not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"

        last_error: RemoteUnavailable | None = None

        for attempt in range(self.max_retries + 1):
            # Rate limit before each attempt
            await self._rate_limiter.acquire()

            logger.debug(
                "%s %s%s params=%s (attempt %d/%d)",
                method, self.base_url, endpoint, params, attempt + 1, self.max_retries + 1,
            )

            try:
                response = await self._client.request(
                    method=method,
                    url=f"{self.base_url}{endpoint}",
                    params=params,
                )
            except httpx.TimeoutException as e:
                last_error = RemoteUnavailable(f"Request timeout: {e}")
                if attempt < self.max_retries:
                    backoff = self._backoff_for(attempt)
                    logger.warning(
                        "Timeout for %s%s, retrying in %.1fs (attempt %d/%d)",
                        self.base_url, endpoint, backoff, attempt + 1, self.max_retries + 1,
                    )
                    await asyncio.sleep(backoff)
                    continue
                logger.error("Request timeout for %s%s: %s", self.base_url, endpoint, e)
                raise last_error from e
            except httpx.TransportError as e:
                last_error = RemoteUnavailable(f"Network error: {e}")
                if attempt < self.max_retries:
                    backoff = self._backoff_for(attempt)
                    logger.warning(
                        "Network error for %s%s, retrying in %.1fs (attempt %d/%d)",
                        self.base_url, endpoint, backoff, attempt + 1, self.max_retries + 1,
                    )
                    await asyncio.sleep(backoff)
                    continue
                logger.error("Network error for %s%s: %s", self.base_url, endpoint, e)
                raise last_error from e

            logger.debug("Response: %d for %s%s", response.status_code, self.base_url, endpoint)

            if response.status_code >= 400:
                error_body = response.text[:500]
                last_error = RemoteUnavailable(
                    message=f"Upstream request failed: {response.status_code}",
                    status_code=response.status_code,
                    response_body=error_body,
                )

                if response.status_code in _RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                    backoff = self._backoff_for(attempt)
                    logger.warning(
                        "Retryable %d for %s%s, retrying in %.1fs (attempt %d/%d)",
                        response.status_code, self.base_url, endpoint, backoff,
                        attempt + 1, self.max_retries + 1,
                    )
                    await asyncio.sleep(backoff)
                    continue

                logger.error(
                    "Upstream error: %d %s%s - %s",
                    response.status_code, self.base_url, endpoint, error_body,
                )
                raise last_error

            if not response.text.strip():
                return None

            try:
                return response.json()
            except ValueError as e:
                logger.error("Failed to parse JSON response: %s", e)
                raise MalformedResponse(
                    f"Invalid JSON response: {e}",
                    response_body=response.text[:500],
                ) from e

        # Exhausted retries
        raise last_error or RemoteUnavailable("Request failed after retries")

    async def get(
        self,
        endpoint: str = "",
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Convenience method for GET requests."""
        return await self._request("GET", endpoint, params=params)
