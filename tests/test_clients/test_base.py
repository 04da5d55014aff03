"""Tests for base async client."""

import asyncio

import httpx
import pytest

from brewfeed.clients.base import BaseAsyncClient, RateLimiter
from brewfeed.errors import MalformedResponse, RemoteUnavailable

BASE = "https://api.example.com"


class TestRateLimiter:
    """Tests for token bucket rate limiter."""

    @pytest.mark.asyncio
    async def test_allows_requests_under_limit(self):
        """Rate limiter should allow requests under the limit."""
        limiter = RateLimiter(rate=10)

        for _ in range(5):
            await limiter.acquire()

    @pytest.mark.asyncio
    async def test_blocks_when_over_limit(self):
        """Rate limiter should block when over limit."""
        limiter = RateLimiter(rate=2)
        loop = asyncio.get_running_loop()

        start = loop.time()
        await limiter.acquire()
        await limiter.acquire()
        first_duration = loop.time() - start

        start = loop.time()
        await limiter.acquire()
        third_duration = loop.time() - start

        assert first_duration < 0.1
        assert third_duration > 0.3


class TestBaseAsyncClient:
    """Tests for base async HTTP client."""

    @pytest.mark.asyncio
    async def test_context_manager_lifecycle(self, respx_mock):
        """Client should properly initialize and cleanup."""
        respx_mock.get(f"{BASE}/test").mock(
            return_value=httpx.Response(200, json=[{"name": "ok"}])
        )

        async with BaseAsyncClient(base_url=BASE) as client:
            assert client._client is not None
            result = await client.get("/test")
            assert result == [{"name": "ok"}]

        assert client._client is None

    @pytest.mark.asyncio
    async def test_raises_if_used_without_context_manager(self):
        """Client should raise if used without async with."""
        client = BaseAsyncClient(base_url=BASE)

        with pytest.raises(RuntimeError, match="not initialized"):
            await client.get("/test")

    @pytest.mark.asyncio
    async def test_empty_endpoint_targets_base_url(self, respx_mock):
        """An empty endpoint requests the base URL itself."""
        route = respx_mock.get(f"{BASE}/v1/items").mock(
            return_value=httpx.Response(200, json=[])
        )

        async with BaseAsyncClient(base_url=f"{BASE}/v1/items/") as client:
            assert await client.get() == []
        assert route.called

    @pytest.mark.asyncio
    async def test_request_adds_leading_slash(self, respx_mock):
        """Requests should work with or without leading slash."""
        respx_mock.get(f"{BASE}/test").mock(
            return_value=httpx.Response(200, json={"data": "value"})
        )

        async with BaseAsyncClient(base_url=BASE) as client:
            assert await client.get("/test") == {"data": "value"}
            assert await client.get("test") == {"data": "value"}

    @pytest.mark.asyncio
    async def test_http_error_raises_remote_unavailable(self, respx_mock):
        """HTTP errors map to RemoteUnavailable with status and body."""
        respx_mock.get(f"{BASE}/error").mock(
            return_value=httpx.Response(404, text="Not Found")
        )

        async with BaseAsyncClient(base_url=BASE) as client:
            with pytest.raises(RemoteUnavailable) as exc_info:
                await client.get("/error")

        assert exc_info.value.status_code == 404
        assert "Not Found" in exc_info.value.response_body

    @pytest.mark.asyncio
    async def test_invalid_json_raises_malformed_response(self, respx_mock):
        """Non-JSON bodies map to MalformedResponse."""
        respx_mock.get(f"{BASE}/invalid").mock(
            return_value=httpx.Response(200, text="not json")
        )

        async with BaseAsyncClient(base_url=BASE) as client:
            with pytest.raises(MalformedResponse, match="Invalid JSON"):
                await client.get("/invalid")

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self, respx_mock):
        """An empty body is not a parse failure."""
        respx_mock.get(f"{BASE}/empty").mock(return_value=httpx.Response(200, text=""))

        async with BaseAsyncClient(base_url=BASE) as client:
            assert await client.get("/empty") is None


class TestRetryLogic:
    """Tests for retry with exponential backoff."""

    @pytest.mark.asyncio
    async def test_retries_on_503(self, respx_mock):
        """Client retries on 503 Service Unavailable."""
        route = respx_mock.get(f"{BASE}/unavailable")
        route.side_effect = [
            httpx.Response(503, text="Service Unavailable"),
            httpx.Response(200, json={"recovered": True}),
        ]

        async with BaseAsyncClient(base_url=BASE, backoff=0) as client:
            result = await client.get("/unavailable")

        assert result == {"recovered": True}
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_no_retry_on_404(self, respx_mock):
        """Client does NOT retry on 404 Not Found."""
        route = respx_mock.get(f"{BASE}/missing")
        route.mock(return_value=httpx.Response(404, text="Not Found"))

        async with BaseAsyncClient(base_url=BASE, backoff=0) as client:
            with pytest.raises(RemoteUnavailable):
                await client.get("/missing")

        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_exhausts_retries(self, respx_mock):
        """Client raises after exhausting all retries."""
        route = respx_mock.get(f"{BASE}/always-fail")
        route.mock(return_value=httpx.Response(503, text="Down"))

        async with BaseAsyncClient(base_url=BASE, backoff=0, max_retries=2) as client:
            with pytest.raises(RemoteUnavailable) as exc_info:
                await client.get("/always-fail")

        assert exc_info.value.status_code == 503
        # 1 initial + 2 retries
        assert route.call_count == 3

    @pytest.mark.asyncio
    async def test_retries_on_timeout(self, respx_mock):
        """Client retries on timeout exceptions."""
        route = respx_mock.get(f"{BASE}/slow")
        route.side_effect = [
            httpx.ReadTimeout("Connection timed out"),
            httpx.Response(200, json={"slow_but_ok": True}),
        ]

        async with BaseAsyncClient(base_url=BASE, backoff=0) as client:
            result = await client.get("/slow")

        assert result == {"slow_but_ok": True}
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_network_error_after_retries(self, respx_mock):
        """Persistent connection failures raise RemoteUnavailable."""
        route = respx_mock.get(f"{BASE}/down")
        route.side_effect = httpx.ConnectError("Connection refused")

        async with BaseAsyncClient(base_url=BASE, backoff=0, max_retries=1) as client:
            with pytest.raises(RemoteUnavailable, match="Network error"):
                await client.get("/down")

        assert route.call_count == 2
