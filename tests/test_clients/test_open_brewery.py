"""Tests for Open Brewery DB client."""

import httpx
import pytest

from brewfeed.clients.open_brewery import DEFAULT_BASE_URL, OpenBreweryClient


class TestOpenBreweryClient:
    """Tests for Open Brewery DB client."""

    @pytest.mark.asyncio
    async def test_blank_filter_reads_base_collection(self, respx_mock):
        """Blank filter targets the base collection endpoint."""
        route = respx_mock.get(DEFAULT_BASE_URL).mock(
            return_value=httpx.Response(200, json=[{"name": "Alpha"}])
        )

        async with OpenBreweryClient() as client:
            result = await client.get_breweries()

        assert result == [{"name": "Alpha"}]
        assert route.called

    @pytest.mark.asyncio
    async def test_filter_appended_to_base_url(self, respx_mock):
        """Filter is appended as a path segment."""
        route = respx_mock.get(f"{DEFAULT_BASE_URL}/random").mock(
            return_value=httpx.Response(200, json=[{"name": "Beta"}])
        )

        async with OpenBreweryClient() as client:
            result = await client.get_breweries("/random/")

        assert result == [{"name": "Beta"}]
        assert route.called

    @pytest.mark.asyncio
    async def test_sends_json_accept_header(self, respx_mock):
        """Client asks for JSON."""
        route = respx_mock.get(DEFAULT_BASE_URL).mock(
            return_value=httpx.Response(200, json=[])
        )

        async with OpenBreweryClient() as client:
            await client.get_breweries()

        assert route.calls.last.request.headers["Accept"] == "application/json"
