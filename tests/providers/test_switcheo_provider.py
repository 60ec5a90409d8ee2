"""
Tests for the Switcheo price list provider

HTTP is served by httpx.MockTransport so no request leaves the process.
"""

import json

import httpx
import pytest

from swapdesk.core.swap import PriceSourceError
from swapdesk.providers.switcheo import SwitcheoPriceProvider


URL = "https://prices.test/prices.json"

PRICES = [
    {"currency": "BLUR", "date": "2023-08-29T07:10:40.000Z", "price": 0.20811525423728813},
    {"currency": "bNEO", "date": "2023-08-29T07:10:50.000Z", "price": 7.1282679},
]


def make_provider(handler) -> SwitcheoPriceProvider:
    return SwitcheoPriceProvider(URL, timeout_s=5, transport=httpx.MockTransport(handler))


def streamed_json(payload) -> httpx.Response:
    """Response whose body is read off a stream, like a real transport, so `elapsed` gets set."""
    return httpx.Response(200, stream=httpx.ByteStream(json.dumps(payload).encode()))


class TestFetchPrices:
    """Tests for fetch_prices()."""

    @pytest.mark.asyncio
    async def test_returns_records(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=PRICES)

        records = await make_provider(handler).fetch_prices()

        assert records == PRICES
        assert len(requests) == 1
        assert str(requests[0].url) == URL
        assert requests[0].method == "GET"

    @pytest.mark.asyncio
    async def test_skips_non_object_entries(self):
        payload = PRICES + ["garbage", 42, None]
        provider = make_provider(lambda request: httpx.Response(200, json=payload))

        assert await provider.fetch_prices() == PRICES

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        provider = make_provider(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(PriceSourceError) as exc_info:
            await provider.fetch_prices()

        assert URL in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(PriceSourceError):
            await make_provider(handler).fetch_prices()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        provider = make_provider(lambda request: httpx.Response(200, text="<html>not json</html>"))

        with pytest.raises(PriceSourceError) as exc_info:
            await provider.fetch_prices()

        assert "invalid JSON" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_object_instead_of_array(self):
        provider = make_provider(lambda request: httpx.Response(200, json={"prices": PRICES}))

        with pytest.raises(PriceSourceError) as exc_info:
            await provider.fetch_prices()

        assert "dict" in exc_info.value.message


class TestHealthCheck:
    """Tests for ready() and health_check()."""

    @pytest.mark.asyncio
    async def test_healthy(self):
        provider = make_provider(lambda request: streamed_json(PRICES))

        assert await provider.ready() is True
        health = await provider.health_check()

        assert health["status"] == "healthy"
        assert "latency_ms" in health

    @pytest.mark.asyncio
    async def test_error(self):
        provider = make_provider(lambda request: httpx.Response(503))

        health = await provider.health_check()

        assert health["status"] == "error"
        assert "503" in health["reason"]

    def test_defaults_come_from_settings(self):
        from swapdesk.config import settings

        provider = SwitcheoPriceProvider()

        assert provider.url == settings.price_source_url
        assert provider.timeout_s == settings.request_timeout_seconds
