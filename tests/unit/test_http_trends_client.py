"""Tests for the HTTP upstream client."""

from datetime import datetime, timezone

import httpx
import pytest

from trends_gateway.adapters.implementations.http_trends import HttpTrendsClient
from trends_gateway.core.exceptions import UpstreamRequestError
from trends_gateway.infrastructure.error.handler import ErrorCategory, categorize_error

URL = "http://upstream.test/api/interest-over-time"


def make_client(handler) -> HttpTrendsClient:
    return HttpTrendsClient(URL, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestBuildParams:
    def test_repeated_keyword_params(self):
        params = HttpTrendsClient.build_params(["ai", "robots"], "GB")
        assert params == [("keyword", "ai"), ("keyword", "robots"), ("geo", "GB")]

    def test_time_window(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        params = HttpTrendsClient.build_params(["ai"], "US", start_time=start)
        assert ("startTime", "2024-01-01T00:00:00+00:00") in params
        assert all(key != "endTime" for key, _ in params)


class TestClientLifecycle:
    @pytest.mark.asyncio
    async def test_http_client_created_on_first_use(self):
        client = HttpTrendsClient(URL, timeout=2.5)

        assert client._http_client is None
        assert isinstance(client.http_client, httpx.AsyncClient)
        assert client.http_client is client.http_client
        await client.close()

    @pytest.mark.asyncio
    async def test_close_without_requests_creates_nothing(self):
        client = HttpTrendsClient(URL)

        await client.close()

        assert client._http_client is None


class TestFetch:
    @pytest.mark.asyncio
    async def test_returns_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["keywords"] = request.url.params.get_list("keyword")
            seen["geo"] = request.url.params["geo"]
            return httpx.Response(200, text='{"default": {}}')

        client = make_client(handler)
        body = await client.fetch(["ai", "robots"], "US")
        await client.close()

        assert body == '{"default": {}}'
        assert seen == {"keywords": ["ai", "robots"], "geo": "US"}

    @pytest.mark.asyncio
    async def test_429_reads_as_rate_limit(self):
        client = make_client(lambda request: httpx.Response(429))

        with pytest.raises(UpstreamRequestError) as exc_info:
            await client.fetch(["ai"], "US")

        assert exc_info.value.status_code == 429
        assert "429" in str(exc_info.value)
        assert categorize_error(exc_info.value) == ErrorCategory.RATE_LIMIT

    @pytest.mark.asyncio
    async def test_server_error_reads_as_upstream(self):
        client = make_client(lambda request: httpx.Response(500))

        with pytest.raises(UpstreamRequestError) as exc_info:
            await client.fetch(["ai"], "US")

        assert categorize_error(exc_info.value) == ErrorCategory.UPSTREAM

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(UpstreamRequestError) as exc_info:
            await client.fetch(["ai"], "US")

        assert "Failed to connect to upstream" in str(exc_info.value)
        assert exc_info.value.status_code is None
