"""Tests for the Yahoo Finance chart endpoint provider.

HTTP traffic is served by httpx.MockTransport; nothing leaves the process.
"""
from datetime import datetime, timezone

import httpx
import pytest

from pairscope.core.exceptions import APIError, RateLimitError, UpstreamDataError
from pairscope.providers.base import PriceHistoryRequest
from pairscope.providers.yahoo_chart import (
    YahooChartProvider,
    extract_price_arrays,
    parse_chart_payload,
)

# 2025-01-02, 2025-01-03, 2025-01-06 (UTC midnight)
TIMESTAMPS = [1735776000, 1735862400, 1736121600]


def chart_payload(close=None, adjclose=None, timestamps=TIMESTAMPS) -> dict:
    indicators: dict = {"quote": [{"close": close or []}]}
    if adjclose is not None:
        indicators["adjclose"] = [{"adjclose": adjclose}]
    return {"chart": {"result": [{"timestamp": timestamps, "indicators": indicators}], "error": None}}


def make_request(ticker: str = "AAPL") -> PriceHistoryRequest:
    return PriceHistoryRequest(
        ticker=ticker,
        start_date=datetime(2025, 1, 1, tzinfo=timezone.utc),
        end_date=datetime(2025, 1, 7, tzinfo=timezone.utc),
    )


def make_provider(handler) -> YahooChartProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return YahooChartProvider(base_url="https://chart.test/v8/finance/chart", client=client)


class TestParseChartPayload:
    """Tests for chart payload parsing."""

    def test_adjusted_close_takes_precedence(self):
        payload = chart_payload(close=[10.0, 11.0, 12.0], adjclose=[9.5, 10.5, 11.5])

        history = parse_chart_payload("AAPL", payload)

        assert history.closes == [9.5, 10.5, 11.5]
        assert history.dates == ["2025-01-02", "2025-01-03", "2025-01-06"]

    def test_falls_back_to_close(self):
        history = parse_chart_payload("AAPL", chart_payload(close=[10.0, 11.0, 12.0]))
        assert history.closes == [10.0, 11.0, 12.0]

    def test_null_prices_are_dropped(self):
        history = parse_chart_payload("AAPL", chart_payload(close=[10.0, None, 12.0]))

        assert history.closes == [10.0, 12.0]
        assert history.dates == ["2025-01-02", "2025-01-06"]

    def test_missing_result_raises(self):
        with pytest.raises(UpstreamDataError, match="No data returned"):
            parse_chart_payload("AAPL", {"chart": {"result": None, "error": {"code": "Not Found"}}})

    def test_missing_prices_raise(self):
        with pytest.raises(UpstreamDataError, match="No price data"):
            parse_chart_payload("AAPL", chart_payload(close=[]))

    def test_extract_handles_missing_indicators(self):
        assert extract_price_arrays({"timestamp": TIMESTAMPS}) == (TIMESTAMPS, [])

    def test_non_numeric_prices_raise(self):
        with pytest.raises(UpstreamDataError, match="Invalid price"):
            parse_chart_payload("MSFT", chart_payload(close=["n/a", "n/a"]))

    @pytest.mark.parametrize("payload", [["unexpected"], "unexpected", None, {"chart": []}])
    def test_unexpected_payload_shapes_raise(self, payload):
        with pytest.raises(UpstreamDataError):
            parse_chart_payload("MSFT", payload)

    def test_extract_ignores_non_mapping_indicators(self):
        assert extract_price_arrays({"timestamp": TIMESTAMPS, "indicators": []}) == (TIMESTAMPS, [])


class TestYahooChartProvider:
    """Tests for YahooChartProvider HTTP handling."""

    @pytest.mark.asyncio
    async def test_fetch_sends_range_and_parses(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=chart_payload(close=[1.0, 2.0, 3.0]))

        provider = make_provider(handler)
        request = make_request()

        history = await provider.fetch_closes(request)

        assert history.closes == [1.0, 2.0, 3.0]
        assert seen[0].url.path == "/v8/finance/chart/AAPL"
        assert seen[0].url.params["period1"] == str(request.period1)
        assert seen[0].url.params["period2"] == str(request.period2)
        assert seen[0].url.params["interval"] == "1d"
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_429_raises_rate_limit_error(self):
        provider = make_provider(lambda request: httpx.Response(429))

        with pytest.raises(RateLimitError):
            await provider.fetch_closes(make_request())

    @pytest.mark.asyncio
    async def test_http_error_raises_api_error(self):
        provider = make_provider(lambda request: httpx.Response(500))

        with pytest.raises(APIError, match="HTTP 500"):
            await provider.fetch_closes(make_request())

    @pytest.mark.asyncio
    async def test_network_error_raises_api_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = make_provider(handler)

        with pytest.raises(APIError, match="failed"):
            await provider.fetch_closes(make_request())

    @pytest.mark.asyncio
    async def test_non_json_body_raises_upstream_error(self):
        provider = make_provider(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(UpstreamDataError):
            await provider.fetch_closes(make_request())

    @pytest.mark.asyncio
    async def test_list_payload_raises_upstream_error(self):
        provider = make_provider(lambda request: httpx.Response(200, json=["unexpected"]))

        with pytest.raises(UpstreamDataError):
            await provider.fetch_closes(make_request("MSFT"))

    @pytest.mark.asyncio
    async def test_malformed_timestamps_raise_upstream_error(self):
        payload = chart_payload(close=[1.0, 2.0, 3.0], timestamps=["a", "b", "c"])
        provider = make_provider(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(UpstreamDataError, match="Malformed chart payload"):
            await provider.fetch_closes(make_request())

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        provider = YahooChartProvider(client=client)

        await provider.aclose()

        assert not client.is_closed
        await client.aclose()

    def test_provider_name(self):
        assert YahooChartProvider().provider_name == "yahoo_chart"
