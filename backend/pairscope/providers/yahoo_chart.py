"""Yahoo Finance chart endpoint provider.

Calls the public v8 chart API directly with httpx and extracts closing
prices from the JSON payload.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any

import httpx

from pairscope.core.exceptions import APIError, RateLimitError, UpstreamDataError
from pairscope.providers.base import (
    PriceHistory,
    PriceHistoryRequest,
    PriceSeriesProviderInterface,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


def _first(items: Any) -> dict[str, Any] | None:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


def extract_price_arrays(result: dict[str, Any]) -> tuple[list[Any], list[Any]]:
    """Pick the timestamp and price arrays out of one chart result.

    Precedence: adjusted close (indicators.adjclose[0].adjclose), then raw
    close (indicators.quote[0].close). Missing arrays become empty lists.
    """
    timestamps = result.get("timestamp") or []
    indicators = result.get("indicators")
    if not isinstance(indicators, dict):
        return timestamps, []

    adjclose_block = _first(indicators.get("adjclose"))
    adjclose = adjclose_block.get("adjclose") if adjclose_block else None
    if adjclose:
        return timestamps, adjclose

    quote_block = _first(indicators.get("quote"))
    close = quote_block.get("close") if quote_block else None
    return timestamps, close or []


def parse_chart_payload(ticker: str, payload: dict[str, Any]) -> PriceHistory:
    """Convert a chart API payload into a PriceHistory.

    Raises:
        UpstreamDataError: If the payload is malformed, has no result or
            has no prices
    """
    if not isinstance(payload, dict):
        raise UpstreamDataError(
            f"Unexpected chart payload for {ticker}: {type(payload).__name__}"
        )

    chart = payload.get("chart")
    if not isinstance(chart, dict):
        raise UpstreamDataError(f"No data returned from Yahoo Finance for {ticker}")

    result = _first(chart.get("result"))
    if result is None:
        raise UpstreamDataError(f"No data returned from Yahoo Finance for {ticker}")

    timestamps, prices = extract_price_arrays(result)
    if not prices:
        raise UpstreamDataError(f"No price data available for {ticker}")

    closes: list[float] = []
    dates: list[str] = []
    for i, price in enumerate(prices):
        if price is None or (isinstance(price, float) and math.isnan(price)):
            continue
        try:
            closes.append(float(price))
        except (TypeError, ValueError) as e:
            raise UpstreamDataError(f"Invalid price {price!r} for {ticker}") from e
        if i < len(timestamps) and timestamps[i]:
            dates.append(
                datetime.fromtimestamp(timestamps[i], tz=timezone.utc).date().isoformat()
            )

    return PriceHistory(ticker=ticker, closes=closes, dates=dates)


class YahooChartProvider(PriceSeriesProviderInterface):
    """
    Yahoo Finance chart API provider.

    Handles:
    - Building the period1/period2 daily-granularity request
    - Mapping HTTP 429 to RateLimitError and other failures to APIError
    - Adjusted-close / close precedence and null filtering
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def provider_name(self) -> str:
        return "yahoo_chart"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self._client

    async def fetch_closes(self, request: PriceHistoryRequest) -> PriceHistory:
        """Fetch closing prices from the chart endpoint (single attempt)."""
        url = f"{self.base_url}/{request.ticker}"
        params = {
            "period1": request.period1,
            "period2": request.period2,
            "interval": request.interval,
            "includePrePost": "false",
        }

        try:
            response = await self._get_client().get(url, params=params, timeout=self.timeout)
        except httpx.RequestError as e:
            raise APIError(f"Request for {request.ticker} failed: {e}") from e

        if response.status_code == 429:
            raise RateLimitError(f"Rate limited by Yahoo Finance for {request.ticker}")

        if not response.is_success:
            raise APIError(f"HTTP {response.status_code}: {response.reason_phrase}")

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamDataError(f"Non-JSON response for {request.ticker}") from e

        try:
            history = parse_chart_payload(request.ticker, payload)
        except (AttributeError, TypeError, ValueError, OverflowError) as e:
            raise UpstreamDataError(f"Malformed chart payload for {request.ticker}: {e}") from e
        logger.debug(f"Fetched {len(history.closes)} closes for {request.ticker}")
        return history

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
