"""Mock price provider for testing.

Generates deterministic, realistic-looking closing prices without hitting
external APIs. Every ticker shares a common market factor plus its own
noise, so same-sector pairs show meaningful return correlation.
"""
import logging
import zlib

import numpy as np

from pairscope.core.exceptions import APIError
from pairscope.providers.base import (
    PriceHistory,
    PriceHistoryRequest,
    PriceSeriesProviderInterface,
)

logger = logging.getLogger(__name__)

MARKET_SEED = 7


class MockPriceProvider(PriceSeriesProviderInterface):
    """
    Mock provider for unit tests and offline development.

    Args:
        series: Fixed close series per ticker, returned as-is
        failing_tickers: Tickers whose fetch raises APIError
        market_weight: Share of each ticker's daily return driven by the
            common market factor
    """

    def __init__(
        self,
        series: dict[str, list[float]] | None = None,
        failing_tickers: set[str] | None = None,
        market_weight: float = 0.8,
    ):
        self.series = dict(series or {})
        self.failing_tickers = set(failing_tickers or ())
        self.market_weight = market_weight
        self.calls: list[str] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def fetch_closes(self, request: PriceHistoryRequest) -> PriceHistory:
        """Return fixed or generated closes for the request range."""
        self.calls.append(request.ticker)

        if request.ticker in self.failing_tickers:
            raise APIError(f"Mock failure for {request.ticker}")

        dates = np.arange(
            np.datetime64(request.start_date.date()),
            np.datetime64(request.end_date.date()) + 1,
            dtype="datetime64[D]",
        )
        dates = dates[np.is_busday(dates)]

        if request.ticker in self.series:
            closes = list(self.series[request.ticker])
        else:
            closes = self._generate(request.ticker, len(dates))

        date_strings = [str(d) for d in dates[-len(closes):]] if closes else []
        logger.debug(f"Generated {len(closes)} mock closes for {request.ticker}")
        return PriceHistory(ticker=request.ticker, closes=closes, dates=date_strings)

    def _generate(self, ticker: str, length: int) -> list[float]:
        market = np.random.default_rng(MARKET_SEED).normal(0.0004, 0.01, length)
        own = np.random.default_rng(zlib.crc32(ticker.encode())).normal(0.0, 0.01, length)
        returns = self.market_weight * market + (1 - self.market_weight) * own

        base_price = 50.0 + zlib.crc32(ticker.encode()) % 250
        return (base_price * np.cumprod(1.0 + returns)).round(4).tolist()
