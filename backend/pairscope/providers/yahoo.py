"""Yahoo Finance provider backed by the yfinance library.

This provider wraps yfinance, running its blocking calls in the default
executor and mapping its failures onto the provider exception hierarchy.
"""
import asyncio
import logging
from datetime import timedelta

import pandas as pd
import yfinance as yf
from yfinance.exceptions import YFRateLimitError

from pairscope.core.exceptions import APIError, RateLimitError, UpstreamDataError
from pairscope.providers.base import (
    PriceHistory,
    PriceHistoryRequest,
    PriceSeriesProviderInterface,
)

logger = logging.getLogger(__name__)


class YahooFinanceProvider(PriceSeriesProviderInterface):
    """
    yfinance-based provider.

    Closes are taken from the auto-adjusted `Close` column, so they match the
    adjusted-close preference of the chart endpoint provider.
    """

    @property
    def provider_name(self) -> str:
        return "yahoo"

    async def fetch_closes(self, request: PriceHistoryRequest) -> PriceHistory:
        """Fetch closing prices via yfinance (single attempt)."""
        loop = asyncio.get_running_loop()

        try:
            ticker = await loop.run_in_executor(None, lambda: yf.Ticker(request.ticker))
            data = await loop.run_in_executor(
                None,
                lambda: ticker.history(
                    start=request.start_date.date(),
                    end=request.end_date.date() + timedelta(days=1),  # yfinance end is exclusive
                    interval=request.interval,
                    auto_adjust=True,
                    back_adjust=False,
                ),
            )
        except YFRateLimitError as e:
            raise RateLimitError(f"Rate limited by Yahoo Finance for {request.ticker}") from e
        except Exception as e:
            raise APIError(f"Failed to fetch data for {request.ticker}: {e}") from e

        history = self._transform_data(data, request)
        logger.debug(f"Fetched {len(history.closes)} closes for {request.ticker} via yfinance")
        return history

    def _transform_data(self, data: pd.DataFrame, request: PriceHistoryRequest) -> PriceHistory:
        """Transform a yfinance history DataFrame into a PriceHistory."""
        if data is None or data.empty or "Close" not in data.columns:
            raise UpstreamDataError(f"No data returned for {request.ticker}")

        closes = data["Close"].dropna()
        if closes.empty:
            raise UpstreamDataError(f"No price data available for {request.ticker}")

        dates = [
            (ts.tz_convert("UTC") if ts.tzinfo is not None else ts).date().isoformat()
            for ts in pd.DatetimeIndex(closes.index)
        ]

        return PriceHistory(
            ticker=request.ticker,
            closes=[float(c) for c in closes.tolist()],
            dates=dates,
        )
