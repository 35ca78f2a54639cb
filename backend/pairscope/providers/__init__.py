"""Upstream price provider abstractions and implementations.

Available providers:
- YahooChartProvider: Yahoo Finance chart endpoint over HTTP (httpx)
- YahooFinanceProvider: Yahoo Finance via the yfinance library
- MockPriceProvider: Deterministic synthetic data for testing
"""

from pairscope.core.config import Settings
from pairscope.providers.base import (
    PriceHistory,
    PriceHistoryRequest,
    PriceSeriesProviderInterface,
)
from pairscope.providers.mock import MockPriceProvider
from pairscope.providers.yahoo import YahooFinanceProvider
from pairscope.providers.yahoo_chart import YahooChartProvider


def create_provider(settings: Settings) -> PriceSeriesProviderInterface:
    """Build the provider named by settings.market_data_provider.

    Raises:
        ValueError: If the provider name is unknown
    """
    name = settings.market_data_provider.lower().strip()
    if name == "yahoo_chart":
        return YahooChartProvider(
            base_url=settings.yahoo_chart_base_url,
            timeout=settings.fetch_request_timeout,
        )
    if name == "yahoo":
        return YahooFinanceProvider()
    if name == "mock":
        return MockPriceProvider()
    raise ValueError(
        f"Unknown market data provider '{settings.market_data_provider}'. "
        "Valid values: yahoo_chart, yahoo, mock"
    )


__all__ = [
    "PriceHistory",
    "PriceHistoryRequest",
    "PriceSeriesProviderInterface",
    "YahooChartProvider",
    "YahooFinanceProvider",
    "MockPriceProvider",
    "create_provider",
]
