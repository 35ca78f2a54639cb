"""Base provider interface and data models for price series providers.

This module defines the contract that every upstream closing-price provider
must implement. Providers perform a single attempt per call; throttling and
retries belong to the price series source that wraps them.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class PriceHistoryRequest:
    """Request for daily closing prices over a calendar range."""

    ticker: str
    start_date: datetime
    end_date: datetime
    interval: str = "1d"

    @property
    def period1(self) -> int:
        """Range start as Unix seconds."""
        return int(self.start_date.timestamp())

    @property
    def period2(self) -> int:
        """Range end as Unix seconds."""
        return int(self.end_date.timestamp())


@dataclass
class PriceHistory:
    """Chronological closing prices (most recent last) for one ticker."""

    ticker: str
    closes: list[float]
    dates: list[str] = field(default_factory=list)

    def trailing(self, count: int) -> "PriceHistory":
        """Keep only the most recent `count` observations."""
        return PriceHistory(
            ticker=self.ticker,
            closes=self.closes[-count:] if count > 0 else [],
            dates=self.dates[-count:] if count > 0 else [],
        )


class PriceSeriesProviderInterface(ABC):
    """
    Abstract interface for upstream price providers.

    Implementations: Yahoo chart endpoint over HTTP, yfinance, and a
    deterministic mock for tests and offline development.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider (e.g., 'yahoo_chart')."""
        pass

    @abstractmethod
    async def fetch_closes(self, request: PriceHistoryRequest) -> PriceHistory:
        """
        Fetch daily closing prices for one ticker.

        Null entries from the upstream are dropped.

        Args:
            request: PriceHistoryRequest with ticker and calendar range

        Returns:
            PriceHistory with chronological closes

        Raises:
            RateLimitError: If the upstream throttled the request
            UpstreamDataError: If the response carries no usable prices
            APIError: For any other upstream or network failure
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        return None
