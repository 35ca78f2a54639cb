"""Price series source: rate-limited, retrying, cached fetch of closing prices.

This service sits between the engine and the upstream provider. It handles:
- Cache-first lookup in the price cache
- A process-wide minimum interval between outbound requests
- Bounded retries with linear backoff and a fixed per-attempt timeout
- Batched fan-out for large ticker universes

Exhausted retries are a soft failure: fetch() returns None and callers
exclude the ticker from analysis.
"""
import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from pairscope.core.config import Settings
from pairscope.core.exceptions import APIError, RateLimitError, UpstreamDataError
from pairscope.providers.base import PriceHistoryRequest, PriceSeriesProviderInterface
from pairscope.services.cache_service import CacheService, price_key

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


@dataclass
class FetchConfig:
    """Configuration for upstream fetches."""

    requests_per_second: float = 5.0
    max_retries: int = 3
    retry_delay: float = 1.0
    request_timeout: float = 10.0
    batch_size: int = 10
    batch_pause: float = 0.2
    calendar_day_multiplier: float = 1.5

    @classmethod
    def from_settings(cls, settings: Settings) -> "FetchConfig":
        return cls(
            requests_per_second=settings.requests_per_second,
            max_retries=settings.fetch_max_retries,
            retry_delay=settings.fetch_retry_delay,
            request_timeout=settings.fetch_request_timeout,
            batch_size=settings.fetch_batch_size,
            batch_pause=settings.fetch_batch_pause,
            calendar_day_multiplier=settings.calendar_day_multiplier,
        )


class RateLimiter:
    """Minimum-interval throttle shared by every outbound request.

    Callers queue on a lock so concurrent fan-out branches are spaced at
    least `1 / requests_per_second` seconds apart. The lock belongs to the
    running event loop; a limiter reused under a new loop gets a new lock
    while keeping its last-request timestamp.
    """

    def __init__(
        self,
        requests_per_second: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.min_interval = 1.0 / requests_per_second if requests_per_second > 0 else 0.0
        self._clock = clock
        self._sleep = sleep
        self._last_request = float("-inf")
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    def _get_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def wait(self) -> None:
        async with self._get_lock():
            elapsed = self._clock() - self._last_request
            if elapsed < self.min_interval:
                await self._sleep(self.min_interval - elapsed)
            self._last_request = self._clock()


def get_date_range(
    period_days: int,
    multiplier: float = 1.5,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Calendar window wide enough to contain `period_days` trading days.

    Returns:
        (start_date, end_date) with start = end - ceil(period_days * multiplier) days
    """
    end_date = now or datetime.now(timezone.utc)
    calendar_days = math.ceil(period_days * multiplier)
    return end_date - timedelta(days=calendar_days), end_date


class PriceSeriesSource:
    """
    Cached, throttled, retrying access to closing-price history.

    Architecture:
    - Uses injected PriceSeriesProviderInterface for the single upstream attempt
    - Uses CacheService.prices for the (ticker, period) cache
    - Retries live here only; nothing above this layer retries
    """

    def __init__(
        self,
        provider: PriceSeriesProviderInterface,
        cache: CacheService,
        config: FetchConfig | None = None,
        sleep: Sleeper = asyncio.sleep,
        rate_limiter: RateLimiter | None = None,
    ):
        self.provider = provider
        self.cache = cache
        self.config = config or FetchConfig()
        self._sleep = sleep
        self.rate_limiter = rate_limiter or RateLimiter(self.config.requests_per_second, sleep=sleep)
        self.fetch_stats = {
            "fetched": 0,
            "cached": 0,
            "failed": 0,
            "rate_limited": 0,
        }

    async def fetch(self, ticker: str, period_days: int) -> list[float] | None:
        """
        Get the trailing `period_days` closes for a ticker.

        Args:
            ticker: Normalized ticker symbol (e.g., 'AAPL', '^GSPC')
            period_days: Number of trading observations wanted

        Returns:
            Chronological closes (most recent last), or None when every
            attempt failed
        """
        cache_key = price_key(ticker, period_days)
        cached = self.cache.prices.get(cache_key)
        if cached is not None:
            self.fetch_stats["cached"] += 1
            logger.debug(f"{ticker}: Cache hit")
            return cached

        start_date, end_date = get_date_range(period_days, self.config.calendar_day_multiplier)
        request = PriceHistoryRequest(ticker=ticker, start_date=start_date, end_date=end_date)

        last_error: Exception | None = None
        for attempt in range(self.config.max_retries):
            await self.rate_limiter.wait()

            try:
                history = await asyncio.wait_for(
                    self.provider.fetch_closes(request),
                    timeout=self.config.request_timeout,
                )
                if not history.closes:
                    raise UpstreamDataError(f"No price data available for {ticker}")

                prices = history.trailing(period_days).closes
                self.cache.prices.set(cache_key, prices)
                self.fetch_stats["fetched"] += 1
                return prices

            except RateLimitError as e:
                self.fetch_stats["rate_limited"] += 1
                last_error = e
            except asyncio.TimeoutError:
                last_error = APIError(
                    f"Request for {ticker} timed out after {self.config.request_timeout}s"
                )
            except APIError as e:
                last_error = e
            except Exception as e:
                logger.warning(f"Unexpected error fetching {ticker}: {e}", exc_info=True)
                last_error = e

            if attempt < self.config.max_retries - 1:
                wait_time = self.config.retry_delay * (attempt + 1)
                logger.warning(
                    f"Attempt {attempt + 1} failed for {ticker}, "
                    f"retrying in {wait_time}s: {last_error}"
                )
                await self._sleep(wait_time)

        self.fetch_stats["failed"] += 1
        logger.error(
            f"All {self.config.max_retries} attempts failed for {ticker}: {last_error}"
        )
        return None

    async def fetch_many(
        self,
        tickers: list[str],
        period_days: int,
        batch_size: int | None = None,
    ) -> dict[str, list[float]]:
        """
        Fetch many tickers in fixed-size concurrent batches.

        Each batch is issued together and awaited as a whole, followed by a
        short pause before the next batch.

        Returns:
            Mapping of ticker to closes, in input order, for tickers with a
            non-empty series
        """
        batch_size = batch_size or self.config.batch_size
        results: dict[str, list[float]] = {}

        for batch_start in range(0, len(tickers), batch_size):
            batch = tickers[batch_start:batch_start + batch_size]

            batch_results = await asyncio.gather(
                *(self.fetch(ticker, period_days) for ticker in batch),
                return_exceptions=True,
            )

            for ticker, result in zip(batch, batch_results):
                if isinstance(result, BaseException):
                    logger.error(f"Unexpected error fetching {ticker}: {result}")
                    continue
                if result:
                    results[ticker] = result

            if batch_start + batch_size < len(tickers):
                await self._sleep(self.config.batch_pause)

        logger.info(
            f"Fetch complete: {len(results)}/{len(tickers)} successful, "
            f"{self.fetch_stats['cached']} cached, "
            f"{self.fetch_stats['failed']} failed"
        )
        return results

    def get_stats(self) -> dict[str, int]:
        """Get fetch statistics."""
        return self.fetch_stats.copy()
