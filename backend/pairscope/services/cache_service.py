"""Cache service for price series and analysis results.

Three in-memory caches with independent TTL and capacity:
- price series per (ticker, period)
- full screening results per parameter set
- single-pair correlation reports, keyed order-independently

Expiry is lazy (checked on read, no background sweep). When a cache is full,
the oldest entry by insertion order is evicted before a new key is stored.
This is FIFO eviction, not LRU: reads do not refresh an entry's position.
"""
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from cachetools import FIFOCache

from pairscope.core.config import Settings
from pairscope.core.constants import ScreeningDefaults
from pairscope.schemas.reference import CacheStats

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Cached value with its insertion and expiry times (timer units)."""
    data: T
    inserted_at: float
    expires_at: float


@dataclass
class CacheConfig:
    """TTL and capacity configuration for each cache."""
    price_ttl: int = 3600                # 1 hour
    price_max_entries: int = 100
    pairs_ttl: int = 900                 # 15 minutes
    pairs_max_entries: int = 10
    correlation_ttl: int = 300           # 5 minutes
    correlation_max_entries: int = 10

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheConfig":
        return cls(
            price_ttl=settings.price_cache_ttl,
            price_max_entries=settings.price_cache_max_entries,
            pairs_ttl=settings.pairs_cache_ttl,
            pairs_max_entries=settings.pairs_cache_max_entries,
            correlation_ttl=settings.correlation_cache_ttl,
            correlation_max_entries=settings.correlation_cache_max_entries,
        )


class ResultCache(Generic[T]):
    """
    String-keyed cache with per-entry TTL and FIFO capacity eviction.

    Backed by cachetools.FIFOCache, which pops the first-inserted key when a
    new key would exceed maxsize.
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        max_entries: int,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._timer = timer
        self._entries: FIFOCache = FIFOCache(maxsize=max_entries)

    def get(self, key: str) -> T | None:
        """Return the cached value, or None if missing or expired.

        An expired entry is evicted on this read.
        """
        entry: CacheEntry[T] | None = self._entries.get(key)
        if entry is None:
            return None

        if self._timer() > entry.expires_at:
            del self._entries[key]
            logger.debug(f"{self.name} cache expired: {key}")
            return None

        return entry.data

    def set(self, key: str, data: T) -> None:
        """Store a value, stamping expires_at = now + ttl."""
        now = self._timer()
        self._entries[key] = CacheEntry(data=data, inserted_at=now, expires_at=now + self.ttl_seconds)
        logger.debug(f"{self.name} cache set: {key}")

    def get_entry(self, key: str) -> CacheEntry[T] | None:
        """Return the raw entry without expiry checks (introspection only)."""
        return self._entries.get(key)

    def keys(self) -> list[str]:
        """Keys in insertion order (oldest first)."""
        return list(self._entries.keys())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


def price_key(ticker: str, period_days: int) -> str:
    return f"price:{ticker}:{period_days}"


def pairs_key(
    lookback_window: int,
    z_score_window: int,
    time_period: int,
    sector: str | None = None,
) -> str:
    return (
        f"pairs:{lookback_window}:{z_score_window}:{time_period}:"
        f"{sector or ScreeningDefaults.ALL_SECTORS}"
    )


def correlation_key(ticker_a: str, ticker_b: str, lookback_window: int, time_period: int) -> str:
    """Order-independent key: (A, B) and (B, A) map to the same slot."""
    first, second = sorted((ticker_a, ticker_b))
    return f"corr:{first}:{second}:{lookback_window}:{time_period}"


class CacheService:
    """
    Owns the price, screening and correlation caches.

    Constructed once at process start and passed to the services that need it.
    The caches take no locks: they are only touched from the event loop
    thread, and every read/write completes without suspending.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.config = config or CacheConfig()

        self.prices: ResultCache[list[float]] = ResultCache(
            "price", self.config.price_ttl, self.config.price_max_entries, timer
        )
        self.pairs: ResultCache = ResultCache(
            "pairs", self.config.pairs_ttl, self.config.pairs_max_entries, timer
        )
        self.correlations: ResultCache = ResultCache(
            "correlation",
            self.config.correlation_ttl,
            self.config.correlation_max_entries,
            timer,
        )

        logger.info(
            f"CacheService initialized: "
            f"price TTL={self.config.price_ttl}s size={self.config.price_max_entries}, "
            f"pairs TTL={self.config.pairs_ttl}s size={self.config.pairs_max_entries}, "
            f"correlation TTL={self.config.correlation_ttl}s "
            f"size={self.config.correlation_max_entries}"
        )

    def stats(self) -> CacheStats:
        return CacheStats(
            price_entries=len(self.prices),
            pairs_entries=len(self.pairs),
            correlation_entries=len(self.correlations),
        )

    def clear_all(self) -> None:
        self.prices.clear()
        self.pairs.clear()
        self.correlations.clear()
        logger.debug("All caches cleared")
