"""Tests for the TTL/FIFO result caches."""

from pairscope.services.cache_service import (
    CacheConfig,
    CacheService,
    ResultCache,
    correlation_key,
    pairs_key,
    price_key,
)


class FakeTimer:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestResultCache:
    """Tests for ResultCache expiry and eviction."""

    def test_get_returns_stored_value(self):
        cache: ResultCache[list[float]] = ResultCache("price", ttl_seconds=60, max_entries=5)
        cache.set("price:AAPL:252", [1.0, 2.0])
        assert cache.get("price:AAPL:252") == [1.0, 2.0]

    def test_missing_key_returns_none(self):
        cache: ResultCache[int] = ResultCache("price", ttl_seconds=60, max_entries=5)
        assert cache.get("nope") is None

    def test_entry_expires_after_ttl(self):
        """Expired entries read as absent and are evicted on that read."""
        timer = FakeTimer()
        cache: ResultCache[str] = ResultCache("pairs", ttl_seconds=900, max_entries=5, timer=timer)
        cache.set("k", "v")

        timer.advance(900)
        assert cache.get("k") == "v"

        timer.advance(1)
        assert cache.get("k") is None
        assert "k" not in cache
        assert len(cache) == 0

    def test_entry_records_expiry(self):
        timer = FakeTimer(start=50.0)
        cache: ResultCache[str] = ResultCache("corr", ttl_seconds=300, max_entries=5, timer=timer)
        cache.set("k", "v")

        entry = cache.get_entry("k")
        assert entry is not None
        assert entry.inserted_at == 50.0
        assert entry.expires_at == 350.0

    def test_fifo_eviction_when_full(self):
        """The oldest inserted entry is evicted, even if it was read recently."""
        cache: ResultCache[int] = ResultCache("pairs", ttl_seconds=60, max_entries=3)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)

        assert cache.get("a") == 1  # a read does not refresh position

        cache.set("d", 4)

        assert cache.get("a") is None
        assert cache.keys() == ["b", "c", "d"]
        assert len(cache) == 3

    def test_clear(self):
        cache: ResultCache[int] = ResultCache("pairs", ttl_seconds=60, max_entries=3)
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0


class TestCacheKeys:
    """Tests for cache key composition."""

    def test_correlation_key_is_order_independent(self):
        assert correlation_key("AAPL", "MSFT", 60, 252) == correlation_key("MSFT", "AAPL", 60, 252)

    def test_correlation_key_includes_windows(self):
        assert correlation_key("AAPL", "MSFT", 60, 252) != correlation_key("AAPL", "MSFT", 90, 252)

    def test_pairs_key_defaults_sector_to_all(self):
        assert pairs_key(60, 20, 252) == "pairs:60:20:252:all"
        assert pairs_key(60, 20, 252, "Energy") == "pairs:60:20:252:Energy"

    def test_price_key(self):
        assert price_key("AAPL", 252) == "price:AAPL:252"


class TestCacheService:
    """Tests for the CacheService container."""

    def test_caches_use_configured_ttls(self):
        config = CacheConfig(price_ttl=10, pairs_ttl=20, correlation_ttl=30)
        service = CacheService(config)

        assert service.prices.ttl_seconds == 10
        assert service.pairs.ttl_seconds == 20
        assert service.correlations.ttl_seconds == 30

    def test_stats_and_clear_all(self):
        service = CacheService()
        service.prices.set(price_key("AAPL", 252), [1.0])
        service.pairs.set(pairs_key(60, 20, 252), "result")

        stats = service.stats()
        assert stats.price_entries == 1
        assert stats.pairs_entries == 1
        assert stats.correlation_entries == 0

        service.clear_all()
        assert service.stats().price_entries == 0
        assert service.stats().pairs_entries == 0

    def test_config_from_settings(self, test_settings):
        config = CacheConfig.from_settings(test_settings)

        assert config.price_ttl == 3600
        assert config.price_max_entries == 100
        assert config.pairs_ttl == 900
        assert config.correlation_ttl == 300
