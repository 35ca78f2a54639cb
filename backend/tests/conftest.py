"""Shared pytest fixtures for testing infrastructure.

CRITICAL: Environment variables MUST be set before ANY imports.
"""
import os

# Override environment variables BEFORE importing any package code
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["MARKET_DATA_PROVIDER"] = "mock"

# Now import everything else AFTER environment is configured
from unittest.mock import AsyncMock

import pytest

from pairscope.constants.sectors import ReferenceData
from pairscope.core.config import Settings
from pairscope.providers.mock import MockPriceProvider
from pairscope.services.cache_service import CacheConfig, CacheService
from pairscope.services.price_source import FetchConfig, PriceSeriesSource, RateLimiter
from pairscope.utils.structured_logging import configure_structured_logging


@pytest.fixture(scope="session", autouse=True)
def configure_logging() -> None:
    """Configure structured logging once for the test session."""
    configure_structured_logging(log_level="WARNING")


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings using the mock provider.

    Returns:
        Settings: Test configuration
    """
    return Settings(
        environment="test",
        log_level="WARNING",
        market_data_provider="mock",
        requests_per_second=1000.0,
    )


@pytest.fixture
def small_reference() -> ReferenceData:
    """Reference tables with two small sectors and one unmapped member.

    Returns:
        ReferenceData: Technology (AAPL, MSFT, NVDA) and Energy (XOM, CVX)
    """
    universe = {
        "Technology": ("AAPL", "MSFT", "NVDA"),
        "Energy": ("XOM", "CVX"),
    }
    sector_map = {ticker: sector for sector, tickers in universe.items() for ticker in tickers}
    return ReferenceData(
        sectors=("Technology", "Energy"),
        universe=universe,
        sector_map=sector_map,
        members=frozenset(sector_map) | {"IBM"},
    )


@pytest.fixture
def cache_service() -> CacheService:
    """Fresh cache service with default TTLs."""
    return CacheService(CacheConfig())


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Async sleep replacement that returns immediately and records delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def mock_provider() -> MockPriceProvider:
    """Deterministic synthetic price provider."""
    return MockPriceProvider()


@pytest.fixture
def price_source(
    mock_provider: MockPriceProvider,
    cache_service: CacheService,
    no_sleep: AsyncMock,
) -> PriceSeriesSource:
    """Price source over the mock provider with throttling disabled."""
    return PriceSeriesSource(
        mock_provider,
        cache_service,
        FetchConfig(requests_per_second=0),
        sleep=no_sleep,
        rate_limiter=RateLimiter(0),
    )
