"""Process-level engine wiring.

create_engine() builds every service once (cache service, provider, price
source, analyzer, screening and correlation services) and returns the
facade that external callers use.
"""
from datetime import datetime, timezone

from pairscope import __version__
from pairscope.constants.sectors import ReferenceData, get_reference_data
from pairscope.core.config import Settings, get_settings
from pairscope.providers import PriceSeriesProviderInterface, create_provider
from pairscope.schemas.correlation import CorrelationResponse
from pairscope.schemas.pairs import ScreeningResponse
from pairscope.schemas.reference import CacheStats, HealthStatus, TickerValidationResult
from pairscope.services.cache_service import CacheConfig, CacheService
from pairscope.services.correlation_service import CorrelationService
from pairscope.services.pair_analyzer import PairAnalyzer
from pairscope.services.price_source import FetchConfig, PriceSeriesSource
from pairscope.services.screening_service import ScreeningService
from pairscope.utils.structured_logging import configure_structured_logging, get_logger
from pairscope.utils.validation import validate_ticker

logger = get_logger(__name__)


class PairScopeEngine:
    """Caller-facing contract: screen, correlate, validate, introspect."""

    def __init__(
        self,
        settings: Settings,
        provider: PriceSeriesProviderInterface,
        cache: CacheService,
        reference: ReferenceData,
        price_source: PriceSeriesSource,
        screening: ScreeningService,
        correlation: CorrelationService,
    ):
        self.settings = settings
        self.provider = provider
        self.cache = cache
        self.reference = reference
        self.price_source = price_source
        self.screening = screening
        self.correlation = correlation

    async def screen(
        self,
        lookback_window: int | None = None,
        z_score_window: int | None = None,
        time_period: int | None = None,
        sector: str | None = None,
    ) -> ScreeningResponse:
        """Rank the most divergent same-sector pairs."""
        response = await self.screening.screen(lookback_window, z_score_window, time_period, sector)
        if response.success:
            logger.info(
                "pairs_screened",
                sector=response.params.sector or "all",
                candidates=response.metadata.total_pairs_analyzed,
                valid=response.metadata.valid_pairs,
                ranked=len(response.pairs),
            )
        else:
            logger.warning("pairs_screen_rejected", error=response.error)
        return response

    async def correlate(
        self,
        ticker_a: str,
        ticker_b: str,
        lookback_window: int | None = None,
        time_period: int | None = None,
    ) -> CorrelationResponse:
        """Full correlation report for one pair."""
        response = await self.correlation.correlate(ticker_a, ticker_b, lookback_window, time_period)
        if response.success and response.data is not None:
            logger.info(
                "correlation_computed",
                ticker_a=response.data.ticker_a,
                ticker_b=response.data.ticker_b,
                assessment=response.data.assessment.value,
            )
        else:
            logger.warning("correlation_rejected", error=response.error)
        return response

    def validate_ticker(self, ticker: str) -> TickerValidationResult:
        return validate_ticker(ticker, self.reference)

    def available_sectors(self) -> list[str]:
        return list(self.reference.sectors)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def health(self) -> HealthStatus:
        return HealthStatus(
            status="healthy",
            timestamp=datetime.now(timezone.utc).isoformat(),
            version=__version__,
            cache=self.cache_stats(),
        )

    async def aclose(self) -> None:
        """Release provider network resources."""
        await self.provider.aclose()


def create_engine(
    settings: Settings | None = None,
    provider: PriceSeriesProviderInterface | None = None,
    reference: ReferenceData | None = None,
    configure_logging: bool = True,
) -> PairScopeEngine:
    """Build the engine and all of its collaborators once.

    Args:
        settings: Application settings (defaults to get_settings())
        provider: Upstream provider (defaults to the one named in settings)
        reference: Ticker/sector reference tables (defaults to the static tables)
        configure_logging: Configure structlog/logging from settings.log_level
    """
    settings = settings or get_settings()
    if configure_logging:
        configure_structured_logging(log_level=settings.log_level, json_logs=settings.log_json)

    provider = provider or create_provider(settings)
    reference = reference or get_reference_data()
    cache = CacheService(CacheConfig.from_settings(settings))

    price_source = PriceSeriesSource(provider, cache, FetchConfig.from_settings(settings))
    analyzer = PairAnalyzer()

    engine = PairScopeEngine(
        settings=settings,
        provider=provider,
        cache=cache,
        reference=reference,
        price_source=price_source,
        screening=ScreeningService(price_source, analyzer, cache, reference),
        correlation=CorrelationService(price_source, cache, reference),
    )

    logger.info(
        "engine_initialized",
        provider=provider.provider_name,
        environment=settings.environment,
    )
    return engine
