"""Correlation service: full metric report for one requested pair.

Runs the same metric stack as the pair analyzer (returns correlation, R²,
log spread, rolling z-score, rolling stability) and adds the shared
three-way assessment. Results are cached under an order-independent key,
so (A, B) and (B, A) share one slot.
"""
import asyncio
import logging

from pairscope.analytics import statistics as stats
from pairscope.analytics.assessment import assessment_details, classify_assessment
from pairscope.constants.sectors import ReferenceData
from pairscope.core.constants import ScreeningDefaults
from pairscope.core.exceptions import (
    InsufficientDataError,
    ParameterValidationError,
    PairScopeError,
    TickerValidationError,
)
from pairscope.schemas.correlation import (
    AssessmentDetails,
    CorrelationParams,
    CorrelationReport,
    CorrelationResponse,
    SpreadSummary,
    ZScoreRange,
)
from pairscope.services.cache_service import CacheService, correlation_key
from pairscope.services.pair_analyzer import effective_windows, lookback_slices
from pairscope.services.price_source import PriceSeriesSource
from pairscope.utils.validation import normalize_symbol, validate_ticker

logger = logging.getLogger(__name__)


class CorrelationService:
    """Validate, compute and cache single-pair correlation reports."""

    def __init__(
        self,
        price_source: PriceSeriesSource,
        cache: CacheService,
        reference: ReferenceData,
    ):
        self.price_source = price_source
        self.cache = cache
        self.reference = reference

    def _validate(self, params: CorrelationParams) -> None:
        """
        Raises:
            TickerValidationError: Unknown/unsupported ticker or identical tickers
            ParameterValidationError: Lookback or period out of range
        """
        for ticker in (params.ticker_a, params.ticker_b):
            result = validate_ticker(ticker, self.reference)
            if not result.valid:
                raise TickerValidationError(result.error)

        if params.ticker_a == params.ticker_b:
            raise TickerValidationError("Please enter two different tickers")

        if not (
            ScreeningDefaults.MIN_LOOKBACK_WINDOW
            <= params.lookback_window
            <= ScreeningDefaults.MAX_LOOKBACK_WINDOW
        ):
            raise ParameterValidationError(
                f"Lookback window must be between {ScreeningDefaults.MIN_LOOKBACK_WINDOW} "
                f"and {ScreeningDefaults.MAX_LOOKBACK_WINDOW} days"
            )

        if params.time_period < 1:
            raise ParameterValidationError("Time period must be a positive number of days")

    async def correlate(
        self,
        ticker_a: str,
        ticker_b: str,
        lookback_window: int | None = None,
        time_period: int | None = None,
    ) -> CorrelationResponse:
        """
        Build the correlation report for two tickers.

        Never raises: validation and data-availability problems produce a
        success=False response naming the cause; unexpected errors produce a
        generic failure. Failures are not cached.
        """
        params = CorrelationParams(
            ticker_a=normalize_symbol(ticker_a),
            ticker_b=normalize_symbol(ticker_b),
            lookback_window=lookback_window or ScreeningDefaults.LOOKBACK_WINDOW,
            time_period=time_period or ScreeningDefaults.TIME_PERIOD,
        )

        try:
            self._validate(params)
        except PairScopeError as e:
            return CorrelationResponse(success=False, error=str(e))

        cache_key = correlation_key(
            params.ticker_a, params.ticker_b, params.lookback_window, params.time_period
        )
        cached = self.cache.correlations.get(cache_key)
        if cached is not None:
            logger.debug(f"Correlation cache hit: {cache_key}")
            return cached

        try:
            report = await self._build_report(params)
        except InsufficientDataError as e:
            return CorrelationResponse(success=False, error=str(e))
        except Exception as e:
            logger.error(
                f"Error in correlation analysis for {params.ticker_a}/{params.ticker_b}: {e}",
                exc_info=True,
            )
            return CorrelationResponse(
                success=False, error="Internal error while computing correlation"
            )

        response = CorrelationResponse(success=True, data=report)
        self.cache.correlations.set(cache_key, response)
        return response

    async def _build_report(self, params: CorrelationParams) -> CorrelationReport:
        prices_a, prices_b = await asyncio.gather(
            self.price_source.fetch(params.ticker_a, params.time_period),
            self.price_source.fetch(params.ticker_b, params.time_period),
        )

        if not prices_a:
            raise InsufficientDataError(f"Unable to fetch price data for {params.ticker_a}")
        if not prices_b:
            raise InsufficientDataError(f"Unable to fetch price data for {params.ticker_b}")

        windows = effective_windows(
            params.lookback_window, ScreeningDefaults.CORRELATION_REPORT_ZSCORE_WINDOW
        )
        aligned_length = min(len(prices_a), len(prices_b))
        if aligned_length < windows.min_data_points:
            raise InsufficientDataError(
                f"Insufficient data: only {aligned_length} data points available, "
                f"need at least {windows.min_data_points}"
            )

        lookback_a, lookback_b = lookback_slices(prices_a, prices_b, params.lookback_window)

        correlation = stats.correlation_metrics(lookback_a, lookback_b)
        spread = stats.spread_metrics(lookback_a, lookback_b, stats.SpreadType.LOG)
        z_scores = stats.z_score_metrics(
            spread.spread, params.lookback_window, windows.z_score_window
        )
        stability = stats.stability_metrics(lookback_a, lookback_b, windows.stability_window)

        assessment = classify_assessment(correlation.correlation, correlation.r_squared)
        label, description = assessment_details(assessment)

        return CorrelationReport(
            ticker_a=params.ticker_a,
            ticker_b=params.ticker_b,
            correlation=correlation.correlation,
            r_squared=correlation.r_squared,
            current_z_score=z_scores.current_z_score,
            z_score_range=ZScoreRange(min=z_scores.z_score_min, max=z_scores.z_score_max),
            assessment=assessment,
            assessment_details=AssessmentDetails(label=label, description=description),
            spread=SpreadSummary(
                current=spread.current_spread,
                mean=spread.spread_mean,
                std=spread.spread_std,
            ),
            consistency_score=stability.consistency_score,
            confidence=stability.confidence,
            data_points=len(lookback_a),
        )
