"""Screening service: rank the most divergent same-sector pairs.

Flow:
1. Validate windows (and sector) before any cache lookup or fetch
2. Return a cached response verbatim on hit
3. Fetch the curated universe, enumerate intra-sector pairs, analyze all of
   them concurrently, filter, rank by |z-score|, keep the top N
4. Cache and return
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from itertools import combinations

from pairscope.constants.sectors import ReferenceData
from pairscope.core.constants import ScreeningDefaults
from pairscope.core.exceptions import ParameterValidationError
from pairscope.schemas.pairs import (
    DataRange,
    PairAnalysis,
    PairCandidate,
    RankedPair,
    ScreeningMetadata,
    ScreeningParams,
    ScreeningResponse,
)
from pairscope.services.cache_service import CacheService, pairs_key
from pairscope.services.pair_analyzer import PairAnalyzer
from pairscope.services.price_source import PriceSeriesSource

logger = logging.getLogger(__name__)


def validate_screening_params(
    params: ScreeningParams,
    sectors: tuple[str, ...] | None = None,
) -> None:
    """
    Check window bounds and sector.

    Raises:
        ParameterValidationError: With a human-readable reason
    """
    if not (
        ScreeningDefaults.MIN_LOOKBACK_WINDOW
        <= params.lookback_window
        <= ScreeningDefaults.MAX_LOOKBACK_WINDOW
    ):
        raise ParameterValidationError(
            f"Lookback window must be between {ScreeningDefaults.MIN_LOOKBACK_WINDOW} "
            f"and {ScreeningDefaults.MAX_LOOKBACK_WINDOW} days"
        )

    if not (
        ScreeningDefaults.MIN_ZSCORE_WINDOW <= params.z_score_window <= params.lookback_window
    ):
        raise ParameterValidationError(
            f"Z-score window must be between {ScreeningDefaults.MIN_ZSCORE_WINDOW} days "
            f"and the lookback window"
        )

    if params.time_period < 1:
        raise ParameterValidationError("Time period must be a positive number of days")

    if params.sector is not None and sectors is not None and params.sector not in sectors:
        raise ParameterValidationError(
            f"Invalid sector. Valid sectors are: {', '.join(sectors)}"
        )


def generate_pair_candidates(
    tickers: list[str],
    reference: ReferenceData,
    sector: str | None = None,
) -> list[PairCandidate]:
    """All unordered i<j pairs within each sector bucket; never cross-sector.

    Tickers without a sector mapping are skipped. Bucket and pair order follow
    the input order.
    """
    tickers_by_sector: dict[str, list[str]] = {}
    for ticker in tickers:
        ticker_sector = reference.get_sector(ticker)
        if ticker_sector is None:
            continue
        if sector and ticker_sector != sector:
            continue
        tickers_by_sector.setdefault(ticker_sector, []).append(ticker)

    return [
        PairCandidate(ticker_a=a, ticker_b=b, sector=sector_name)
        for sector_name, sector_tickers in tickers_by_sector.items()
        for a, b in combinations(sector_tickers, 2)
    ]


def rank_pairs(pairs: list[PairAnalysis], top_n: int) -> list[RankedPair]:
    """Sort by descending |z-score|, truncate to top_n, assign ranks 1..n."""
    ordered = sorted(pairs, key=lambda p: abs(p.z_score), reverse=True)[:top_n]
    return [
        RankedPair(**pair.model_dump(), rank=index + 1, abs_z_score=abs(pair.z_score))
        for index, pair in enumerate(ordered)
    ]


def _failure(params: ScreeningParams, error: str) -> ScreeningResponse:
    return ScreeningResponse(
        success=False,
        pairs=[],
        params=params,
        metadata=ScreeningMetadata(timestamp=datetime.now(timezone.utc).isoformat()),
        error=error,
    )


class ScreeningService:
    """
    Pair screening over the curated representative universe.

    Dependencies are injected once at process start: the shared price
    source, analyzer, cache service and reference data.
    """

    def __init__(
        self,
        price_source: PriceSeriesSource,
        analyzer: PairAnalyzer,
        cache: CacheService,
        reference: ReferenceData,
        top_pairs_count: int = ScreeningDefaults.TOP_PAIRS_COUNT,
    ):
        self.price_source = price_source
        self.analyzer = analyzer
        self.cache = cache
        self.reference = reference
        self.top_pairs_count = top_pairs_count

    async def screen(
        self,
        lookback_window: int | None = None,
        z_score_window: int | None = None,
        time_period: int | None = None,
        sector: str | None = None,
    ) -> ScreeningResponse:
        """
        Screen the universe and rank the most divergent pairs.

        Never raises: validation failures and unexpected errors come back as
        success=False responses. Only successful results are cached.
        """
        params = ScreeningParams(
            lookback_window=lookback_window or ScreeningDefaults.LOOKBACK_WINDOW,
            z_score_window=z_score_window or ScreeningDefaults.ZSCORE_WINDOW,
            time_period=time_period or ScreeningDefaults.TIME_PERIOD,
            sector=sector or None,
        )

        try:
            validate_screening_params(params, self.reference.sectors)
        except ParameterValidationError as e:
            return _failure(params, str(e))

        cache_key = pairs_key(
            params.lookback_window, params.z_score_window, params.time_period, params.sector
        )
        cached = self.cache.pairs.get(cache_key)
        if cached is not None:
            logger.debug(f"Screening cache hit: {cache_key}")
            return cached

        try:
            response = await self._run_screen(params)
        except Exception as e:
            logger.error(f"Error in pair screening: {e}", exc_info=True)
            return _failure(params, "Internal error while screening pairs")

        self.cache.pairs.set(cache_key, response)
        return response

    async def _run_screen(self, params: ScreeningParams) -> ScreeningResponse:
        tickers = self.reference.representative_tickers()
        if params.sector:
            tickers = self.reference.filter_by_sector(tickers, params.sector)

        price_map = await self.price_source.fetch_many(tickers, params.time_period)

        candidates = generate_pair_candidates(list(price_map), self.reference, params.sector)

        analyses = await asyncio.gather(
            *(
                self.analyzer.analyze_async(
                    candidate.ticker_a,
                    candidate.ticker_b,
                    candidate.sector,
                    price_map,
                    params.lookback_window,
                    params.z_score_window,
                )
                for candidate in candidates
            )
        )

        valid_pairs = [analysis for analysis in analyses if analysis is not None]
        tradable_pairs = [
            pair
            for pair in valid_pairs
            if self.analyzer.passes_thresholds(pair.correlation, pair.r_squared)
        ]
        ranked = rank_pairs(tradable_pairs, self.top_pairs_count)

        now = datetime.now(timezone.utc)
        start_date = now - timedelta(days=params.time_period)

        logger.info(
            f"Screened {len(candidates)} candidate pairs: "
            f"{len(valid_pairs)} valid, {len(ranked)} ranked"
        )

        return ScreeningResponse(
            success=True,
            pairs=ranked,
            params=params,
            metadata=ScreeningMetadata(
                total_pairs_analyzed=len(candidates),
                valid_pairs=len(valid_pairs),
                timestamp=now.isoformat(),
                data_range=DataRange(
                    start=start_date.date().isoformat(),
                    end=now.date().isoformat(),
                ),
            ),
        )
