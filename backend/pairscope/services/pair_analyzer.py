"""Pair analyzer: metrics for one candidate pair.

Consumes two price series and produces a PairAnalysis, or None when the
pair is filtered out (missing data, short history, or below thresholds).
Filtering is not an error.
"""
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from pairscope.analytics import statistics as stats
from pairscope.analytics.assessment import spread_direction
from pairscope.core.constants import ScreeningDefaults
from pairscope.schemas.pairs import PairAnalysis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisWindows:
    """Windows derived from a lookback and a requested z-score window."""

    lookback_window: int
    z_score_window: int
    stability_window: int
    min_data_points: int


def effective_windows(
    lookback_window: int,
    z_score_window: int,
) -> AnalysisWindows:
    """Bound the rolling windows by the lookback.

    - z-score window: min(requested, lookback // 3)
    - stability window: min(30, lookback // 2)
    - required aligned history: max(lookback, 30)
    """
    return AnalysisWindows(
        lookback_window=lookback_window,
        z_score_window=min(
            z_score_window, lookback_window // ScreeningDefaults.ZSCORE_WINDOW_LOOKBACK_DIVISOR
        ),
        stability_window=min(
            ScreeningDefaults.STABILITY_WINDOW_CAP,
            lookback_window // ScreeningDefaults.STABILITY_WINDOW_LOOKBACK_DIVISOR,
        ),
        min_data_points=max(lookback_window, ScreeningDefaults.MIN_HISTORY_POINTS),
    )


def lookback_slices(
    prices_a: Sequence[float],
    prices_b: Sequence[float],
    lookback_window: int,
) -> tuple[list[float], list[float]]:
    """Align two series and keep their trailing `lookback_window` observations."""
    aligned_a, aligned_b = stats.align_series(prices_a, prices_b)
    return aligned_a[-lookback_window:], aligned_b[-lookback_window:]


class PairAnalyzer:
    """Analyze one same-sector candidate pair against the screening thresholds."""

    def __init__(
        self,
        min_correlation: float = ScreeningDefaults.MIN_CORRELATION,
        min_r_squared: float = ScreeningDefaults.MIN_R_SQUARED,
    ):
        self.min_correlation = min_correlation
        self.min_r_squared = min_r_squared

    def passes_thresholds(self, correlation: float, r_squared: float) -> bool:
        return correlation >= self.min_correlation and r_squared >= self.min_r_squared

    def analyze(
        self,
        ticker_a: str,
        ticker_b: str,
        sector: str,
        price_map: Mapping[str, Sequence[float]],
        lookback_window: int,
        z_score_window: int,
    ) -> PairAnalysis | None:
        """
        Compute one pair's metrics on the trailing lookback slice.

        Returns:
            PairAnalysis, or None if either series is missing, the aligned
            history is shorter than max(lookback_window, 30), the pair is below
            the correlation/R² minimums, or the computation fails unexpectedly
        """
        prices_a = price_map.get(ticker_a)
        prices_b = price_map.get(ticker_b)
        if not prices_a or not prices_b:
            return None

        windows = effective_windows(lookback_window, z_score_window)
        if min(len(prices_a), len(prices_b)) < windows.min_data_points:
            return None

        try:
            lookback_a, lookback_b = lookback_slices(prices_a, prices_b, lookback_window)

            correlation = stats.correlation_metrics(lookback_a, lookback_b)
            if not self.passes_thresholds(correlation.correlation, correlation.r_squared):
                return None

            spread = stats.spread_metrics(lookback_a, lookback_b, stats.SpreadType.LOG)
            z_scores = stats.z_score_metrics(
                spread.spread, lookback_window, windows.z_score_window
            )
            stability = stats.stability_metrics(lookback_a, lookback_b, windows.stability_window)

            return PairAnalysis(
                ticker_a=ticker_a,
                ticker_b=ticker_b,
                sector=sector,
                correlation=correlation.correlation,
                r_squared=correlation.r_squared,
                z_score=z_scores.current_z_score,
                direction=spread_direction(ticker_a, ticker_b, z_scores.current_z_score),
                confidence=stability.confidence,
                spread_mean=spread.spread_mean,
                spread_std=spread.spread_std,
            )
        except Exception as e:
            logger.error(f"Error analyzing pair {ticker_a}/{ticker_b}: {e}", exc_info=True)
            return None

    async def analyze_async(
        self,
        ticker_a: str,
        ticker_b: str,
        sector: str,
        price_map: Mapping[str, Sequence[float]],
        lookback_window: int,
        z_score_window: int,
    ) -> PairAnalysis | None:
        """Coroutine wrapper so pair analyses can be fanned out as a task group."""
        return self.analyze(
            ticker_a, ticker_b, sector, price_map, lookback_window, z_score_window
        )
