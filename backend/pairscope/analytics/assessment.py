"""Pair assessment classification.

Single threshold table shared by the screening and correlation paths.
"""
from dataclasses import dataclass
from enum import Enum

from pairscope.core.constants import StatThresholds


class Assessment(str, Enum):
    """Overall tradability verdict for a pair."""
    STATISTICALLY_TRADABLE = "statistically-tradable"
    HIGH_CORRELATION_UNSTABLE = "high-correlation-unstable"
    LOW_CORRELATION = "low-correlation"


@dataclass(frozen=True)
class AssessmentThresholds:
    tradable_min_correlation: float = StatThresholds.TRADABLE_MIN_CORRELATION
    tradable_min_r_squared: float = StatThresholds.TRADABLE_MIN_R_SQUARED
    unstable_min_correlation: float = StatThresholds.UNSTABLE_MIN_CORRELATION
    unstable_max_r_squared: float = StatThresholds.UNSTABLE_MAX_R_SQUARED


DEFAULT_THRESHOLDS = AssessmentThresholds()

ASSESSMENT_DETAILS: dict[Assessment, tuple[str, str]] = {
    Assessment.STATISTICALLY_TRADABLE: (
        "Statistically Tradable",
        "This pair exhibits strong correlation stability and may be suitable "
        "for statistical arbitrage analysis.",
    ),
    Assessment.HIGH_CORRELATION_UNSTABLE: (
        "High Correlation, Unstable",
        "While correlation appears high, the relationship shows instability. "
        "Exercise caution and consider shorter lookback periods.",
    ),
    Assessment.LOW_CORRELATION: (
        "Low Correlation - Avoid",
        "Insufficient correlation for pairs trading. The statistical relationship "
        "is too weak to support mean-reversion assumptions.",
    ),
}


def classify_assessment(
    correlation: float,
    r_squared_value: float,
    thresholds: AssessmentThresholds = DEFAULT_THRESHOLDS,
) -> Assessment:
    """Classify a pair by correlation and R².

    Tradable is checked first; the unstable tier only applies to pairs that
    are not already tradable.
    """
    if (
        correlation >= thresholds.tradable_min_correlation
        and r_squared_value >= thresholds.tradable_min_r_squared
    ):
        return Assessment.STATISTICALLY_TRADABLE

    if (
        correlation >= thresholds.unstable_min_correlation
        and r_squared_value < thresholds.unstable_max_r_squared
    ):
        return Assessment.HIGH_CORRELATION_UNSTABLE

    return Assessment.LOW_CORRELATION


def assessment_details(assessment: Assessment) -> tuple[str, str]:
    """Return the fixed (label, description) pair for an assessment."""
    return ASSESSMENT_DETAILS[assessment]


def spread_direction(ticker_a: str, ticker_b: str, current_z_score: float) -> str:
    """Label which leg is rich and which is cheap. Positive z means ticker_a is rich."""
    if current_z_score > 0:
        return f"{ticker_a} rich / {ticker_b} cheap"
    return f"{ticker_b} rich / {ticker_a} cheap"
