"""Statistics library for pair analysis.

Pure, deterministic NumPy-based functions for correlation, spread, z-score and
relationship-stability metrics. No I/O.

Degenerate inputs (empty series, fewer than two points, zero variance) return
neutral values (0 or an empty list) instead of raising or producing NaN.
Mismatched series lengths passed to the spread functions are caller bugs and
raise DataValidationError.
"""
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from pairscope.core.constants import StatThresholds
from pairscope.core.exceptions import DataValidationError

Series = list[float] | NDArray[np.float64]


class SpreadType(str, Enum):
    """How the per-timestamp relationship between two prices is measured."""
    LOG = "log"
    RATIO = "ratio"


class Confidence(str, Enum):
    """Tiered classification of rolling-correlation consistency."""
    STABLE = "Stable"
    MEDIUM = "Medium"
    WEAK = "Weak"


@dataclass(frozen=True)
class CorrelationMetrics:
    correlation: float
    r_squared: float


@dataclass(frozen=True)
class SpreadMetrics:
    spread: list[float]
    current_spread: float
    spread_mean: float
    spread_std: float
    spread_type: SpreadType


@dataclass(frozen=True)
class ZScoreMetrics:
    current_z_score: float
    z_score_history: list[float]
    z_score_min: float
    z_score_max: float


@dataclass(frozen=True)
class StabilityMetrics:
    rolling_correlations: list[float]
    consistency_score: float
    confidence: Confidence


def _as_array(values: Series) -> NDArray[np.float64]:
    return np.asarray(values, dtype=float)


def _is_constant(values: NDArray[np.float64]) -> bool:
    return len(values) == 0 or bool(np.all(values == values[0]))


def mean(values: Series) -> float:
    """Arithmetic mean. Returns 0.0 for an empty series."""
    values_array = _as_array(values)
    if len(values_array) == 0:
        return 0.0
    return float(np.mean(values_array))


def std_dev(values: Series) -> float:
    """Population standard deviation (divisor n). Returns 0.0 for n < 2."""
    values_array = _as_array(values)
    if len(values_array) < 2 or _is_constant(values_array):
        return 0.0
    return float(np.std(values_array))


def sample_std_dev(values: Series) -> float:
    """Sample standard deviation with Bessel's correction (divisor n - 1).

    Returns 0.0 for n < 2 and for constant series, so a flat history never
    yields a spurious floating-point residue.
    """
    values_array = _as_array(values)
    if len(values_array) < 2 or _is_constant(values_array):
        return 0.0
    return float(np.std(values_array, ddof=1))


def pearson_correlation(x: Series, y: Series) -> float:
    """Pearson correlation coefficient of two equal-length series.

    Formula: r = Σ(dx·dy) / √(Σdx² · Σdy²)

    Returns 0.0 when lengths differ, when fewer than two points are given,
    or when either series has zero variance. The result is clipped to [-1, 1].
    """
    x_array = _as_array(x)
    y_array = _as_array(y)

    if len(x_array) != len(y_array) or len(x_array) < 2:
        return 0.0
    if _is_constant(x_array) or _is_constant(y_array):
        return 0.0

    diff_x = x_array - np.mean(x_array)
    diff_y = y_array - np.mean(y_array)

    numerator = float(np.sum(diff_x * diff_y))
    denominator = math.sqrt(float(np.sum(diff_x * diff_x)) * float(np.sum(diff_y * diff_y)))

    if denominator == 0:
        return 0.0

    return max(-1.0, min(1.0, numerator / denominator))


def r_squared(correlation: float) -> float:
    """Coefficient of determination for a linear fit: correlation squared."""
    return correlation * correlation


def align_series(prices_a: Series, prices_b: Series) -> tuple[list[float], list[float]]:
    """Truncate both series to their shared trailing length.

    Keeps the most recent min(len(a), len(b)) observations of each, so the
    returned series always have equal length.
    """
    length = min(len(prices_a), len(prices_b))
    if length == 0:
        return [], []
    return list(prices_a[-length:]), list(prices_b[-length:])


def price_returns(prices: Series) -> list[float]:
    """Simple period-over-period returns.

    Element i is (p[i] - p[i-1]) / p[i-1], or 0.0 when p[i-1] is zero.
    Length is len(prices) - 1; empty for fewer than two prices.
    """
    prices_array = _as_array(prices)
    if len(prices_array) < 2:
        return []

    previous = prices_array[:-1]
    current = prices_array[1:]
    safe_previous = np.where(previous == 0, 1.0, previous)
    returns = np.where(previous == 0, 0.0, (current - previous) / safe_previous)
    return returns.tolist()


def correlation_metrics(prices_a: Series, prices_b: Series) -> CorrelationMetrics:
    """Correlation and R² computed on the return series of two price series."""
    correlation = pearson_correlation(price_returns(prices_a), price_returns(prices_b))
    return CorrelationMetrics(correlation=correlation, r_squared=r_squared(correlation))


def _check_same_length(prices_a: Series, prices_b: Series) -> None:
    if len(prices_a) != len(prices_b):
        raise DataValidationError(
            f"Price series must have the same length ({len(prices_a)} != {len(prices_b)})"
        )


def log_spread(prices_a: Series, prices_b: Series) -> list[float]:
    """log(pA) - log(pB), keeping only timestamps where both prices are positive.

    Raises:
        DataValidationError: If the series lengths differ
    """
    _check_same_length(prices_a, prices_b)
    a_array = _as_array(prices_a)
    b_array = _as_array(prices_b)

    valid = (a_array > 0) & (b_array > 0)
    return (np.log(a_array[valid]) - np.log(b_array[valid])).tolist()


def ratio_spread(prices_a: Series, prices_b: Series) -> list[float]:
    """pA / pB, keeping only timestamps where pB is non-zero.

    Raises:
        DataValidationError: If the series lengths differ
    """
    _check_same_length(prices_a, prices_b)
    a_array = _as_array(prices_a)
    b_array = _as_array(prices_b)

    valid = b_array != 0
    return (a_array[valid] / b_array[valid]).tolist()


def spread_metrics(
    prices_a: Series,
    prices_b: Series,
    spread_type: SpreadType = SpreadType.LOG,
) -> SpreadMetrics:
    """Spread series plus its current value, mean and sample standard deviation."""
    if spread_type == SpreadType.LOG:
        spread = log_spread(prices_a, prices_b)
    else:
        spread = ratio_spread(prices_a, prices_b)

    return SpreadMetrics(
        spread=spread,
        current_spread=spread[-1] if spread else 0.0,
        spread_mean=mean(spread),
        spread_std=sample_std_dev(spread),
        spread_type=spread_type,
    )


def z_score(value: float, mean_value: float, std: float) -> float:
    """Standard-deviation distance of value from mean. Returns 0.0 when std is 0."""
    if std == 0:
        return 0.0
    return (value - mean_value) / std


def rolling_z_scores(spread: Series, window: int) -> list[float]:
    """Z-score of each element against its trailing window.

    For each index i >= window - 1 the element is scored against the mean and
    sample standard deviation of spread[i - window + 1 : i + 1]. When the
    spread is shorter than the window every element is scored against the
    whole series instead.
    """
    spread_array = _as_array(spread)

    if window < 1 or len(spread_array) < window:
        whole_mean = mean(spread_array)
        whole_std = sample_std_dev(spread_array)
        return [z_score(float(s), whole_mean, whole_std) for s in spread_array]

    z_scores = []
    for i in range(window - 1, len(spread_array)):
        window_data = spread_array[i - window + 1 : i + 1]
        z_scores.append(
            z_score(float(spread_array[i]), mean(window_data), sample_std_dev(window_data))
        )
    return z_scores


def z_score_metrics(spread: Series, lookback_window: int, z_score_window: int) -> ZScoreMetrics:
    """Current z-score over the lookback baseline plus rolling z-score history."""
    spread_array = _as_array(spread)
    lookback_data = spread_array[-lookback_window:] if lookback_window > 0 else spread_array

    current_spread = float(spread_array[-1]) if len(spread_array) else 0.0
    current = z_score(current_spread, mean(lookback_data), sample_std_dev(lookback_data))

    history = rolling_z_scores(spread_array, z_score_window)

    return ZScoreMetrics(
        current_z_score=current,
        z_score_history=history,
        z_score_min=min(history) if history else 0.0,
        z_score_max=max(history) if history else 0.0,
    )


def rolling_correlations(prices_a: Series, prices_b: Series, window: int) -> list[float]:
    """Return correlation inside every trailing window of the two price series.

    Returns an empty list when lengths differ or the series are shorter than
    the window.
    """
    a_array = _as_array(prices_a)
    b_array = _as_array(prices_b)

    if len(a_array) != len(b_array) or len(a_array) < window or window < 1:
        return []

    correlations = []
    for i in range(window - 1, len(a_array)):
        window_a = a_array[i - window + 1 : i + 1]
        window_b = b_array[i - window + 1 : i + 1]
        correlations.append(
            pearson_correlation(price_returns(window_a), price_returns(window_b))
        )
    return correlations


def consistency_score(
    correlations: Series,
    threshold: float = StatThresholds.CONSISTENCY_CORRELATION_THRESHOLD,
) -> float:
    """Fraction of rolling correlations at or above threshold. 0.0 when empty."""
    correlations_array = _as_array(correlations)
    if len(correlations_array) == 0:
        return 0.0
    return float(np.count_nonzero(correlations_array >= threshold)) / len(correlations_array)


def confidence_label(score: float) -> Confidence:
    """Map a consistency score onto Stable / Medium / Weak, highest tier first."""
    if score >= StatThresholds.STABLE_MIN_CONSISTENCY:
        return Confidence.STABLE
    if score >= StatThresholds.MEDIUM_MIN_CONSISTENCY:
        return Confidence.MEDIUM
    return Confidence.WEAK


def stability_metrics(prices_a: Series, prices_b: Series, rolling_window: int = 30) -> StabilityMetrics:
    """Rolling correlations, their consistency score and confidence label."""
    correlations = rolling_correlations(prices_a, prices_b, rolling_window)
    score = consistency_score(correlations)
    return StabilityMetrics(
        rolling_correlations=correlations,
        consistency_score=score,
        confidence=confidence_label(score),
    )
