"""Pair analytics package.

Pure statistics for pair screening and the shared assessment classification.

Available functions:
- Mean, sample/population standard deviation, Pearson correlation, R²
- Price returns, log and ratio spreads
- Z-scores (point and rolling)
- Rolling correlations, consistency score, confidence label
- Assessment classification and spread direction labels
"""

from .assessment import (
    Assessment,
    AssessmentThresholds,
    assessment_details,
    classify_assessment,
    spread_direction,
)
from .statistics import (
    align_series,
    Confidence,
    CorrelationMetrics,
    SpreadMetrics,
    SpreadType,
    StabilityMetrics,
    ZScoreMetrics,
    confidence_label,
    consistency_score,
    correlation_metrics,
    log_spread,
    mean,
    pearson_correlation,
    price_returns,
    r_squared,
    ratio_spread,
    rolling_correlations,
    rolling_z_scores,
    sample_std_dev,
    spread_metrics,
    stability_metrics,
    std_dev,
    z_score,
    z_score_metrics,
)

__all__ = [
    "align_series",
    "Assessment",
    "AssessmentThresholds",
    "Confidence",
    "CorrelationMetrics",
    "SpreadMetrics",
    "SpreadType",
    "StabilityMetrics",
    "ZScoreMetrics",
    "assessment_details",
    "classify_assessment",
    "confidence_label",
    "consistency_score",
    "correlation_metrics",
    "log_spread",
    "mean",
    "pearson_correlation",
    "price_returns",
    "r_squared",
    "ratio_spread",
    "rolling_correlations",
    "rolling_z_scores",
    "sample_std_dev",
    "spread_direction",
    "spread_metrics",
    "stability_metrics",
    "std_dev",
    "z_score",
    "z_score_metrics",
]
