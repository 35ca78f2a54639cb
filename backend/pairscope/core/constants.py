"""Application-wide constants and thresholds.

All magic numbers should be defined here with clear documentation about their
purpose. This centralizes screening policy and makes it easy to tune.
"""


class ScreeningDefaults:
    """Default request parameters and filtering policy for pair screening."""

    # =========================================================================
    # Request Defaults
    # =========================================================================

    LOOKBACK_WINDOW = 60
    """Trailing observations used as the historical baseline."""

    ZSCORE_WINDOW = 20
    """Rolling window for z-score history when the caller does not supply one."""

    TIME_PERIOD = 252
    """Trading days of price history fetched per ticker (one trading year)."""

    # =========================================================================
    # Validation Bounds
    # =========================================================================

    MIN_LOOKBACK_WINDOW = 10
    MAX_LOOKBACK_WINDOW = 252
    MIN_ZSCORE_WINDOW = 5

    MIN_HISTORY_POINTS = 30
    """
    Floor on aligned history length. A pair needs at least
    max(lookback_window, MIN_HISTORY_POINTS) shared observations.
    """

    # =========================================================================
    # Filtering and Ranking
    # =========================================================================

    MIN_CORRELATION = 0.7
    """Minimum return correlation for a pair to survive screening."""

    MIN_R_SQUARED = 0.5
    """Minimum R² for a pair to survive screening."""

    TOP_PAIRS_COUNT = 20
    """Maximum number of ranked pairs returned by a screen."""

    # =========================================================================
    # Window Caps
    # =========================================================================

    ZSCORE_WINDOW_LOOKBACK_DIVISOR = 3
    """Effective z-score window never exceeds lookback_window // 3."""

    CORRELATION_REPORT_ZSCORE_WINDOW = 20
    """Z-score window cap used by the single-pair correlation report."""

    STABILITY_WINDOW_CAP = 30
    STABILITY_WINDOW_LOOKBACK_DIVISOR = 2
    """Rolling stability window is min(STABILITY_WINDOW_CAP, lookback_window // 2)."""

    ALL_SECTORS = "all"
    """Cache-key sentinel used when a screen is not restricted to one sector."""


class StatThresholds:
    """Thresholds for assessment and confidence classification."""

    # Assessment tiers (checked tradable first, then unstable)
    TRADABLE_MIN_CORRELATION = 0.9
    TRADABLE_MIN_R_SQUARED = 0.8
    UNSTABLE_MIN_CORRELATION = 0.8
    UNSTABLE_MAX_R_SQUARED = 0.7

    # Confidence tiers over the rolling-correlation consistency score
    STABLE_MIN_CONSISTENCY = 0.7
    MEDIUM_MIN_CONSISTENCY = 0.4

    CONSISTENCY_CORRELATION_THRESHOLD = 0.5
    """A rolling window counts as consistent when its correlation is >= this value."""
