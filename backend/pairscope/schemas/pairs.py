"""Schemas for pair screening results."""

from pydantic import Field

from pairscope.analytics.statistics import Confidence
from pairscope.schemas.base import FrozenModel, StrictBaseModel


class PairCandidate(FrozenModel):
    """Two same-sector tickers considered for analysis, tracked in fixed A/B order."""

    ticker_a: str
    ticker_b: str
    sector: str


class PairAnalysis(FrozenModel):
    """Metrics of one candidate pair that met the screening thresholds."""

    ticker_a: str
    ticker_b: str
    sector: str
    correlation: float = Field(..., ge=-1, le=1, description="Pearson correlation of returns")
    r_squared: float = Field(..., ge=0, le=1)
    z_score: float = Field(..., description="Current spread z-score over the lookback window")
    direction: str = Field(..., description="Which leg is rich and which is cheap")
    confidence: Confidence
    spread_mean: float
    spread_std: float


class RankedPair(PairAnalysis):
    """Pair analysis with its dense 1-based rank by absolute z-score."""

    rank: int = Field(..., ge=1)
    abs_z_score: float = Field(..., ge=0)


class ScreeningParams(StrictBaseModel):
    """Effective parameters of a screening request (defaults applied)."""

    lookback_window: int
    z_score_window: int
    time_period: int
    sector: str | None = None


class DataRange(StrictBaseModel):
    start: str = ""
    end: str = ""


class ScreeningMetadata(StrictBaseModel):
    """Bookkeeping attached to a screening result."""

    total_pairs_analyzed: int = Field(0, description="Candidate pairs considered")
    valid_pairs: int = Field(0, description="Candidates that survived analysis")
    timestamp: str = Field(..., description="ISO-8601 time the result was computed")
    data_range: DataRange = Field(default_factory=DataRange)


class ScreeningResponse(StrictBaseModel):
    """Ranked pairs plus metadata, or a failure with a human-readable reason."""

    success: bool
    pairs: list[RankedPair] = Field(default_factory=list)
    params: ScreeningParams
    metadata: ScreeningMetadata
    error: str | None = None
