"""Schemas for single-pair correlation reports."""

from pydantic import Field

from pairscope.analytics.assessment import Assessment
from pairscope.analytics.statistics import Confidence
from pairscope.schemas.base import StrictBaseModel


class CorrelationParams(StrictBaseModel):
    """Effective parameters of a correlation request (normalised, defaults applied)."""

    ticker_a: str
    ticker_b: str
    lookback_window: int
    time_period: int


class ZScoreRange(StrictBaseModel):
    min: float
    max: float


class SpreadSummary(StrictBaseModel):
    current: float
    mean: float
    std: float


class AssessmentDetails(StrictBaseModel):
    label: str
    description: str


class CorrelationReport(StrictBaseModel):
    """Full metric stack for one requested pair."""

    ticker_a: str
    ticker_b: str
    correlation: float = Field(..., ge=-1, le=1)
    r_squared: float = Field(..., ge=0, le=1)
    current_z_score: float
    z_score_range: ZScoreRange
    assessment: Assessment
    assessment_details: AssessmentDetails
    spread: SpreadSummary
    consistency_score: float = Field(..., ge=0, le=1)
    confidence: Confidence
    data_points: int = Field(..., description="Observations in the lookback slice")


class CorrelationResponse(StrictBaseModel):
    success: bool
    data: CorrelationReport | None = None
    error: str | None = None
