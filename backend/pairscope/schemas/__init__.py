"""Pydantic schemas for engine results.

This module exports all Pydantic schemas returned to callers.
"""

from pairscope.schemas.base import FrozenModel, StrictBaseModel
from pairscope.schemas.correlation import (
    AssessmentDetails,
    CorrelationParams,
    CorrelationReport,
    CorrelationResponse,
    SpreadSummary,
    ZScoreRange,
)
from pairscope.schemas.pairs import (
    DataRange,
    PairAnalysis,
    PairCandidate,
    RankedPair,
    ScreeningMetadata,
    ScreeningParams,
    ScreeningResponse,
)
from pairscope.schemas.reference import CacheStats, HealthStatus, TickerValidationResult

__all__ = [
    "AssessmentDetails",
    "CacheStats",
    "CorrelationParams",
    "CorrelationReport",
    "CorrelationResponse",
    "DataRange",
    "FrozenModel",
    "HealthStatus",
    "PairAnalysis",
    "PairCandidate",
    "RankedPair",
    "ScreeningMetadata",
    "ScreeningParams",
    "ScreeningResponse",
    "SpreadSummary",
    "StrictBaseModel",
    "TickerValidationResult",
    "ZScoreRange",
]
