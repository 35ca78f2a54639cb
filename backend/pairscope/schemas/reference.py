"""Schemas for ticker validation, health and cache introspection."""

from pydantic import Field

from pairscope.schemas.base import StrictBaseModel


class TickerValidationResult(StrictBaseModel):
    valid: bool
    ticker: str
    is_index: bool = False
    sector: str | None = None
    error: str | None = None


class CacheStats(StrictBaseModel):
    """Entry counts of the in-memory caches."""

    price_entries: int = 0
    pairs_entries: int = 0
    correlation_entries: int = 0


class HealthStatus(StrictBaseModel):
    status: str = "healthy"
    timestamp: str
    version: str
    cache: CacheStats = Field(default_factory=CacheStats)
