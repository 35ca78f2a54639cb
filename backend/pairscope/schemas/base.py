"""Base Pydantic schemas with strict validation."""
from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Base model that forbids extra fields.

    All result models returned to callers inherit from this class so the
    engine's contract stays explicit.
    """

    model_config = ConfigDict(extra="forbid")


class FrozenModel(StrictBaseModel):
    """Strict model whose instances are immutable once built."""

    model_config = ConfigDict(frozen=True)
