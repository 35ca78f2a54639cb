"""Core exception classes for the PairScope application."""


class PairScopeError(Exception):
    """Base exception for pair screening operations."""

    pass


class APIError(PairScopeError):
    """Raised when upstream price provider operations fail."""

    pass


class RateLimitError(APIError):
    """Raised when the upstream provider throttles a request."""

    pass


class UpstreamDataError(APIError):
    """Raised when the upstream response carries no usable price data."""

    pass


class DataValidationError(PairScopeError, ValueError):
    """Raised when a computation receives inputs that violate its contract."""

    pass


class TickerValidationError(PairScopeError):
    """Raised when a requested ticker is malformed, unknown, or unsupported."""

    pass


class ParameterValidationError(PairScopeError):
    """Raised when request parameters are out of range."""

    pass


class InsufficientDataError(PairScopeError):
    """Raised when price history is missing or too short for analysis."""

    pass
