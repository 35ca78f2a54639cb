"""Ticker validation utilities."""
import re

from pairscope.constants.sectors import ReferenceData
from pairscope.schemas.reference import TickerValidationResult

TICKER_PATTERN = re.compile(r"^\^?[A-Z]{1,5}$")


def normalize_symbol(symbol: str) -> str:
    """
    Normalize a symbol to uppercase and stripped.

    Args:
        symbol: The symbol to normalize

    Returns:
        Uppercase, stripped symbol
    """
    return symbol.upper().strip()


def is_valid_symbol(symbol: str) -> bool:
    """
    Validate ticker format: one to five letters, optionally prefixed by a
    caret for indices (e.g., ^GSPC).

    Args:
        symbol: The symbol to validate (should already be uppercase/stripped)
    """
    return bool(TICKER_PATTERN.match(symbol))


def validate_ticker(ticker: str, reference: ReferenceData) -> TickerValidationResult:
    """
    Check a ticker against the reference universe.

    Index tickers ('^' prefix) must be in the index allow-list; all other
    tickers must be S&P 500 members.
    """
    normalized = normalize_symbol(ticker)
    is_index = normalized.startswith("^")

    if not is_valid_symbol(normalized):
        return TickerValidationResult(
            valid=False,
            ticker=normalized,
            is_index=is_index,
            error=f"Invalid ticker format: {ticker}",
        )

    if is_index:
        if reference.is_allowed_index(normalized):
            return TickerValidationResult(valid=True, ticker=normalized, is_index=True)
        return TickerValidationResult(
            valid=False,
            ticker=normalized,
            is_index=True,
            error=(
                f"Index {normalized} is not supported. "
                f"Allowed indices: {', '.join(sorted(reference.indices))}"
            ),
        )

    if reference.is_member(normalized):
        return TickerValidationResult(
            valid=True,
            ticker=normalized,
            is_index=False,
            sector=reference.get_sector(normalized),
        )

    return TickerValidationResult(
        valid=False,
        ticker=normalized,
        is_index=False,
        error=(
            f"Ticker {normalized} is not in the S&P 500. "
            "Only S&P 500 constituents are supported."
        ),
    )
