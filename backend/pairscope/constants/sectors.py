"""Ticker and sector reference data.

Static S&P 500 membership, ticker → sector mapping, and the index allow-list.
The screening universe is a curated, bounded sample grouped by sector rather
than the full membership set.
"""
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

SECTORS: tuple[str, ...] = (
    "Technology",
    "Financials",
    "Healthcare",
    "Consumer Discretionary",
    "Consumer Staples",
    "Energy",
    "Industrials",
    "Communication Services",
    "Utilities",
    "Materials",
    "Real Estate",
)

# Curated screening universe (sector → representative constituents)
REPRESENTATIVE_TICKERS: dict[str, tuple[str, ...]] = {
    "Technology": ("AAPL", "MSFT", "NVDA", "AVGO", "ORCL", "AMD", "QCOM", "TXN"),
    "Financials": ("JPM", "BAC", "WFC", "GS", "MS", "V", "MA", "C"),
    "Healthcare": ("UNH", "JNJ", "LLY", "MRK", "ABBV", "PFE", "TMO", "ABT"),
    "Consumer Discretionary": ("AMZN", "TSLA", "HD", "MCD", "NKE", "LOW"),
    "Consumer Staples": ("PG", "KO", "PEP", "COST", "WMT", "PM"),
    "Energy": ("XOM", "CVX", "COP", "EOG", "SLB", "MPC"),
    "Industrials": ("CAT", "DE", "GE", "UNP", "HON", "BA"),
    "Communication Services": ("GOOGL", "META", "NFLX", "DIS", "VZ", "T"),
    "Utilities": ("NEE", "DUK", "SO", "D", "SRE", "AEP"),
    "Materials": ("LIN", "APD", "SHW", "FCX", "NEM", "NUE"),
    "Real Estate": ("PLD", "AMT", "EQIX", "CCI", "PSA", "O"),
}

# Additional constituents accepted for single-pair analysis
_ADDITIONAL_CONSTITUENTS: dict[str, tuple[str, ...]] = {
    "Technology": ("ADBE", "CRM", "CSCO", "INTC", "IBM", "INTU", "AMAT", "MU", "NOW", "ADI"),
    "Financials": ("BLK", "SCHW", "AXP", "SPGI", "CB", "PGR", "USB", "PNC", "BK", "COF"),
    "Healthcare": ("DHR", "BMY", "AMGN", "GILD", "CVS", "MDT", "ISRG", "SYK", "CI", "ELV"),
    "Consumer Discretionary": ("SBUX", "TJX", "BKNG", "CMG", "GM", "F", "ORLY", "MAR"),
    "Consumer Staples": ("MO", "MDLZ", "CL", "KMB", "GIS", "KHC", "TGT", "STZ"),
    "Energy": ("PSX", "VLO", "OXY", "WMB", "KMI", "HAL", "DVN"),
    "Industrials": ("RTX", "LMT", "UPS", "MMM", "GD", "NOC", "CSX", "FDX", "ETN"),
    "Communication Services": ("GOOG", "CMCSA", "TMUS", "CHTR", "EA"),
    "Utilities": ("EXC", "XEL", "PCG", "ED", "PEG", "WEC"),
    "Materials": ("ECL", "DOW", "DD", "PPG", "VMC", "MLM"),
    "Real Estate": ("SPG", "WELL", "DLR", "VICI", "AVB", "EQR"),
}

ALLOWED_INDICES: frozenset[str] = frozenset(
    {"^GSPC", "^DJI", "^IXIC", "^RUT", "^VIX", "^NDX"}
)


def _build_sector_map() -> dict[str, str]:
    sector_map: dict[str, str] = {}
    for table in (REPRESENTATIVE_TICKERS, _ADDITIONAL_CONSTITUENTS):
        for sector, tickers in table.items():
            for ticker in tickers:
                sector_map[ticker] = sector
    return sector_map


TICKER_SECTOR_MAP: dict[str, str] = _build_sector_map()

SP500_TICKERS: frozenset[str] = frozenset(TICKER_SECTOR_MAP)


@dataclass(frozen=True)
class ReferenceData:
    """Read-only lookup over ticker membership, sectors, and supported indices.

    Services receive an instance rather than importing the module tables so
    tests can substitute a small universe.
    """

    sectors: tuple[str, ...] = SECTORS
    universe: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(REPRESENTATIVE_TICKERS)
    )
    sector_map: Mapping[str, str] = field(default_factory=lambda: dict(TICKER_SECTOR_MAP))
    members: frozenset[str] = SP500_TICKERS
    indices: frozenset[str] = ALLOWED_INDICES

    def get_sector(self, ticker: str) -> str | None:
        """Return the sector of a ticker, or None when it is not mapped."""
        return self.sector_map.get(ticker)

    def is_member(self, ticker: str) -> bool:
        return ticker in self.members

    def is_allowed_index(self, ticker: str) -> bool:
        return ticker in self.indices

    def representative_tickers(self) -> list[str]:
        """Flatten the screening universe into a de-duplicated, ordered list."""
        seen: dict[str, None] = {}
        for tickers in self.universe.values():
            for ticker in tickers:
                seen.setdefault(ticker, None)
        return list(seen)

    def filter_by_sector(self, tickers: Iterable[str], sector: str) -> list[str]:
        return [t for t in tickers if self.sector_map.get(t) == sector]


def get_reference_data() -> ReferenceData:
    """Return the default reference tables."""
    return ReferenceData()
