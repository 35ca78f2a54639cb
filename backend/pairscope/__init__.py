"""PairScope: statistical-arbitrage pair screening and correlation analysis."""

__version__ = "1.0.0"
