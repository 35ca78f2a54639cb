"""Unit tests for the PairScope screening engine.

This package contains unit tests for the statistics library, providers,
caches, pair analysis, screening and correlation services, and the engine
facade.
"""
