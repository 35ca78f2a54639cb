"""Unit tests for upstream price providers.

This package contains unit tests for the Yahoo chart endpoint provider, the
yfinance provider, the mock provider and the provider factory.
"""
