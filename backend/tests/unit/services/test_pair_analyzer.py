"""Tests for single-pair analysis."""

import pytest

from pairscope.analytics.statistics import Confidence
from pairscope.services.pair_analyzer import PairAnalyzer, effective_windows, lookback_slices

from tests.utils.mock_data import MockPairGenerator


class TestEffectiveWindows:
    """Tests for lookback-bounded window derivation."""

    def test_default_windows(self):
        windows = effective_windows(60, 20)

        assert windows.z_score_window == 20
        assert windows.stability_window == 30
        assert windows.min_data_points == 60

    def test_short_lookback_caps_windows(self):
        windows = effective_windows(15, 20)

        assert windows.z_score_window == 5
        assert windows.stability_window == 7
        assert windows.min_data_points == 30

    def test_lookback_slices_align_then_trim(self):
        prices_a = [float(i) for i in range(100)]
        prices_b = [float(i) for i in range(80)]

        slice_a, slice_b = lookback_slices(prices_a, prices_b, 60)

        assert len(slice_a) == len(slice_b) == 60
        assert slice_a[-1] == 99.0
        assert slice_b[-1] == 79.0


class TestPairAnalyzer:
    """Tests for PairAnalyzer.analyze."""

    @pytest.fixture
    def analyzer(self) -> PairAnalyzer:
        return PairAnalyzer()

    def test_correlated_pair_produces_analysis(self, analyzer: PairAnalyzer):
        prices_a, prices_b = MockPairGenerator.correlated_pair(days=120, shock=0.03)
        price_map = {"XOM": prices_a, "CVX": prices_b}

        result = analyzer.analyze("XOM", "CVX", "Energy", price_map, 60, 20)

        assert result is not None
        assert result.sector == "Energy"
        assert result.correlation >= 0.7
        assert result.r_squared == pytest.approx(result.correlation ** 2)
        assert result.z_score > 2.0
        assert result.direction == "XOM rich / CVX cheap"
        assert result.confidence == Confidence.STABLE
        assert result.spread_std > 0

    def test_missing_series_is_filtered(self, analyzer: PairAnalyzer):
        prices_a, _ = MockPairGenerator.correlated_pair()
        assert analyzer.analyze("XOM", "CVX", "Energy", {"XOM": prices_a}, 60, 20) is None

    def test_short_history_is_filtered(self, analyzer: PairAnalyzer):
        """Aligned history shorter than max(lookback, 30) yields no analysis."""
        prices_a, prices_b = MockPairGenerator.correlated_pair(days=50)
        price_map = {"XOM": prices_a, "CVX": prices_b}

        assert analyzer.analyze("XOM", "CVX", "Energy", price_map, 60, 20) is None

    def test_uncorrelated_pair_is_filtered(self, analyzer: PairAnalyzer):
        prices_a, prices_b = MockPairGenerator.independent_pair()
        price_map = {"XOM": prices_a, "CVX": prices_b}

        assert analyzer.analyze("XOM", "CVX", "Energy", price_map, 60, 20) is None

    def test_custom_thresholds(self):
        analyzer = PairAnalyzer(min_correlation=-1.0, min_r_squared=0.0)
        prices_a, prices_b = MockPairGenerator.independent_pair()
        price_map = {"XOM": prices_a, "CVX": prices_b}

        assert analyzer.analyze("XOM", "CVX", "Energy", price_map, 60, 20) is not None

    @pytest.mark.asyncio
    async def test_analyze_async_matches_sync(self, analyzer: PairAnalyzer):
        prices_a, prices_b = MockPairGenerator.correlated_pair(days=120)
        price_map = {"XOM": prices_a, "CVX": prices_b}

        expected = analyzer.analyze("XOM", "CVX", "Energy", price_map, 60, 20)
        result = await analyzer.analyze_async("XOM", "CVX", "Energy", price_map, 60, 20)

        assert result == expected
