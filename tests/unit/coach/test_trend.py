"""Tests for least-squares trend analysis."""

import pytest
from pydantic import ValidationError

from app.coach.trend import (
    DEFAULT_TREND_CONFIG,
    TrendConfig,
    _classify,
    _fit_line,
    analyze_trend,
)
from app.schemas.trend import TrendDirection


# ======================================================================
# _fit_line
# ======================================================================


class TestFitLine:
    def test_perfect_line(self):
        slope, r2 = _fit_line([1.0, 2.0, 3.0, 4.0])
        assert slope == pytest.approx(1.0)
        assert r2 == pytest.approx(1.0)

    def test_constant_series_has_zero_r_squared(self):
        slope, r2 = _fit_line([5.0, 5.0, 5.0])
        assert slope == 0.0
        assert r2 == 0.0

    def test_noisy_series_r_squared_between_0_and_1(self):
        _, r2 = _fit_line([1.0, 3.0, 2.0, 4.0, 3.0])
        assert 0.0 < r2 < 1.0


# ======================================================================
# _classify
# ======================================================================


class TestClassify:
    @pytest.mark.parametrize(
        "slope, mean, expected",
        [
            (2.0, 100.0, TrendDirection.IMPROVING),
            (-2.0, 100.0, TrendDirection.DECLINING),
            # dead band is 1 % of the mean
            (0.5, 100.0, TrendDirection.STABLE),
            (-0.99, 100.0, TrendDirection.STABLE),
            (1e-3, 0.0, TrendDirection.IMPROVING),
        ],
    )
    def test_directions(self, slope, mean, expected):
        assert _classify(slope, mean, DEFAULT_TREND_CONFIG) == expected


# ======================================================================
# analyze_trend
# ======================================================================


class TestAnalyzeTrend:
    def test_rising_series(self):
        result = analyze_trend([100, 102.5, 105, 107.5, 110])
        assert result.direction == TrendDirection.IMPROVING
        assert result.is_rising
        assert result.slope == pytest.approx(2.5)
        assert result.confidence == pytest.approx(1.0)
        assert result.data_points == 5
        assert result.timeframe == "last 5 sessions"

    def test_falling_series(self):
        result = analyze_trend([9.0, 8.0, 7.0, 6.0])
        assert result.is_falling
        assert result.slope == pytest.approx(-1.0)

    def test_flat_series_is_stable_with_zero_confidence(self):
        result = analyze_trend([80.0] * 6)
        assert result.is_flat
        assert result.confidence == 0.0
        assert result.volatility == 0.0
        assert result.mean == pytest.approx(80.0)

    @pytest.mark.parametrize("values", [[], [42.0]])
    def test_fewer_than_two_points(self, values):
        result = analyze_trend(values)
        assert result.direction == TrendDirection.STABLE
        assert result.confidence == 0.0
        assert result.slope == 0.0
        assert result.data_points == len(values)

    def test_window_uses_trailing_points(self):
        # falls then rises: only the rising tail is fitted
        result = analyze_trend([10, 8, 6, 4, 5, 6, 7], window=4)
        assert result.data_points == 4
        assert result.is_rising

    def test_default_window_is_twelve(self):
        result = analyze_trend(list(range(20)))
        assert result.data_points == 12

    def test_custom_unit_in_timeframe(self):
        result = analyze_trend([1, 2, 3], config=TrendConfig(unit="days"))
        assert result.timeframe == "last 3 days"

    def test_volatility_is_coefficient_of_variation(self):
        result = analyze_trend([90.0, 110.0])
        # population std 10, mean 100
        assert result.volatility == pytest.approx(0.1)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_values_rejected(self, bad):
        with pytest.raises(ValidationError):
            analyze_trend([1.0, bad, 3.0])

    def test_confidence_always_in_unit_interval(self):
        result = analyze_trend([5, 1, 9, 2, 8, 3])
        assert 0.0 <= result.confidence <= 1.0
