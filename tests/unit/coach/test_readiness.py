"""Tests for readiness scoring from daily check-ins."""

import datetime

import pytest
from pydantic import ValidationError

from app.coach.readiness import (
    ReadinessConfig,
    _composite_score,
    _label_readiness,
    _normalize_rating,
    _sleep_score,
    analyze_readiness,
    compare_readiness,
)
from app.schemas.daily_metrics import DailyMetricsRecord
from app.schemas.readiness import ReadinessFactorName, ReadinessLevel
from app.schemas.trend import TrendDirection

AS_OF = datetime.date(2026, 10, 18)
NOW = datetime.datetime(2026, 10, 18, 7, 0)


# ======================================================================
# Helpers
# ======================================================================


def _make_checkin(days_ago=0, **overrides) -> DailyMetricsRecord:
    """A neutral-to-good check-in by default."""
    values = {
        "date": AS_OF - datetime.timedelta(days=days_ago),
        "sleep_hours": 8.0,
        "sleep_quality": None,
        "energy_level": 8,
        "soreness_level": 3,
        "stress_level": 3,
        "motivation_level": 8,
    }
    values.update(overrides)
    return DailyMetricsRecord(**values)


def _factor(analysis, name):
    return next(f for f in analysis.factors if f.name == name)


# ======================================================================
# Normalisation
# ======================================================================


class TestNormalisation:
    @pytest.mark.parametrize(
        "value, inverted, expected",
        [(1, False, 10.0), (10, False, 100.0), (1, True, 100.0), (10, True, 10.0), (6, True, 50.0)],
    )
    def test_rating(self, value, inverted, expected):
        assert _normalize_rating(value, inverted) == expected

    def test_sleep_hours_capped(self):
        assert _sleep_score(10.0, None, 8.0) == 100.0
        assert _sleep_score(6.0, None, 8.0) == pytest.approx(75.0)

    def test_sleep_quality_averaged_in(self):
        assert _sleep_score(8.0, 6, 8.0) == pytest.approx(80.0)

    def test_missing_factor_renormalised(self):
        weights = ReadinessConfig().factor_weights
        present = [name for name in ReadinessFactorName if name != ReadinessFactorName.MOTIVATION]
        overall, effective = _composite_score({name: 80.0 for name in present}, weights)
        assert overall == pytest.approx(80.0)
        assert sum(effective.values()) == pytest.approx(1.0)
        assert ReadinessFactorName.MOTIVATION not in effective

    @pytest.mark.parametrize(
        "score, level",
        [
            (100.0, ReadinessLevel.EXCELLENT),
            (85.0, ReadinessLevel.EXCELLENT),
            (84.9, ReadinessLevel.GOOD),
            (70.0, ReadinessLevel.GOOD),
            (55.0, ReadinessLevel.FAIR),
            (54.9, ReadinessLevel.POOR),
            (0.0, ReadinessLevel.POOR),
        ],
    )
    def test_levels(self, score, level):
        assert _label_readiness(score) == level


# ======================================================================
# analyze_readiness
# ======================================================================


class TestAnalyzeReadiness:
    def test_no_checkins(self):
        assert analyze_readiness([], AS_OF) is None

    def test_checkins_outside_lookback_ignored(self):
        assert analyze_readiness([_make_checkin(days_ago=20)], AS_OF) is None

    def test_future_checkins_ignored(self):
        analysis = analyze_readiness([_make_checkin(days_ago=-1), _make_checkin()], AS_OF, now=NOW)
        assert analysis.data_points == 1

    def test_single_checkin_score(self):
        analysis = analyze_readiness([_make_checkin()], AS_OF, now=NOW)
        # sleep 100, energy 80, soreness 80, stress 80, motivation 80
        assert analysis.overall_score == pytest.approx(85.0)
        assert analysis.level == ReadinessLevel.EXCELLENT
        assert analysis.baseline == pytest.approx(60.0)
        assert analysis.deviation == pytest.approx(25.0)
        assert analysis.metrics_date == AS_OF
        assert analysis.timestamp == NOW
        assert {f.name for f in analysis.factors} == set(ReadinessFactorName)

    def test_effective_weights_sum_to_one_without_motivation(self):
        analysis = analyze_readiness([_make_checkin(motivation_level=None)], AS_OF, now=NOW)
        assert len(analysis.factors) == 4
        assert sum(f.weight for f in analysis.factors) == pytest.approx(1.0, abs=2e-3)

    def test_baseline_from_earlier_checkins(self):
        checkins = [_make_checkin(days_ago=d, energy_level=5) for d in (3, 2, 1)]
        checkins.append(_make_checkin())
        analysis = analyze_readiness(checkins, AS_OF, now=NOW)
        # earlier days: 0.25 × 100 + 0.25 × 50 + 0.2 × 80 + 0.15 × 80 + 0.15 × 80
        assert analysis.baseline == pytest.approx(77.5)
        assert analysis.deviation == pytest.approx(7.5)

    def test_declining_sleep_trend(self):
        checkins = [
            _make_checkin(days_ago=4 - i, sleep_hours=hours)
            for i, hours in enumerate([8.0, 7.5, 7.0, 6.5, 6.0])
        ]
        analysis = analyze_readiness(checkins, AS_OF, now=NOW)
        assert _factor(analysis, ReadinessFactorName.SLEEP).trend == TrendDirection.DECLINING
        assert _factor(analysis, ReadinessFactorName.ENERGY).trend == TrendDirection.STABLE

    def test_low_factors_generate_recommendations(self):
        checkin = _make_checkin(sleep_hours=5.0, energy_level=4, soreness_level=8, stress_level=8)
        analysis = analyze_readiness([checkin], AS_OF, now=NOW)
        assert analysis.level == ReadinessLevel.POOR
        assert analysis.recommendations[0] == "Consider a rest day or a light recovery session"
        assert len(analysis.recommendations) <= 4

    def test_stale_checkin_lowers_confidence(self):
        fresh = analyze_readiness([_make_checkin()], AS_OF, now=NOW)
        stale = analyze_readiness([_make_checkin(days_ago=5)], AS_OF, now=NOW)
        assert stale.confidence < fresh.confidence
        assert stale.metrics_date == AS_OF - datetime.timedelta(days=5)

    def test_custom_weights_by_factor_name(self):
        cfg = ReadinessConfig(factor_weights={"sleep": 1.0})
        assert cfg.factor_weights == {ReadinessFactorName.SLEEP: 1.0}
        analysis = analyze_readiness([_make_checkin(energy_level=2)], AS_OF, config=cfg, now=NOW)
        assert analysis.overall_score == pytest.approx(100.0)
        assert _factor(analysis, ReadinessFactorName.SLEEP).weight == pytest.approx(1.0)

    def test_unknown_factor_weight_rejected(self):
        with pytest.raises(ValidationError):
            ReadinessConfig(factor_weights={"hydration": 1.0})

    def test_at_most_fourteen_checkins(self):
        cfg = ReadinessConfig(lookback_days=30)
        checkins = [_make_checkin(days_ago=d) for d in range(20)]
        analysis = analyze_readiness(checkins, AS_OF, cfg, now=NOW)
        assert analysis.data_points == 14

    def test_rows_with_attributes_accepted(self):
        class Row:
            def __init__(self, record):
                for key, value in record.model_dump().items():
                    setattr(self, key, value)

        analysis = analyze_readiness([Row(_make_checkin())], AS_OF, now=NOW)
        assert analysis.overall_score == pytest.approx(85.0)

    def test_out_of_range_rating_rejected(self):
        row = {
            "date": AS_OF, "sleep_hours": 8.0, "energy_level": 11,
            "soreness_level": 3, "stress_level": 3,
        }
        with pytest.raises(ValidationError):
            analyze_readiness([row], AS_OF)


# ======================================================================
# compare_readiness
# ======================================================================


class TestCompareReadiness:
    @pytest.fixture
    def current(self):
        return analyze_readiness([_make_checkin()], AS_OF, now=NOW)

    def test_insufficient_history(self, current):
        result = compare_readiness(current, [80.0, 82.0])
        assert result.comparison == "Insufficient history for comparison"
        assert result.significance == "low"
        assert result.difference == 0.0

    def test_similar(self, current):
        result = compare_readiness(current, [84.0, 86.0, 85.0])
        assert result.comparison == "Similar to recent average"
        assert result.significance == "low"

    def test_well_above_average(self, current):
        result = compare_readiness(current, [60.0, 65.0, 70.0])
        assert result.difference == pytest.approx(20.0)
        assert result.comparison == "20 points above recent average"
        assert result.significance == "high"
        assert result.direction == TrendDirection.IMPROVING

    def test_below_average(self, current):
        result = compare_readiness(current, [95.0, 95.0, 95.0])
        assert result.comparison == "10 points below recent average"
        assert result.significance == "medium"

    def test_only_last_seven_used(self, current):
        result = compare_readiness(current, [0.0] * 5 + [85.0] * 7)
        assert result.difference == pytest.approx(0.0)
