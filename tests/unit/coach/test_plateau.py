"""Tests for plateau detection and RPE pattern analysis.

Pure unit tests: histories are built in memory as performance schemas.
"""

import datetime

import pytest

from app.coach.plateau import (
    PlateauConfig,
    _label_severity,
    _plateau_duration,
    analyze_plateau,
    analyze_rpe_pattern,
)
from app.schemas.performance import PerformanceSampleBase
from app.schemas.plateau import PlateauSeverity, PlateauType, StrategyType
from app.schemas.trend import TrendDirection

AS_OF = datetime.date(2026, 10, 18)


# ======================================================================
# Helpers
# ======================================================================


def _make_history(weights, rpes=None, reps=5, sets=3, exercise="Back Squat"):
    """One sample per session, every 3 days, ending 3 days before AS_OF."""
    rpes = rpes or [8.0] * len(weights)
    start = AS_OF - datetime.timedelta(days=3 * len(weights))
    return [
        PerformanceSampleBase(
            exercise_name=exercise,
            date=start + datetime.timedelta(days=3 * i),
            weight=w,
            reps=reps,
            sets=sets,
            rpe=r,
        )
        for i, (w, r) in enumerate(zip(weights, rpes))
    ]


# ======================================================================
# _plateau_duration
# ======================================================================


class TestPlateauDuration:
    @pytest.mark.parametrize(
        "weights, expected",
        [
            ([100, 100], 0),
            ([100, 100, 100], 2),
            ([100, 110, 110, 110], 2),
            ([100, 105, 110, 115, 120], 0),
            # 2.5 kg steps stay inside the 2.5 % band at ~110 kg
            ([100, 102.5, 105, 107.5, 110], 4),
            ([110, 107.5, 105, 102.5], 3),
        ],
    )
    def test_trailing_run(self, weights, expected):
        assert _plateau_duration(weights, 0.025) == expected

    @pytest.mark.parametrize(
        "weights",
        [
            [100, 100, 100],
            [100, 110, 110, 110],
            [100, 105, 110, 115, 120],
            [110, 107.5, 105, 102.5],
            [60, 80, 80, 100, 100],
        ],
    )
    @pytest.mark.parametrize("step", [0.0, 0.5, 1.0])
    def test_stalled_session_extends_run(self, weights, step):
        before = _plateau_duration(weights, 0.025)
        after = _plateau_duration(weights + [weights[-1] + step], 0.025)
        assert after >= before + 1
        if step == 0.0:
            assert after == before + 1


class TestLabelSeverity:
    @pytest.mark.parametrize(
        "points, expected",
        [
            (1, PlateauSeverity.MILD),
            (3, PlateauSeverity.MILD),
            (4, PlateauSeverity.MODERATE),
            (5, PlateauSeverity.MODERATE),
            (6, PlateauSeverity.SEVERE),
            (7, PlateauSeverity.SEVERE),
        ],
    )
    def test_thresholds(self, points, expected):
        assert _label_severity(points, PlateauConfig()) == expected


# ======================================================================
# analyze_plateau
# ======================================================================


class TestAnalyzePlateau:
    def test_thin_history_not_analysed(self):
        result = analyze_plateau("Back Squat", _make_history([100, 100, 100]), AS_OF)
        assert not result.is_detected
        assert result.confidence == pytest.approx(0.1)
        assert result.recommendations == []
        assert result.sessions_analyzed == 3
        assert result.type is None
        assert result.severity is None
        assert result.next_review_date == AS_OF + datetime.timedelta(days=7)

    def test_flat_weight_is_mild_weight_stall(self):
        result = analyze_plateau("Back Squat", _make_history([110] * 6), AS_OF)
        assert result.is_detected
        assert result.type == PlateauType.WEIGHT_STALL
        assert result.duration == 5
        # duration >= 4 → 2 points, flat weight +1
        assert result.severity == PlateauSeverity.MILD
        assert result.confidence == pytest.approx(0.8)
        assert [r.strategy for r in result.recommendations] == [
            StrategyType.DELOAD, StrategyType.VOLUME_ADJUSTMENT,
        ]
        assert result.next_review_date == AS_OF + datetime.timedelta(days=14)

    def test_rising_rpe_at_flat_weight_is_severe_inflation(self):
        history = _make_history(
            [110] * 8, rpes=[7.0, 7.5, 8.0, 8.5, 9.0, 9.5, 10.0, 10.0],
        )
        result = analyze_plateau("Back Squat", history, AS_OF)
        assert result.is_detected
        assert result.type == PlateauType.RPE_INFLATION
        assert result.severity == PlateauSeverity.SEVERE
        assert result.rpe_trend.direction == TrendDirection.IMPROVING
        # severe plateaus lead with the extended deload
        assert result.recommendations[0].strategy == StrategyType.DELOAD
        assert result.recommendations[0].description.startswith("Extended deload")
        assert len(result.recommendations) == 3

    def test_falling_weight_is_moderate_volume_decline(self):
        history = _make_history([110, 110, 107.5, 105, 105, 102.5], rpes=[8.0] * 6)
        result = analyze_plateau("Back Squat", history, AS_OF)
        assert result.is_detected
        assert result.type == PlateauType.VOLUME_DECLINE
        assert result.severity == PlateauSeverity.MODERATE
        assert result.weight_trend.is_falling

    def test_steady_small_increments_are_not_a_plateau(self):
        history = _make_history([100, 102.5, 105, 107.5, 110, 112.5])
        result = analyze_plateau("Back Squat", history, AS_OF)
        assert not result.is_detected
        # the run is still reported, with the trends
        assert result.duration == 5
        assert result.weight_trend.is_rising
        assert result.recommendations == []

    def test_large_jumps_have_no_plateau_run(self):
        history = _make_history([100, 105, 110, 115, 120])
        result = analyze_plateau("Back Squat", history, AS_OF)
        assert not result.is_detected
        assert result.duration == 0

    def test_only_recent_window_is_analysed(self):
        history = _make_history([60 + 5 * i for i in range(10)] + [110] * 12)
        result = analyze_plateau("Back Squat", history, AS_OF)
        assert result.sessions_analyzed == 12
        assert result.is_detected
        assert result.duration == 11

    def test_history_order_does_not_matter(self):
        history = _make_history([110] * 6)
        forward = analyze_plateau("Back Squat", history, AS_OF)
        backward = analyze_plateau("Back Squat", list(reversed(history)), AS_OF)
        assert forward == backward

    def test_missing_rpe_uses_default(self):
        history = [
            s.model_copy(update={"rpe": None}) for s in _make_history([110] * 6)
        ]
        result = analyze_plateau("Back Squat", history, AS_OF)
        assert result.rpe_trend.mean == pytest.approx(8.0)

    def test_custom_min_sessions(self):
        cfg = PlateauConfig(min_sessions=6)
        result = analyze_plateau("Back Squat", _make_history([110] * 6), AS_OF, cfg)
        assert not result.is_detected


# ======================================================================
# analyze_rpe_pattern
# ======================================================================


class TestAnalyzeRPEPattern:
    def test_too_few_rated_sessions(self):
        history = _make_history([100, 100], rpes=[8.0, 8.0])
        result = analyze_rpe_pattern("Back Squat", history)
        assert result.sessions_analyzed == 2
        assert result.analysis.confidence == pytest.approx(0.1)
        assert result.analysis.optimal_load
        assert result.recommendations

    def test_overreaching(self):
        history = _make_history([100] * 5, rpes=[8.5, 9.0, 9.5, 9.5, 10.0])
        result = analyze_rpe_pattern("Back Squat", history)
        assert result.analysis.overreaching
        assert not result.analysis.underperforming
        assert result.trend == TrendDirection.IMPROVING

    def test_underperforming(self):
        history = _make_history([100] * 5, rpes=[7.5, 7.0, 6.5, 6.0, 6.0])
        result = analyze_rpe_pattern("Back Squat", history)
        assert result.analysis.underperforming
        assert not result.analysis.overreaching

    def test_on_target(self):
        history = _make_history([100] * 5, rpes=[8.0] * 5)
        result = analyze_rpe_pattern("Back Squat", history, planned_rpe=8.0)
        assert result.analysis.optimal_load
        assert result.consistency == pytest.approx(1.0)
        assert result.average_rpe == pytest.approx(8.0)
        assert not result.volatile

    def test_unrated_sessions_skipped(self):
        history = _make_history([100] * 5, rpes=[8.0] * 5)
        history[1] = history[1].model_copy(update={"rpe": None})
        result = analyze_rpe_pattern("Back Squat", history)
        assert result.sessions_analyzed == 4
