"""Tests for between-workout insight generation and ranking."""

import datetime

import pytest

from app.coach.insights import InsightConfig, _insight_score, generate_insights
from app.coach.plateau import analyze_plateau
from app.coach.readiness import analyze_readiness
from app.schemas.daily_metrics import DailyMetricsRecord
from app.schemas.insight import Insight, InsightCategory
from app.schemas.performance import PerformanceSampleBase
from app.schemas.progression import (
    LoadPrescription,
    Priority,
    ProgressionSuggestion,
    ProgressionType,
    Timeframe,
)

AS_OF = datetime.date(2026, 10, 18)
NOW = datetime.datetime(2026, 10, 18, 7, 0)


# ======================================================================
# Helpers
# ======================================================================


def _make_checkin(days_ago=0, **overrides):
    values = {
        "date": AS_OF - datetime.timedelta(days=days_ago),
        "sleep_hours": 8.0,
        "energy_level": 8,
        "soreness_level": 3,
        "stress_level": 3,
        "motivation_level": 8,
    }
    values.update(overrides)
    return DailyMetricsRecord(**values)


def _make_week(**series):
    """Seven daily check-ins, oldest first, with per-day overrides."""
    return [
        _make_checkin(days_ago=6 - i, **{name: values[i] for name, values in series.items()})
        for i in range(7)
    ]


def _make_progression(kind, exercise="Back Squat", confidence=0.8):
    return ProgressionSuggestion(
        exercise_name=exercise,
        type=kind,
        current=LoadPrescription(weight=100.0, reps=5, sets=3),
        suggested=LoadPrescription(weight=102.5, reps=5, sets=3),
        confidence=confidence,
        reasoning="test",
        priority=Priority.MEDIUM,
        timeframe=Timeframe.NEXT_SESSION,
    )


def _make_plateau(weights, exercise="Back Squat"):
    history = [
        PerformanceSampleBase(
            exercise_name=exercise, date=AS_OF - datetime.timedelta(days=3 * (len(weights) - i)),
            weight=w, reps=5, sets=3, rpe=8.0,
        )
        for i, w in enumerate(weights)
    ]
    return analyze_plateau(exercise, history, AS_OF)


# ======================================================================
# Scoring
# ======================================================================


class TestInsightScore:
    @pytest.mark.parametrize(
        "priority, category, confidence, expected",
        [
            (Priority.CRITICAL, InsightCategory.WARNING, 1.0, 140.0),
            (Priority.HIGH, InsightCategory.SUGGESTION, 0.5, 100.0),
            (Priority.MEDIUM, InsightCategory.CELEBRATION, 0.0, 60.0),
            (Priority.LOW, InsightCategory.INFORMATION, 0.25, 35.0),
        ],
    )
    def test_formula(self, priority, category, confidence, expected):
        insight = Insight(
            id="x", category=category, priority=priority, title="t", message="m",
            confidence=confidence, source="readiness",
        )
        assert _insight_score(insight) == pytest.approx(expected)


# ======================================================================
# Readiness and recovery
# ======================================================================


class TestReadinessInsights:
    def test_critical_readiness(self):
        checkin = _make_checkin(
            sleep_hours=3.0, sleep_quality=1, energy_level=1,
            soreness_level=10, stress_level=10, motivation_level=1,
        )
        readiness = analyze_readiness([checkin], AS_OF, now=NOW)
        [insight] = generate_insights(readiness)
        assert insight.id == "readiness-critical"
        assert insight.priority == Priority.CRITICAL
        assert insight.category == InsightCategory.WARNING

    def test_low_readiness(self):
        checkin = _make_checkin(sleep_hours=6.0, energy_level=4, soreness_level=6, stress_level=6)
        readiness = analyze_readiness([checkin], AS_OF, now=NOW)
        assert 40 <= readiness.overall_score < 60
        [insight] = generate_insights(readiness)
        assert insight.id == "readiness-low"
        assert insight.priority == Priority.HIGH

    def test_prime_conditions(self):
        checkin = _make_checkin(sleep_hours=9.0, energy_level=9, soreness_level=2, stress_level=2, motivation_level=9)
        readiness = analyze_readiness([checkin], AS_OF, now=NOW)
        [insight] = generate_insights(readiness)
        assert insight.id == "readiness-prime"
        assert insight.category == InsightCategory.CELEBRATION

    def test_ordinary_readiness_silent(self):
        readiness = analyze_readiness([_make_checkin(energy_level=6)], AS_OF, now=NOW)
        assert generate_insights(readiness) == []


class TestRecoveryInsights:
    def test_sleep_debt(self):
        week = _make_week(sleep_hours=[7.0, 6.8, 6.5, 6.2, 6.0, 5.8, 5.5])
        ids = [i.id for i in generate_insights(metrics=week)]
        assert ids == ["recovery-sleep-debt"]

    def test_short_but_stable_sleep_is_not_debt(self):
        week = _make_week(sleep_hours=[6.0] * 7)
        assert generate_insights(metrics=week) == []

    def test_soreness_accumulating(self):
        week = _make_week(soreness_level=[5, 6, 6, 7, 7, 8, 8])
        [insight] = generate_insights(metrics=week)
        assert insight.id == "recovery-soreness"
        assert insight.category == InsightCategory.SUGGESTION

    def test_too_few_checkins(self):
        week = _make_week(sleep_hours=[7.0, 6.8, 6.5, 6.2, 6.0, 5.8, 5.5])[-2:]
        assert generate_insights(metrics=week) == []

    def test_checkin_order_does_not_matter(self):
        week = _make_week(sleep_hours=[7.0, 6.8, 6.5, 6.2, 6.0, 5.8, 5.5])
        assert generate_insights(metrics=list(reversed(week))) == generate_insights(metrics=week)


# ======================================================================
# Plateau and progression
# ======================================================================


class TestPlateauInsights:
    def test_only_detected_plateaus_surface(self):
        stalled = _make_plateau([110] * 6, exercise="Back Squat")
        progressing = _make_plateau([100, 105, 110, 115, 120], exercise="Bench Press")
        insights = generate_insights(plateaus=[stalled, progressing])
        assert [i.exercise_name for i in insights] == ["Back Squat"]
        assert insights[0].id == "plateau-back-squat"
        assert insights[0].priority == Priority.MEDIUM
        assert insights[0].action_items


class TestProgressionInsights:
    @pytest.mark.parametrize(
        "kind, category, priority",
        [
            (ProgressionType.DELOAD, InsightCategory.WARNING, Priority.HIGH),
            (ProgressionType.WEIGHT_INCREASE, InsightCategory.CELEBRATION, Priority.MEDIUM),
            (ProgressionType.VOLUME_INCREASE, InsightCategory.SUGGESTION, Priority.LOW),
        ],
    )
    def test_mapping(self, kind, category, priority):
        [insight] = generate_insights(progressions=[_make_progression(kind)])
        assert insight.category == category
        assert insight.priority == priority
        assert insight.source == "progression"

    def test_plateau_breaks_left_to_plateau_insights(self):
        assert generate_insights(progressions=[_make_progression(ProgressionType.PLATEAU_BREAK)]) == []


# ======================================================================
# Ranking
# ======================================================================


class TestRanking:
    def test_highest_score_first_and_capped(self):
        checkin = _make_checkin(
            sleep_hours=3.0, sleep_quality=1, energy_level=1,
            soreness_level=10, stress_level=10, motivation_level=1,
        )
        readiness = analyze_readiness([checkin], AS_OF, now=NOW)
        progressions = [
            _make_progression(ProgressionType.VOLUME_INCREASE, exercise=f"Lift {i}") for i in range(6)
        ]
        progressions.append(_make_progression(ProgressionType.DELOAD, exercise="Deadlift"))

        insights = generate_insights(readiness, progressions=progressions)

        assert len(insights) == 5
        assert insights[0].id == "readiness-critical"
        assert insights[1].id == "progression-deload-deadlift"
        scores = [_insight_score(i) for i in insights]
        assert scores == sorted(scores, reverse=True)

    def test_custom_cap(self):
        progressions = [
            _make_progression(ProgressionType.VOLUME_INCREASE, exercise=f"Lift {i}") for i in range(4)
        ]
        insights = generate_insights(progressions=progressions, config=InsightConfig(max_insights=2))
        assert len(insights) == 2
