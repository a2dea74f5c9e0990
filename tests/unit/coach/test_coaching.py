"""Tests for live coaching suggestions and workout sessions."""

import datetime

import pytest

from app.coach.coaching import (
    CoachingConfig,
    CoachingSession,
    CoachingSessionRegistry,
    generate_suggestions,
)
from app.coach.plateau import analyze_plateau
from app.schemas.coaching import SetData, Urgency, WorkoutContext, WorkoutPhase
from app.schemas.performance import PerformanceSampleBase
from app.schemas.progression import (
    LoadPrescription,
    Priority,
    ProgressionSuggestion,
    ProgressionType,
    Timeframe,
)

AS_OF = datetime.date(2026, 10, 18)


# ======================================================================
# Helpers
# ======================================================================


def _make_context(**overrides) -> WorkoutContext:
    values = {"exercise_name": "Curl", "set_number": 2}
    values.update(overrides)
    return WorkoutContext(**values)


def _ids(suggestions):
    return [s.id for s in suggestions]


def _make_progression(priority=Priority.HIGH) -> ProgressionSuggestion:
    return ProgressionSuggestion(
        exercise_name="Back Squat",
        type=ProgressionType.WEIGHT_INCREASE,
        current=LoadPrescription(weight=100.0, reps=5, sets=3),
        suggested=LoadPrescription(weight=102.5, reps=5, sets=3),
        confidence=0.9,
        reasoning="Last session RPE was 7",
        priority=priority,
        timeframe=Timeframe.NEXT_SESSION,
    )


# ======================================================================
# Rule groups
# ======================================================================


class TestPhase:
    def test_warmup_form_cue(self):
        result = generate_suggestions(_make_context(phase=WorkoutPhase.WARMUP))
        assert result[0].type == "form"
        assert result[0].phase == WorkoutPhase.WARMUP

    def test_cooldown_recovery_cue(self):
        result = generate_suggestions(_make_context(phase=WorkoutPhase.COOLDOWN))
        assert result[0].type == "recovery"

    def test_main_phase_silent(self):
        assert generate_suggestions(_make_context(phase=WorkoutPhase.MAIN)) == []


class TestPerformance:
    def test_easy_set_adds_weight(self):
        context = _make_context(last_set=SetData(weight=100.0, reps=8, rpe=6.0))
        [weight] = [s for s in generate_suggestions(context) if s.type == "weight"]
        assert weight.suggested_weight == pytest.approx(102.5)
        assert weight.urgency == Urgency.MEDIUM

    def test_easy_rpe_but_few_reps_no_change(self):
        context = _make_context(last_set=SetData(weight=100.0, reps=5, rpe=6.0))
        assert not [s for s in generate_suggestions(context) if s.type == "weight"]

    @pytest.mark.parametrize(
        "weight, expected",
        [
            (100.0, 95.0),  # 5 kg drop beats 10 %
            (40.0, 36.0),   # 10 % drop beats 5 kg
            (62.5, 57.5),
        ],
    )
    def test_hard_set_drops_weight(self, weight, expected):
        context = _make_context(last_set=SetData(weight=weight, reps=3, rpe=9.5))
        [suggestion] = [s for s in generate_suggestions(context) if s.type == "weight"]
        assert suggestion.suggested_weight == pytest.approx(expected)
        assert suggestion.urgency == Urgency.HIGH


class TestIntensityTarget:
    def test_small_gap_ignored(self):
        context = _make_context(target_rpe=8.0, last_set=SetData(weight=100, reps=5, rpe=9.0))
        assert not [s for s in generate_suggestions(context) if s.id == "target-intensity"]

    def test_over_target(self):
        context = _make_context(target_rpe=7.0, last_set=SetData(weight=100, reps=5, rpe=9.0))
        [s] = [s for s in generate_suggestions(context) if s.id == "target-intensity"]
        assert s.direction == "reduce"
        assert s.urgency == Urgency.MEDIUM

    def test_far_under_target_is_urgent(self):
        context = _make_context(target_rpe=9.0, last_set=SetData(weight=100, reps=5, rpe=6.0))
        [s] = [s for s in generate_suggestions(context) if s.id == "target-intensity"]
        assert s.direction == "increase"
        assert s.urgency == Urgency.HIGH


class TestReadiness:
    def test_low_readiness_extra_rest(self):
        result = generate_suggestions(_make_context(readiness_score=6.5))
        assert _ids(result) == ["extended-rest"]
        assert result[0].extra_rest_seconds == 45

    def test_very_low_readiness_and_hard_set(self):
        context = _make_context(readiness_score=5.0, last_set=SetData(weight=100, reps=8, rpe=8.5))
        ids = _ids(generate_suggestions(context))
        assert "extended-rest" in ids
        assert "readiness-intensity" in ids

    def test_good_readiness_silent(self):
        assert generate_suggestions(_make_context(readiness_score=8.0)) == []


class TestFormCues:
    @pytest.mark.parametrize(
        "exercise, keyword",
        [
            ("Back Squat", "squat"),
            ("Romanian Deadlift", "deadlift"),
            ("Incline Bench Press", "bench press"),
            ("Seated Overhead Press", "overhead press"),
            ("Weighted Pull-up", "pull-up"),
            ("Barbell Row", "row"),
        ],
    )
    def test_keyword_match(self, exercise, keyword):
        [cue] = [s for s in generate_suggestions(_make_context(exercise_name=exercise)) if s.type == "form"]
        assert cue.keyword == keyword

    def test_unknown_exercise_has_no_cue(self):
        assert generate_suggestions(_make_context(exercise_name="Cable Curl")) == []


class TestMotivation:
    @pytest.mark.parametrize(
        "progress, expected",
        [(0.8, ["final-push"]), (0.6, ["midpoint"]), (0.5, []), (0.2, [])],
    )
    def test_progress(self, progress, expected):
        assert _ids(generate_suggestions(_make_context(workout_progress=progress))) == expected

    def test_effort_recognition(self):
        context = _make_context(last_set=SetData(weight=100, reps=6, rpe=9.0))
        [effort] = [s for s in generate_suggestions(context) if s.id == "effort"]
        assert effort.type == "motivation"
        assert effort.trigger == "effort"


class TestEngineInput:
    def test_first_set_surfaces_progression_and_plateau(self):
        history = [
            PerformanceSampleBase(
                exercise_name="Back Squat", date=AS_OF - datetime.timedelta(days=3 * (6 - i)),
                weight=110, reps=5, sets=3, rpe=8.0,
            )
            for i in range(6)
        ]
        plateau = analyze_plateau("Back Squat", history, AS_OF)
        context = _make_context(set_number=1)
        result = generate_suggestions(context, [_make_progression()], plateau)
        types = [s.type for s in result]
        assert "progression" in types
        assert "plateau" in types
        [progression] = [s for s in result if s.type == "progression"]
        assert progression.urgency == Urgency.HIGH
        assert progression.progression.suggested.weight == pytest.approx(102.5)

    def test_later_sets_ignore_engine_input(self):
        context = _make_context(set_number=2)
        assert generate_suggestions(context, [_make_progression()]) == []


class TestPrioritization:
    def test_sorted_by_urgency_then_confidence_and_capped(self):
        context = _make_context(
            exercise_name="Back Squat",
            readiness_score=5.0,
            workout_progress=0.8,
            last_set=SetData(weight=100.0, reps=3, rpe=9.5),
        )
        result = generate_suggestions(context)
        assert _ids(result) == ["readiness-intensity", "weight-decrease", "extended-rest", "final-push"]

    def test_custom_limit(self):
        context = _make_context(
            exercise_name="Back Squat",
            readiness_score=5.0,
            last_set=SetData(weight=100.0, reps=3, rpe=9.5),
        )
        result = generate_suggestions(context, config=CoachingConfig(max_suggestions=2))
        assert len(result) == 2
        assert all(s.urgency == Urgency.HIGH for s in result)


# ======================================================================
# CoachingSession / CoachingSessionRegistry
# ======================================================================


class TestCoachingSession:
    def test_cache_per_exercise_and_set(self):
        session = CoachingSession()
        context = _make_context(exercise_name="Back Squat", set_number=2)
        first, cached = session.suggest(context)
        assert not cached
        again, cached = session.suggest(context.model_copy(update={"workout_progress": 0.9}))
        assert cached
        assert again == first

    def test_cache_key_ignores_case(self):
        session = CoachingSession()
        session.suggest(_make_context(exercise_name="Back Squat"))
        _, cached = session.suggest(_make_context(exercise_name="back squat "))
        assert cached

    def test_needs_engine_input_only_on_uncached_first_set(self):
        session = CoachingSession()
        first = _make_context(set_number=1)
        assert session.needs_engine_input(first)
        session.suggest(first)
        assert not session.needs_engine_input(first)
        assert not session.needs_engine_input(_make_context(set_number=2))

    def test_history_bounded(self):
        session = CoachingSession(history_limit=3)
        for set_number in range(1, 6):
            session.suggest(_make_context(set_number=set_number))
        assert [key for key, _ in session.history] == ["curl:3", "curl:4", "curl:5"]

    def test_clear(self):
        session = CoachingSession()
        context = _make_context()
        session.suggest(context)
        session.clear()
        assert session.history == []
        assert not session.is_cached(context)

    def test_cache_key_includes_logged_set(self):
        session = CoachingSession()
        easy = _make_context(last_set=SetData(weight=100.0, reps=8, rpe=6.0))
        hard = _make_context(last_set=SetData(weight=100.0, reps=3, rpe=9.5))
        assert session.cache_key(easy) == "curl:2:100x8@6"
        session.suggest(easy)
        result, cached = session.suggest(hard)
        assert not cached
        assert "weight-decrease" in _ids(result)


class TestCoachingSessionRegistry:
    def test_one_session_per_user(self):
        registry = CoachingSessionRegistry()
        assert registry.get(1) is registry.get(1)
        assert registry.get(1) is not registry.get(2)

    def test_end(self):
        registry = CoachingSessionRegistry()
        session = registry.get(1)
        session.suggest(_make_context())
        assert registry.end(1)
        assert not registry.end(1)
        assert registry.get(1) is not session

    def test_new_day_starts_new_session(self):
        registry = CoachingSessionRegistry()
        session = registry.get(1, AS_OF)
        session.suggest(_make_context())
        assert registry.get(1, AS_OF) is session
        assert registry.get(1) is session
        fresh = registry.get(1, AS_OF + datetime.timedelta(days=1))
        assert fresh is not session
        assert fresh.workout_date == AS_OF + datetime.timedelta(days=1)
        assert not fresh.is_cached(_make_context())
