"""
Live coaching during a workout.

Given the state of the workout in progress (exercise, set number, the
set just performed, pre-workout readiness, progress through the plan)
this module produces a short list of suggestions for the next set.

Rules
-----
    phase warmup                          → form cue (movement quality)
    phase cooldown                        → recovery cue (breathing)
    |rpe - target_rpe| > 1.5              → intensity (high if > 2.5)
    rpe <= 6 and reps >= 8                → weight + step
    rpe >= 9 and reps < 6                 → weight down to max(w - 5, 0.9 w)
    readiness < 7                         → extra rest
    readiness < 6 and rpe > 8             → reduce intensity (high)
    exercise name matches a cue keyword   → form cue (first match)
    progress > 0.75 / > 0.5               → motivation
    rpe >= 9                              → effort recognition
    first set, engine output available    → progression / plateau

Suggestions are sorted by urgency (high > medium > low), then by
confidence, and only the top ``max_suggestions`` are kept.

:class:`CoachingSession` holds the per-workout cache keyed by
``exercise:set`` plus the result of the set just performed, and a
bounded history of what was suggested.  One session per user and
workout day is kept by :class:`CoachingSessionRegistry`; a request on a
new day starts a fresh session.  There is no module-level instance.
"""

from __future__ import annotations

import collections
import datetime
import logging
import threading
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.coaching import (
    CoachingSuggestion,
    FormSuggestion,
    IntensitySuggestion,
    MotivationSuggestion,
    PlateauCoachingSuggestion,
    ProgressionCoachingSuggestion,
    RecoverySuggestion,
    RestSuggestion,
    Urgency,
    WeightSuggestion,
    WorkoutContext,
    WorkoutPhase,
)
from app.schemas.plateau import PlateauAnalysis, PlateauSeverity
from app.schemas.progression import Priority, ProgressionSuggestion

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

# (keyword, cue), checked top-down, first substring match wins.
_FORM_CUES: list[tuple[str, str]] = [
    ("squat", "Chest up, knees tracking over toes, drive through the whole foot"),
    ("deadlift", "Neutral spine, bar close to the shins, engage the lats"),
    ("bench press", "Retract the shoulder blades, feet planted, controlled descent"),
    ("overhead press", "Brace the core, vertical bar path, squeeze the glutes"),
    ("pull-up", "Full range of motion, controlled negative, engage the lats"),
    ("row", "Squeeze the shoulder blades, pull the elbows back, control the weight"),
]

_URGENCY_RANK: dict[Urgency, int] = {
    Urgency.HIGH: 3,
    Urgency.MEDIUM: 2,
    Urgency.LOW: 1,
}

_PRIORITY_URGENCY: dict[Priority, Urgency] = {
    Priority.CRITICAL: Urgency.HIGH,
    Priority.HIGH: Urgency.HIGH,
    Priority.MEDIUM: Urgency.MEDIUM,
    Priority.LOW: Urgency.LOW,
}


class CoachingConfig(BaseModel):
    """Configuration for live coaching."""

    form_cues: list[tuple[str, str]] = Field(
        default_factory=lambda: list(_FORM_CUES),
    )
    weight_step: float = Field(default=2.5, gt=0.0)
    weight_drop: float = Field(default=5.0, gt=0.0)
    weight_drop_factor: float = Field(default=0.9, gt=0.0, le=1.0)
    easy_rpe: float = 6.0
    easy_min_reps: int = 8
    hard_rpe: float = 9.0
    hard_max_reps: int = 6
    low_readiness: float = 7.0
    very_low_readiness: float = 6.0
    extra_rest_seconds: int = 45
    intensity_gap: float = 1.5
    intensity_gap_urgent: float = 2.5
    final_push_progress: float = 0.75
    midpoint_progress: float = 0.5
    max_suggestions: int = Field(default=4, ge=1)
    rounding: float = Field(default=0.25, gt=0.0)


DEFAULT_COACHING_CONFIG = CoachingConfig()


# ======================================================================
# Rule groups
# ======================================================================


def _phase_suggestions(context: WorkoutContext) -> list[CoachingSuggestion]:
    if context.phase == WorkoutPhase.WARMUP:
        return [FormSuggestion(
            id="phase-warmup",
            message="Focus on movement quality and activation to prepare for the working sets",
            confidence=0.95,
            urgency=Urgency.LOW,
            reasoning="Warm-up sets prime the patterns used in the main work",
            phase=WorkoutPhase.WARMUP,
        )]
    if context.phase == WorkoutPhase.COOLDOWN:
        return [RecoverySuggestion(
            id="phase-cooldown",
            message="Slow your breathing and stretch gently to start recovering",
            confidence=0.9,
            urgency=Urgency.LOW,
            reasoning="The cool-down is where recovery begins",
            phase=WorkoutPhase.COOLDOWN,
        )]
    return []


def _intensity_target_suggestions(
    context: WorkoutContext, cfg: CoachingConfig,
) -> list[CoachingSuggestion]:
    if context.target_rpe is None or context.last_set is None:
        return []

    actual = context.last_set.rpe
    gap = abs(actual - context.target_rpe)
    if gap <= cfg.intensity_gap:
        return []

    reduce = actual > context.target_rpe
    return [IntensitySuggestion(
        id="target-intensity",
        message=(
            f"{'Go lighter' if reduce else 'Go heavier'} to hit the target "
            f"RPE of {context.target_rpe:g}"
        ),
        confidence=0.85,
        urgency=Urgency.HIGH if gap > cfg.intensity_gap_urgent else Urgency.MEDIUM,
        reasoning=f"Last set RPE {actual:g} vs planned {context.target_rpe:g}",
        direction="reduce" if reduce else "increase",
        actual_rpe=actual,
        target_rpe=context.target_rpe,
    )]


def _performance_suggestions(
    context: WorkoutContext, cfg: CoachingConfig,
) -> list[CoachingSuggestion]:
    last = context.last_set
    if last is None:
        return []

    if last.rpe <= cfg.easy_rpe and last.reps >= cfg.easy_min_reps:
        new_weight = last.weight + cfg.weight_step
        return [WeightSuggestion(
            id="weight-increase",
            message=f"Try {new_weight:g} kg on the next set",
            confidence=0.85,
            urgency=Urgency.MEDIUM,
            reasoning=f"RPE {last.rpe:g} with {last.reps} reps leaves plenty in reserve",
            current_weight=last.weight,
            suggested_weight=new_weight,
        )]

    if last.rpe >= cfg.hard_rpe and last.reps < cfg.hard_max_reps:
        lowered = max(last.weight - cfg.weight_drop, last.weight * cfg.weight_drop_factor)
        new_weight = round(lowered / cfg.rounding) * cfg.rounding
        return [WeightSuggestion(
            id="weight-decrease",
            message=f"Drop to {new_weight:g} kg for the next set",
            confidence=0.75,
            urgency=Urgency.HIGH,
            reasoning=f"RPE {last.rpe:g} with only {last.reps} reps means the load is too heavy",
            current_weight=last.weight,
            suggested_weight=new_weight,
        )]
    return []


def _readiness_suggestions(
    context: WorkoutContext, cfg: CoachingConfig,
) -> list[CoachingSuggestion]:
    score = context.readiness_score
    if score is None:
        return []

    suggestions: list[CoachingSuggestion] = []
    if score < cfg.low_readiness:
        suggestions.append(RestSuggestion(
            id="extended-rest",
            message="Take an extra 30-60 seconds of rest between sets today",
            confidence=0.8,
            urgency=Urgency.MEDIUM,
            reasoning=f"Readiness {score:g}/10 calls for more recovery between sets",
            extra_rest_seconds=cfg.extra_rest_seconds,
        ))

    last = context.last_set
    if score < cfg.very_low_readiness and last is not None and last.rpe > 8:
        suggestions.append(IntensitySuggestion(
            id="readiness-intensity",
            message="Reduce intensity, readiness is low and the last set was hard",
            confidence=0.85,
            urgency=Urgency.HIGH,
            reasoning=f"Readiness {score:g}/10 with RPE {last.rpe:g} risks poor recovery",
            direction="reduce",
            actual_rpe=last.rpe,
        ))
    return suggestions


def _form_suggestions(
    context: WorkoutContext, cfg: CoachingConfig,
) -> list[CoachingSuggestion]:
    name = context.exercise_name.lower()
    for keyword, cue in cfg.form_cues:
        if keyword in name:
            return [FormSuggestion(
                id="form-cue",
                message=cue,
                confidence=0.9,
                urgency=Urgency.LOW,
                reasoning="Exercise-specific reminder for performance and safety",
                keyword=keyword,
            )]
    return []


def _motivation_suggestions(
    context: WorkoutContext, cfg: CoachingConfig,
) -> list[CoachingSuggestion]:
    suggestions: list[CoachingSuggestion] = []
    if context.workout_progress > cfg.final_push_progress:
        suggestions.append(MotivationSuggestion(
            id="final-push",
            message="Home stretch, finish strong!",
            confidence=0.95,
            urgency=Urgency.LOW,
            reasoning="Most of the workout is done",
            trigger="final_push",
        ))
    elif context.workout_progress > cfg.midpoint_progress:
        suggestions.append(MotivationSuggestion(
            id="midpoint",
            message="Great work so far, keep the momentum going",
            confidence=0.9,
            urgency=Urgency.LOW,
            reasoning="Past the halfway point",
            trigger="midpoint",
        ))

    if context.last_set is not None and context.last_set.rpe >= cfg.hard_rpe:
        suggestions.append(MotivationSuggestion(
            id="effort",
            message="Excellent effort on that set, focus on recovering for the next one",
            confidence=0.85,
            urgency=Urgency.LOW,
            reasoning="Near-maximal effort deserves recognition",
            trigger="effort",
        ))
    return suggestions


def _engine_suggestions(
    context: WorkoutContext,
    progressions: Optional[list[ProgressionSuggestion]],
    plateau: Optional[PlateauAnalysis],
) -> list[CoachingSuggestion]:
    """Surface progression and plateau output before the first set."""
    if context.set_number != 1:
        return []

    suggestions: list[CoachingSuggestion] = []
    if progressions:
        top = progressions[0]
        suggestions.append(ProgressionCoachingSuggestion(
            id=f"progression-{top.type.value}",
            message=(
                f"Plan for today: {top.suggested.sets} x {top.suggested.reps} "
                f"at {top.suggested.weight:g} kg"
            ),
            confidence=top.confidence,
            urgency=_PRIORITY_URGENCY[top.priority],
            reasoning=top.reasoning,
            progression=top,
        ))

    if plateau is not None and plateau.is_detected and plateau.type and plateau.severity:
        suggestions.append(PlateauCoachingSuggestion(
            id=f"plateau-{plateau.type.value}",
            message=(
                f"{plateau.exercise_name} has stalled for {plateau.duration} sessions"
                + (f": {plateau.recommendations[0].description}" if plateau.recommendations else "")
            ),
            confidence=plateau.confidence,
            urgency=Urgency.HIGH if plateau.severity == PlateauSeverity.SEVERE else Urgency.MEDIUM,
            reasoning=f"{plateau.severity.value} {plateau.type.value.replace('_', ' ')}",
            plateau_type=plateau.type,
            severity=plateau.severity,
            strategies=[r.strategy for r in plateau.recommendations],
        ))
    return suggestions


# ======================================================================
# Pure generation
# ======================================================================


def prioritize(
    suggestions: list[CoachingSuggestion], limit: int,
) -> list[CoachingSuggestion]:
    """Sort by urgency then confidence (both descending) and keep ``limit``."""
    ranked = sorted(
        suggestions,
        key=lambda s: (_URGENCY_RANK[s.urgency], s.confidence),
        reverse=True,
    )
    return ranked[:limit]


def generate_suggestions(
    context: WorkoutContext,
    progressions: Optional[list[ProgressionSuggestion]] = None,
    plateau: Optional[PlateauAnalysis] = None,
    config: Optional[CoachingConfig] = None,
) -> list[CoachingSuggestion]:
    """Build the prioritized suggestions for the next set.

    Args:
        context: Live workout state.
        progressions: Progression output for the current exercise.
        plateau: Plateau analysis for the current exercise.
        config: Optional config override.
    """
    cfg = config or DEFAULT_COACHING_CONFIG

    suggestions: list[CoachingSuggestion] = []
    suggestions.extend(_phase_suggestions(context))
    suggestions.extend(_intensity_target_suggestions(context, cfg))
    suggestions.extend(_performance_suggestions(context, cfg))
    suggestions.extend(_readiness_suggestions(context, cfg))
    suggestions.extend(_form_suggestions(context, cfg))
    suggestions.extend(_motivation_suggestions(context, cfg))
    suggestions.extend(_engine_suggestions(context, progressions, plateau))

    return prioritize(suggestions, cfg.max_suggestions)


# ======================================================================
# Workout session state
# ======================================================================


class CoachingSession:
    """Suggestion cache and history for one athlete's workout.

    Suggestions are cached per ``exercise:set`` and logged set, so repeated
    requests for the same set return the same advice.  ``clear()`` ends the
    workout.
    """

    def __init__(
        self,
        config: Optional[CoachingConfig] = None,
        history_limit: int = 200,
        workout_date: Optional[datetime.date] = None,
    ):
        self.config = config or DEFAULT_COACHING_CONFIG
        self.workout_date = workout_date
        self._cache: dict[str, list[CoachingSuggestion]] = {}
        self._history: collections.deque[tuple[str, list[CoachingSuggestion]]] = (
            collections.deque(maxlen=history_limit)
        )

    @staticmethod
    def cache_key(context: WorkoutContext) -> str:
        """``exercise:set``, extended with ``weight x reps @ rpe`` once a set is logged."""
        key = f"{context.exercise_name.strip().lower()}:{context.set_number}"
        last = context.last_set
        if last is not None:
            key += f":{last.weight:g}x{last.reps}@{last.rpe:g}"
        return key

    def suggest(
        self,
        context: WorkoutContext,
        progressions: Optional[list[ProgressionSuggestion]] = None,
        plateau: Optional[PlateauAnalysis] = None,
    ) -> tuple[list[CoachingSuggestion], bool]:
        """Return ``(suggestions, cached)`` for the current set."""
        key = self.cache_key(context)
        if key in self._cache:
            return list(self._cache[key]), True

        suggestions = generate_suggestions(context, progressions, plateau, self.config)
        self._cache[key] = suggestions
        self._history.append((key, suggestions))
        return list(suggestions), False

    def is_cached(self, context: WorkoutContext) -> bool:
        return self.cache_key(context) in self._cache

    def needs_engine_input(self, context: WorkoutContext) -> bool:
        """True when the next call will compute (not cache) a first-set answer."""
        return context.set_number == 1 and not self.is_cached(context)

    @property
    def history(self) -> list[tuple[str, list[CoachingSuggestion]]]:
        return list(self._history)

    def clear(self) -> None:
        self._cache.clear()
        self._history.clear()


class CoachingSessionRegistry:
    """One :class:`CoachingSession` per user, created on demand."""

    def __init__(
        self,
        config: Optional[CoachingConfig] = None,
        history_limit: int = 200,
    ):
        self.config = config or DEFAULT_COACHING_CONFIG
        self.history_limit = history_limit
        self._sessions: dict[int, CoachingSession] = {}
        self._lock = threading.Lock()

    def get(
        self, user_id: int, workout_date: Optional[datetime.date] = None
    ) -> CoachingSession:
        """Return the user's session, starting a new one when the workout day changed."""
        with self._lock:
            session = self._sessions.get(user_id)
            if session is not None and workout_date is not None and session.workout_date != workout_date:
                logger.info(
                    "coaching session for user=%s expired (%s -> %s)",
                    user_id, session.workout_date, workout_date,
                )
                session = None
            if session is None:
                session = CoachingSession(self.config, self.history_limit, workout_date)
                self._sessions[user_id] = session
            return session

    def end(self, user_id: int) -> bool:
        """Drop a user's session.  Returns False if none was open."""
        with self._lock:
            session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        session.clear()
        logger.info("coaching session ended for user=%s", user_id)
        return True
