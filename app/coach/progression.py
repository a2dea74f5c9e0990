"""
Progression engine: what to do with an exercise next session.

Rules are evaluated in priority order and the first rule that fires
short-circuits the rest:

1. **Deload**: among the last 3 sessions, at least 2 at RPE >= 9, or at
   least 2 with missed reps, or an average RPE >= 9.2.  Suggest 85 % of
   the most recent weight with one set fewer (minimum 2).
2. **Plateau break**: when a plateau is detected, every remediation
   strategy of the plateau becomes a concrete prescription:

       deload              weight × 0.8, sets - 1 (min 2)
       volume_adjustment   reps - 2 (min 1), sets + 1
       technique_focus     weight × 0.9
       others              load unchanged, follow the instructions

3. **Weight increase**: only when the last RPE is at or below the goal's
   RPE ceiling.  The increment is

       base[category] × level[experience] × aggressiveness

   floored at the smallest sensible plate jump (1.25 kg for bench and
   overhead press, 2.5 kg otherwise).  The suggestion is dropped when
   the new load would exceed the goal's share of the estimated 1RM
   (strength 95 %, power 90 %, hypertrophy 85 %, endurance 75 %).
4. **Volume increase**: fallback when (3) is dropped or not confident
   (< 0.7).  Hypertrophy adds a rep up to 12; otherwise a set is added
   up to 5, with one rep fewer per set.

Confidence for weight and volume suggestions:

    clamp(1 - (rpe - 7) / 10 - σ_rpe / 10 + c_1rm / 2, 0.3, 0.9)

where σ_rpe is the RPE standard deviation over the last 5 sessions and
c_1rm the confidence of the 1RM estimate.

Every table lives in :class:`ProgressionConfig`, keyed by enum.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, TypeAdapter
from sqlmodel import Session

from app.coach.one_rm import estimate_one_rep_max
from app.coach.plateau import DEFAULT_PLATEAU_CONFIG, analyze_plateau
from app.coach.readiness import compute_readiness
from app.db.repositories.performance import PerformanceRepository
from app.db.repositories.progression_settings import ProgressionSettingsRepository
from app.schemas.one_rm import OneRepMaxEstimate
from app.schemas.performance import PerformanceSampleBase
from app.schemas.plateau import PlateauAnalysis, PlateauSeverity, StrategyType
from app.schemas.progression import (
    Aggressiveness,
    ExerciseCategory,
    ExperienceLevel,
    LoadPrescription,
    Priority,
    ProgressionResponse,
    ProgressionSettingsBase,
    ProgressionSuggestion,
    ProgressionType,
    Timeframe,
    TrainingGoal,
)
from app.schemas.readiness import ReadinessAnalysis, ReadinessLevel

logger = logging.getLogger(__name__)

# ======================================================================
# Rule tables
# ======================================================================

# (category, keywords), checked top-down, first substring match wins.
_CATEGORY_KEYWORDS: list[tuple[ExerciseCategory, tuple[str, ...]]] = [
    (ExerciseCategory.SQUAT, ("squat",)),
    (ExerciseCategory.BENCH, ("bench", "chest press")),
    (ExerciseCategory.DEADLIFT, ("deadlift",)),
    (ExerciseCategory.OVERHEAD_PRESS, ("overhead", "shoulder press", "ohp", "military press")),
]

_BASE_INCREMENT: dict[ExerciseCategory, float] = {
    ExerciseCategory.SQUAT: 2.5,
    ExerciseCategory.BENCH: 1.25,
    ExerciseCategory.DEADLIFT: 2.5,
    ExerciseCategory.OVERHEAD_PRESS: 1.25,
    ExerciseCategory.ACCESSORY: 1.25,
}

_LEVEL_MULTIPLIER: dict[ExperienceLevel, float] = {
    ExperienceLevel.BEGINNER: 1.0,
    ExperienceLevel.INTERMEDIATE: 0.75,
    ExperienceLevel.ADVANCED: 0.5,
}

_AGGRESSIVENESS_MULTIPLIER: dict[Aggressiveness, float] = {
    Aggressiveness.CONSERVATIVE: 0.5,
    Aggressiveness.MODERATE: 1.0,
    Aggressiveness.AGGRESSIVE: 1.5,
}

_MIN_INCREMENT: dict[ExerciseCategory, float] = {
    ExerciseCategory.SQUAT: 2.5,
    ExerciseCategory.BENCH: 1.25,
    ExerciseCategory.DEADLIFT: 2.5,
    ExerciseCategory.OVERHEAD_PRESS: 1.25,
    ExerciseCategory.ACCESSORY: 2.5,
}

# Highest load, as % of estimated 1RM, a suggestion may prescribe.
_MAX_ONE_RM_PERCENT: dict[TrainingGoal, float] = {
    TrainingGoal.STRENGTH: 95.0,
    TrainingGoal.POWER: 90.0,
    TrainingGoal.HYPERTROPHY: 85.0,
    TrainingGoal.ENDURANCE: 75.0,
}

# RPE ceiling for adding load when the user has not set one.
_TARGET_RPE: dict[TrainingGoal, float] = {
    TrainingGoal.STRENGTH: 8.5,
    TrainingGoal.POWER: 8.0,
    TrainingGoal.HYPERTROPHY: 8.0,
    TrainingGoal.ENDURANCE: 7.5,
}

_SAMPLES_ADAPTER = TypeAdapter(list[PerformanceSampleBase])


class ProgressionConfig(BaseModel):
    """Configuration for the progression engine."""

    base_increment: dict[ExerciseCategory, float] = Field(
        default_factory=lambda: dict(_BASE_INCREMENT),
    )
    level_multiplier: dict[ExperienceLevel, float] = Field(
        default_factory=lambda: dict(_LEVEL_MULTIPLIER),
    )
    aggressiveness_multiplier: dict[Aggressiveness, float] = Field(
        default_factory=lambda: dict(_AGGRESSIVENESS_MULTIPLIER),
    )
    min_increment: dict[ExerciseCategory, float] = Field(
        default_factory=lambda: dict(_MIN_INCREMENT),
    )
    max_one_rm_percent: dict[TrainingGoal, float] = Field(
        default_factory=lambda: dict(_MAX_ONE_RM_PERCENT),
    )
    target_rpe: dict[TrainingGoal, float] = Field(
        default_factory=lambda: dict(_TARGET_RPE),
    )
    min_samples: int = Field(default=3, ge=1)
    default_sets: int = Field(default=3, ge=1)
    default_rpe: float = Field(default=8.0, ge=1.0, le=10.0)
    deload_window: int = Field(default=3, ge=1)
    deload_rpe: float = 9.0
    deload_average_rpe: float = 9.2
    deload_trigger_count: int = 2
    deload_factor: float = 0.85
    plateau_deload_factor: float = 0.8
    technique_factor: float = 0.9
    rep_ceiling: int = 12
    set_ceiling: int = 5
    volume_rpe_margin: float = 0.5
    volume_fallback_below: float = 0.7
    rpe_variance_window: int = 5
    rounding: float = Field(default=0.25, gt=0.0)


DEFAULT_PROGRESSION_CONFIG = ProgressionConfig()


# ======================================================================
# Helpers
# ======================================================================


def categorize_exercise(exercise_name: str) -> ExerciseCategory:
    """Map an exercise name to its progression category."""
    name = exercise_name.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return category
    return ExerciseCategory.ACCESSORY


def _round_to(value: float, step: float) -> float:
    return round(value / step) * step


def _target_rpe(settings: ProgressionSettingsBase, cfg: ProgressionConfig) -> float:
    if settings.target_rpe is not None:
        return settings.target_rpe
    return cfg.target_rpe[settings.primary_goal]


def _rpe(sample: PerformanceSampleBase, cfg: ProgressionConfig) -> float:
    return sample.rpe if sample.rpe is not None else cfg.default_rpe


def _rpe_std(samples: list[PerformanceSampleBase], cfg: ProgressionConfig) -> float:
    rpes = [_rpe(s, cfg) for s in samples[-cfg.rpe_variance_window:]]
    if len(rpes) < 2:
        return 0.0
    mean = sum(rpes) / len(rpes)
    return math.sqrt(sum((r - mean) ** 2 for r in rpes) / len(rpes))


def _progression_confidence(
    last_rpe: float, rpe_std: float, one_rm_confidence: float,
) -> float:
    raw = 1 - (last_rpe - 7) / 10 - rpe_std / 10 + one_rm_confidence / 2
    return max(0.3, min(0.9, raw))


def _prescription(sample: PerformanceSampleBase, cfg: ProgressionConfig) -> LoadPrescription:
    return LoadPrescription(
        weight=sample.weight,
        reps=sample.reps,
        sets=sample.sets or cfg.default_sets,
    )


def compute_increment(
    category: ExerciseCategory,
    settings: ProgressionSettingsBase,
    config: Optional[ProgressionConfig] = None,
) -> float:
    """Load to add next session for this category and user profile."""
    cfg = config or DEFAULT_PROGRESSION_CONFIG
    increment = (
        cfg.base_increment[category]
        * cfg.level_multiplier[settings.experience_level]
        * cfg.aggressiveness_multiplier[settings.aggressiveness]
    )
    return max(cfg.min_increment[category], increment)


# ======================================================================
# Rules
# ======================================================================


def _check_deload(
    exercise_name: str,
    samples: list[PerformanceSampleBase],
    cfg: ProgressionConfig,
) -> Optional[ProgressionSuggestion]:
    if len(samples) < cfg.deload_window:
        return None

    window = samples[-cfg.deload_window:]
    rpes = [_rpe(s, cfg) for s in window]
    average_rpe = sum(rpes) / len(rpes)
    high_rpe = sum(1 for r in rpes if r >= cfg.deload_rpe)
    failed = sum(1 for s in window if not s.completed)

    if not (
        high_rpe >= cfg.deload_trigger_count
        or failed >= cfg.deload_trigger_count
        or average_rpe >= cfg.deload_average_rpe
    ):
        return None

    latest = window[-1]
    current = _prescription(latest, cfg)
    deload_weight = _round_to(latest.weight * cfg.deload_factor, cfg.rounding)

    return ProgressionSuggestion(
        exercise_name=exercise_name,
        type=ProgressionType.DELOAD,
        current=current,
        suggested=LoadPrescription(
            weight=deload_weight,
            reps=current.reps,
            sets=max(2, current.sets - 1),
        ),
        confidence=0.85,
        reasoning=(
            f"High fatigue: average RPE {average_rpe:.1f} and {failed} sessions "
            f"with missed reps over the last {len(window)}"
        ),
        evidence=[
            f"Average RPE over last {len(window)} sessions: {average_rpe:.1f}",
            f"Sessions at RPE {cfg.deload_rpe:g}+: {high_rpe}/{len(window)}",
            f"Sessions with missed reps: {failed}/{len(window)}",
        ],
        priority=Priority.HIGH,
        timeframe=Timeframe.NEXT_SESSION,
    )


def _plateau_breaks(
    exercise_name: str,
    latest: PerformanceSampleBase,
    plateau: PlateauAnalysis,
    cfg: ProgressionConfig,
) -> list[ProgressionSuggestion]:
    current = _prescription(latest, cfg)
    priority = Priority.CRITICAL if plateau.severity == PlateauSeverity.SEVERE else Priority.HIGH
    evidence = [
        f"Plateau type: {plateau.type.value if plateau.type else 'unknown'}",
        f"Duration: {plateau.duration} sessions",
        f"Severity: {plateau.severity.value if plateau.severity else 'unknown'}",
    ]

    suggestions: list[ProgressionSuggestion] = []
    for rec in plateau.recommendations:
        weight, reps, sets = current.weight, current.reps, current.sets
        if rec.strategy == StrategyType.DELOAD:
            weight = _round_to(current.weight * cfg.plateau_deload_factor, cfg.rounding)
            sets = max(2, current.sets - 1)
        elif rec.strategy == StrategyType.VOLUME_ADJUSTMENT:
            reps = max(1, current.reps - 2)
            sets = current.sets + 1
        elif rec.strategy == StrategyType.TECHNIQUE_FOCUS:
            weight = _round_to(current.weight * cfg.technique_factor, cfg.rounding)

        suggestions.append(ProgressionSuggestion(
            exercise_name=exercise_name,
            type=ProgressionType.PLATEAU_BREAK,
            current=current,
            suggested=LoadPrescription(weight=weight, reps=reps, sets=sets),
            confidence=plateau.confidence,
            reasoning=(
                f"Plateau for {plateau.duration} sessions. {rec.description}. "
                f"{rec.implementation}"
            ),
            evidence=evidence,
            priority=priority,
            timeframe=Timeframe.NEXT_WEEK,
        ))
    return suggestions


def _weight_increase(
    exercise_name: str,
    samples: list[PerformanceSampleBase],
    category: ExerciseCategory,
    one_rm: Optional[OneRepMaxEstimate],
    settings: ProgressionSettingsBase,
    cfg: ProgressionConfig,
) -> Optional[ProgressionSuggestion]:
    latest = samples[-1]
    last_rpe = _rpe(latest, cfg)
    target = _target_rpe(settings, cfg)
    if last_rpe > target:
        return None

    increment = compute_increment(category, settings, cfg)
    suggested_weight = _round_to(latest.weight + increment, cfg.rounding)

    evidence = [
        f"Last RPE {last_rpe:g} at or below target {target:g}",
        f"{settings.experience_level.value} {category.value} increment: {increment:g} kg",
    ]
    one_rm_confidence = 0.0
    if one_rm is not None and one_rm.estimate > 0:
        percent = suggested_weight / one_rm.estimate * 100
        ceiling = cfg.max_one_rm_percent[settings.primary_goal]
        if percent > ceiling:
            logger.debug(
                "progression %s: %.1f kg is %.0f%% of 1RM > %.0f%%, dropped",
                exercise_name, suggested_weight, percent, ceiling,
            )
            return None
        evidence.append(f"New load is {round(percent)}% of estimated 1RM {one_rm.estimate:g} kg")
        one_rm_confidence = one_rm.confidence

    confidence = _progression_confidence(last_rpe, _rpe_std(samples, cfg), one_rm_confidence)
    current = _prescription(latest, cfg)

    return ProgressionSuggestion(
        exercise_name=exercise_name,
        type=ProgressionType.WEIGHT_INCREASE,
        current=current,
        suggested=LoadPrescription(
            weight=suggested_weight, reps=current.reps, sets=current.sets,
        ),
        confidence=round(confidence, 3),
        reasoning=(
            f"Last session RPE was {last_rpe:g}, leaving room to add {increment:g} kg "
            f"on a {settings.primary_goal.value} progression"
        ),
        evidence=evidence,
        priority=Priority.HIGH if confidence > 0.7 else Priority.MEDIUM,
        timeframe=Timeframe.NEXT_SESSION,
    )


def _volume_increase(
    exercise_name: str,
    samples: list[PerformanceSampleBase],
    one_rm: Optional[OneRepMaxEstimate],
    settings: ProgressionSettingsBase,
    cfg: ProgressionConfig,
) -> Optional[ProgressionSuggestion]:
    latest = samples[-1]
    last_rpe = _rpe(latest, cfg)
    if last_rpe > _target_rpe(settings, cfg) + cfg.volume_rpe_margin:
        return None

    current = _prescription(latest, cfg)
    reps, sets = current.reps, current.sets
    if settings.primary_goal == TrainingGoal.HYPERTROPHY and reps < cfg.rep_ceiling:
        reps += 1
    elif sets < cfg.set_ceiling:
        sets += 1
        reps = max(1, reps - 1)
    else:
        return None

    one_rm_confidence = one_rm.confidence if one_rm is not None else 0.0
    confidence = _progression_confidence(last_rpe, _rpe_std(samples, cfg), one_rm_confidence)

    return ProgressionSuggestion(
        exercise_name=exercise_name,
        type=ProgressionType.VOLUME_INCREASE,
        current=current,
        suggested=LoadPrescription(weight=current.weight, reps=reps, sets=sets),
        confidence=round(confidence, 3),
        reasoning="Adding load is not indicated, increase volume to keep overloading",
        evidence=[
            f"RPE {last_rpe:g} allows more volume",
            f"Current volume: {current.sets * current.reps} total reps",
            f"Suggested volume: {sets * reps} total reps",
        ],
        priority=Priority.MEDIUM,
        timeframe=Timeframe.NEXT_SESSION,
    )


# ======================================================================
# Pure analysis
# ======================================================================


def generate_progression(
    exercise_name: str,
    history: Iterable[Any],
    one_rm: Optional[OneRepMaxEstimate],
    settings: ProgressionSettingsBase,
    plateau: Optional[PlateauAnalysis] = None,
    readiness: Optional[ReadinessAnalysis] = None,
    config: Optional[ProgressionConfig] = None,
) -> list[ProgressionSuggestion]:
    """Propose next-session changes for one exercise.

    Args:
        exercise_name: Exercise the history belongs to.
        history: Performance samples in any order.
        one_rm: Current 1RM estimate (the 1RM cap is skipped when None).
        settings: User progression preferences.
        plateau: Plateau analysis for the same exercise, if any.
        readiness: Today's readiness; a ``poor`` level holds load and
            volume where they are.
        config: Optional config override.

    Returns:
        Suggestions in priority order; empty when the history holds
        fewer than ``min_samples`` samples.
    """
    cfg = config or DEFAULT_PROGRESSION_CONFIG
    samples = sorted(
        _SAMPLES_ADAPTER.validate_python(list(history), from_attributes=True),
        key=lambda s: s.date,
    )
    if len(samples) < cfg.min_samples:
        logger.debug(
            "progression %s: %d samples < %d, skipped",
            exercise_name, len(samples), cfg.min_samples,
        )
        return []

    deload = _check_deload(exercise_name, samples, cfg)
    if deload is not None:
        return [deload]

    if plateau is not None and plateau.is_detected:
        return _plateau_breaks(exercise_name, samples[-1], plateau, cfg)

    if readiness is not None and readiness.level == ReadinessLevel.POOR:
        logger.debug("progression %s: poor readiness, holding", exercise_name)
        return []

    category = categorize_exercise(exercise_name)
    suggestions: list[ProgressionSuggestion] = []

    weight = _weight_increase(exercise_name, samples, category, one_rm, settings, cfg)
    if weight is not None:
        suggestions.append(weight)

    if weight is None or weight.confidence < cfg.volume_fallback_below:
        volume = _volume_increase(exercise_name, samples, one_rm, settings, cfg)
        if volume is not None:
            suggestions.append(volume)

    return suggestions


# ======================================================================
# Main entry point
# ======================================================================


def compute_progression(
    session: Session,
    user_id: int,
    exercise_name: str,
    as_of: datetime.date,
    config: Optional[ProgressionConfig] = None,
) -> ProgressionResponse:
    """Load history, settings and readiness and propose next-session changes."""
    cfg = config or DEFAULT_PROGRESSION_CONFIG

    history = PerformanceRepository(session).get_by_user_and_exercise(
        user_id, exercise_name, end=as_of,
    )
    row = ProgressionSettingsRepository(session).get_by_user(user_id)
    settings = (
        ProgressionSettingsBase.model_validate(row) if row is not None
        else ProgressionSettingsBase()
    )

    one_rm = estimate_one_rep_max(exercise_name, history)
    plateau = analyze_plateau(
        exercise_name, history[-DEFAULT_PLATEAU_CONFIG.window:], as_of,
    )
    readiness = compute_readiness(session, user_id, as_of)

    suggestions: list[ProgressionSuggestion] = []
    if settings.enabled:
        suggestions = generate_progression(
            exercise_name, history, one_rm, settings,
            plateau=plateau, readiness=readiness, config=cfg,
        )

    logger.info(
        "progression user=%s exercise=%s: %d suggestions",
        user_id, exercise_name, len(suggestions),
    )
    return ProgressionResponse(
        exercise_name=exercise_name,
        category=categorize_exercise(exercise_name),
        suggestions=suggestions,
        one_rep_max=one_rm,
        plateau=plateau,
    )
