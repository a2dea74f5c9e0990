"""
Readiness-driven workout modifications and rest intervals.

Before a session the planned workout is adjusted to today's readiness:

    overall < 40                  deload: 50-60 % intensity, half the sets,
                                  70 % of the reps (at least 5, never more
                                  than planned), active recovery
    40 <= overall < 60            intensity down to 75-85 % and 80 % of
                                  the sets (at least 1)
    sleep score < 50              rest between sets 3-5 min instead of 2-3
    soreness score < 50           extended warm-up with mobility work
    overall > 85 and
    deviation > 15                intensity up to 105-110 %

The factor rules apply on top of the score bands, so a poor day with bad
sleep gets both the lighter load and the longer rest.

Rest between sets starts from 180 s for compound lifts and 120 s for
isolation work, +60 s above 85 % intensity, -30 s below 70 %, +60 s after
an RPE of 8 or more and -30 s after an RPE of 6 or less.  The window is
``[max(60, base - 30), base + 60]``.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Optional

from pydantic import BaseModel, Field
from sqlmodel import Session

from app.coach.progression import categorize_exercise
from app.coach.readiness import compute_readiness
from app.schemas.modification import (
    ExerciseType,
    ModificationSeverity,
    ModificationType,
    PlannedWorkout,
    RestRecommendation,
    WorkoutModification,
    WorkoutModificationsResponse,
    WorkoutPrescription,
)
from app.schemas.progression import ExerciseCategory
from app.schemas.readiness import ReadinessAnalysis, ReadinessFactorName

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

# Accessory movements that still load several joints.
_COMPOUND_KEYWORDS: tuple[str, ...] = (
    "row", "pull-up", "pullup", "chin-up", "chinup", "lunge", "dip",
    "clean", "snatch", "press", "thrust", "split squat",
)

_BASE_REST_SECONDS: dict[ExerciseType, int] = {
    ExerciseType.COMPOUND: 180,
    ExerciseType.ISOLATION: 120,
}


class ModificationConfig(BaseModel):
    """Configuration for readiness-driven modifications."""

    critical_score: float = Field(default=40.0, ge=0.0, le=100.0)
    poor_score: float = Field(default=60.0, ge=0.0, le=100.0)
    excellent_score: float = Field(default=85.0, ge=0.0, le=100.0)
    excellent_deviation: float = Field(default=15.0)
    factor_alert_score: float = Field(default=50.0, ge=0.0, le=100.0)
    deload_set_factor: float = Field(default=0.5, gt=0.0, le=1.0)
    deload_rep_factor: float = Field(default=0.7, gt=0.0, le=1.0)
    deload_min_reps: int = Field(default=5, ge=1)
    volume_set_factor: float = Field(default=0.8, gt=0.0, le=1.0)


DEFAULT_MODIFICATION_CONFIG = ModificationConfig()


# ======================================================================
# Modifications
# ======================================================================


def _deload(planned: PlannedWorkout, cfg: ModificationConfig) -> WorkoutModification:
    reps = max(cfg.deload_min_reps, math.floor(planned.reps * cfg.deload_rep_factor))
    return WorkoutModification(
        type=ModificationType.DELOAD,
        severity=ModificationSeverity.MAJOR,
        reason="Critical readiness detected",
        original=WorkoutPrescription(sets=planned.sets, reps=planned.reps, intensity="100%"),
        suggested=WorkoutPrescription(
            sets=max(1, math.floor(planned.sets * cfg.deload_set_factor)),
            reps=min(planned.reps, reps),
            intensity="50-60%",
            session_type="active_recovery",
            focus="movement_quality",
        ),
        confidence=0.9,
        explanation="Your body needs recovery. Consider a light movement session instead.",
    )


def _reduced_load(planned: PlannedWorkout, cfg: ModificationConfig) -> list[WorkoutModification]:
    return [
        WorkoutModification(
            type=ModificationType.INTENSITY,
            severity=ModificationSeverity.MODERATE,
            reason="Below baseline readiness",
            original=WorkoutPrescription(intensity="100%"),
            suggested=WorkoutPrescription(intensity="75-85%"),
            confidence=0.8,
            explanation="Reduce intensity by 15-25% to match current readiness level.",
        ),
        WorkoutModification(
            type=ModificationType.VOLUME,
            severity=ModificationSeverity.MODERATE,
            reason="Elevated fatigue indicators",
            original=WorkoutPrescription(sets=planned.sets),
            suggested=WorkoutPrescription(
                sets=max(1, math.floor(planned.sets * cfg.volume_set_factor)),
            ),
            confidence=0.7,
            explanation="Reduce training volume to accommodate lower energy levels.",
        ),
    ]


def suggest_workout_modifications(
    planned: PlannedWorkout,
    readiness: ReadinessAnalysis,
    config: Optional[ModificationConfig] = None,
) -> list[WorkoutModification]:
    """Adjust a planned workout to today's readiness.

    Args:
        planned: Planned sets and reps.
        readiness: Today's readiness analysis.
        config: Optional config override.

    Returns:
        Modifications in rule order; empty when the plan can stand.
    """
    cfg = config or DEFAULT_MODIFICATION_CONFIG
    overall = readiness.overall_score
    factors = {factor.name: factor for factor in readiness.factors}
    modifications: list[WorkoutModification] = []

    if overall < cfg.critical_score:
        modifications.append(_deload(planned, cfg))
    elif overall < cfg.poor_score:
        modifications.extend(_reduced_load(planned, cfg))

    sleep = factors.get(ReadinessFactorName.SLEEP)
    if sleep is not None and sleep.score < cfg.factor_alert_score:
        modifications.append(WorkoutModification(
            type=ModificationType.REST,
            severity=ModificationSeverity.MODERATE,
            reason="Poor sleep quality",
            original=WorkoutPrescription(rest_between_sets="2-3 minutes"),
            suggested=WorkoutPrescription(rest_between_sets="3-5 minutes"),
            confidence=0.8,
            explanation="Extend rest periods due to insufficient recovery sleep.",
        ))

    soreness = factors.get(ReadinessFactorName.SORENESS)
    if soreness is not None and soreness.score < cfg.factor_alert_score:
        modifications.append(WorkoutModification(
            type=ModificationType.EXERCISE,
            severity=ModificationSeverity.MINOR,
            reason="High muscle soreness",
            original=WorkoutPrescription(warmup="standard"),
            suggested=WorkoutPrescription(warmup="extended", mobility="emphasize"),
            confidence=0.9,
            explanation="Add 10 minutes of mobility work and extend warm-up.",
        ))

    if overall > cfg.excellent_score and readiness.deviation > cfg.excellent_deviation:
        modifications.append(WorkoutModification(
            type=ModificationType.INTENSITY,
            severity=ModificationSeverity.MINOR,
            reason="Excellent readiness",
            original=WorkoutPrescription(intensity="100%"),
            suggested=WorkoutPrescription(intensity="105-110%"),
            confidence=0.7,
            explanation="Consider progressive overload, you're primed for growth!",
        ))

    return modifications


# ======================================================================
# Rest intervals
# ======================================================================


def classify_exercise_type(exercise_name: str) -> ExerciseType:
    """Main lifts and multi-joint accessories are compound, the rest isolation."""
    if categorize_exercise(exercise_name) != ExerciseCategory.ACCESSORY:
        return ExerciseType.COMPOUND
    name = exercise_name.strip().lower()
    if any(keyword in name for keyword in _COMPOUND_KEYWORDS):
        return ExerciseType.COMPOUND
    return ExerciseType.ISOLATION


def calculate_optimal_rest(
    exercise_type: ExerciseType,
    intensity: float,
    last_rpe: Optional[float] = None,
) -> RestRecommendation:
    """Rest window before the next set.

    Args:
        exercise_type: Compound or isolation.
        intensity: Working load as a percentage of 1RM.
        last_rpe: RPE of the set just performed, if rated.
    """
    base = _BASE_REST_SECONDS[exercise_type]
    if intensity > 85:
        base += 60
    if intensity < 70:
        base -= 30
    if last_rpe is not None:
        if last_rpe >= 8:
            base += 60
        if last_rpe <= 6:
            base -= 30

    reasoning = f"Based on {exercise_type.value} exercise at {intensity:g}% intensity"
    if last_rpe is not None:
        reasoning += f" with RPE {last_rpe:g}"

    return RestRecommendation(
        exercise_type=exercise_type,
        min_seconds=max(60, base - 30),
        max_seconds=base + 60,
        reasoning=reasoning,
    )


# ======================================================================
# Database entry point
# ======================================================================


def compute_workout_modifications(
    session: Session,
    user_id: int,
    planned: PlannedWorkout,
    as_of: datetime.date,
    config: Optional[ModificationConfig] = None,
) -> Optional[WorkoutModificationsResponse]:
    """Score today's readiness and adjust the planned workout to it.

    Returns:
        ``None`` when there are no check-ins to score readiness from.
    """
    readiness = compute_readiness(session, user_id, as_of)
    if readiness is None:
        return None

    modifications = suggest_workout_modifications(planned, readiness, config)
    logger.debug(
        "modifications user=%s %s: readiness=%.1f, %d changes",
        user_id, as_of, readiness.overall_score, len(modifications),
    )
    return WorkoutModificationsResponse(
        readiness_score=readiness.overall_score,
        planned=planned,
        modifications=modifications,
    )
