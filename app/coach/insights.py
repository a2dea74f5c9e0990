"""
Between-workout insights.

Turns readiness, recovery trends, plateau analyses and progression
suggestions into a short ranked list of observations for the athlete.

Ranking
-------
    score = priority_weight + category_weight + 20 × confidence

    priority:  critical 100, high 75, medium 50, low 25
    category:  warning 20, suggestion 15, celebration 10, information 5

Only the top ``max_insights`` (5) are returned.  Plateau analyses that
were not detected never produce an insight.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, TypeAdapter
from sqlmodel import Session

from app.coach.one_rm import estimate_one_rep_max
from app.coach.plateau import DEFAULT_PLATEAU_CONFIG, analyze_plateau
from app.coach.progression import generate_progression
from app.coach.readiness import compute_readiness
from app.coach.trend import analyze_trend
from app.db.repositories.daily_metrics import DailyMetricsRepository
from app.db.repositories.performance import PerformanceRepository
from app.db.repositories.progression_settings import ProgressionSettingsRepository
from app.schemas.daily_metrics import DailyMetricsRecord
from app.schemas.insight import Insight, InsightCategory, InsightsResponse
from app.schemas.plateau import PlateauAnalysis, PlateauSeverity
from app.schemas.progression import (
    Priority,
    ProgressionSettingsBase,
    ProgressionSuggestion,
    ProgressionType,
)
from app.schemas.readiness import ReadinessAnalysis

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

_PRIORITY_WEIGHT: dict[Priority, float] = {
    Priority.CRITICAL: 100.0,
    Priority.HIGH: 75.0,
    Priority.MEDIUM: 50.0,
    Priority.LOW: 25.0,
}

_CATEGORY_WEIGHT: dict[InsightCategory, float] = {
    InsightCategory.WARNING: 20.0,
    InsightCategory.SUGGESTION: 15.0,
    InsightCategory.CELEBRATION: 10.0,
    InsightCategory.INFORMATION: 5.0,
}

_METRICS_ADAPTER = TypeAdapter(list[DailyMetricsRecord])


class InsightConfig(BaseModel):
    """Configuration for insight generation."""

    max_insights: int = Field(default=5, ge=1)
    critical_readiness: float = 40.0
    low_readiness: float = 60.0
    prime_readiness: float = 85.0
    recovery_days: int = Field(default=7, ge=3)
    sleep_debt_hours: float = 6.5
    soreness_alert: float = 6.0
    active_exercise_days: int = Field(default=28, ge=1)
    max_exercises: int = Field(default=8, ge=1)


DEFAULT_INSIGHT_CONFIG = InsightConfig()


# ======================================================================
# Insight builders
# ======================================================================


def _readiness_insights(
    readiness: Optional[ReadinessAnalysis], cfg: InsightConfig,
) -> list[Insight]:
    if readiness is None:
        return []

    score = readiness.overall_score
    if score < cfg.critical_readiness:
        return [Insight(
            id="readiness-critical",
            category=InsightCategory.WARNING,
            priority=Priority.CRITICAL,
            title="Very low readiness",
            message=f"Readiness is {score:g}/100. Your body is asking for recovery today.",
            action_items=[
                "Take a rest day or do light mobility work",
                "Prioritize sleep and nutrition tonight",
            ],
            confidence=readiness.confidence,
            source="readiness",
        )]
    if score < cfg.low_readiness:
        return [Insight(
            id="readiness-low",
            category=InsightCategory.WARNING,
            priority=Priority.HIGH,
            title="Below-average readiness",
            message=f"Readiness is {score:g}/100, {abs(readiness.deviation):g} points off your baseline.",
            action_items=[
                "Reduce working weights by 10-20%",
                "Extend rest periods between sets",
            ],
            confidence=readiness.confidence,
            source="readiness",
        )]
    if score > cfg.prime_readiness and readiness.deviation > 0:
        return [Insight(
            id="readiness-prime",
            category=InsightCategory.CELEBRATION,
            priority=Priority.MEDIUM,
            title="Prime training conditions",
            message=f"Readiness is {score:g}/100, above your baseline. A good day to push.",
            action_items=["Attempt a heavier top set or a personal record"],
            confidence=readiness.confidence,
            source="readiness",
        )]
    return []


def _recovery_insights(
    metrics: list[DailyMetricsRecord], cfg: InsightConfig,
) -> list[Insight]:
    if len(metrics) < 3:
        return []

    insights: list[Insight] = []
    sleep = [m.sleep_hours for m in metrics]
    sleep_trend = analyze_trend(sleep, window=len(sleep))
    average_sleep = sum(sleep) / len(sleep)
    if average_sleep < cfg.sleep_debt_hours and sleep_trend.is_falling:
        insights.append(Insight(
            id="recovery-sleep-debt",
            category=InsightCategory.WARNING,
            priority=Priority.HIGH,
            title="Sleep debt building up",
            message=(
                f"You averaged {average_sleep:.1f} h of sleep over the last "
                f"{len(sleep)} check-ins and it is trending down."
            ),
            action_items=[
                "Move bedtime 30 minutes earlier",
                "Keep training volume moderate until sleep recovers",
            ],
            confidence=max(0.5, sleep_trend.confidence),
            source="recovery",
        ))

    soreness = [float(m.soreness_level) for m in metrics]
    soreness_trend = analyze_trend(soreness, window=len(soreness))
    average_soreness = sum(soreness) / len(soreness)
    if average_soreness > cfg.soreness_alert and soreness_trend.is_rising:
        insights.append(Insight(
            id="recovery-soreness",
            category=InsightCategory.SUGGESTION,
            priority=Priority.MEDIUM,
            title="Soreness is accumulating",
            message=(
                f"Average soreness is {average_soreness:.1f}/10 and rising; "
                "recovery is not keeping up with training."
            ),
            action_items=[
                "Add a recovery or mobility session this week",
                "Spread volume for sore muscle groups over more days",
            ],
            confidence=max(0.5, soreness_trend.confidence),
            source="recovery",
        ))
    return insights


def _plateau_insights(plateaus: Iterable[PlateauAnalysis]) -> list[Insight]:
    insights: list[Insight] = []
    for plateau in plateaus:
        if not plateau.is_detected or plateau.type is None or plateau.severity is None:
            continue
        severe = plateau.severity == PlateauSeverity.SEVERE
        insights.append(Insight(
            id=f"plateau-{plateau.exercise_name.lower().replace(' ', '-')}",
            category=InsightCategory.WARNING,
            priority=Priority.HIGH if severe else Priority.MEDIUM,
            title=f"{plateau.exercise_name} has plateaued",
            message=(
                f"No meaningful progress for {plateau.duration} sessions "
                f"({plateau.severity.value} {plateau.type.value.replace('_', ' ')})."
            ),
            action_items=[r.description for r in plateau.recommendations[:3]],
            confidence=plateau.confidence,
            source="plateau",
            exercise_name=plateau.exercise_name,
        ))
    return insights


def _progression_insights(
    progressions: Iterable[ProgressionSuggestion],
) -> list[Insight]:
    insights: list[Insight] = []
    for suggestion in progressions:
        slug = suggestion.exercise_name.lower().replace(" ", "-")
        if suggestion.type == ProgressionType.DELOAD:
            insights.append(Insight(
                id=f"progression-deload-{slug}",
                category=InsightCategory.WARNING,
                priority=Priority.HIGH,
                title=f"Deload {suggestion.exercise_name}",
                message=suggestion.reasoning,
                action_items=[
                    f"Next session: {suggestion.suggested.sets} x {suggestion.suggested.reps} "
                    f"at {suggestion.suggested.weight:g} kg",
                ],
                confidence=suggestion.confidence,
                source="progression",
                exercise_name=suggestion.exercise_name,
            ))
        elif suggestion.type == ProgressionType.WEIGHT_INCREASE:
            insights.append(Insight(
                id=f"progression-weight-{slug}",
                category=InsightCategory.CELEBRATION,
                priority=Priority.MEDIUM,
                title=f"Ready to add weight on {suggestion.exercise_name}",
                message=suggestion.reasoning,
                action_items=[
                    f"Load {suggestion.suggested.weight:g} kg for "
                    f"{suggestion.suggested.sets} x {suggestion.suggested.reps}",
                ],
                confidence=suggestion.confidence,
                source="progression",
                exercise_name=suggestion.exercise_name,
            ))
        elif suggestion.type == ProgressionType.VOLUME_INCREASE:
            insights.append(Insight(
                id=f"progression-volume-{slug}",
                category=InsightCategory.SUGGESTION,
                priority=Priority.LOW,
                title=f"Add volume on {suggestion.exercise_name}",
                message=suggestion.reasoning,
                action_items=[
                    f"Do {suggestion.suggested.sets} x {suggestion.suggested.reps} "
                    f"at {suggestion.suggested.weight:g} kg",
                ],
                confidence=suggestion.confidence,
                source="progression",
                exercise_name=suggestion.exercise_name,
            ))
    return insights


def _insight_score(insight: Insight) -> float:
    return (
        _PRIORITY_WEIGHT[insight.priority]
        + _CATEGORY_WEIGHT[insight.category]
        + insight.confidence * 20
    )


# ======================================================================
# Pure generation
# ======================================================================


def generate_insights(
    readiness: Optional[ReadinessAnalysis] = None,
    metrics: Iterable[Any] = (),
    plateaus: Iterable[PlateauAnalysis] = (),
    progressions: Iterable[ProgressionSuggestion] = (),
    config: Optional[InsightConfig] = None,
) -> list[Insight]:
    """Build and rank insights, highest score first.

    Args:
        readiness: Today's readiness, if any.
        metrics: Recent check-ins for recovery trends (any order).
        plateaus: Plateau analyses, one per exercise.
        progressions: Progression suggestions across exercises.
        config: Optional config override.
    """
    cfg = config or DEFAULT_INSIGHT_CONFIG
    records = sorted(
        _METRICS_ADAPTER.validate_python(list(metrics), from_attributes=True),
        key=lambda m: m.date,
    )[-cfg.recovery_days:]

    insights: list[Insight] = []
    insights.extend(_readiness_insights(readiness, cfg))
    insights.extend(_recovery_insights(records, cfg))
    insights.extend(_plateau_insights(plateaus))
    insights.extend(_progression_insights(progressions))

    insights.sort(key=_insight_score, reverse=True)
    return insights[: cfg.max_insights]


# ======================================================================
# Main entry point
# ======================================================================


def compute_insights(
    session: Session,
    user_id: int,
    as_of: datetime.date,
    config: Optional[InsightConfig] = None,
) -> InsightsResponse:
    """Analyse every recently trained exercise and the latest check-ins."""
    cfg = config or DEFAULT_INSIGHT_CONFIG
    performance_repo = PerformanceRepository(session)

    readiness = compute_readiness(session, user_id, as_of)
    metrics = DailyMetricsRepository(session).get_by_user_date_range(
        user_id, as_of - datetime.timedelta(days=cfg.recovery_days - 1), as_of,
    )

    row = ProgressionSettingsRepository(session).get_by_user(user_id)
    settings = (
        ProgressionSettingsBase.model_validate(row) if row is not None
        else ProgressionSettingsBase()
    )

    active_since = as_of - datetime.timedelta(days=cfg.active_exercise_days)
    exercises = [
        name for name, _, _, last_date in performance_repo.summarize_exercises(user_id)
        if last_date >= active_since
    ][: cfg.max_exercises]

    plateaus: list[PlateauAnalysis] = []
    progressions: list[ProgressionSuggestion] = []
    for exercise_name in exercises:
        history = performance_repo.get_by_user_and_exercise(user_id, exercise_name, end=as_of)
        plateau = analyze_plateau(
            exercise_name, history[-DEFAULT_PLATEAU_CONFIG.window:], as_of,
        )
        plateaus.append(plateau)
        if settings.enabled:
            progressions.extend(generate_progression(
                exercise_name, history, estimate_one_rep_max(exercise_name, history),
                settings, plateau=plateau, readiness=readiness,
            ))

    insights = generate_insights(readiness, metrics, plateaus, progressions, cfg)
    logger.info(
        "insights user=%s: %d exercises, %d insights", user_id, len(exercises), len(insights),
    )
    return InsightsResponse(
        generated_at=datetime.datetime.utcnow(),
        readiness=readiness,
        insights=insights,
    )
