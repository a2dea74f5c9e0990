"""
Plateau detection for a single exercise.

A plateau is a run of recent sessions in which the working weight has
stopped going up while effort holds or rises.  The detector classifies
what kind of stagnation it is, how long it has lasted and how severe it
is, and attaches remediation strategies.

Algorithm
---------
1. Keep the most recent ``window`` (12) samples, oldest first, and build
   three series:

       weight  = w
       volume  = w × reps × sets        (sets default 3)
       rpe     = rpe                    (default 8)

2. Fit a trend to each series.
3. Classify the type, first match wins:

       rpe rising, confidence > 0.5         → rpe_inflation
       volume falling, confidence > 0.4     → volume_decline
       weight not rising                    → weight_stall
       otherwise                            → rep_stall

4. Duration: walk back from the latest session while
   ``w[i] - w[i-1] <= tolerance × w_latest`` (tolerance 2.5 %).
5. Detected when ``duration >= min_sessions`` and the weight is not
   rising or the RPE is rising.
6. Severity points:

       duration   >= 6 → 3,  >= 4 → 2,  else 1
       weight     falling +2, flat +1
       rpe        rising with confidence > 0.5 +2

   Total >= 6 is severe, >= 4 moderate, else mild.

7. Recommendations come from a table keyed by plateau type; a severe
   plateau gets an extended deload prepended.

All thresholds above live in :class:`PlateauConfig`.

Design choices
--------------
1. **Confidence from persistence**: confidence is the share of the
   analysed window that is inside the plateau, capped at 0.8.  A
   perfectly flat series is the clearest plateau there is, but its
   trend fit has R² = 0, so fit quality is not used here.
2. **Neutral result on thin history**: fewer than ``min_sessions``
   samples returns a not-detected analysis with confidence 0.1 and no
   recommendations.  Callers must not surface it as an insight.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, TypeAdapter
from sqlmodel import Session

from app.coach.trend import analyze_trend
from app.db.repositories.performance import PerformanceRepository
from app.schemas.performance import PerformanceSampleBase
from app.schemas.plateau import (
    PlateauAnalysis,
    PlateauRecommendation,
    PlateauSeverity,
    PlateauType,
    RPEPattern,
    RPEPatternAnalysis,
    StrategyType,
)
from app.schemas.trend import TrendResult

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

# (minimum duration in sessions, severity points), checked top-down.
_DURATION_POINTS: list[tuple[int, int]] = [
    (6, 3),
    (4, 2),
    (0, 1),
]

# (severity, minimum points), checked top-down.
_SEVERITY_THRESHOLDS: list[tuple[PlateauSeverity, int]] = [
    (PlateauSeverity.SEVERE, 6),
    (PlateauSeverity.MODERATE, 4),
    (PlateauSeverity.MILD, 0),
]

_STRATEGIES: dict[PlateauType, list[PlateauRecommendation]] = {
    PlateauType.WEIGHT_STALL: [
        PlateauRecommendation(
            strategy=StrategyType.DELOAD,
            description="Deload to 85% of current weight for 1-2 weeks",
            implementation="Reduce weight by 15%, keep reps and sets, focus on perfect form",
            expected_duration_weeks=2,
        ),
        PlateauRecommendation(
            strategy=StrategyType.VOLUME_ADJUSTMENT,
            description="Temporarily increase volume at lower intensity",
            implementation="Add 1-2 sets at 90% of current weight, or add 2-3 reps per set",
            expected_duration_weeks=3,
        ),
    ],
    PlateauType.RPE_INFLATION: [
        PlateauRecommendation(
            strategy=StrategyType.TECHNIQUE_FOCUS,
            description="Refine technique at a reduced load",
            implementation="Drop weight 10-15%, emphasize form and tempo control",
            expected_duration_weeks=2,
        ),
        PlateauRecommendation(
            strategy=StrategyType.DELOAD,
            description="Full deload week to restore neuromuscular efficiency",
            implementation="Reduce weight, sets and reps by 20-30% for one week",
            expected_duration_weeks=1,
        ),
    ],
    PlateauType.VOLUME_DECLINE: [
        PlateauRecommendation(
            strategy=StrategyType.FREQUENCY_CHANGE,
            description="Train the lift more often with less volume per session",
            implementation="Split the current weekly volume across more sessions",
            expected_duration_weeks=4,
        ),
    ],
    PlateauType.REP_STALL: [
        PlateauRecommendation(
            strategy=StrategyType.EXERCISE_VARIATION,
            description="Introduce a variation to stimulate new adaptation",
            implementation="Swap in a similar movement pattern variation for 4-6 weeks",
            expected_duration_weeks=6,
        ),
    ],
}

_EXTENDED_DELOAD = PlateauRecommendation(
    strategy=StrategyType.DELOAD,
    description="Extended deload phase with technique analysis",
    implementation="Two-week deload: week 1 at 70%, week 2 at 80%, film your sets",
    expected_duration_weeks=2,
)

_SAMPLES_ADAPTER = TypeAdapter(list[PerformanceSampleBase])


class PlateauConfig(BaseModel):
    """Configuration for plateau detection."""

    min_sessions: int = Field(default=4, ge=2)
    window: int = Field(default=12, ge=3)
    tolerance: float = Field(
        default=0.025, ge=0.0, le=0.5,
        description="Allowed session-to-session increase as a fraction of the latest weight",
    )
    default_sets: int = Field(default=3, ge=1)
    default_rpe: float = Field(default=8.0, ge=1.0, le=10.0)
    rpe_inflation_confidence: float = Field(default=0.5)
    volume_decline_confidence: float = Field(default=0.4)
    duration_points: list[tuple[int, int]] = Field(
        default_factory=lambda: list(_DURATION_POINTS),
    )
    weight_falling_points: int = 2
    weight_flat_points: int = 1
    rpe_rising_points: int = 2
    severity_thresholds: list[tuple[PlateauSeverity, int]] = Field(
        default_factory=lambda: list(_SEVERITY_THRESHOLDS),
    )
    max_confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    not_detected_confidence: float = Field(default=0.1, ge=0.0, le=1.0)
    review_days_detected: int = Field(default=14, ge=1)
    review_days_normal: int = Field(default=7, ge=1)


DEFAULT_PLATEAU_CONFIG = PlateauConfig()


# ======================================================================
# Helpers
# ======================================================================


def _validate_history(history: Iterable[Any]) -> list[PerformanceSampleBase]:
    """Validate samples (ORM rows or schemas) and sort them oldest first."""
    samples = _SAMPLES_ADAPTER.validate_python(list(history), from_attributes=True)
    return sorted(samples, key=lambda s: s.date)


def _plateau_duration(weights: list[float], tolerance: float) -> int:
    """Count consecutive trailing sessions without a meaningful weight increase.

    Args:
        weights: Weights ordered oldest → newest.
        tolerance: Allowed increase as a fraction of the latest weight.
    """
    if len(weights) < 3:
        return 0

    band = weights[-1] * tolerance
    duration = 0
    for i in range(len(weights) - 1, 0, -1):
        if weights[i] - weights[i - 1] <= band:
            duration += 1
        else:
            break
    return duration


def _determine_plateau_type(
    weight_trend: TrendResult,
    volume_trend: TrendResult,
    rpe_trend: TrendResult,
    cfg: PlateauConfig,
) -> PlateauType:
    if rpe_trend.is_rising and rpe_trend.confidence > cfg.rpe_inflation_confidence:
        return PlateauType.RPE_INFLATION
    if volume_trend.is_falling and volume_trend.confidence > cfg.volume_decline_confidence:
        return PlateauType.VOLUME_DECLINE
    if not weight_trend.is_rising:
        return PlateauType.WEIGHT_STALL
    return PlateauType.REP_STALL


def _severity_points(
    duration: int,
    weight_trend: TrendResult,
    rpe_trend: TrendResult,
    cfg: PlateauConfig,
) -> int:
    points = 0
    for min_duration, bucket_points in cfg.duration_points:
        if duration >= min_duration:
            points += bucket_points
            break

    if weight_trend.is_falling:
        points += cfg.weight_falling_points
    elif weight_trend.is_flat:
        points += cfg.weight_flat_points

    if rpe_trend.is_rising and rpe_trend.confidence > cfg.rpe_inflation_confidence:
        points += cfg.rpe_rising_points
    return points


def _label_severity(points: int, cfg: PlateauConfig) -> PlateauSeverity:
    for severity, min_points in cfg.severity_thresholds:
        if points >= min_points:
            return severity
    return PlateauSeverity.MILD


def _recommendations(
    plateau_type: PlateauType, severity: PlateauSeverity,
) -> list[PlateauRecommendation]:
    recs = [r.model_copy() for r in _STRATEGIES[plateau_type]]
    if severity == PlateauSeverity.SEVERE:
        recs.insert(0, _EXTENDED_DELOAD.model_copy())
    return recs


def _not_detected(
    exercise_name: str,
    as_of: datetime.date,
    cfg: PlateauConfig,
    sessions: int = 0,
    duration: int = 0,
    trends: Optional[tuple[TrendResult, TrendResult, TrendResult]] = None,
) -> PlateauAnalysis:
    weight_trend, volume_trend, rpe_trend = trends or (None, None, None)
    return PlateauAnalysis(
        exercise_name=exercise_name,
        is_detected=False,
        duration=duration,
        confidence=cfg.not_detected_confidence,
        recommendations=[],
        next_review_date=as_of + datetime.timedelta(days=cfg.review_days_normal),
        sessions_analyzed=sessions,
        weight_trend=weight_trend,
        volume_trend=volume_trend,
        rpe_trend=rpe_trend,
    )


# ======================================================================
# Pure analysis
# ======================================================================


def analyze_plateau(
    exercise_name: str,
    history: Iterable[Any],
    as_of: datetime.date,
    config: Optional[PlateauConfig] = None,
) -> PlateauAnalysis:
    """Detect a plateau in the history of one exercise.

    Args:
        exercise_name: Exercise the history belongs to.
        history: Performance samples in any order.
        as_of: Reference date for the next review.
        config: Optional config override.

    Returns:
        :class:`PlateauAnalysis`.  ``is_detected`` is False with
        confidence 0.1 when the history is too short.

    Raises:
        pydantic.ValidationError: if a sample holds invalid values.
    """
    cfg = config or DEFAULT_PLATEAU_CONFIG
    samples = _validate_history(history)

    if len(samples) < cfg.min_sessions:
        logger.debug(
            "plateau %s: %d samples < %d, not analysed",
            exercise_name, len(samples), cfg.min_sessions,
        )
        return _not_detected(exercise_name, as_of, cfg, sessions=len(samples))

    recent = samples[-cfg.window:]
    weights = [s.weight for s in recent]
    volumes = [s.weight * s.reps * (s.sets or cfg.default_sets) for s in recent]
    rpes = [s.rpe if s.rpe is not None else cfg.default_rpe for s in recent]

    weight_trend = analyze_trend(weights, window=len(weights))
    volume_trend = analyze_trend(volumes, window=len(volumes))
    rpe_trend = analyze_trend(rpes, window=len(rpes))

    plateau_type = _determine_plateau_type(weight_trend, volume_trend, rpe_trend, cfg)
    duration = _plateau_duration(weights, cfg.tolerance)

    is_detected = duration >= cfg.min_sessions and (
        not weight_trend.is_rising or rpe_trend.is_rising
    )

    if not is_detected:
        return _not_detected(
            exercise_name, as_of, cfg,
            sessions=len(recent),
            duration=duration,
            trends=(weight_trend, volume_trend, rpe_trend),
        )

    points = _severity_points(duration, weight_trend, rpe_trend, cfg)
    severity = _label_severity(points, cfg)
    confidence = min(cfg.max_confidence, duration / (len(weights) - 1))

    logger.debug(
        "plateau %s: %s %s over %d sessions (points=%d)",
        exercise_name, severity.value, plateau_type.value, duration, points,
    )

    return PlateauAnalysis(
        exercise_name=exercise_name,
        is_detected=True,
        duration=duration,
        severity=severity,
        type=plateau_type,
        confidence=round(confidence, 3),
        recommendations=_recommendations(plateau_type, severity),
        next_review_date=as_of + datetime.timedelta(days=cfg.review_days_detected),
        sessions_analyzed=len(recent),
        weight_trend=weight_trend,
        volume_trend=volume_trend,
        rpe_trend=rpe_trend,
    )


def analyze_rpe_pattern(
    exercise_name: str,
    history: Iterable[Any],
    planned_rpe: float = 8.0,
) -> RPEPattern:
    """Summarise the last 10 rated sessions against a planned RPE."""
    samples = [s for s in _validate_history(history) if s.rpe is not None][-10:]

    if len(samples) < 3:
        return RPEPattern(
            exercise_name=exercise_name,
            average_rpe=planned_rpe,
            trend="stable",
            volatile=False,
            consistency=0.7,
            sessions_analyzed=len(samples),
            analysis=RPEPatternAnalysis(
                overreaching=False,
                underperforming=False,
                optimal_load=True,
                confidence=0.1,
            ),
            recommendations=["Log RPE on every session to enable pattern analysis"],
        )

    rpes = [s.rpe for s in samples]
    average = sum(rpes) / len(rpes)
    trend = analyze_trend(rpes, window=len(rpes))
    volatile = trend.volatility > 0.3
    mean_deviation = sum(abs(r - planned_rpe) for r in rpes) / len(rpes)
    consistency = max(0.0, min(1.0, 1.0 - mean_deviation / 10.0))
    recent_average = sum(rpes[-3:]) / len(rpes[-3:])

    analysis = RPEPatternAnalysis(
        overreaching=recent_average > 9 and trend.is_rising,
        underperforming=recent_average < 7 and trend.is_falling,
        optimal_load=7.5 <= recent_average <= 8.5 and trend.is_flat,
        confidence=round(trend.confidence * min(1.0, len(rpes) / 5), 3),
    )

    recs: list[str] = []
    if analysis.overreaching:
        recs.append("Reduce training intensity, RPE is consistently above 9")
        recs.append("Schedule a deload week to restore performance")
    if analysis.underperforming:
        recs.append("Loads may be too light, consider increasing intensity")
        recs.append("Check your RPE calibration against actual reps in reserve")
    if analysis.optimal_load:
        recs.append("Loading is on target, keep this intensity range")
        recs.append("Look for chances to add weight while holding RPE")
    if trend.is_rising and average > 8.5:
        recs.append("RPE is creeping up, watch for signs of overreaching")
    if volatile:
        recs.append("RPE is inconsistent, focus on calibrating effort")

    return RPEPattern(
        exercise_name=exercise_name,
        average_rpe=round(average, 1),
        trend=trend.direction,
        volatile=volatile,
        consistency=round(consistency, 2),
        sessions_analyzed=len(rpes),
        analysis=analysis,
        recommendations=recs,
    )


# ======================================================================
# Main entry point
# ======================================================================


def compute_plateau(
    session: Session,
    user_id: int,
    exercise_name: str,
    as_of: datetime.date,
    config: Optional[PlateauConfig] = None,
) -> PlateauAnalysis:
    """Load the recent history of an exercise and detect a plateau."""
    cfg = config or DEFAULT_PLATEAU_CONFIG
    repo = PerformanceRepository(session)
    history = repo.get_by_user_and_exercise(
        user_id, exercise_name, end=as_of, limit=cfg.window,
    )
    return analyze_plateau(exercise_name, history, as_of, cfg)
