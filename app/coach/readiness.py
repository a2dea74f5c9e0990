"""
Readiness scoring from the daily check-in.

Readiness answers "how ready is the athlete to train today?" from the
self-reported morning check-in, before any training load is considered.

Model
-----
Each factor is normalised to a 0-100 score where 100 is always the best
state:

    sleep       = min(100, hours / target_hours × 100)
                  averaged with quality × 10 when sleep quality is reported
    energy      = energy × 10
    motivation  = motivation × 10
    soreness    = (11 - soreness) × 10        (inverted: 10 = very sore)
    stress      = (11 - stress) × 10          (inverted: 10 = very stressed)

The overall score is the weighted mean over the factors present on the
latest check-in:

    overall = Σ w_f × score_f / Σ w_f

Canonical weights:

    sleep 0.25, energy 0.25, soreness 0.20, stress 0.15, motivation 0.15

Motivation is optional; when it is missing the remaining weights are
renormalised so the score stays on the 0-100 scale.

Design choices
--------------
1. **One weighting scheme**: the five-factor weights above are the only
   ones used, both for today's score and for the baseline.
2. **Personal baseline**: the baseline is the mean overall score of the
   earlier check-ins in the lookback window.  With fewer than
   ``min_baseline_days`` earlier check-ins a population default (60) is
   used instead.
3. **Factor trends gate on fit quality**: a factor is only reported as
   improving or declining when the trend fit is reasonably good
   (R² above ``min_trend_confidence``); noisy check-ins read as stable.
4. **No data is not an error**: an empty lookback window returns
   ``None`` so callers can render an "insufficient data" state.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Any, Iterable, Optional, Sequence

from pydantic import BaseModel, Field, TypeAdapter
from sqlmodel import Session

from app.coach.trend import analyze_trend
from app.db.repositories.daily_metrics import DailyMetricsRepository
from app.schemas.daily_metrics import DailyMetricsRecord
from app.schemas.readiness import (
    ReadinessAnalysis,
    ReadinessComparison,
    ReadinessFactor,
    ReadinessFactorName,
    ReadinessLevel,
)
from app.schemas.trend import TrendDirection

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

_FACTOR_WEIGHTS: dict[ReadinessFactorName, float] = {
    ReadinessFactorName.SLEEP: 0.25,
    ReadinessFactorName.ENERGY: 0.25,
    ReadinessFactorName.SORENESS: 0.20,
    ReadinessFactorName.STRESS: 0.15,
    ReadinessFactorName.MOTIVATION: 0.15,
}

# Rating fields per factor; a high rating on an inverted factor means worse readiness.
_RATING_FIELDS: dict[ReadinessFactorName, str] = {
    ReadinessFactorName.ENERGY: "energy_level",
    ReadinessFactorName.SORENESS: "soreness_level",
    ReadinessFactorName.STRESS: "stress_level",
    ReadinessFactorName.MOTIVATION: "motivation_level",
}
_INVERTED_FACTORS = frozenset({ReadinessFactorName.SORENESS, ReadinessFactorName.STRESS})

# (label, lower bound inclusive), checked top-down.
_LEVEL_THRESHOLDS: list[tuple[ReadinessLevel, float]] = [
    (ReadinessLevel.EXCELLENT, 85.0),
    (ReadinessLevel.GOOD, 70.0),
    (ReadinessLevel.FAIR, 55.0),
    (ReadinessLevel.POOR, 0.0),
]

_LOOKBACK_DAYS = 14
_MAX_METRICS = 14
_TARGET_SLEEP_HOURS = 8.0
_DEFAULT_BASELINE = 60.0
_MIN_BASELINE_DAYS = 3

_METRICS_ADAPTER = TypeAdapter(list[DailyMetricsRecord])


class ReadinessConfig(BaseModel):
    """Configuration for readiness scoring."""

    factor_weights: dict[ReadinessFactorName, float] = Field(
        default_factory=lambda: dict(_FACTOR_WEIGHTS),
    )
    lookback_days: int = Field(default=_LOOKBACK_DAYS, ge=1)
    max_metrics: int = Field(default=_MAX_METRICS, ge=1, le=_MAX_METRICS)
    target_sleep_hours: float = Field(default=_TARGET_SLEEP_HOURS, gt=0.0)
    default_baseline: float = Field(default=_DEFAULT_BASELINE, ge=0.0, le=100.0)
    min_baseline_days: int = Field(default=_MIN_BASELINE_DAYS, ge=1)
    min_trend_confidence: float = Field(default=0.3, ge=0.0, le=1.0)
    factor_alert_score: float = Field(default=60.0)
    deviation_alert: float = Field(default=15.0)
    stale_after_days: float = Field(default=3.0, gt=0.0)
    max_recommendations: int = Field(default=4, ge=1)


DEFAULT_READINESS_CONFIG = ReadinessConfig()


# ======================================================================
# Normalisation
# ======================================================================


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _normalize_rating(value: float, inverted: bool = False) -> float:
    """Map a 1-10 rating to 0-100 where 100 is the best state."""
    score = (11 - value) * 10 if inverted else value * 10
    return _clamp(score)


def _sleep_score(
    hours: float, quality: Optional[int], target_hours: float,
) -> float:
    score = _clamp(hours / target_hours * 100.0)
    if quality is not None:
        score = (score + _normalize_rating(quality)) / 2.0
    return score


def _factor_values(
    record: DailyMetricsRecord, cfg: ReadinessConfig,
) -> dict[ReadinessFactorName, tuple[float, float]]:
    """Raw value and normalised score of every factor present on a record."""
    factors: dict[ReadinessFactorName, tuple[float, float]] = {
        ReadinessFactorName.SLEEP: (
            record.sleep_hours,
            _sleep_score(record.sleep_hours, record.sleep_quality, cfg.target_sleep_hours),
        ),
    }
    for name, field in _RATING_FIELDS.items():
        value = getattr(record, field)
        if value is not None:
            factors[name] = (value, _normalize_rating(value, inverted=name in _INVERTED_FACTORS))
    return factors


def _composite_score(
    factor_scores: dict[ReadinessFactorName, float], weights: dict[ReadinessFactorName, float],
) -> tuple[float, dict[ReadinessFactorName, float]]:
    """Weighted mean of the present factors.

    Returns:
        ``(overall, effective_weights)`` where the effective weights are
        renormalised to sum to 1 over the present factors.
    """
    total_weight = sum(weights.get(name, 0.0) for name in factor_scores)
    if total_weight <= 0:
        return 0.0, {name: 0.0 for name in factor_scores}

    effective = {
        name: weights.get(name, 0.0) / total_weight for name in factor_scores
    }
    overall = sum(score * effective[name] for name, score in factor_scores.items())
    return _clamp(overall), effective


def _label_readiness(score: float) -> ReadinessLevel:
    """Map an overall score to its readiness level."""
    for level, low in _LEVEL_THRESHOLDS:
        if score >= low:
            return level
    return ReadinessLevel.POOR


# ======================================================================
# Baseline, trends and confidence
# ======================================================================


def _compute_baseline(earlier_scores: list[float], cfg: ReadinessConfig) -> float:
    if len(earlier_scores) < cfg.min_baseline_days:
        return cfg.default_baseline
    return _clamp(sum(earlier_scores) / len(earlier_scores))


def _factor_trend(scores: list[float], cfg: ReadinessConfig) -> TrendDirection:
    trend = analyze_trend(scores, window=len(scores) or 1)
    if trend.confidence > cfg.min_trend_confidence:
        return trend.direction
    return TrendDirection.STABLE


def _compute_confidence(
    records: list[DailyMetricsRecord],
    factor_history: dict[ReadinessFactorName, list[float]],
    as_of: datetime.date,
    cfg: ReadinessConfig,
) -> float:
    """Blend of recency, completeness, consistency and history length.

        confidence = 0.3 × recency + 0.3 × completeness
                   + 0.2 × consistency + 0.2 × history
    """
    latest = records[-1]
    days_since = max(0, (as_of - latest.date).days)
    recency = max(0.0, 1.0 - days_since / cfg.stale_after_days)

    present = len(_factor_values(latest, cfg))
    completeness = present / len(cfg.factor_weights)

    consistency = 0.0
    if len(records) >= 3:
        sleep_fit = analyze_trend(factor_history[ReadinessFactorName.SLEEP], window=len(records))
        energy_fit = analyze_trend(factor_history[ReadinessFactorName.ENERGY], window=len(records))
        consistency = (sleep_fit.confidence + energy_fit.confidence) / 2.0

    history = min(1.0, len(records) / cfg.max_metrics)

    confidence = (
        recency * 0.3 + completeness * 0.3 + consistency * 0.2 + history * 0.2
    )
    return max(0.0, min(1.0, confidence))


# ======================================================================
# Recommendations
# ======================================================================


def _generate_recommendations(
    factors: dict[ReadinessFactorName, ReadinessFactor],
    overall: float,
    deviation: float,
    cfg: ReadinessConfig,
) -> list[str]:
    recs: list[str] = []

    if overall < 50:
        recs.append("Consider a rest day or a light recovery session")
    elif overall < 70:
        recs.append("Proceed with caution and reduce intensity by 10-20%")
    elif overall > 85:
        recs.append("Excellent readiness, a good day for progressive overload")

    alert = cfg.factor_alert_score
    sleep = factors[ReadinessFactorName.SLEEP]
    if sleep.score < alert:
        recs.append(
            f"Prioritize sleep tonight, aim for {math.ceil(sleep.value + 1)}+ hours"
        )
    if factors[ReadinessFactorName.ENERGY].score < alert:
        recs.append("Focus on nutrition and hydration before training")
    soreness = factors[ReadinessFactorName.SORENESS]
    if soreness.score < alert:
        recs.append("Include extra warm-up and mobility work")
        if soreness.value > 6:
            recs.append("Consider a massage or foam rolling session")
    if factors[ReadinessFactorName.STRESS].score < alert:
        recs.append("Practice stress management (breathing, meditation)")
    motivation = factors.get(ReadinessFactorName.MOTIVATION)
    if motivation is not None and motivation.score < alert:
        recs.append("Pick a shorter session you enjoy to keep the habit going")

    if sleep.trend == TrendDirection.DECLINING:
        recs.append("Sleep is trending down, review your sleep routine")
    if (
        factors[ReadinessFactorName.ENERGY].trend == TrendDirection.DECLINING
        and factors[ReadinessFactorName.STRESS].trend == TrendDirection.DECLINING
    ):
        recs.append("Several factors are declining, consider a deload week")

    if deviation < -cfg.deviation_alert:
        recs.append("Well below your baseline, prioritize recovery")
    elif deviation > cfg.deviation_alert:
        recs.append("Above your baseline, a great time for a challenging workout")

    return recs[: cfg.max_recommendations]


# ======================================================================
# Pure analysis
# ======================================================================


def analyze_readiness(
    metrics: Iterable[Any],
    as_of: datetime.date,
    config: Optional[ReadinessConfig] = None,
    now: Optional[datetime.datetime] = None,
) -> Optional[ReadinessAnalysis]:
    """Score readiness from the check-ins in the lookback window.

    Args:
        metrics: Check-ins (ORM rows or schema objects) in any order.
            Rows outside ``[as_of - lookback_days + 1, as_of]`` are
            ignored.
        as_of: Reference date.
        config: Optional config override.
        now: Timestamp to stamp on the analysis (defaults to utcnow).

    Returns:
        :class:`ReadinessAnalysis` for the latest check-in, or ``None``
        when the window holds no check-ins.

    Raises:
        pydantic.ValidationError: if a check-in holds out-of-range values.
    """
    cfg = config or DEFAULT_READINESS_CONFIG
    records = _METRICS_ADAPTER.validate_python(list(metrics), from_attributes=True)

    window_start = as_of - datetime.timedelta(days=cfg.lookback_days - 1)
    records = sorted(
        (r for r in records if window_start <= r.date <= as_of),
        key=lambda r: r.date,
    )[-cfg.max_metrics:]

    if not records:
        logger.debug("readiness: no check-ins between %s and %s", window_start, as_of)
        return None

    # Per-day factor scores and composite scores.
    factor_history: dict[ReadinessFactorName, list[float]] = {name: [] for name in cfg.factor_weights}
    daily_scores: list[float] = []
    for record in records:
        values = _factor_values(record, cfg)
        for name, (_, score) in values.items():
            factor_history.setdefault(name, []).append(score)
        overall, _ = _composite_score(
            {name: score for name, (_, score) in values.items()},
            cfg.factor_weights,
        )
        daily_scores.append(overall)

    latest = records[-1]
    latest_values = _factor_values(latest, cfg)
    overall, effective_weights = _composite_score(
        {name: score for name, (_, score) in latest_values.items()},
        cfg.factor_weights,
    )

    factors: dict[ReadinessFactorName, ReadinessFactor] = {}
    for name, (raw, score) in latest_values.items():
        factors[name] = ReadinessFactor(
            name=name,
            value=raw,
            score=round(score, 1),
            trend=_factor_trend(factor_history[name], cfg),
            weight=round(effective_weights[name], 3),
        )

    baseline = _compute_baseline(daily_scores[:-1], cfg)
    deviation = overall - baseline

    analysis = ReadinessAnalysis(
        overall_score=round(overall, 1),
        level=_label_readiness(overall),
        factors=list(factors.values()),
        baseline=round(baseline, 1),
        deviation=round(deviation, 1),
        recommendations=_generate_recommendations(factors, overall, deviation, cfg),
        confidence=round(_compute_confidence(records, factor_history, as_of, cfg), 3),
        data_points=len(records),
        metrics_date=latest.date,
        hrv_score=latest.hrv_score,
        timestamp=now or datetime.datetime.utcnow(),
    )

    logger.debug(
        "readiness %s: score=%.1f level=%s over %d check-ins",
        as_of, analysis.overall_score, analysis.level.value, len(records),
    )
    return analysis


def compare_readiness(
    current: ReadinessAnalysis,
    previous_scores: Sequence[float],
) -> ReadinessComparison:
    """Compare today's score with up to the last 7 earlier overall scores."""
    if len(previous_scores) < 3:
        return ReadinessComparison(
            direction=TrendDirection.STABLE,
            difference=0.0,
            comparison="Insufficient history for comparison",
            significance="low",
        )

    recent = list(previous_scores)[-7:]
    trend = analyze_trend(recent, window=len(recent))
    average = sum(recent) / len(recent)
    difference = current.overall_score - average

    if abs(difference) < 5:
        comparison = "Similar to recent average"
    elif difference > 0:
        comparison = f"{round(difference)} points above recent average"
    else:
        comparison = f"{round(abs(difference))} points below recent average"

    if abs(difference) > 15:
        significance = "high"
    elif abs(difference) > 8:
        significance = "medium"
    else:
        significance = "low"

    return ReadinessComparison(
        direction=trend.direction,
        difference=round(difference, 1),
        comparison=comparison,
        significance=significance,
    )


# ======================================================================
# Main entry point
# ======================================================================


def compute_readiness(
    session: Session,
    user_id: int,
    as_of: datetime.date,
    config: Optional[ReadinessConfig] = None,
) -> Optional[ReadinessAnalysis]:
    """Load the lookback window of check-ins and score readiness.

    Args:
        session: Database session.
        user_id: User ID.
        as_of: Reference date (typically today).
        config: Optional config override.

    Returns:
        :class:`ReadinessAnalysis`, or ``None`` when there are no
        check-ins in the lookback window.
    """
    cfg = config or DEFAULT_READINESS_CONFIG
    repo = DailyMetricsRepository(session)
    start = as_of - datetime.timedelta(days=cfg.lookback_days - 1)
    metrics = repo.get_by_user_date_range(user_id, start, as_of)
    return analyze_readiness(metrics, as_of, cfg)


def compute_readiness_comparison(
    session: Session,
    user_id: int,
    as_of: datetime.date,
    config: Optional[ReadinessConfig] = None,
) -> Optional[ReadinessComparison]:
    """Compare today's readiness with the scores of the previous week.

    Each earlier day that has its own check-in is scored as of that day.

    Returns:
        :class:`ReadinessComparison`, or ``None`` when today has no
        readiness score.
    """
    cfg = config or DEFAULT_READINESS_CONFIG
    start = as_of - datetime.timedelta(days=cfg.lookback_days + 6)
    metrics = DailyMetricsRepository(session).get_by_user_date_range(user_id, start, as_of)

    current = analyze_readiness(metrics, as_of, cfg)
    if current is None:
        return None

    previous: list[float] = []
    for offset in range(7, 0, -1):
        day = as_of - datetime.timedelta(days=offset)
        if not any(m.date == day for m in metrics):
            continue
        analysis = analyze_readiness(metrics, day, cfg, now=current.timestamp)
        if analysis is not None:
            previous.append(analysis.overall_score)

    return compare_readiness(current, previous)
