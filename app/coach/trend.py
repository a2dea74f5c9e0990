"""
Trend analysis over short numeric series.

Every other analysis in the engine (readiness factor trends, plateau
detection, RPE patterns) reduces a series of recent values to a
:class:`TrendResult` through this module.

Model
-----
Ordinary least squares on ``(i, y_i)`` where ``i`` is the position in the
window (0 = oldest):

    slope      = Σ(x - x̄)(y - ȳ) / Σ(x - x̄)²
    confidence = R² = 1 - SS_res / SS_tot      (clamped to [0, 1])

The direction is the sign of the slope once it clears a dead band that
scales with the series level:

    ε = relative_epsilon × |ȳ|        (absolute_epsilon when ȳ == 0)

    slope >  ε   → improving
    slope < -ε   → declining
    otherwise    → stable

A series with zero variance has R² = 0: a flat line explains nothing, so
confidence is reported as 0 even though the direction is ``stable``.

Design choices
--------------
1. **Position, not date, on the x axis**: sessions are irregular in time
   but the questions asked ("is the load still going up from session to
   session?") are per session.
2. **Relative dead band**: a 1 kg wobble on a 200 kg squat is noise; a
   0.5 RPE climb on an 8 RPE series is not.  Scaling ε by the mean makes
   one threshold work for loads as well as ratings.
3. **Fail fast on NaN / inf**: the series is validated before any
   arithmetic so a bad value raises a ``ValidationError`` instead of
   turning every downstream score into NaN.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Iterable, Optional

from pydantic import BaseModel, Field, FiniteFloat, TypeAdapter
from sqlmodel import Session

from app.db.repositories.performance import PerformanceRepository
from app.schemas.trend import TrendDirection, TrendMetric, TrendResult

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

_DEFAULT_WINDOW = 12
_RELATIVE_EPSILON = 0.01
_ABSOLUTE_EPSILON = 1e-6

_SERIES_ADAPTER = TypeAdapter(list[FiniteFloat])


class TrendConfig(BaseModel):
    """Configuration for trend fitting."""

    window: int = Field(default=_DEFAULT_WINDOW, ge=2)
    relative_epsilon: float = Field(default=_RELATIVE_EPSILON, ge=0.0)
    absolute_epsilon: float = Field(default=_ABSOLUTE_EPSILON, ge=0.0)
    unit: str = Field(default="sessions")


DEFAULT_TREND_CONFIG = TrendConfig()


# ======================================================================
# Helpers
# ======================================================================


def validate_series(values: Iterable[float]) -> list[float]:
    """Return ``values`` as a list of finite floats.

    Raises:
        pydantic.ValidationError: if any value is NaN, infinite or not
            a number.
    """
    return _SERIES_ADAPTER.validate_python(list(values))


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _coefficient_of_variation(values: list[float], mean: float) -> float:
    """Population standard deviation over |mean| (0 for a zero mean)."""
    if len(values) < 2 or mean == 0:
        return 0.0
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / abs(mean)


def _fit_line(values: list[float]) -> tuple[float, float]:
    """Least-squares fit on positions 0..n-1.

    Returns:
        ``(slope, r_squared)``.  ``r_squared`` is 0 for a constant series.
    """
    n = len(values)
    x_mean = (n - 1) / 2.0
    y_mean = _mean(values)

    sxx = sum((i - x_mean) ** 2 for i in range(n))
    sxy = sum((i - x_mean) * (y - y_mean) for i, y in enumerate(values))
    slope = sxy / sxx if sxx > 0 else 0.0

    ss_tot = sum((y - y_mean) ** 2 for y in values)
    if ss_tot == 0:
        return slope, 0.0

    intercept = y_mean - slope * x_mean
    ss_res = sum((y - (intercept + slope * i)) ** 2 for i, y in enumerate(values))
    r_squared = 1.0 - ss_res / ss_tot
    return slope, max(0.0, min(1.0, r_squared))


def _classify(slope: float, mean: float, cfg: TrendConfig) -> TrendDirection:
    epsilon = cfg.relative_epsilon * abs(mean) if mean != 0 else cfg.absolute_epsilon
    if slope > epsilon:
        return TrendDirection.IMPROVING
    if slope < -epsilon:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


# ======================================================================
# Main entry point
# ======================================================================


def analyze_trend(
    values: Iterable[float],
    window: Optional[int] = None,
    config: Optional[TrendConfig] = None,
) -> TrendResult:
    """Fit a trend to the most recent ``window`` values of a series.

    Args:
        values: Series ordered oldest → newest.
        window: Number of trailing points to fit (config default if None).
        config: Optional config override.

    Returns:
        :class:`TrendResult`.  Fewer than 2 points gives a ``stable``
        result with zero confidence.
    """
    cfg = config or DEFAULT_TREND_CONFIG
    series = validate_series(values)
    size = window if window is not None else cfg.window
    points = series[-size:] if size > 0 else []
    n = len(points)
    mean = _mean(points)
    timeframe = f"last {n} {cfg.unit}"

    if n < 2:
        return TrendResult(
            direction=TrendDirection.STABLE,
            slope=0.0,
            confidence=0.0,
            data_points=n,
            timeframe=timeframe,
            mean=round(mean, 3),
            volatility=0.0,
        )

    slope, r_squared = _fit_line(points)
    direction = _classify(slope, mean, cfg)

    logger.debug(
        "trend over %d points: slope=%.4f r2=%.3f direction=%s",
        n, slope, r_squared, direction.value,
    )

    return TrendResult(
        direction=direction,
        slope=round(slope, 4),
        confidence=round(r_squared, 3),
        data_points=n,
        timeframe=timeframe,
        mean=round(mean, 3),
        volatility=round(_coefficient_of_variation(points, mean), 3),
    )


def compute_exercise_trend(
    session: Session,
    user_id: int,
    exercise_name: str,
    metric: TrendMetric = TrendMetric.WEIGHT,
    window: Optional[int] = None,
    as_of: Optional[datetime.date] = None,
) -> TrendResult:
    """Trend one per-session metric of an exercise.

    ``volume`` is weight × reps × sets (one set when not logged).
    Samples without an RPE are skipped for the ``rpe`` metric.
    """
    history = PerformanceRepository(session).get_by_user_and_exercise(
        user_id, exercise_name, end=as_of,
    )
    if metric == TrendMetric.WEIGHT:
        values = [s.weight for s in history]
    elif metric == TrendMetric.VOLUME:
        values = [s.weight * s.reps * (s.sets or 1) for s in history]
    else:
        values = [s.rpe for s in history if s.rpe is not None]
    return analyze_trend(values, window=window)
