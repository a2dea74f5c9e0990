"""
One-rep-max estimation from submaximal sets.

Formulas (w = weight, r = reps, all return w when r == 1):

    Epley      w × (1 + r / 30)
    Brzycki    w × 36 / (37 - r)              (w when r >= 37)
    Lombardi   w × r^0.10
    Mayhew     100 w / (52.2 + 41.9 e^(-0.055 r))

The composite is a weighted mean whose weights depend on the rep range
(Brzycki and Epley dominate low reps, Lombardi high reps).  When the
set's RPE is known every formula is scaled by ``1 / pct(rpe)`` using the
RPE → %1RM table below.  Confidence is agreement between formulas:

    confidence = clamp(1 - 2 × CV, 0, 1)

where CV is the coefficient of variation of the four estimates.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Any, Iterable, Optional

from pydantic import TypeAdapter
from sqlmodel import Session

from app.db.repositories.performance import PerformanceRepository
from app.schemas.one_rm import CompositeEstimate, DataValidation, OneRepMaxEstimate
from app.schemas.performance import PerformanceSampleBase

logger = logging.getLogger(__name__)

# (max reps inclusive, formula weights), checked top-down.
_REP_RANGE_WEIGHTS: list[tuple[int, dict[str, float]]] = [
    (3, {"epley": 0.40, "brzycki": 0.35, "lombardi": 0.10, "mayhew": 0.15}),
    (6, {"epley": 0.35, "brzycki": 0.30, "lombardi": 0.15, "mayhew": 0.20}),
    (10, {"epley": 0.25, "brzycki": 0.25, "lombardi": 0.25, "mayhew": 0.25}),
]
_HIGH_REP_WEIGHTS: dict[str, float] = {
    "epley": 0.20, "brzycki": 0.15, "lombardi": 0.40, "mayhew": 0.25,
}

# RPE → fraction of 1RM lifted for the reps performed.
_RPE_PERCENT: dict[float, float] = {
    10.0: 1.0,
    9.5: 0.975,
    9.0: 0.95,
    8.5: 0.925,
    8.0: 0.9,
    7.5: 0.875,
    7.0: 0.85,
    6.5: 0.825,
    6.0: 0.8,
    5.0: 0.75,
}
_DEFAULT_RPE_PERCENT = 0.8

_MAX_REPS = 50

_SAMPLES_ADAPTER = TypeAdapter(list[PerformanceSampleBase])


# ======================================================================
# Formulas
# ======================================================================


def epley(weight: float, reps: int) -> float:
    if reps == 1:
        return weight
    return weight * (1 + reps / 30)


def brzycki(weight: float, reps: int) -> float:
    if reps == 1 or reps >= 37:
        return weight
    return weight * 36 / (37 - reps)


def lombardi(weight: float, reps: int) -> float:
    if reps == 1:
        return weight
    return weight * reps ** 0.10


def mayhew(weight: float, reps: int) -> float:
    if reps == 1:
        return weight
    return 100 * weight / (52.2 + 41.9 * math.exp(-0.055 * reps))


_FORMULAS = {
    "epley": epley,
    "brzycki": brzycki,
    "lombardi": lombardi,
    "mayhew": mayhew,
}


# ======================================================================
# Composite
# ======================================================================


def _formula_weights(reps: int) -> dict[str, float]:
    for max_reps, weights in _REP_RANGE_WEIGHTS:
        if reps <= max_reps:
            return weights
    return _HIGH_REP_WEIGHTS


def _rpe_factor(rpe: float) -> float:
    """Multiplier that lifts a submaximal estimate to a true max."""
    key = round(rpe * 2) / 2
    return 1.0 / _RPE_PERCENT.get(key, _DEFAULT_RPE_PERCENT)


def _recommended_method(reps: int) -> str:
    if reps <= 3:
        return "brzycki"
    if reps > 10:
        return "lombardi"
    if 6 <= reps <= 8:
        return "mayhew"
    return "epley"


def calculate_composite(
    weight: float, reps: int, rpe: Optional[float] = None,
) -> CompositeEstimate:
    """Estimate a 1RM from one set with every formula and blend them."""
    estimates = {name: fn(weight, reps) for name, fn in _FORMULAS.items()}
    if rpe is not None:
        factor = _rpe_factor(rpe)
        estimates = {name: value * factor for name, value in estimates.items()}

    weights = _formula_weights(reps)
    composite = sum(estimates[name] * weights[name] for name in estimates)

    values = list(estimates.values())
    mean = sum(values) / len(values)
    if mean > 0:
        variance = sum((v - mean) ** 2 for v in values) / len(values)
        cv = math.sqrt(variance) / mean
        confidence = max(0.0, min(1.0, 1 - 2 * cv))
    else:
        confidence = 0.0

    return CompositeEstimate(
        estimates={name: round(value, 2) for name, value in estimates.items()},
        composite=round(composite, 2),
        confidence=round(confidence, 3),
        recommended_method=_recommended_method(reps),
    )


def validate_set(
    weight: float, reps: int, rpe: Optional[float] = None,
) -> DataValidation:
    """Check whether a set is usable for a 1RM estimate.

    Hard failures (non-positive weight, reps outside 1-50) make the set
    invalid; accuracy warnings only lower the confidence.
    """
    if weight <= 0:
        return DataValidation(is_valid=False, issues=["Weight must be positive"], confidence=0.0)
    if reps <= 0 or reps > _MAX_REPS:
        return DataValidation(
            is_valid=False, issues=[f"Reps must be between 1 and {_MAX_REPS}"], confidence=0.0,
        )

    issues: list[str] = []
    confidence = 1.0

    if rpe is not None and not 1 <= rpe <= 10:
        issues.append("RPE must be between 1 and 10")
        confidence *= 0.8
    if reps > 15:
        issues.append("1RM estimates are less accurate above 15 reps")
        confidence *= 0.7
    if reps == 1:
        issues.append("A single may not reflect a true max on the day")
        confidence *= 0.9
    if rpe is not None and rpe < 6:
        issues.append("Low RPE suggests a submaximal effort")
        confidence *= 0.8
    if rpe is not None and rpe > 9.5 and reps > 5:
        issues.append("Very high RPE on a high-rep set may mean form breakdown")
        confidence *= 0.8

    return DataValidation(is_valid=True, issues=issues, confidence=round(confidence, 3))


# ======================================================================
# Estimate from history
# ======================================================================


def _set_strength(sample: PerformanceSampleBase) -> float:
    rpe_factor = sample.rpe / 10 if sample.rpe is not None else 0.8
    return sample.weight * (1 + sample.reps / 30) * rpe_factor


def estimate_one_rep_max(
    exercise_name: str, history: Iterable[Any],
) -> Optional[OneRepMaxEstimate]:
    """Estimate a 1RM from the strongest valid set of a history.

    Returns:
        :class:`OneRepMaxEstimate`, or ``None`` when no set is usable.
    """
    samples = _SAMPLES_ADAPTER.validate_python(list(history), from_attributes=True)
    valid = [
        s for s in samples if validate_set(s.weight, s.reps, s.rpe).is_valid
    ]
    if not valid:
        return None

    best = max(valid, key=_set_strength)
    composite = calculate_composite(best.weight, best.reps, best.rpe)
    validation = validate_set(best.weight, best.reps, best.rpe)

    logger.debug(
        "1RM %s: %.1f from %.1f x %d", exercise_name, composite.composite,
        best.weight, best.reps,
    )

    return OneRepMaxEstimate(
        exercise_name=exercise_name,
        estimate=round(composite.composite, 1),
        confidence=round(composite.confidence * validation.confidence, 3),
        data_points=len(samples),
        based_on_weight=best.weight,
        based_on_reps=best.reps,
        based_on_rpe=best.rpe,
        based_on_date=best.date,
        formulas=composite.estimates,
    )


def compute_one_rep_max(
    session: Session, user_id: int, exercise_name: str,
    as_of: Optional[datetime.date] = None,
) -> Optional[OneRepMaxEstimate]:
    """Estimate a 1RM from a user's history of one exercise, up to ``as_of`` when given."""
    history = PerformanceRepository(session).get_by_user_and_exercise(
        user_id, exercise_name, end=as_of,
    )
    return estimate_one_rep_max(exercise_name, history)
