"""
One-rep-max schemas.

Estimates combine four rep-based formulas (Epley, Brzycki, Lombardi,
Mayhew) with weights that depend on the rep range, optionally corrected
for the RPE of the set.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DataValidation(BaseModel):
    """Whether a set is usable for a 1RM estimate, and how reliable it is."""

    is_valid: bool
    issues: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)


class CompositeEstimate(BaseModel):
    """Per-formula and blended estimates for a single set."""

    estimates: dict[str, float]
    composite: float = Field(..., ge=0.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    recommended_method: str


class OneRepMaxEstimate(BaseModel):
    """Best 1RM estimate for an exercise from its history."""

    exercise_name: str
    estimate: float = Field(..., ge=0.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    method: str = "composite"
    data_points: int = Field(..., ge=1)
    based_on_weight: float
    based_on_reps: int
    based_on_rpe: Optional[float] = None
    based_on_date: datetime.date
    formulas: dict[str, float] = Field(default_factory=dict)
