"""
Readiness schemas.

Readiness combines the daily check-in into a single 0-100 score:

    overall = sum(weight_f × score_f) / sum(weight_f)

over the factors present on the latest check-in.  Every factor score is
normalised to 0-100 so that 100 is always the best state; soreness and
stress are inverted because a high raw rating means worse readiness.

Levels:
    excellent  >= 85
    good       >= 70
    fair       >= 55
    poor        < 55
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.trend import TrendDirection


class ReadinessLevel(str, Enum):
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


class ReadinessFactorName(str, Enum):
    SLEEP = "sleep"
    ENERGY = "energy"
    SORENESS = "soreness"
    STRESS = "stress"
    MOTIVATION = "motivation"


class ReadinessFactor(BaseModel):
    """One check-in factor and its contribution to the overall score."""

    name: ReadinessFactorName
    value: float = Field(
        ...,
        description="Raw value from the latest check-in",
    )
    score: float = Field(
        ..., ge=0.0, le=100.0,
        description="Normalised score, 100 = best",
    )
    trend: TrendDirection = Field(
        TrendDirection.STABLE,
        description="Trend of the normalised score over the lookback window",
    )
    weight: float = Field(
        ..., ge=0.0, le=1.0,
        description="Effective weight after renormalising missing factors",
    )


class ReadinessAnalysis(BaseModel):
    """Readiness for the latest check-in in the lookback window."""

    overall_score: float = Field(..., ge=0.0, le=100.0)
    level: ReadinessLevel
    factors: list[ReadinessFactor]
    baseline: float = Field(
        ..., ge=0.0, le=100.0,
        description="Mean score of the earlier check-ins in the window",
    )
    deviation: float = Field(
        ...,
        description="overall_score - baseline",
    )
    recommendations: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    data_points: int = Field(..., ge=1)
    metrics_date: datetime.date = Field(
        ...,
        description="Date of the check-in the score describes",
    )
    hrv_score: Optional[float] = Field(
        None,
        description="Reported HRV on that day, informational only",
    )
    timestamp: datetime.datetime


class ReadinessComparison(BaseModel):
    """Current readiness compared with a series of earlier scores."""

    direction: TrendDirection
    difference: float = Field(
        ...,
        description="Current score minus the mean of the earlier scores",
    )
    comparison: str
    significance: str = Field(
        ...,
        description="One of: low, medium, high",
    )
