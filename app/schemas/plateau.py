"""
Plateau schemas.

A plateau analysis describes stagnation on one exercise: what kind of
stagnation it is, how long it has lasted (in sessions), how severe it
is and which remediation strategies to try, most urgent first.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.trend import TrendDirection, TrendResult


class PlateauType(str, Enum):
    WEIGHT_STALL = "weight_stall"
    REP_STALL = "rep_stall"
    VOLUME_DECLINE = "volume_decline"
    RPE_INFLATION = "rpe_inflation"


class PlateauSeverity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class StrategyType(str, Enum):
    """Remediation strategies a recommendation can prescribe."""
    DELOAD = "deload"
    VOLUME_ADJUSTMENT = "volume_adjustment"
    TECHNIQUE_FOCUS = "technique_focus"
    FREQUENCY_CHANGE = "frequency_change"
    EXERCISE_VARIATION = "exercise_variation"


class PlateauRecommendation(BaseModel):
    """A remediation strategy for a detected plateau."""

    strategy: StrategyType
    description: str
    implementation: str = Field(
        ...,
        description="Concrete instructions for the next sessions",
    )
    expected_duration_weeks: int = Field(..., ge=1)


class PlateauAnalysis(BaseModel):
    """Stagnation analysis for a single exercise."""

    exercise_name: str
    is_detected: bool
    duration: int = Field(
        0, ge=0,
        description="Consecutive recent sessions without meaningful load increase",
    )
    severity: Optional[PlateauSeverity] = Field(
        None,
        description="None when no plateau is detected",
    )
    type: Optional[PlateauType] = Field(
        None,
        description="None when no plateau is detected",
    )
    confidence: float = Field(..., ge=0.0, le=1.0)
    recommendations: list[PlateauRecommendation] = Field(default_factory=list)
    next_review_date: datetime.date
    sessions_analyzed: int = Field(0, ge=0)
    weight_trend: Optional[TrendResult] = None
    volume_trend: Optional[TrendResult] = None
    rpe_trend: Optional[TrendResult] = None


class RPEPatternAnalysis(BaseModel):
    """Flags derived from recent RPE against the planned RPE."""

    overreaching: bool
    underperforming: bool
    optimal_load: bool
    confidence: float = Field(..., ge=0.0, le=1.0)


class RPEPattern(BaseModel):
    """Autoregulation view of recent RPE for one exercise."""

    exercise_name: str
    average_rpe: float = Field(..., ge=0.0, le=10.0)
    trend: TrendDirection
    volatile: bool
    consistency: float = Field(
        ..., ge=0.0, le=1.0,
        description="1 - mean |actual - planned| / 10",
    )
    sessions_analyzed: int = Field(0, ge=0)
    analysis: RPEPatternAnalysis
    recommendations: list[str] = Field(default_factory=list)
