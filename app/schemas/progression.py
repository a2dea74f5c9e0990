"""
Progression schemas.

User progression settings and the suggestions the progression engine
derives from them.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.one_rm import OneRepMaxEstimate
from app.schemas.plateau import PlateauAnalysis


# ======================================================================
# Enums
# ======================================================================

class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Aggressiveness(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class TrainingGoal(str, Enum):
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    POWER = "power"
    ENDURANCE = "endurance"


class ExerciseCategory(str, Enum):
    SQUAT = "squat"
    BENCH = "bench"
    DEADLIFT = "deadlift"
    OVERHEAD_PRESS = "overhead_press"
    ACCESSORY = "accessory"


class ProgressionType(str, Enum):
    WEIGHT_INCREASE = "weight_increase"
    VOLUME_INCREASE = "volume_increase"
    DELOAD = "deload"
    PLATEAU_BREAK = "plateau_break"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Timeframe(str, Enum):
    NEXT_SESSION = "next_session"
    NEXT_WEEK = "next_week"


# ======================================================================
# Settings
# ======================================================================

class ProgressionSettingsBase(BaseModel):
    """Auto-progression preferences."""

    experience_level: ExperienceLevel = ExperienceLevel.INTERMEDIATE
    aggressiveness: Aggressiveness = Aggressiveness.MODERATE
    primary_goal: TrainingGoal = TrainingGoal.STRENGTH
    target_rpe: Optional[float] = Field(
        None, ge=5.0, le=10.0, allow_inf_nan=False,
        description="RPE ceiling for adding load; goal default when omitted",
    )
    enabled: bool = True

    class Config:
        from_attributes = True


class ProgressionSettingsUpdate(BaseModel):
    """Partial update of progression preferences."""

    experience_level: Optional[ExperienceLevel] = None
    aggressiveness: Optional[Aggressiveness] = None
    primary_goal: Optional[TrainingGoal] = None
    target_rpe: Optional[float] = Field(None, ge=5.0, le=10.0, allow_inf_nan=False)
    enabled: Optional[bool] = None


class ProgressionSettingsResponse(ProgressionSettingsBase):
    user_id: int
    created_at: datetime.datetime
    updated_at: datetime.datetime


# ======================================================================
# Suggestions
# ======================================================================

class LoadPrescription(BaseModel):
    """Weight, reps and sets for one set group."""

    weight: float = Field(..., ge=0.0)
    reps: int = Field(..., ge=1)
    sets: int = Field(..., ge=1)


class ProgressionSuggestion(BaseModel):
    """A concrete change to the next session of one exercise."""

    exercise_name: str
    type: ProgressionType
    current: LoadPrescription
    suggested: LoadPrescription
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    evidence: list[str] = Field(default_factory=list)
    priority: Priority
    timeframe: Timeframe


class ProgressionResponse(BaseModel):
    """Progression analysis for one exercise."""

    exercise_name: str
    category: ExerciseCategory
    suggestions: list[ProgressionSuggestion]
    one_rep_max: Optional[OneRepMaxEstimate] = None
    plateau: Optional[PlateauAnalysis] = None
