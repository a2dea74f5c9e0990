"""
Workout modification schemas.

Pre-workout adjustments to a planned session derived from today's
readiness, and the rest interval recommended between sets.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ModificationType(str, Enum):
    DELOAD = "deload"
    INTENSITY = "intensity"
    VOLUME = "volume"
    REST = "rest"
    EXERCISE = "exercise"


class ModificationSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"


class ExerciseType(str, Enum):
    COMPOUND = "compound"
    ISOLATION = "isolation"


class PlannedWorkout(BaseModel):
    """The session the athlete intends to do."""

    sets: int = Field(..., ge=1, le=20)
    reps: int = Field(..., ge=1, le=100)


class WorkoutPrescription(BaseModel):
    """Part of a workout before or after a modification.

    Only the fields the modification touches are set.
    """

    sets: Optional[int] = Field(None, ge=1)
    reps: Optional[int] = Field(None, ge=1)
    intensity: Optional[str] = Field(
        None,
        description="Share of the planned load, e.g. 75-85%",
    )
    rest_between_sets: Optional[str] = None
    warmup: Optional[str] = None
    mobility: Optional[str] = None
    session_type: Optional[str] = None
    focus: Optional[str] = None


class WorkoutModification(BaseModel):
    type: ModificationType
    severity: ModificationSeverity
    reason: str
    original: WorkoutPrescription
    suggested: WorkoutPrescription
    confidence: float = Field(..., ge=0.0, le=1.0)
    explanation: str


class WorkoutModificationsResponse(BaseModel):
    readiness_score: float = Field(..., ge=0.0, le=100.0)
    planned: PlannedWorkout
    modifications: list[WorkoutModification] = Field(default_factory=list)


class RestRecommendation(BaseModel):
    """Rest interval between sets, in seconds."""

    exercise_type: ExerciseType
    min_seconds: int = Field(..., ge=0)
    max_seconds: int = Field(..., ge=0)
    reasoning: str
