"""
Live coaching schemas.

A coaching suggestion is a tagged union on ``type``: each kind carries
only the fields it needs (a weight suggestion has the new load, a form
cue has the keyword that matched, and so on).  All kinds share the
message, confidence, urgency and reasoning fields.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from app.schemas.plateau import PlateauSeverity, PlateauType, StrategyType
from app.schemas.progression import ProgressionSuggestion


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WorkoutPhase(str, Enum):
    WARMUP = "warmup"
    MAIN = "main"
    COOLDOWN = "cooldown"


# ======================================================================
# Workout context (request)
# ======================================================================

class SetData(BaseModel):
    """Result of the set just performed."""

    weight: float = Field(..., ge=0.0, le=1000.0, allow_inf_nan=False)
    reps: int = Field(..., ge=0, le=100)
    rpe: float = Field(..., ge=1.0, le=10.0, allow_inf_nan=False)


class WorkoutContext(BaseModel):
    """Live state of the workout in progress."""

    exercise_name: str = Field(..., min_length=1, max_length=100)
    set_number: int = Field(..., ge=1, le=50)
    total_sets: Optional[int] = Field(None, ge=1, le=50)
    last_set: Optional[SetData] = None
    readiness_score: Optional[float] = Field(
        None, ge=0.0, le=10.0, allow_inf_nan=False,
        description="Pre-workout readiness on a 0-10 scale",
    )
    workout_progress: float = Field(
        0.0, ge=0.0, le=1.0, allow_inf_nan=False,
        description="Fraction of the planned workout completed",
    )
    phase: Optional[WorkoutPhase] = None
    target_rpe: Optional[float] = Field(
        None, ge=1.0, le=10.0, allow_inf_nan=False,
        description="Planned RPE for the working sets",
    )


# ======================================================================
# Suggestion variants
# ======================================================================

class _SuggestionBase(BaseModel):
    id: str
    message: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    urgency: Urgency
    reasoning: str


class WeightSuggestion(_SuggestionBase):
    type: Literal["weight"] = "weight"
    current_weight: float
    suggested_weight: float


class RestSuggestion(_SuggestionBase):
    type: Literal["rest"] = "rest"
    extra_rest_seconds: int = Field(..., ge=0)


class FormSuggestion(_SuggestionBase):
    type: Literal["form"] = "form"
    keyword: Optional[str] = Field(
        None,
        description="Exercise keyword the cue matched; None for phase cues",
    )
    phase: Optional[WorkoutPhase] = None


class MotivationSuggestion(_SuggestionBase):
    type: Literal["motivation"] = "motivation"
    trigger: str = Field(
        ...,
        description="One of: final_push, midpoint, effort",
    )


class RecoverySuggestion(_SuggestionBase):
    type: Literal["recovery"] = "recovery"
    phase: Optional[WorkoutPhase] = None


class IntensitySuggestion(_SuggestionBase):
    type: Literal["intensity"] = "intensity"
    direction: Literal["reduce", "increase"]
    actual_rpe: float
    target_rpe: Optional[float] = None


class ProgressionCoachingSuggestion(_SuggestionBase):
    type: Literal["progression"] = "progression"
    progression: ProgressionSuggestion


class PlateauCoachingSuggestion(_SuggestionBase):
    type: Literal["plateau"] = "plateau"
    plateau_type: PlateauType
    severity: PlateauSeverity
    strategies: list[StrategyType] = Field(default_factory=list)


CoachingSuggestion = Annotated[
    Union[
        WeightSuggestion,
        RestSuggestion,
        FormSuggestion,
        MotivationSuggestion,
        RecoverySuggestion,
        IntensitySuggestion,
        ProgressionCoachingSuggestion,
        PlateauCoachingSuggestion,
    ],
    Field(discriminator="type"),
]


class CoachingResponse(BaseModel):
    """Suggestions for the current set, most urgent first."""

    exercise_name: str
    set_number: int
    suggestions: list[CoachingSuggestion]
    cached: bool = Field(
        False,
        description="True when served from this workout's suggestion cache",
    )
