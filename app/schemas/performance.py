"""
Performance sample schemas.

A performance sample is one logged set group: the load, the reps per set,
how many sets were done at that load, the RPE of the group and whether
every rep was completed.  The same base model is what the analytics
engine validates its input history against.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PerformanceSampleBase(BaseModel):
    """Fields shared by requests, responses and engine input."""

    exercise_name: str = Field(
        ..., min_length=1, max_length=100,
        description="Exercise name as logged, e.g. 'Back Squat'",
    )
    date: datetime.date = Field(
        ...,
        description="Training day this set group belongs to",
    )
    weight: float = Field(
        ..., ge=0.0, le=1000.0, allow_inf_nan=False,
        description="Load per rep (kg)",
    )
    reps: int = Field(
        ..., ge=1, le=100,
        description="Reps per set",
    )
    sets: Optional[int] = Field(
        None, ge=1, le=20,
        description="Number of sets done at this load",
    )
    rpe: Optional[float] = Field(
        None, ge=1.0, le=10.0, allow_inf_nan=False,
        description="Rate of perceived exertion, 1-10",
    )
    completed: bool = Field(
        True,
        description="False when at least one rep was missed",
    )

    class Config:
        from_attributes = True


# Request schemas
class PerformanceSampleCreate(PerformanceSampleBase):
    """Schema for logging a set group."""

    notes: Optional[str] = Field(None, max_length=500)


# Response schemas
class PerformanceSampleResponse(PerformanceSampleBase):
    """Schema for a logged set group in API responses."""

    id: int
    user_id: int
    notes: Optional[str] = None
    created_at: datetime.datetime


class ExerciseSummary(BaseModel):
    """Distinct exercise with its logging span."""

    exercise_name: str
    samples: int
    first_date: datetime.date
    last_date: datetime.date
