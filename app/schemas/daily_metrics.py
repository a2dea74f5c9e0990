"""
Daily metrics schemas.

Pydantic models for the morning check-in.  Ratings are 1-10; for
soreness and stress a higher number means a worse state.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field


# Shared properties
class DailyMetricsBase(BaseModel):
    """Check-in values shared by requests, responses and engine input."""

    sleep_hours: float = Field(
        ..., ge=0.0, le=24.0, allow_inf_nan=False,
        description="Hours slept last night",
    )
    sleep_quality: Optional[int] = Field(
        None, ge=1, le=10,
        description="Subjective sleep quality (10 = best)",
    )
    energy_level: int = Field(
        ..., ge=1, le=10,
        description="Energy (10 = best)",
    )
    soreness_level: int = Field(
        ..., ge=1, le=10,
        description="Muscle soreness (10 = most sore)",
    )
    stress_level: int = Field(
        ..., ge=1, le=10,
        description="Life stress (10 = most stressed)",
    )
    motivation_level: Optional[int] = Field(
        None, ge=1, le=10,
        description="Motivation to train (10 = best)",
    )
    hrv_score: Optional[float] = Field(
        None, ge=1.0, le=300.0, allow_inf_nan=False,
        description="Heart rate variability (ms)",
    )
    resting_hr: Optional[int] = Field(
        None, ge=25, le=150,
        description="Morning resting heart rate (bpm)",
    )
    notes: Optional[str] = Field(None, max_length=1000)

    class Config:
        from_attributes = True


# Request schemas
class DailyMetricsCreate(DailyMetricsBase):
    """Schema for the check-in body; the date comes from the path."""
    pass


class DailyMetricsRecord(DailyMetricsBase):
    """A dated check-in, as consumed by the readiness scorer."""

    date: datetime.date


# Response schemas
class DailyMetricsResponse(DailyMetricsRecord):
    """Schema for a check-in in API responses."""

    id: int
    user_id: int
    created_at: datetime.datetime
    updated_at: datetime.datetime
