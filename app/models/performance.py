"""
Performance sample database model.

One row per logged set group: exercise, load, reps, sets and RPE.
Rows are insert-only; corrections are made by deleting and re-logging.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class PerformanceSample(SQLModel, table=True):
    """A logged set group for one exercise on one day."""

    __tablename__ = "performance_samples"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)

    exercise_name: str = Field(nullable=False, max_length=100, index=True)
    date: datetime.date = Field(nullable=False, index=True)

    weight: float = Field(nullable=False)
    reps: int = Field(nullable=False)
    sets: Optional[int] = Field(default=None)
    rpe: Optional[float] = Field(default=None)
    completed: bool = Field(default=True)

    notes: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
