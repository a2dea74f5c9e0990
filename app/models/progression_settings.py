"""
Progression settings model.

Per-user auto-progression preferences: experience level, aggressiveness,
primary goal and the RPE ceiling used before adding load.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class ProgressionSettings(SQLModel, table=True):
    """A user's auto-progression preferences. One row per user."""

    __tablename__ = "progression_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, unique=True, index=True)

    experience_level: str = Field(default="intermediate", max_length=20)
    aggressiveness: str = Field(default="moderate", max_length=20)
    primary_goal: str = Field(default="strength", max_length=20)

    # Overrides the goal default when set
    target_rpe: Optional[float] = Field(default=None)

    enabled: bool = Field(default=True)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
