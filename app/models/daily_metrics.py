"""
Daily metrics database model.

Stores the morning check-in (sleep, energy, soreness, stress, motivation)
plus optional heart metrics. At most one row per user per date.
"""

import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class DailyMetrics(SQLModel, table=True):
    """Self-reported readiness check-in for a single calendar day."""

    __tablename__ = "daily_metrics"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_metrics_user_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    date: datetime.date = Field(nullable=False, index=True)

    # Subjective ratings (1-10)
    sleep_hours: float = Field(nullable=False)
    sleep_quality: Optional[int] = Field(default=None)
    energy_level: int = Field(nullable=False)
    soreness_level: int = Field(nullable=False)
    stress_level: int = Field(nullable=False)
    motivation_level: Optional[int] = Field(default=None)

    # Objective heart metrics
    hrv_score: Optional[float] = Field(default=None)
    resting_hr: Optional[int] = Field(default=None)

    notes: Optional[str] = Field(default=None, max_length=1000)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
