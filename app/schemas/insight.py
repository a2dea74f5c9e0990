"""
Between-workout insight schemas.

Insights are ranked by a score combining their priority, their category
and their confidence; only the top few are returned.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.progression import Priority
from app.schemas.readiness import ReadinessAnalysis


class InsightCategory(str, Enum):
    WARNING = "warning"
    SUGGESTION = "suggestion"
    CELEBRATION = "celebration"
    INFORMATION = "information"


class Insight(BaseModel):
    """A human-readable observation with suggested actions."""

    id: str
    category: InsightCategory
    priority: Priority
    title: str
    message: str
    action_items: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    source: str = Field(
        ...,
        description="One of: readiness, recovery, plateau, progression",
    )
    exercise_name: Optional[str] = None


class InsightsResponse(BaseModel):
    generated_at: datetime.datetime
    readiness: Optional[ReadinessAnalysis] = None
    insights: list[Insight]
