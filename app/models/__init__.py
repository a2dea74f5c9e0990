"""SQLModel database models."""

from app.models.user import User
from app.models.performance import PerformanceSample
from app.models.daily_metrics import DailyMetrics
from app.models.progression_settings import ProgressionSettings

__all__ = [
    "User",
    "PerformanceSample",
    "DailyMetrics",
    "ProgressionSettings",
]
