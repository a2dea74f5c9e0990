"""Database repositories."""

from app.db.repositories.user import UserRepository
from app.db.repositories.performance import PerformanceRepository
from app.db.repositories.daily_metrics import DailyMetricsRepository
from app.db.repositories.progression_settings import ProgressionSettingsRepository

__all__ = [
    "UserRepository",
    "PerformanceRepository",
    "DailyMetricsRepository",
    "ProgressionSettingsRepository",
]
