"""Business logic services."""

from app.services.user_service import UserService
from app.services.performance_service import PerformanceService
from app.services.daily_metrics_service import DailyMetricsService
from app.services.progression_settings_service import ProgressionSettingsService

__all__ = [
    "UserService",
    "PerformanceService",
    "DailyMetricsService",
    "ProgressionSettingsService",
]
