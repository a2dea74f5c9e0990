"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from app.models.user import User  # noqa: F401
from app.models.performance import PerformanceSample  # noqa: F401
from app.models.daily_metrics import DailyMetrics  # noqa: F401
from app.models.progression_settings import ProgressionSettings  # noqa: F401
