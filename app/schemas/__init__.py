"""Pydantic schemas for request/response validation."""

from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.schemas.performance import (
    ExerciseSummary,
    PerformanceSampleCreate,
    PerformanceSampleResponse,
)
from app.schemas.daily_metrics import (
    DailyMetricsCreate,
    DailyMetricsRecord,
    DailyMetricsResponse,
)
from app.schemas.trend import TrendDirection, TrendMetric, TrendResult
from app.schemas.readiness import (
    ReadinessAnalysis,
    ReadinessComparison,
    ReadinessFactorName,
    ReadinessLevel,
)
from app.schemas.plateau import PlateauAnalysis, RPEPattern
from app.schemas.one_rm import CompositeEstimate, OneRepMaxEstimate
from app.schemas.progression import (
    ProgressionResponse,
    ProgressionSettingsResponse,
    ProgressionSettingsUpdate,
    ProgressionSuggestion,
)
from app.schemas.coaching import CoachingResponse, WorkoutContext
from app.schemas.insight import Insight, InsightsResponse
from app.schemas.modification import (
    PlannedWorkout,
    RestRecommendation,
    WorkoutModification,
    WorkoutModificationsResponse,
)

__all__ = [
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    "ExerciseSummary",
    "PerformanceSampleCreate",
    "PerformanceSampleResponse",
    "DailyMetricsCreate",
    "DailyMetricsRecord",
    "DailyMetricsResponse",
    "TrendDirection",
    "TrendMetric",
    "TrendResult",
    "ReadinessAnalysis",
    "ReadinessComparison",
    "ReadinessFactorName",
    "ReadinessLevel",
    "PlateauAnalysis",
    "RPEPattern",
    "CompositeEstimate",
    "OneRepMaxEstimate",
    "ProgressionResponse",
    "ProgressionSettingsResponse",
    "ProgressionSettingsUpdate",
    "ProgressionSuggestion",
    "CoachingResponse",
    "WorkoutContext",
    "Insight",
    "InsightsResponse",
    "PlannedWorkout",
    "RestRecommendation",
    "WorkoutModification",
    "WorkoutModificationsResponse",
]
