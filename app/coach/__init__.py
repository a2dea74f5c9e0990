"""Coaching engine: analytics, progression, live coaching and insights."""

from app.coach.coaching import CoachingConfig, CoachingSession, CoachingSessionRegistry, generate_suggestions
from app.coach.insights import InsightConfig, compute_insights, generate_insights
from app.coach.modifications import (
    ModificationConfig,
    calculate_optimal_rest,
    classify_exercise_type,
    compute_workout_modifications,
    suggest_workout_modifications,
)
from app.coach.one_rm import calculate_composite, compute_one_rep_max, estimate_one_rep_max
from app.coach.plateau import PlateauConfig, analyze_plateau, analyze_rpe_pattern, compute_plateau
from app.coach.progression import ProgressionConfig, compute_progression, generate_progression
from app.coach.readiness import ReadinessConfig, analyze_readiness, compare_readiness, compute_readiness
from app.coach.trend import TrendConfig, analyze_trend

__all__ = [
    "CoachingConfig",
    "CoachingSession",
    "CoachingSessionRegistry",
    "generate_suggestions",
    "InsightConfig",
    "compute_insights",
    "generate_insights",
    "ModificationConfig",
    "calculate_optimal_rest",
    "classify_exercise_type",
    "compute_workout_modifications",
    "suggest_workout_modifications",
    "calculate_composite",
    "compute_one_rep_max",
    "estimate_one_rep_max",
    "PlateauConfig",
    "analyze_plateau",
    "analyze_rpe_pattern",
    "compute_plateau",
    "ProgressionConfig",
    "compute_progression",
    "generate_progression",
    "ReadinessConfig",
    "analyze_readiness",
    "compare_readiness",
    "compute_readiness",
    "TrendConfig",
    "analyze_trend",
]
