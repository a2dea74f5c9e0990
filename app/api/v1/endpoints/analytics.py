"""
Analytics endpoints: readiness and workout modifications, exercise trends,
plateaus, progression and insights.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from app.api.dependencies import get_current_user
from app.coach.insights import compute_insights
from app.coach.modifications import compute_workout_modifications
from app.coach.one_rm import compute_one_rep_max
from app.coach.plateau import analyze_rpe_pattern, compute_plateau
from app.coach.progression import compute_progression
from app.coach.readiness import compute_readiness, compute_readiness_comparison
from app.coach.trend import compute_exercise_trend
from app.db.repositories.performance import PerformanceRepository
from app.db.session import get_db
from app.models.user import User
from app.schemas.insight import InsightsResponse
from app.schemas.modification import PlannedWorkout, WorkoutModificationsResponse
from app.schemas.one_rm import OneRepMaxEstimate
from app.schemas.plateau import PlateauAnalysis, RPEPattern
from app.schemas.progression import ProgressionResponse
from app.schemas.readiness import ReadinessAnalysis, ReadinessComparison
from app.schemas.trend import TrendMetric, TrendResult

router = APIRouter()


@router.get(
    "/readiness",
    summary="Get today's readiness from the daily check-ins.",
    response_model=ReadinessAnalysis,
)
def get_readiness(
    as_of: Optional[datetime.date] = Query(
        None, description="Reference date (defaults to today)"
    ),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ref_date = as_of or datetime.date.today()
    analysis = compute_readiness(db, user.id, ref_date)
    if analysis is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No check-ins in the readiness lookback window",
        )
    return analysis


@router.get(
    "/readiness/compare",
    summary="Compare today's readiness with the previous week.",
    response_model=ReadinessComparison,
)
def get_readiness_comparison(
    as_of: Optional[datetime.date] = Query(
        None, description="Reference date (defaults to today)"
    ),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ref_date = as_of or datetime.date.today()
    comparison = compute_readiness_comparison(db, user.id, ref_date)
    if comparison is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No check-ins in the readiness lookback window",
        )
    return comparison


@router.get(
    "/readiness/modifications",
    summary="Adjust a planned workout to today's readiness.",
    response_model=WorkoutModificationsResponse,
)
def get_workout_modifications(
    sets: int = Query(..., ge=1, le=20, description="Planned sets"),
    reps: int = Query(..., ge=1, le=100, description="Planned reps per set"),
    as_of: Optional[datetime.date] = Query(
        None, description="Reference date (defaults to today)"
    ),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ref_date = as_of or datetime.date.today()
    planned = PlannedWorkout(sets=sets, reps=reps)
    result = compute_workout_modifications(db, user.id, planned, ref_date)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No check-ins in the readiness lookback window",
        )
    return result


@router.get(
    "/exercises/{exercise_name}/trend",
    summary="Trend a per-session metric of one exercise.",
    response_model=TrendResult,
)
def get_exercise_trend(
    exercise_name: str,
    metric: TrendMetric = Query(TrendMetric.WEIGHT, description="Series to trend"),
    window: int = Query(12, ge=2, le=100, description="Trailing sessions to fit"),
    as_of: Optional[datetime.date] = Query(None, description="Ignore sessions after this date"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return compute_exercise_trend(db, user.id, exercise_name, metric, window, as_of)


@router.get(
    "/exercises/{exercise_name}/plateau",
    summary="Detect a plateau on one exercise.",
    response_model=PlateauAnalysis,
)
def get_plateau(
    exercise_name: str,
    as_of: Optional[datetime.date] = Query(None, description="Reference date (defaults to today)"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ref_date = as_of or datetime.date.today()
    return compute_plateau(db, user.id, exercise_name, ref_date)


@router.get(
    "/exercises/{exercise_name}/rpe-pattern",
    summary="Analyse recent RPE against a planned RPE.",
    response_model=RPEPattern,
)
def get_rpe_pattern(
    exercise_name: str,
    planned_rpe: float = Query(8.0, ge=1.0, le=10.0, description="Planned working RPE"),
    as_of: Optional[datetime.date] = Query(None, description="Ignore sessions after this date"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    history = PerformanceRepository(db).get_by_user_and_exercise(user.id, exercise_name, end=as_of)
    return analyze_rpe_pattern(exercise_name, history, planned_rpe)


@router.get(
    "/exercises/{exercise_name}/one-rep-max",
    summary="Estimate the one-rep max of one exercise.",
    response_model=OneRepMaxEstimate,
)
def get_one_rep_max(
    exercise_name: str,
    as_of: Optional[datetime.date] = Query(None, description="Ignore sessions after this date"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    estimate = compute_one_rep_max(db, user.id, exercise_name, as_of)
    if estimate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No usable sets logged for {exercise_name}",
        )
    return estimate


@router.get(
    "/exercises/{exercise_name}/progression",
    summary="Suggest changes for the next session of one exercise.",
    response_model=ProgressionResponse,
)
def get_progression(
    exercise_name: str,
    as_of: Optional[datetime.date] = Query(None, description="Reference date (defaults to today)"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ref_date = as_of or datetime.date.today()
    return compute_progression(db, user.id, exercise_name, ref_date)


@router.get(
    "/insights",
    summary="Get ranked between-workout insights.",
    response_model=InsightsResponse,
)
def get_insights(
    as_of: Optional[datetime.date] = Query(None, description="Reference date (defaults to today)"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ref_date = as_of or datetime.date.today()
    return compute_insights(db, user.id, ref_date)
