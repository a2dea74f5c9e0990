"""
Performance endpoints.

Logging of set groups and listing of the training history.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.api.dependencies import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.performance import ExerciseSummary, PerformanceSampleCreate, PerformanceSampleResponse
from app.services.performance_service import PerformanceService

router = APIRouter()


@router.post("", summary="Log a set group.", response_model=PerformanceSampleResponse,
             status_code=status.HTTP_201_CREATED, )
def log_performance(data: PerformanceSampleCreate, db: Session = Depends(get_db),
                    user: User = Depends(get_current_user), ):
    return PerformanceService(db).log(user.id, data)


@router.get("", summary="List logged set groups with optional filters.",
            response_model=list[PerformanceSampleResponse], )
def list_performance(exercise: Optional[str] = Query(None, description="Exercise name (case-insensitive)"),
                     start: Optional[datetime.date] = Query(None, description="Range start (inclusive)"),
                     end: Optional[datetime.date] = Query(None, description="Range end (inclusive)"),
                     skip: int = Query(0, ge=0, description="Records to skip"),
                     limit: int = Query(100, ge=1, le=500, description="Max records to return"),
                     db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    """
    Filter precedence:
    - exercise: full history of that exercise (optionally bounded by start/end), oldest first
    - start + end: set groups in range, oldest first
    - no filters: paginated list (most recent first)
    """
    return PerformanceService(db).list_samples(user.id, exercise, start, end, skip, limit)


@router.get("/exercises", summary="List distinct exercises with their logging span.",
            response_model=list[ExerciseSummary], )
def list_exercises(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return PerformanceService(db).list_exercises(user.id)


@router.get("/{sample_id}", summary="Get one logged set group.", response_model=PerformanceSampleResponse, )
def get_performance(sample_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return PerformanceService(db).get_by_id(user.id, sample_id)


@router.delete("/{sample_id}", summary="Delete one logged set group.", status_code=status.HTTP_204_NO_CONTENT, )
def delete_performance(sample_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    PerformanceService(db).delete(user.id, sample_id)
