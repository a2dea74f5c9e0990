"""
Daily metrics endpoints.

Morning check-in CRUD with date-based upsert.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from app.api.dependencies import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.daily_metrics import DailyMetricsCreate, DailyMetricsResponse
from app.services.daily_metrics_service import DailyMetricsService

router = APIRouter()


@router.put("/{date}", summary="Create or replace the check-in for a date.", response_model=DailyMetricsResponse, )
def upsert_metrics(date: datetime.date, data: DailyMetricsCreate, response: Response, db: Session = Depends(get_db),
                   user: User = Depends(get_current_user), ):
    """Upsert: creates the check-in if it doesn't exist, replaces it if it does."""
    entry, created = DailyMetricsService(db).upsert(user.id, date, data)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return entry


@router.get("", summary="List check-ins with optional filters.", response_model=list[DailyMetricsResponse], )
def list_metrics(start: Optional[datetime.date] = Query(None, description="Range start (inclusive)"),
                 end: Optional[datetime.date] = Query(None, description="Range end (inclusive)"),
                 skip: int = Query(0, ge=0, description="Records to skip"),
                 limit: int = Query(100, ge=1, le=500, description="Max records to return"),
                 db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    """
    - start + end: check-ins in range, oldest first
    - no filters: paginated list (most recent first)
    """
    service = DailyMetricsService(db)
    if start and end:
        return service.get_range(user.id, start, end)
    return service.get_all(user.id, skip, limit)


@router.get("/{date}", summary="Get the check-in for a specific date.", response_model=DailyMetricsResponse, )
def get_metrics(date: datetime.date, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return DailyMetricsService(db).get_by_date(user.id, date)


@router.delete("/{date}", summary="Delete the check-in for a specific date.", status_code=status.HTTP_204_NO_CONTENT, )
def delete_metrics(date: datetime.date, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    DailyMetricsService(db).delete_by_date(user.id, date)
