"""
Daily metrics service.

Business logic for the morning check-in, one entry per user per date.
"""

import datetime
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from app.db.repositories.daily_metrics import DailyMetricsRepository
from app.models.daily_metrics import DailyMetrics
from app.schemas.daily_metrics import DailyMetricsCreate, DailyMetricsResponse

logger = logging.getLogger(__name__)


class DailyMetricsService:
    """Service for daily check-in business logic."""

    def __init__(self, session: Session):
        self.repository = DailyMetricsRepository(session)

    def upsert(
        self, user_id: int, date: datetime.date, data: DailyMetricsCreate,
    ) -> tuple[DailyMetricsResponse, bool]:
        """Create or replace the check-in for the given date.

        Returns:
            Tuple of (response, created) where created is True if new entry.
        """
        existing = self.repository.get_by_user_and_date(user_id, date)

        if existing:
            for key, value in data.model_dump().items():
                setattr(existing, key, value)
            existing.updated_at = datetime.datetime.utcnow()
            entry = self.repository.update(existing)
            return DailyMetricsResponse.model_validate(entry), False

        entry = self.repository.create(DailyMetrics(user_id=user_id, date=date, **data.model_dump()))
        logger.info("check-in created user=%s date=%s", user_id, date)
        return DailyMetricsResponse.model_validate(entry), True

    def get_by_date(self, user_id: int, date: datetime.date) -> DailyMetricsResponse:
        return DailyMetricsResponse.model_validate(self._get_by_date(user_id, date))

    def get_range(
        self, user_id: int, start: datetime.date, end: datetime.date,
    ) -> list[DailyMetricsResponse]:
        entries = self.repository.get_by_user_date_range(user_id, start, end)
        return [DailyMetricsResponse.model_validate(e) for e in entries]

    def get_all(
        self, user_id: int, skip: int = 0, limit: int = 100,
    ) -> list[DailyMetricsResponse]:
        entries = self.repository.get_all_by_user(user_id, skip, limit)
        return [DailyMetricsResponse.model_validate(e) for e in entries]

    def delete_by_date(self, user_id: int, date: datetime.date) -> None:
        entry = self._get_by_date(user_id, date)
        self.repository.delete(entry.id)

    def _get_by_date(self, user_id: int, date: datetime.date) -> DailyMetrics:
        entry = self.repository.get_by_user_and_date(user_id, date)
        if not entry:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No check-in for {date}",
            )
        return entry
