"""
Daily metrics repository.

Handles database operations for DailyMetrics model.
"""

import datetime
from typing import Optional

from sqlmodel import Session, select

from app.models.daily_metrics import DailyMetrics


class DailyMetricsRepository:
    """Repository for DailyMetrics database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: DailyMetrics) -> DailyMetrics:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_by_id(self, entry_id: int) -> Optional[DailyMetrics]:
        return self.session.get(DailyMetrics, entry_id)

    def get_by_user_and_date(
        self, user_id: int, date: datetime.date,
    ) -> Optional[DailyMetrics]:
        """Get the check-in of a user on a specific date."""
        statement = select(DailyMetrics).where(
            DailyMetrics.user_id == user_id,
            DailyMetrics.date == date,
        )
        return self.session.exec(statement).first()

    def get_by_user_date_range(
        self, user_id: int, start: datetime.date, end: datetime.date,
    ) -> list[DailyMetrics]:
        """Get check-ins for a user within a date range (inclusive), oldest first."""
        statement = (
            select(DailyMetrics)
            .where(
                DailyMetrics.user_id == user_id,
                DailyMetrics.date >= start,
                DailyMetrics.date <= end,
            )
            .order_by(DailyMetrics.date)
        )
        return list(self.session.exec(statement).all())

    def get_all_by_user(
        self, user_id: int, skip: int = 0, limit: int = 100,
    ) -> list[DailyMetrics]:
        """Get all check-ins for a user with pagination, most recent first."""
        statement = (
            select(DailyMetrics)
            .where(DailyMetrics.user_id == user_id)
            .order_by(DailyMetrics.date.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def update(self, entry: DailyMetrics) -> DailyMetrics:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def delete(self, entry_id: int) -> bool:
        entry = self.get_by_id(entry_id)
        if entry:
            self.session.delete(entry)
            self.session.commit()
            return True
        return False
