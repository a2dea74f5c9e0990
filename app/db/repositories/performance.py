"""
Performance sample repository.

Handles database operations for PerformanceSample model.
"""

import datetime
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.performance import PerformanceSample


class PerformanceRepository:
    """Repository for PerformanceSample database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, sample: PerformanceSample) -> PerformanceSample:
        self.session.add(sample)
        self.session.commit()
        self.session.refresh(sample)
        return sample

    def get_by_id(self, sample_id: int) -> Optional[PerformanceSample]:
        return self.session.get(PerformanceSample, sample_id)

    def get_by_user_and_exercise(
        self,
        user_id: int,
        exercise_name: str,
        end: Optional[datetime.date] = None,
        limit: Optional[int] = None,
    ) -> list[PerformanceSample]:
        """Get samples for one exercise, oldest first.

        The exercise name is matched case-insensitively.  With ``limit``
        only the most recent ``limit`` samples are returned (still oldest
        first).
        """
        statement = select(PerformanceSample).where(
            PerformanceSample.user_id == user_id,
            func.lower(PerformanceSample.exercise_name) == exercise_name.strip().lower(),
        )
        if end is not None:
            statement = statement.where(PerformanceSample.date <= end)

        if limit is not None:
            statement = statement.order_by(
                PerformanceSample.date.desc(), PerformanceSample.id.desc(),
            ).limit(limit)
            return list(reversed(self.session.exec(statement).all()))

        statement = statement.order_by(PerformanceSample.date, PerformanceSample.id)
        return list(self.session.exec(statement).all())

    def get_by_user_date_range(
        self, user_id: int, start: datetime.date, end: datetime.date,
    ) -> list[PerformanceSample]:
        """Get all samples for a user within a date range (inclusive)."""
        statement = (
            select(PerformanceSample)
            .where(
                PerformanceSample.user_id == user_id,
                PerformanceSample.date >= start,
                PerformanceSample.date <= end,
            )
            .order_by(PerformanceSample.date, PerformanceSample.id)
        )
        return list(self.session.exec(statement).all())

    def get_all_by_user(
        self, user_id: int, skip: int = 0, limit: int = 100,
    ) -> list[PerformanceSample]:
        """Get all samples for a user with pagination, most recent first."""
        statement = (
            select(PerformanceSample)
            .where(PerformanceSample.user_id == user_id)
            .order_by(PerformanceSample.date.desc(), PerformanceSample.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def summarize_exercises(
        self, user_id: int,
    ) -> list[tuple[str, int, datetime.date, datetime.date]]:
        """Distinct exercises with sample count and first/last date.

        Names are grouped case-insensitively, matching the history reads;
        one spelling per group is reported.

        Returns:
            ``(exercise_name, count, first_date, last_date)`` tuples,
            most recently trained first.
        """
        statement = (
            select(
                func.min(PerformanceSample.exercise_name),
                func.count(PerformanceSample.id),
                func.min(PerformanceSample.date),
                func.max(PerformanceSample.date),
            )
            .where(PerformanceSample.user_id == user_id)
            .group_by(func.lower(PerformanceSample.exercise_name))
            .order_by(func.max(PerformanceSample.date).desc())
        )
        return [tuple(row) for row in self.session.exec(statement).all()]

    def delete(self, sample_id: int) -> bool:
        sample = self.get_by_id(sample_id)
        if sample:
            self.session.delete(sample)
            self.session.commit()
            return True
        return False
