"""
Performance service.

Business logic for logging set groups and listing them back.
"""

import datetime
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlmodel import Session

from app.db.repositories.performance import PerformanceRepository
from app.models.performance import PerformanceSample
from app.schemas.performance import (
    ExerciseSummary,
    PerformanceSampleCreate,
    PerformanceSampleResponse,
)

logger = logging.getLogger(__name__)


class PerformanceService:
    """Service for performance sample business logic."""

    def __init__(self, session: Session):
        self.repository = PerformanceRepository(session)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def log(self, user_id: int, data: PerformanceSampleCreate) -> PerformanceSampleResponse:
        """Store one set group. The exercise name is stored trimmed."""
        sample = PerformanceSample(
            user_id=user_id,
            **data.model_dump(exclude={"exercise_name"}),
            exercise_name=data.exercise_name.strip(),
        )
        sample = self.repository.create(sample)
        logger.debug(
            "logged %s %.1f x %d for user=%s", sample.exercise_name, sample.weight, sample.reps, user_id,
        )
        return PerformanceSampleResponse.model_validate(sample)

    def get_by_id(self, user_id: int, sample_id: int) -> PerformanceSampleResponse:
        return PerformanceSampleResponse.model_validate(self._get_owned_sample(user_id, sample_id))

    def list_samples(
        self,
        user_id: int,
        exercise_name: Optional[str] = None,
        start: Optional[datetime.date] = None,
        end: Optional[datetime.date] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[PerformanceSampleResponse]:
        """
        Filter precedence:
        - exercise_name: full history of that exercise, oldest first
        - start + end: samples in range, oldest first
        - no filters: paginated list, most recent first
        """
        if exercise_name:
            samples = self.repository.get_by_user_and_exercise(user_id, exercise_name, end=end)
            if start:
                samples = [s for s in samples if s.date >= start]
        elif start and end:
            samples = self.repository.get_by_user_date_range(user_id, start, end)
        else:
            samples = self.repository.get_all_by_user(user_id, skip, limit)
        return [PerformanceSampleResponse.model_validate(s) for s in samples]

    def list_exercises(self, user_id: int) -> list[ExerciseSummary]:
        return [
            ExerciseSummary(exercise_name=name, samples=count, first_date=first, last_date=last)
            for name, count, first, last in self.repository.summarize_exercises(user_id)
        ]

    def delete(self, user_id: int, sample_id: int) -> None:
        self._get_owned_sample(user_id, sample_id)
        self.repository.delete(sample_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_owned_sample(self, user_id: int, sample_id: int) -> PerformanceSample:
        """Get sample by id and verify ownership."""
        sample = self.repository.get_by_id(sample_id)
        if not sample or sample.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Performance sample not found",
            )
        return sample
