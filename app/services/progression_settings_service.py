"""
Progression settings service.

Reads and updates a user's auto-progression preferences, creating the
defaults row on first access.
"""

import datetime
import logging

from sqlmodel import Session

from app.db.repositories.progression_settings import ProgressionSettingsRepository
from app.models.progression_settings import ProgressionSettings
from app.schemas.progression import ProgressionSettingsResponse, ProgressionSettingsUpdate

logger = logging.getLogger(__name__)


class ProgressionSettingsService:
    """Service for progression settings business logic."""

    def __init__(self, session: Session):
        self.repository = ProgressionSettingsRepository(session)

    def get(self, user_id: int) -> ProgressionSettingsResponse:
        return ProgressionSettingsResponse.model_validate(self._get_or_create(user_id))

    def update(
        self, user_id: int, data: ProgressionSettingsUpdate,
    ) -> ProgressionSettingsResponse:
        """Apply the fields that were sent; omitted fields keep their value."""
        row = self._get_or_create(user_id)
        for key, value in data.model_dump(exclude_unset=True, mode="json").items():
            if value is None and key != "target_rpe":
                continue
            setattr(row, key, value)
        row.updated_at = datetime.datetime.utcnow()
        logger.info("progression settings updated user=%s", user_id)
        return ProgressionSettingsResponse.model_validate(self.repository.update(row))

    def _get_or_create(self, user_id: int) -> ProgressionSettings:
        row = self.repository.get_by_user(user_id)
        if row is None:
            row = self.repository.create(ProgressionSettings(user_id=user_id))
        return row
