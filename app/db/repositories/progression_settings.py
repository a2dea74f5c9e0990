"""
Progression settings repository.

Handles database operations for ProgressionSettings model.
"""

from typing import Optional

from sqlmodel import Session, select

from app.models.progression_settings import ProgressionSettings


class ProgressionSettingsRepository:
    """Repository for ProgressionSettings database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_user(self, user_id: int) -> Optional[ProgressionSettings]:
        statement = select(ProgressionSettings).where(
            ProgressionSettings.user_id == user_id,
        )
        return self.session.exec(statement).first()

    def create(self, row: ProgressionSettings) -> ProgressionSettings:
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def update(self, row: ProgressionSettings) -> ProgressionSettings:
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row
