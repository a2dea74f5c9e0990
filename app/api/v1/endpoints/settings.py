"""
Progression settings endpoints.
"""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.dependencies import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.progression import ProgressionSettingsResponse, ProgressionSettingsUpdate
from app.services.progression_settings_service import ProgressionSettingsService

router = APIRouter()


@router.get("/progression", summary="Get auto-progression settings.", response_model=ProgressionSettingsResponse, )
def get_progression_settings(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    """Returns the defaults (created on first access) when never set."""
    return ProgressionSettingsService(db).get(user.id)


@router.patch("/progression", summary="Update auto-progression settings.",
              response_model=ProgressionSettingsResponse, )
def update_progression_settings(data: ProgressionSettingsUpdate, db: Session = Depends(get_db),
                                user: User = Depends(get_current_user), ):
    return ProgressionSettingsService(db).update(user.id, data)
