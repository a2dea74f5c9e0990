"""
Shared API dependencies.

Reusable FastAPI dependencies for caller identification, database access
and the in-process coaching sessions.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlmodel import Session

from app.coach.coaching import CoachingSessionRegistry
from app.db.session import get_db
from app.models.user import User
from app.services.user_service import UserService


def get_current_user(x_user_id: Optional[int] = Header(None, description="Id of the calling athlete"),
                     db: Session = Depends(get_db), ) -> User:
    """Resolve the calling athlete from the X-User-Id header."""
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header", )
    user = UserService(db).repository.get_by_id(x_user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user", )
    return user


def get_coaching_registry(request: Request) -> CoachingSessionRegistry:
    """Coaching sessions live on the application state, one per user."""
    return request.app.state.coaching
