"""
User service.

Business logic for athlete profiles.
"""

import datetime
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from app.db.repositories.user import UserRepository
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related business logic."""

    def __init__(self, session: Session):
        """
        Initialize service with database session.

        Args:
            session: SQLModel database session
        """
        self.repository = UserRepository(session)

    def register(self, user_data: UserCreate) -> User:
        """
        Create an athlete profile.

        Raises:
            HTTPException: 409 if the email is already registered
        """
        email = user_data.email.lower()
        if self.repository.get_by_email(email):
            logger.warning("registration rejected, email already registered")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

        user = self.repository.create(User(email=email, full_name=user_data.full_name))
        logger.info("registered user id=%s", user.id)
        return user

    def get_user(self, user_id: int) -> User:
        """
        Get an active user by id.

        Raises:
            HTTPException: 404 if missing or inactive
        """
        user = self.repository.get_by_id(user_id)
        if not user or not user.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    def update(self, user: User, data: UserUpdate) -> User:
        if data.email is not None and data.email.lower() != user.email:
            if self.repository.get_by_email(data.email):
                logger.warning("email change rejected for user id=%s", user.id)
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
            user.email = data.email.lower()
        if data.full_name is not None:
            user.full_name = data.full_name
        user.updated_at = datetime.datetime.utcnow()
        return self.repository.update(user)
