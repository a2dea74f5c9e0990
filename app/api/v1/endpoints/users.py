"""
User endpoints.

Athlete profile creation and lookup.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.api.dependencies import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.user_service import UserService

router = APIRouter()


@router.post("", summary="Create an athlete profile.", response_model=UserResponse,
             status_code=status.HTTP_201_CREATED, )
def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """The returned id is what callers send in the X-User-Id header."""
    return UserService(db).register(user_data)


@router.get("/me", summary="Get the calling athlete's profile.", response_model=UserResponse, )
def read_me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", summary="Update the calling athlete's profile.", response_model=UserResponse, )
def update_me(data: UserUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return UserService(db).update(user, data)


@router.get("/{user_id}", summary="Get an athlete profile by id.", response_model=UserResponse, )
def read_user(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).get_user(user_id)
