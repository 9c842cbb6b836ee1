"""
User endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.db.session import get_db
from app.schemas.user import UserCreate, UserResponse
from app.services.user_service import UserService

router = APIRouter()


@router.post("", summary="Register a user.", response_model=UserResponse, status_code=status.HTTP_201_CREATED, )
def register(data: UserCreate, db: Session = Depends(get_db)):
    return UserService(db).register(data)


@router.get("/{user_id}", summary="Get a user.", response_model=UserResponse, )
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).get_or_404(user_id)
