"""
User service.

Business logic for user management.
"""

from typing import Optional

from fastapi import HTTPException, status
from sqlmodel import Session

from app.db.repositories.user import UserRepository
from app.models.user import User
from app.schemas.user import UserCreate


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
        Register a new user.

        Raises:
            HTTPException: If email already exists
        """
        if self.repository.get_by_email(user_data.email) is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already registered")

        user = User(email=user_data.email, full_name=user_data.full_name)
        return self.repository.create(user)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.repository.get_by_id(user_id)

    def get_or_404(self, user_id: int) -> User:
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
        return user
