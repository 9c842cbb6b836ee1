"""
Shared API dependencies.

Reusable FastAPI dependencies for database-backed services.
"""

from fastapi import Depends
from sqlmodel import Session

from app.db.session import get_db
from app.services.training_engine_service import TrainingEngineService


def get_training_engine(db: Session = Depends(get_db)) -> TrainingEngineService:
    """Engine facade bound to the request's database session."""
    return TrainingEngineService(db)
