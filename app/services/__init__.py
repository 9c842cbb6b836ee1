"""Business logic services."""

from app.services.exercise_service import ExerciseService
from app.services.training_engine_service import TrainingEngineService
from app.services.training_session_service import TrainingSessionService
from app.services.user_service import UserService

__all__ = [
    "ExerciseService",
    "TrainingEngineService",
    "TrainingSessionService",
    "UserService",
]
