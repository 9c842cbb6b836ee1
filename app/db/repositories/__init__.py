"""Database repositories."""

from app.db.repositories.user import UserRepository
from app.db.repositories.exercise import ExerciseRepository
from app.db.repositories.training_session import TrainingSessionRepository
from app.db.repositories.exercise_set import ExerciseSetRepository
from app.db.repositories.recovery import RecoveryRepository
from app.db.repositories.fatigue_log import FatigueLogRepository
from app.db.repositories.deload_period import DeloadPeriodRepository

__all__ = [
    "UserRepository",
    "ExerciseRepository",
    "TrainingSessionRepository",
    "ExerciseSetRepository",
    "RecoveryRepository",
    "FatigueLogRepository",
    "DeloadPeriodRepository",
]
