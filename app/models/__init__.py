"""SQLModel database models."""

from app.models.user import User
from app.models.exercise import Exercise
from app.models.training_session import TrainingSession
from app.models.exercise_set import ExerciseSet
from app.models.recovery import RecoveryCheckIn
from app.models.fatigue_log import FatigueLog
from app.models.deload_period import DeloadPeriod

__all__ = [
    "User",
    "Exercise",
    "TrainingSession",
    "ExerciseSet",
    "RecoveryCheckIn",
    "FatigueLog",
    "DeloadPeriod",
]
