"""Pydantic schemas for request/response validation and engine value types."""

from app.schemas.user import UserCreate, UserResponse
from app.schemas.exercise import Equipment, ExerciseCategory, ExerciseInfo
from app.schemas.training_session import (
    ExerciseSetCreate,
    RecoveryCheckInCreate,
    RecoveryCheckInResponse,
    TrainingSessionCreate,
    TrainingSessionResponse,
)
from app.schemas.history import ExercisePerformance, RecoveryEntry, SessionSummary, SetRecord
from app.schemas.fatigue import FatigueFactors, FatigueLogEntry, FatigueResult, FatigueStatus
from app.schemas.deload import (
    ActiveDeload,
    DeloadDecision,
    DeloadPeriodRecord,
    DeloadStartRequest,
    TrainingModifiers,
)
from app.schemas.progression import PlateauStrategy, ProgressionGateResult, ProgressionRecommendation
from app.schemas.suggestion import AfterSetSuggestion, LastSet, SlotTarget, WarmupSet, WeightSuggestion

__all__ = [
    "UserCreate",
    "UserResponse",
    "Equipment",
    "ExerciseCategory",
    "ExerciseInfo",
    "ExerciseSetCreate",
    "RecoveryCheckInCreate",
    "RecoveryCheckInResponse",
    "TrainingSessionCreate",
    "TrainingSessionResponse",
    "ExercisePerformance",
    "RecoveryEntry",
    "SessionSummary",
    "SetRecord",
    "FatigueFactors",
    "FatigueLogEntry",
    "FatigueResult",
    "FatigueStatus",
    "ActiveDeload",
    "DeloadDecision",
    "DeloadPeriodRecord",
    "DeloadStartRequest",
    "TrainingModifiers",
    "PlateauStrategy",
    "ProgressionGateResult",
    "ProgressionRecommendation",
    "AfterSetSuggestion",
    "LastSet",
    "SlotTarget",
    "WarmupSet",
    "WeightSuggestion",
]
