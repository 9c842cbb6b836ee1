"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from app.models.user import User  # noqa: F401
from app.models.exercise import Exercise  # noqa: F401
from app.models.training_session import TrainingSession  # noqa: F401
from app.models.exercise_set import ExerciseSet  # noqa: F401
from app.models.recovery import RecoveryCheckIn  # noqa: F401
from app.models.fatigue_log import FatigueLog  # noqa: F401
from app.models.deload_period import DeloadPeriod  # noqa: F401
