"""
Exercise reference schemas.

``category`` decides which progression rule applies; ``equipment``
decides the smallest realistic load step used for weight rounding.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


# ======================================================================
# Enums
# ======================================================================

class ExerciseCategory(str, Enum):
    """Whether the exercise is multi-joint (compound) or single-joint."""
    COMPOUND = "compound"
    ISOLATION = "isolation"


class Equipment(str, Enum):
    """Implement used to load the exercise."""
    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    MACHINE = "machine"
    CABLE = "cable"
    KETTLEBELL = "kettlebell"
    BODYWEIGHT = "bodyweight"


# ======================================================================
# ExerciseInfo
# ======================================================================

class ExerciseInfo(BaseModel):
    """Exercise metadata as seen by the engine."""

    exercise_id: str = Field(..., description="Unique slug, e.g. 'back_squat'")
    name: str = Field(..., description="Human-readable name")
    category: ExerciseCategory
    equipment: Equipment
    default_rest_seconds: int = Field(
        120, ge=0, le=900,
        description="Rest prescribed between working sets when the slot has none",
    )
