"""
Training session API schemas.

A session is logged together with its sets.  ``exercise_id`` on a set is
the exercise slug; the service resolves it to the catalog row.
"""

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExerciseSetCreate(BaseModel):
    """One performed set."""

    exercise_id: str = Field(..., description="Exercise slug, e.g. 'back_squat'")
    set_number: int = Field(1, ge=1, le=50)
    weight: float = Field(..., ge=0.0)
    reps: int = Field(..., ge=0, le=100)
    rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    is_warmup: bool = False


class TrainingSessionCreate(BaseModel):
    """Schema for logging a training session."""

    date: datetime.date
    status: Literal["completed", "in_progress"] = Field(
        "completed",
        description="Only completed sessions feed the engine",
    )
    sets: list[ExerciseSetCreate] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=1000, description="Optional session notes")


class ExerciseSetResponse(BaseModel):
    id: int
    exercise_id: str
    set_number: int
    weight: float
    reps: int
    rpe: Optional[float]
    is_warmup: bool


class TrainingSessionResponse(BaseModel):
    """Schema for training session in API responses."""

    id: int
    user_id: int
    date: datetime.date
    status: str
    avg_rpe: Optional[float]
    total_volume: float
    notes: Optional[str]
    sets: list[ExerciseSetResponse]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class RecoveryCheckInCreate(BaseModel):
    """Subjective recovery markers for a day; every metric is optional."""

    date: datetime.date
    sleep_hours: Optional[float] = Field(None, ge=0.0, le=24.0)
    energy_level: Optional[int] = Field(None, ge=1, le=5)
    soreness: Optional[int] = Field(None, ge=1, le=5)
    stress_level: Optional[int] = Field(None, ge=1, le=5)


class RecoveryCheckInResponse(RecoveryCheckInCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime.datetime
