"""
History value types.

Read-only snapshots of what the storage layer holds, in the shape the
engine consumes.  All of them are plain data passed by value.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SessionSummary(BaseModel):
    """A training session reduced to what fatigue scoring needs."""

    session_id: int
    date: datetime.date
    status: str = Field(
        "completed",
        description="One of: completed, in_progress",
    )
    avg_rpe: Optional[float] = Field(
        None, ge=0.0, le=10.0,
        description="Average session RPE, one decimal (None when not logged)",
    )
    total_volume: float = Field(
        0.0, ge=0.0,
        description="Sum of weight x reps over non-warmup sets",
    )


class RecoveryEntry(BaseModel):
    """A recovery check-in.  Every metric may be missing."""

    date: datetime.date
    sleep_hours: Optional[float] = Field(None, ge=0.0, le=24.0)
    energy_level: Optional[int] = Field(None, ge=1, le=5)
    soreness: Optional[int] = Field(None, ge=1, le=5)
    stress_level: Optional[int] = Field(None, ge=1, le=5)


class SetRecord(BaseModel):
    """A single logged set, tagged with its owning session."""

    session_id: int
    session_date: datetime.date
    exercise_id: str
    weight: float = Field(..., ge=0.0)
    reps: int = Field(..., ge=0)
    rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    is_warmup: bool = False
    completed_at: Optional[datetime.datetime] = None


class ExercisePerformance(BaseModel):
    """Top (heaviest non-warmup) set of one exercise in one session."""

    session_id: int
    date: datetime.date
    weight: float = Field(..., ge=0.0)
    reps: int = Field(..., ge=0)
    rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
