"""
Training session database model.

Sessions are written by the session-completion flow and are read-only
for the engine.  ``avg_rpe`` and ``total_volume`` are denormalised at
completion time so fatigue scoring never has to touch individual sets.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class TrainingSession(SQLModel, table=True):
    """A single workout.

    ``total_volume`` is weight x reps summed over non-warmup sets.
    ``avg_rpe`` is rounded to one decimal and may be missing when the
    user logged no RPE at all.
    """

    __tablename__ = "training_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    date: datetime.date = Field(nullable=False, index=True)

    # "completed" | "in_progress"
    status: str = Field(default="in_progress", nullable=False, max_length=20, index=True)

    avg_rpe: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    total_volume: float = Field(default=0.0, nullable=False)
    notes: Optional[str] = Field(default=None, max_length=1000)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
