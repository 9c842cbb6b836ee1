"""
Logged set database model.

One row per performed set.  Per-exercise performance history is rebuilt
from these rows by taking the heaviest working set of each session.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class ExerciseSet(SQLModel, table=True):
    """A single set of one exercise inside a training session."""

    __tablename__ = "exercise_sets"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="training_sessions.id", nullable=False, index=True)
    exercise_id: int = Field(foreign_key="exercises.id", nullable=False, index=True)

    set_number: int = Field(default=1, nullable=False)
    weight: float = Field(default=0.0, nullable=False, ge=0.0)
    reps: int = Field(default=0, nullable=False, ge=0)
    rpe: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    is_warmup: bool = Field(default=False, nullable=False)

    completed_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
