"""
Deload period database model.

``days_remaining`` is never stored: it is derived from ``start_date`` and
``duration_days`` at read time.  At most one row per user may have
``is_active`` set; the partial unique index makes concurrent starts
fail at the database instead of both succeeding.
"""

import datetime
from typing import Optional

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel


class DeloadPeriod(SQLModel, table=True):
    """A planned stretch of reduced volume and/or intensity."""

    __tablename__ = "deload_periods"
    __table_args__ = (
        Index(
            "uq_deload_one_active_per_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)

    # "volume" | "intensity" | "combined"
    deload_type: str = Field(nullable=False, max_length=20)
    trigger_reason: str = Field(nullable=False, max_length=500)

    start_date: datetime.date = Field(nullable=False)
    duration_days: int = Field(nullable=False, ge=1)

    volume_modifier: float = Field(default=1.0, nullable=False, gt=0.0, le=1.0)
    intensity_modifier: float = Field(default=1.0, nullable=False, gt=0.0, le=1.0)

    fatigue_score_at_trigger: Optional[int] = Field(default=None, ge=0, le=10)

    is_active: bool = Field(default=True, nullable=False)
    ended_on: Optional[datetime.date] = Field(default=None)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
