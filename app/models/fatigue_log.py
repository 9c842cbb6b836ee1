"""
Fatigue log database model.

Daily snapshot of the fatigue score for trend charts.  One row per user
per day (enforced by unique constraint); re-logging the same day
overwrites the row.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


class FatigueLog(SQLModel, table=True):
    """Persisted :class:`~app.schemas.fatigue.FatigueResult` for one day."""

    __tablename__ = "fatigue_logs"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_fatigue_user_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    date: datetime.date = Field(nullable=False, index=True)

    score: int = Field(nullable=False, ge=0, le=10)
    level: str = Field(nullable=False, max_length=20)

    # Factor breakdown
    rpe_creep: int = Field(default=0, nullable=False)
    performance_drop: int = Field(default=0, nullable=False)
    recovery_debt: int = Field(default=0, nullable=False)
    volume_load: int = Field(default=0, nullable=False)
    streak: int = Field(default=0, nullable=False)

    recommendations: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False), )

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
