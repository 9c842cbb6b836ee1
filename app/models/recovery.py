"""
Recovery check-in database model.

Subjective daily recovery markers.  Several check-ins per day are
allowed and every metric is optional.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class RecoveryCheckIn(SQLModel, table=True):
    """A recovery self-report (sleep, energy, soreness, stress)."""

    __tablename__ = "recovery_check_ins"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    date: datetime.date = Field(nullable=False, index=True)

    sleep_hours: Optional[float] = Field(default=None, ge=0.0, le=24.0)
    energy_level: Optional[int] = Field(default=None, ge=1, le=5)
    soreness: Optional[int] = Field(default=None, ge=1, le=5)
    stress_level: Optional[int] = Field(default=None, ge=1, le=5)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
