"""
Deload schemas.

A deload period scales training demand by two modifiers in (0, 1]:
``volume_modifier`` (sets) and ``intensity_modifier`` (load).
``days_remaining`` is always derived from the start date, never stored.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TrainingModifiers(BaseModel):
    """Multipliers applied to a prescription (1.0 = unchanged)."""

    volume_modifier: float = Field(1.0, gt=0.0, le=1.0)
    intensity_modifier: float = Field(1.0, gt=0.0, le=1.0)


class DeloadDecision(BaseModel):
    """Outcome of :func:`~app.adapt.deload.check_deload_needed`."""

    should_deload: bool
    trigger: Optional[str] = Field(
        None,
        description=(
            "Rule that fired: critical_score, critical_history, "
            "elevated_history, recovery_debt, scheduled, manual"
        ),
    )
    reason: str
    deload_type: Optional[str] = Field(
        None,
        description="One of: volume, intensity, combined",
    )
    duration_days: int = Field(0, ge=0)
    volume_modifier: float = Field(1.0, gt=0.0, le=1.0)
    intensity_modifier: float = Field(1.0, gt=0.0, le=1.0)
    fatigue_score: Optional[int] = Field(None, ge=0, le=10)


class DeloadPeriodRecord(BaseModel):
    """A stored deload period."""

    id: int
    user_id: int
    deload_type: str
    trigger_reason: str
    start_date: datetime.date
    duration_days: int = Field(..., ge=1)
    volume_modifier: float = Field(..., gt=0.0, le=1.0)
    intensity_modifier: float = Field(..., gt=0.0, le=1.0)
    fatigue_score_at_trigger: Optional[int] = None
    is_active: bool = True
    ended_on: Optional[datetime.date] = None

    @property
    def planned_end(self) -> datetime.date:
        return self.start_date + datetime.timedelta(days=self.duration_days)


class ActiveDeload(BaseModel):
    """An unexpired active deload period as of a given day."""

    period: DeloadPeriodRecord
    days_elapsed: int = Field(..., ge=0)
    days_remaining: int = Field(..., ge=1)
    ends_on: datetime.date
    modifiers: TrainingModifiers


class DeloadStartRequest(BaseModel):
    """Manual deload start.  Unset fields fall back to the type's preset."""

    deload_type: str = Field(
        "volume",
        description="One of: volume, intensity, combined",
    )
    duration_days: Optional[int] = Field(None, ge=1, le=28)
    reason: Optional[str] = Field(None, max_length=500)
    volume_modifier: Optional[float] = Field(None, gt=0.0, le=1.0)
    intensity_modifier: Optional[float] = Field(None, gt=0.0, le=1.0)
