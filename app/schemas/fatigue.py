"""
Fatigue scoring schemas.

The fatigue score is the capped sum of five independent factors:

    rpe_creep         0-2   session RPE trending up
    performance_drop  0-2   recent sessions ground out at high RPE
    recovery_debt     0-3   poor sleep / energy / soreness
    volume_load       0-2   weekly volume spike vs. baseline
    streak            0-1   too many consecutive training days

    score = min(10, sum of factors)
"""

import datetime

from pydantic import BaseModel, Field


class FatigueFactors(BaseModel):
    """Per-factor sub-scores, each bounded by its own cap."""

    rpe_creep: int = Field(0, ge=0, le=2)
    performance_drop: int = Field(0, ge=0, le=2)
    recovery_debt: int = Field(0, ge=0, le=3)
    volume_load: int = Field(0, ge=0, le=2)
    streak: int = Field(0, ge=0, le=1)

    def total(self) -> int:
        return (self.rpe_creep + self.performance_drop + self.recovery_debt
                + self.volume_load + self.streak)


class FatigueStatus(BaseModel):
    """Qualitative band for a fatigue score."""

    level: str = Field(
        ...,
        description="One of: fresh, normal, elevated, high, critical",
    )
    color: str = Field(
        ...,
        description="One of: green, yellow, orange, red",
    )
    message: str
    action: str


class FatigueResult(BaseModel):
    """Full fatigue assessment for a user on a given day."""

    score: int = Field(..., ge=0, le=10)
    factors: FatigueFactors
    status: FatigueStatus
    recommendations: list[str] = Field(
        default_factory=list,
        description="One fixed string per triggered factor, in factor order, de-duplicated",
    )
    as_of: datetime.date
    window_days: int = Field(..., ge=1)
    consecutive_days: int = Field(
        0, ge=0,
        description="Length of the current run of consecutive training days",
    )


class FatigueLogEntry(BaseModel):
    """A persisted daily fatigue snapshot."""

    date: datetime.date
    score: int = Field(..., ge=0, le=10)
    level: str
    factors: FatigueFactors = Field(default_factory=FatigueFactors)
    recommendations: list[str] = Field(default_factory=list)
