"""
Weight and rest suggestion schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class SlotTarget(BaseModel):
    """What a workout slot prescribes for one exercise."""

    sets: int = Field(3, ge=1, le=20)
    rep_range_min: int = Field(8, ge=1, le=50)
    rep_range_max: int = Field(12, ge=1, le=50)
    rpe_target: float = Field(8.0, ge=1.0, le=10.0)
    rest_seconds: Optional[int] = Field(
        None, ge=0, le=900,
        description="Configured rest between sets (None = default)",
    )
    slot_role: Optional[str] = Field(
        None,
        description="One of: primary, secondary, accessory, optional",
    )

    @model_validator(mode="after")
    def check_rep_range(self) -> "SlotTarget":
        if self.rep_range_min > self.rep_range_max:
            raise ValueError("rep_range_min must not exceed rep_range_max")
        return self


class LastSet(BaseModel):
    """Top set from the most recent session of this exercise."""

    weight: float = Field(..., ge=0.0)
    reps: int = Field(..., ge=1)
    rpe: Optional[float] = Field(None, ge=0.0, le=10.0)


class WeightSuggestion(BaseModel):
    """Concrete load prescription for the next session."""

    weight: float = Field(..., ge=0.0)
    reps: int = Field(..., ge=1)
    rpe_target: float = Field(..., ge=1.0, le=10.0)
    sets: int = Field(..., ge=1)
    rest_seconds: int = Field(..., ge=0)
    estimated_1rm: Optional[float] = Field(None, ge=0.0)
    confidence: str = Field(
        ...,
        description="One of: low, medium, high",
    )
    is_deload: bool = Field(
        False,
        description="True when reduced by an active deload or a return from a break",
    )
    original_weight: Optional[float] = Field(
        None, ge=0.0,
        description="Weight before modifiers, when they changed it",
    )
    reasoning: str


class WarmupSet(BaseModel):
    set_number: int = Field(..., ge=1)
    percentage: int = Field(..., ge=1, le=100)
    weight: float = Field(..., ge=0.0)
    reps: int = Field(..., ge=1)


class AfterSetSuggestion(BaseModel):
    """Intra-session adjustment after a working set."""

    action: str = Field(
        ...,
        description="One of: continue, reduce, add_set, stop",
    )
    next_weight: float = Field(..., ge=0.0)
    message: Optional[str] = None
