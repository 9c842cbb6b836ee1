"""
Progression gate and advisor schemas.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

BlockedBy = Literal["fatigue", "performance", "recovery"]


class ProgressionGateResult(BaseModel):
    """Pass/fail result of the sequential progression gate.

    ``blocked_by`` is ``None`` exactly when ``can_progress`` is true.
    """

    can_progress: bool
    blocked_by: Optional[BlockedBy] = None
    reason: str
    suggested_action: str

    @model_validator(mode="after")
    def check_blocker_consistency(self) -> "ProgressionGateResult":
        if self.can_progress != (self.blocked_by is None):
            raise ValueError("blocked_by must be set exactly when can_progress is false")
        return self


class ProgressionRecommendation(BaseModel):
    """Next load target for one exercise.

    ``suggested_weight == current_weight`` exactly when status is
    ``maintain`` or ``plateau``.
    """

    exercise_id: str
    status: Literal["ready", "maintain", "plateau", "regress"]
    current_weight: float = Field(..., ge=0.0)
    suggested_weight: float = Field(..., ge=0.0)
    sessions_at_current_weight: int = Field(..., ge=0)
    message: str
    target_reps: Optional[int] = Field(None, ge=1)


class PlateauStrategy(BaseModel):
    """A way out of a plateau."""

    key: str
    name: str
    description: str
    duration_weeks: int = Field(..., ge=1)
