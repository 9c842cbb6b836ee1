"""
Deload management: decision rules and the active-period lifecycle.

A deload is a planned stretch of reduced training demand.  The manager
answers two questions:

1. **Is a deload warranted?**  Rules are evaluated in order and the
   first match wins:

   ==================  ==============================================  ==========
   trigger             condition                                       preset
   ==================  ==============================================  ==========
   critical_score      current score in the critical band (>= 9)       combined
   critical_history    >= 2 days scored >= 8 in the last 7 days        combined
   elevated_history    >= 5 days scored >= 6 in the last 7 days        volume
   recovery_debt       score >= 7 with recovery debt >= 2              intensity
   scheduled           >= 4 weeks since the last deload (or 1st day)   volume
   ==================  ==============================================  ==========

   Historical rules read the persisted fatigue log with today's freshly
   computed score standing in for today's entry.

2. **What is active right now?**  A period stores its start date and
   planned duration; ``days_remaining`` is derived on every read.  A
   period whose ``days_remaining`` reached 0 reads as inactive even if
   its row was never closed (lazy expiry).  At most one active row per
   user exists; the storage layer enforces it with a unique index.

Modifiers are multipliers in (0, 1].  When several sources constrain a
session (an active deload, a return from a break), they are combined by
taking the minimum volume modifier and either the minimum or the product
of the intensity modifiers.
"""

from __future__ import annotations

import datetime
import logging
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from app.adapt.fatigue import compute_fatigue
from app.adapt.history import EngineStore, HistoryReader
from app.adapt.loading import round_half_up, snap_weight
from app.core.exceptions import ConflictError, NotFoundError
from app.schemas.deload import (
    ActiveDeload,
    DeloadDecision,
    DeloadPeriodRecord,
    TrainingModifiers,
)
from app.schemas.fatigue import FatigueResult

logger = logging.getLogger(__name__)

DELOAD_TYPES = ("volume", "intensity", "combined")
CombineStrategy = Literal["min", "multiply"]

# ======================================================================
# Configuration
# ======================================================================


class DeloadPreset(BaseModel):
    """Default shape of a deload of a given type."""

    deload_type: str
    duration_days: int = Field(..., ge=1)
    volume_modifier: float = Field(..., gt=0.0, le=1.0)
    intensity_modifier: float = Field(..., gt=0.0, le=1.0)


_DEFAULT_PRESETS: dict[str, DeloadPreset] = {
    "volume": DeloadPreset(deload_type="volume", duration_days=7, volume_modifier=0.6, intensity_modifier=1.0),
    "intensity": DeloadPreset(deload_type="intensity", duration_days=5, volume_modifier=0.8, intensity_modifier=0.85),
    "combined": DeloadPreset(deload_type="combined", duration_days=7, volume_modifier=0.6, intensity_modifier=0.85),
}


class DeloadConfig(BaseModel):
    """Decision thresholds and presets for deloads."""

    presets: dict[str, DeloadPreset] = Field(default_factory=lambda: dict(_DEFAULT_PRESETS))

    critical_score: int = Field(default=9, ge=0, le=10)
    history_days: int = Field(default=7, ge=1)
    high_score: int = Field(default=8, ge=0, le=10)
    high_days: int = Field(default=2, ge=1)
    elevated_score: int = Field(default=6, ge=0, le=10)
    elevated_days: int = Field(default=5, ge=1)
    elevated_duration_days: int = Field(default=5, ge=1)
    recovery_score: int = Field(default=7, ge=0, le=10)
    recovery_debt: int = Field(default=2, ge=0, le=3)
    scheduled_every_weeks: int = Field(default=4, ge=1)

    # Return from a break (intensity only)
    break_short_days: int = Field(default=3, ge=1)
    break_short_intensity: float = Field(default=0.9, gt=0.0, le=1.0)
    break_long_days: int = Field(default=7, ge=1)
    break_long_intensity: float = Field(default=0.85, gt=0.0, le=1.0)


DEFAULT_DELOAD_CONFIG = DeloadConfig()

NO_MODIFIERS = TrainingModifiers(volume_modifier=1.0, intensity_modifier=1.0)


# ======================================================================
# Derived state
# ======================================================================


def days_remaining(period: DeloadPeriodRecord, as_of: datetime.date) -> int:
    """Planned duration minus elapsed days, floored at 0."""
    if not period.is_active:
        return 0
    elapsed = max(0, (as_of - period.start_date).days)
    return max(0, period.duration_days - elapsed)


def _to_active(period: DeloadPeriodRecord, as_of: datetime.date) -> Optional[ActiveDeload]:
    remaining = days_remaining(period, as_of)
    if remaining <= 0:
        return None
    return ActiveDeload(
        period=period,
        days_elapsed=max(0, (as_of - period.start_date).days),
        days_remaining=remaining,
        ends_on=period.planned_end,
        modifiers=TrainingModifiers(
            volume_modifier=period.volume_modifier,
            intensity_modifier=period.intensity_modifier,
        ),
    )


# ======================================================================
# Decision
# ======================================================================


def _decision(trigger: str, reason: str, preset: DeloadPreset, score: Optional[int],
              duration_days: Optional[int] = None) -> DeloadDecision:
    return DeloadDecision(
        should_deload=True,
        trigger=trigger,
        reason=reason,
        deload_type=preset.deload_type,
        duration_days=duration_days or preset.duration_days,
        volume_modifier=preset.volume_modifier,
        intensity_modifier=preset.intensity_modifier,
        fatigue_score=score,
    )


def _no_deload(reason: str, score: Optional[int]) -> DeloadDecision:
    return DeloadDecision(should_deload=False, reason=reason, fatigue_score=score)


def evaluate_deload_rules(
    fatigue: FatigueResult,
    recent_scores: dict[datetime.date, int],
    weeks_since_last_deload: Optional[float],
    config: Optional[DeloadConfig] = None,
) -> DeloadDecision:
    """Apply the deload rules to already gathered inputs.

    Args:
        fatigue: Today's fatigue result.
        recent_scores: Logged score per day within the history window.
            Today's entry, if any, is replaced by ``fatigue.score``.
        weeks_since_last_deload: Weeks since the previous deload ended
            (or since training started); ``None`` when unknown.
        config: Optional config override.
    """
    cfg = config or DEFAULT_DELOAD_CONFIG
    score = fatigue.score
    scores = dict(recent_scores)
    scores[fatigue.as_of] = score

    if score >= cfg.critical_score:
        return _decision(
            "critical_score",
            f"Critical fatigue today ({score}/10) - {fatigue.status.message.lower()}",
            cfg.presets["combined"], score,
        )

    high_days = sum(1 for s in scores.values() if s >= cfg.high_score)
    if high_days >= cfg.high_days:
        return _decision(
            "critical_history",
            f"Fatigue at {cfg.high_score}+ on {high_days} of the last {cfg.history_days} days",
            cfg.presets["combined"], score,
        )

    elevated_days = sum(1 for s in scores.values() if s >= cfg.elevated_score)
    if elevated_days >= cfg.elevated_days:
        return _decision(
            "elevated_history",
            f"Elevated fatigue on {elevated_days} of the last {cfg.history_days} days",
            cfg.presets["volume"], score, duration_days=cfg.elevated_duration_days,
        )

    if score >= cfg.recovery_score and fatigue.factors.recovery_debt >= cfg.recovery_debt:
        return _decision(
            "recovery_debt",
            f"High fatigue ({score}/10) with poor recovery",
            cfg.presets["intensity"], score,
        )

    if weeks_since_last_deload is not None and weeks_since_last_deload >= cfg.scheduled_every_weeks:
        return _decision(
            "scheduled",
            f"Scheduled deload - {int(weeks_since_last_deload)} weeks of training since the last one",
            cfg.presets["volume"], score,
        )

    return _no_deload("No deload needed", score)


def check_deload_needed(
    reader: HistoryReader,
    user_id: int,
    as_of: datetime.date,
    fatigue: Optional[FatigueResult] = None,
    config: Optional[DeloadConfig] = None,
) -> DeloadDecision:
    """Decide whether the user should start a deload.

    Never recommends a new deload while one is running.

    Raises:
        NotFoundError: unknown user.
    """
    cfg = config or DEFAULT_DELOAD_CONFIG
    if fatigue is None:
        fatigue = compute_fatigue(reader, user_id, as_of)
    elif not reader.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")

    stored = reader.get_active_deload_period(user_id)
    if stored is not None:
        active = _to_active(stored, as_of)
        if active is not None:
            return _no_deload(
                f"Deload already in progress ({active.days_remaining} days remaining)", fatigue.score,
            )

    since = as_of - datetime.timedelta(days=cfg.history_days - 1)
    logs = reader.list_fatigue_logs(user_id, since, as_of)
    recent_scores = {entry.date: entry.score for entry in logs}

    # Weeks since the last deload ended, or since the first session.
    reference: Optional[datetime.date] = None
    last = reader.get_last_deload_period(user_id)
    if last is not None:
        reference = last.ended_on or last.planned_end
    else:
        reference = reader.first_session_date(user_id)
    weeks = (as_of - reference).days / 7 if reference is not None else None

    decision = evaluate_deload_rules(fatigue, recent_scores, weeks, cfg)
    if decision.should_deload:
        logger.info("Deload recommended for user %s: %s (%s)", user_id, decision.trigger, decision.reason)
    return decision


def manual_decision(
    deload_type: str = "volume",
    duration_days: Optional[int] = None,
    reason: Optional[str] = None,
    volume_modifier: Optional[float] = None,
    intensity_modifier: Optional[float] = None,
    config: Optional[DeloadConfig] = None,
) -> DeloadDecision:
    """Build an approved decision for an explicit, user-initiated deload."""
    cfg = config or DEFAULT_DELOAD_CONFIG
    if deload_type not in cfg.presets:
        raise ValueError(f"Unknown deload type {deload_type!r}; expected one of {', '.join(DELOAD_TYPES)}")
    preset = cfg.presets[deload_type]
    return DeloadDecision(
        should_deload=True,
        trigger="manual",
        reason=reason or "Manual deload",
        deload_type=deload_type,
        duration_days=duration_days or preset.duration_days,
        volume_modifier=volume_modifier if volume_modifier is not None else preset.volume_modifier,
        intensity_modifier=intensity_modifier if intensity_modifier is not None else preset.intensity_modifier,
    )


# ======================================================================
# Lifecycle
# ======================================================================


def start_deload(
    store: EngineStore,
    user_id: int,
    decision: DeloadDecision,
    as_of: datetime.date,
) -> DeloadPeriodRecord:
    """Open a deload period starting ``as_of``.

    An active row that already expired is closed first.  Two concurrent
    starts cannot both succeed: the loser gets a ConflictError from the
    storage layer.

    Raises:
        NotFoundError: unknown user.
        ConflictError: an unexpired deload is already active.
        ValueError: ``decision`` does not call for a deload.
    """
    if not decision.should_deload or decision.deload_type is None or decision.duration_days < 1:
        raise ValueError("Decision does not call for a deload")
    if not store.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")

    current = store.get_active_deload_period(user_id)
    if current is not None:
        remaining = days_remaining(current, as_of)
        if remaining > 0:
            logger.warning(
                "Rejected deload start for user %s: period %s active (%d days remaining)",
                user_id, current.id, remaining,
            )
            raise ConflictError(
                f"A deload is already active for user {user_id} ({remaining} days remaining)"
            )
        store.end_deload_period(current.id, min(current.planned_end, as_of))
        logger.info("Closed expired deload period %s for user %s", current.id, user_id)

    period = store.create_deload_period(
        user_id=user_id,
        deload_type=decision.deload_type,
        trigger_reason=decision.reason,
        start_date=as_of,
        duration_days=decision.duration_days,
        volume_modifier=decision.volume_modifier,
        intensity_modifier=decision.intensity_modifier,
        fatigue_score=decision.fatigue_score,
    )
    logger.info(
        "Started %s deload %s for user %s: %d days (volume x%.2f, intensity x%.2f)",
        period.deload_type, period.id, user_id, period.duration_days,
        period.volume_modifier, period.intensity_modifier,
    )
    return period


def get_active_deload(
    reader: HistoryReader, user_id: int, as_of: datetime.date,
) -> Optional[ActiveDeload]:
    """The user's unexpired active period, or ``None``."""
    if not reader.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")
    stored = reader.get_active_deload_period(user_id)
    if stored is None:
        return None
    return _to_active(stored, as_of)


def end_deload(store: EngineStore, period_id: int, as_of: datetime.date) -> DeloadPeriodRecord:
    """Close a period early.  Ending an already closed period is a no-op."""
    period = store.get_deload_period(period_id)
    if period is None:
        raise NotFoundError(f"Deload period {period_id} not found")
    if not period.is_active:
        return period
    ended = store.end_deload_period(period_id, as_of)
    logger.info("Ended deload period %s for user %s on %s", period_id, period.user_id, as_of)
    return ended


def end_active_deload(
    store: EngineStore, user_id: int, as_of: datetime.date,
) -> Optional[DeloadPeriodRecord]:
    """Close whatever period is flagged active for the user, if any."""
    if not store.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")
    current = store.get_active_deload_period(user_id)
    if current is None:
        return None
    return end_deload(store, current.id, as_of)


def get_deload_history(
    reader: HistoryReader, user_id: int, limit: int = 10,
) -> list[DeloadPeriodRecord]:
    if not reader.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")
    return reader.list_deload_periods(user_id, limit)


# ======================================================================
# Modifiers
# ======================================================================


def apply_deload_modifiers(
    active: Union[ActiveDeload, DeloadPeriodRecord, None],
) -> TrainingModifiers:
    """(1, 1) without a deload, otherwise the period's stored modifiers."""
    if active is None:
        return NO_MODIFIERS
    if isinstance(active, ActiveDeload):
        return active.modifiers
    return TrainingModifiers(
        volume_modifier=active.volume_modifier,
        intensity_modifier=active.intensity_modifier,
    )


def return_from_break_modifiers(
    days_since_last_session: Optional[int],
    config: Optional[DeloadConfig] = None,
) -> TrainingModifiers:
    """Intensity reduction after time off.  Volume is left alone."""
    cfg = config or DEFAULT_DELOAD_CONFIG
    if days_since_last_session is None:
        return NO_MODIFIERS
    if days_since_last_session >= cfg.break_long_days:
        return TrainingModifiers(volume_modifier=1.0, intensity_modifier=cfg.break_long_intensity)
    if days_since_last_session >= cfg.break_short_days:
        return TrainingModifiers(volume_modifier=1.0, intensity_modifier=cfg.break_short_intensity)
    return NO_MODIFIERS


def combine_modifiers(
    *modifiers: TrainingModifiers,
    strategy: CombineStrategy = "min",
) -> TrainingModifiers:
    """Merge several modifier sources into one.

    Volume modifiers never stack: the most conservative one wins.
    Intensity modifiers take the minimum (``min``) or stack (``multiply``).
    """
    if not modifiers:
        return NO_MODIFIERS
    volume = min(m.volume_modifier for m in modifiers)
    if strategy == "multiply":
        intensity = 1.0
        for m in modifiers:
            intensity *= m.intensity_modifier
    elif strategy == "min":
        intensity = min(m.intensity_modifier for m in modifiers)
    else:
        raise ValueError(f"Unknown combination strategy {strategy!r}")
    return TrainingModifiers(volume_modifier=volume, intensity_modifier=round(intensity, 4))


def adjust_prescription(
    modifiers: TrainingModifiers,
    sets: int,
    weight: float,
    step: float = 5.0,
) -> tuple[int, float]:
    """Scale a ``sets × weight`` prescription.

    Sets are rounded half up and never drop below 1; weight is snapped
    to the nearest load step.
    """
    new_sets = max(1, round_half_up(sets * modifiers.volume_modifier))
    new_weight = snap_weight(weight * modifiers.intensity_modifier, step)
    return new_sets, new_weight
