"""
Progression advisor: next load target per exercise.

Given the top working set of each recent session (newest first), the
advisor classifies the exercise and proposes a concrete next weight.
Checks run in this order and the first match wins:

1. **plateau**  - the top weight has not moved for ``plateau_sessions``
   consecutive sessions (4 for compounds, 3 for isolation work).
2. **ready**    - the latest session reached the target reps at or under
   the RPE ceiling.  Next weight = current + increment, where the
   increment is the larger of a fixed step and a percentage of the load
   (compounds only), rounded up to the equipment step.
3. **regress**  - the latest session was rated above the hard RPE
   ceiling (9.5) whatever the reps.  Next weight drops ~10%, rounded
   down to the equipment step.
4. **maintain** - everything else.

When a progression gate result is supplied and it blocks the exercise, a
``ready`` classification is held at the current weight as ``maintain``
and the message carries the gate's reason and suggested action.

``suggested_weight == current_weight`` exactly for plateau and maintain.
"""

from __future__ import annotations

import datetime
import logging
from typing import Optional

from pydantic import BaseModel, Field

from app.adapt.history import HistoryReader, top_sets_by_session
from app.adapt.loading import load_step, snap_weight
from app.core.exceptions import NotFoundError
from app.schemas.exercise import Equipment, ExerciseCategory, ExerciseInfo
from app.schemas.history import ExercisePerformance
from app.schemas.progression import PlateauStrategy, ProgressionGateResult, ProgressionRecommendation

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================


class ProgressionRule(BaseModel):
    """Progression thresholds for one exercise category."""

    category: ExerciseCategory
    target_reps: int = Field(..., ge=1, description="Reps the top set must reach to progress")
    max_rpe: float = Field(..., ge=1.0, le=10.0, description="RPE ceiling for a qualifying session")
    fixed_increment: float = Field(..., gt=0.0)
    percent_increment: float = Field(0.0, ge=0.0, le=0.2)
    sessions_required: int = Field(1, ge=1)
    plateau_sessions: int = Field(..., ge=2)


_DEFAULT_RULES: dict[ExerciseCategory, ProgressionRule] = {
    ExerciseCategory.COMPOUND: ProgressionRule(
        category=ExerciseCategory.COMPOUND,
        target_reps=8,
        max_rpe=8.0,
        fixed_increment=5.0,
        percent_increment=0.025,
        plateau_sessions=4,
    ),
    ExerciseCategory.ISOLATION: ProgressionRule(
        category=ExerciseCategory.ISOLATION,
        target_reps=10,
        max_rpe=7.0,
        fixed_increment=2.5,
        plateau_sessions=3,
    ),
}


class AdvisorConfig(BaseModel):
    """Configuration for the progression advisor."""

    rules: dict[ExerciseCategory, ProgressionRule] = Field(default_factory=lambda: dict(_DEFAULT_RULES))
    regress_rpe: float = Field(default=9.5, ge=1.0, le=10.0)
    regress_fraction: float = Field(default=0.10, gt=0.0, lt=1.0)
    history_days: int = Field(default=60, ge=7)
    max_sessions: int = Field(default=8, ge=2)
    weight_unit: str = Field(default="lbs")


DEFAULT_ADVISOR_CONFIG = AdvisorConfig()

PLATEAU_STRATEGIES: list[PlateauStrategy] = [
    PlateauStrategy(
        key="rep_range_shift",
        name="Rep range shift",
        description="Work in a 6-8 rep range instead of 8-12 to build strength",
        duration_weeks=3,
    ),
    PlateauStrategy(
        key="variation_swap",
        name="Variation swap",
        description="Switch to a similar exercise (e.g., incline instead of flat)",
        duration_weeks=4,
    ),
    PlateauStrategy(
        key="volume_increase",
        name="Volume increase",
        description="Add 1-2 sets per session for this exercise",
        duration_weeks=2,
    ),
    PlateauStrategy(
        key="deload_then_push",
        name="Deload then push",
        description="Take a deload week, then come back at 90% and rebuild",
        duration_weeks=2,
    ),
]


def get_plateau_strategies() -> list[PlateauStrategy]:
    return list(PLATEAU_STRATEGIES)


def get_rule(category: ExerciseCategory | str, config: Optional[AdvisorConfig] = None) -> ProgressionRule:
    cfg = config or DEFAULT_ADVISOR_CONFIG
    return cfg.rules[ExerciseCategory(category)]


# ======================================================================
# Helpers
# ======================================================================


def _fmt(weight: float) -> str:
    return f"{weight:g}"


def _sessions_at_current_weight(history: list[ExercisePerformance]) -> int:
    """Consecutive sessions, newest first, at the newest top weight."""
    if not history:
        return 0
    current = history[0].weight
    count = 0
    for perf in history:
        if perf.weight != current:
            break
        count += 1
    return count


def _qualifies(perf: ExercisePerformance, rule: ProgressionRule, target_reps: int) -> bool:
    if perf.reps < target_reps:
        return False
    # No RPE logged: reps alone decide.
    return perf.rpe is None or perf.rpe <= rule.max_rpe


def compute_increment(weight: float, rule: ProgressionRule, step: float) -> float:
    """Load increase for a ready exercise, at least one equipment step."""
    raw = max(rule.fixed_increment, weight * rule.percent_increment)
    return max(step, snap_weight(raw, step, mode="up"))


def compute_decrement(weight: float, fraction: float, step: float) -> float:
    """Load decrease for a regressing exercise, at least one equipment step."""
    return max(step, snap_weight(weight * fraction, step, mode="down"))


# ======================================================================
# Core computation
# ======================================================================


def recommend_progression(
    exercise_id: str,
    history: list[ExercisePerformance],
    category: ExerciseCategory | str,
    equipment: Equipment | str = Equipment.BARBELL,
    config: Optional[AdvisorConfig] = None,
    target_reps: Optional[int] = None,
    gate: Optional[ProgressionGateResult] = None,
) -> ProgressionRecommendation:
    """Classify an exercise and propose the next weight.

    Args:
        exercise_id: Exercise slug (echoed in the result).
        history: Top set per session, newest first.
        category: Compound or isolation.
        equipment: Implement, for load rounding.
        config: Optional config override.
        target_reps: Override of the rule's target reps (e.g. top of the
            slot's rep range).
        gate: Progression gate result for this exercise.  A blocking gate
            turns ``ready`` into ``maintain``.
    """
    cfg = config or DEFAULT_ADVISOR_CONFIG
    rule = get_rule(category, cfg)
    reps_goal = target_reps or rule.target_reps
    step = load_step(equipment, cfg.weight_unit)
    unit = cfg.weight_unit

    if not history:
        return ProgressionRecommendation(
            exercise_id=exercise_id,
            status="maintain",
            current_weight=0.0,
            suggested_weight=0.0,
            sessions_at_current_weight=0,
            message="No history for this exercise",
            target_reps=reps_goal,
        )

    latest = history[0]
    current = latest.weight
    at_weight = _sessions_at_current_weight(history)

    if at_weight >= rule.plateau_sessions:
        names = ", ".join(s.name.lower() for s in PLATEAU_STRATEGIES)
        return ProgressionRecommendation(
            exercise_id=exercise_id,
            status="plateau",
            current_weight=current,
            suggested_weight=current,
            sessions_at_current_weight=at_weight,
            message=f"Plateaued at {_fmt(current)} {unit} for {at_weight} sessions. Try: {names}",
            target_reps=reps_goal,
        )

    recent = history[: rule.sessions_required]
    if len(recent) >= rule.sessions_required and all(
        p.weight == current and _qualifies(p, rule, reps_goal) for p in recent
    ):
        if gate is not None and not gate.can_progress:
            return ProgressionRecommendation(
                exercise_id=exercise_id,
                status="maintain",
                current_weight=current,
                suggested_weight=current,
                sessions_at_current_weight=at_weight,
                message=f"Hold {_fmt(current)} {unit}: {gate.reason}. {gate.suggested_action}",
                target_reps=reps_goal,
            )
        increment = compute_increment(current, rule, step)
        new_weight = snap_weight(current + increment, step)
        return ProgressionRecommendation(
            exercise_id=exercise_id,
            status="ready",
            current_weight=current,
            suggested_weight=new_weight,
            sessions_at_current_weight=at_weight,
            message=f"Add {_fmt(increment)} {unit} next session: {_fmt(new_weight)} {unit} x {reps_goal}",
            target_reps=reps_goal,
        )

    if latest.rpe is not None and latest.rpe > cfg.regress_rpe:
        new_weight = max(0.0, snap_weight(current - compute_decrement(current, cfg.regress_fraction, step), step))
        return ProgressionRecommendation(
            exercise_id=exercise_id,
            status="regress",
            current_weight=current,
            suggested_weight=new_weight,
            sessions_at_current_weight=at_weight,
            message=f"Weight too heavy - reduce to {_fmt(new_weight)} {unit}",
            target_reps=reps_goal,
        )

    return ProgressionRecommendation(
        exercise_id=exercise_id,
        status="maintain",
        current_weight=current,
        suggested_weight=current,
        sessions_at_current_weight=at_weight,
        message="Keep current weight until you hit targets",
        target_reps=reps_goal,
    )


# ======================================================================
# Main entry points
# ======================================================================


def load_exercise_history(
    reader: HistoryReader,
    user_id: int,
    exercise_id: str,
    as_of: datetime.date,
    history_days: int = 60,
    limit: Optional[int] = None,
) -> list[ExercisePerformance]:
    """Top set per completed session over the lookback, newest first."""
    since = as_of - datetime.timedelta(days=history_days - 1)
    records = [r for r in reader.list_exercise_sets(user_id, exercise_id, since) if r.session_date <= as_of]
    history = top_sets_by_session(records)
    return history[:limit] if limit else history


def require_exercise(reader: HistoryReader, user_id: int, exercise_id: str) -> ExerciseInfo:
    """Resolve user and exercise or raise NotFoundError."""
    if not reader.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")
    exercise = reader.get_exercise(exercise_id)
    if exercise is None:
        raise NotFoundError(f"Exercise {exercise_id!r} not found")
    return exercise


def get_progression_recommendation(
    reader: HistoryReader,
    user_id: int,
    exercise_id: str,
    as_of: datetime.date,
    config: Optional[AdvisorConfig] = None,
    target_reps: Optional[int] = None,
    gate: Optional[ProgressionGateResult] = None,
) -> ProgressionRecommendation:
    """Fetch the exercise's history and run :func:`recommend_progression`.

    Raises:
        NotFoundError: unknown user or exercise.
    """
    cfg = config or DEFAULT_ADVISOR_CONFIG
    exercise = require_exercise(reader, user_id, exercise_id)
    history = load_exercise_history(reader, user_id, exercise_id, as_of, cfg.history_days, cfg.max_sessions)
    rec = recommend_progression(
        exercise_id, history, exercise.category, exercise.equipment, cfg, target_reps, gate,
    )
    logger.debug("Progression for user %s / %s: %s", user_id, exercise_id, rec.status)
    return rec


def recent_exercise_ids(
    reader: HistoryReader, user_id: int, as_of: datetime.date, days: int,
) -> list[str]:
    since = as_of - datetime.timedelta(days=days - 1)
    return reader.list_recent_exercise_ids(user_id, since, as_of)


def find_plateaued_exercises(
    reader: HistoryReader,
    user_id: int,
    as_of: datetime.date,
    days: int = 30,
    limit: int = 3,
    config: Optional[AdvisorConfig] = None,
) -> list[ProgressionRecommendation]:
    """Exercises trained in the last ``days`` days that are plateaued."""
    if not reader.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")
    plateaued: list[ProgressionRecommendation] = []
    for exercise_id in recent_exercise_ids(reader, user_id, as_of, days):
        rec = get_progression_recommendation(reader, user_id, exercise_id, as_of, config)
        if rec.status == "plateau":
            plateaued.append(rec)
    return plateaued[:limit]
