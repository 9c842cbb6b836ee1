"""
Progression gate: may this exercise go up in load this cycle?

Three sequential, short-circuiting checks.  The first failing gate
decides the result:

1. **fatigue**     - overall fatigue score at or above the high band (7).
2. **performance** - the most recent sessions (up to 3) must all reach
   the target reps, at a mean RPE no more than 0.5 above the category
   ceiling.  Missing history fails this gate as "not enough history"
   rather than raising.
3. **recovery**    - recovery debt at its cap (3).

``blocked_by`` is ``None`` exactly when ``can_progress`` is true.
"""

from __future__ import annotations

import datetime
import logging
from typing import Optional

from pydantic import BaseModel, Field

from app.adapt.advisor import (
    AdvisorConfig,
    DEFAULT_ADVISOR_CONFIG,
    ProgressionRule,
    get_progression_recommendation,
    get_rule,
    load_exercise_history,
    recent_exercise_ids,
    require_exercise,
)
from app.adapt.fatigue import compute_fatigue
from app.adapt.history import HistoryReader
from app.core.exceptions import NotFoundError
from app.schemas.fatigue import FatigueResult
from app.schemas.history import ExercisePerformance
from app.schemas.progression import ProgressionGateResult, ProgressionRecommendation

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================


class GateConfig(BaseModel):
    """Thresholds for the progression gate."""

    fatigue_block_score: int = Field(default=7, ge=0, le=10)
    recent_sessions: int = Field(default=3, ge=1)
    rpe_tolerance: float = Field(default=0.5, ge=0.0)
    recovery_block_debt: int = Field(default=3, ge=1, le=3)


DEFAULT_GATE_CONFIG = GateConfig()


# ======================================================================
# Individual gates
# ======================================================================


def _blocked(blocked_by: str, reason: str, action: str) -> ProgressionGateResult:
    return ProgressionGateResult(
        can_progress=False, blocked_by=blocked_by, reason=reason, suggested_action=action,
    )


def _check_fatigue_gate(fatigue: FatigueResult, cfg: GateConfig) -> Optional[ProgressionGateResult]:
    if fatigue.score >= cfg.fatigue_block_score:
        return _blocked(
            "fatigue",
            f"{fatigue.status.message} (fatigue {fatigue.score}/10)",
            fatigue.status.action,
        )
    return None


def _check_performance_gate(
    history: list[ExercisePerformance],
    rule: ProgressionRule,
    cfg: GateConfig,
    target_reps: Optional[int] = None,
) -> Optional[ProgressionGateResult]:
    reps_goal = target_reps or rule.target_reps
    recent = history[: cfg.recent_sessions]

    if not recent:
        return _blocked(
            "performance",
            "Not enough history for this exercise yet",
            "Log a few sessions at a moderate weight first",
        )

    if any(p.reps < reps_goal for p in recent):
        return _blocked(
            "performance",
            f"Didn't hit target reps ({reps_goal}+) in recent sessions",
            "Keep weight until you hit all reps",
        )

    rpes = [p.rpe for p in recent if p.rpe is not None]
    if rpes:
        avg_rpe = sum(rpes) / len(rpes)
        if avg_rpe > rule.max_rpe + cfg.rpe_tolerance:
            return _blocked(
                "performance",
                f"RPE too high ({avg_rpe:.1f} avg) - need more margin",
                f"Get RPE under {rule.max_rpe:g} before adding weight",
            )
    return None


def _check_recovery_gate(fatigue: FatigueResult, cfg: GateConfig) -> Optional[ProgressionGateResult]:
    if fatigue.factors.recovery_debt >= cfg.recovery_block_debt:
        return _blocked(
            "recovery",
            "Recovery debt maxed out - check-ins point to under-recovery",
            "Focus on recovery before progressing",
        )
    return None


def evaluate_gate(
    fatigue: FatigueResult,
    history: list[ExercisePerformance],
    rule: ProgressionRule,
    config: Optional[GateConfig] = None,
    target_reps: Optional[int] = None,
    weight_unit: str = "lbs",
) -> ProgressionGateResult:
    """Run the gates in order against already gathered inputs."""
    cfg = config or DEFAULT_GATE_CONFIG

    blocked = (
        _check_fatigue_gate(fatigue, cfg)
        or _check_performance_gate(history, rule, cfg, target_reps)
        or _check_recovery_gate(fatigue, cfg)
    )
    if blocked is not None:
        return blocked

    return ProgressionGateResult(
        can_progress=True,
        blocked_by=None,
        reason="Ready to progress",
        suggested_action=f"Add {rule.fixed_increment:g} {weight_unit} or more next session",
    )


# ======================================================================
# Main entry points
# ======================================================================


def check_progression_gate(
    reader: HistoryReader,
    user_id: int,
    exercise_id: str,
    as_of: datetime.date,
    fatigue: Optional[FatigueResult] = None,
    config: Optional[GateConfig] = None,
    advisor_config: Optional[AdvisorConfig] = None,
) -> ProgressionGateResult:
    """Decide whether ``exercise_id`` may progress in load.

    Raises:
        NotFoundError: unknown user or exercise.
    """
    acfg = advisor_config or DEFAULT_ADVISOR_CONFIG
    exercise = require_exercise(reader, user_id, exercise_id)
    if fatigue is None:
        fatigue = compute_fatigue(reader, user_id, as_of)

    history = load_exercise_history(reader, user_id, exercise_id, as_of, acfg.history_days)
    result = evaluate_gate(
        fatigue, history, get_rule(exercise.category, acfg), config, weight_unit=acfg.weight_unit,
    )
    logger.debug(
        "Gate for user %s / %s: can_progress=%s blocked_by=%s",
        user_id, exercise_id, result.can_progress, result.blocked_by,
    )
    return result


def get_gated_recommendation(
    reader: HistoryReader,
    user_id: int,
    exercise_id: str,
    as_of: datetime.date,
    fatigue: Optional[FatigueResult] = None,
    config: Optional[GateConfig] = None,
    advisor_config: Optional[AdvisorConfig] = None,
) -> ProgressionRecommendation:
    """Run the gate, then the advisor with the gate's verdict.

    A blocked gate never yields a ``ready`` recommendation.
    """
    result = check_progression_gate(reader, user_id, exercise_id, as_of, fatigue, config, advisor_config)
    return get_progression_recommendation(reader, user_id, exercise_id, as_of, advisor_config, gate=result)


def find_exercises_ready_to_progress(
    reader: HistoryReader,
    user_id: int,
    as_of: datetime.date,
    days: int = 14,
    limit: int = 5,
    config: Optional[GateConfig] = None,
    advisor_config: Optional[AdvisorConfig] = None,
) -> list[ProgressionRecommendation]:
    """Recently trained exercises that pass the gate and are ``ready``."""
    if not reader.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")
    fatigue = compute_fatigue(reader, user_id, as_of)

    ready: list[ProgressionRecommendation] = []
    for exercise_id in recent_exercise_ids(reader, user_id, as_of, days):
        gate = check_progression_gate(reader, user_id, exercise_id, as_of, fatigue, config, advisor_config)
        if not gate.can_progress:
            continue
        rec = get_progression_recommendation(reader, user_id, exercise_id, as_of, advisor_config, gate=gate)
        if rec.status == "ready":
            ready.append(rec)
        if len(ready) >= limit:
            break
    return ready
