"""
Weight and rest suggestions: advisor output to a concrete prescription.

Everything here is pure.  Callers gather the inputs (last top set,
progression recommendation, combined training modifiers, fatigue score)
and get back ``weight x reps @ RPE`` for the next session plus a rest
timer.

One-rep max estimation
----------------------
Brzycki for 2-12 reps, an Epley-style extrapolation past 12 where
Brzycki degrades, identity at a single rep:

    1RM = w                       reps == 1
    1RM = w × 36 / (37 − reps)    2 <= reps <= 12
    1RM = w × (1 + reps / 30)     reps > 12

Rest is prescriptive: it comes from the slot configuration (or a preset
by slot role) and is never changed by fatigue.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, Field

from app.adapt.deload import combine_modifiers
from app.adapt.loading import load_step, round_half_up, snap_weight
from app.schemas.deload import TrainingModifiers
from app.schemas.exercise import Equipment, ExerciseCategory
from app.schemas.progression import ProgressionRecommendation
from app.schemas.suggestion import (
    AfterSetSuggestion,
    LastSet,
    SlotTarget,
    WarmupSet,
    WeightSuggestion,
)

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

_STARTING_WEIGHTS: dict[str, dict[str, float]] = {
    "lbs": {"compound": 95.0, "isolation": 20.0, "default": 45.0},
    "kg": {"compound": 40.0, "isolation": 10.0, "default": 20.0},
}

# (percentage of working weight, reps)
_WARMUP_SCHEME: list[tuple[int, int]] = [(50, 10), (70, 6), (85, 3)]

_REST_PRESETS: dict[str, int] = {
    "compound_heavy": 180,
    "compound_grinding": 240,
    "compound_moderate": 120,
    "isolation": 90,
    "accessory": 60,
}


class SuggestionConfig(BaseModel):
    """Configuration for weight and rest suggestions."""

    weight_unit: str = Field(default="lbs")
    starting_weights: dict[str, dict[str, float]] = Field(default_factory=lambda: dict(_STARTING_WEIGHTS))
    default_rest_seconds: int = Field(default=120, ge=0)
    rest_presets: dict[str, int] = Field(default_factory=lambda: dict(_REST_PRESETS))
    grinding_rpe: float = Field(default=9.0)

    # Fatigue penalty on load (folded into the intensity modifier).
    fatigue_penalty_score: int = Field(default=6, ge=0, le=10)
    fatigue_penalty: float = Field(default=0.9, gt=0.0, le=1.0)
    severe_fatigue_score: int = Field(default=8, ge=0, le=10)
    severe_fatigue_penalty: float = Field(default=0.85, gt=0.0, le=1.0)

    warmup_scheme: list[tuple[int, int]] = Field(default_factory=lambda: list(_WARMUP_SCHEME))
    light_weight_threshold: float = Field(default=50.0, ge=0.0)


DEFAULT_SUGGESTION_CONFIG = SuggestionConfig()


# ======================================================================
# 1RM estimation
# ======================================================================


def calculate_estimated_1rm(weight: float, reps: int) -> float:
    """Estimated one-rep max from a ``weight x reps`` set."""
    if weight <= 0 or reps <= 0:
        return 0.0
    if reps == 1:
        return weight
    if reps > 12:
        return weight * (1 + reps / 30)
    return weight * 36 / (37 - reps)


def weight_for_reps(one_rm: float, reps: int) -> float:
    """Inverse of :func:`calculate_estimated_1rm`: load for ``reps`` at max effort."""
    if one_rm <= 0:
        return 0.0
    if reps <= 1:
        return one_rm
    if reps > 12:
        return one_rm / (1 + reps / 30)
    return one_rm * (37 - reps) / 36


# ======================================================================
# Rest
# ======================================================================


def rest_timer_seconds(
    slot_rest_seconds: Optional[int],
    slot_role: Optional[str] = None,
    category: ExerciseCategory | str | None = None,
    last_rpe: Optional[float] = None,
    config: Optional[SuggestionConfig] = None,
) -> int:
    """Rest between sets.

    The slot's configured seconds win.  Without them, a preset is picked
    from the slot role and exercise category; without a role, the flat
    default (120 s) applies.
    """
    cfg = config or DEFAULT_SUGGESTION_CONFIG
    if slot_rest_seconds is not None:
        return slot_rest_seconds
    if slot_role is None:
        return cfg.default_rest_seconds

    compound = category is not None and ExerciseCategory(category) == ExerciseCategory.COMPOUND
    presets = cfg.rest_presets
    if slot_role == "primary" and compound:
        if last_rpe is not None and last_rpe >= cfg.grinding_rpe:
            return presets["compound_grinding"]
        return presets["compound_heavy"]
    if slot_role == "secondary" and compound:
        return presets["compound_moderate"]
    if slot_role in ("accessory", "optional"):
        return presets["accessory"]
    return presets["isolation"]


# ======================================================================
# Weight
# ======================================================================


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _fatigue_modifiers(fatigue_score: Optional[int], cfg: SuggestionConfig) -> TrainingModifiers:
    if fatigue_score is None or fatigue_score < cfg.fatigue_penalty_score:
        return TrainingModifiers()
    penalty = cfg.severe_fatigue_penalty if fatigue_score >= cfg.severe_fatigue_score else cfg.fatigue_penalty
    return TrainingModifiers(volume_modifier=1.0, intensity_modifier=penalty)


def _starting_weight(category: ExerciseCategory | str, cfg: SuggestionConfig) -> float:
    table = cfg.starting_weights.get(cfg.weight_unit, _STARTING_WEIGHTS["lbs"])
    key = ExerciseCategory(category).value if category else "default"
    return table.get(key, table["default"])


def suggest_weight(
    target: SlotTarget,
    last_set: Optional[LastSet] = None,
    recommendation: Optional[ProgressionRecommendation] = None,
    modifiers: Optional[TrainingModifiers] = None,
    category: ExerciseCategory | str = ExerciseCategory.COMPOUND,
    equipment: Equipment | str = Equipment.BARBELL,
    fatigue_score: Optional[int] = None,
    config: Optional[SuggestionConfig] = None,
) -> WeightSuggestion:
    """Suggest ``weight x reps @ RPE``, sets and rest for the next session.

    Base load, by available information:

    * progression recommendation with history: its suggested weight when
      ``ready``/``regress`` (reps restart at the bottom of the range),
      otherwise the current weight with one more rep than last time;
    * only a last set: the load that hits the slot's reps at the slot's
      RPE, via the estimated 1RM;
    * nothing: a category starting weight (low confidence).

    The load is then scaled by the intensity modifier (deload, return
    from a break, fatigue penalty; most conservative wins) and snapped
    to the equipment step.  Sets are scaled by the volume modifier.
    """
    cfg = config or DEFAULT_SUGGESTION_CONFIG
    step = load_step(equipment, cfg.weight_unit)
    unit = cfg.weight_unit
    rest = rest_timer_seconds(
        target.rest_seconds, target.slot_role, category, last_set.rpe if last_set else None, cfg,
    )
    estimated_1rm = calculate_estimated_1rm(last_set.weight, last_set.reps) if last_set else None

    if recommendation is not None and recommendation.current_weight > 0:
        if recommendation.status in ("ready", "regress"):
            base = recommendation.suggested_weight
            reps = target.rep_range_min
        else:
            base = recommendation.current_weight
            if last_set is not None and last_set.weight == base:
                reps = _clamp(last_set.reps + 1, target.rep_range_min, target.rep_range_max)
            else:
                reps = target.rep_range_min
        confidence = "high"
        basis = recommendation.message
    elif last_set is not None:
        reps = _clamp(last_set.reps, target.rep_range_min, target.rep_range_max)
        last_rir = 10 - last_set.rpe if last_set.rpe else 0.0
        effective_1rm = calculate_estimated_1rm(last_set.weight, last_set.reps + round_half_up(max(0.0, last_rir)))
        target_rir = round_half_up(max(0.0, 10 - target.rpe_target))
        base = weight_for_reps(effective_1rm, reps + target_rir)
        confidence = "medium"
        basis = f"Estimated 1RM {estimated_1rm:.0f} {unit} from last session"
    else:
        base = _starting_weight(category, cfg)
        reps = target.rep_range_max
        confidence = "low"
        basis = "Default starting weight (no history)"

    deload_mods = modifiers or TrainingModifiers()
    mods = combine_modifiers(deload_mods, _fatigue_modifiers(fatigue_score, cfg), strategy="min")

    base_weight = snap_weight(base, step)
    weight = snap_weight(base * mods.intensity_modifier, step)
    sets = max(1, round_half_up(target.sets * mods.volume_modifier))
    is_deload = deload_mods.volume_modifier < 1.0 or deload_mods.intensity_modifier < 1.0

    reasoning = basis
    if weight != base_weight:
        reasoning += f"; load at {mods.intensity_modifier:.0%} ({_fmt_weight(base_weight)} -> {_fmt_weight(weight)} {unit})"
    if sets != target.sets:
        reasoning += f"; {sets} of {target.sets} sets"

    return WeightSuggestion(
        weight=weight,
        reps=max(1, reps),
        rpe_target=target.rpe_target,
        sets=sets,
        rest_seconds=rest,
        estimated_1rm=round(estimated_1rm, 1) if estimated_1rm is not None else None,
        confidence=confidence,
        is_deload=is_deload,
        original_weight=base_weight if weight != base_weight else None,
        reasoning=reasoning,
    )


def _fmt_weight(weight: float) -> str:
    return f"{weight:g}"


# ======================================================================
# Intra-session helpers
# ======================================================================


def warmup_sets(
    working_weight: float,
    step: float = 5.0,
    config: Optional[SuggestionConfig] = None,
) -> list[WarmupSet]:
    """Ramp-up sets before the first working set (one set for light loads)."""
    cfg = config or DEFAULT_SUGGESTION_CONFIG
    if working_weight <= 0:
        return []
    scheme = cfg.warmup_scheme[:1] if working_weight < cfg.light_weight_threshold else cfg.warmup_scheme
    return [
        WarmupSet(
            set_number=i,
            percentage=pct,
            weight=snap_weight(working_weight * pct / 100, step),
            reps=reps,
        )
        for i, (pct, reps) in enumerate(scheme, start=1)
    ]


def suggest_after_set(
    set_number: int,
    total_sets: int,
    completed_reps: int,
    target_reps: int,
    rpe: float,
    target_rpe: float,
    current_weight: float,
    step: float = 5.0,
) -> AfterSetSuggestion:
    """React to a finished working set by comparing its RPE with the target."""
    rpe_diff = rpe - target_rpe

    if rpe_diff >= 2:
        if set_number >= total_sets - 1:
            return AfterSetSuggestion(
                action="stop", next_weight=current_weight,
                message="Consider ending here - very high RPE",
            )
        return AfterSetSuggestion(
            action="reduce",
            next_weight=snap_weight(current_weight * 0.9, step, mode="down"),
            message="Consider reducing weight by 5-10%",
        )

    if rpe_diff >= 1:
        return AfterSetSuggestion(
            action="continue", next_weight=current_weight,
            message="Harder than target - maintain weight next set",
        )

    if rpe_diff <= -2 and set_number == total_sets and completed_reps >= target_reps:
        return AfterSetSuggestion(
            action="add_set", next_weight=current_weight,
            message="Feeling strong? Add a bonus set",
        )

    if rpe_diff <= -1 and set_number == total_sets:
        return AfterSetSuggestion(
            action="continue", next_weight=current_weight,
            message="Good session - consider adding weight next time",
        )

    return AfterSetSuggestion(action="continue", next_weight=current_weight, message=None)
