"""
Unit tests for the progression advisor.
"""

import datetime

import pytest

from app.adapt.advisor import (
    PLATEAU_STRATEGIES,
    AdvisorConfig,
    compute_decrement,
    compute_increment,
    find_plateaued_exercises,
    get_plateau_strategies,
    get_progression_recommendation,
    get_rule,
    recommend_progression,
)
from app.core.exceptions import NotFoundError
from app.schemas.exercise import Equipment, ExerciseCategory
from app.schemas.history import ExercisePerformance
from app.schemas.progression import ProgressionGateResult

DAY = datetime.timedelta(days=1)


# ======================================================================
# Helpers
# ======================================================================


def _make_history(*sets: tuple[float, int, float | None]) -> list[ExercisePerformance]:
    """``(weight, reps, rpe)`` per session, newest first."""
    start = datetime.date(2026, 3, 15)
    return [
        ExercisePerformance(session_id=i + 1, date=start - i * 3 * DAY, weight=w, reps=r, rpe=rpe)
        for i, (w, r, rpe) in enumerate(sets)
    ]


def _recommend(history, category=ExerciseCategory.COMPOUND, equipment=Equipment.BARBELL, **kwargs):
    return recommend_progression("lift", history, category, equipment, **kwargs)


# ======================================================================
# Increments
# ======================================================================


class TestIncrements:
    @pytest.mark.parametrize(
        "weight, step, expected",
        [(100.0, 5.0, 5.0), (200.0, 5.0, 5.0), (300.0, 5.0, 10.0), (405.0, 5.0, 15.0)],
    )
    def test_compound_increment(self, weight, step, expected):
        assert compute_increment(weight, get_rule(ExerciseCategory.COMPOUND), step) == expected

    def test_isolation_increment_at_least_one_step(self):
        assert compute_increment(30.0, get_rule(ExerciseCategory.ISOLATION), 5.0) == 5.0
        assert compute_increment(30.0, get_rule(ExerciseCategory.ISOLATION), 2.5) == 2.5

    def test_decrement(self):
        assert compute_decrement(200.0, 0.10, 5.0) == 20.0
        assert compute_decrement(187.5, 0.10, 5.0) == 15.0
        assert compute_decrement(20.0, 0.10, 5.0) == 5.0


# ======================================================================
# recommend_progression
# ======================================================================


class TestRecommendProgression:
    def test_no_history(self):
        rec = _recommend([])
        assert rec.status == "maintain"
        assert rec.current_weight == rec.suggested_weight == 0.0
        assert rec.message == "No history for this exercise"

    def test_isolation_plateau(self):
        rec = _recommend(_make_history(*[(30.0, 10, None)] * 5), ExerciseCategory.ISOLATION, Equipment.DUMBBELL)
        assert rec.status == "plateau"
        assert rec.sessions_at_current_weight >= 4
        assert rec.suggested_weight == rec.current_weight == 30.0
        assert "Plateaued at 30 lbs for 5 sessions" in rec.message
        assert "rep range shift" in rec.message

    def test_compound_needs_four_sessions_for_plateau(self):
        history = _make_history(*[(200.0, 6, 8.0)] * 3)
        assert _recommend(history).status == "maintain"
        history = _make_history(*[(200.0, 6, 8.0)] * 4)
        assert _recommend(history).status == "plateau"

    def test_plateau_checked_before_ready(self):
        history = _make_history(*[(200.0, 8, 7.0)] * 4)
        assert _recommend(history).status == "plateau"

    def test_ready(self):
        rec = _recommend(_make_history((200.0, 8, 7.5), (195.0, 8, 8.0)))
        assert rec.status == "ready"
        assert rec.suggested_weight == 205.0
        assert rec.message == "Add 5 lbs next session: 205 lbs x 8"

    def test_ready_uses_percentage_for_heavy_compounds(self):
        rec = _recommend(_make_history((300.0, 8, 8.0)))
        assert rec.suggested_weight == 310.0

    def test_ready_without_rpe(self):
        assert _recommend(_make_history((200.0, 8, None))).status == "ready"

    def test_target_reps_override(self):
        history = _make_history((200.0, 8, 7.0))
        assert _recommend(history, target_reps=10).status == "maintain"

    def test_regress(self):
        rec = _recommend(_make_history((200.0, 6, 10.0)))
        assert rec.status == "regress"
        assert rec.suggested_weight == 180.0
        assert "too heavy" in rec.message

    def test_regress_regardless_of_reps(self):
        rec = _recommend(_make_history((100.0, 12, 9.6)), ExerciseCategory.ISOLATION, Equipment.CABLE)
        assert rec.status == "regress"
        assert rec.suggested_weight == 90.0

    def test_maintain(self):
        rec = _recommend(_make_history((200.0, 7, 8.5)))
        assert rec.status == "maintain"
        assert rec.suggested_weight == rec.current_weight == 200.0

    def test_kg_units(self):
        rec = _recommend(_make_history((100.0, 8, 7.0)), config=AdvisorConfig(weight_unit="kg"))
        assert rec.suggested_weight == 105.0
        assert rec.message == "Add 5 kg next session: 105 kg x 8"

    def test_kg_regress_uses_smaller_step(self):
        rec = _recommend(_make_history((62.5, 5, 10.0)), config=AdvisorConfig(weight_unit="kg"))
        assert rec.suggested_weight == 57.5

    def test_blocked_gate_holds_ready_weight(self):
        gate = ProgressionGateResult(
            can_progress=False, blocked_by="recovery",
            reason="Recovery debt maxed out", suggested_action="Focus on recovery before progressing",
        )
        rec = _recommend(_make_history((200.0, 8, 7.5)), gate=gate)
        assert rec.status == "maintain"
        assert rec.suggested_weight == rec.current_weight == 200.0
        assert rec.message == "Hold 200 lbs: Recovery debt maxed out. Focus on recovery before progressing"

    def test_passing_gate_keeps_ready(self):
        gate = ProgressionGateResult(
            can_progress=True, blocked_by=None, reason="Ready to progress", suggested_action="Add 5 lbs",
        )
        assert _recommend(_make_history((200.0, 8, 7.5)), gate=gate).suggested_weight == 205.0

    def test_blocked_gate_does_not_stop_regress(self):
        gate = ProgressionGateResult(
            can_progress=False, blocked_by="fatigue", reason="Very high fatigue", suggested_action="Deload",
        )
        assert _recommend(_make_history((200.0, 6, 10.0)), gate=gate).status == "regress"


class TestPlateauStrategies:
    def test_four_strategies(self):
        keys = [s.key for s in get_plateau_strategies()]
        assert keys == ["rep_range_shift", "variation_swap", "volume_increase", "deload_then_push"]

    def test_returns_copy(self):
        get_plateau_strategies().clear()
        assert len(PLATEAU_STRATEGIES) == 4


# ======================================================================
# Entry points
# ======================================================================


class TestGetProgressionRecommendation:
    def test_unknown_exercise(self, store, as_of):
        with pytest.raises(NotFoundError):
            get_progression_recommendation(store, 1, "nope", as_of)

    def test_top_set_ignores_warmups(self, store, as_of):
        store.add_exercise("bench_press")
        store.add_top_set(1, "bench_press", as_of - DAY, 200.0, 8, rpe=7.0, warmups=3)
        rec = get_progression_recommendation(store, 1, "bench_press", as_of)
        assert rec.current_weight == 200.0
        assert rec.status == "ready"

    def test_history_after_as_of_ignored(self, store, as_of):
        store.add_exercise("bench_press")
        store.add_top_set(1, "bench_press", as_of - DAY, 200.0, 8, rpe=7.0)
        store.add_top_set(1, "bench_press", as_of + DAY, 250.0, 1, rpe=10.0)
        assert get_progression_recommendation(store, 1, "bench_press", as_of).current_weight == 200.0

    def test_find_plateaued(self, store, as_of):
        store.add_exercise("bicep_curl", ExerciseCategory.ISOLATION, Equipment.DUMBBELL)
        store.add_exercise("bench_press")
        for i in range(5):
            store.add_top_set(1, "bicep_curl", as_of - (i * 3 + 1) * DAY, 30.0, 10)
        store.add_top_set(1, "bench_press", as_of - 2 * DAY, 200.0, 8, rpe=7.0)

        plateaued = find_plateaued_exercises(store, 1, as_of)
        assert [r.exercise_id for r in plateaued] == ["bicep_curl"]
