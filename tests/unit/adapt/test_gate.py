"""
Unit tests for the progression gate.
"""

import datetime

import pytest
from pydantic import ValidationError

from app.adapt.advisor import get_rule
from app.adapt.fatigue import get_fatigue_status
from app.adapt.gate import (
    check_progression_gate,
    evaluate_gate,
    find_exercises_ready_to_progress,
    get_gated_recommendation,
)
from app.core.exceptions import NotFoundError
from app.schemas.exercise import Equipment, ExerciseCategory
from app.schemas.fatigue import FatigueFactors, FatigueResult
from app.schemas.history import ExercisePerformance
from app.schemas.progression import ProgressionGateResult

DAY = datetime.timedelta(days=1)
COMPOUND = get_rule(ExerciseCategory.COMPOUND)


# ======================================================================
# Helpers
# ======================================================================


def _make_fatigue(score: int = 2, recovery_debt: int = 0, as_of: datetime.date = datetime.date(2026, 3, 16)):
    return FatigueResult(
        score=score,
        factors=FatigueFactors(recovery_debt=recovery_debt),
        status=get_fatigue_status(score),
        as_of=as_of,
        window_days=7,
    )


def _make_history(reps: list[int], rpe: float | None = 7.5, weight: float = 200.0):
    start = datetime.date(2026, 3, 15)
    return [
        ExercisePerformance(session_id=i + 1, date=start - i * 2 * DAY, weight=weight, reps=r, rpe=rpe)
        for i, r in enumerate(reps)
    ]


# ======================================================================
# evaluate_gate
# ======================================================================


class TestEvaluateGate:
    @pytest.mark.parametrize("recovery_debt", [0, 3])
    @pytest.mark.parametrize("history", [[], _make_history([8, 8, 8]), _make_history([3], rpe=10.0)])
    def test_high_fatigue_short_circuits(self, history, recovery_debt):
        result = evaluate_gate(_make_fatigue(8, recovery_debt), history, COMPOUND)
        assert result.can_progress is False
        assert result.blocked_by == "fatigue"
        assert result.reason.startswith(get_fatigue_status(8).message)
        assert result.suggested_action == get_fatigue_status(8).action

    def test_no_history_blocks_on_performance(self):
        result = evaluate_gate(_make_fatigue(), [], COMPOUND)
        assert result.blocked_by == "performance"
        assert "history" in result.reason

    def test_missed_reps(self):
        result = evaluate_gate(_make_fatigue(), _make_history([8, 7, 8]), COMPOUND)
        assert result.blocked_by == "performance"
        assert "target reps" in result.reason

    def test_only_three_most_recent_sessions_count(self):
        result = evaluate_gate(_make_fatigue(), _make_history([8, 8, 8, 2]), COMPOUND)
        assert result.can_progress

    def test_rpe_too_high(self):
        result = evaluate_gate(_make_fatigue(), _make_history([8, 8, 8], rpe=9.0), COMPOUND)
        assert result.blocked_by == "performance"
        assert "RPE" in result.reason

    def test_rpe_within_tolerance(self):
        result = evaluate_gate(_make_fatigue(), _make_history([8, 8, 8], rpe=8.5), COMPOUND)
        assert result.can_progress

    def test_missing_rpe_passes_on_reps(self):
        result = evaluate_gate(_make_fatigue(), _make_history([8, 8], rpe=None), COMPOUND)
        assert result.can_progress

    def test_recovery_debt_at_cap(self):
        result = evaluate_gate(_make_fatigue(3, recovery_debt=3), _make_history([8, 8, 8]), COMPOUND)
        assert result.blocked_by == "recovery"

    def test_recovery_debt_below_cap_passes(self):
        result = evaluate_gate(_make_fatigue(2, recovery_debt=2), _make_history([8, 8, 8]), COMPOUND)
        assert result.can_progress

    def test_pass(self):
        result = evaluate_gate(_make_fatigue(), _make_history([8, 9, 10]), COMPOUND)
        assert result.can_progress is True
        assert result.blocked_by is None
        assert result.reason == "Ready to progress"


class TestGateResultInvariant:
    def test_blocked_by_requires_failure(self):
        with pytest.raises(ValidationError):
            ProgressionGateResult(can_progress=True, blocked_by="fatigue", reason="x", suggested_action="y")

    def test_failure_requires_blocked_by(self):
        with pytest.raises(ValidationError):
            ProgressionGateResult(can_progress=False, reason="x", suggested_action="y")


# ======================================================================
# Entry points
# ======================================================================


class TestCheckProgressionGate:
    def test_unknown_exercise(self, store, as_of):
        with pytest.raises(NotFoundError):
            check_progression_gate(store, 1, "unknown_lift", as_of)

    def test_unknown_user(self, store, as_of):
        store.add_exercise("bench_press")
        with pytest.raises(NotFoundError):
            check_progression_gate(store, 5, "bench_press", as_of)

    def test_reads_history_and_fatigue(self, store, as_of):
        store.add_exercise("lateral_raise", ExerciseCategory.ISOLATION, Equipment.DUMBBELL)
        for i in range(3):
            store.add_top_set(1, "lateral_raise", as_of - (2 * i + 1) * DAY, 20.0, 12, rpe=7.0)
        assert check_progression_gate(store, 1, "lateral_raise", as_of).can_progress

    def test_ready_finder_skips_gated_exercises(self, store, as_of):
        store.add_exercise("bench_press")
        store.add_exercise("back_squat")
        store.add_top_set(1, "bench_press", as_of - 3 * DAY, 200.0, 8, rpe=7.5)
        store.add_top_set(1, "back_squat", as_of - 1 * DAY, 300.0, 5, rpe=8.0)

        ready = find_exercises_ready_to_progress(store, 1, as_of)
        assert [r.exercise_id for r in ready] == ["bench_press"]
        assert ready[0].status == "ready"

    def test_gated_recommendation_holds_weight(self, store, as_of):
        store.add_exercise("bench_press")
        store.add_top_set(1, "bench_press", as_of - DAY, 185.0, 8, rpe=8.0)
        for i in range(3):
            store.add_check_in(1, as_of - i * DAY, sleep_hours=4.0, energy_level=2, soreness=5)

        verdict = check_progression_gate(store, 1, "bench_press", as_of)
        assert verdict.can_progress is False

        rec = get_gated_recommendation(store, 1, "bench_press", as_of)
        assert rec.status == "maintain"
        assert rec.suggested_weight == rec.current_weight == 185.0
        assert verdict.suggested_action in rec.message

    def test_gated_recommendation_passes_ready_through(self, store, as_of):
        store.add_exercise("bench_press")
        store.add_top_set(1, "bench_press", as_of - DAY, 185.0, 8, rpe=8.0)
        rec = get_gated_recommendation(store, 1, "bench_press", as_of)
        assert rec.status == "ready"
        assert rec.suggested_weight == 190.0
