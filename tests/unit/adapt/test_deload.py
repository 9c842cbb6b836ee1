"""
Unit tests for deload decisions, the active-period lifecycle and
modifier handling.
"""

import datetime

import pytest

from app.adapt.deload import (
    DEFAULT_DELOAD_CONFIG,
    adjust_prescription,
    apply_deload_modifiers,
    check_deload_needed,
    combine_modifiers,
    days_remaining,
    end_active_deload,
    end_deload,
    evaluate_deload_rules,
    get_active_deload,
    get_deload_history,
    manual_decision,
    return_from_break_modifiers,
    start_deload,
)
from app.adapt.fatigue import get_fatigue_status
from app.core.exceptions import ConflictError, NotFoundError
from app.schemas.deload import DeloadDecision, DeloadPeriodRecord, TrainingModifiers
from app.schemas.fatigue import FatigueFactors, FatigueResult

DAY = datetime.timedelta(days=1)


# ======================================================================
# Helpers
# ======================================================================


def _make_fatigue(as_of: datetime.date, score: int, recovery_debt: int = 0) -> FatigueResult:
    return FatigueResult(
        score=score,
        factors=FatigueFactors(recovery_debt=recovery_debt),
        status=get_fatigue_status(score),
        as_of=as_of,
        window_days=7,
    )


def _make_period(start: datetime.date, duration: int = 7, active: bool = True) -> DeloadPeriodRecord:
    return DeloadPeriodRecord(
        id=1, user_id=1, deload_type="volume", trigger_reason="test", start_date=start,
        duration_days=duration, volume_modifier=0.6, intensity_modifier=1.0, is_active=active,
    )


def _start(store, as_of, deload_type="volume", **kwargs):
    return start_deload(store, 1, manual_decision(deload_type, **kwargs), as_of)


# ======================================================================
# days_remaining
# ======================================================================


class TestDaysRemaining:
    def test_midway(self, as_of):
        assert days_remaining(_make_period(as_of - 3 * DAY), as_of) == 4

    def test_expired_at_duration(self, as_of):
        assert days_remaining(_make_period(as_of - 7 * DAY), as_of) == 0

    def test_never_negative(self, as_of):
        assert days_remaining(_make_period(as_of - 30 * DAY), as_of) == 0

    def test_first_day_counts_full_duration(self, as_of):
        assert days_remaining(_make_period(as_of), as_of) == 7

    def test_closed_period(self, as_of):
        assert days_remaining(_make_period(as_of, active=False), as_of) == 0


# ======================================================================
# Decision rules
# ======================================================================


class TestEvaluateDeloadRules:
    def test_critical_score(self, as_of):
        decision = evaluate_deload_rules(_make_fatigue(as_of, 9), {}, None)
        assert decision.should_deload
        assert decision.trigger == "critical_score"
        assert decision.deload_type == "combined"
        assert (decision.volume_modifier, decision.intensity_modifier) == (0.6, 0.85)

    def test_two_high_days(self, as_of):
        decision = evaluate_deload_rules(_make_fatigue(as_of, 8), {as_of - 2 * DAY: 8}, None)
        assert decision.trigger == "critical_history"

    def test_todays_log_replaced_by_fresh_score(self, as_of):
        # The stale 8 logged earlier today must not count twice.
        decision = evaluate_deload_rules(_make_fatigue(as_of, 8), {as_of: 8}, None)
        assert decision.trigger != "critical_history"

    def test_elevated_run(self, as_of):
        scores = {as_of - i * DAY: 6 for i in range(1, 5)}
        decision = evaluate_deload_rules(_make_fatigue(as_of, 6), scores, None)
        assert decision.trigger == "elevated_history"
        assert decision.deload_type == "volume"
        assert decision.duration_days == DEFAULT_DELOAD_CONFIG.elevated_duration_days

    def test_recovery_debt(self, as_of):
        decision = evaluate_deload_rules(_make_fatigue(as_of, 7, recovery_debt=2), {}, None)
        assert decision.trigger == "recovery_debt"
        assert decision.deload_type == "intensity"
        assert decision.intensity_modifier == 0.85

    def test_high_score_without_recovery_debt(self, as_of):
        decision = evaluate_deload_rules(_make_fatigue(as_of, 7, recovery_debt=1), {}, None)
        assert not decision.should_deload

    @pytest.mark.parametrize("weeks, expected", [(4.0, True), (6.5, True), (3.9, False), (None, False)])
    def test_scheduled(self, as_of, weeks, expected):
        decision = evaluate_deload_rules(_make_fatigue(as_of, 2), {}, weeks)
        assert decision.should_deload is expected
        if expected:
            assert decision.trigger == "scheduled"

    def test_decision_carries_score(self, as_of):
        assert evaluate_deload_rules(_make_fatigue(as_of, 3), {}, None).fatigue_score == 3


class TestCheckDeloadNeeded:
    def test_no_new_deload_while_active(self, store, as_of):
        _start(store, as_of - 2 * DAY)
        decision = check_deload_needed(store, 1, as_of, _make_fatigue(as_of, 10))
        assert not decision.should_deload
        assert "already in progress" in decision.reason

    def test_expired_active_row_does_not_block(self, store, as_of):
        _start(store, as_of - 10 * DAY)
        decision = check_deload_needed(store, 1, as_of, _make_fatigue(as_of, 9))
        assert decision.should_deload

    def test_scheduled_from_first_session(self, store, as_of):
        store.add_session(1, as_of - 35 * DAY)
        decision = check_deload_needed(store, 1, as_of, _make_fatigue(as_of, 0))
        assert decision.trigger == "scheduled"

    def test_scheduled_counts_from_last_deload_end(self, store, as_of):
        store.add_session(1, as_of - 60 * DAY)
        period = _start(store, as_of - 20 * DAY)
        end_deload(store, period.id, as_of - 15 * DAY)
        decision = check_deload_needed(store, 1, as_of, _make_fatigue(as_of, 0))
        assert not decision.should_deload

    def test_uses_fatigue_log(self, store, as_of):
        store.add_fatigue_log(1, as_of - DAY, 8)
        decision = check_deload_needed(store, 1, as_of, _make_fatigue(as_of, 8))
        assert decision.trigger == "critical_history"

    def test_unknown_user(self, store, as_of):
        with pytest.raises(NotFoundError):
            check_deload_needed(store, 7, as_of, _make_fatigue(as_of, 0))


# ======================================================================
# Lifecycle
# ======================================================================


class TestStartDeload:
    def test_manual_defaults_from_preset(self, store, as_of):
        period = _start(store, as_of, "intensity")
        assert period.duration_days == 5
        assert (period.volume_modifier, period.intensity_modifier) == (0.8, 0.85)
        assert period.trigger_reason == "Manual deload"

    def test_manual_overrides(self, store, as_of):
        period = _start(store, as_of, "combined", duration_days=10, reason="Travel", volume_modifier=0.5)
        assert period.duration_days == 10
        assert period.trigger_reason == "Travel"
        assert period.volume_modifier == 0.5
        assert period.intensity_modifier == 0.85

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            manual_decision("full_rest")

    def test_second_start_conflicts_and_keeps_original(self, store, as_of):
        original = _start(store, as_of)
        with pytest.raises(ConflictError):
            _start(store, as_of + DAY, "combined")

        active = get_active_deload(store, 1, as_of + DAY)
        assert active.period == original
        assert len(store.deloads) == 1

    def test_expired_active_row_closed_before_new_start(self, store, as_of):
        old = _start(store, as_of - 10 * DAY)
        new = _start(store, as_of)

        closed = store.get_deload_period(old.id)
        assert not closed.is_active
        assert closed.ended_on == old.planned_end
        assert new.is_active

    def test_rejects_negative_decision(self, store, as_of):
        with pytest.raises(ValueError):
            start_deload(store, 1, DeloadDecision(should_deload=False, reason="No deload needed"), as_of)

    def test_unknown_user(self, store, as_of):
        with pytest.raises(NotFoundError):
            start_deload(store, 9, manual_decision(), as_of)


class TestActiveDeload:
    def test_active_view(self, store, as_of):
        _start(store, as_of - 3 * DAY)
        active = get_active_deload(store, 1, as_of)
        assert active.days_remaining == 4
        assert active.days_elapsed == 3
        assert active.ends_on == as_of + 4 * DAY
        assert active.modifiers == TrainingModifiers(volume_modifier=0.6, intensity_modifier=1.0)

    def test_lazy_expiry(self, store, as_of):
        _start(store, as_of - 7 * DAY)
        assert get_active_deload(store, 1, as_of) is None
        # The row itself is untouched by reading.
        assert store.get_active_deload_period(1) is not None

    def test_none_without_deload(self, store, as_of):
        assert get_active_deload(store, 1, as_of) is None


class TestEndDeload:
    def test_end_is_idempotent(self, store, as_of):
        period = _start(store, as_of - 2 * DAY)
        first = end_deload(store, period.id, as_of)
        second = end_deload(store, period.id, as_of + 3 * DAY)
        assert first == second
        assert second.ended_on == as_of
        assert get_active_deload(store, 1, as_of) is None

    def test_unknown_period(self, store, as_of):
        with pytest.raises(NotFoundError):
            end_deload(store, 404, as_of)

    def test_end_active_without_deload(self, store, as_of):
        assert end_active_deload(store, 1, as_of) is None

    def test_history_newest_first(self, store, as_of):
        first = _start(store, as_of - 40 * DAY)
        second = _start(store, as_of)
        assert [p.id for p in get_deload_history(store, 1)] == [second.id, first.id]


# ======================================================================
# Modifiers
# ======================================================================


class TestModifiers:
    def test_no_deload_is_identity(self):
        assert apply_deload_modifiers(None) == TrainingModifiers(volume_modifier=1.0, intensity_modifier=1.0)

    def test_period_modifiers(self, as_of):
        assert apply_deload_modifiers(_make_period(as_of)).volume_modifier == 0.6

    @pytest.mark.parametrize("days, intensity", [(None, 1.0), (1, 1.0), (3, 0.9), (6, 0.9), (7, 0.85), (30, 0.85)])
    def test_return_from_break(self, days, intensity):
        mods = return_from_break_modifiers(days)
        assert mods.intensity_modifier == intensity
        assert mods.volume_modifier == 1.0

    def test_combine_min(self):
        mods = combine_modifiers(
            TrainingModifiers(volume_modifier=0.6, intensity_modifier=1.0),
            TrainingModifiers(volume_modifier=1.0, intensity_modifier=0.9),
            TrainingModifiers(volume_modifier=0.8, intensity_modifier=0.85),
        )
        assert mods == TrainingModifiers(volume_modifier=0.6, intensity_modifier=0.85)

    def test_combine_multiply_stacks_intensity_only(self):
        mods = combine_modifiers(
            TrainingModifiers(volume_modifier=0.6, intensity_modifier=0.9),
            TrainingModifiers(volume_modifier=0.8, intensity_modifier=0.85),
            strategy="multiply",
        )
        assert mods.volume_modifier == 0.6
        assert mods.intensity_modifier == pytest.approx(0.765)

    def test_combine_nothing(self):
        assert combine_modifiers() == TrainingModifiers()

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            combine_modifiers(TrainingModifiers(), strategy="max")


class TestAdjustPrescription:
    @pytest.mark.parametrize(
        "volume, intensity, sets, weight, expected",
        [
            (0.6, 0.85, 4, 200.0, (2, 170.0)),
            (0.5, 1.0, 5, 135.0, (3, 135.0)),
            (0.1, 1.0, 2, 100.0, (1, 100.0)),
            (1.0, 0.9, 3, 187.5, (3, 170.0)),
        ],
    )
    def test_scaling(self, volume, intensity, sets, weight, expected):
        mods = TrainingModifiers(volume_modifier=volume, intensity_modifier=intensity)
        assert adjust_prescription(mods, sets, weight, step=5.0) == expected
