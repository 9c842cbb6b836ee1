"""
Unit tests for fatigue scoring.

Factor helpers are tested directly on snapshots; the entry points are
tested against the in-memory store.
"""

import datetime

import pytest

from app.adapt.fatigue import (
    DEFAULT_FATIGUE_CONFIG,
    FatigueConfig,
    REC_HIGH_RPE,
    REC_LOW_ENERGY,
    REC_RPE_CREEP,
    REC_SEVERE_SLEEP,
    REC_VOLUME_SPIKE,
    _count_consecutive_days,
    _score_performance_drop,
    _score_recovery_debt,
    _score_rpe_creep,
    _score_volume_load,
    build_fatigue_result,
    compute_fatigue,
    get_fatigue_history,
    get_fatigue_status,
    log_fatigue,
)
from app.core.exceptions import NotFoundError
from app.schemas.history import RecoveryEntry, SessionSummary

CFG = DEFAULT_FATIGUE_CONFIG
DAY = datetime.timedelta(days=1)


# ======================================================================
# Helpers
# ======================================================================


def _make_sessions(
    as_of: datetime.date,
    rpes_oldest_first: list[float | None],
    volume: float = 0.0,
) -> list[SessionSummary]:
    """One session per day ending at ``as_of``, returned newest first."""
    n = len(rpes_oldest_first)
    sessions = [
        SessionSummary(session_id=i + 1, date=as_of - (n - 1 - i) * DAY, avg_rpe=rpe, total_volume=volume)
        for i, rpe in enumerate(rpes_oldest_first)
    ]
    return list(reversed(sessions))


def _make_check_in(date: datetime.date, **metrics) -> RecoveryEntry:
    return RecoveryEntry(date=date, **metrics)


# ======================================================================
# get_fatigue_status
# ======================================================================


class TestFatigueStatus:
    """Score to band mapping, including every boundary."""

    @pytest.mark.parametrize(
        "score, level, color",
        [
            (0, "fresh", "green"),
            (2, "fresh", "green"),
            (3, "normal", "green"),
            (4, "normal", "green"),
            (5, "elevated", "yellow"),
            (6, "elevated", "yellow"),
            (7, "high", "orange"),
            (8, "high", "orange"),
            (9, "critical", "red"),
            (10, "critical", "red"),
        ],
    )
    def test_bands(self, score, level, color):
        status = get_fatigue_status(score)
        assert status.level == level
        assert status.color == color

    def test_out_of_range_is_still_labelled(self):
        assert get_fatigue_status(14).level == "critical"

    def test_messages_are_fixed_per_band(self):
        assert get_fatigue_status(7).message == get_fatigue_status(8).message
        assert get_fatigue_status(7).action == "Take a deload week or reduce volume 40%"


# ======================================================================
# RPE factors
# ======================================================================


class TestRpeCreep:
    def test_rising_rpe_scores_two(self, as_of):
        sessions = _make_sessions(as_of, [7.0, 7.0, 7.5, 8.5, 9.0])
        assert _score_rpe_creep(sessions, CFG) == 2

    def test_two_sessions_never_score(self, as_of):
        sessions = _make_sessions(as_of, [6.0, 10.0])
        assert _score_rpe_creep(sessions, CFG) == 0

    def test_flat_rpe_scores_zero(self, as_of):
        sessions = _make_sessions(as_of, [8.0, 8.0, 8.0, 8.0])
        assert _score_rpe_creep(sessions, CFG) == 0

    def test_missing_rpe_is_excluded(self, as_of):
        # Only two sessions carry an RPE: not enough to call a trend.
        sessions = _make_sessions(as_of, [None, 6.0, None, 9.5])
        assert _score_rpe_creep(sessions, CFG) == 0

    def test_increase_within_margin_scores_zero(self, as_of):
        sessions = _make_sessions(as_of, [7.0, 7.0, 7.5, 7.5])
        assert _score_rpe_creep(sessions, CFG) == 0


class TestPerformanceDrop:
    @pytest.mark.parametrize(
        "rpes, expected",
        [
            ([9.0, 9.0], 2),
            ([8.5, 8.5], 1),
            ([8.0, 8.0], 0),
            ([9.5], 0),
        ],
    )
    def test_average_rpe_bands(self, as_of, rpes, expected):
        assert _score_performance_drop(_make_sessions(as_of, rpes), CFG) == expected


# ======================================================================
# Recovery debt
# ======================================================================


class TestRecoveryDebt:
    def test_no_check_ins_is_no_signal(self):
        assert _score_recovery_debt([], CFG) == (0, [])

    def test_debt_is_capped_at_three(self, as_of):
        check_ins = [_make_check_in(as_of, sleep_hours=4.0, energy_level=1, soreness=5)]
        debt, notes = _score_recovery_debt(check_ins, CFG)
        assert debt == 3
        assert REC_SEVERE_SLEEP in notes
        assert REC_LOW_ENERGY in notes

    def test_low_sleep_adds_one(self, as_of):
        debt, _ = _score_recovery_debt([_make_check_in(as_of, sleep_hours=5.5)], CFG)
        assert debt == 1

    def test_metrics_averaged_over_reporting_check_ins(self, as_of):
        check_ins = [
            _make_check_in(as_of, sleep_hours=4.0),
            _make_check_in(as_of - DAY, sleep_hours=8.0, energy_level=4),
        ]
        # Mean sleep 6.0 is not below 6; energy 4 is fine.
        assert _score_recovery_debt(check_ins, CFG) == (0, [])


# ======================================================================
# Volume load
# ======================================================================


class TestVolumeLoad:
    def _sessions(self, as_of, current, prior):
        sessions = [SessionSummary(session_id=1, date=as_of - DAY, total_volume=current)]
        for i, vol in enumerate(prior, start=1):
            sessions.append(SessionSummary(session_id=i + 1, date=as_of - (7 * i + 1) * DAY, total_volume=vol))
        return sessions

    @pytest.mark.parametrize(
        "current, expected",
        [(1500.0, 2), (1300.0, 1), (1200.0, 0), (900.0, 0)],
    )
    def test_ratio_bands(self, as_of, current, expected):
        sessions = self._sessions(as_of, current, [1000.0, 1000.0])
        assert _score_volume_load(sessions, as_of, CFG) == expected

    def test_no_prior_weeks_scores_zero(self, as_of):
        assert _score_volume_load(self._sessions(as_of, 5000.0, []), as_of, CFG) == 0

    def test_empty_recent_week_inside_history_counts_towards_baseline(self, as_of):
        # Baseline = (0 + 2000) / 2 = 1000.
        sessions = self._sessions(as_of, 1500.0, [0.0, 2000.0])
        assert _score_volume_load(sessions, as_of, CFG) == 2

    def test_baseline_capped_at_configured_weeks(self, as_of):
        sessions = self._sessions(as_of, 1300.0, [1000.0, 1000.0, 1000.0, 1000.0, 10000.0])
        # The heavy fifth week is outside the default four-week baseline.
        assert _score_volume_load(sessions, as_of, CFG) == 1
        assert _score_volume_load(sessions, as_of, FatigueConfig(baseline_weeks=5)) == 0


# ======================================================================
# Streak
# ======================================================================


class TestConsecutiveDays:
    def test_run_ending_today(self, as_of):
        dates = [as_of - i * DAY for i in range(5)]
        assert _count_consecutive_days(dates, as_of) == 5

    def test_run_may_end_yesterday(self, as_of):
        dates = [as_of - i * DAY for i in range(1, 4)]
        assert _count_consecutive_days(dates, as_of) == 3

    def test_gap_breaks_the_run(self, as_of):
        dates = [as_of, as_of - DAY, as_of - 3 * DAY]
        assert _count_consecutive_days(dates, as_of) == 2

    def test_no_sessions(self, as_of):
        assert _count_consecutive_days([], as_of) == 0


# ======================================================================
# build_fatigue_result
# ======================================================================


class TestBuildFatigueResult:
    def test_empty_history_is_fresh(self, as_of):
        result = build_fatigue_result([], [], as_of)
        assert result.score == 0
        assert result.status.level == "fresh"
        assert result.recommendations == []
        assert result.window_days == 7

    def test_all_factors_maxed(self, as_of):
        sessions = _make_sessions(as_of, [8.6, 8.6, 8.6, 9.5, 9.5], volume=1000.0)
        sessions.append(SessionSummary(session_id=99, date=as_of - 8 * DAY, total_volume=1000.0))
        check_ins = [_make_check_in(as_of, sleep_hours=4.0, energy_level=1, soreness=5)]

        result = build_fatigue_result(sessions, check_ins, as_of)

        assert result.factors.model_dump() == {
            "rpe_creep": 2, "performance_drop": 2, "recovery_debt": 3, "volume_load": 2, "streak": 1,
        }
        assert result.score == 10
        assert result.status.level == "critical"
        assert result.consecutive_days == 5
        assert result.recommendations[:2] == [REC_RPE_CREEP, REC_HIGH_RPE]
        assert REC_VOLUME_SPIKE in result.recommendations
        assert result.recommendations[-1] == "5 consecutive training days - schedule rest"

    def test_score_is_capped_sum_of_factors(self, as_of):
        sessions = _make_sessions(as_of, [7.0, 7.0, 7.5, 8.5, 9.0])
        result = build_fatigue_result(sessions, [], as_of)
        assert result.score == min(10, result.factors.total())

    def test_in_progress_and_future_sessions_ignored(self, as_of):
        sessions = [
            SessionSummary(session_id=1, date=as_of + DAY, avg_rpe=10.0),
            SessionSummary(session_id=2, date=as_of, avg_rpe=10.0, status="in_progress"),
        ]
        assert build_fatigue_result(sessions, [], as_of).score == 0

    def test_recommendations_have_no_duplicates(self, as_of):
        check_ins = [
            _make_check_in(as_of, sleep_hours=4.0),
            _make_check_in(as_of - DAY, sleep_hours=4.5),
        ]
        result = build_fatigue_result([], check_ins, as_of)
        assert result.recommendations == [REC_SEVERE_SLEEP]

    def test_old_check_ins_outside_recovery_window(self, as_of):
        check_ins = [_make_check_in(as_of - 5 * DAY, sleep_hours=3.0)]
        assert build_fatigue_result([], check_ins, as_of).factors.recovery_debt == 0


# ======================================================================
# Entry points
# ======================================================================


class TestComputeFatigue:
    def test_unknown_user(self, store, as_of):
        with pytest.raises(NotFoundError):
            compute_fatigue(store, 42, as_of)

    def test_reads_history_from_store(self, store, as_of):
        for i, rpe in enumerate([7.0, 7.0, 7.5, 8.5, 9.0]):
            store.add_session(1, as_of - (4 - i) * DAY, avg_rpe=rpe)
        result = compute_fatigue(store, 1, as_of)
        assert result.factors.rpe_creep == 2
        assert result.as_of == as_of

    def test_computing_does_not_write(self, store, as_of):
        compute_fatigue(store, 1, as_of)
        assert store.fatigue_logs == {}


class TestFatigueLog:
    def test_relogging_same_day_overwrites(self, store, as_of):
        log_fatigue(store, 1, build_fatigue_result([], [], as_of))
        store.add_check_in(1, as_of, sleep_hours=4.0)
        log_fatigue(store, 1, compute_fatigue(store, 1, as_of))

        history = get_fatigue_history(store, 1, as_of)
        assert len(history) == 1
        assert history[0].score == 2

    def test_history_newest_first(self, store, as_of):
        for offset, score in [(2, 3), (0, 5), (1, 4)]:
            store.add_fatigue_log(1, as_of - offset * DAY, score)
        history = get_fatigue_history(store, 1, as_of, days=7)
        assert [e.score for e in history] == [5, 4, 3]
