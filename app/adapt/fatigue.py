"""
Five-factor accumulated fatigue scoring.

The fatigue score answers "how much has the athlete accumulated lately?"
on a bounded 0-10 scale.  It is the capped sum of five independent,
individually bounded factors:

    rpe_creep         0-2   recent session RPE above earlier RPE
    performance_drop  0-2   recent sessions ground out at high RPE
    recovery_debt     0-3   sleep, energy and soreness from check-ins
    volume_load       0-2   this week's volume vs. weekly baseline
    streak            0-1   consecutive training days without rest

    score = min(10, sum of factors)

Design choices
--------------
1. **Missing data is no signal**: a session without RPE, a check-in
   without sleep hours, or no history at all contributes 0 to the
   affected factor.  Scoring never fails on sparse data.
2. **Pure factors**: each factor is a pure function of plain
   snapshots; :func:`compute_fatigue` only fetches history and
   assembles the result.  Computing never writes; persistence is the
   separate :func:`log_fatigue` step.
3. **Weekly baseline**: volume load compares the trailing 7 days
   against the mean weekly volume of up to ``baseline_weeks`` prior
   weeks (weeks before the oldest logged session are not counted).
"""

from __future__ import annotations

import datetime
import logging
from typing import Optional

from pydantic import BaseModel, Field

from app.adapt.history import EngineStore, HistoryReader
from app.core.exceptions import NotFoundError
from app.schemas.fatigue import (
    FatigueFactors,
    FatigueLogEntry,
    FatigueResult,
    FatigueStatus,
)
from app.schemas.history import RecoveryEntry, SessionSummary

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

# Status bands: (max score inclusive, level, color, message, action).
_STATUS_BANDS: list[tuple[int, str, str, str, str]] = [
    (2, "fresh", "green", "Well recovered", "Train normally, consider pushing intensity"),
    (4, "normal", "green", "Normal training fatigue", "Continue as planned"),
    (6, "elevated", "yellow", "Fatigue accumulating", "Monitor closely, prioritize recovery"),
    (8, "high", "orange", "High fatigue - deload recommended", "Take a deload week or reduce volume 40%"),
    (10, "critical", "red", "Risk of overtraining", "Mandatory rest day or very light session only"),
]

REC_RPE_CREEP = "RPE trending up - consider reducing intensity"
REC_HIGH_RPE = "High average RPE - workouts are very demanding"
REC_SEVERE_SLEEP = "Severe sleep debt - prioritize 7+ hours"
REC_LOW_SLEEP = "Low sleep - aim for 7+ hours"
REC_LOW_ENERGY = "Low energy levels - consider rest day"
REC_HIGH_SORENESS = "High muscle soreness - allow recovery"
REC_VOLUME_SPIKE = "Volume spike detected - risk of overreaching"


class FatigueConfig(BaseModel):
    """Thresholds for the fatigue factors."""

    lookback_days: int = Field(default=7, ge=1)

    # RPE factors
    rpe_sessions: int = Field(default=5, ge=3, description="Most recent sessions with RPE considered")
    rpe_recent_count: int = Field(default=2, ge=1)
    rpe_creep_min_sessions: int = Field(default=3, ge=2)
    rpe_creep_margin: float = Field(default=0.5, ge=0.0)
    performance_min_sessions: int = Field(default=2, ge=1)
    performance_high_rpe: float = Field(default=8.5)
    performance_moderate_rpe: float = Field(default=8.0)

    # Recovery debt
    recovery_lookback_days: int = Field(default=3, ge=1)
    severe_sleep_hours: float = Field(default=5.0)
    low_sleep_hours: float = Field(default=6.0)
    low_energy: float = Field(default=3.0)
    high_soreness: float = Field(default=4.0)

    # Volume load
    baseline_weeks: int = Field(default=4, ge=1)
    volume_high_ratio: float = Field(default=1.4)
    volume_moderate_ratio: float = Field(default=1.2)

    # Streak
    streak_days: int = Field(default=5, ge=2)


DEFAULT_FATIGUE_CONFIG = FatigueConfig()

_CAPS = {"rpe_creep": 2, "performance_drop": 2, "recovery_debt": 3, "volume_load": 2, "streak": 1}
MAX_SCORE = 10


# ======================================================================
# Status labelling
# ======================================================================


def get_fatigue_status(score: int) -> FatigueStatus:
    """Map a fatigue score to its band.  Total over all integers."""
    for upper, level, color, message, action in _STATUS_BANDS:
        if score <= upper:
            return FatigueStatus(level=level, color=color, message=message, action=action)
    _, level, color, message, action = _STATUS_BANDS[-1]
    return FatigueStatus(level=level, color=color, message=message, action=action)


# ======================================================================
# Factors
# ======================================================================


def _mean(values: list[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def _recent_rpes(sessions: list[SessionSummary], cfg: FatigueConfig) -> list[float]:
    """RPE of the most recent sessions that have one, newest first."""
    rpes = [s.avg_rpe for s in sessions if s.avg_rpe is not None and s.avg_rpe > 0]
    return rpes[: cfg.rpe_sessions]


def _score_rpe_creep(sessions: list[SessionSummary], cfg: FatigueConfig) -> int:
    """2 when the newest sessions run hotter than the earlier ones, else 0.

    ``sessions`` must be newest first.
    """
    rpes = _recent_rpes(sessions, cfg)
    if len(rpes) < cfg.rpe_creep_min_sessions:
        return 0
    recent = _mean(rpes[: cfg.rpe_recent_count])
    earlier = _mean(rpes[cfg.rpe_recent_count:])
    if recent is None or earlier is None:
        return 0
    return _CAPS["rpe_creep"] if recent > earlier + cfg.rpe_creep_margin else 0


def _score_performance_drop(sessions: list[SessionSummary], cfg: FatigueConfig) -> int:
    rpes = _recent_rpes(sessions, cfg)
    if len(rpes) < cfg.performance_min_sessions:
        return 0
    avg = _mean(rpes)
    if avg > cfg.performance_high_rpe:
        return 2
    if avg > cfg.performance_moderate_rpe:
        return 1
    return 0


def _score_recovery_debt(check_ins: list[RecoveryEntry], cfg: FatigueConfig) -> tuple[int, list[str]]:
    """Recovery debt and the recommendations it triggers.

    Each metric is averaged over the check-ins that report it; a metric
    nobody reported contributes nothing.
    """
    if not check_ins:
        return 0, []

    avg_sleep = _mean([c.sleep_hours for c in check_ins if c.sleep_hours is not None and c.sleep_hours > 0])
    avg_energy = _mean([float(c.energy_level) for c in check_ins if c.energy_level is not None])
    avg_soreness = _mean([float(c.soreness) for c in check_ins if c.soreness is not None])

    debt = 0
    notes: list[str] = []

    if avg_sleep is not None:
        if avg_sleep < cfg.severe_sleep_hours:
            debt += 2
            notes.append(REC_SEVERE_SLEEP)
        elif avg_sleep < cfg.low_sleep_hours:
            debt += 1
            notes.append(REC_LOW_SLEEP)

    if avg_energy is not None and avg_energy < cfg.low_energy:
        debt += 1
        notes.append(REC_LOW_ENERGY)

    if avg_soreness is not None and avg_soreness > cfg.high_soreness:
        debt += 1
        notes.append(REC_HIGH_SORENESS)

    return min(debt, _CAPS["recovery_debt"]), notes


def _weekly_volumes(
    sessions: list[SessionSummary], as_of: datetime.date, weeks: int,
) -> list[float]:
    """Volume per trailing 7-day bucket: index 0 ends at ``as_of``."""
    buckets = [0.0] * (weeks + 1)
    for s in sessions:
        age = (as_of - s.date).days
        if age < 0:
            continue
        idx = age // 7
        if idx <= weeks:
            buckets[idx] += s.total_volume
    return buckets


def _score_volume_load(
    sessions: list[SessionSummary], as_of: datetime.date, cfg: FatigueConfig,
) -> int:
    """This week's volume against the mean of prior weeks.

    The baseline is capped at ``cfg.baseline_weeks`` prior weeks (4 by
    default), not every prior week in the user's history.  Raise
    ``baseline_weeks`` for a longer baseline.
    """
    buckets = _weekly_volumes(sessions, as_of, cfg.baseline_weeks)
    current, prior = buckets[0], buckets[1:]

    # Only weeks since the oldest logged prior week count towards the baseline.
    spanned = 0
    for i, vol in enumerate(prior, start=1):
        if vol > 0:
            spanned = i
    if spanned == 0:
        return 0

    baseline = sum(prior[:spanned]) / spanned
    if baseline <= 0:
        return 0
    ratio = current / baseline
    logger.debug("Volume ratio %.2f (current %.0f / baseline %.0f)", ratio, current, baseline)

    if ratio > cfg.volume_high_ratio:
        return 2
    if ratio > cfg.volume_moderate_ratio:
        return 1
    return 0


def _count_consecutive_days(session_dates: list[datetime.date], as_of: datetime.date) -> int:
    """Consecutive calendar days with a session, walking back from ``as_of``.

    A day without a session yet counts as "not over": the run may end
    yesterday.
    """
    days = {d for d in session_dates if d <= as_of}
    if not days:
        return 0
    cursor = as_of if as_of in days else as_of - datetime.timedelta(days=1)
    count = 0
    while cursor in days:
        count += 1
        cursor -= datetime.timedelta(days=1)
    return count


def _score_streak(consecutive_days: int, cfg: FatigueConfig) -> int:
    return 1 if consecutive_days >= cfg.streak_days else 0


# ======================================================================
# Assembly
# ======================================================================


def _history_start(as_of: datetime.date, window_days: int, cfg: FatigueConfig) -> datetime.date:
    """Earliest date any factor looks at."""
    volume_days = 7 * (cfg.baseline_weeks + 1)
    return as_of - datetime.timedelta(days=max(window_days, volume_days) - 1)


def build_fatigue_result(
    sessions: list[SessionSummary],
    check_ins: list[RecoveryEntry],
    as_of: datetime.date,
    window_days: Optional[int] = None,
    config: Optional[FatigueConfig] = None,
) -> FatigueResult:
    """Score fatigue from already fetched history.

    Args:
        sessions: Completed sessions, newest first, covering at least the
            volume baseline span (``7 × (baseline_weeks + 1)`` days).
        check_ins: Recovery check-ins, any order.
        as_of: Reference day.
        window_days: Lookback for the RPE factors (default from config).
        config: Optional config override.
    """
    cfg = config or DEFAULT_FATIGUE_CONFIG
    days = window_days or cfg.lookback_days

    sessions = sorted(
        (s for s in sessions if s.date <= as_of and s.status == "completed"),
        key=lambda s: (s.date, s.session_id),
        reverse=True,
    )
    window_start = as_of - datetime.timedelta(days=days - 1)
    in_window = [s for s in sessions if s.date >= window_start]

    recovery_start = as_of - datetime.timedelta(days=min(days, cfg.recovery_lookback_days) - 1)
    recent_check_ins = [c for c in check_ins if recovery_start <= c.date <= as_of]

    recovery_debt, recovery_notes = _score_recovery_debt(recent_check_ins, cfg)
    consecutive = _count_consecutive_days([s.date for s in sessions], as_of)

    factors = FatigueFactors(
        rpe_creep=_score_rpe_creep(in_window, cfg),
        performance_drop=_score_performance_drop(in_window, cfg),
        recovery_debt=recovery_debt,
        volume_load=_score_volume_load(sessions, as_of, cfg),
        streak=_score_streak(consecutive, cfg),
    )

    recommendations: list[str] = []
    if factors.rpe_creep > 0:
        recommendations.append(REC_RPE_CREEP)
    if factors.performance_drop > 0:
        recommendations.append(REC_HIGH_RPE)
    recommendations.extend(recovery_notes)
    if factors.volume_load > 0:
        recommendations.append(REC_VOLUME_SPIKE)
    if factors.streak > 0:
        recommendations.append(f"{consecutive} consecutive training days - schedule rest")

    score = min(MAX_SCORE, factors.total())

    return FatigueResult(
        score=score,
        factors=factors,
        status=get_fatigue_status(score),
        recommendations=list(dict.fromkeys(recommendations)),
        as_of=as_of,
        window_days=days,
        consecutive_days=consecutive,
    )


# ======================================================================
# Main entry points
# ======================================================================


def compute_fatigue(
    reader: HistoryReader,
    user_id: int,
    as_of: datetime.date,
    days: Optional[int] = None,
    config: Optional[FatigueConfig] = None,
) -> FatigueResult:
    """Compute the fatigue score for a user.

    Args:
        reader: History access.
        user_id: User ID.
        as_of: Reference date (typically today).
        days: RPE lookback window (default 7).
        config: Optional config override.

    Returns:
        :class:`FatigueResult`.  Never writes anything.

    Raises:
        NotFoundError: unknown user.
    """
    cfg = config or DEFAULT_FATIGUE_CONFIG
    if not reader.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")

    window = days or cfg.lookback_days
    since = _history_start(as_of, window, cfg)
    sessions = reader.list_sessions(user_id, since, as_of)
    check_ins = reader.list_recovery_check_ins(
        user_id, as_of - datetime.timedelta(days=cfg.recovery_lookback_days - 1), as_of,
    )

    result = build_fatigue_result(sessions, check_ins, as_of, window, cfg)
    logger.debug(
        "Fatigue for user %s on %s: %d (%s) %s",
        user_id, as_of, result.score, result.status.level, result.factors.model_dump(),
    )
    return result


def log_fatigue(store: EngineStore, user_id: int, result: FatigueResult) -> FatigueLogEntry:
    """Persist ``result`` as the user's log entry for ``result.as_of``.

    Re-logging the same day overwrites that day's entry.
    """
    entry = store.upsert_fatigue_log(
        user_id,
        FatigueLogEntry(
            date=result.as_of,
            score=result.score,
            level=result.status.level,
            factors=result.factors,
            recommendations=result.recommendations,
        ),
    )
    logger.info("Logged fatigue %d (%s) for user %s on %s", entry.score, entry.level, user_id, entry.date)
    return entry


def get_fatigue_history(
    reader: HistoryReader,
    user_id: int,
    as_of: datetime.date,
    days: int = 7,
) -> list[FatigueLogEntry]:
    """Logged fatigue entries of the last ``days`` days, newest first."""
    if not reader.user_exists(user_id):
        raise NotFoundError(f"User {user_id} not found")
    since = as_of - datetime.timedelta(days=days - 1)
    entries = reader.list_fatigue_logs(user_id, since, as_of)
    return sorted(entries, key=lambda e: e.date, reverse=True)
