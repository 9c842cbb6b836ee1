"""
History access for the training engine.

Every engine component receives a :class:`HistoryReader` instead of a
database session.  The reader is the only door to storage: it returns
plain pydantic snapshots (``app.schemas.history``) so the scoring code
never touches ORM rows and can be tested against an in-memory double.

:class:`EngineStore` extends the reader with the three writes the engine
performs (fatigue log upsert, deload start, deload end).
:class:`SqlEngineStore` implements both over the SQLModel repositories.
"""

from __future__ import annotations

import datetime
from typing import Optional, Protocol

from sqlmodel import Session

from app.core.exceptions import NotFoundError
from app.db.repositories.deload_period import DeloadPeriodRepository
from app.db.repositories.exercise import ExerciseRepository
from app.db.repositories.exercise_set import ExerciseSetRepository
from app.db.repositories.fatigue_log import FatigueLogRepository
from app.db.repositories.recovery import RecoveryRepository
from app.db.repositories.training_session import TrainingSessionRepository
from app.db.repositories.user import UserRepository
from app.models.deload_period import DeloadPeriod
from app.models.fatigue_log import FatigueLog
from app.schemas.deload import DeloadPeriodRecord
from app.schemas.exercise import ExerciseInfo
from app.schemas.fatigue import FatigueFactors, FatigueLogEntry
from app.schemas.history import (
    ExercisePerformance,
    RecoveryEntry,
    SessionSummary,
    SetRecord,
)

# ======================================================================
# Ports
# ======================================================================


class HistoryReader(Protocol):
    """Read-only access to a user's training and recovery history."""

    def user_exists(self, user_id: int) -> bool: ...

    def get_exercise(self, exercise_id: str) -> Optional[ExerciseInfo]: ...

    def list_sessions(
        self, user_id: int, since: datetime.date, until: Optional[datetime.date] = None,
    ) -> list[SessionSummary]:
        """Completed sessions in ``[since, until]``, newest first."""
        ...

    def list_recovery_check_ins(
        self, user_id: int, since: datetime.date, until: Optional[datetime.date] = None,
    ) -> list[RecoveryEntry]: ...

    def list_exercise_sets(
        self, user_id: int, exercise_id: str, since: datetime.date,
    ) -> list[SetRecord]:
        """Sets of one exercise from completed sessions, newest session first."""
        ...

    def list_recent_exercise_ids(
        self, user_id: int, since: datetime.date, until: Optional[datetime.date] = None,
    ) -> list[str]:
        """Slugs of exercises logged in completed sessions, most recent first."""
        ...

    def list_fatigue_logs(
        self, user_id: int, since: datetime.date, until: Optional[datetime.date] = None,
    ) -> list[FatigueLogEntry]: ...

    def get_active_deload_period(self, user_id: int) -> Optional[DeloadPeriodRecord]:
        """The row flagged active, whether or not it has expired yet."""
        ...

    def get_last_deload_period(self, user_id: int) -> Optional[DeloadPeriodRecord]: ...

    def list_deload_periods(self, user_id: int, limit: int = 10) -> list[DeloadPeriodRecord]: ...

    def first_session_date(self, user_id: int) -> Optional[datetime.date]: ...

    def last_session_date(
        self, user_id: int, before: Optional[datetime.date] = None,
    ) -> Optional[datetime.date]: ...


class EngineStore(HistoryReader, Protocol):
    """History reader plus the engine's writes."""

    def upsert_fatigue_log(self, user_id: int, entry: FatigueLogEntry) -> FatigueLogEntry: ...

    def create_deload_period(
        self,
        user_id: int,
        deload_type: str,
        trigger_reason: str,
        start_date: datetime.date,
        duration_days: int,
        volume_modifier: float,
        intensity_modifier: float,
        fatigue_score: Optional[int] = None,
    ) -> DeloadPeriodRecord:
        """Create an active period.  Raises ConflictError if one is already active."""
        ...

    def get_deload_period(self, period_id: int) -> Optional[DeloadPeriodRecord]: ...

    def end_deload_period(self, period_id: int, ended_on: datetime.date) -> DeloadPeriodRecord: ...


# ======================================================================
# Pure helpers
# ======================================================================


def top_sets_by_session(records: list[SetRecord]) -> list[ExercisePerformance]:
    """Reduce logged sets to the heaviest working set of each session.

    Warmups and sets with no weight or no reps are ignored.  Ties on
    weight are broken by reps.  Result is ordered newest session first.
    """
    best: dict[int, SetRecord] = {}
    for rec in records:
        if rec.is_warmup or rec.weight <= 0 or rec.reps <= 0:
            continue
        current = best.get(rec.session_id)
        if current is None or (rec.weight, rec.reps) > (current.weight, current.reps):
            best[rec.session_id] = rec

    ordered = sorted(best.values(), key=lambda r: (r.session_date, r.session_id), reverse=True)
    return [
        ExercisePerformance(
            session_id=r.session_id,
            date=r.session_date,
            weight=r.weight,
            reps=r.reps,
            rpe=r.rpe,
        )
        for r in ordered
    ]


def _to_period_record(row: DeloadPeriod) -> DeloadPeriodRecord:
    return DeloadPeriodRecord(
        id=row.id,
        user_id=row.user_id,
        deload_type=row.deload_type,
        trigger_reason=row.trigger_reason,
        start_date=row.start_date,
        duration_days=row.duration_days,
        volume_modifier=row.volume_modifier,
        intensity_modifier=row.intensity_modifier,
        fatigue_score_at_trigger=row.fatigue_score_at_trigger,
        is_active=row.is_active,
        ended_on=row.ended_on,
    )


def _to_log_entry(row: FatigueLog) -> FatigueLogEntry:
    return FatigueLogEntry(
        date=row.date,
        score=row.score,
        level=row.level,
        factors=FatigueFactors(
            rpe_creep=row.rpe_creep,
            performance_drop=row.performance_drop,
            recovery_debt=row.recovery_debt,
            volume_load=row.volume_load,
            streak=row.streak,
        ),
        recommendations=list(row.recommendations or []),
    )


# ======================================================================
# SQL adapter
# ======================================================================


class SqlEngineStore:
    """:class:`EngineStore` backed by the SQLModel repositories."""

    def __init__(self, session: Session):
        self.users = UserRepository(session)
        self.exercises = ExerciseRepository(session)
        self.sessions = TrainingSessionRepository(session)
        self.sets = ExerciseSetRepository(session)
        self.recovery = RecoveryRepository(session)
        self.fatigue_logs = FatigueLogRepository(session)
        self.deloads = DeloadPeriodRepository(session)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def user_exists(self, user_id: int) -> bool:
        return self.users.exists(user_id)

    def get_exercise(self, exercise_id: str) -> Optional[ExerciseInfo]:
        row = self.exercises.get_by_slug(exercise_id)
        if row is None:
            return None
        return ExerciseInfo(
            exercise_id=row.slug,
            name=row.name,
            category=row.category,
            equipment=row.equipment,
            default_rest_seconds=row.default_rest_seconds,
        )

    def list_sessions(self, user_id, since, until=None) -> list[SessionSummary]:
        return [
            SessionSummary(
                session_id=row.id,
                date=row.date,
                status=row.status,
                avg_rpe=row.avg_rpe,
                total_volume=row.total_volume or 0.0,
            )
            for row in self.sessions.get_completed_since(user_id, since, until)
        ]

    def list_recovery_check_ins(self, user_id, since, until=None) -> list[RecoveryEntry]:
        return [
            RecoveryEntry(
                date=row.date,
                sleep_hours=row.sleep_hours,
                energy_level=row.energy_level,
                soreness=row.soreness,
                stress_level=row.stress_level,
            )
            for row in self.recovery.get_by_user_date_range(user_id, since, until)
        ]

    def list_exercise_sets(self, user_id, exercise_id, since) -> list[SetRecord]:
        return [
            SetRecord(
                session_id=row.session_id,
                session_date=session_date,
                exercise_id=exercise_id,
                weight=row.weight,
                reps=row.reps,
                rpe=row.rpe,
                is_warmup=row.is_warmup,
                completed_at=row.completed_at,
            )
            for row, session_date in self.sets.get_for_user_exercise_since(user_id, exercise_id, since)
        ]

    def list_recent_exercise_ids(self, user_id, since, until=None) -> list[str]:
        return self.sets.get_exercise_slugs_since(user_id, since, until)

    def list_fatigue_logs(self, user_id, since, until=None) -> list[FatigueLogEntry]:
        return [_to_log_entry(row) for row in self.fatigue_logs.get_by_user_date_range(user_id, since, until)]

    def get_active_deload_period(self, user_id) -> Optional[DeloadPeriodRecord]:
        row = self.deloads.get_active(user_id)
        return _to_period_record(row) if row else None

    def get_last_deload_period(self, user_id) -> Optional[DeloadPeriodRecord]:
        row = self.deloads.get_latest(user_id)
        return _to_period_record(row) if row else None

    def list_deload_periods(self, user_id, limit=10) -> list[DeloadPeriodRecord]:
        return [_to_period_record(row) for row in self.deloads.get_by_user(user_id, limit)]

    def get_deload_period(self, period_id) -> Optional[DeloadPeriodRecord]:
        row = self.deloads.get_by_id(period_id)
        return _to_period_record(row) if row else None

    def first_session_date(self, user_id) -> Optional[datetime.date]:
        return self.sessions.get_first_completed_date(user_id)

    def last_session_date(self, user_id, before=None) -> Optional[datetime.date]:
        return self.sessions.get_last_completed_date(user_id, before)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert_fatigue_log(self, user_id, entry: FatigueLogEntry) -> FatigueLogEntry:
        row, _ = self.fatigue_logs.upsert(
            FatigueLog(
                user_id=user_id,
                date=entry.date,
                score=entry.score,
                level=entry.level,
                rpe_creep=entry.factors.rpe_creep,
                performance_drop=entry.factors.performance_drop,
                recovery_debt=entry.factors.recovery_debt,
                volume_load=entry.factors.volume_load,
                streak=entry.factors.streak,
                recommendations=list(entry.recommendations),
            )
        )
        return _to_log_entry(row)

    def create_deload_period(
        self,
        user_id,
        deload_type,
        trigger_reason,
        start_date,
        duration_days,
        volume_modifier,
        intensity_modifier,
        fatigue_score=None,
    ) -> DeloadPeriodRecord:
        row = self.deloads.create(
            DeloadPeriod(
                user_id=user_id,
                deload_type=deload_type,
                trigger_reason=trigger_reason,
                start_date=start_date,
                duration_days=duration_days,
                volume_modifier=volume_modifier,
                intensity_modifier=intensity_modifier,
                fatigue_score_at_trigger=fatigue_score,
                is_active=True,
            )
        )
        return _to_period_record(row)

    def end_deload_period(self, period_id, ended_on) -> DeloadPeriodRecord:
        row = self.deloads.get_by_id(period_id)
        if row is None:
            raise NotFoundError(f"Deload period {period_id} not found")
        if row.is_active:
            row = self.deloads.deactivate(row, ended_on)
        return _to_period_record(row)
