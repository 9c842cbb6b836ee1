"""
In-memory history store for engine tests.

``FakeStore`` implements the ``EngineStore`` protocol over plain dicts
and lists, with the same one-active-deload rule the database enforces.
"""

import datetime
import itertools
from typing import Optional

import pytest

from app.core.exceptions import ConflictError, NotFoundError
from app.schemas.deload import DeloadPeriodRecord
from app.schemas.exercise import Equipment, ExerciseCategory, ExerciseInfo
from app.schemas.fatigue import FatigueLogEntry
from app.schemas.history import RecoveryEntry, SessionSummary, SetRecord

AS_OF = datetime.date(2026, 3, 16)


class FakeStore:
    def __init__(self):
        self.users: set[int] = set()
        self.exercises: dict[str, ExerciseInfo] = {}
        self.sessions: dict[int, tuple[int, SessionSummary]] = {}
        self.check_ins: list[tuple[int, RecoveryEntry]] = []
        self.sets: list[tuple[int, SetRecord]] = []
        self.fatigue_logs: dict[tuple[int, datetime.date], FatigueLogEntry] = {}
        self.deloads: dict[int, DeloadPeriodRecord] = {}
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def add_user(self, user_id: int = 1) -> int:
        self.users.add(user_id)
        return user_id

    def add_exercise(self, slug: str, category=ExerciseCategory.COMPOUND, equipment=Equipment.BARBELL,
                     rest: int = 120) -> ExerciseInfo:
        info = ExerciseInfo(exercise_id=slug, name=slug.replace("_", " ").title(), category=category,
                            equipment=equipment, default_rest_seconds=rest)
        self.exercises[slug] = info
        return info

    def add_session(self, user_id: int, date: datetime.date, avg_rpe: Optional[float] = None,
                    total_volume: float = 0.0, status: str = "completed") -> int:
        session_id = next(self._ids)
        self.sessions[session_id] = (
            user_id,
            SessionSummary(session_id=session_id, date=date, status=status, avg_rpe=avg_rpe,
                           total_volume=total_volume),
        )
        return session_id

    def add_top_set(self, user_id: int, exercise_id: str, date: datetime.date, weight: float, reps: int,
                    rpe: Optional[float] = None, warmups: int = 0) -> int:
        """A completed session holding one working set (plus optional warmups)."""
        session_id = self.add_session(user_id, date, avg_rpe=rpe, total_volume=weight * reps)
        for _ in range(warmups):
            self.sets.append((user_id, SetRecord(session_id=session_id, session_date=date,
                                                 exercise_id=exercise_id, weight=weight / 2, reps=10,
                                                 is_warmup=True)))
        self.sets.append((user_id, SetRecord(session_id=session_id, session_date=date, exercise_id=exercise_id,
                                             weight=weight, reps=reps, rpe=rpe)))
        return session_id

    def add_check_in(self, user_id: int, date: datetime.date, **metrics) -> None:
        self.check_ins.append((user_id, RecoveryEntry(date=date, **metrics)))

    def add_fatigue_log(self, user_id: int, date: datetime.date, score: int) -> None:
        self.fatigue_logs[(user_id, date)] = FatigueLogEntry(date=date, score=score, level="test")

    # ------------------------------------------------------------------
    # HistoryReader
    # ------------------------------------------------------------------

    def user_exists(self, user_id):
        return user_id in self.users

    def get_exercise(self, exercise_id):
        return self.exercises.get(exercise_id)

    def _completed(self, user_id):
        return [s for uid, s in self.sessions.values() if uid == user_id and s.status == "completed"]

    def list_sessions(self, user_id, since, until=None):
        rows = [s for s in self._completed(user_id) if s.date >= since and (until is None or s.date <= until)]
        return sorted(rows, key=lambda s: (s.date, s.session_id), reverse=True)

    def list_recovery_check_ins(self, user_id, since, until=None):
        rows = [c for uid, c in self.check_ins
                if uid == user_id and c.date >= since and (until is None or c.date <= until)]
        return sorted(rows, key=lambda c: c.date, reverse=True)

    def list_exercise_sets(self, user_id, exercise_id, since):
        completed = {s.session_id for s in self._completed(user_id)}
        rows = [r for uid, r in self.sets
                if uid == user_id and r.exercise_id == exercise_id and r.session_date >= since
                and r.session_id in completed]
        return sorted(rows, key=lambda r: (r.session_date, r.session_id), reverse=True)

    def list_recent_exercise_ids(self, user_id, since, until=None):
        completed = {s.session_id for s in self._completed(user_id)}
        last: dict[str, datetime.date] = {}
        for uid, r in self.sets:
            if uid != user_id or r.session_id not in completed:
                continue
            if r.session_date < since or (until is not None and r.session_date > until):
                continue
            last[r.exercise_id] = max(last.get(r.exercise_id, r.session_date), r.session_date)
        return [slug for slug, _ in sorted(last.items(), key=lambda kv: (-kv[1].toordinal(), kv[0]))]

    def list_fatigue_logs(self, user_id, since, until=None):
        rows = [e for (uid, d), e in self.fatigue_logs.items()
                if uid == user_id and d >= since and (until is None or d <= until)]
        return sorted(rows, key=lambda e: e.date, reverse=True)

    def get_active_deload_period(self, user_id):
        return next((p for p in self.deloads.values() if p.user_id == user_id and p.is_active), None)

    def get_last_deload_period(self, user_id):
        periods = self.list_deload_periods(user_id, limit=1)
        return periods[0] if periods else None

    def list_deload_periods(self, user_id, limit=10):
        rows = [p for p in self.deloads.values() if p.user_id == user_id]
        return sorted(rows, key=lambda p: (p.start_date, p.id), reverse=True)[:limit]

    def first_session_date(self, user_id):
        dates = [s.date for s in self._completed(user_id)]
        return min(dates) if dates else None

    def last_session_date(self, user_id, before=None):
        dates = [s.date for s in self._completed(user_id) if before is None or s.date < before]
        return max(dates) if dates else None

    # ------------------------------------------------------------------
    # EngineStore writes
    # ------------------------------------------------------------------

    def upsert_fatigue_log(self, user_id, entry):
        self.fatigue_logs[(user_id, entry.date)] = entry
        return entry

    def create_deload_period(self, user_id, deload_type, trigger_reason, start_date, duration_days,
                             volume_modifier, intensity_modifier, fatigue_score=None):
        if self.get_active_deload_period(user_id) is not None:
            raise ConflictError(f"User {user_id} already has an active deload period")
        period = DeloadPeriodRecord(
            id=next(self._ids), user_id=user_id, deload_type=deload_type, trigger_reason=trigger_reason,
            start_date=start_date, duration_days=duration_days, volume_modifier=volume_modifier,
            intensity_modifier=intensity_modifier, fatigue_score_at_trigger=fatigue_score, is_active=True,
        )
        self.deloads[period.id] = period
        return period

    def get_deload_period(self, period_id):
        return self.deloads.get(period_id)

    def end_deload_period(self, period_id, ended_on):
        period = self.deloads.get(period_id)
        if period is None:
            raise NotFoundError(f"Deload period {period_id} not found")
        if period.is_active:
            period = period.model_copy(update={"is_active": False, "ended_on": ended_on})
            self.deloads[period_id] = period
        return period


@pytest.fixture
def store() -> FakeStore:
    fake = FakeStore()
    fake.add_user(1)
    return fake


@pytest.fixture
def as_of() -> datetime.date:
    return AS_OF
