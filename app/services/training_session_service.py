"""
Training session service.

Logs sessions together with their sets and keeps the per-session
aggregates (``avg_rpe``, ``total_volume``) in sync, since fatigue
scoring reads only those aggregates.  Also records recovery check-ins.
"""

import datetime
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlmodel import Session

from app.db.repositories.exercise import ExerciseRepository
from app.db.repositories.exercise_set import ExerciseSetRepository
from app.db.repositories.recovery import RecoveryRepository
from app.db.repositories.training_session import COMPLETED, TrainingSessionRepository
from app.db.repositories.user import UserRepository
from app.models.exercise_set import ExerciseSet
from app.models.recovery import RecoveryCheckIn
from app.models.training_session import TrainingSession
from app.schemas.training_session import (
    ExerciseSetResponse,
    RecoveryCheckInCreate,
    TrainingSessionCreate,
    TrainingSessionResponse,
)

logger = logging.getLogger(__name__)


def session_aggregates(sets: list[ExerciseSet]) -> tuple[Optional[float], float]:
    """``(avg_rpe, total_volume)`` over the working sets of a session.

    ``avg_rpe`` is rounded to one decimal and is ``None`` when no working
    set carries an RPE.
    """
    working = [s for s in sets if not s.is_warmup]
    rpes = [s.rpe for s in working if s.rpe is not None]
    avg_rpe = round(sum(rpes) / len(rpes), 1) if rpes else None
    total_volume = sum(s.weight * s.reps for s in working)
    return avg_rpe, total_volume


class TrainingSessionService:
    """Service for training session business logic."""

    def __init__(self, session: Session):
        self.repository = TrainingSessionRepository(session)
        self.sets = ExerciseSetRepository(session)
        self.exercises = ExerciseRepository(session)
        self.recovery = RecoveryRepository(session)
        self.users = UserRepository(session)

    def create(self, user_id: int, data: TrainingSessionCreate) -> TrainingSessionResponse:
        self._require_user(user_id)

        # Resolve every slug before writing anything.
        exercise_ids: dict[str, int] = {}
        for s in data.sets:
            if s.exercise_id in exercise_ids:
                continue
            exercise = self.exercises.get_by_slug(s.exercise_id)
            if exercise is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                    detail=f"Exercise {s.exercise_id!r} not found")
            exercise_ids[s.exercise_id] = exercise.id

        sets = [
            ExerciseSet(exercise_id=exercise_ids[s.exercise_id], set_number=s.set_number, weight=s.weight,
                        reps=s.reps, rpe=s.rpe, is_warmup=s.is_warmup)
            for s in data.sets
        ]
        avg_rpe, total_volume = session_aggregates(sets)
        entry = self.repository.create_with_sets(
            TrainingSession(user_id=user_id, date=data.date, status=data.status, notes=data.notes,
                            avg_rpe=avg_rpe, total_volume=total_volume),
            sets,
        )
        logger.info("Logged %s session %s for user %s on %s (%d sets)",
                    entry.status, entry.id, user_id, entry.date, len(data.sets))
        return self._to_response(entry)

    def get_by_id(self, user_id: int, entry_id: int) -> TrainingSessionResponse:
        return self._to_response(self._get_owned_entry(user_id, entry_id))

    def complete(self, user_id: int, entry_id: int) -> TrainingSessionResponse:
        """Mark an in-progress session completed so the engine starts reading it."""
        entry = self._get_owned_entry(user_id, entry_id)
        entry.status = COMPLETED
        entry = self._refresh_aggregates(entry)
        logger.info("Completed session %s for user %s", entry.id, user_id)
        return self._to_response(entry)

    def add_check_in(self, user_id: int, data: RecoveryCheckInCreate) -> RecoveryCheckIn:
        self._require_user(user_id)
        return self.recovery.create(RecoveryCheckIn(user_id=user_id, **data.model_dump()))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_user(self, user_id: int) -> None:
        if not self.users.exists(user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")

    def _get_owned_entry(self, user_id: int, entry_id: int) -> TrainingSession:
        entry = self.repository.get_by_id(entry_id)
        if not entry or entry.user_id != user_id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Training session not found", )
        return entry

    def _refresh_aggregates(self, entry: TrainingSession) -> TrainingSession:
        entry.avg_rpe, entry.total_volume = session_aggregates(self.sets.get_by_session(entry.id))
        entry.updated_at = datetime.datetime.utcnow()
        return self.repository.update(entry)

    def _to_response(self, entry: TrainingSession) -> TrainingSessionResponse:
        slugs: dict[int, str] = {}
        sets = []
        for s in self.sets.get_by_session(entry.id):
            if s.exercise_id not in slugs:
                slugs[s.exercise_id] = self.exercises.get_by_id(s.exercise_id).slug
            sets.append(ExerciseSetResponse(id=s.id, exercise_id=slugs[s.exercise_id], set_number=s.set_number,
                                            weight=s.weight, reps=s.reps, rpe=s.rpe, is_warmup=s.is_warmup))

        return TrainingSessionResponse(id=entry.id, user_id=entry.user_id, date=entry.date, status=entry.status,
                                       avg_rpe=entry.avg_rpe, total_volume=entry.total_volume, notes=entry.notes,
                                       sets=sets, created_at=entry.created_at, updated_at=entry.updated_at, )
