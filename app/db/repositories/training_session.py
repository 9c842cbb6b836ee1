"""
Training session repository.

Handles database operations for :class:`TrainingSession`.
The engine only ever reads completed sessions.
"""

import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.models.exercise_set import ExerciseSet
from app.models.training_session import TrainingSession

COMPLETED = "completed"


class TrainingSessionRepository:
    """Repository for TrainingSession database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: TrainingSession) -> TrainingSession:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def create_with_sets(self, entry: TrainingSession, sets: list[ExerciseSet]) -> TrainingSession:
        """Insert a session and its sets in one transaction.

        Nothing is written if any insert fails.
        """
        try:
            self.session.add(entry)
            self.session.flush()
            for s in sets:
                s.session_id = entry.id
            self.session.add_all(sets)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(entry)
        return entry

    def get_by_id(self, entry_id: int) -> Optional[TrainingSession]:
        return self.session.get(TrainingSession, entry_id)

    def get_completed_since(
        self, user_id: int, since: datetime.date, until: Optional[datetime.date] = None,
    ) -> list[TrainingSession]:
        """Completed sessions with ``since <= date <= until``, newest first."""
        statement = select(TrainingSession).where(
            TrainingSession.user_id == user_id,
            TrainingSession.status == COMPLETED,
            TrainingSession.date >= since,
        )
        if until is not None:
            statement = statement.where(TrainingSession.date <= until)
        statement = statement.order_by(TrainingSession.date.desc(), TrainingSession.id.desc())
        return list(self.session.exec(statement).all())

    def get_first_completed_date(self, user_id: int) -> Optional[datetime.date]:
        statement = select(func.min(TrainingSession.date)).where(
            TrainingSession.user_id == user_id,
            TrainingSession.status == COMPLETED,
        )
        return self.session.exec(statement).first()

    def get_last_completed_date(
        self, user_id: int, before: Optional[datetime.date] = None,
    ) -> Optional[datetime.date]:
        """Most recent completed session date, optionally strictly before ``before``."""
        statement = select(func.max(TrainingSession.date)).where(
            TrainingSession.user_id == user_id,
            TrainingSession.status == COMPLETED,
        )
        if before is not None:
            statement = statement.where(TrainingSession.date < before)
        return self.session.exec(statement).first()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def update(self, entry: TrainingSession) -> TrainingSession:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry
