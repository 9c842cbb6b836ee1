"""
Exercise set repository.

Per-exercise history queries join sets to their session so that only
sets from completed sessions are returned, tagged with the session date.
"""

import datetime
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.exercise import Exercise
from app.models.exercise_set import ExerciseSet
from app.models.training_session import TrainingSession
from app.db.repositories.training_session import COMPLETED


class ExerciseSetRepository:
    """Repository for ExerciseSet database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: ExerciseSet) -> ExerciseSet:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_by_session(self, session_id: int) -> list[ExerciseSet]:
        statement = (
            select(ExerciseSet)
            .where(ExerciseSet.session_id == session_id)
            .order_by(ExerciseSet.set_number)
        )
        return list(self.session.exec(statement).all())

    def get_for_user_exercise_since(
        self, user_id: int, exercise_slug: str, since: datetime.date,
    ) -> list[tuple[ExerciseSet, datetime.date]]:
        """Sets of one exercise from completed sessions on or after ``since``.

        Returns ``(set, session_date)`` pairs, newest session first.
        """
        statement = (
            select(ExerciseSet, TrainingSession.date)
            .join(TrainingSession, ExerciseSet.session_id == TrainingSession.id)
            .join(Exercise, ExerciseSet.exercise_id == Exercise.id)
            .where(
                TrainingSession.user_id == user_id,
                TrainingSession.status == COMPLETED,
                TrainingSession.date >= since,
                Exercise.slug == exercise_slug,
            )
            .order_by(TrainingSession.date.desc(), ExerciseSet.session_id.desc(), ExerciseSet.set_number)
        )
        return [(row[0], row[1]) for row in self.session.exec(statement).all()]

    def get_exercise_slugs_since(
        self, user_id: int, since: datetime.date, until: Optional[datetime.date] = None,
    ) -> list[str]:
        """Distinct exercise slugs from completed sessions, most recently trained first."""
        last_date = func.max(TrainingSession.date)
        statement = (
            select(Exercise.slug, last_date)
            .join(ExerciseSet, ExerciseSet.exercise_id == Exercise.id)
            .join(TrainingSession, ExerciseSet.session_id == TrainingSession.id)
            .where(
                TrainingSession.user_id == user_id,
                TrainingSession.status == COMPLETED,
                TrainingSession.date >= since,
            )
        )
        if until is not None:
            statement = statement.where(TrainingSession.date <= until)
        statement = statement.group_by(Exercise.slug).order_by(last_date.desc(), Exercise.slug)
        return [row[0] for row in self.session.exec(statement).all()]
