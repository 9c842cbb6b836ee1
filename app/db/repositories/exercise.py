"""
Exercise repository.

Exercises are looked up by slug; the integer primary key only links
logged sets to their exercise.
"""

from typing import Optional

from sqlmodel import Session, select

from app.models.exercise import Exercise


class ExerciseRepository:
    """Repository for Exercise database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, exercise: Exercise) -> Exercise:
        self.session.add(exercise)
        self.session.commit()
        self.session.refresh(exercise)
        return exercise

    def get_by_id(self, exercise_id: int) -> Optional[Exercise]:
        return self.session.get(Exercise, exercise_id)

    def get_by_slug(self, slug: str) -> Optional[Exercise]:
        statement = select(Exercise).where(Exercise.slug == slug)
        return self.session.exec(statement).first()

    def get_all(self) -> list[Exercise]:
        statement = select(Exercise).order_by(Exercise.slug)
        return list(self.session.exec(statement).all())
