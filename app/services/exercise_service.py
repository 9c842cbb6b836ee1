"""
Exercise catalog service.
"""

from fastapi import HTTPException, status
from sqlmodel import Session

from app.db.repositories.exercise import ExerciseRepository
from app.models.exercise import Exercise
from app.schemas.exercise import ExerciseInfo


class ExerciseService:
    """Service for the shared exercise catalog."""

    def __init__(self, session: Session):
        self.repository = ExerciseRepository(session)

    def get_all(self) -> list[ExerciseInfo]:
        return [self._to_info(e) for e in self.repository.get_all()]

    def get(self, slug: str) -> ExerciseInfo:
        exercise = self.repository.get_by_slug(slug)
        if exercise is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Exercise {slug!r} not found")
        return self._to_info(exercise)

    def create(self, data: ExerciseInfo) -> ExerciseInfo:
        if self.repository.get_by_slug(data.exercise_id) is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                                detail=f"Exercise {data.exercise_id!r} already exists")
        exercise = Exercise(slug=data.exercise_id, name=data.name, category=data.category.value,
                            equipment=data.equipment.value, default_rest_seconds=data.default_rest_seconds)
        return self._to_info(self.repository.create(exercise))

    @staticmethod
    def _to_info(exercise: Exercise) -> ExerciseInfo:
        return ExerciseInfo(exercise_id=exercise.slug, name=exercise.name, category=exercise.category,
                            equipment=exercise.equipment, default_rest_seconds=exercise.default_rest_seconds)
