"""
Exercise catalog endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.db.session import get_db
from app.schemas.exercise import ExerciseInfo
from app.services.exercise_service import ExerciseService

router = APIRouter()


@router.get("", summary="List the exercise catalog.", response_model=list[ExerciseInfo], )
def list_exercises(db: Session = Depends(get_db)):
    return ExerciseService(db).get_all()


@router.get("/{exercise_id}", summary="Get one exercise by slug.", response_model=ExerciseInfo, )
def get_exercise(exercise_id: str, db: Session = Depends(get_db)):
    return ExerciseService(db).get(exercise_id)


@router.post("", summary="Add an exercise to the catalog.", response_model=ExerciseInfo,
             status_code=status.HTTP_201_CREATED, )
def create_exercise(data: ExerciseInfo, db: Session = Depends(get_db)):
    return ExerciseService(db).create(data)
