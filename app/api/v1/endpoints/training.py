"""
Training log endpoints.

Sessions (with their sets) and recovery check-ins: the inputs the
engine reads.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.db.session import get_db
from app.schemas.training_session import (
    RecoveryCheckInCreate,
    RecoveryCheckInResponse,
    TrainingSessionCreate,
    TrainingSessionResponse,
)
from app.services.training_session_service import TrainingSessionService

router = APIRouter()


@router.post("/sessions", summary="Log a training session with its sets.", response_model=TrainingSessionResponse,
             status_code=status.HTTP_201_CREATED, )
def create_session(user_id: int, data: TrainingSessionCreate, db: Session = Depends(get_db)):
    return TrainingSessionService(db).create(user_id, data)


@router.get("/sessions/{session_id}", summary="Get a training session.", response_model=TrainingSessionResponse, )
def get_session(user_id: int, session_id: int, db: Session = Depends(get_db)):
    return TrainingSessionService(db).get_by_id(user_id, session_id)


@router.post("/sessions/{session_id}/complete", summary="Mark a session completed.",
             response_model=TrainingSessionResponse, )
def complete_session(user_id: int, session_id: int, db: Session = Depends(get_db)):
    return TrainingSessionService(db).complete(user_id, session_id)


@router.post("/recovery", summary="Record a recovery check-in.", response_model=RecoveryCheckInResponse,
             status_code=status.HTTP_201_CREATED, )
def create_check_in(user_id: int, data: RecoveryCheckInCreate, db: Session = Depends(get_db)):
    return TrainingSessionService(db).add_check_in(user_id, data)
