"""
Adaptive engine endpoints.

Fatigue, deload, progression and weight suggestions for one user.  Every
read accepts an optional ``as_of`` date (default: today) so results can
be reproduced for any past day.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from app.api.dependencies import get_training_engine
from app.schemas.deload import ActiveDeload, DeloadDecision, DeloadPeriodRecord, DeloadStartRequest, TrainingModifiers
from app.schemas.fatigue import FatigueLogEntry, FatigueResult
from app.schemas.progression import PlateauStrategy, ProgressionGateResult, ProgressionRecommendation
from app.schemas.suggestion import SlotTarget, WarmupSet, WeightSuggestion
from app.services.training_engine_service import TrainingEngineService

router = APIRouter()


class AutoDeloadResponse(BaseModel):
    decision: DeloadDecision
    period: Optional[DeloadPeriodRecord] = None


class SuggestionRequest(BaseModel):
    target: SlotTarget = Field(default_factory=SlotTarget)
    as_of: Optional[datetime.date] = None


# ----------------------------------------------------------------------
# Fatigue
# ----------------------------------------------------------------------


@router.get("/fatigue", summary="Current fatigue score.", response_model=FatigueResult, )
def get_fatigue(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                days: Optional[int] = Query(None, ge=1, le=90, description="Lookback window in days"),
                engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.compute_fatigue(user_id, as_of, days)


@router.post("/fatigue/log", summary="Compute and store the daily fatigue score.", response_model=FatigueLogEntry, )
def log_fatigue(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.log_fatigue(user_id, as_of)


@router.get("/fatigue/history", summary="Logged fatigue scores, newest first.",
            response_model=list[FatigueLogEntry], )
def fatigue_history(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                    days: int = Query(30, ge=1, le=365),
                    engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.get_fatigue_history(user_id, as_of, days)


# ----------------------------------------------------------------------
# Deload
# ----------------------------------------------------------------------


@router.get("/deload/check", summary="Should the user deload?", response_model=DeloadDecision, )
def check_deload(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                 engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.check_deload_needed(user_id, as_of)


@router.get("/deload/active", summary="Active deload, if any.", response_model=Optional[ActiveDeload], )
def active_deload(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                  engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.get_active_deload(user_id, as_of)


@router.get("/deload/history", summary="Past deload periods, newest first.",
            response_model=list[DeloadPeriodRecord], )
def deload_history(user_id: int, limit: int = Query(10, ge=1, le=100),
                   engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.get_deload_history(user_id, limit)


@router.get("/deload/modifiers", summary="Training modifiers in effect.", response_model=TrainingModifiers, )
def current_modifiers(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                      engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.current_modifiers(user_id, as_of)


@router.post("/deload", summary="Start a manual deload.", response_model=DeloadPeriodRecord,
             status_code=status.HTTP_201_CREATED, )
def start_deload(user_id: int, data: DeloadStartRequest, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                 engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.start_deload(user_id, data, as_of)


@router.post("/deload/auto", summary="Start a deload if the rules call for one.",
             response_model=AutoDeloadResponse, )
def auto_deload(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                engine: TrainingEngineService = Depends(get_training_engine), ):
    decision, period = engine.start_deload_if_needed(user_id, as_of)
    return AutoDeloadResponse(decision=decision, period=period)


@router.post("/deload/end", summary="End the active deload early.",
             response_model=Optional[DeloadPeriodRecord], )
def end_deload(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
               engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.end_deload(user_id, as_of)


# ----------------------------------------------------------------------
# Progression
# ----------------------------------------------------------------------


@router.get("/exercises/{exercise_id}/gate", summary="May this exercise progress?",
            response_model=ProgressionGateResult, )
def progression_gate(user_id: int, exercise_id: str, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                     engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.check_progression_gate(user_id, exercise_id, as_of)


@router.get("/exercises/{exercise_id}/progression", summary="Next load target for an exercise.",
            response_model=ProgressionRecommendation, )
def progression(user_id: int, exercise_id: str, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.get_progression_recommendation(user_id, exercise_id, as_of)


@router.post("/exercises/{exercise_id}/suggestion", summary="Weight, reps, sets and rest for the next session.",
             response_model=WeightSuggestion, )
def suggestion(user_id: int, exercise_id: str, data: SuggestionRequest,
               engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.suggest_weight(user_id, exercise_id, data.target, data.as_of)


@router.get("/exercises/{exercise_id}/warmup", summary="Warm-up ramp for a working weight.",
            response_model=list[WarmupSet], )
def warmup(user_id: int, exercise_id: str, working_weight: float = Query(..., gt=0),
           engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.warmup_sets(user_id, exercise_id, working_weight)


@router.get("/progression/ready", summary="Exercises ready to go up in load.",
            response_model=list[ProgressionRecommendation], )
def ready_exercises(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                    engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.find_ready_exercises(user_id, as_of)


@router.get("/progression/plateaus", summary="Plateaued exercises.",
            response_model=list[ProgressionRecommendation], )
def plateaued_exercises(user_id: int, as_of: Optional[datetime.date] = Query(None, description="Reference date"),
                        engine: TrainingEngineService = Depends(get_training_engine), ):
    return engine.find_plateaued_exercises(user_id, as_of)


@router.get("/progression/plateau-strategies", summary="Ways to break a plateau.",
            response_model=list[PlateauStrategy], )
def plateau_strategies(user_id: int):
    return TrainingEngineService.get_plateau_strategies()
