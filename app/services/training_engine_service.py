"""
Training engine service.

Wires the engine to the database through :class:`SqlEngineStore` and
turns engine errors into HTTP errors for the API layer.  Reference dates
default to today; every method accepts an explicit ``as_of`` so results
are reproducible.
"""

import datetime
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import HTTPException, status
from sqlmodel import Session

from app.adapt import advisor, deload, fatigue, gate, suggestion
from app.adapt.history import SqlEngineStore
from app.adapt.loading import load_step
from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError
from app.schemas.deload import (
    ActiveDeload,
    DeloadDecision,
    DeloadPeriodRecord,
    DeloadStartRequest,
    TrainingModifiers,
)
from app.schemas.fatigue import FatigueLogEntry, FatigueResult
from app.schemas.progression import (
    PlateauStrategy,
    ProgressionGateResult,
    ProgressionRecommendation,
)
from app.schemas.suggestion import LastSet, SlotTarget, WarmupSet, WeightSuggestion


@contextmanager
def _http_errors() -> Iterator[None]:
    """Map engine errors onto HTTP status codes."""
    try:
        yield
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.detail) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.detail) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


class TrainingEngineService:
    """Service exposing the adaptive training engine."""

    def __init__(self, session: Session):
        self.store = SqlEngineStore(session)
        self.fatigue_config = fatigue.FatigueConfig(lookback_days=settings.FATIGUE_LOOKBACK_DAYS)
        self.advisor_config = advisor.AdvisorConfig(weight_unit=settings.WEIGHT_UNIT)
        self.suggestion_config = suggestion.SuggestionConfig(weight_unit=settings.WEIGHT_UNIT)
        self.combine_strategy = settings.MODIFIER_COMBINATION

    # ------------------------------------------------------------------
    # Fatigue
    # ------------------------------------------------------------------

    def compute_fatigue(
        self, user_id: int, as_of: Optional[datetime.date] = None, days: Optional[int] = None,
    ) -> FatigueResult:
        with _http_errors():
            return fatigue.compute_fatigue(
                self.store, user_id, as_of or datetime.date.today(), days, self.fatigue_config,
            )

    def log_fatigue(self, user_id: int, as_of: Optional[datetime.date] = None) -> FatigueLogEntry:
        """Compute today's fatigue and upsert it into the daily log."""
        result = self.compute_fatigue(user_id, as_of)
        return fatigue.log_fatigue(self.store, user_id, result)

    def get_fatigue_history(
        self, user_id: int, as_of: Optional[datetime.date] = None, days: int = 30,
    ) -> list[FatigueLogEntry]:
        with _http_errors():
            return fatigue.get_fatigue_history(self.store, user_id, as_of or datetime.date.today(), days)

    # ------------------------------------------------------------------
    # Deload
    # ------------------------------------------------------------------

    def check_deload_needed(self, user_id: int, as_of: Optional[datetime.date] = None) -> DeloadDecision:
        ref = as_of or datetime.date.today()
        result = self.compute_fatigue(user_id, ref)
        with _http_errors():
            return deload.check_deload_needed(self.store, user_id, ref, result)

    def get_active_deload(self, user_id: int, as_of: Optional[datetime.date] = None) -> Optional[ActiveDeload]:
        with _http_errors():
            return deload.get_active_deload(self.store, user_id, as_of or datetime.date.today())

    def start_deload(
        self, user_id: int, request: DeloadStartRequest, as_of: Optional[datetime.date] = None,
    ) -> DeloadPeriodRecord:
        """Start a manual deload."""
        with _http_errors():
            decision = deload.manual_decision(
                deload_type=request.deload_type,
                duration_days=request.duration_days,
                reason=request.reason,
                volume_modifier=request.volume_modifier,
                intensity_modifier=request.intensity_modifier,
            )
            return deload.start_deload(self.store, user_id, decision, as_of or datetime.date.today())

    def start_deload_if_needed(
        self, user_id: int, as_of: Optional[datetime.date] = None,
    ) -> tuple[DeloadDecision, Optional[DeloadPeriodRecord]]:
        """Evaluate the rules and start a deload when they call for one."""
        ref = as_of or datetime.date.today()
        decision = self.check_deload_needed(user_id, ref)
        if not decision.should_deload:
            return decision, None
        with _http_errors():
            return decision, deload.start_deload(self.store, user_id, decision, ref)

    def end_deload(self, user_id: int, as_of: Optional[datetime.date] = None) -> Optional[DeloadPeriodRecord]:
        with _http_errors():
            return deload.end_active_deload(self.store, user_id, as_of or datetime.date.today())

    def get_deload_history(self, user_id: int, limit: int = 10) -> list[DeloadPeriodRecord]:
        with _http_errors():
            return deload.get_deload_history(self.store, user_id, limit)

    def current_modifiers(self, user_id: int, as_of: Optional[datetime.date] = None) -> TrainingModifiers:
        """Active deload combined with any return-from-break reduction."""
        ref = as_of or datetime.date.today()
        active = self.get_active_deload(user_id, ref)
        last = self.store.last_session_date(user_id, before=ref)
        days_off = (ref - last).days if last is not None else None
        return deload.combine_modifiers(
            deload.apply_deload_modifiers(active),
            deload.return_from_break_modifiers(days_off),
            strategy=self.combine_strategy,
        )

    # ------------------------------------------------------------------
    # Progression
    # ------------------------------------------------------------------

    def check_progression_gate(
        self, user_id: int, exercise_id: str, as_of: Optional[datetime.date] = None,
    ) -> ProgressionGateResult:
        ref = as_of or datetime.date.today()
        with _http_errors():
            result = fatigue.compute_fatigue(self.store, user_id, ref, config=self.fatigue_config)
            return gate.check_progression_gate(
                self.store, user_id, exercise_id, ref, result, advisor_config=self.advisor_config,
            )

    def get_progression_recommendation(
        self, user_id: int, exercise_id: str, as_of: Optional[datetime.date] = None,
    ) -> ProgressionRecommendation:
        """Advisor result after the progression gate; a blocked gate holds the weight."""
        ref = as_of or datetime.date.today()
        with _http_errors():
            result = fatigue.compute_fatigue(self.store, user_id, ref, config=self.fatigue_config)
            return gate.get_gated_recommendation(
                self.store, user_id, exercise_id, ref, result, advisor_config=self.advisor_config,
            )

    def find_ready_exercises(self, user_id: int, as_of: Optional[datetime.date] = None) -> list[ProgressionRecommendation]:
        with _http_errors():
            return gate.find_exercises_ready_to_progress(
                self.store, user_id, as_of or datetime.date.today(), advisor_config=self.advisor_config,
            )

    def find_plateaued_exercises(
        self, user_id: int, as_of: Optional[datetime.date] = None,
    ) -> list[ProgressionRecommendation]:
        with _http_errors():
            return advisor.find_plateaued_exercises(
                self.store, user_id, as_of or datetime.date.today(), config=self.advisor_config,
            )

    @staticmethod
    def get_plateau_strategies() -> list[PlateauStrategy]:
        return advisor.get_plateau_strategies()

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def suggest_weight(
        self, user_id: int, exercise_id: str, target: SlotTarget, as_of: Optional[datetime.date] = None,
    ) -> WeightSuggestion:
        """Next-session prescription for one exercise slot."""
        ref = as_of or datetime.date.today()
        with _http_errors():
            exercise = advisor.require_exercise(self.store, user_id, exercise_id)
            history = advisor.load_exercise_history(
                self.store, user_id, exercise_id, ref, self.advisor_config.history_days,
                self.advisor_config.max_sessions,
            )
            result = fatigue.compute_fatigue(self.store, user_id, ref, config=self.fatigue_config)
            verdict = gate.check_progression_gate(
                self.store, user_id, exercise_id, ref, result, advisor_config=self.advisor_config,
            )
            recommendation = advisor.recommend_progression(
                exercise_id, history, exercise.category, exercise.equipment, self.advisor_config, gate=verdict,
            )
            modifiers = self.current_modifiers(user_id, ref)
            if target.rest_seconds is None:
                target = target.model_copy(update={"rest_seconds": exercise.default_rest_seconds})

        last_set = None
        if history:
            top = history[0]
            last_set = LastSet(weight=top.weight, reps=max(1, top.reps), rpe=top.rpe)

        return suggestion.suggest_weight(
            target,
            last_set=last_set,
            recommendation=recommendation,
            modifiers=modifiers,
            category=exercise.category,
            equipment=exercise.equipment,
            fatigue_score=result.score,
            config=self.suggestion_config,
        )

    def warmup_sets(self, user_id: int, exercise_id: str, working_weight: float) -> list[WarmupSet]:
        with _http_errors():
            exercise = advisor.require_exercise(self.store, user_id, exercise_id)
        step = load_step(exercise.equipment, settings.WEIGHT_UNIT)
        return suggestion.warmup_sets(working_weight, step, self.suggestion_config)
