"""What would the engine tell you TODAY (2026-02-08)?

Replays a short training log into an in-memory SQLite database and
prints the daily readout: fatigue, deload decision, modifiers in effect
and the next prescription for every logged exercise.

Usage:
    python scripts/simulate_today.py
"""

import datetime
import sys
from collections import defaultdict
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlmodel import Session, SQLModel

from app.db import base  # noqa: F401
from app.db.init_db import seed_exercises
from app.db.session import build_engine
from app.schemas.suggestion import SlotTarget
from app.schemas.training_session import ExerciseSetCreate, RecoveryCheckInCreate, TrainingSessionCreate
from app.schemas.user import UserCreate
from app.services.training_engine_service import TrainingEngineService
from app.services.training_session_service import TrainingSessionService
from app.services.user_service import UserService

TODAY = datetime.date(2026, 2, 8)

# (date, exercise slug, weight, reps, rpe); rpe None marks a warmup set
RAW_DATA = [
    ("2026-01-19", "back_squat", 135, 8, None),
    ("2026-01-19", "back_squat", 225, 5, 7.5),
    ("2026-01-19", "back_squat", 225, 5, 8.0),
    ("2026-01-19", "bench_press", 185, 8, 7.5),
    ("2026-01-19", "bench_press", 185, 8, 8.0),
    ("2026-01-22", "deadlift", 315, 5, 8.0),
    ("2026-01-22", "overhead_press", 115, 6, 8.5),
    ("2026-01-22", "lateral_raise", 20, 12, 7.0),
    ("2026-01-26", "back_squat", 135, 8, None),
    ("2026-01-26", "back_squat", 230, 5, 8.0),
    ("2026-01-26", "back_squat", 230, 5, 8.5),
    ("2026-01-26", "bench_press", 190, 8, 8.0),
    ("2026-01-29", "deadlift", 325, 5, 8.5),
    ("2026-01-29", "overhead_press", 115, 6, 9.0),
    ("2026-01-29", "lateral_raise", 20, 12, 7.0),
    ("2026-02-02", "back_squat", 235, 5, 9.0),
    ("2026-02-02", "bench_press", 190, 7, 9.0),
    ("2026-02-03", "deadlift", 325, 4, 9.5),
    ("2026-02-03", "overhead_press", 115, 5, 9.5),
    ("2026-02-04", "lateral_raise", 20, 12, 7.5),
    ("2026-02-05", "back_squat", 235, 4, 9.5),
    ("2026-02-05", "bench_press", 190, 6, 9.5),
    ("2026-02-06", "deadlift", 325, 3, 10.0),
]

# (date, sleep hours, energy 1-5, soreness 1-5)
CHECK_INS = [
    ("2026-02-05", 6.0, 3, 3),
    ("2026-02-06", 5.0, 2, 4),
    ("2026-02-07", 5.5, 2, 4),
]


def build_sessions(raw_data):
    """Group raw sets by date into session payloads."""
    by_date = defaultdict(list)
    for date, slug, weight, reps, rpe in raw_data:
        by_date[date].append((slug, weight, reps, rpe))

    sessions = []
    for date in sorted(by_date):
        sets = [
            ExerciseSetCreate(exercise_id=slug, set_number=i, weight=weight, reps=reps, rpe=rpe,
                              is_warmup=rpe is None)
            for i, (slug, weight, reps, rpe) in enumerate(by_date[date], start=1)
        ]
        sessions.append(TrainingSessionCreate(date=datetime.date.fromisoformat(date), sets=sets))
    return sessions


def main():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)

    with Session(engine) as db:
        seed_exercises(db)
        user = UserService(db).register(UserCreate(email="athlete@example.com", full_name="Demo Athlete"))

        log = TrainingSessionService(db)
        for payload in build_sessions(RAW_DATA):
            log.create(user.id, payload)
        for date, sleep, energy, soreness in CHECK_INS:
            log.add_check_in(user.id, RecoveryCheckInCreate(
                date=datetime.date.fromisoformat(date), sleep_hours=sleep, energy_level=energy, soreness=soreness,
            ))

        service = TrainingEngineService(db)

        print("=" * 64)
        print(f"  Daily readout for {TODAY.strftime('%A %d %B %Y')}")
        print("=" * 64)

        fatigue = service.compute_fatigue(user.id, TODAY)
        f = fatigue.factors
        print(f"\n  Fatigue: {fatigue.score}/10 ({fatigue.status.level}) - {fatigue.status.message}")
        print(f"    rpe_creep={f.rpe_creep} performance_drop={f.performance_drop} "
              f"recovery_debt={f.recovery_debt} volume_load={f.volume_load} streak={f.streak}")
        for rec in fatigue.recommendations:
            print(f"    * {rec}")

        decision, period = service.start_deload_if_needed(user.id, TODAY)
        print(f"\n  Deload: {decision.reason}")
        if period is not None:
            print(f"    Started {period.deload_type} deload for {period.duration_days} days "
                  f"(volume x{period.volume_modifier}, intensity x{period.intensity_modifier})")

        modifiers = service.current_modifiers(user.id, TODAY)
        print(f"\n  Modifiers: volume x{modifiers.volume_modifier}, intensity x{modifiers.intensity_modifier}")

        print("\n  Next session")
        print("  " + "-" * 60)
        slugs = sorted({slug for _, slug, _, _, _ in RAW_DATA})
        for slug in slugs:
            rec = service.get_progression_recommendation(user.id, slug, TODAY)
            gate = service.check_progression_gate(user.id, slug, TODAY)
            s = service.suggest_weight(user.id, slug, SlotTarget(sets=3, rep_range_min=5, rep_range_max=8), TODAY)
            print(f"  {slug:<16} {rec.status:<9} {s.sets} x {s.reps} @ {s.weight:g} lbs, rest {s.rest_seconds}s")
            if not gate.can_progress:
                print(f"  {'':<16} blocked by {gate.blocked_by}: {gate.reason}")

        print("=" * 64)


if __name__ == "__main__":
    main()
