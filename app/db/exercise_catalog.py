"""
Built-in exercise catalog.

Seeded into the ``exercises`` table by :func:`app.db.init_db.seed_exercises`.
Each entry is an :class:`~app.schemas.exercise.ExerciseInfo`; the category
picks the progression rule and the equipment picks the load step.

To add a new exercise, call :func:`register_exercise` or add a row to the
table below.  Exercises can also be added at runtime through the API.
"""

from __future__ import annotations

from app.schemas.exercise import Equipment, ExerciseCategory, ExerciseInfo

# ======================================================================
# Catalog storage
# ======================================================================

EXERCISE_CATALOG: dict[str, ExerciseInfo] = {}


def register_exercise(info: ExerciseInfo) -> None:
    """Register an exercise in the built-in catalog."""
    EXERCISE_CATALOG[info.exercise_id] = info


def get_exercise(exercise_id: str) -> ExerciseInfo | None:
    return EXERCISE_CATALOG.get(exercise_id)


# ======================================================================
# Catalog
# ======================================================================

# Aliases for brevity in the table below
C = ExerciseCategory.COMPOUND
I = ExerciseCategory.ISOLATION
BB = Equipment.BARBELL
DB = Equipment.DUMBBELL
MA = Equipment.MACHINE
CA = Equipment.CABLE
KB = Equipment.KETTLEBELL
BW = Equipment.BODYWEIGHT

# (slug, name, category, equipment, default rest seconds)
_BUILTIN: list[tuple[str, str, ExerciseCategory, Equipment, int]] = [
    # Lower body
    ("back_squat", "Back Squat", C, BB, 180),
    ("front_squat", "Front Squat", C, BB, 180),
    ("deadlift", "Deadlift", C, BB, 180),
    ("romanian_deadlift", "Romanian Deadlift", C, BB, 150),
    ("leg_press", "Leg Press", C, MA, 120),
    ("bulgarian_split_squat", "Bulgarian Split Squat", C, DB, 120),
    ("hip_thrust", "Hip Thrust", C, BB, 120),
    ("goblet_squat", "Goblet Squat", C, KB, 90),
    ("leg_extension", "Leg Extension", I, MA, 90),
    ("leg_curl", "Leg Curl", I, MA, 90),
    # Push
    ("bench_press", "Bench Press", C, BB, 180),
    ("overhead_press", "Overhead Press", C, BB, 150),
    ("incline_db_press", "Incline Dumbbell Press", C, DB, 120),
    ("dip", "Dip", C, BW, 120),
    ("lateral_raise", "Lateral Raise", I, DB, 60),
    ("tricep_pushdown", "Tricep Pushdown", I, CA, 60),
    # Pull
    ("barbell_row", "Barbell Row", C, BB, 150),
    ("pull_up", "Pull-Up", C, BW, 120),
    ("lat_pulldown", "Lat Pulldown", C, CA, 120),
    ("bicep_curl", "Bicep Curl", I, DB, 60),
    ("face_pull", "Face Pull", I, CA, 60),
    ("kettlebell_swing", "Kettlebell Swing", C, KB, 90),
]

for _slug, _name, _category, _equipment, _rest in _BUILTIN:
    register_exercise(ExerciseInfo(exercise_id=_slug, name=_name, category=_category, equipment=_equipment,
                                   default_rest_seconds=_rest))
