"""
Load rounding.

A suggestion finer than the equipment allows is useless in the gym, so
every weight the engine proposes is snapped to the smallest realistic
step for the implement (e.g. a pair of 2.5 lb plates on a barbell).
"""

from __future__ import annotations

import math

from app.schemas.exercise import Equipment

# Smallest realistic load step per implement, by weight unit.
EQUIPMENT_INCREMENTS: dict[str, dict[Equipment, float]] = {
    "lbs": {
        Equipment.BARBELL: 5.0,
        Equipment.DUMBBELL: 5.0,
        Equipment.MACHINE: 5.0,
        Equipment.CABLE: 2.5,
        Equipment.KETTLEBELL: 5.0,
        Equipment.BODYWEIGHT: 2.5,
    },
    "kg": {
        Equipment.BARBELL: 2.5,
        Equipment.DUMBBELL: 2.0,
        Equipment.MACHINE: 2.5,
        Equipment.CABLE: 1.25,
        Equipment.KETTLEBELL: 4.0,
        Equipment.BODYWEIGHT: 1.25,
    },
}


def load_step(equipment: Equipment | str, unit: str = "lbs") -> float:
    """Smallest load increment for ``equipment`` in ``unit``."""
    table = EQUIPMENT_INCREMENTS.get(unit, EQUIPMENT_INCREMENTS["lbs"])
    return table.get(Equipment(equipment), 5.0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (not banker's)."""
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def snap_weight(weight: float, step: float, mode: str = "nearest") -> float:
    """Snap ``weight`` to a multiple of ``step``.

    Args:
        weight: Raw weight.
        step: Load granularity (> 0).
        mode: ``nearest``, ``up`` or ``down``.

    Returns:
        Non-negative multiple of ``step``.
    """
    if step <= 0:
        raise ValueError("step must be positive")
    if weight <= 0:
        return 0.0

    # Guard against float noise such as 184.99999 / 5.
    units = round(weight / step, 6)
    if mode == "up":
        n = math.ceil(units)
    elif mode == "down":
        n = math.floor(units)
    else:
        n = round_half_up(units)
    return round(n * step, 4)
