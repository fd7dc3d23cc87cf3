"""
Plan generator: builds a fixed-length training cycle from the weekly catalog.

For day offset i the template slot is i % 7.  Each template is first adapted
for missing equipment, then its target is scaled by the difficulty
multiplier:

  rest unit or target 0  →  unchanged
  otherwise              →  max(1, round(target × difficulty))
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, timedelta

from .catalog import templates_for
from .config import CYCLE_LENGTH_DAYS, DAYS_PER_WEEK, REST_UNIT
from .equipment import adapt
from .metrics import round_half_up
from .models import Day, Exercise, Plan, UserPreferences, validate_difficulty


def scale_target(target: int | float, unit: str, difficulty: float) -> int | float:
    """
    Apply the difficulty multiplier to one target.

    Args:
        target: Target after equipment adaptation
        unit: Exercise unit
        difficulty: Multiplier (> 0)

    Returns:
        Scaled integer target, or the original target for rest/zero targets

    Raises:
        ValueError: If the scaled target is not a finite number
    """
    if unit == REST_UNIT or target <= 0:
        return target
    scaled = target * difficulty
    if not math.isfinite(scaled):
        raise ValueError(
            f"difficulty {difficulty:g} scales target {target} beyond a representable amount"
        )
    return max(1, round_half_up(scaled))


def build_day(
    weekday_index: int,
    difficulty: float,
    available_equipment: Iterable[str] | None,
) -> Day:
    """
    Build one plan day from the catalog slot.

    ``available_equipment=None`` skips equipment adaptation entirely.
    """
    exercises: list[Exercise] = []
    for template in templates_for(weekday_index):
        equipment = template.required_equipment if available_equipment is None else available_equipment
        ex = adapt(template, equipment)
        ex.target = scale_target(ex.target, ex.unit, difficulty)
        exercises.append(ex)
    return Day(exercises=exercises)


def generate_plan(
    start_date: date,
    difficulty: float = 1.0,
    available_equipment: Iterable[str] | None = None,
    cycle_length: int = CYCLE_LENGTH_DAYS,
) -> Plan:
    """
    Generate a training cycle.

    Args:
        start_date: First day of the cycle
        difficulty: Positive finite multiplier applied to every scalable target
        available_equipment: Equipment tags the user has (None = no adaptation)
        cycle_length: Number of days (default 30)

    Returns:
        New Plan with every exercise at completed=0

    Raises:
        ValueError: If difficulty is not positive and finite, scales a target
            past a finite amount, or cycle_length < 1
    """
    validate_difficulty(difficulty)
    if cycle_length < 1:
        raise ValueError(f"cycle_length must be at least 1, got {cycle_length}")

    equipment = frozenset(available_equipment) if available_equipment is not None else None

    days = [
        build_day(offset % DAYS_PER_WEEK, difficulty, equipment)
        for offset in range(cycle_length)
    ]

    return Plan(
        start_date=start_date,
        end_date=start_date + timedelta(days=cycle_length - 1),
        days=days,
        difficulty=difficulty,
    )


def generate_plan_for(
    preferences: UserPreferences,
    start_date: date,
    adjustment: float = 1.0,
) -> Plan:
    """
    Generate a plan from user preferences.

    The applied multiplier is ``preferences.difficulty × adjustment``.
    """
    return generate_plan(
        start_date,
        difficulty=preferences.difficulty * adjustment,
        available_equipment=preferences.available_equipment(),
    )
