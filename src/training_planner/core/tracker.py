"""
Completion tracking and carry-over.

Recording a day stores what was actually done, turns every unmet target into
a recovery exercise, and appends those to the following day.  Carry-over only
ever moves forward one day; whatever is unmet on the last day of the cycle is
dropped.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from .config import RECOVERY_DESCRIPTION_TEMPLATE, RECOVERY_NAME_MARKER
from .metrics import completion_ratio
from .models import Exercise, Plan


def coerce_completed(value: Any) -> int | float:
    """
    Turn raw user input into a non-negative completed amount.

    None, non-numeric, NaN and infinite values become 0; negatives are
    clamped to 0.  Integral values are returned as int.
    """
    if value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number <= 0:
        return 0
    return int(number) if number.is_integer() else number


def carry_over_for(exercise: Exercise) -> Exercise | None:
    """
    Build the recovery exercise for an unmet target.

    Returns:
        New Exercise with target = target - completed, or None if nothing is left
    """
    remaining = exercise.target - exercise.completed
    if remaining <= 0:
        return None
    if isinstance(remaining, float) and remaining.is_integer():
        remaining = int(remaining)
    return Exercise(
        name=f"{exercise.name}{RECOVERY_NAME_MARKER}",
        target=remaining,
        unit=exercise.unit,
        description=RECOVERY_DESCRIPTION_TEMPLATE.format(name=exercise.name),
    )


def build_carry_over(exercises: Sequence[Exercise]) -> list[Exercise]:
    """Recovery exercises for every unmet target, in source order."""
    carry: list[Exercise] = []
    for ex in exercises:
        recovery = carry_over_for(ex)
        if recovery is not None:
            carry.append(recovery)
    return carry


def with_carry_over(
    next_exercises: Sequence[Exercise],
    carry_over: Sequence[Exercise],
) -> list[Exercise]:
    """
    Return a new exercise list: the next day's exercises followed by carry-over.

    Neither input is modified.
    """
    return [*next_exercises, *carry_over]


def validate_day_index(plan: Plan, day_index: int) -> None:
    """
    Raise IndexError unless day_index addresses a day of the plan.
    """
    if isinstance(day_index, bool) or not isinstance(day_index, int):
        raise IndexError(f"Day index must be an integer, got {day_index!r}")
    if day_index < 0 or day_index >= len(plan.days):
        raise IndexError(
            f"Day index {day_index} out of range (0–{len(plan.days) - 1})"
        )


def apply_day_completion(
    plan: Plan,
    day_index: int,
    completed_values: Sequence[Any],
    feedback: str = "",
) -> list[Exercise]:
    """
    Record one day and push its unmet volume to the next day.

    Args:
        plan: Plan to update in place
        day_index: 0-based day index
        completed_values: Amounts aligned with the day's exercises; missing
            or invalid entries count as 0
        feedback: Free-text note stored on the day

    Returns:
        The carry-over exercises appended to the next day (empty on the last day)

    Raises:
        IndexError: If day_index is outside the plan (nothing is modified)
    """
    validate_day_index(plan, day_index)

    day = plan.days[day_index]
    for idx, ex in enumerate(day.exercises):
        raw = completed_values[idx] if idx < len(completed_values) else None
        ex.completed = coerce_completed(raw)

    carry = build_carry_over(day.exercises)
    placed: list[Exercise] = []
    if carry and day_index < plan.last_day_index:
        next_day = plan.days[day_index + 1]
        next_day.exercises = with_carry_over(next_day.exercises, carry)
        next_day.completion = completion_ratio(next_day)
        placed = carry

    day.feedback = feedback or ""
    day.completion = completion_ratio(day)
    return placed


def record_completion(
    plan: Plan,
    day_index: int,
    completed_values: Sequence[Any],
    feedback: str = "",
) -> bool:
    """
    Record one day's completion.

    Returns:
        True if carry-over exercises were added to the next day
    """
    return bool(apply_day_completion(plan, day_index, completed_values, feedback))
