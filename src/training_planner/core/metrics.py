"""
Completion metrics.

completion_ratio is the single source of truth for "how much of a day was
done"; plan averages, statistics, reminders and cycle adaptation all go
through it.
"""

import math
from datetime import date

from .models import Day, Plan


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero for positive values.

    Python's round() uses banker's rounding (round(16.5) == 16); target
    scaling needs 16.5 → 17.
    """
    return int(math.floor(value + 0.5))


def completion_ratio(day: Day) -> float:
    """
    Fraction of a day's target volume actually performed.

    Rest exercises count as one unit, done iff completed > 0.  Other units
    contribute their target to the total and min(completed, target) to done.

    Args:
        day: Day to evaluate

    Returns:
        Ratio in [0, 1]; 0 for an empty day or a zero total
    """
    if not day.exercises:
        return 0.0

    total = 0.0
    done = 0.0
    for ex in day.exercises:
        if ex.is_rest:
            total += 1
            done += 1 if ex.completed > 0 else 0
        else:
            total += ex.target
            done += min(ex.completed, ex.target)

    if total == 0:
        return 0.0
    return done / total


def average_completion(plan: Plan) -> float:
    """Mean completion ratio over all days of the plan (0 for an empty plan)."""
    if not plan.days:
        return 0.0
    return sum(completion_ratio(d) for d in plan.days) / len(plan.days)


def daily_completion_percentages(plan: Plan) -> list[int]:
    """Per-day completion as whole percentages, in day order."""
    return [round_half_up(completion_ratio(d) * 100) for d in plan.days]


def day_index_for(plan: Plan, on: date) -> int | None:
    """
    Return the plan day index that falls on the given date.

    Returns:
        0-based index, or None if the date lies outside the plan
    """
    offset = (on - plan.start_date).days
    if offset < 0 or offset >= len(plan.days):
        return None
    return offset


def needs_reminder(plan: Plan, today: date) -> bool:
    """True if today is a plan day and that day is not fully completed."""
    idx = day_index_for(plan, today)
    if idx is None:
        return False
    return completion_ratio(plan.days[idx]) < 1
