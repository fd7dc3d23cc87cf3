"""
Cycle adaptation: end-of-cycle difficulty decision and plan succession.

When the last day of a plan is recorded the plan's average completion
picks an adjustment factor:

  avg ≥ 0.8        →  1.1  (harder)
  0.5 ≤ avg < 0.8  →  1.0  (unchanged)
  avg < 0.5        →  0.8  (easier)

The next plan starts the day after the old plan ends and uses
``user baseline difficulty × factor``.  Plan history is append-only.
"""

import copy
from collections.abc import Sequence
from datetime import date, timedelta
from typing import Any

from .config import (
    EASE_FACTOR,
    EASE_THRESHOLD,
    HARDEN_FACTOR,
    HARDEN_THRESHOLD,
    HOLD_FACTOR,
)
from .metrics import average_completion
from .models import DayRecordResult, Plan, PlanState, User, UserPreferences, validate_difficulty
from .planner import generate_plan_for
from .tracker import apply_day_completion, validate_day_index


def difficulty_for_average(avg: float) -> float:
    """
    Step function from average completion to the next-cycle factor.

    Args:
        avg: Average completion ratio in [0, 1]

    Returns:
        HARDEN_FACTOR, HOLD_FACTOR or EASE_FACTOR
    """
    if avg >= HARDEN_THRESHOLD:
        return HARDEN_FACTOR
    if avg < EASE_THRESHOLD:
        return EASE_FACTOR
    return HOLD_FACTOR


def next_difficulty(plan: Plan) -> float:
    """Adjustment factor for the cycle following this plan."""
    return difficulty_for_average(average_completion(plan))


def next_plan_start(plan: Plan) -> date:
    """The day after the plan ends."""
    return plan.end_date + timedelta(days=1)


def build_next_plan(preferences: UserPreferences, plan: Plan) -> Plan:
    """
    Generate the plan that follows ``plan`` without attaching it to anyone.

    Raises:
        ValueError: If baseline × factor cannot produce finite targets
    """
    factor = next_difficulty(plan)
    return generate_plan_for(preferences, next_plan_start(plan), adjustment=factor)


def record_day(
    user: User,
    plan: Plan,
    day_index: int,
    completed_values: Sequence[Any],
    feedback: str = "",
) -> DayRecordResult:
    """
    Record completion for one day of a user's plan.

    Updates the day, carries unmet targets to the next day, and, when the
    recorded day is the last of the cycle, appends the next plan to the
    user's history.  Recording the last day early still closes the cycle.

    Args:
        user: Owner of the plan; receives the next plan if one is spawned
        plan: Plan being recorded
        day_index: 0-based day index
        completed_values: Amounts aligned with the day's exercises
        feedback: Free-text note

    Returns:
        DayRecordResult with the carry-over placed and any spawned plan

    Raises:
        IndexError: If day_index is outside the plan
        ValueError: If the user's baseline difficulty is invalid or the next
            plan cannot be generated
    """
    validate_day_index(plan, day_index)
    validate_difficulty(user.preferences.difficulty)

    # Work on a copy; plan and user change only once every step has succeeded
    trial = copy.deepcopy(plan)
    carry = apply_day_completion(trial, day_index, completed_values, feedback)

    result = DayRecordResult(carry_over=carry)
    if day_index == trial.last_day_index:
        result.next_plan = build_next_plan(user.preferences, trial)

    plan.days[:] = trial.days
    if result.next_plan is not None:
        user.plans.append(result.next_plan)
    return result


def plan_state(plan: Plan, today: date) -> PlanState:
    """ACTIVE while today ≤ end_date, EXPIRED afterwards."""
    return "ACTIVE" if today <= plan.end_date else "EXPIRED"


def get_current_plan(user: User, today: date) -> Plan | None:
    """
    Return the most recently appended plan that has not expired.

    Returns:
        Plan or None if every plan ended before today
    """
    for plan in reversed(user.plans):
        if plan_state(plan, today) == "ACTIVE":
            return plan
    return None


def register_user(
    user_id: str,
    today: date,
    preferences: UserPreferences | None = None,
) -> User:
    """
    Create a user and generate their first plan starting today.
    """
    user = User(user_id=user_id, preferences=preferences or UserPreferences())
    user.plans.append(generate_plan_for(user.preferences, today))
    return user


def start_next_plan(user: User, today: date) -> Plan:
    """
    Explicitly generate a plan starting today when none is current.

    Raises:
        ValueError: If the user still has an active plan
    """
    current = get_current_plan(user, today)
    if current is not None:
        raise ValueError(
            f"Plan {current.start_date.isoformat()} – {current.end_date.isoformat()} "
            "is still active."
        )
    plan = generate_plan_for(user.preferences, today)
    user.plans.append(plan)
    return plan


def update_preferences(user: User, preferences: UserPreferences) -> None:
    """
    Replace the user's preferences.

    Existing plans are not touched; the next generated plan uses the new values.

    Raises:
        ValueError: If the preferences cannot produce a plan
    """
    validate_difficulty(preferences.difficulty)
    # Trial generation rejects multipliers that overflow a target
    generate_plan_for(preferences, date.min)
    user.preferences = preferences
