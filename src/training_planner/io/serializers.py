"""
JSON serialization for training-planner data models.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import json
import math
import re
from datetime import date, datetime
from typing import Any

from ..core.config import UNITS
from ..core.models import Day, Exercise, Plan, User, UserPreferences


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> date:
    """
    Parse an ISO date string.

    Args:
        date_str: Date string to validate

    Returns:
        Parsed date

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e


def validate_number(value: Any, name: str) -> int | float:
    """
    Validate that a value is a finite number (bools rejected).

    Raises:
        ValidationError: If value is not numeric
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    return value


def validate_non_negative(value: Any, name: str) -> int | float:
    """
    Validate that a value is a non-negative number.

    Raises:
        ValidationError: If value is negative
    """
    validate_number(value, name)
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: Any, name: str) -> int | float:
    """
    Validate that a value is a positive number.

    Raises:
        ValidationError: If value is not positive
    """
    validate_number(value, name)
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_unit(unit: Any) -> str:
    """
    Validate an exercise unit.

    Raises:
        ValidationError: If the unit is unknown
    """
    if unit not in UNITS:
        raise ValidationError(f"Invalid unit: {unit!r}. Must be one of {UNITS}")
    return unit


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """
    Convert Exercise to JSON-compatible dict.

    Equipment tags are written sorted so files diff cleanly.
    """
    d: dict[str, Any] = {
        "name": exercise.name,
        "target": exercise.target,
        "unit": exercise.unit,
        "description": exercise.description,
        "completed": exercise.completed,
    }
    if exercise.required_equipment:
        d["equipment"] = sorted(exercise.required_equipment)
    return d


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert dict to Exercise.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data.get("name"), str):
        raise ValidationError(f"Exercise name must be a string, got {data.get('name')!r}")
    validate_non_negative(data.get("target"), "target")
    validate_non_negative(data.get("completed", 0), "completed")
    validate_unit(data.get("unit"))

    return Exercise(
        name=data["name"],
        target=data["target"],
        unit=data["unit"],
        description=str(data.get("description") or ""),
        required_equipment=frozenset(str(t) for t in data.get("equipment") or ()),
        completed=data.get("completed", 0),
    )


def day_to_dict(day: Day) -> dict[str, Any]:
    """Convert Day to JSON-compatible dict."""
    return {
        "exercises": [exercise_to_dict(e) for e in day.exercises],
        "feedback": day.feedback,
        "completion": day.completion,
    }


def dict_to_day(data: dict[str, Any]) -> Day:
    """
    Convert dict to Day.

    Raises:
        ValidationError: If data is invalid
    """
    completion = validate_non_negative(data.get("completion", 0.0), "completion")
    if completion > 1:
        raise ValidationError(f"completion must be within [0, 1], got {completion}")

    return Day(
        exercises=[dict_to_exercise(e) for e in data.get("exercises", [])],
        feedback=str(data.get("feedback") or ""),
        completion=float(completion),
    )


def plan_to_dict(plan: Plan) -> dict[str, Any]:
    """Convert Plan to JSON-compatible dict."""
    return {
        "start_date": plan.start_date.isoformat(),
        "end_date": plan.end_date.isoformat(),
        "difficulty": plan.difficulty,
        "days": [day_to_dict(d) for d in plan.days],
    }


def dict_to_plan(data: dict[str, Any]) -> Plan:
    """
    Convert dict to Plan.

    Raises:
        ValidationError: If data is invalid
    """
    start = validate_date(data.get("start_date"))
    end = validate_date(data.get("end_date"))
    if end < start:
        raise ValidationError(f"end_date {end} is before start_date {start}")
    difficulty = validate_positive(data.get("difficulty"), "difficulty")

    return Plan(
        start_date=start,
        end_date=end,
        days=[dict_to_day(d) for d in data.get("days", [])],
        difficulty=float(difficulty),
    )


def preferences_to_dict(preferences: UserPreferences) -> dict[str, Any]:
    """Convert UserPreferences to JSON-compatible dict."""
    return {
        "difficulty": preferences.difficulty,
        "equipment": dict(preferences.equipment),
    }


def dict_to_preferences(data: dict[str, Any]) -> UserPreferences:
    """
    Convert dict to UserPreferences.

    Missing fields fall back to the defaults (difficulty 1.0, all equipment).

    Raises:
        ValidationError: If data is invalid
    """
    defaults = UserPreferences()
    difficulty = validate_positive(data.get("difficulty", defaults.difficulty), "difficulty")

    raw_equipment = data.get("equipment")
    if raw_equipment is None:
        equipment = defaults.equipment
    elif isinstance(raw_equipment, dict):
        equipment = {str(k): bool(v) for k, v in raw_equipment.items()}
    else:
        raise ValidationError(f"equipment must be a mapping, got {raw_equipment!r}")

    return UserPreferences(difficulty=float(difficulty), equipment=equipment)


def user_to_dict(user: User) -> dict[str, Any]:
    """Convert User to JSON-compatible dict."""
    return {
        "user_id": user.user_id,
        "preferences": preferences_to_dict(user.preferences),
        "plans": [plan_to_dict(p) for p in user.plans],
    }


def dict_to_user(data: dict[str, Any]) -> User:
    """
    Convert dict to User.

    Raises:
        ValidationError: If data is invalid
    """
    user_id = data.get("user_id")
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError(f"Invalid user_id: {user_id!r}")

    return User(
        user_id=user_id,
        preferences=dict_to_preferences(data.get("preferences") or {}),
        plans=[dict_to_plan(p) for p in data.get("plans", [])],
    )


def user_to_json(user: User) -> str:
    """Serialize a user document (pretty-printed, UTF-8 text kept as is)."""
    return json.dumps(user_to_dict(user), indent=2, ensure_ascii=False)


def json_to_user(text: str) -> User:
    """
    Deserialize a user document.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("User document must be a JSON object")

    try:
        return dict_to_user(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e


def _parse_amount(part: str) -> float | None:
    try:
        return float(part)
    except ValueError:
        return None


def parse_completed_values(text: str) -> list[float | None]:
    """
    Parse a comma-separated list of completed amounts.

    Blank and non-numeric entries become None (treated as 0 when recorded),
    so "20,,30" and "20,abc,30" both leave the second exercise at 0.
    """
    if text is None or not text.strip():
        return []
    return [_parse_amount(part.strip()) for part in text.split(",")]


def invalid_completed_entries(text: str) -> list[str]:
    """Non-blank entries of a completed-values list that are not numbers."""
    if text is None:
        return []
    parts = [part.strip() for part in text.split(",")]
    return [part for part in parts if part and _parse_amount(part) is None]
