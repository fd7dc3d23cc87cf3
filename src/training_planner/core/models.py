"""
Data models for training-planner.

All core dataclasses representing templates, plan instances, and users.
Calendar values are ``datetime.date``; serialization to ISO strings is
handled in ``io.serializers``.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from .config import DEFAULT_DIFFICULTY, EQUIPMENT_LABELS, UNITS

Unit = Literal["reps", "sec", "min", "rest"]
PlanState = Literal["ACTIVE", "EXPIRED"]


def _validate_unit(unit: str) -> None:
    if unit not in UNITS:
        raise ValueError(f"Invalid unit: {unit!r}. Must be one of {UNITS}")


def validate_difficulty(difficulty: float) -> None:
    """Raise ValueError unless difficulty is a positive finite number."""
    if isinstance(difficulty, bool) or not isinstance(difficulty, (int, float)):
        raise ValueError(f"difficulty must be a number, got {difficulty!r}")
    if not math.isfinite(difficulty) or difficulty <= 0:
        raise ValueError(f"difficulty must be a positive finite number, got {difficulty}")


@dataclass(frozen=True)
class ExerciseTemplate:
    """
    A catalog entry for one weekday slot.

    Never mutated; plan exercises are built from it by the generator.
    """

    name: str
    base_target: int | float
    unit: Unit
    description: str = ""
    required_equipment: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        """Validate template data."""
        if self.base_target < 0:
            raise ValueError("base_target must be non-negative")
        _validate_unit(self.unit)


@dataclass
class Exercise:
    """
    One exercise inside a plan day.

    ``completed`` may exceed ``target`` as stored; the completion ratio caps
    each exercise's contribution at its target.
    """

    name: str
    target: int | float
    unit: Unit
    description: str = ""
    required_equipment: frozenset[str] = frozenset()
    completed: int | float = 0

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if self.target < 0:
            raise ValueError("target must be non-negative")
        if self.completed < 0:
            raise ValueError("completed must be non-negative")
        _validate_unit(self.unit)

    @property
    def is_rest(self) -> bool:
        return self.unit == "rest"


@dataclass
class Day:
    """A single day of a plan: ordered exercises, free-text feedback, cached ratio."""

    exercises: list[Exercise] = field(default_factory=list)
    feedback: str = ""
    completion: float = 0.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.completion <= 1.0:
            raise ValueError(f"completion must be within [0, 1], got {self.completion}")


@dataclass
class Plan:
    """
    A fixed-length training cycle.

    Only the contents of its days change after generation.
    """

    start_date: date
    end_date: date
    days: list[Day]
    difficulty: float

    def __post_init__(self) -> None:
        """Validate plan data."""
        validate_difficulty(self.difficulty)
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")

    @property
    def last_day_index(self) -> int:
        return len(self.days) - 1


@dataclass
class UserPreferences:
    """
    Baseline difficulty and equipment availability.

    ``equipment`` maps a tag to whether the user owns it.  A tag that is absent
    or mapped to False counts as unavailable.
    """

    difficulty: float = DEFAULT_DIFFICULTY
    equipment: dict[str, bool] = field(
        default_factory=lambda: {tag: True for tag in EQUIPMENT_LABELS}
    )

    def __post_init__(self) -> None:
        """Validate preference data."""
        validate_difficulty(self.difficulty)

    def available_equipment(self) -> frozenset[str]:
        """Return the set of tags the user has."""
        return frozenset(tag for tag, owned in self.equipment.items() if owned)


@dataclass
class User:
    """
    A user with preferences and an append-only plan history.
    """

    user_id: str
    preferences: UserPreferences = field(default_factory=UserPreferences)
    plans: list[Plan] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.user_id or not self.user_id.strip():
            raise ValueError("user_id must be a non-empty string")


@dataclass
class DayRecordResult:
    """
    Outcome of recording one day's completion.

    ``next_plan`` is set only when the recorded day closed the cycle.
    """

    carry_over: list[Exercise] = field(default_factory=list)  # appended to the next day
    next_plan: Plan | None = None

    @property
    def carry_over_produced(self) -> bool:
        return bool(self.carry_over)
