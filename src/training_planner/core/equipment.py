"""
Equipment-aware exercise adaptation.

Catalog templates may require equipment tags (``gantere``, ``banda``,
``vesta``).  When a user lacks any required tag the exercise is kept but
degraded: the target is halved and the name and description are annotated.

Rules
-----
  required ⊆ available         →  unchanged
  otherwise, rest unit or 0    →  annotated, target unchanged
  otherwise                    →  annotated, target = max(1, round(target × 0.5))
"""

from __future__ import annotations

from collections.abc import Iterable

from .config import (
    ADAPTED_DESCRIPTION_NOTE,
    ADAPTED_NAME_MARKER,
    EQUIPMENT_ADAPTATION_RATIO,
    EQUIPMENT_LABELS,
    REST_UNIT,
)
from .metrics import round_half_up
from .models import Exercise, ExerciseTemplate


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def get_label(tag: str) -> str:
    """Return the display label for an equipment tag (the tag itself if unknown)."""
    return EQUIPMENT_LABELS.get(tag, tag)


def has_required_equipment(required: Iterable[str], available: Iterable[str]) -> bool:
    """Capability check: every required tag is available."""
    return frozenset(required) <= frozenset(available)


def adapted_target(target: int | float, unit: str) -> int | float:
    """
    Target after equipment adaptation.

    Rest-unit and zero targets are left as they are.
    """
    if unit == REST_UNIT or target <= 0:
        return target
    return max(1, round_half_up(target * EQUIPMENT_ADAPTATION_RATIO))


def adapt(template: ExerciseTemplate, available_equipment: Iterable[str]) -> Exercise:
    """
    Build a plan exercise from a template, degraded if equipment is missing.

    The template itself is never modified.

    Args:
        template: Catalog template
        available_equipment: Tags the user has

    Returns:
        New Exercise with completed=0 and the template's (or adapted) fields
    """
    if has_required_equipment(template.required_equipment, available_equipment):
        return Exercise(
            name=template.name,
            target=template.base_target,
            unit=template.unit,
            description=template.description,
            required_equipment=template.required_equipment,
        )

    return Exercise(
        name=f"{template.name}{ADAPTED_NAME_MARKER}",
        target=adapted_target(template.base_target, template.unit),
        unit=template.unit,
        description=f"{template.description}{ADAPTED_DESCRIPTION_NOTE}",
        required_equipment=template.required_equipment,
    )
