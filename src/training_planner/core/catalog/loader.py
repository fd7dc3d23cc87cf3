"""
YAML → ExerciseTemplate loader.

Loads the weekly template catalog from the bundled
``src/training_planner/catalog.yaml``.

User overrides: a file with the same layout at
``~/.training-planner/catalog.yaml``.  Every weekday slot listed there
replaces the bundled slot wholesale; unlisted slots keep the bundled
exercises.  Slot 6 must hold exactly one template with unit ``rest`` in
every file; an override breaking that is rejected like any other invalid
override.

Usage (internal, called by the catalog package at import time):
    from .loader import load_catalog_from_yaml
    catalog = load_catalog_from_yaml()   # {weekday: [ExerciseTemplate, ...]}
"""

from __future__ import annotations

import warnings
from pathlib import Path

import yaml

from ..config import DAYS_PER_WEEK, REST_UNIT, REST_WEEKDAY, get_app_dir
from ..models import ExerciseTemplate

_REQUIRED_TEMPLATE_FIELDS: frozenset[str] = frozenset({"name", "target", "unit"})


def template_from_dict(d: dict) -> ExerciseTemplate:
    """Convert a raw dict (from YAML) to an ExerciseTemplate.

    Raises ValueError if any required field is absent or invalid.
    """
    if not isinstance(d, dict):
        raise ValueError(f"exercise entry must be a mapping, got {d!r}")
    missing = _REQUIRED_TEMPLATE_FIELDS - set(d)
    if missing:
        raise ValueError(f"ExerciseTemplate missing fields: {sorted(missing)}")
    target = d["target"]
    if isinstance(target, bool) or not isinstance(target, (int, float)):
        raise ValueError(f"target must be a number, got {target!r}")

    return ExerciseTemplate(
        name=str(d["name"]),
        base_target=target,
        unit=str(d["unit"]),  # type: ignore[arg-type]
        description=str(d.get("description") or ""),
        required_equipment=frozenset(str(tag) for tag in d.get("equipment") or ()),
    )


def catalog_from_dict(data: dict) -> dict[int, list[ExerciseTemplate]]:
    """Convert the parsed ``weekdays`` mapping to {weekday: templates}.

    Raises ValueError on a malformed layout, an out-of-range weekday, or a
    rest slot that is not a single rest template.
    """
    weekdays = data.get("weekdays")
    if not isinstance(weekdays, dict):
        raise ValueError("catalog must contain a 'weekdays' mapping")

    catalog: dict[int, list[ExerciseTemplate]] = {}
    for raw_key, slot in weekdays.items():
        try:
            weekday = int(raw_key)
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid weekday key: {raw_key!r}") from e
        if not 0 <= weekday < DAYS_PER_WEEK:
            raise ValueError(f"weekday must be 0..{DAYS_PER_WEEK - 1}, got {weekday}")
        if slot is not None and not isinstance(slot, dict):
            raise ValueError(f"weekday {weekday} must be a mapping")
        exercises = (slot or {}).get("exercises") or []
        templates = [template_from_dict(e) for e in exercises]
        if weekday == REST_WEEKDAY and (
            len(templates) != 1 or templates[0].unit != REST_UNIT
        ):
            raise ValueError(
                f"weekday {REST_WEEKDAY} must hold exactly one '{REST_UNIT}' exercise"
            )
        catalog[weekday] = templates
    return catalog


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file that must contain a mapping."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a mapping")
    return data


def get_bundled_catalog_path() -> Path:
    """Return the path of the bundled catalog.yaml."""
    # loader.py lives at src/training_planner/core/catalog/loader.py
    return Path(__file__).parent.parent.parent / "catalog.yaml"


def get_user_catalog_path() -> Path | None:
    """Return ~/.training-planner/catalog.yaml if it exists, else None."""
    p = get_app_dir() / "catalog.yaml"
    return p if p.exists() else None


def load_catalog_from_yaml() -> dict[int, list[ExerciseTemplate]]:
    """Return {weekday: [ExerciseTemplate, ...]} for weekdays 0..6.

    The bundled catalog must parse; errors there propagate.  A broken user
    override is reported with a warning and ignored.
    """
    catalog = catalog_from_dict(_load_yaml_file(get_bundled_catalog_path()))

    user_path = get_user_catalog_path()
    if user_path is not None:
        try:
            overrides = catalog_from_dict(_load_yaml_file(user_path))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            warnings.warn(
                f"training-planner: ignoring catalog override {user_path}: {exc}",
                stacklevel=2,
            )
        else:
            catalog.update(overrides)

    return catalog
