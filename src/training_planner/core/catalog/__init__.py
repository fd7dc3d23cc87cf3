"""
Exercise template catalog.

Weekday slots 0 (Luni) through 6 (Duminică) each hold an ordered list of
ExerciseTemplate entries.  The catalog is loaded from YAML once at import
time.  A bundled file that cannot be loaded raises RuntimeError.
"""

from ..models import ExerciseTemplate
from .loader import load_catalog_from_yaml


def _build_catalog() -> dict[int, tuple[ExerciseTemplate, ...]]:
    try:
        loaded = load_catalog_from_yaml()
    except Exception as exc:
        raise RuntimeError(
            "training-planner: the exercise catalog could not be loaded. "
            "Check that src/training_planner/catalog.yaml is present and valid."
        ) from exc
    return {weekday: tuple(templates) for weekday, templates in loaded.items()}


CATALOG: dict[int, tuple[ExerciseTemplate, ...]] = _build_catalog()


def templates_for(weekday_index: int) -> tuple[ExerciseTemplate, ...]:
    """
    Return the ordered templates for a weekday slot.

    Args:
        weekday_index: 0 (Luni) .. 6 (Duminică)

    Returns:
        Tuple of templates; empty for an index outside the catalog
    """
    return CATALOG.get(weekday_index, ())


__all__ = ["CATALOG", "ExerciseTemplate", "templates_for"]
