"""
Configuration constants for the adaptive training cycle.

All adjustable parameters are centralized here for easy tuning.
"""

from pathlib import Path
from typing import Final

# =============================================================================
# CYCLE
# =============================================================================

CYCLE_LENGTH_DAYS: Final[int] = 30  # Days per plan
DAYS_PER_WEEK: Final[int] = 7  # Template rotation period
REST_WEEKDAY: Final[int] = 6  # Slot holding the single full-rest template

# =============================================================================
# END-OF-CYCLE ADAPTATION
# =============================================================================

HARDEN_THRESHOLD: Final[float] = 0.80  # avg >= this → harder next cycle
EASE_THRESHOLD: Final[float] = 0.50  # avg < this → easier next cycle
HARDEN_FACTOR: Final[float] = 1.10
EASE_FACTOR: Final[float] = 0.80
HOLD_FACTOR: Final[float] = 1.00

# =============================================================================
# UNITS
# =============================================================================

UNITS: Final[tuple[str, ...]] = ("reps", "sec", "min", "rest")
REST_UNIT: Final[str] = "rest"

# =============================================================================
# EQUIPMENT ADAPTATION
# =============================================================================

EQUIPMENT_ADAPTATION_RATIO: Final[float] = 0.5  # Target fraction kept without equipment
ADAPTED_NAME_MARKER: Final[str] = " (adaptat)"
ADAPTED_DESCRIPTION_NOTE: Final[str] = " (adaptat pentru lipsa echipamentului)"

# Known equipment tags → display label
EQUIPMENT_LABELS: Final[dict[str, str]] = {
    "gantere": "Gantere (dumbbells)",
    "banda": "Bandă elastică (resistance band)",
    "vesta": "Vestă de greutate (weight vest)",
}

# =============================================================================
# CARRY-OVER
# =============================================================================

RECOVERY_NAME_MARKER: Final[str] = " (recuperare)"
RECOVERY_DESCRIPTION_TEMPLATE: Final[str] = "Recuperează seturile nefinalizate de {name}"

# =============================================================================
# PREFERENCES
# =============================================================================

DEFAULT_DIFFICULTY: Final[float] = 1.0

DIFFICULTY_LEVELS: Final[dict[str, float]] = {
    "beginner": 0.8,
    "intermediate": 1.0,
    "advanced": 1.2,
}

# =============================================================================
# DISPLAY
# =============================================================================

# Template slot 0 is Monday (Luni) regardless of the plan's start weekday
WEEKDAY_LABELS: Final[tuple[str, ...]] = (
    "Luni",
    "Marți",
    "Miercuri",
    "Joi",
    "Vineri",
    "Sâmbătă",
    "Duminică",
)

DATE_DISPLAY_FORMAT: Final[str] = "%d/%m/%Y"

# =============================================================================
# STORAGE
# =============================================================================

APP_DIR_NAME: Final[str] = ".training-planner"


def get_app_dir() -> Path:
    """Return ~/.training-planner (user data and catalog override)."""
    return Path.home() / APP_DIR_NAME
