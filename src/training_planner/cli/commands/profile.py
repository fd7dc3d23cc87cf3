"""Profile commands: init, settings, users."""

import math
from typing import Annotated, Optional

import typer

from ...core.adaptation import register_user, update_preferences
from ...core.config import DIFFICULTY_LEVELS, EQUIPMENT_LABELS
from ...core.models import UserPreferences
from ...io.serializers import ValidationError
from .. import views
from ..app import (
    DataDirOption,
    TodayOption,
    UserOption,
    app,
    get_store,
    load_user_or_exit,
    resolve_today,
)


def parse_difficulty(raw: str) -> float:
    """
    Parse a difficulty preset name or a positive number.

    Raises:
        ValueError: If the value is neither a preset nor a positive finite number
    """
    key = raw.strip().lower()
    if key in DIFFICULTY_LEVELS:
        return DIFFICULTY_LEVELS[key]
    try:
        value = float(key)
    except ValueError:
        presets = ", ".join(DIFFICULTY_LEVELS)
        raise ValueError(f"Difficulty must be one of {presets} or a positive number, got '{raw}'")
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Difficulty must be a positive number, got {raw}")
    return value


def _apply_equipment_flags(
    equipment: dict[str, bool],
    have: list[str] | None,
    lack: list[str] | None,
) -> dict[str, bool]:
    """Return a copy of the equipment mapping with --equipment/--no-equipment applied."""
    result = dict(equipment)
    for tag in have or []:
        result[tag] = True
    for tag in lack or []:
        result[tag] = False
    return result


def _warn_unknown_tags(tags: list[str]) -> None:
    for tag in tags:
        if tag not in EQUIPMENT_LABELS:
            known = ", ".join(EQUIPMENT_LABELS)
            views.print_warning(f"Unknown equipment tag '{tag}' (known: {known}).")


@app.command()
def init(
    data_dir: DataDirOption = None,
    user_id: UserOption = "default",
    difficulty: Annotated[
        str,
        typer.Option("--difficulty", "-d", help="beginner, intermediate, advanced, or a multiplier"),
    ] = "intermediate",
    no_equipment: Annotated[
        Optional[list[str]],
        typer.Option("--no-equipment", help="Equipment tag you do NOT have (repeatable)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing user without prompting"),
    ] = False,
    today: TodayOption = None,
) -> None:
    """
    Register a user and generate their first 30-day plan starting today.
    """
    store = get_store(data_dir)
    start = resolve_today(today)

    try:
        multiplier = parse_difficulty(difficulty)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        exists = store.exists(user_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if exists and not force:
        views.print_warning(f"User '{user_id}' already exists.")
        if not views.confirm_action("Replace the user and all plans?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    _warn_unknown_tags(no_equipment or [])
    defaults = UserPreferences()
    preferences = UserPreferences(
        difficulty=multiplier,
        equipment=_apply_equipment_flags(defaults.equipment, None, no_equipment),
    )

    try:
        user = register_user(user_id, start, preferences)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    store.save_user(user)

    plan = user.plans[-1]
    views.print_success(
        f"Created user '{user_id}' with a plan from {views.format_date(plan.start_date)}"
        f" to {views.format_date(plan.end_date)}."
    )


@app.command()
def settings(
    data_dir: DataDirOption = None,
    user_id: UserOption = "default",
    difficulty: Annotated[
        Optional[str],
        typer.Option("--difficulty", "-d", help="beginner, intermediate, advanced, or a multiplier"),
    ] = None,
    equipment: Annotated[
        Optional[list[str]],
        typer.Option("--equipment", help="Equipment tag you have (repeatable)"),
    ] = None,
    no_equipment: Annotated[
        Optional[list[str]],
        typer.Option("--no-equipment", help="Equipment tag you do NOT have (repeatable)"),
    ] = None,
) -> None:
    """
    Show or update training preferences.

    Changes apply to the next generated plan; the current plan is not touched.
    """
    store = get_store(data_dir)
    user = load_user_or_exit(store, user_id)

    if difficulty is None and not equipment and not no_equipment:
        views.print_preferences(user.preferences)
        return

    try:
        multiplier = (
            parse_difficulty(difficulty) if difficulty is not None else user.preferences.difficulty
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    _warn_unknown_tags([*(equipment or []), *(no_equipment or [])])
    new_prefs = UserPreferences(
        difficulty=multiplier,
        equipment=_apply_equipment_flags(user.preferences.equipment, equipment, no_equipment),
    )
    try:
        update_preferences(user, new_prefs)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    store.save_user(user)

    views.print_preferences(user.preferences)
    views.print_success("Preferences saved. They apply to the next generated plan.")


@app.command()
def users(data_dir: DataDirOption = None) -> None:
    """
    List stored users.
    """
    store = get_store(data_dir)
    ids = store.list_users()
    if not ids:
        views.console.print("[yellow]No users yet. Run 'init' to create one.[/yellow]")
        return
    for uid in ids:
        views.console.print(uid)
