"""Shared Typer app object, shared option types, and store/clock utilities."""

from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import User
from ..io.serializers import ValidationError, validate_date
from ..io.user_store import UserStore, get_default_store
from . import views

# Shared options used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-p", help="Directory holding user data (default: ~/.training-planner)"),
]
UserOption = Annotated[
    str,
    typer.Option("--user", "-u", help="User name"),
]
TodayOption = Annotated[
    Optional[str],
    typer.Option("--today", help="Override today's date (YYYY-MM-DD)"),
]

app = typer.Typer(
    name="training-planner",
    help="Adaptive 30-day workout planner: carry-over of unfinished work and difficulty that follows your results.",
    no_args_is_help=True,
)


def get_store(data_dir: Path | None) -> UserStore:
    """Get user store from path or default location."""
    if data_dir is None:
        return get_default_store()
    return UserStore(data_dir)


def resolve_today(today: str | None) -> date:
    """Return the --today override, or the system date."""
    if today is None:
        return date.today()
    try:
        return validate_date(today)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def load_user_or_exit(store: UserStore, user_id: str) -> User:
    """Load a user, printing an error and exiting if missing or unreadable."""
    try:
        user = store.load_user(user_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if user is None:
        views.print_error(f"User '{user_id}' not found. Run 'init' first.")
        raise typer.Exit(1)
    return user
