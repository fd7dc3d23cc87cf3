"""Planning commands: plan, show-day, status, stats, new-cycle."""

from datetime import date
from typing import Annotated

import typer

from ...core.adaptation import get_current_plan, start_next_plan
from ...core.models import Plan, User
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


def current_plan_or_exit(user: User, today: date) -> Plan:
    """Return the user's current plan, or print guidance and exit."""
    plan = get_current_plan(user, today)
    if plan is None:
        views.print_error("No current plan. Run 'new-cycle' to start one.")
        raise typer.Exit(1)
    return plan


def day_index_or_exit(plan: Plan, day_number: int) -> int:
    """Convert a 1-based day number to an index, exiting if out of range."""
    if day_number < 1 or day_number > len(plan.days):
        views.print_error(f"Day must be between 1 and {len(plan.days)}")
        raise typer.Exit(1)
    return day_number - 1


@app.command()
def plan(
    data_dir: DataDirOption = None,
    user_id: UserOption = "default",
    today: TodayOption = None,
) -> None:
    """
    Show the current 30-day plan.
    """
    ref = resolve_today(today)
    user = load_user_or_exit(get_store(data_dir), user_id)
    current = current_plan_or_exit(user, ref)
    views.print_plan(current, ref)


@app.command("show-day")
def show_day(
    day: Annotated[int, typer.Argument(help="Day number in the current plan (1-30)")],
    data_dir: DataDirOption = None,
    user_id: UserOption = "default",
    today: TodayOption = None,
) -> None:
    """
    Show one day's exercises.
    """
    ref = resolve_today(today)
    user = load_user_or_exit(get_store(data_dir), user_id)
    current = current_plan_or_exit(user, ref)
    views.print_day(current, day_index_or_exit(current, day))


@app.command()
def status(
    data_dir: DataDirOption = None,
    user_id: UserOption = "default",
    today: TodayOption = None,
) -> None:
    """
    Show the current plan window, average completion and today's reminder.
    """
    ref = resolve_today(today)
    user = load_user_or_exit(get_store(data_dir), user_id)
    views.console.print(views.format_status_display(user, get_current_plan(user, ref), ref))


@app.command()
def stats(
    data_dir: DataDirOption = None,
    user_id: UserOption = "default",
    today: TodayOption = None,
) -> None:
    """
    Chart completion percentage for every day of the current plan.
    """
    ref = resolve_today(today)
    user = load_user_or_exit(get_store(data_dir), user_id)
    current = current_plan_or_exit(user, ref)
    views.print_completion_chart(current)


@app.command("new-cycle")
def new_cycle(
    data_dir: DataDirOption = None,
    user_id: UserOption = "default",
    today: TodayOption = None,
) -> None:
    """
    Start a new plan today when the previous one has expired.
    """
    ref = resolve_today(today)
    store = get_store(data_dir)
    user = load_user_or_exit(store, user_id)

    try:
        new_plan = start_next_plan(user, ref)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.save_user(user)
    views.print_success(
        f"New plan from {views.format_date(new_plan.start_date)}"
        f" to {views.format_date(new_plan.end_date)} (×{new_plan.difficulty:.2f})."
    )
