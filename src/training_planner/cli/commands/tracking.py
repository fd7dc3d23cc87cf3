"""Tracking command: record a day's completion."""

from typing import Annotated, Optional

import typer

from ...core.adaptation import record_day
from ...core.models import Plan
from ...io.serializers import invalid_completed_entries, parse_completed_values
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
from .planning import current_plan_or_exit, day_index_or_exit


def _interactive_values(plan: Plan, day_index: int) -> list[float | None]:
    """
    Prompt for each exercise's completed amount.

    Empty input counts as 0; rest exercises accept y/n.
    """
    values: list[float | None] = []
    views.console.print()
    for ex in plan.days[day_index].exercises:
        while True:
            if ex.is_rest:
                raw = views.console.input(f"  {ex.name} — done? [y/N]: ").strip().lower()
                values.append(1.0 if raw in ("y", "yes") else 0.0)
                break
            raw = views.console.input(f"  {ex.name} ({ex.target} {ex.unit}): ").strip()
            if not raw:
                values.append(None)
                break
            try:
                values.append(float(raw))
                break
            except ValueError:
                views.print_error("Enter a number")
    return values


@app.command()
def record(
    day: Annotated[int, typer.Argument(help="Day number in the current plan (1-30)")],
    done: Annotated[
        Optional[str],
        typer.Option("--done", help="Completed amounts in exercise order, e.g. '20,40,24,20,60'"),
    ] = None,
    feedback: Annotated[
        str,
        typer.Option("--feedback", "-f", help="Free-text note for the day"),
    ] = "",
    data_dir: DataDirOption = None,
    user_id: UserOption = "default",
    today: TodayOption = None,
) -> None:
    """
    Record what you completed on a day.

    Unfinished amounts are carried to the next day.  Recording the last day
    closes the cycle and generates the next plan.
    """
    ref = resolve_today(today)
    store = get_store(data_dir)
    user = load_user_or_exit(store, user_id)
    current = current_plan_or_exit(user, ref)
    day_index = day_index_or_exit(current, day)

    if done is None:
        values = _interactive_values(current, day_index)
    else:
        for entry in invalid_completed_entries(done):
            views.print_warning(f"Ignoring non-numeric value '{entry}'; it counts as 0.")
        values = parse_completed_values(done)

    try:
        result = record_day(user, current, day_index, values, feedback)
    except (IndexError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.save_user(user)

    views.print_success(f"Recorded day {day}.")
    views.print_day(current, day_index)

    if result.carry_over_produced:
        views.print_info(f"{len(result.carry_over)} exercise(s) carried over to day {day + 1}.")
    elif day_index == current.last_day_index and any(
        ex.completed < ex.target for ex in current.days[day_index].exercises
    ):
        views.print_warning("Unfinished work on the last day is not carried into the next cycle.")

    if result.next_plan is not None:
        nxt = result.next_plan
        views.print_success(
            f"Cycle complete. Next plan: {views.format_date(nxt.start_date)}"
            f" – {views.format_date(nxt.end_date)} (×{nxt.difficulty:.2f})."
        )
