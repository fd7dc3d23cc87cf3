"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans, days and preferences.
"""

from datetime import date, timedelta

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_completion_chart
from ..core.config import DATE_DISPLAY_FORMAT, DAYS_PER_WEEK, WEEKDAY_LABELS
from ..core.equipment import get_label
from ..core.metrics import average_completion, completion_ratio, day_index_for, needs_reminder, round_half_up
from ..core.models import Day, Exercise, Plan, User, UserPreferences

console = Console()


def format_date(d: date) -> str:
    """Format a date as DD/MM/YYYY."""
    return d.strftime(DATE_DISPLAY_FORMAT)


def weekday_label(day_index: int) -> str:
    """Template weekday label for a plan day (day 0 is Luni)."""
    return WEEKDAY_LABELS[day_index % DAYS_PER_WEEK]


def _fmt_amount(value: int | float) -> str:
    if isinstance(value, float) and not value.is_integer():
        return f"{value:.1f}"
    return str(int(value))


def _fmt_target(ex: Exercise) -> str:
    if ex.is_rest:
        return "rest"
    return f"{_fmt_amount(ex.target)} {ex.unit}"


def _fmt_completed(ex: Exercise) -> str:
    if ex.is_rest:
        return "✓" if ex.completed > 0 else "-"
    return f"{_fmt_amount(ex.completed)} {ex.unit}"


def _fmt_pct(ratio: float) -> str:
    pct = round_half_up(ratio * 100)
    if pct >= 100:
        return f"[green]{pct}%[/green]"
    if pct > 0:
        return f"[yellow]{pct}%[/yellow]"
    return f"[dim]{pct}%[/dim]"


def format_plan_table(plan: Plan, today: date | None = None) -> Table:
    """
    Format a plan as a Rich table, one row per day.

    Args:
        plan: Plan to display
        today: Highlights the matching row when given

    Returns:
        Rich Table
    """
    table = Table(
        title=(
            f"Plan {format_date(plan.start_date)} – {format_date(plan.end_date)}"
            f"  (difficulty ×{plan.difficulty:.2f})"
        )
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date")
    table.add_column("Day")
    table.add_column("Exercises", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("Feedback", style="dim")

    today_idx = day_index_for(plan, today) if today is not None else None

    for i, day in enumerate(plan.days):
        d = plan.start_date + timedelta(days=i)
        date_cell = format_date(d)
        if i == today_idx:
            date_cell = f"[bold cyan]{date_cell}[/bold cyan]"
        table.add_row(
            str(i + 1),
            date_cell,
            weekday_label(i),
            str(len(day.exercises)),
            _fmt_pct(completion_ratio(day)),
            day.feedback,
        )

    return table


def print_plan(plan: Plan, today: date | None = None) -> None:
    """Print the plan overview table."""
    console.print(format_plan_table(plan, today))


def format_day_table(plan: Plan, day_index: int) -> Table:
    """
    Format one plan day as a Rich table, one row per exercise.

    Args:
        plan: Plan containing the day
        day_index: 0-based day index

    Returns:
        Rich Table
    """
    day: Day = plan.days[day_index]
    d = plan.start_date + timedelta(days=day_index)

    table = Table(
        title=f"Day {day_index + 1} — {weekday_label(day_index)} {format_date(d)}"
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Exercise")
    table.add_column("Target", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("Description", style="dim")

    for i, ex in enumerate(day.exercises, 1):
        table.add_row(str(i), ex.name, _fmt_target(ex), _fmt_completed(ex), ex.description)

    return table


def print_day(plan: Plan, day_index: int) -> None:
    """Print one day with its exercises, feedback and completion."""
    day = plan.days[day_index]
    console.print(format_day_table(plan, day_index))
    console.print(f"Completion: {_fmt_pct(completion_ratio(day))}")
    if day.feedback:
        console.print(f"Feedback: {day.feedback}")


def format_status_display(user: User, plan: Plan | None, today: date) -> str:
    """
    Format the user's current status as a text block.

    Args:
        user: User to describe
        plan: Current plan (None if every plan has expired)
        today: Reference date

    Returns:
        Formatted string
    """
    lines = [f"Status for {user.user_id}"]
    lines.append(f"- Baseline difficulty: ×{user.preferences.difficulty:.2f}")
    lines.append(f"- Plans in history: {len(user.plans)}")

    if plan is None:
        lines.append("- No current plan. Run 'new-cycle' to start one.")
        return "\n".join(lines)

    lines.append(
        f"- Current plan: {format_date(plan.start_date)} – {format_date(plan.end_date)}"
        f" (×{plan.difficulty:.2f})"
    )
    lines.append(f"- Average completion: {round_half_up(average_completion(plan) * 100)}%")

    idx = day_index_for(plan, today)
    if idx is None:
        lines.append("- Today is outside the plan.")
    else:
        lines.append(
            f"- Today: day {idx + 1} ({weekday_label(idx)}),"
            f" {round_half_up(completion_ratio(plan.days[idx]) * 100)}% done"
        )
        if needs_reminder(plan, today):
            lines.append("- Reminder: today's workout is not finished yet.")

    return "\n".join(lines)


def print_preferences(preferences: UserPreferences) -> None:
    """Print difficulty and equipment availability."""
    console.print(f"Difficulty: ×{preferences.difficulty:.2f}")
    table = Table(title="Equipment")
    table.add_column("Tag")
    table.add_column("Label")
    table.add_column("Available", justify="center")
    for tag, owned in sorted(preferences.equipment.items()):
        table.add_row(tag, get_label(tag), "[green]yes[/green]" if owned else "[red]no[/red]")
    console.print(table)


def print_completion_chart(plan: Plan) -> None:
    """Print the per-day completion chart."""
    console.print(create_completion_chart(plan))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
