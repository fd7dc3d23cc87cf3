"""
ASCII charts for plan completion.

Creates terminal-friendly bar charts of per-day completion.
"""

from datetime import timedelta

from .config import DATE_DISPLAY_FORMAT
from .metrics import daily_completion_percentages
from .models import Plan


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
    max_value: float | None = None,
    suffix: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title
        max_value: Value that maps to a full-width bar (default: largest value)
        suffix: Appended after each printed value (e.g. "%")

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max_value if max_value is not None else max(values)
    max_label_len = max(len(l) for l in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 7))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * min(bar_len, width)
        lines.append(f"{label:>{max_label_len}} │{bar} {value:.0f}{suffix}")

    return "\n".join(lines)


def create_completion_chart(plan: Plan, width: int = 40) -> str:
    """
    Create a chart of completion percentage for every day of the plan.

    Args:
        plan: Plan to chart
        width: Bar width for 100 %

    Returns:
        ASCII chart string
    """
    if not plan.days:
        return "Plan has no days."

    labels = [
        (plan.start_date + timedelta(days=i)).strftime(DATE_DISPLAY_FORMAT)
        for i in range(len(plan.days))
    ]
    values = [float(p) for p in daily_completion_percentages(plan)]

    return create_simple_bar_chart(
        labels,
        values,
        width=width,
        title="% Completare",
        max_value=100.0,
        suffix="%",
    )
