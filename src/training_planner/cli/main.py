"""
CLI entry point using Typer.

Provides commands for the adaptive training cycle:
- init: Register a user and generate the first plan
- settings: Show or update preferences
- users: List stored users
- plan: Show the current plan
- show-day: Show one day's exercises
- record: Record a day's completion
- status: Current plan summary and reminder
- stats: Per-day completion chart
- new-cycle: Start a plan when the previous one expired
"""

from .app import app
from .commands import planning, profile, tracking  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
