"""
CLI entry point using Typer.

Provides commands for schedule generation, logging and analytics:
- catalog: List or query the exercise catalog
- generate / show-program / adapt: Build, display and deload the weekly program
- start-log / log-set / skip / show-logs / delete-log: Training logs
- log-meal: Nutrition logs
- report / nutrition-report: Analytics with ASCII charts
"""

from .app import app
from .commands import analysis, planning, sessions  # noqa: F401  registers commands


if __name__ == "__main__":
    app()
