"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of programs, logs and reports.
"""

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import (
    create_adherence_heatmap,
    create_calorie_chart,
    create_muscle_split_chart,
    create_volume_chart,
)
from ..core.exercises.base import ExerciseDefinition
from ..core.metrics import adherence_score, calculate_log_volume
from ..core.models import (
    AnalyticsReport,
    ExerciseInstance,
    NutritionReport,
    SmartProgram,
    SmartSession,
    TrainingInsight,
    TrainingLog,
)
from ..core.planner import WEEKDAY_NAMES

console = Console()

STATUS_STYLES: dict[str, str] = {
    "Completed": "green",
    "Partial": "yellow",
    "Skipped": "red",
    "Rest": "blue",
    "Planned": "dim",
}

INSIGHT_STYLES: dict[str, str] = {
    "positive": "green",
    "negative": "red",
    "neutral": "cyan",
}


def format_catalog_table(exercises: list[ExerciseDefinition]) -> Table:
    """
    Create a Rich table of catalog entries.

    Args:
        exercises: Definitions to display, in catalog order

    Returns:
        Rich Table object
    """
    table = Table(title="Exercise Catalog")

    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Muscle", style="magenta")
    table.add_column("Equipment", style="green")
    table.add_column("Level")
    table.add_column("Type")
    table.add_column("Pattern")

    for ex in exercises:
        name = f"{ex.name_en} *" if ex.is_custom else ex.name_en
        table.add_row(
            ex.exercise_id,
            name,
            ex.muscle,
            ex.equipment,
            ex.difficulty,
            ex.movement_type,
            ex.pattern,
        )

    return table


def _exercise_rows(table: Table, block: str, exercises: list[ExerciseInstance]) -> None:
    for ex in exercises:
        rest = f"{ex.rest_seconds}s" if ex.rest_seconds else "-"
        table.add_row(block, ex.name, f"{ex.sets} x {ex.reps}", rest, ex.muscle)


def format_session_table(session: SmartSession) -> Table:
    """Create a Rich table for one generated session."""
    day = WEEKDAY_NAMES[session.day_of_week]
    table = Table(
        title=f"{day} · {session.title}",
        caption=f"{session.focus} · {session.duration_minutes} min · {session.intensity}",
    )

    table.add_column("Block", style="dim")
    table.add_column("Exercise", style="bold")
    table.add_column("Sets x Reps", justify="right")
    table.add_column("Rest", justify="right")
    table.add_column("Muscle", style="magenta")

    _exercise_rows(table, "warm-up", session.warmup)
    _exercise_rows(table, "main", session.main_lifts)
    _exercise_rows(table, "accessory", session.accessories)
    _exercise_rows(table, "cool-down", session.cooldown)

    return table


def print_program(program: SmartProgram) -> None:
    """
    Print a generated program: one table per session plus diagnostics.

    Args:
        program: Program to display
    """
    prefs = program.preferences
    console.print(
        f"[bold cyan]{program.split}[/bold cyan] program "
        f"({prefs.days_per_week} days/week, {prefs.experience}, goal: {prefs.goal})"
    )
    console.print(f"[dim]{program.program_id} · generated {program.generated_at}[/dim]")
    console.print()

    if not program.sessions:
        print_warning("Program has no sessions.")

    for session in program.sessions:
        console.print(format_session_table(session))
        if session.rationale:
            console.print(f"[dim]{session.rationale}[/dim]")
        console.print()

    diag = program.diagnostics
    if diag.fallback_triggered:
        print_warning(diag.fallback_reason or "Fallback triggered")
    for slot in diag.unfilled_slots:
        console.print(f"[yellow]  unfilled: {slot}[/yellow]")
    for note in diag.notes:
        print_info(note)
    for entry in program.adaptation_log:
        console.print(f"[magenta]Adapted {entry.applied_at}: {entry.description}[/magenta]")


def format_log_table(logs: list[TrainingLog]) -> Table:
    """
    Create a Rich table of training logs.

    Args:
        logs: Logs to display, chronological

    Returns:
        Rich Table object
    """
    table = Table(title="Training Logs")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Workout")
    table.add_column("Status")
    table.add_column("Sets", justify="right")
    table.add_column("Volume", justify="right", style="bold")
    table.add_column("Adherence", justify="right")
    table.add_column("ID", style="dim")

    for i, log in enumerate(logs, 1):
        style = STATUS_STYLES.get(log.status, "")
        table.add_row(
            str(i),
            log.date,
            log.workout_title,
            f"[{style}]{log.status}[/{style}]" if style else log.status,
            f"{log.completed_sets}/{log.total_sets}",
            f"{calculate_log_volume(log):.0f}",
            f"{adherence_score(log)}%",
            log.log_id,
        )

    return table


def print_log_detail(log: TrainingLog) -> None:
    """Print every exercise and set of one log."""
    console.print(
        f"[bold]{log.date}[/bold] {log.workout_title} · "
        f"[{STATUS_STYLES.get(log.status, 'white')}]{log.status}[/]"
    )
    for i, ex in enumerate(log.exercises, 1):
        mark = "[green]✓[/green]" if ex.completed else " "
        console.print(f" {mark} {i}. {ex.name}")
        for s in ex.sets:
            done = "x" if s.completed else "·"
            performed = ""
            if s.performed_reps is not None:
                performed = f" → {s.performed_reps}"
                if s.performed_weight:
                    performed += f" @ {s.performed_weight:g}"
            rpe = f" RPE {s.rpe:g}" if s.rpe is not None else ""
            console.print(f"     \\[{done}] set {s.set_number}: {s.target_reps}{performed}{rpe}")


def print_insights(insights: list[TrainingInsight]) -> None:
    for insight in insights:
        style = INSIGHT_STYLES.get(insight.type, "white")
        console.print(f"[{style}]● {insight.metric}:[/{style}] {insight.message}")


def print_analytics_report(report: AnalyticsReport, timeframe: str) -> None:
    """
    Print the training report: summary, charts and insights.

    Args:
        report: Report to display
        timeframe: Timeframe label for the title
    """
    summary = report.summary
    table = Table(title=f"Training Summary ({timeframe})")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="bold")
    table.add_row("Workouts", str(summary.total_workouts))
    table.add_row("Completion rate", f"{summary.completion_rate}%")
    table.add_row("Total volume", f"{summary.total_volume:.0f}")
    table.add_row("Missed", str(summary.missed_workouts))
    table.add_row("Best streak", str(summary.best_streak))
    console.print(table)
    console.print()

    console.print(create_volume_chart(report.timeline))
    console.print()
    console.print(create_muscle_split_chart(report.muscle_stats))
    console.print()
    print_insights(report.insights)


def print_nutrition_report(report: NutritionReport, timeframe: str) -> None:
    """Print the nutrition report: summary, calorie chart, heatmap and insights."""
    summary = report.summary
    table = Table(title=f"Nutrition Summary ({timeframe})")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="bold")
    table.add_row("Avg adherence", f"{summary.avg_adherence}%")
    table.add_row("Avg calories", str(summary.avg_calories))
    table.add_row("Calorie deviation", f"{summary.calorie_deviation:+d}")
    table.add_row("Avg protein (g)", str(summary.avg_protein))
    table.add_row("Best streak", str(summary.best_streak))
    for share in report.macro_distribution:
        table.add_row(f"Total {share.name.lower()} (g)", f"{share.value:.0f}")
    console.print(table)
    console.print()

    console.print(create_calorie_chart(report.timeline))
    console.print()
    console.print(create_adherence_heatmap(report.heatmap))
    console.print()
    print_insights(report.insights)


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
