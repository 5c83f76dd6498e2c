"""Session commands: start-log, log-set, skip, show-logs, delete-log, log-meal."""

import json
import uuid
from datetime import date as date_cls
from typing import Annotated, Optional

import typer

from ...core.models import DesignerProgram, Macros, MealLog, TrainingLog, validate_iso_date
from ...core.nutrition import add_meal, create_nutrition_day
from ...core.planner import to_designer_program
from ...core.training_log import (
    SetUpdate,
    create_log_from_program,
    create_rest_log,
    mark_skipped,
    update_set,
)
from ...io.history_store import HistoryStore
from ...io.serializers import ValidationError, training_log_to_dict
from .. import views
from ..app import DEFAULT_USER_ID, DataDirOption, JsonOption, UserOption, app, get_store
from .planning import parse_weekdays

DateOption = Annotated[
    Optional[str],
    typer.Option("--date", "-d", help="Log date (YYYY-MM-DD, default: today)"),
]


def _resolve_date(raw: str | None) -> str:
    if raw is None:
        return date_cls.today().isoformat()
    validate_iso_date(raw)
    return raw


def _load_program(store: HistoryStore, user_id: str, program_id: str | None) -> DesignerProgram:
    """Stored designer program by id, or the user's current generated program."""
    if program_id is not None:
        program = store.get_program(program_id)
        if program is None:
            raise LookupError(f"Program not found: {program_id}")
        return program
    smart = store.load_smart_program(user_id)
    if smart is None:
        raise LookupError(f"No program for user '{user_id}'. Run 'generate' first.")
    return to_designer_program(smart, user_id)


def _day_id_for(program: DesignerProgram, log_date: str, day: str | None) -> str | None:
    """
    Pick the program day to log.

    --day accepts a weekday (mon, 0) or a day id.  Without it the log date's
    weekday is used.  Returns None when that weekday has no session.
    """
    days = [d for week in program.weeks for d in week.days]
    if day is not None:
        if any(d.day_id == day for d in days):
            return day
        parsed = parse_weekdays(day)
        if len(parsed) != 1:
            raise ValueError(f"Expected one weekday or day id, got {day!r}")
        weekday = parsed[0]
    else:
        weekday = date_cls.fromisoformat(log_date).weekday()
    for d in days:
        if d.day_number == weekday + 1:
            return d.day_id
    return None


def _new_log(
    store: HistoryStore,
    user_id: str,
    log_date: str,
    day: str | None,
    program_id: str | None,
) -> TrainingLog:
    program = _load_program(store, user_id, program_id)
    day_id = _day_id_for(program, log_date, day)
    if day_id is None:
        if day is not None:
            raise LookupError(f"Day not found in program {program.program_id}: {day}")
        return create_rest_log(user_id, log_date)
    return create_log_from_program(user_id, log_date, program, day_id)


def _require_log(store: HistoryStore, user_id: str, log_date: str) -> TrainingLog:
    log = store.get_log_by_date(user_id, log_date)
    if log is None:
        raise LookupError(f"No log for {log_date}. Run 'start-log' first.")
    return log


@app.command("start-log")
def start_log(
    log_date: DateOption = None,
    day: Annotated[
        Optional[str],
        typer.Option("--day", help="Program day: weekday (mon, 0) or day id"),
    ] = None,
    program_id: Annotated[
        Optional[str],
        typer.Option("--program-id", help="Stored designer program (default: current program)"),
    ] = None,
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
    json_out: JsonOption = False,
) -> None:
    """
    Create the training log for a day from the program.
    """
    store = get_store(data_dir)
    try:
        log_date = _resolve_date(log_date)
        if store.get_log_by_date(user_id, log_date) is not None:
            raise ValueError(f"A log for {log_date} already exists.")
        log = _new_log(store, user_id, log_date, day, program_id)
        store.save_log(log)
    except (ValueError, LookupError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(training_log_to_dict(log), indent=2, ensure_ascii=False))
        return

    views.print_log_detail(log)
    views.print_success(f"Started log {log.log_id} for {log.date}.")


@app.command("log-set")
def log_set(
    exercise_number: Annotated[
        int,
        typer.Argument(help="Exercise # in the log (1-based)"),
    ],
    set_number: Annotated[
        int,
        typer.Argument(help="Set # within the exercise (1-based)"),
    ],
    reps: Annotated[
        Optional[int],
        typer.Option("--reps", "-r", help="Performed reps"),
    ] = None,
    weight: Annotated[
        Optional[float],
        typer.Option("--weight", "-w", help="Performed weight (0 = bodyweight)"),
    ] = None,
    rpe: Annotated[
        Optional[float],
        typer.Option("--rpe", help="Perceived exertion 0-10"),
    ] = None,
    undo: Annotated[
        bool,
        typer.Option("--undo", help="Mark the set as not completed"),
    ] = False,
    log_date: DateOption = None,
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
    json_out: JsonOption = False,
) -> None:
    """
    Record one set and recompute the log status.
    """
    store = get_store(data_dir)
    try:
        log_date = _resolve_date(log_date)
        log = _require_log(store, user_id, log_date)
        if not 1 <= exercise_number <= len(log.exercises):
            raise ValueError(f"Exercise # must be between 1 and {len(log.exercises)}")
        exercise = log.exercises[exercise_number - 1]
        if not 1 <= set_number <= len(exercise.sets):
            raise ValueError(f"Set # must be between 1 and {len(exercise.sets)}")
        target = exercise.sets[set_number - 1]

        log = update_set(
            log,
            exercise.log_exercise_id,
            target.set_id,
            SetUpdate(
                performed_reps=reps,
                performed_weight=weight,
                rpe=rpe,
                completed=not undo,
            ),
        )
        store.save_log(log)
    except (ValueError, LookupError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(training_log_to_dict(log), indent=2, ensure_ascii=False))
        return

    views.print_log_detail(log)


@app.command("skip")
def skip(
    log_date: DateOption = None,
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
) -> None:
    """
    Mark a day as skipped (creates its log if needed).
    """
    store = get_store(data_dir)
    try:
        log_date = _resolve_date(log_date)
        log = store.get_log_by_date(user_id, log_date)
        if log is None:
            log = _new_log(store, user_id, log_date, None, None)
        log = mark_skipped(log)
        store.save_log(log)
    except (ValueError, LookupError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Marked {log_date} ({log.workout_title}) as skipped.")


@app.command("show-logs")
def show_logs(
    log_date: DateOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Limit number of logs to show"),
    ] = None,
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
    json_out: JsonOption = False,
) -> None:
    """
    Display training logs as a table, or one log in detail with --date.
    """
    store = get_store(data_dir)
    try:
        if log_date is not None:
            logs = [_require_log(store, user_id, _resolve_date(log_date))]
        else:
            logs = store.list_logs(user_id)
    except (ValueError, LookupError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if limit is not None:
        logs = logs[-limit:]

    if json_out:
        print(json.dumps([training_log_to_dict(l) for l in logs], indent=2, ensure_ascii=False))
        return

    if log_date is not None:
        views.print_log_detail(logs[0])
        return

    if not logs:
        views.print_info("No training logs yet.")
        return
    views.console.print(views.format_log_table(logs))


@app.command("delete-log")
def delete_log(
    log_id: Annotated[
        str,
        typer.Argument(help="Log ID to delete (see ID column in show-logs)"),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete a training log by ID.
    """
    store = get_store(data_dir)
    try:
        target = store.get_log(log_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if target is None:
        views.print_error(f"Log not found: {log_id}")
        raise typer.Exit(1)

    views.console.print(f"Log to delete: [bold]{target.date}[/bold] ({target.workout_title})")

    if not force and not views.confirm_action("Delete this log?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_log(log_id)
    views.print_success(f"Deleted log {log_id}: {target.date} ({target.workout_title})")


@app.command("log-meal")
def log_meal(
    title: Annotated[
        str,
        typer.Argument(help="Meal title, e.g. 'Oats with whey'"),
    ],
    calories: Annotated[
        float,
        typer.Option("--calories", "-c", help="Calories eaten"),
    ],
    protein: Annotated[
        float,
        typer.Option("--protein", help="Protein (g)"),
    ] = 0.0,
    carbs: Annotated[
        float,
        typer.Option("--carbs", help="Carbohydrates (g)"),
    ] = 0.0,
    fats: Annotated[
        float,
        typer.Option("--fats", help="Fats (g)"),
    ] = 0.0,
    meal_type: Annotated[
        str,
        typer.Option("--meal-type", help="Breakfast, Lunch, Dinner, Snack, ..."),
    ] = "Snack",
    target_calories: Annotated[
        Optional[float],
        typer.Option("--target-calories", help="Daily calorie target (first meal of a day only)"),
    ] = None,
    log_date: DateOption = None,
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
) -> None:
    """
    Record a completed meal in the day's nutrition log.
    """
    store = get_store(data_dir)
    try:
        log_date = _resolve_date(log_date)
        day = store.get_nutrition_log_by_date(user_id, log_date)
        if day is None:
            target = Macros(calories=target_calories) if target_calories else None
            day = create_nutrition_day(user_id, log_date, target)
        macros = Macros(calories=calories, protein=protein, carbs=carbs, fats=fats)
        day = add_meal(day, MealLog(
            meal_id=f"meal_{uuid.uuid4().hex[:12]}",
            title=title,
            meal_type=meal_type,
            status="Completed",
            planned_macros=macros,
            actual_macros=macros,
        ))
        store.save_nutrition_log(day)
    except (ValueError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    consumed = day.total_consumed_macros.calories
    target_kcal = day.total_target_macros.calories
    views.print_success(f"Logged {title} on {log_date}: {consumed:.0f} / {target_kcal:.0f} kcal.")
