"""Planning commands: catalog, generate, show-program, adapt."""

import json
from typing import Annotated, Optional

import typer

from ...core.adaptation import adapt_program
from ...core.exercises.base import DIFFICULTIES
from ...core.exercises.registry import get_default_catalog
from ...core.models import SchedulePreferences
from ...core.planner import WEEKDAY_NAMES, generate_schedule, to_designer_program
from ...io.serializers import ValidationError, smart_program_to_dict
from .. import views
from ..app import DEFAULT_USER_ID, DataDirOption, JsonOption, UserOption, app, get_store

# Weekdays used when --weekdays is omitted, spread across the week
DEFAULT_WEEKDAYS: dict[int, tuple[int, ...]] = {
    1: (0,),
    2: (0, 3),
    3: (0, 2, 4),
    4: (0, 1, 3, 4),
    5: (0, 1, 2, 3, 4),
    6: (0, 1, 2, 3, 4, 5),
    7: (0, 1, 2, 3, 4, 5, 6),
}


def parse_weekdays(raw: str) -> tuple[int, ...]:
    """
    Parse a comma-separated weekday list.

    Accepts numbers 0–6 (0 = Monday) or names (mon, Tue, ...).

    Raises:
        ValueError: On an unknown weekday
    """
    names = {name.lower(): i for i, name in enumerate(WEEKDAY_NAMES)}
    days: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if part.lower()[:3] in names:
            days.append(names[part.lower()[:3]])
        elif part.lstrip("-").isdigit():
            days.append(int(part))
        else:
            raise ValueError(f"Unknown weekday: {part!r}")
    return tuple(days)


def _parse_csv(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(p.strip() for p in raw.split(",") if p.strip())


@app.command("catalog")
def catalog(
    pattern: Annotated[
        Optional[str],
        typer.Option("--pattern", help="Movement pattern, e.g. Squat, Push_Horizontal"),
    ] = None,
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Primary or secondary muscle"),
    ] = None,
    equipment: Annotated[
        Optional[str],
        typer.Option("--equipment", "-e", help="Available equipment, comma-separated"),
    ] = None,
    difficulty: Annotated[
        Optional[str],
        typer.Option("--difficulty", "-d", help="Preferred difficulty (soft filter)"),
    ] = None,
    movement_type: Annotated[
        Optional[str],
        typer.Option("--type", "-t", help="Compound, Isolation or Cardio"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", help="Maximum results when filtering"),
    ] = 5,
    json_out: JsonOption = False,
) -> None:
    """
    List the exercise catalog, or query it like a blueprint slot.
    """
    try:
        cat = get_default_catalog()
    except RuntimeError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    filtered = any(v is not None for v in (pattern, muscle, equipment, difficulty, movement_type))
    if filtered:
        # No --equipment means a full gym
        available = _parse_csv(equipment) if equipment else frozenset(ex.equipment for ex in cat)
        exercises = cat.query(
            pattern=pattern,
            muscle=muscle,
            equipment=available,
            difficulty=difficulty,
            movement_type=movement_type,
            limit=limit,
        )
    else:
        exercises = list(cat)

    if json_out:
        print(json.dumps(
            [
                {
                    "exercise_id": ex.exercise_id,
                    "name_en": ex.name_en,
                    "name_native": ex.name_native,
                    "muscle": ex.muscle,
                    "secondary_muscles": sorted(ex.secondary_muscles),
                    "equipment": ex.equipment,
                    "difficulty": ex.difficulty,
                    "movement_type": ex.movement_type,
                    "pattern": ex.pattern,
                }
                for ex in exercises
            ],
            indent=2,
            ensure_ascii=False,
        ))
        return

    if not exercises:
        views.print_warning("No exercise matches these filters.")
        return
    views.console.print(views.format_catalog_table(exercises))


@app.command("generate")
def generate(
    days: Annotated[
        int,
        typer.Option("--days", "-n", help="Training days per week (1-7)"),
    ] = 3,
    weekdays: Annotated[
        Optional[str],
        typer.Option("--weekdays", "-w", help="Weekdays, e.g. mon,wed,fri or 0,2,4"),
    ] = None,
    equipment: Annotated[
        Optional[str],
        typer.Option("--equipment", "-e", help="Available equipment, comma-separated"),
    ] = None,
    experience: Annotated[
        str,
        typer.Option("--experience", "-x", help=f"One of {', '.join(DIFFICULTIES)}"),
    ] = "Beginner",
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="Declared training goal"),
    ] = "General Fitness",
    duration: Annotated[
        int,
        typer.Option("--duration", help="Target session length in minutes"),
    ] = 60,
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
    json_out: JsonOption = False,
) -> None:
    """
    Generate a weekly program and store it as the current program.
    """
    try:
        if weekdays is not None:
            preferred = parse_weekdays(weekdays)
        else:
            preferred = DEFAULT_WEEKDAYS.get(days, ())
        prefs = SchedulePreferences(
            days_per_week=days,
            preferred_days=preferred,
            session_duration_minutes=duration,
            equipment=_parse_csv(equipment),
            goal=goal,
            experience=experience,  # type: ignore[arg-type]
        )
        program = generate_schedule(prefs)
    except (ValueError, RuntimeError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store = get_store(data_dir)
    store.save_smart_program(user_id, program)
    store.save_program(to_designer_program(program, user_id))

    if json_out:
        print(json.dumps(smart_program_to_dict(program), indent=2, ensure_ascii=False))
        return

    views.print_program(program)
    views.print_success(f"Saved program {program.program_id} for user '{user_id}'.")


@app.command("show-program")
def show_program(
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
    json_out: JsonOption = False,
) -> None:
    """
    Display the current generated program.
    """
    store = get_store(data_dir)
    try:
        program = store.load_smart_program(user_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if program is None:
        views.print_error(f"No program for user '{user_id}'. Run 'generate' first.")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(smart_program_to_dict(program), indent=2, ensure_ascii=False))
        return

    views.print_program(program)


@app.command("adapt")
def adapt(
    readiness: Annotated[
        float,
        typer.Option("--readiness", "-r", help="Readiness score 0-100; below 40 deloads"),
    ],
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
    json_out: JsonOption = False,
) -> None:
    """
    Adapt the current program to today's readiness.
    """
    if not 0 <= readiness <= 100:
        views.print_error("Readiness must be between 0 and 100")
        raise typer.Exit(1)

    store = get_store(data_dir)
    try:
        program = store.load_smart_program(user_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if program is None:
        views.print_error(f"No program for user '{user_id}'. Run 'generate' first.")
        raise typer.Exit(1)

    adapted = adapt_program(program, readiness)
    changed = adapted is not program
    if changed:
        store.save_smart_program(user_id, adapted)

    if json_out:
        print(json.dumps(
            {"deloaded": changed, "program": smart_program_to_dict(adapted)},
            indent=2,
            ensure_ascii=False,
        ))
        return

    if changed:
        views.print_program(adapted)
        views.print_success(f"Readiness {readiness:g}: program deloaded.")
    else:
        views.print_info(f"Readiness {readiness:g}: no change needed.")
