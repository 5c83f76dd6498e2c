"""
Schedule generation for split-scheduler.

Turns SchedulePreferences into a SmartProgram: resolves the weekly split
from the requested frequency, cycles that split's blueprints across the
preferred weekdays, fills each blueprint slot from the exercise catalog
and records what could not be filled in the program diagnostics.

Generation is deterministic: the same preferences and catalog always
select the same exercises (only ids and timestamps differ).
"""

import uuid
from datetime import datetime

from .blueprints import DayBlueprint, Slot, blueprint_for_training_day, get_blueprints
from .config import (
    COMPOUND_REPS,
    COMPOUND_REST_SECONDS,
    COMPOUND_SETS,
    COOLDOWN_BLOCK,
    DEFAULT_SESSION_FOCUS,
    DEFAULT_SESSION_INTENSITY,
    FALLBACK_REASON,
    FULL_BODY_MAX_DAYS,
    ISOLATION_REPS,
    ISOLATION_REST_SECONDS,
    ISOLATION_SETS,
    MAX_DAYS_PER_WEEK,
    UPPER_LOWER_DAYS,
    WARMUP_BLOCK,
)
from .exercises.base import DIFFICULTIES, ExerciseDefinition, Prescription
from .exercises.catalog import ExerciseCatalog
from .exercises.registry import get_default_catalog
from .models import (
    DesignerProgram,
    ExerciseInstance,
    ProgramDay,
    ProgramDiagnostics,
    ProgramExercise,
    ProgramSet,
    ProgramWeek,
    SchedulePreferences,
    SmartProgram,
    SmartSession,
    TrainingSplit,
)

WEEKDAY_NAMES: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

COMPOUND_PRESCRIPTION = Prescription(COMPOUND_SETS, COMPOUND_REPS, COMPOUND_REST_SECONDS)
ISOLATION_PRESCRIPTION = Prescription(ISOLATION_SETS, ISOLATION_REPS, ISOLATION_REST_SECONDS)


class ScheduleValidationError(ValueError):
    """Raised when generation preferences are invalid.  No program is produced."""


def _fixed_block(entries: tuple[tuple[str, str, int, str, str], ...]) -> list[ExerciseInstance]:
    return [
        ExerciseInstance(
            exercise_id=ex_id,
            name=name,
            name_native=name,
            sets=sets,
            reps=reps,
            rest_seconds=0,
            muscle=muscle,
        )
        for ex_id, name, sets, reps, muscle in entries
    ]


def resolve_split(days_per_week: int) -> TrainingSplit:
    """
    Map training frequency to a split.

    1–3 days → FullBody, exactly 4 → UpperLower, 5+ → PPL.  A fixed
    frequency heuristic; no attempt is made to balance muscle recovery
    across the specific weekdays chosen.
    """
    if days_per_week <= FULL_BODY_MAX_DAYS:
        return "FullBody"
    if days_per_week == UPPER_LOWER_DAYS:
        return "UpperLower"
    return "PPL"


def validate_preferences(prefs: SchedulePreferences) -> None:
    """
    Check a generation request.

    Raises:
        ScheduleValidationError: On the first invalid field
    """
    if prefs.days_per_week is None or prefs.days_per_week < 1:
        raise ScheduleValidationError(
            f"Invalid number of training days: {prefs.days_per_week}. Must be at least 1."
        )
    if prefs.days_per_week > MAX_DAYS_PER_WEEK:
        raise ScheduleValidationError(
            f"Invalid number of training days: {prefs.days_per_week}. "
            f"Must be at most {MAX_DAYS_PER_WEEK}."
        )
    bad_days = [d for d in prefs.preferred_days if not 0 <= d <= 6]
    if bad_days:
        raise ScheduleValidationError(f"Preferred weekdays must be 0–6, got {bad_days}")
    if prefs.session_duration_minutes <= 0:
        raise ScheduleValidationError("session_duration_minutes must be positive")
    if prefs.experience not in DIFFICULTIES:
        raise ScheduleValidationError(
            f"Invalid experience: {prefs.experience!r}. Must be one of {DIFFICULTIES}"
        )


def prescription_for(exercise: ExerciseDefinition) -> Prescription:
    """Compound → 4 x 6-8 @ 120 s; everything else → 3 x 10-12 @ 60 s."""
    if exercise.movement_type == "Compound":
        return COMPOUND_PRESCRIPTION
    return ISOLATION_PRESCRIPTION


def instantiate(exercise: ExerciseDefinition) -> ExerciseInstance:
    """Snapshot a catalog entry with its prescription for use in a session."""
    rx = prescription_for(exercise)
    return ExerciseInstance(
        exercise_id=exercise.exercise_id,
        name=exercise.name_en,
        name_native=exercise.name_native,
        sets=rx.sets,
        reps=rx.reps,
        rest_seconds=rx.rest_seconds,
        muscle=exercise.muscle,
        movement_type=exercise.movement_type,  # type: ignore[arg-type]
        equipment=exercise.equipment,
        notes=exercise.description,
    )


def fill_blueprint(
    blueprint: DayBlueprint,
    catalog: ExerciseCatalog,
    equipment: frozenset[str],
    difficulty: str,
) -> tuple[list[ExerciseInstance], list[Slot]]:
    """
    Resolve every slot of a blueprint against the catalog.

    Each slot is queried `count` times; an exercise already chosen for
    this session is never chosen again.

    Returns:
        (exercises in slot order, slots that could not be filled, one
        entry per missing repetition)
    """
    chosen: list[ExerciseInstance] = []
    unfilled: list[Slot] = []
    used_ids: set[str] = set()

    for slot in blueprint.slots:
        for _ in range(slot.count):
            candidates = catalog.query(
                pattern=slot.pattern,
                muscle=slot.muscle,
                equipment=equipment,
                difficulty=difficulty,
                movement_type=slot.movement_type,
            )
            available = [c for c in candidates if c.exercise_id not in used_ids]
            if not available:
                unfilled.append(slot)
                continue
            selected = available[0]
            used_ids.add(selected.exercise_id)
            chosen.append(instantiate(selected))

    return chosen, unfilled


def _session_tags(exercises: list[ExerciseInstance]) -> list[str]:
    tags: list[str] = []
    for ex in exercises:
        if ex.muscle not in tags:
            tags.append(ex.muscle)
    return tags


def build_session(
    day_of_week: int,
    blueprint: DayBlueprint,
    split: TrainingSplit,
    prefs: SchedulePreferences,
    exercises: list[ExerciseInstance],
) -> SmartSession:
    """Assemble one session: main/accessory split plus fixed warm-up and cool-down."""
    main_lifts = [e for e in exercises if e.is_main_lift]
    accessories = [e for e in exercises if not e.is_main_lift]
    has_work = bool(exercises)

    return SmartSession(
        session_id=f"sess_{uuid.uuid4().hex[:8]}_{day_of_week}",
        day_of_week=day_of_week,
        title=blueprint.name,
        focus=blueprint.name if split == "PPL" else DEFAULT_SESSION_FOCUS,
        duration_minutes=prefs.session_duration_minutes,
        intensity=DEFAULT_SESSION_INTENSITY,
        warmup=_fixed_block(WARMUP_BLOCK) if has_work else [],
        main_lifts=main_lifts,
        accessories=accessories,
        cooldown=_fixed_block(COOLDOWN_BLOCK) if has_work else [],
        tags=_session_tags(exercises),
        rationale=f"Based on {split} split and {prefs.experience} level.",
    )


def generate_schedule(
    prefs: SchedulePreferences,
    catalog: ExerciseCatalog | None = None,
    now: datetime | None = None,
) -> SmartProgram:
    """
    Generate a weekly program from preferences.

    Weekdays are walked in ascending order 0→6; the nth preferred weekday
    gets the nth blueprint of the split's cycle, whatever weekday it is.

    Args:
        prefs: Generation request
        catalog: Exercise catalog (default: bundled catalog + user additions)
        now: Generation time (default: current time)

    Returns:
        A new SmartProgram with diagnostics

    Raises:
        ScheduleValidationError: If prefs are invalid
    """
    validate_preferences(prefs)
    if catalog is None:
        catalog = get_default_catalog()
    if now is None:
        now = datetime.now()

    split = resolve_split(prefs.days_per_week)
    blueprints = get_blueprints(split)

    sessions: list[SmartSession] = []
    unfilled_slots: list[str] = []
    training_day = 0

    for day in range(7):
        if day not in prefs.preferred_days:
            continue
        blueprint = blueprint_for_training_day(blueprints, training_day)
        exercises, unfilled = fill_blueprint(
            blueprint, catalog, prefs.equipment, prefs.experience
        )
        unfilled_slots.extend(
            f"{WEEKDAY_NAMES[day]} {blueprint.name}: {slot.describe()}" for slot in unfilled
        )
        sessions.append(build_session(day, blueprint, split, prefs, exercises))
        training_day += 1

    no_main = [s for s in sessions if not s.main_lifts]
    fallback_reason = None
    if no_main:
        days = ", ".join(f"{WEEKDAY_NAMES[s.day_of_week]} ({s.title})" for s in no_main)
        fallback_reason = f"{FALLBACK_REASON}: no main lift for {days}"

    notes: list[str] = []
    if not prefs.preferred_days:
        notes.append("No preferred weekdays selected; program has no sessions.")
    elif len(prefs.preferred_days) != prefs.days_per_week:
        notes.append(
            f"{prefs.days_per_week} days per week requested but "
            f"{len(prefs.preferred_days)} weekdays selected; scheduled the selected weekdays."
        )

    diagnostics = ProgramDiagnostics(
        validation_passed=True,
        fallback_triggered=bool(no_main),
        fallback_reason=fallback_reason,
        split_logic=f"{split} System",
        generated_on=now.date().isoformat(),
        unfilled_slots=unfilled_slots,
        notes=notes,
    )

    return SmartProgram(
        program_id=f"prog_{uuid.uuid4().hex[:12]}",
        generated_at=now.isoformat(timespec="seconds"),
        preferences=prefs,
        split=split,
        sessions=sessions,
        diagnostics=diagnostics,
        adaptation_log=[],
    )


def to_designer_program(program: SmartProgram, author_id: str) -> DesignerProgram:
    """
    Convert a generated program into a one-week designer program.

    One ProgramDay per session (day_number = weekday + 1, day_id =
    session_id) holding the main lifts followed by the accessories, so a
    generated schedule can be logged with create_log_from_program().
    """
    days: list[ProgramDay] = []
    for session in program.sessions:
        exercises: list[ProgramExercise] = []
        for order, inst in enumerate([*session.main_lifts, *session.accessories], 1):
            exercises.append(ProgramExercise(
                program_exercise_id=f"{session.session_id}_ex{order}",
                exercise_id=inst.exercise_id,
                name=inst.name,
                muscle=inst.muscle,
                order=order,
                sets=[
                    ProgramSet(
                        set_id=f"{session.session_id}_ex{order}_s{n}",
                        reps=inst.reps,
                        rest_seconds=inst.rest_seconds,
                    )
                    for n in range(1, inst.sets + 1)
                ],
                notes=inst.notes,
            ))
        days.append(ProgramDay(
            day_id=session.session_id,
            day_number=session.day_of_week + 1,
            title=session.title,
            focus=session.focus,
            exercises=exercises,
            is_rest_day=not exercises,
        ))

    return DesignerProgram(
        program_id=program.program_id,
        title=f"{program.split} Program",
        author_id=author_id,
        weeks=[ProgramWeek(week_id=f"{program.program_id}_w1", week_number=1, days=days)],
        difficulty=program.preferences.experience,
        duration_weeks=1,
        description=program.diagnostics.split_logic,
        created_at=program.generated_at,
        updated_at=program.generated_at,
        is_active=True,
        tags=[program.split],
    )
