"""
Training log construction and updates.

A log starts as a snapshot of one program day (targets copied, nothing
performed).  Every update goes through one of the typed update functions
below, each of which returns a new log with exercise completion flags and
the log status recomputed from the sets.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime

from .models import (
    DesignerProgram,
    LogExercise,
    LogSet,
    LogStatus,
    ProgramDay,
    TrainingLog,
)


class DayNotFoundError(LookupError):
    """Raised when a log is requested for a day the program does not contain."""


@dataclass(frozen=True)
class SetUpdate:
    """Fields to change on one LogSet; None leaves a field unchanged."""

    performed_reps: int | None = None
    performed_weight: float | None = None
    rpe: float | None = None
    completed: bool | None = None


@dataclass(frozen=True)
class LogUpdate:
    """Log-level fields to change; None leaves a field unchanged."""

    workout_title: str | None = None
    user_notes: str | None = None
    fatigue_level: int | None = None


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now()).isoformat(timespec="seconds")


def find_program_day(
    program: DesignerProgram, day_id: str | None = None
) -> tuple[ProgramDay, str]:
    """
    Locate the day to log.

    With a day_id the day is searched in every week.  Without one the first
    day of the first week is used (not weekday-aware).

    Returns:
        (day, week_id)

    Raises:
        DayNotFoundError: If the day cannot be found
    """
    if day_id is not None:
        for week in program.weeks:
            for day in week.days:
                if day.day_id == day_id:
                    return day, week.week_id
        raise DayNotFoundError(f"Day not found in program {program.program_id}: {day_id}")

    if not program.weeks or not program.weeks[0].days:
        raise DayNotFoundError(f"Day not found in program {program.program_id}: program has no days")
    week = program.weeks[0]
    return week.days[0], week.week_id


def create_log_from_program(
    user_id: str,
    date: str,
    program: DesignerProgram,
    day_id: str | None = None,
    now: datetime | None = None,
) -> TrainingLog:
    """
    Create a fresh log for one program day.

    Every prescribed set becomes a LogSet with the program's reps/weight as
    targets and nothing performed.  Rest days start as "Rest", other days
    as "Planned".

    Raises:
        DayNotFoundError: If day_id is not in the program
    """
    day, week_id = find_program_day(program, day_id)
    stamp = _timestamp(now)

    exercises = [
        LogExercise(
            log_exercise_id=_new_id("log_ex"),
            exercise_id=ex.exercise_id,
            name=ex.name,
            notes=ex.notes,
            completed=False,
            sets=[
                LogSet(
                    set_id=_new_id("log_set"),
                    set_number=idx,
                    target_reps=ps.reps,
                    target_weight=ps.weight or 0.0,
                )
                for idx, ps in enumerate(ex.sets, 1)
            ],
        )
        for ex in day.exercises
    ]

    return TrainingLog(
        log_id=_new_id("log"),
        user_id=user_id,
        date=date,
        workout_title=day.title,
        status="Rest" if day.is_rest_day else "Planned",
        exercises=exercises,
        program_id=program.program_id,
        week_id=week_id,
        day_id=day.day_id,
        created_at=stamp,
        updated_at=stamp,
    )


def create_rest_log(user_id: str, date: str, now: datetime | None = None) -> TrainingLog:
    """Create a log for a day with no scheduled session."""
    stamp = _timestamp(now)
    return TrainingLog(
        log_id=_new_id("log"),
        user_id=user_id,
        date=date,
        workout_title="Rest",
        status="Rest",
        created_at=stamp,
        updated_at=stamp,
    )


def derive_status(log: TrainingLog) -> LogStatus:
    """
    Status implied by the log's sets.

    No sets completed → Planned, all → Completed, some → Partial.  A Rest
    log stays Rest while it has no sets.
    """
    total = log.total_sets
    done = log.completed_sets
    if log.status == "Rest" and total == 0:
        return "Rest"
    if done == 0:
        return "Planned"
    if done == total:
        return "Completed"
    return "Partial"


def recompute_log(log: TrainingLog, now: datetime | None = None) -> TrainingLog:
    """
    Return a copy with exercise flags and status recomputed.

    An exercise is completed when every one of its sets is completed.
    """
    exercises = [
        replace(ex, sets=list(ex.sets), completed=all(s.completed for s in ex.sets))
        for ex in log.exercises
    ]
    updated = replace(log, exercises=exercises)
    return replace(updated, status=derive_status(updated), updated_at=_timestamp(now))


def _find_exercise_index(log: TrainingLog, log_exercise_id: str) -> int:
    for i, ex in enumerate(log.exercises):
        if ex.log_exercise_id == log_exercise_id:
            return i
    raise LookupError(f"Exercise not found in log {log.log_id}: {log_exercise_id}")


def update_set(
    log: TrainingLog,
    log_exercise_id: str,
    set_id: str,
    changes: SetUpdate,
    now: datetime | None = None,
) -> TrainingLog:
    """
    Record performance on one set.

    Raises:
        LookupError: If the exercise or set is not in the log
        ValueError: If the new values are invalid
    """
    ex_idx = _find_exercise_index(log, log_exercise_id)
    exercise = log.exercises[ex_idx]

    new_sets: list[LogSet] = []
    found = False
    for s in exercise.sets:
        if s.set_id == set_id:
            found = True
            s = replace(
                s,
                performed_reps=changes.performed_reps if changes.performed_reps is not None else s.performed_reps,
                performed_weight=changes.performed_weight if changes.performed_weight is not None else s.performed_weight,
                rpe=changes.rpe if changes.rpe is not None else s.rpe,
                completed=changes.completed if changes.completed is not None else s.completed,
            )
        new_sets.append(s)
    if not found:
        raise LookupError(f"Set not found in exercise {log_exercise_id}: {set_id}")

    exercises = list(log.exercises)
    exercises[ex_idx] = replace(exercise, sets=new_sets)
    return recompute_log(replace(log, exercises=exercises), now)


def update_exercise(
    log: TrainingLog,
    log_exercise_id: str,
    notes: str | None = None,
    sets: list[LogSet] | None = None,
    now: datetime | None = None,
) -> TrainingLog:
    """
    Replace an exercise's notes and/or set list (e.g. to add or drop sets).

    Raises:
        LookupError: If the exercise is not in the log
    """
    ex_idx = _find_exercise_index(log, log_exercise_id)
    exercise = log.exercises[ex_idx]
    exercises = list(log.exercises)
    exercises[ex_idx] = replace(
        exercise,
        notes=notes if notes is not None else exercise.notes,
        sets=list(sets) if sets is not None else list(exercise.sets),
    )
    return recompute_log(replace(log, exercises=exercises), now)


def update_log(log: TrainingLog, changes: LogUpdate, now: datetime | None = None) -> TrainingLog:
    """Change session-level feedback (title, notes, fatigue)."""
    updated = replace(
        log,
        workout_title=changes.workout_title if changes.workout_title is not None else log.workout_title,
        user_notes=changes.user_notes if changes.user_notes is not None else log.user_notes,
        fatigue_level=changes.fatigue_level if changes.fatigue_level is not None else log.fatigue_level,
    )
    return recompute_log(updated, now)


def mark_skipped(log: TrainingLog, now: datetime | None = None) -> TrainingLog:
    """Explicitly mark a day as skipped.  Status recomputation never yields Skipped."""
    return replace(log, status="Skipped", updated_at=_timestamp(now))
