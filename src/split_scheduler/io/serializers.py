"""
JSON serialization for programs, logs and reports.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import json
import re
from dataclasses import asdict
from datetime import datetime
from typing import Any

from ..core.models import (
    AdaptationEntry,
    AnalyticsReport,
    DesignerProgram,
    ExerciseInstance,
    LogExercise,
    LogSet,
    Macros,
    MealLog,
    NutritionDayLog,
    NutritionReport,
    ProgramDay,
    ProgramDiagnostics,
    ProgramExercise,
    ProgramSet,
    ProgramWeek,
    SchedulePreferences,
    SmartProgram,
    SmartSession,
    TrainingLog,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def _build(kind: str, factory, *args, **kwargs):
    """Construct a model, turning missing keys and invariant failures into ValidationError."""
    try:
        return factory(*args, **kwargs)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {kind}: {e}") from e


def _opt_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def _opt_int(value: Any) -> int | None:
    return int(value) if value is not None else None


# =============================================================================
# GENERATED PROGRAMS
# =============================================================================


def preferences_to_dict(prefs: SchedulePreferences) -> dict[str, Any]:
    return {
        "days_per_week": prefs.days_per_week,
        "preferred_days": list(prefs.preferred_days),
        "session_duration_minutes": prefs.session_duration_minutes,
        "equipment": sorted(prefs.equipment),
        "goal": prefs.goal,
        "experience": prefs.experience,
    }


def dict_to_preferences(data: dict[str, Any]) -> SchedulePreferences:
    return _build(
        "preferences",
        lambda: SchedulePreferences(
            days_per_week=int(data["days_per_week"]),
            preferred_days=tuple(int(d) for d in data.get("preferred_days", [])),
            session_duration_minutes=int(data.get("session_duration_minutes", 60)),
            equipment=frozenset(data.get("equipment", [])),
            goal=data.get("goal", "General Fitness"),
            experience=data.get("experience", "Beginner"),
        ),
    )


def exercise_instance_to_dict(inst: ExerciseInstance) -> dict[str, Any]:
    d: dict[str, Any] = {
        "exercise_id": inst.exercise_id,
        "name": inst.name,
        "name_native": inst.name_native,
        "sets": inst.sets,
        "reps": inst.reps,
        "rest_seconds": inst.rest_seconds,
        "muscle": inst.muscle,
    }
    if inst.movement_type is not None:
        d["movement_type"] = inst.movement_type
    if inst.equipment is not None:
        d["equipment"] = inst.equipment
    if inst.notes:
        d["notes"] = inst.notes
    return d


def dict_to_exercise_instance(data: dict[str, Any]) -> ExerciseInstance:
    return _build(
        "exercise",
        lambda: ExerciseInstance(
            exercise_id=data["exercise_id"],
            name=data["name"],
            name_native=data.get("name_native", data["name"]),
            sets=int(data["sets"]),
            reps=str(data["reps"]),
            rest_seconds=int(data.get("rest_seconds", 0)),
            muscle=data["muscle"],
            movement_type=data.get("movement_type"),
            equipment=data.get("equipment"),
            notes=data.get("notes", ""),
        ),
    )


def smart_session_to_dict(session: SmartSession) -> dict[str, Any]:
    return {
        "session_id": session.session_id,
        "day_of_week": session.day_of_week,
        "title": session.title,
        "focus": session.focus,
        "duration_minutes": session.duration_minutes,
        "intensity": session.intensity,
        "warmup": [exercise_instance_to_dict(e) for e in session.warmup],
        "main_lifts": [exercise_instance_to_dict(e) for e in session.main_lifts],
        "accessories": [exercise_instance_to_dict(e) for e in session.accessories],
        "cooldown": [exercise_instance_to_dict(e) for e in session.cooldown],
        "tags": list(session.tags),
        "rationale": session.rationale,
    }


def dict_to_smart_session(data: dict[str, Any]) -> SmartSession:
    return _build(
        "session",
        lambda: SmartSession(
            session_id=data["session_id"],
            day_of_week=int(data["day_of_week"]),
            title=data["title"],
            focus=data.get("focus", ""),
            duration_minutes=int(data.get("duration_minutes", 60)),
            intensity=data.get("intensity", ""),
            warmup=[dict_to_exercise_instance(e) for e in data.get("warmup", [])],
            main_lifts=[dict_to_exercise_instance(e) for e in data.get("main_lifts", [])],
            accessories=[dict_to_exercise_instance(e) for e in data.get("accessories", [])],
            cooldown=[dict_to_exercise_instance(e) for e in data.get("cooldown", [])],
            tags=list(data.get("tags", [])),
            rationale=data.get("rationale", ""),
        ),
    )


def smart_program_to_dict(program: SmartProgram) -> dict[str, Any]:
    """
    Convert SmartProgram to JSON-compatible dict.

    Args:
        program: SmartProgram to convert

    Returns:
        Dict representation
    """
    diag = program.diagnostics
    return {
        "program_id": program.program_id,
        "generated_at": program.generated_at,
        "preferences": preferences_to_dict(program.preferences),
        "split": program.split,
        "sessions": [smart_session_to_dict(s) for s in program.sessions],
        "diagnostics": {
            "validation_passed": diag.validation_passed,
            "fallback_triggered": diag.fallback_triggered,
            "fallback_reason": diag.fallback_reason,
            "split_logic": diag.split_logic,
            "generated_on": diag.generated_on,
            "unfilled_slots": list(diag.unfilled_slots),
            "notes": list(diag.notes),
        },
        "adaptation_log": [asdict(e) for e in program.adaptation_log],
    }


def dict_to_smart_program(data: dict[str, Any]) -> SmartProgram:
    """
    Convert dict to SmartProgram.

    Args:
        data: Dict representation

    Returns:
        SmartProgram instance

    Raises:
        ValidationError: If data is invalid
    """
    diag = data.get("diagnostics") or {}
    diagnostics = _build(
        "diagnostics",
        lambda: ProgramDiagnostics(
            validation_passed=bool(diag["validation_passed"]),
            fallback_triggered=bool(diag["fallback_triggered"]),
            fallback_reason=diag.get("fallback_reason"),
            split_logic=diag["split_logic"],
            generated_on=diag["generated_on"],
            unfilled_slots=list(diag.get("unfilled_slots", [])),
            notes=list(diag.get("notes", [])),
        ),
    )
    if data.get("split") not in ("FullBody", "UpperLower", "PPL"):
        raise ValidationError(f"Invalid split: {data.get('split')}")

    return _build(
        "program",
        lambda: SmartProgram(
            program_id=data["program_id"],
            generated_at=data["generated_at"],
            preferences=dict_to_preferences(data["preferences"]),
            split=data["split"],
            sessions=[dict_to_smart_session(s) for s in data.get("sessions", [])],
            diagnostics=diagnostics,
            adaptation_log=[
                AdaptationEntry(
                    applied_at=e["applied_at"],
                    readiness_score=float(e["readiness_score"]),
                    action=e["action"],
                    description=e.get("description", ""),
                )
                for e in data.get("adaptation_log", [])
            ],
        ),
    )


# =============================================================================
# DESIGNER PROGRAMS
# =============================================================================


def designer_program_to_dict(program: DesignerProgram) -> dict[str, Any]:
    """Convert DesignerProgram (weeks → days → exercises → sets) to a dict."""
    return asdict(program)


def _dict_to_program_set(data: dict[str, Any]) -> ProgramSet:
    return ProgramSet(
        set_id=data["set_id"],
        reps=str(data["reps"]),
        weight=float(data.get("weight", 0.0)),
        rest_seconds=int(data.get("rest_seconds", 60)),
        set_type=data.get("set_type", "Working"),
        rpe=_opt_float(data.get("rpe")),
    )


def _dict_to_program_exercise(data: dict[str, Any]) -> ProgramExercise:
    return ProgramExercise(
        program_exercise_id=data["program_exercise_id"],
        exercise_id=data["exercise_id"],
        name=data["name"],
        muscle=data.get("muscle", ""),
        order=int(data.get("order", 0)),
        sets=[_dict_to_program_set(s) for s in data.get("sets", [])],
        notes=data.get("notes", ""),
    )


def _dict_to_program_day(data: dict[str, Any]) -> ProgramDay:
    return ProgramDay(
        day_id=data["day_id"],
        day_number=int(data["day_number"]),
        title=data["title"],
        focus=data.get("focus", ""),
        exercises=[_dict_to_program_exercise(e) for e in data.get("exercises", [])],
        is_rest_day=bool(data.get("is_rest_day", False)),
    )


def dict_to_designer_program(data: dict[str, Any]) -> DesignerProgram:
    """
    Convert dict to DesignerProgram.

    Raises:
        ValidationError: If data is invalid
    """
    return _build(
        "designer program",
        lambda: DesignerProgram(
            program_id=data["program_id"],
            title=data["title"],
            author_id=data["author_id"],
            weeks=[
                ProgramWeek(
                    week_id=w["week_id"],
                    week_number=int(w["week_number"]),
                    days=[_dict_to_program_day(d) for d in w.get("days", [])],
                )
                for w in data.get("weeks", [])
            ],
            difficulty=data.get("difficulty", "Intermediate"),
            duration_weeks=int(data.get("duration_weeks", 4)),
            description=data.get("description", ""),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            is_active=bool(data.get("is_active", False)),
            tags=list(data.get("tags", [])),
        ),
    )


# =============================================================================
# TRAINING LOGS
# =============================================================================


def log_set_to_dict(s: LogSet) -> dict[str, Any]:
    d: dict[str, Any] = {
        "set_id": s.set_id,
        "set_number": s.set_number,
        "target_reps": s.target_reps,
        "target_weight": s.target_weight,
        "completed": s.completed,
    }
    # Unrecorded values are omitted
    if s.performed_reps is not None:
        d["performed_reps"] = s.performed_reps
    if s.performed_weight is not None:
        d["performed_weight"] = s.performed_weight
    if s.rpe is not None:
        d["rpe"] = s.rpe
    return d


def dict_to_log_set(data: dict[str, Any]) -> LogSet:
    """
    Convert dict to LogSet.

    Raises:
        ValidationError: If data is invalid
    """
    return _build(
        "set",
        lambda: LogSet(
            set_id=data["set_id"],
            set_number=int(data["set_number"]),
            target_reps=str(data.get("target_reps", "")),
            target_weight=float(data.get("target_weight", 0.0)),
            performed_reps=_opt_int(data.get("performed_reps")),
            performed_weight=_opt_float(data.get("performed_weight")),
            rpe=_opt_float(data.get("rpe")),
            completed=bool(data.get("completed", False)),
        ),
    )


def training_log_to_dict(log: TrainingLog) -> dict[str, Any]:
    """
    Convert TrainingLog to JSON-compatible dict.

    Args:
        log: TrainingLog to convert

    Returns:
        Dict representation
    """
    return {
        "log_id": log.log_id,
        "user_id": log.user_id,
        "date": log.date,
        "workout_title": log.workout_title,
        "status": log.status,
        "program_id": log.program_id,
        "week_id": log.week_id,
        "day_id": log.day_id,
        "exercises": [
            {
                "log_exercise_id": ex.log_exercise_id,
                "exercise_id": ex.exercise_id,
                "name": ex.name,
                "notes": ex.notes,
                "completed": ex.completed,
                "sets": [log_set_to_dict(s) for s in ex.sets],
            }
            for ex in log.exercises
        ],
        "fatigue_level": log.fatigue_level,
        "user_notes": log.user_notes,
        "created_at": log.created_at,
        "updated_at": log.updated_at,
    }


def dict_to_training_log(data: dict[str, Any]) -> TrainingLog:
    """
    Convert dict to TrainingLog.

    Args:
        data: Dict representation

    Returns:
        TrainingLog instance

    Raises:
        ValidationError: If data is invalid
    """
    validate_date(data.get("date"))

    exercises = [
        _build(
            "exercise",
            lambda ex=ex: LogExercise(
                log_exercise_id=ex["log_exercise_id"],
                exercise_id=ex["exercise_id"],
                name=ex["name"],
                notes=ex.get("notes", ""),
                completed=bool(ex.get("completed", False)),
                sets=[dict_to_log_set(s) for s in ex.get("sets", [])],
            ),
        )
        for ex in data.get("exercises", [])
    ]

    return _build(
        "training log",
        lambda: TrainingLog(
            log_id=data["log_id"],
            user_id=data["user_id"],
            date=data["date"],
            workout_title=data.get("workout_title", ""),
            status=data["status"],
            exercises=exercises,
            program_id=data.get("program_id"),
            week_id=data.get("week_id"),
            day_id=data.get("day_id"),
            fatigue_level=_opt_int(data.get("fatigue_level")),
            user_notes=data.get("user_notes", ""),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        ),
    )


# =============================================================================
# NUTRITION LOGS
# =============================================================================


def _dict_to_macros(data: dict[str, Any] | None) -> Macros:
    data = data or {}
    return Macros(
        calories=float(data.get("calories", 0.0)),
        protein=float(data.get("protein", 0.0)),
        carbs=float(data.get("carbs", 0.0)),
        fats=float(data.get("fats", 0.0)),
    )


def nutrition_log_to_dict(log: NutritionDayLog) -> dict[str, Any]:
    return asdict(log)


def dict_to_nutrition_log(data: dict[str, Any]) -> NutritionDayLog:
    """
    Convert dict to NutritionDayLog.

    Raises:
        ValidationError: If data is invalid
    """
    validate_date(data.get("date"))

    meals = [
        _build(
            "meal",
            lambda m=m: MealLog(
                meal_id=m["meal_id"],
                title=m["title"],
                meal_type=m.get("meal_type", ""),
                status=m.get("status", "Planned"),
                planned_macros=_dict_to_macros(m.get("planned_macros")),
                actual_macros=_dict_to_macros(m.get("actual_macros")),
            ),
        )
        for m in data.get("meals", [])
    ]

    return _build(
        "nutrition log",
        lambda: NutritionDayLog(
            log_id=data["log_id"],
            user_id=data["user_id"],
            date=data["date"],
            status=data["status"],
            meals=meals,
            total_target_macros=_dict_to_macros(data.get("total_target_macros")),
            total_consumed_macros=_dict_to_macros(data.get("total_consumed_macros")),
            water_intake=int(data.get("water_intake", 0)),
            notes=data.get("notes", ""),
            plan_id=data.get("plan_id"),
        ),
    )


# =============================================================================
# REPORTS (output only)
# =============================================================================


def analytics_report_to_dict(report: AnalyticsReport) -> dict[str, Any]:
    return asdict(report)


def nutrition_report_to_dict(report: NutritionReport) -> dict[str, Any]:
    return asdict(report)


def to_json_line(data: dict[str, Any]) -> str:
    """
    Serialize a record to a single JSON line.

    Returns:
        JSON string (single line, no trailing newline)
    """
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def json_line_to_dict(line: str) -> dict[str, Any]:
    """
    Parse a single JSON line.

    Raises:
        ValidationError: If JSON is invalid or not an object
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return data
