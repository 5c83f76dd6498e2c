"""
Data models for split-scheduler.

All core dataclasses representing schedule preferences, generated
programs, designer programs, training/nutrition logs and the derived
analytics values.  Engines never mutate these in place: every transform
returns a new value (see dataclasses.replace in the engine modules).
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .exercises.base import DIFFICULTIES, Difficulty, MovementType

TrainingSplit = Literal["FullBody", "UpperLower", "PPL"]
LogStatus = Literal["Planned", "Completed", "Partial", "Skipped", "Rest"]
SetType = Literal["Warmup", "Working", "Drop", "Failure"]
MealStatus = Literal["Planned", "Completed", "Skipped"]
NutritionStatus = Literal["Completed", "Partial", "Missed"]
InsightType = Literal["positive", "negative", "neutral"]
HeatmapStatus = Literal["completed", "partial", "missed"]

LOG_STATUSES: tuple[str, ...] = ("Planned", "Completed", "Partial", "Skipped", "Rest")
SET_TYPES: tuple[str, ...] = ("Warmup", "Working", "Drop", "Failure")
MEAL_STATUSES: tuple[str, ...] = ("Planned", "Completed", "Skipped")
NUTRITION_STATUSES: tuple[str, ...] = ("Completed", "Partial", "Missed")


def validate_iso_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


# =============================================================================
# SCHEDULE GENERATION
# =============================================================================


@dataclass(frozen=True)
class SchedulePreferences:
    """
    Input to one generation request.

    Range checks (days, weekdays) are done by the generator, which owns
    the validation contract; here values are only normalised.
    """

    days_per_week: int
    preferred_days: tuple[int, ...]  # weekdays 0–6
    session_duration_minutes: int = 60
    equipment: frozenset[str] = field(default_factory=frozenset)
    goal: str = "General Fitness"
    experience: Difficulty = "Beginner"

    def __post_init__(self) -> None:
        object.__setattr__(self, "preferred_days", tuple(sorted(set(self.preferred_days))))
        object.__setattr__(self, "equipment", frozenset(self.equipment))


@dataclass(frozen=True)
class ExerciseInstance:
    """
    An exercise as prescribed inside a generated session.

    A snapshot of the catalog entry plus the resolved prescription, so
    editing the catalog later never changes an existing program.
    movement_type is None for the fixed warm-up/cool-down entries.
    """

    exercise_id: str
    name: str
    name_native: str
    sets: int
    reps: str
    rest_seconds: int
    muscle: str
    movement_type: MovementType | None = None
    equipment: str | None = None
    notes: str = ""

    @property
    def is_main_lift(self) -> bool:
        return self.movement_type == "Compound"


@dataclass
class SmartSession:
    """One generated training day."""

    session_id: str
    day_of_week: int  # 0–6
    title: str
    focus: str
    duration_minutes: int
    intensity: str
    warmup: list[ExerciseInstance] = field(default_factory=list)
    main_lifts: list[ExerciseInstance] = field(default_factory=list)
    accessories: list[ExerciseInstance] = field(default_factory=list)
    cooldown: list[ExerciseInstance] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    rationale: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"day_of_week must be 0–6, got {self.day_of_week}")

    @property
    def all_exercises(self) -> list[ExerciseInstance]:
        return [*self.warmup, *self.main_lifts, *self.accessories, *self.cooldown]

    @property
    def is_empty(self) -> bool:
        return not self.main_lifts and not self.accessories


@dataclass
class ProgramDiagnostics:
    """What happened while generating a program."""

    validation_passed: bool
    fallback_triggered: bool
    split_logic: str
    generated_on: str  # ISO date
    fallback_reason: str | None = None
    unfilled_slots: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AdaptationEntry:
    """One readiness-triggered transform applied to a program."""

    applied_at: str  # ISO timestamp
    readiness_score: float
    action: str  # e.g. "deload"
    description: str = ""


@dataclass
class SmartProgram:
    """A generated weekly program.  Regeneration supersedes it."""

    program_id: str
    generated_at: str  # ISO timestamp
    preferences: SchedulePreferences
    split: TrainingSplit
    sessions: list[SmartSession]
    diagnostics: ProgramDiagnostics
    adaptation_log: list[AdaptationEntry] = field(default_factory=list)

    def session_for_day(self, day_of_week: int) -> SmartSession | None:
        """Return the session scheduled on a weekday, or None for a rest day."""
        for s in self.sessions:
            if s.day_of_week == day_of_week:
                return s
        return None


# =============================================================================
# DESIGNER PROGRAMS (multi-week, hand-authored or converted)
# =============================================================================


@dataclass
class ProgramSet:
    """One prescribed set in a designer program."""

    set_id: str
    reps: str
    weight: float = 0.0
    rest_seconds: int = 60
    set_type: SetType = "Working"
    rpe: float | None = None

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")
        if self.set_type not in SET_TYPES:
            raise ValueError(f"Invalid set_type: {self.set_type}")


@dataclass
class ProgramExercise:
    program_exercise_id: str
    exercise_id: str
    name: str
    muscle: str
    order: int
    sets: list[ProgramSet] = field(default_factory=list)
    notes: str = ""


@dataclass
class ProgramDay:
    day_id: str
    day_number: int  # 1–7
    title: str
    focus: str = ""
    exercises: list[ProgramExercise] = field(default_factory=list)
    is_rest_day: bool = False


@dataclass
class ProgramWeek:
    week_id: str
    week_number: int
    days: list[ProgramDay] = field(default_factory=list)


@dataclass
class DesignerProgram:
    """A multi-week program a log can be created from."""

    program_id: str
    title: str
    author_id: str
    weeks: list[ProgramWeek] = field(default_factory=list)
    difficulty: Difficulty = "Intermediate"
    duration_weeks: int = 4
    description: str = ""
    created_at: str = ""
    updated_at: str = ""
    is_active: bool = False
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"Invalid difficulty: {self.difficulty}")


# =============================================================================
# TRAINING LOGS
# =============================================================================


@dataclass
class LogSet:
    """
    A single set in a training log.

    target_* is the prescription at log-creation time; performed_* stays
    None until the athlete records it.  completed is an explicit toggle
    and is not derived from the performed values.
    """

    set_id: str
    set_number: int
    target_reps: str
    target_weight: float = 0.0
    performed_reps: int | None = None
    performed_weight: float | None = None
    rpe: float | None = None
    completed: bool = False

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.set_number < 1:
            raise ValueError("set_number must be >= 1")
        if self.target_weight < 0:
            raise ValueError("target_weight must be non-negative")
        if self.performed_reps is not None and self.performed_reps < 0:
            raise ValueError("performed_reps must be non-negative")
        if self.performed_weight is not None and self.performed_weight < 0:
            raise ValueError("performed_weight must be non-negative")
        if self.rpe is not None and not 0 <= self.rpe <= 10:
            raise ValueError("rpe must be between 0 and 10")


@dataclass
class LogExercise:
    log_exercise_id: str
    exercise_id: str
    name: str
    sets: list[LogSet] = field(default_factory=list)
    notes: str = ""
    completed: bool = False


@dataclass
class TrainingLog:
    """
    One day of training for one user.

    status is derived from set completion (see training_log.recompute_log);
    "Rest" is only assigned at creation and "Skipped" only explicitly.
    """

    log_id: str
    user_id: str
    date: str  # ISO format: YYYY-MM-DD
    workout_title: str
    status: LogStatus
    exercises: list[LogExercise] = field(default_factory=list)
    program_id: str | None = None
    week_id: str | None = None
    day_id: str | None = None
    fatigue_level: int | None = None  # 1–10
    user_notes: str = ""
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        """Validate log data."""
        validate_iso_date(self.date)
        if self.status not in LOG_STATUSES:
            raise ValueError(f"Invalid status: {self.status}")
        if self.fatigue_level is not None and not 1 <= self.fatigue_level <= 10:
            raise ValueError("fatigue_level must be between 1 and 10")

    @property
    def total_sets(self) -> int:
        return sum(len(ex.sets) for ex in self.exercises)

    @property
    def completed_sets(self) -> int:
        return sum(1 for ex in self.exercises for s in ex.sets if s.completed)


# =============================================================================
# NUTRITION LOGS
# =============================================================================


@dataclass(frozen=True)
class Macros:
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0

    def __add__(self, other: "Macros") -> "Macros":
        return Macros(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fats=self.fats + other.fats,
        )


@dataclass
class MealLog:
    meal_id: str
    title: str
    meal_type: str  # Breakfast, Lunch, Dinner, Snack, ...
    status: MealStatus = "Planned"
    planned_macros: Macros = field(default_factory=Macros)
    actual_macros: Macros = field(default_factory=Macros)

    def __post_init__(self) -> None:
        if self.status not in MEAL_STATUSES:
            raise ValueError(f"Invalid meal status: {self.status}")


@dataclass
class NutritionDayLog:
    log_id: str
    user_id: str
    date: str  # ISO format: YYYY-MM-DD
    status: NutritionStatus
    meals: list[MealLog] = field(default_factory=list)
    total_target_macros: Macros = field(default_factory=Macros)
    total_consumed_macros: Macros = field(default_factory=Macros)
    water_intake: int = 0
    notes: str = ""
    plan_id: str | None = None

    def __post_init__(self) -> None:
        validate_iso_date(self.date)
        if self.status not in NUTRITION_STATUSES:
            raise ValueError(f"Invalid nutrition status: {self.status}")


# =============================================================================
# ANALYTICS (derived, never persisted)
# =============================================================================


@dataclass(frozen=True)
class VolumeDataPoint:
    date: str
    label: str
    volume: float
    intensity: float
    adherence: int


@dataclass(frozen=True)
class MuscleSplitStats:
    muscle: str
    set_volume: int


@dataclass(frozen=True)
class AnalyticsSummary:
    total_workouts: int
    completion_rate: int  # percent
    total_volume: float
    missed_workouts: int
    best_streak: int


@dataclass(frozen=True)
class TrainingInsight:
    type: InsightType
    metric: str
    message: str


@dataclass(frozen=True)
class AnalyticsReport:
    timeline: list[VolumeDataPoint]
    muscle_stats: list[MuscleSplitStats]
    summary: AnalyticsSummary
    insights: list[TrainingInsight]


@dataclass(frozen=True)
class NutritionTrendPoint:
    date: str
    label: str
    calories: float
    target_calories: float
    protein: float
    carbs: float
    fats: float
    adherence: int


@dataclass(frozen=True)
class NutritionHeatmapPoint:
    date: str
    adherence: int
    status: HeatmapStatus


@dataclass(frozen=True)
class NutritionAnalyticsSummary:
    avg_adherence: int
    avg_calories: int
    calorie_deviation: int
    avg_protein: int
    best_streak: int


@dataclass(frozen=True)
class MacroShare:
    name: str
    value: float


@dataclass(frozen=True)
class NutritionReport:
    timeline: list[NutritionTrendPoint]
    heatmap: list[NutritionHeatmapPoint]
    summary: NutritionAnalyticsSummary
    macro_distribution: list[MacroShare]
    insights: list[TrainingInsight]
