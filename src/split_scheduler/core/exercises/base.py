"""
Base types for exercise definitions.

ExerciseDefinition is one immutable catalog entry describing a movement:
which muscles it trains, what equipment it needs, how hard it is and which
movement pattern it belongs to.  Prescription holds a sets/reps/rest triple
and is shared by catalog defaults and generated session exercises.
"""

from dataclasses import dataclass, field
from typing import Literal

Difficulty = Literal["Beginner", "Intermediate", "Advanced"]
MovementType = Literal["Compound", "Isolation", "Cardio"]
MovementPattern = Literal[
    "Squat",
    "Hinge",
    "Lunge",
    "Push_Horizontal",
    "Push_Vertical",
    "Pull_Horizontal",
    "Pull_Vertical",
    "Core",
]
Equipment = Literal[
    "Barbell", "Dumbbell", "Machine", "Cables", "Bodyweight", "Bands", "Smith Machine", "TRX",
]
MuscleGroup = Literal[
    "Chest", "Back", "Legs", "Shoulders", "Biceps", "Triceps", "Core",
    "Full Body", "Glutes", "Calves", "Forearms", "Cardio",
]

DIFFICULTIES: tuple[str, ...] = ("Beginner", "Intermediate", "Advanced")
MOVEMENT_TYPES: tuple[str, ...] = ("Compound", "Isolation", "Cardio")
MOVEMENT_PATTERNS: tuple[str, ...] = (
    "Squat", "Hinge", "Lunge", "Push_Horizontal", "Push_Vertical",
    "Pull_Horizontal", "Pull_Vertical", "Core",
)
EQUIPMENT_TYPES: tuple[str, ...] = (
    "Barbell", "Dumbbell", "Machine", "Cables", "Bodyweight", "Bands", "Smith Machine", "TRX",
)
MUSCLE_GROUPS: tuple[str, ...] = (
    "Chest", "Back", "Legs", "Shoulders", "Biceps", "Triceps", "Core",
    "Full Body", "Glutes", "Calves", "Forearms", "Cardio",
)

# Equipment that is always available regardless of the caller's equipment set
ALWAYS_AVAILABLE_EQUIPMENT = "Bodyweight"


@dataclass(frozen=True)
class Prescription:
    """Sets x reps with rest, e.g. 4 x "6-8" @ 120 s."""

    sets: int
    reps: str
    rest_seconds: int

    def __post_init__(self) -> None:
        if self.sets < 0:
            raise ValueError("sets must be non-negative")
        if not self.reps:
            raise ValueError("reps must be a non-empty string")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")

    def __str__(self) -> str:
        return f"{self.sets}x{self.reps} @ {self.rest_seconds}s"


@dataclass(frozen=True)
class ExerciseDefinition:
    """
    One catalog movement.

    Immutable reference data.  Generated programs copy what they need out
    of it (see ExerciseInstance) so later catalog edits never change a
    program that was already generated.
    """

    # Identity
    exercise_id: str            # e.g. "bp_bb"
    name_en: str                # e.g. "Barbell Bench Press"
    name_native: str            # localized display name

    # Classification
    muscle: str                 # primary muscle group
    equipment: str
    difficulty: str
    movement_type: str          # Compound | Isolation | Cardio
    pattern: str                # movement pattern, e.g. "Push_Horizontal"

    description: str = ""
    secondary_muscles: frozenset[str] = field(default_factory=frozenset)
    defaults: Prescription | None = None
    is_custom: bool = False

    def __post_init__(self) -> None:
        """Validate enumerated fields."""
        if not self.exercise_id:
            raise ValueError("exercise_id must be non-empty")
        if self.muscle not in MUSCLE_GROUPS:
            raise ValueError(f"{self.exercise_id}: invalid muscle {self.muscle!r}")
        bad = set(self.secondary_muscles) - set(MUSCLE_GROUPS)
        if bad:
            raise ValueError(f"{self.exercise_id}: invalid secondary muscles {sorted(bad)}")
        if self.equipment not in EQUIPMENT_TYPES:
            raise ValueError(f"{self.exercise_id}: invalid equipment {self.equipment!r}")
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"{self.exercise_id}: invalid difficulty {self.difficulty!r}")
        if self.movement_type not in MOVEMENT_TYPES:
            raise ValueError(f"{self.exercise_id}: invalid movement_type {self.movement_type!r}")
        if self.pattern not in MOVEMENT_PATTERNS:
            raise ValueError(f"{self.exercise_id}: invalid pattern {self.pattern!r}")

    def trains(self, muscle: str) -> bool:
        """True if muscle is the primary muscle or one of the secondary ones."""
        return self.muscle == muscle or muscle in self.secondary_muscles

    def is_available_with(self, equipment: frozenset[str] | set[str]) -> bool:
        """True if the movement can be done with the given equipment."""
        return self.equipment == ALWAYS_AVAILABLE_EQUIPMENT or self.equipment in equipment
