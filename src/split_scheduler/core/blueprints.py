"""
Blueprint library: per-split day templates.

A blueprint is one training day before concrete exercises are chosen: a
name plus an ordered list of slots.  Each slot asks the catalog for either
a movement pattern or a target muscle, restricted to one exercise type,
and says how many exercises to take.

Blueprints for a split are cycled across the chosen training days in
order (A, B, A, B ... or Push, Pull, Legs, Push ...).
"""

from dataclasses import dataclass

from .models import TrainingSplit


@dataclass(frozen=True)
class Slot:
    """One requirement in a blueprint: pattern XOR muscle, a type and a count."""

    movement_type: str
    pattern: str | None = None
    muscle: str | None = None
    count: int = 1

    def __post_init__(self) -> None:
        if (self.pattern is None) == (self.muscle is None):
            raise ValueError("Slot needs exactly one of pattern or muscle")
        if self.count < 1:
            raise ValueError("Slot count must be >= 1")

    def describe(self) -> str:
        """Human-readable slot label, e.g. 'pattern Squat (Compound)'."""
        target = f"pattern {self.pattern}" if self.pattern else f"muscle {self.muscle}"
        return f"{target} ({self.movement_type})"


@dataclass(frozen=True)
class DayBlueprint:
    name: str
    slots: tuple[Slot, ...]


def _p(pattern: str, movement_type: str, count: int = 1) -> Slot:
    return Slot(movement_type=movement_type, pattern=pattern, count=count)


def _m(muscle: str, movement_type: str, count: int = 1) -> Slot:
    return Slot(movement_type=movement_type, muscle=muscle, count=count)


SPLIT_BLUEPRINTS: dict[str, tuple[DayBlueprint, ...]] = {
    "FullBody": (
        DayBlueprint("Full Body A", (
            _p("Squat", "Compound"),
            _p("Push_Horizontal", "Compound"),
            _p("Pull_Horizontal", "Compound"),
            _p("Hinge", "Isolation"),
            _p("Core", "Isolation"),
        )),
        DayBlueprint("Full Body B", (
            _p("Hinge", "Compound"),
            _p("Push_Vertical", "Compound"),
            _p("Pull_Vertical", "Compound"),
            _p("Lunge", "Compound"),
            _p("Core", "Isolation"),
        )),
    ),
    "UpperLower": (
        DayBlueprint("Upper Power", (
            _p("Push_Horizontal", "Compound"),
            _p("Pull_Vertical", "Compound"),
            _p("Push_Vertical", "Isolation"),
            _p("Pull_Horizontal", "Compound"),
            _m("Triceps", "Isolation"),
            _m("Biceps", "Isolation"),
        )),
        DayBlueprint("Lower Strength", (
            _p("Squat", "Compound"),
            _p("Hinge", "Compound"),
            _p("Lunge", "Compound"),
            _m("Calves", "Isolation"),
            _p("Core", "Isolation"),
        )),
    ),
    "PPL": (
        DayBlueprint("Push", (
            _p("Push_Horizontal", "Compound"),
            _p("Push_Vertical", "Compound"),
            _m("Chest", "Isolation"),
            _m("Triceps", "Isolation"),
            _m("Shoulders", "Isolation"),
        )),
        DayBlueprint("Pull", (
            _p("Pull_Vertical", "Compound"),
            _p("Pull_Horizontal", "Compound"),
            _m("Back", "Isolation"),
            _m("Biceps", "Isolation"),
            _m("Back", "Isolation"),
        )),
        DayBlueprint("Legs", (
            _p("Squat", "Compound"),
            _p("Hinge", "Compound"),
            _p("Lunge", "Compound"),
            _m("Calves", "Isolation"),
            _p("Core", "Isolation"),
        )),
    ),
}


def get_blueprints(split: TrainingSplit) -> tuple[DayBlueprint, ...]:
    """
    Return the ordered day templates for a split.

    Raises:
        ValueError: If the split has no blueprints
    """
    if split not in SPLIT_BLUEPRINTS:
        valid = ", ".join(SPLIT_BLUEPRINTS)
        raise ValueError(f"Unknown split '{split}'. Valid splits: {valid}")
    return SPLIT_BLUEPRINTS[split]


def blueprint_for_training_day(
    blueprints: tuple[DayBlueprint, ...], training_day_index: int
) -> DayBlueprint:
    """Blueprint for the nth training day (0-based) of a generation, wrapping around."""
    return blueprints[training_day_index % len(blueprints)]
