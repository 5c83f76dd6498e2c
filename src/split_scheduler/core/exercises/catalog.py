"""
Exercise catalog and catalog query.

ExerciseCatalog is a read-only, ordered collection of ExerciseDefinition
objects.  It is passed explicitly to the generator and the analytics
engine, so tests can substitute a small fixture catalog without touching
the bundled one.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from .base import ExerciseDefinition

DEFAULT_QUERY_LIMIT = 5


class ExerciseCatalog:
    """
    Ordered, immutable set of exercise definitions keyed by exercise_id.

    Declaration order is preserved and is the order query() returns
    results in.
    """

    def __init__(self, exercises: Iterable[ExerciseDefinition]):
        items = tuple(exercises)
        by_id: dict[str, ExerciseDefinition] = {}
        for ex in items:
            if ex.exercise_id in by_id:
                raise ValueError(f"Duplicate exercise_id in catalog: {ex.exercise_id!r}")
            by_id[ex.exercise_id] = ex
        self._exercises = items
        self._by_id = by_id

    def __iter__(self) -> Iterator[ExerciseDefinition]:
        return iter(self._exercises)

    def __len__(self) -> int:
        return len(self._exercises)

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._by_id

    def __repr__(self) -> str:
        return f"ExerciseCatalog({len(self._exercises)} exercises)"

    @property
    def exercise_ids(self) -> list[str]:
        return [ex.exercise_id for ex in self._exercises]

    def get(self, exercise_id: str) -> ExerciseDefinition:
        """
        Return the definition for exercise_id.

        Raises:
            ValueError: If exercise_id is not in the catalog
        """
        if exercise_id not in self._by_id:
            valid = ", ".join(self._by_id)
            raise ValueError(f"Unknown exercise '{exercise_id}'. Valid IDs: {valid}")
        return self._by_id[exercise_id]

    def find_by_name(self, name: str) -> ExerciseDefinition | None:
        """Match an English or native display name exactly."""
        for ex in self._exercises:
            if name in (ex.name_en, ex.name_native):
                return ex
        return None

    def with_custom(self, custom: Iterable[ExerciseDefinition]) -> ExerciseCatalog:
        """
        Return a new catalog with user-authored entries merged in.

        An entry whose id already exists replaces the original in place;
        any other entry is appended after the existing ones.
        """
        merged = dict(self._by_id)
        appended: list[str] = []
        for ex in custom:
            if ex.exercise_id not in merged and ex.exercise_id not in appended:
                appended.append(ex.exercise_id)
            merged[ex.exercise_id] = ex
        order = [ex.exercise_id for ex in self._exercises] + appended
        return ExerciseCatalog(merged[i] for i in order)

    def query(
        self,
        pattern: str | None = None,
        muscle: str | None = None,
        equipment: Iterable[str] = (),
        difficulty: str | None = None,
        movement_type: str | None = None,
        limit: int = DEFAULT_QUERY_LIMIT,
    ) -> list[ExerciseDefinition]:
        """
        Find movements matching a blueprint slot.

        Hard filters: equipment (bodyweight always passes), muscle (primary
        or secondary), movement type and pattern.  Difficulty is a soft
        preference: exact matches are used when there are any, otherwise
        every hard-filter match is kept.

        Args:
            pattern: Required movement pattern, or None for any
            muscle: Required primary/secondary muscle, or None for any
            equipment: Equipment the athlete has access to
            difficulty: Preferred difficulty, or None for no preference
            movement_type: Compound / Isolation / Cardio, or None for any
            limit: Maximum number of results

        Returns:
            First `limit` matches in catalog order (empty if none)
        """
        available = frozenset(equipment)
        candidates = [
            ex for ex in self._exercises
            if ex.is_available_with(available)
            and (muscle is None or ex.trains(muscle))
            and (movement_type is None or ex.movement_type == movement_type)
            and (pattern is None or ex.pattern == pattern)
        ]

        if difficulty is not None:
            exact = [ex for ex in candidates if ex.difficulty == difficulty]
            if exact:
                candidates = exact

        return candidates[:max(limit, 0)]
