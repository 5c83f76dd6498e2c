"""
Default exercise catalog.

The bundled catalog (plus any user additions in
``~/.split-scheduler/exercises/``) is loaded from YAML the first time it is
requested.  If nothing can be loaded a RuntimeError is raised: the
generator cannot work without exercise definitions.

Engine functions take the catalog as a parameter; get_default_catalog() is
only the fallback used when the caller does not pass one.
"""

from functools import lru_cache

from .base import ExerciseDefinition
from .catalog import ExerciseCatalog


@lru_cache(maxsize=1)
def get_default_catalog() -> ExerciseCatalog:
    """Return the bundled catalog merged with user additions (loaded once)."""
    from .loader import load_exercises_from_yaml

    loaded = load_exercises_from_yaml()
    if not loaded:
        raise RuntimeError(
            "split-scheduler: no exercise definitions could be loaded from YAML. "
            "Check that src/split_scheduler/exercises/catalog.yaml is present and valid."
        )
    return ExerciseCatalog(loaded)


def get_exercise(exercise_id: str) -> ExerciseDefinition:
    """
    Return the ExerciseDefinition for the given exercise_id from the default catalog.

    Raises:
        ValueError: If exercise_id is not in the catalog
    """
    return get_default_catalog().get(exercise_id)
