"""
YAML → ExerciseDefinition loader.

Loads the bundled catalog from ``src/split_scheduler/exercises/catalog.yaml``.
The file holds a single ``exercises:`` list; list order is catalog order.

User additions: any ``*.yaml`` file in ``~/.split-scheduler/exercises/``.
Each file holds either one exercise mapping or an ``exercises:`` list.
An entry whose exercise_id matches a bundled exercise is deep-merged over
it, so only changed keys need to be listed.  Other entries are new custom
exercises and are appended after the bundled ones.

Usage (internal, called by registry.py):
    from .loader import load_exercises_from_yaml
    exercises = load_exercises_from_yaml()   # list, possibly empty
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from .base import ExerciseDefinition, Prescription

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {
        "exercise_id",
        "name_en",
        "muscle",
        "equipment",
        "difficulty",
        "movement_type",
        "pattern",
    }
)

_REQUIRED_DEFAULT_FIELDS: frozenset[str] = frozenset({"sets", "reps", "rest_seconds"})

BUNDLED_CATALOG_FILE = "catalog.yaml"


def _prescription_from_dict(d: dict) -> Prescription:
    """Convert a raw defaults dict to a Prescription, raising ValueError on missing fields."""
    missing = _REQUIRED_DEFAULT_FIELDS - set(d)
    if missing:
        raise ValueError(f"defaults missing fields: {sorted(missing)}")
    return Prescription(
        sets=int(d["sets"]),
        reps=str(d["reps"]),
        rest_seconds=int(d["rest_seconds"]),
    )


def exercise_from_dict(d: dict, is_custom: bool = False) -> ExerciseDefinition:
    """Convert a raw dict (from YAML) to an ExerciseDefinition.

    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"ExerciseDefinition missing fields: {sorted(missing)}")

    raw_defaults = d.get("defaults")
    defaults = _prescription_from_dict(raw_defaults) if raw_defaults else None

    return ExerciseDefinition(
        exercise_id=str(d["exercise_id"]),
        name_en=str(d["name_en"]),
        name_native=str(d.get("name_native") or d["name_en"]),
        muscle=str(d["muscle"]),
        equipment=str(d["equipment"]),
        difficulty=str(d["difficulty"]),
        movement_type=str(d["movement_type"]),
        pattern=str(d["pattern"]),
        description=str(d.get("description", "")),
        secondary_muscles=frozenset(str(m) for m in d.get("secondary_muscles") or ()),
        defaults=defaults,
        is_custom=bool(d.get("is_custom", is_custom)),
    )


def _load_yaml_file(path: Path) -> Any:
    """Load a YAML file; warn and return None if it cannot be read or parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"split-scheduler: cannot read {path}: {exc}", stacklevel=3)
        return None


def _entries(data: Any) -> list[dict]:
    """Normalise file content to a list of raw exercise dicts."""
    if isinstance(data, dict) and isinstance(data.get("exercises"), list):
        return [e for e in data["exercises"] if isinstance(e, dict)]
    if isinstance(data, dict) and "exercise_id" in data:
        return [data]
    if isinstance(data, list):
        return [e for e in data if isinstance(e, dict)]
    return []


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_exercises_dir() -> Path | None:
    """Return path to the bundled exercises/ data directory, or None if not found."""
    # loader.py lives at src/split_scheduler/core/exercises/loader.py
    # three levels up → src/split_scheduler/
    candidate = Path(__file__).parent.parent.parent / "exercises"
    return candidate if candidate.is_dir() else None


def get_user_exercises_dir() -> Path | None:
    """Return ~/.split-scheduler/exercises/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".split-scheduler" / "exercises"
    return p if p.is_dir() else None


def load_exercises_from_yaml(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> list[ExerciseDefinition]:
    """Return exercise definitions in catalog order.

    Bundled entries come first, in file order, with any matching user
    override deep-merged over them.  User-only entries follow, ordered by
    file name and then position within the file.  Invalid entries are
    skipped with a warning.

    Args:
        bundled_dir: Directory holding catalog.yaml (default: package data)
        user_dir: Directory with user *.yaml files (default: ~/.split-scheduler/exercises)
    """
    if bundled_dir is None:
        bundled_dir = get_bundled_exercises_dir()
    if user_dir is None:
        user_dir = get_user_exercises_dir()

    raw_bundled: list[dict] = []
    if bundled_dir is not None:
        catalog_path = bundled_dir / BUNDLED_CATALOG_FILE
        if catalog_path.exists():
            raw_bundled = _entries(_load_yaml_file(catalog_path))

    overrides: dict[str, dict] = {}
    user_only: list[dict] = []
    bundled_ids = {str(e.get("exercise_id")) for e in raw_bundled}
    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            for entry in _entries(_load_yaml_file(p)):
                ex_id = str(entry.get("exercise_id", ""))
                if ex_id in bundled_ids:
                    overrides[ex_id] = _deep_merge(overrides.get(ex_id, {}), entry)
                else:
                    user_only.append(entry)

    result: list[ExerciseDefinition] = []
    seen: set[str] = set()

    for raw in raw_bundled:
        ex_id = str(raw.get("exercise_id"))
        if ex_id in overrides:
            raw = _deep_merge(raw, overrides[ex_id])
        try:
            ex = exercise_from_dict(raw)
        except (ValueError, TypeError) as exc:
            warnings.warn(f"split-scheduler: skipping exercise '{ex_id}': {exc}", stacklevel=2)
            continue
        result.append(ex)
        seen.add(ex.exercise_id)

    for raw in user_only:
        try:
            ex = exercise_from_dict(raw, is_custom=True)
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"split-scheduler: skipping user exercise '{raw.get('exercise_id')}': {exc}",
                stacklevel=2,
            )
            continue
        if ex.exercise_id in seen:
            warnings.warn(
                f"split-scheduler: duplicate user exercise '{ex.exercise_id}' ignored",
                stacklevel=2,
            )
            continue
        result.append(ex)
        seen.add(ex.exercise_id)

    return result
