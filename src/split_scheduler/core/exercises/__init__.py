"""
Exercise catalog for split-scheduler.

Each movement is an ExerciseDefinition; ExerciseCatalog holds an ordered
set of them and answers slot queries for the schedule generator.
"""

from .base import ExerciseDefinition, Prescription
from .catalog import ExerciseCatalog
from .registry import get_default_catalog, get_exercise

__all__ = [
    "ExerciseDefinition",
    "Prescription",
    "ExerciseCatalog",
    "get_default_catalog",
    "get_exercise",
]
