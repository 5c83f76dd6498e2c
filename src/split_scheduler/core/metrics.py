"""
Pure metric computation functions over training logs.

All functions are pure and typed for testability.
"""

import math
from typing import Sequence

from .config import ADHERENCE_SCORES, BODYWEIGHT_VOLUME_LOAD, RPE_INTENSITY_SCALE, STREAK_STATUSES
from .models import TrainingLog


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (2.5 → 3)."""
    return int(math.floor(value + 0.5))


def calculate_log_volume(log: TrainingLog) -> float:
    """
    Training volume of one log.

    volume = Σ load × performed_reps over completed sets, where load is the
    performed weight, or 1 for sets logged without weight (bodyweight work
    then counts as reps volume).

    Sets of an exercise not marked completed are skipped, unless the whole
    log is "Completed"; then every completed set counts even if the
    exercise flag lags behind.

    Args:
        log: Training log

    Returns:
        Non-negative volume (0 when nothing is completed)
    """
    total = 0.0
    for ex in log.exercises:
        if not ex.completed and log.status != "Completed":
            continue
        for s in ex.sets:
            if not s.completed:
                continue
            weight = s.performed_weight if s.performed_weight and s.performed_weight > 0 else BODYWEIGHT_VOLUME_LOAD
            reps = s.performed_reps or 0
            total += weight * reps
    return total


def adherence_score(log: TrainingLog) -> int:
    """
    Fixed adherence lookup by status.

    Completed 100, Partial 60, Skipped 0, Rest 100, Planned 0.  Independent
    of how many sets were actually done.
    """
    return ADHERENCE_SCORES.get(log.status, 0)


def log_intensity(log: TrainingLog) -> int:
    """
    Mean RPE of completed sets that have one, scaled ×10 and rounded.

    Returns:
        0–100 intensity, 0 if no RPE was recorded
    """
    rpes = [
        s.rpe
        for ex in log.exercises
        for s in ex.sets
        if s.completed and s.rpe
    ]
    if not rpes:
        return 0
    return round_half_up(sum(rpes) / len(rpes) * RPE_INTENSITY_SCALE)


def best_streak(logs: Sequence[TrainingLog]) -> int:
    """
    Longest run of consecutive Completed/Rest logs.

    Args:
        logs: Logs sorted chronologically

    Returns:
        Length of the longest run, including a trailing unbroken run
    """
    max_streak = 0
    current = 0
    for log in logs:
        if log.status in STREAK_STATUSES:
            current += 1
        else:
            max_streak = max(max_streak, current)
            current = 0
    return max(max_streak, current)


def completion_rate(logs: Sequence[TrainingLog]) -> int:
    """
    Percentage of non-rest logs that are Completed.

    Returns:
        0–100, 0 when there are no non-rest logs
    """
    completed = sum(1 for log in logs if log.status == "Completed")
    non_rest = sum(1 for log in logs if log.status != "Rest")
    return round_half_up(completed / (non_rest or 1) * 100)
