"""
Readiness adaptation: deload a generated program when readiness is low.

A single threshold, single tier deload.  Below the threshold every
session is lightened (title suffix, main lifts forced to 2 x 10, only the
first accessory kept); at or above it the program is returned unchanged.
Graded thresholds can be added here without changing the contract.
"""

from dataclasses import replace
from datetime import datetime

from .config import (
    DELOAD_ACCESSORIES_KEPT,
    DELOAD_MAIN_REPS,
    DELOAD_MAIN_SETS,
    DELOAD_READINESS_THRESHOLD,
    DELOAD_TITLE_SUFFIX,
)
from .models import AdaptationEntry, SmartProgram, SmartSession


def needs_deload(readiness_score: float) -> bool:
    """True if readiness is below the deload threshold."""
    return readiness_score < DELOAD_READINESS_THRESHOLD


def deload_session(session: SmartSession) -> SmartSession:
    """Return a lighter copy of one session."""
    return replace(
        session,
        title=f"{session.title}{DELOAD_TITLE_SUFFIX}",
        main_lifts=[
            replace(ex, sets=DELOAD_MAIN_SETS, reps=DELOAD_MAIN_REPS)
            for ex in session.main_lifts
        ],
        accessories=list(session.accessories[:DELOAD_ACCESSORIES_KEPT]),
        warmup=list(session.warmup),
        cooldown=list(session.cooldown),
        tags=list(session.tags),
    )


def adapt_program(
    program: SmartProgram,
    readiness_score: float,
    now: datetime | None = None,
) -> SmartProgram:
    """
    Apply readiness-based adaptation to a program.

    Args:
        program: Program to adapt (never modified)
        readiness_score: 0–100 readiness; below 40 triggers a deload
        now: Time recorded in the adaptation log (default: current time)

    Returns:
        The same program object when no deload is needed, otherwise a new
        program with deloaded sessions and one more adaptation log entry
    """
    if not needs_deload(readiness_score):
        return program

    if now is None:
        now = datetime.now()

    entry = AdaptationEntry(
        applied_at=now.isoformat(timespec="seconds"),
        readiness_score=readiness_score,
        action="deload",
        description=(
            f"Readiness {readiness_score:g} < {DELOAD_READINESS_THRESHOLD:g}: "
            f"main lifts {DELOAD_MAIN_SETS}x{DELOAD_MAIN_REPS}, "
            f"accessories capped at {DELOAD_ACCESSORIES_KEPT}"
        ),
    )

    return replace(
        program,
        sessions=[deload_session(s) for s in program.sessions],
        adaptation_log=[*program.adaptation_log, entry],
    )
