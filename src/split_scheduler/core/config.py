"""
Configuration constants for the scheduling and analytics engines.

All adjustable parameters are centralized here for easy tuning.
"""

from typing import Final

# =============================================================================
# SPLIT RESOLUTION
# =============================================================================

FULL_BODY_MAX_DAYS: Final[int] = 3  # 1–3 days → Full-Body
UPPER_LOWER_DAYS: Final[int] = 4  # exactly 4 days → Upper/Lower; 5+ → PPL
MAX_DAYS_PER_WEEK: Final[int] = 7

# =============================================================================
# PRESCRIPTIONS (sets, reps, rest seconds)
# =============================================================================

COMPOUND_SETS: Final[int] = 4
COMPOUND_REPS: Final[str] = "6-8"
COMPOUND_REST_SECONDS: Final[int] = 120

ISOLATION_SETS: Final[int] = 3
ISOLATION_REPS: Final[str] = "10-12"
ISOLATION_REST_SECONDS: Final[int] = 60

# =============================================================================
# SESSION DEFAULTS
# =============================================================================

DEFAULT_SESSION_FOCUS: Final[str] = "Strength & Hypertrophy"
DEFAULT_SESSION_INTENSITY: Final[str] = "High"
DEFAULT_SESSION_MINUTES: Final[int] = 60
FALLBACK_REASON: Final[str] = "Equipment limitations"

# Fixed warm-up / cool-down blocks: (id, name, sets, reps, muscle)
WARMUP_BLOCK: Final[tuple[tuple[str, str, int, str, str], ...]] = (
    ("w1", "Jumping Jacks", 2, "50", "Cardio"),
    ("w2", "Dynamic Stretch", 1, "2 min", "Full Body"),
)
COOLDOWN_BLOCK: Final[tuple[tuple[str, str, int, str, str], ...]] = (
    ("c1", "Static Stretch", 1, "5 min", "Full Body"),
)

# =============================================================================
# READINESS DELOAD
# =============================================================================

DELOAD_READINESS_THRESHOLD: Final[float] = 40  # readiness below this → deload
DELOAD_MAIN_SETS: Final[int] = 2
DELOAD_MAIN_REPS: Final[str] = "10"
DELOAD_ACCESSORIES_KEPT: Final[int] = 1
DELOAD_TITLE_SUFFIX: Final[str] = " (Light)"

# =============================================================================
# ADHERENCE / INTENSITY
# =============================================================================

ADHERENCE_SCORES: Final[dict[str, int]] = {
    "Completed": 100,
    "Partial": 60,
    "Skipped": 0,
    "Rest": 100,  # a respected rest day counts as adhered
    "Planned": 0,
}
STREAK_STATUSES: Final[frozenset[str]] = frozenset({"Completed", "Rest"})
RPE_INTENSITY_SCALE: Final[int] = 10  # avg RPE 8 → intensity 80
BODYWEIGHT_VOLUME_LOAD: Final[float] = 1.0  # load unit for sets logged without weight

# =============================================================================
# INSIGHTS
# =============================================================================

TREND_UP_RATIO: Final[float] = 1.10  # second-half volume > 110% of first half
TREND_DOWN_RATIO: Final[float] = 0.80  # second-half volume < 80% of first half
CONSISTENCY_HIGH: Final[int] = 90  # completion rate above → positive
CONSISTENCY_LOW: Final[int] = 60  # completion rate below → negative

# =============================================================================
# TIMEFRAMES
# =============================================================================

TIMEFRAMES: Final[tuple[str, ...]] = ("week", "month", "year")
WEEK_DAYS: Final[int] = 7

# =============================================================================
# NUTRITION
# =============================================================================

DEFAULT_TARGET_CALORIES: Final[float] = 2500
NUTRITION_STREAK_ADHERENCE: Final[int] = 80  # adherence above keeps the streak
NUTRITION_PARTIAL_ADHERENCE: Final[int] = 50  # heatmap: above → partial, else missed
NUTRITION_ADHERENCE_HIGH: Final[int] = 90
NUTRITION_ADHERENCE_LOW: Final[int] = 60
PROTEIN_LOW_GRAMS: Final[float] = 120
