"""
Nutrition logging totals and nutrition analytics.

The nutrition path mirrors the training analytics: per-day adherence
(consumed vs target calories, capped at 100), a heatmap, a best streak,
averages and a macro distribution, plus a few threshold insights.
"""

import uuid
from dataclasses import replace
from datetime import date
from typing import Sequence

from .analytics import timeframe_start
from .config import (
    DEFAULT_TARGET_CALORIES,
    NUTRITION_ADHERENCE_HIGH,
    NUTRITION_ADHERENCE_LOW,
    NUTRITION_PARTIAL_ADHERENCE,
    NUTRITION_STREAK_ADHERENCE,
    PROTEIN_LOW_GRAMS,
)
from .metrics import round_half_up
from .models import (
    HeatmapStatus,
    MacroShare,
    Macros,
    MealLog,
    NutritionAnalyticsSummary,
    NutritionDayLog,
    NutritionHeatmapPoint,
    NutritionReport,
    NutritionStatus,
    NutritionTrendPoint,
    TrainingInsight,
)


def update_nutrition_totals(log: NutritionDayLog) -> NutritionDayLog:
    """
    Recompute consumed totals and status from the meals.

    Only completed meals count.  A completed meal contributes its actual
    macros, or its planned macros when no actual calories were recorded.
    Status: every meal completed → Completed, some → Partial, none (or no
    meals at all) → Missed.
    """
    consumed = Macros()
    completed = 0
    for meal in log.meals:
        if meal.status != "Completed":
            continue
        consumed = consumed + (meal.actual_macros if meal.actual_macros.calories > 0 else meal.planned_macros)
        completed += 1

    status: NutritionStatus
    if log.meals and completed == len(log.meals):
        status = "Completed"
    elif completed > 0:
        status = "Partial"
    else:
        status = "Missed"

    return replace(log, meals=list(log.meals), status=status, total_consumed_macros=consumed)


def create_nutrition_day(
    user_id: str, log_date: str, target: Macros | None = None
) -> NutritionDayLog:
    """Start an empty nutrition day (status Missed until a meal is completed)."""
    return NutritionDayLog(
        log_id=f"nlog_{uuid.uuid4().hex[:12]}",
        user_id=user_id,
        date=log_date,
        status="Missed",
        total_target_macros=target or Macros(calories=DEFAULT_TARGET_CALORIES),
    )


def add_meal(log: NutritionDayLog, meal: MealLog) -> NutritionDayLog:
    """Return a copy with one more meal and recomputed totals."""
    return update_nutrition_totals(replace(log, meals=[*log.meals, meal]))


def target_calories(log: NutritionDayLog) -> float:
    """Calorie target of a day, falling back to the default when unset."""
    return log.total_target_macros.calories or DEFAULT_TARGET_CALORIES


def nutrition_adherence(log: NutritionDayLog) -> int:
    """Consumed / target calories as a percentage, capped at 100."""
    return min(100, round_half_up(log.total_consumed_macros.calories / target_calories(log) * 100))


def _heatmap_status(log: NutritionDayLog, adherence: int) -> HeatmapStatus:
    if log.status == "Completed":
        return "completed"
    if adherence > NUTRITION_PARTIAL_ADHERENCE:
        return "partial"
    return "missed"


def nutrition_streak(logs: Sequence[NutritionDayLog]) -> int:
    """Longest run of days with adherence above 80 or status Completed."""
    max_streak = 0
    current = 0
    for log in logs:
        if nutrition_adherence(log) > NUTRITION_STREAK_ADHERENCE or log.status == "Completed":
            current += 1
        else:
            max_streak = max(max_streak, current)
            current = 0
    return max(max_streak, current)


def _mean(values: list[float]) -> int:
    return round_half_up(sum(values) / len(values)) if values else 0


def generate_nutrition_report(
    logs: Sequence[NutritionDayLog],
    timeframe: str = "month",
    today: date | None = None,
) -> NutritionReport:
    """
    Build the nutrition analytics report for one timeframe.

    Args:
        logs: Nutrition day logs of one user, any order
        timeframe: "week", "month" or "year"
        today: Reference date (default: today)

    Returns:
        NutritionReport; all zero/empty when there are no logs in range,
        including insights (no Adherence or Protein notes for an empty range)

    Raises:
        ValueError: If the timeframe is unknown
    """
    if today is None:
        today = date.today()
    start = timeframe_start(today, timeframe)
    filtered = sorted(
        (log for log in logs if date.fromisoformat(log.date) >= start),
        key=lambda log: log.date,
    )

    timeline: list[NutritionTrendPoint] = []
    heatmap: list[NutritionHeatmapPoint] = []
    for log in filtered:
        consumed = log.total_consumed_macros
        adherence = nutrition_adherence(log)
        timeline.append(NutritionTrendPoint(
            date=log.date,
            label="/".join(log.date.split("-")[1:]),
            calories=consumed.calories,
            target_calories=target_calories(log),
            protein=consumed.protein,
            carbs=consumed.carbs,
            fats=consumed.fats,
            adherence=adherence,
        ))
        heatmap.append(NutritionHeatmapPoint(
            date=log.date,
            adherence=adherence,
            status=_heatmap_status(log, adherence),
        ))

    summary = NutritionAnalyticsSummary(
        avg_adherence=_mean([p.adherence for p in timeline]),
        avg_calories=_mean([p.calories for p in timeline]),
        calorie_deviation=_mean([p.calories - p.target_calories for p in timeline]),
        avg_protein=_mean([p.protein for p in timeline]),
        best_streak=nutrition_streak(filtered),
    )

    macro_distribution = [
        MacroShare("Protein", sum(p.protein for p in timeline)),
        MacroShare("Carbs", sum(p.carbs for p in timeline)),
        MacroShare("Fats", sum(p.fats for p in timeline)),
    ]

    insights: list[TrainingInsight] = []
    if filtered:
        if summary.avg_adherence > NUTRITION_ADHERENCE_HIGH:
            insights.append(TrainingInsight(
                "positive", "Adherence", "Your diet adherence is excellent."
            ))
        elif summary.avg_adherence < NUTRITION_ADHERENCE_LOW:
            insights.append(TrainingInsight(
                "negative", "Adherence", "Your calorie intake fluctuates a lot."
            ))
        if summary.avg_protein < PROTEIN_LOW_GRAMS:
            insights.append(TrainingInsight(
                "neutral", "Protein", "Protein intake could be higher."
            ))

    return NutritionReport(
        timeline=timeline,
        heatmap=heatmap,
        summary=summary,
        macro_distribution=macro_distribution,
        insights=insights,
    )
