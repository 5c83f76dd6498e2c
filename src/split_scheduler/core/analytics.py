"""
Training analytics engine.

Aggregates training logs over a timeframe into a volume / intensity /
adherence timeline, a per-muscle set distribution, summary KPIs and a
short list of structured insights.  Logs are the authoritative data;
everything returned here is a derived view, recomputed on every call.
"""

import calendar
from datetime import date, timedelta
from typing import Sequence

from .config import (
    CONSISTENCY_HIGH,
    CONSISTENCY_LOW,
    TIMEFRAMES,
    TREND_DOWN_RATIO,
    TREND_UP_RATIO,
    WEEK_DAYS,
)
from .exercises.catalog import ExerciseCatalog
from .exercises.registry import get_default_catalog
from .metrics import (
    adherence_score,
    best_streak,
    calculate_log_volume,
    completion_rate,
    log_intensity,
    round_half_up,
)
from .models import (
    AnalyticsReport,
    AnalyticsSummary,
    MuscleSplitStats,
    TrainingInsight,
    TrainingLog,
    VolumeDataPoint,
)

# Name keywords → muscle group, checked in order for exercises not in the catalog
MUSCLE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("bench", "press", "fly"), "Chest"),
    (("row", "pull", "deadlift"), "Back"),
    (("squat", "leg", "lunge"), "Legs"),
    (("curl",), "Biceps"),
    (("extension", "pushdown"), "Triceps"),
    (("raise", "shoulder"), "Shoulders"),
)
UNKNOWN_MUSCLE = "Other"


def _months_back(day: date, months: int) -> date:
    """Same day-of-month `months` earlier, clamped to the month's last day."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def timeframe_start(today: date, timeframe: str) -> date:
    """
    First date included in a timeframe ending today.

    Args:
        today: Reference date
        timeframe: "week" (7 days back), "month" or "year" (calendar back)

    Raises:
        ValueError: If the timeframe is unknown
    """
    if timeframe == "week":
        return today - timedelta(days=WEEK_DAYS)
    if timeframe == "month":
        return _months_back(today, 1)
    if timeframe == "year":
        return _months_back(today, 12)
    raise ValueError(f"Unknown timeframe '{timeframe}'. Valid: {', '.join(TIMEFRAMES)}")


def filter_logs_by_timeframe(
    logs: Sequence[TrainingLog], start: date
) -> list[TrainingLog]:
    """Logs dated on/after start, sorted chronologically."""
    kept = [log for log in logs if date.fromisoformat(log.date) >= start]
    return sorted(kept, key=lambda log: log.date)


def resolve_muscle_group(
    catalog: ExerciseCatalog, exercise_id: str, name: str
) -> str:
    """
    Muscle group a logged exercise counts toward.

    Catalog id first, then catalog name (English or native), then a
    keyword heuristic on the name, otherwise "Other".
    """
    if exercise_id in catalog:
        return catalog.get(exercise_id).muscle
    match = catalog.find_by_name(name)
    if match is not None:
        return match.muscle

    lower = name.lower()
    for keywords, muscle in MUSCLE_KEYWORDS:
        if any(k in lower for k in keywords):
            return muscle
    return UNKNOWN_MUSCLE


def _daily_label(iso_date: str) -> str:
    """YYYY-MM-DD → MM/DD."""
    return "/".join(iso_date.split("-")[1:])


def _daily_timeline(logs: list[TrainingLog]) -> list[VolumeDataPoint]:
    return [
        VolumeDataPoint(
            date=log.date,
            label=_daily_label(log.date),
            volume=calculate_log_volume(log),
            intensity=log_intensity(log),
            adherence=adherence_score(log),
        )
        for log in logs
    ]


def _monthly_timeline(logs: list[TrainingLog]) -> list[VolumeDataPoint]:
    groups: dict[str, list[TrainingLog]] = {}
    for log in logs:
        groups.setdefault(log.date[:7], []).append(log)

    points = []
    for month in sorted(groups):
        group = groups[month]
        points.append(VolumeDataPoint(
            date=month,
            label=month,
            volume=sum(calculate_log_volume(log) for log in group),
            intensity=sum(log_intensity(log) for log in group) / len(group),
            adherence=round_half_up(sum(adherence_score(log) for log in group) / len(group)),
        ))
    return points


def muscle_split(
    logs: Sequence[TrainingLog], catalog: ExerciseCatalog
) -> list[MuscleSplitStats]:
    """
    Completed set count per muscle group, largest first.

    The sort is stable, so ties keep first-seen order.
    """
    totals: dict[str, int] = {}
    for log in logs:
        for ex in log.exercises:
            muscle = resolve_muscle_group(catalog, ex.exercise_id, ex.name)
            totals[muscle] = totals.get(muscle, 0) + sum(1 for s in ex.sets if s.completed)

    stats = [MuscleSplitStats(muscle=m, set_volume=v) for m, v in totals.items()]
    stats.sort(key=lambda s: s.set_volume, reverse=True)
    return stats


def _mean_volume(points: Sequence[VolumeDataPoint]) -> float:
    return sum(p.volume for p in points) / (len(points) or 1)


def generate_insights(
    timeline: Sequence[VolumeDataPoint],
    muscle_stats: Sequence[MuscleSplitStats],
    completion: int,
) -> list[TrainingInsight]:
    """
    Classify the report into at most three tagged observations.

    - Volume: second-half mean volume vs first half (needs 2+ points);
      above 110% → positive, below 80% → negative.
    - Consistency: completion rate above 90 → positive, below 60 → negative.
    - Focus: neutral note on the muscle group with the most completed sets.

    Args:
        timeline: Chronological timeline points
        muscle_stats: Muscle totals sorted largest first
        completion: Completion rate percent

    Returns:
        Insights in the order volume, consistency, focus
    """
    insights: list[TrainingInsight] = []

    if len(timeline) >= 2:
        mid = len(timeline) // 2
        first = _mean_volume(timeline[:mid])
        second = _mean_volume(timeline[mid:])
        if second > first * TREND_UP_RATIO:
            insights.append(TrainingInsight(
                "positive", "Volume", "Training volume is trending up (10%+ growth)."
            ))
        elif second < first * TREND_DOWN_RATIO:
            insights.append(TrainingInsight(
                "negative", "Volume", "Training volume is declining."
            ))

    if completion > CONSISTENCY_HIGH:
        insights.append(TrainingInsight(
            "positive", "Consistency", "Excellent consistency: almost no sessions missed."
        ))
    elif completion < CONSISTENCY_LOW:
        insights.append(TrainingInsight(
            "negative", "Consistency", "Consistency is low. Try fixing your training days."
        ))

    if muscle_stats:
        top = muscle_stats[0]
        insights.append(TrainingInsight(
            "neutral", "Focus", f"Most of your training volume went to {top.muscle}."
        ))

    return insights


def generate_analytics_report(
    logs: Sequence[TrainingLog],
    timeframe: str = "month",
    today: date | None = None,
    catalog: ExerciseCatalog | None = None,
) -> AnalyticsReport:
    """
    Build the training analytics report for one timeframe.

    Week/month timelines have one point per log; the year timeline has one
    point per calendar month.  Never fails on empty input: with no logs in
    range every total is 0 and there are no insights, not even a zero-rate
    Consistency warning.

    Args:
        logs: Training logs of one user, any order
        timeframe: "week", "month" or "year"
        today: Reference date (default: today)
        catalog: Catalog for muscle lookup (default: bundled catalog)

    Returns:
        AnalyticsReport

    Raises:
        ValueError: If the timeframe is unknown
    """
    if today is None:
        today = date.today()
    if catalog is None:
        catalog = get_default_catalog()

    filtered = filter_logs_by_timeframe(logs, timeframe_start(today, timeframe))

    if timeframe == "year":
        timeline = _monthly_timeline(filtered)
    else:
        timeline = _daily_timeline(filtered)

    muscle_stats = muscle_split(filtered, catalog)
    rate = completion_rate(filtered)

    summary = AnalyticsSummary(
        total_workouts=len(filtered),
        completion_rate=rate,
        total_volume=sum(calculate_log_volume(log) for log in filtered),
        missed_workouts=sum(1 for log in filtered if log.status == "Skipped"),
        best_streak=best_streak(filtered),
    )

    insights = generate_insights(timeline, muscle_stats, rate) if filtered else []

    return AnalyticsReport(
        timeline=timeline,
        muscle_stats=muscle_stats,
        summary=summary,
        insights=insights,
    )
