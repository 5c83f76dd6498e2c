"""
ASCII charts for analytics reports.

Creates terminal-friendly bar charts of the volume timeline, the muscle
split and the nutrition heatmap.
"""

from typing import Sequence

from .models import (
    MuscleSplitStats,
    NutritionHeatmapPoint,
    NutritionTrendPoint,
    VolumeDataPoint,
)

HEATMAP_SYMBOLS: dict[str, str] = {
    "completed": "█",
    "partial": "▒",
    "missed": "·",
}


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * bar_len
        lines.append(f"{label:>{max_label_len}} │{bar} {value:.1f}")

    return "\n".join(lines)


def create_volume_chart(timeline: Sequence[VolumeDataPoint], width: int = 40) -> str:
    """
    Bar chart of training volume per timeline point.

    Args:
        timeline: Chronological points from the analytics report
        width: Maximum bar width

    Returns:
        ASCII chart string
    """
    if not timeline:
        return "No training logs in this timeframe."
    return create_simple_bar_chart(
        [p.label for p in timeline],
        [p.volume for p in timeline],
        width=width,
        title="Training Volume (load × reps)",
    )


def create_muscle_split_chart(stats: Sequence[MuscleSplitStats], width: int = 40) -> str:
    """Bar chart of completed sets per muscle group, largest first."""
    if not stats:
        return "No completed sets in this timeframe."
    return create_simple_bar_chart(
        [s.muscle for s in stats],
        [float(s.set_volume) for s in stats],
        width=width,
        title="Completed Sets per Muscle Group",
    )


def create_calorie_chart(timeline: Sequence[NutritionTrendPoint], width: int = 40) -> str:
    """Bar chart of consumed calories per day, with the day's target appended."""
    if not timeline:
        return "No nutrition logs in this timeframe."
    chart = create_simple_bar_chart(
        [p.label for p in timeline],
        [p.calories for p in timeline],
        width=width,
        title="Calories Consumed",
    )
    lines = chart.split("\n")
    # Header takes two lines
    for i, point in enumerate(timeline, 2):
        lines[i] += f" / {point.target_calories:.0f}"
    return "\n".join(lines)


def create_adherence_heatmap(heatmap: Sequence[NutritionHeatmapPoint], per_row: int = 7) -> str:
    """
    One symbol per day: █ completed, ▒ partial, · missed.

    Args:
        heatmap: Chronological heatmap points
        per_row: Days per output row

    Returns:
        ASCII heatmap string with a legend line
    """
    if not heatmap:
        return "No nutrition logs in this timeframe."

    lines = []
    for start in range(0, len(heatmap), per_row):
        row = heatmap[start:start + per_row]
        symbols = " ".join(HEATMAP_SYMBOLS[p.status] for p in row)
        lines.append(f"{row[0].date} {symbols}")
    lines.append("█ completed   ▒ partial   · missed")
    return "\n".join(lines)
