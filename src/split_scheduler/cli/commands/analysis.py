"""Analysis commands: report, nutrition-report."""

import json
from datetime import date as date_cls
from typing import Annotated, Optional

import typer

from ...core.analytics import generate_analytics_report
from ...core.config import TIMEFRAMES
from ...core.nutrition import generate_nutrition_report
from ...core.models import validate_iso_date
from ...io.serializers import ValidationError, analytics_report_to_dict, nutrition_report_to_dict
from .. import views
from ..app import DEFAULT_USER_ID, DataDirOption, JsonOption, UserOption, app, get_store

TimeframeOption = Annotated[
    str,
    typer.Option("--timeframe", "-t", help=f"One of {', '.join(TIMEFRAMES)}"),
]
TodayOption = Annotated[
    Optional[str],
    typer.Option("--today", help="Reference date for the timeframe (YYYY-MM-DD)"),
]


def _reference_date(raw: str | None) -> date_cls:
    if raw is None:
        return date_cls.today()
    validate_iso_date(raw)
    return date_cls.fromisoformat(raw)


@app.command("report")
def report(
    timeframe: TimeframeOption = "month",
    today: TodayOption = None,
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
    json_out: JsonOption = False,
) -> None:
    """
    Training analytics: volume timeline, muscle split, KPIs and insights.
    """
    store = get_store(data_dir)
    try:
        logs = store.list_logs(user_id)
        result = generate_analytics_report(logs, timeframe, today=_reference_date(today))
    except (ValueError, RuntimeError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(analytics_report_to_dict(result), indent=2, ensure_ascii=False))
        return

    views.print_analytics_report(result, timeframe)


@app.command("nutrition-report")
def nutrition_report(
    timeframe: TimeframeOption = "month",
    today: TodayOption = None,
    data_dir: DataDirOption = None,
    user_id: UserOption = DEFAULT_USER_ID,
    json_out: JsonOption = False,
) -> None:
    """
    Nutrition analytics: calorie adherence, heatmap, macros and insights.
    """
    store = get_store(data_dir)
    try:
        logs = store.list_nutrition_logs(user_id)
        result = generate_nutrition_report(logs, timeframe, today=_reference_date(today))
    except (ValueError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(nutrition_report_to_dict(result), indent=2, ensure_ascii=False))
        return

    views.print_nutrition_report(result, timeframe)
