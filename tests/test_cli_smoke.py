"""
Minimal smoke tests for split-scheduler CLI.

Tests basic functionality:
- App runs without errors
- Program is generated, shown and adapted
- Training logs can be started, updated, skipped and deleted
- Meals can be logged
- Reports are produced
"""

import json

import pytest
from typer.testing import CliRunner

from split_scheduler.cli.main import app


runner = CliRunner()


@pytest.fixture
def data_dir(tmp_path):
    """Temporary data directory for one test."""
    return tmp_path / "data"


def _invoke(data_dir, *args: str):
    return runner.invoke(app, [*args, "--data-dir", str(data_dir)])


def _generate(data_dir, *extra: str):
    result = _invoke(data_dir, "generate", "--days", "3", *extra)
    assert result.exit_code == 0, result.output
    return result


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "schedule" in result.output.lower()

    def test_catalog_json(self):
        result = runner.invoke(app, ["catalog", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data[0]["exercise_id"] == "bp_bb"
        assert {"muscle", "equipment", "pattern", "difficulty"} <= set(data[0])

    def test_catalog_query(self):
        result = runner.invoke(app, ["catalog", "--pattern", "Squat", "--limit", "2", "--json"])
        assert result.exit_code == 0
        assert [e["exercise_id"] for e in json.loads(result.output)] == ["squat_bb", "front_squat"]

    def test_catalog_table(self):
        result = runner.invoke(app, ["catalog", "--muscle", "Calves"])
        assert result.exit_code == 0

    def test_catalog_no_match(self):
        result = runner.invoke(app, ["catalog", "--pattern", "Squat", "--equipment", "Bands"])
        assert result.exit_code == 0
        assert "No exercise" in result.output


class TestGenerate:

    def test_generate_saves_program(self, data_dir):
        result = _invoke(data_dir, "generate", "--days", "3", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["split"] == "FullBody"
        assert [s["day_of_week"] for s in data["sessions"]] == [0, 2, 4]
        assert (data_dir / "smart_program_local.json").exists()
        assert (data_dir / "programs.jsonl").exists()

    def test_generate_text(self, data_dir):
        result = _generate(data_dir, "--weekdays", "mon,thu", "--equipment", "Barbell,Dumbbell")
        assert "Full Body A" in result.output
        assert "Saved program" in result.output

    def test_four_days_upper_lower(self, data_dir):
        result = _invoke(data_dir, "generate", "--days", "4", "--json")
        assert json.loads(result.output)["split"] == "UpperLower"

    def test_invalid_days(self, data_dir):
        result = _invoke(data_dir, "generate", "--days", "0")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_weekday(self, data_dir):
        result = _invoke(data_dir, "generate", "--weekdays", "funday")
        assert result.exit_code == 1

    def test_invalid_experience(self, data_dir):
        result = _invoke(data_dir, "generate", "--experience", "Elite")
        assert result.exit_code == 1

    def test_show_program(self, data_dir):
        _generate(data_dir)
        result = _invoke(data_dir, "show-program")
        assert result.exit_code == 0
        assert "Full Body B" in result.output

    def test_show_program_without_generate(self, data_dir):
        result = _invoke(data_dir, "show-program")
        assert result.exit_code == 1

    def test_users_are_separate(self, data_dir):
        _generate(data_dir, "--user", "alice")
        assert _invoke(data_dir, "show-program", "--user", "alice").exit_code == 0
        assert _invoke(data_dir, "show-program", "--user", "bob").exit_code == 1


class TestAdapt:

    def test_low_readiness_deloads(self, data_dir):
        _generate(data_dir)
        result = _invoke(data_dir, "adapt", "--readiness", "20", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["deloaded"] is True
        assert all(s["title"].endswith("(Light)") for s in data["program"]["sessions"])

        shown = json.loads(_invoke(data_dir, "show-program", "--json").output)
        assert len(shown["adaptation_log"]) == 1

    def test_high_readiness_no_change(self, data_dir):
        _generate(data_dir)
        result = _invoke(data_dir, "adapt", "--readiness", "75", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["deloaded"] is False

    def test_out_of_range(self, data_dir):
        _generate(data_dir)
        assert _invoke(data_dir, "adapt", "--readiness", "150").exit_code == 1


class TestTrainingLogs:

    def test_start_log_uses_weekday(self, data_dir):
        _generate(data_dir)
        # 2025-03-12 is a Wednesday → second session of the week
        result = _invoke(data_dir, "start-log", "--date", "2025-03-12", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["workout_title"] == "Full Body B"
        assert data["status"] == "Planned"

    def test_start_log_on_rest_weekday(self, data_dir):
        _generate(data_dir)
        result = _invoke(data_dir, "start-log", "--date", "2025-03-11", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert (data["status"], data["exercises"]) == ("Rest", [])

    def test_start_log_explicit_day(self, data_dir):
        _generate(data_dir)
        result = _invoke(data_dir, "start-log", "--date", "2025-03-11", "--day", "fri", "--json")
        assert json.loads(result.output)["workout_title"] == "Full Body A"

    def test_start_log_unknown_day(self, data_dir):
        _generate(data_dir)
        result = _invoke(data_dir, "start-log", "--date", "2025-03-11", "--day", "sun")
        assert result.exit_code == 1

    def test_start_log_twice_fails(self, data_dir):
        _generate(data_dir)
        assert _invoke(data_dir, "start-log", "--date", "2025-03-10").exit_code == 0
        assert _invoke(data_dir, "start-log", "--date", "2025-03-10").exit_code == 1

    def test_start_log_without_program(self, data_dir):
        result = _invoke(data_dir, "start-log", "--date", "2025-03-10")
        assert result.exit_code == 1
        assert "generate" in result.output

    def test_bad_date(self, data_dir):
        _generate(data_dir)
        assert _invoke(data_dir, "start-log", "--date", "2025-13-01").exit_code == 1

    def test_log_set_updates_status(self, data_dir):
        _generate(data_dir)
        _invoke(data_dir, "start-log", "--date", "2025-03-10")

        result = _invoke(data_dir, "log-set", "1", "1", "--reps", "10", "--rpe", "8",
                         "--date", "2025-03-10", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "Partial"
        first = data["exercises"][0]["sets"][0]
        assert (first["performed_reps"], first["rpe"], first["completed"]) == (10, 8.0, True)

        undone = _invoke(data_dir, "log-set", "1", "1", "--undo", "--date", "2025-03-10", "--json")
        assert json.loads(undone.output)["status"] == "Planned"

    def test_log_set_out_of_range(self, data_dir):
        _generate(data_dir)
        _invoke(data_dir, "start-log", "--date", "2025-03-10")
        assert _invoke(data_dir, "log-set", "9", "1", "--date", "2025-03-10").exit_code == 1
        assert _invoke(data_dir, "log-set", "1", "9", "--date", "2025-03-10").exit_code == 1

    def test_log_set_without_log(self, data_dir):
        _generate(data_dir)
        assert _invoke(data_dir, "log-set", "1", "1", "--date", "2025-03-10").exit_code == 1

    def test_skip_creates_log(self, data_dir):
        _generate(data_dir)
        result = _invoke(data_dir, "skip", "--date", "2025-03-14")
        assert result.exit_code == 0
        logs = json.loads(_invoke(data_dir, "show-logs", "--json").output)
        assert [(l["date"], l["status"]) for l in logs] == [("2025-03-14", "Skipped")]

    def test_show_logs(self, data_dir):
        _generate(data_dir)
        assert json.loads(_invoke(data_dir, "show-logs", "--json").output) == []
        _invoke(data_dir, "start-log", "--date", "2025-03-10")
        _invoke(data_dir, "start-log", "--date", "2025-03-12")

        assert _invoke(data_dir, "show-logs").exit_code == 0
        detail = _invoke(data_dir, "show-logs", "--date", "2025-03-10")
        assert detail.exit_code == 0
        assert "Full Body A" in detail.output
        limited = json.loads(_invoke(data_dir, "show-logs", "--limit", "1", "--json").output)
        assert [l["date"] for l in limited] == ["2025-03-12"]

    def test_delete_log(self, data_dir):
        _generate(data_dir)
        started = json.loads(_invoke(data_dir, "start-log", "--date", "2025-03-10", "--json").output)

        result = _invoke(data_dir, "delete-log", started["log_id"], "--force")
        assert result.exit_code == 0
        assert json.loads(_invoke(data_dir, "show-logs", "--json").output) == []

    def test_delete_unknown_log(self, data_dir):
        assert _invoke(data_dir, "delete-log", "log_missing", "--force").exit_code == 1


class TestReports:

    def test_training_report(self, data_dir):
        _generate(data_dir)
        _invoke(data_dir, "start-log", "--date", "2025-03-10")
        _invoke(data_dir, "log-set", "1", "1", "--reps", "10", "--date", "2025-03-10")
        _invoke(data_dir, "skip", "--date", "2025-03-12")

        result = _invoke(data_dir, "report", "--timeframe", "week", "--today", "2025-03-13", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [p["label"] for p in data["timeline"]] == ["03/10", "03/12"]
        assert data["summary"]["total_workouts"] == 2
        assert data["summary"]["missed_workouts"] == 1
        assert data["summary"]["completion_rate"] == 0
        assert data["muscle_stats"][0] == {"muscle": "Chest", "set_volume": 1}

        text = _invoke(data_dir, "report", "--timeframe", "week", "--today", "2025-03-13")
        assert text.exit_code == 0
        assert "Training Volume" in text.output

    def test_empty_report(self, data_dir):
        result = _invoke(data_dir, "report", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["insights"] == []

    def test_unknown_timeframe(self, data_dir):
        assert _invoke(data_dir, "report", "--timeframe", "decade").exit_code == 1

    def test_meals_and_nutrition_report(self, data_dir):
        first = _invoke(data_dir, "log-meal", "Oats", "--calories", "600", "--protein", "40",
                        "--target-calories", "2000", "--date", "2025-03-10")
        assert first.exit_code == 0, first.output
        second = _invoke(data_dir, "log-meal", "Chicken rice", "--calories", "900", "--protein", "60",
                         "--date", "2025-03-10")
        assert "1500 / 2000 kcal" in second.output

        result = _invoke(data_dir, "nutrition-report", "--timeframe", "week",
                         "--today", "2025-03-12", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["timeline"][0]["calories"] == 1500
        assert data["timeline"][0]["adherence"] == 75
        assert data["heatmap"][0]["status"] == "completed"
        assert data["summary"]["avg_protein"] == 100

        text = _invoke(data_dir, "nutrition-report", "--today", "2025-03-12")
        assert text.exit_code == 0
        assert "Calories Consumed" in text.output
