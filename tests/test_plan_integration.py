"""
End-to-end tests of the scheduling → logging → analytics pipeline.

Programs are generated against the bundled catalog (user additions
disabled) so the expected exercise picks below are fixed by the catalog
order.  Analytics and nutrition reports are checked on hand-built logs.
"""

from datetime import date, datetime

import pytest

from split_scheduler.core.adaptation import adapt_program
from split_scheduler.core.analytics import generate_analytics_report
from split_scheduler.core.ascii_plot import (
    create_adherence_heatmap,
    create_calorie_chart,
    create_muscle_split_chart,
    create_volume_chart,
)
from split_scheduler.core.exercises.base import ExerciseDefinition
from split_scheduler.core.exercises.catalog import ExerciseCatalog
from split_scheduler.core.exercises.loader import load_exercises_from_yaml
from split_scheduler.core.models import (
    LogExercise,
    LogSet,
    Macros,
    NutritionDayLog,
    SchedulePreferences,
    TrainingLog,
)
from split_scheduler.core.nutrition import generate_nutrition_report
from split_scheduler.core.planner import (
    ScheduleValidationError,
    generate_schedule,
    to_designer_program,
)
from split_scheduler.core.training_log import (
    DayNotFoundError,
    LogUpdate,
    SetUpdate,
    create_log_from_program,
    create_rest_log,
    find_program_day,
    update_exercise,
    update_log,
    update_set,
)

FULL_GYM = frozenset({"Barbell", "Dumbbell", "Machine", "Cables"})
NOW = datetime(2025, 3, 10, 8, 0)

# ---------------------------------------------------------------------------
# Fixtures and helpers
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def catalog(tmp_path_factory) -> ExerciseCatalog:
    """Bundled catalog only; the empty user dir keeps ~/.split-scheduler out."""
    empty_user_dir = tmp_path_factory.mktemp("no_user_exercises")
    return ExerciseCatalog(load_exercises_from_yaml(user_dir=empty_user_dir))


def _prefs(days: tuple[int, ...], equipment=frozenset(), experience="Beginner") -> SchedulePreferences:
    return SchedulePreferences(
        days_per_week=len(days),
        preferred_days=days,
        equipment=equipment,
        experience=experience,
    )


def _ids(instances) -> list[str]:
    return [e.exercise_id for e in instances]


def _complete_all(log: TrainingLog, reps: int, weight: float = 0.0) -> TrainingLog:
    for ex in log.exercises:
        for s in ex.sets:
            log = update_set(log, ex.log_exercise_id, s.set_id, SetUpdate(
                performed_reps=reps, performed_weight=weight, completed=True,
            ))
    return log


def _hand_log(
    log_date: str,
    status: str,
    *,
    reps: int = 5,
    weight: float = 100.0,
    rpe: float | None = None,
    done: bool = True,
    name: str = "Barbell Bench Press",
    ex_id: str = "bp_bb",
) -> TrainingLog:
    sets = [LogSet(set_id="s1", set_number=1, target_reps="5", performed_reps=reps,
                   performed_weight=weight, rpe=rpe, completed=done)]
    return TrainingLog(
        log_id=f"log_{log_date}",
        user_id="u1",
        date=log_date,
        workout_title="Hand",
        status=status,
        exercises=[LogExercise(log_exercise_id="le1", exercise_id=ex_id, name=name,
                               sets=sets, completed=done)],
    )


# ===========================================================================
# Generation against the bundled catalog
# ===========================================================================


class TestBundledCatalog:

    def test_catalog_loads_in_file_order(self, catalog):
        ids = catalog.exercise_ids
        assert len(ids) == 52
        assert ids[0] == "bp_bb"
        assert ids[-1] == "ab_roller"

    def test_bodyweight_push_query(self, catalog):
        hits = catalog.query(pattern="Push_Vertical", movement_type="Compound", equipment=(),
                             difficulty="Beginner")
        assert _ids(hits) == ["dips_bench"]


class TestFullBodyBodyweight:
    """3 bodyweight days, beginner → FullBody A / B / A."""

    @pytest.fixture
    def program(self, catalog):
        return generate_schedule(_prefs((0, 2, 4)), catalog=catalog, now=NOW)

    def test_split_and_cycle(self, program):
        assert program.split == "FullBody"
        assert [s.day_of_week for s in program.sessions] == [0, 2, 4]
        assert [s.title for s in program.sessions] == ["Full Body A", "Full Body B", "Full Body A"]

    def test_day_a_picks(self, program):
        mon = program.sessions[0]
        assert _ids(mon.main_lifts) == ["pushup"]
        assert _ids(mon.accessories) == ["back_ext", "plank"]
        assert mon.tags == ["Chest", "Back", "Core"]

    def test_day_b_picks(self, program):
        wed = program.sessions[1]
        # dips_bench is the beginner match; pullup is kept via the difficulty fallback
        assert _ids(wed.main_lifts) == ["dips_bench", "pullup"]
        assert _ids(wed.accessories) == ["plank"]

    def test_prescriptions(self, program):
        mon = program.sessions[0]
        assert (mon.main_lifts[0].sets, mon.main_lifts[0].reps, mon.main_lifts[0].rest_seconds) == (4, "6-8", 120)
        assert (mon.accessories[0].sets, mon.accessories[0].reps, mon.accessories[0].rest_seconds) == (3, "10-12", 60)

    def test_fixed_blocks(self, program):
        mon = program.sessions[0]
        assert [w.name for w in mon.warmup] == ["Jumping Jacks", "Dynamic Stretch"]
        assert [c.name for c in mon.cooldown] == ["Static Stretch"]

    def test_unfilled_slots_reported(self, program):
        assert program.diagnostics.unfilled_slots == [
            "Mon Full Body A: pattern Squat (Compound)",
            "Mon Full Body A: pattern Pull_Horizontal (Compound)",
            "Wed Full Body B: pattern Hinge (Compound)",
            "Wed Full Body B: pattern Lunge (Compound)",
            "Fri Full Body A: pattern Squat (Compound)",
            "Fri Full Body A: pattern Pull_Horizontal (Compound)",
        ]

    def test_diagnostics(self, program):
        diag = program.diagnostics
        assert diag.validation_passed
        assert not diag.fallback_triggered
        assert diag.fallback_reason is None
        assert diag.split_logic == "FullBody System"
        assert diag.generated_on == "2025-03-10"
        assert program.generated_at == "2025-03-10T08:00:00"

    def test_sessions_carry_duration_and_rationale(self, program):
        mon = program.sessions[0]
        assert mon.duration_minutes == 60
        assert mon.focus == "Strength & Hypertrophy"
        assert mon.rationale == "Based on FullBody split and Beginner level."


class TestPPLBodyweight:

    def test_legs_day_without_main_lift_triggers_fallback(self, catalog):
        program = generate_schedule(_prefs((0, 1, 2, 3, 4)), catalog=catalog, now=NOW)

        assert program.split == "PPL"
        assert [s.title for s in program.sessions] == ["Push", "Pull", "Legs", "Push", "Pull"]
        legs = program.sessions[2]
        assert legs.main_lifts == []
        assert _ids(legs.accessories) == ["plank"]
        assert legs.focus == "Legs"
        assert program.diagnostics.fallback_triggered
        assert program.diagnostics.fallback_reason == "Equipment limitations: no main lift for Wed (Legs)"


class TestUpperLowerFullGym:

    @pytest.fixture
    def program(self, catalog):
        return generate_schedule(
            _prefs((0, 1, 3, 4), equipment=FULL_GYM, experience="Intermediate"),
            catalog=catalog, now=NOW,
        )

    def test_upper_picks(self, program):
        upper = program.sessions[0]
        assert upper.title == "Upper Power"
        assert _ids(upper.main_lifts) == ["bp_bb", "pullup", "bb_row"]
        assert _ids(upper.accessories) == ["skull_crusher", "preacher_curl"]

    def test_lower_picks(self, program):
        lower = program.sessions[1]
        assert lower.title == "Lower Strength"
        assert _ids(lower.main_lifts) == ["squat_bb", "rdl_bb", "lunge_walk"]
        assert _ids(lower.accessories) == ["calf_raise_stand", "leg_raise"]

    def test_used_exercise_not_reused_for_later_slot(self, program):
        # skull_crusher already filled the Push_Vertical slot
        assert program.diagnostics.unfilled_slots == [
            "Mon Upper Power: muscle Triceps (Isolation)",
            "Thu Upper Power: muscle Triceps (Isolation)",
        ]


class TestGenerationProperties:

    def test_deterministic_selection(self, catalog):
        prefs = _prefs((0, 2, 4, 5, 6), equipment=FULL_GYM)
        a = generate_schedule(prefs, catalog=catalog, now=NOW)
        b = generate_schedule(prefs, catalog=catalog, now=NOW)
        assert [_ids(s.all_exercises) for s in a.sessions] == [_ids(s.all_exercises) for s in b.sessions]
        assert a.program_id != b.program_id

    @pytest.mark.parametrize("days", [(0,), (0, 3), (0, 1, 3, 4), (0, 1, 2, 3, 4, 5, 6)])
    def test_no_duplicate_exercise_within_session(self, catalog, days):
        program = generate_schedule(_prefs(days, equipment=FULL_GYM), catalog=catalog, now=NOW)
        for session in program.sessions:
            ids = _ids([*session.main_lifts, *session.accessories])
            assert len(ids) == len(set(ids))

    def test_sessions_ordered_by_weekday(self, catalog):
        program = generate_schedule(_prefs((6, 1, 3)), catalog=catalog, now=NOW)
        assert [s.day_of_week for s in program.sessions] == [1, 3, 6]

    def test_mismatched_day_count_noted(self, catalog):
        prefs = SchedulePreferences(days_per_week=3, preferred_days=(0, 2))
        program = generate_schedule(prefs, catalog=catalog, now=NOW)
        assert len(program.sessions) == 2
        assert program.split == "FullBody"
        assert program.diagnostics.notes

    def test_no_preferred_days_gives_empty_program(self, catalog):
        prefs = SchedulePreferences(days_per_week=2, preferred_days=())
        program = generate_schedule(prefs, catalog=catalog, now=NOW)
        assert program.sessions == []
        assert not program.diagnostics.fallback_triggered

    def test_invalid_request_raises_before_generation(self, catalog):
        with pytest.raises(ScheduleValidationError):
            generate_schedule(SchedulePreferences(days_per_week=0, preferred_days=(0,)), catalog=catalog)

    def test_fixture_catalog_substitutes_bundled_one(self):
        tiny = ExerciseCatalog([
            ExerciseDefinition("only_squat", "Only Squat", "Only Squat", "Legs", "Bodyweight",
                               "Beginner", "Compound", "Squat"),
        ])
        program = generate_schedule(_prefs((0,)), catalog=tiny, now=NOW)
        assert _ids(program.sessions[0].main_lifts) == ["only_squat"]
        assert program.sessions[0].accessories == []

    def test_session_with_nothing_available_has_no_blocks(self):
        barbell_only = ExerciseCatalog([
            ExerciseDefinition("bb", "BB", "BB", "Legs", "Barbell", "Beginner", "Compound", "Squat"),
        ])
        program = generate_schedule(_prefs((0,)), catalog=barbell_only, now=NOW)
        session = program.sessions[0]
        assert session.is_empty
        assert session.warmup == []
        assert session.cooldown == []
        assert program.diagnostics.fallback_triggered


class TestAdaptGenerated:

    def test_deload_every_session(self, catalog):
        program = generate_schedule(_prefs((0, 2, 4)), catalog=catalog, now=NOW)
        adapted = adapt_program(program, 25, now=NOW)

        assert adapted is not program
        for before, after in zip(program.sessions, adapted.sessions):
            assert after.title == f"{before.title} (Light)"
            assert all((m.sets, m.reps) == (2, "10") for m in after.main_lifts)
            assert _ids(after.accessories) == _ids(before.accessories[:1])

    def test_deload_twice_applies_again(self, catalog):
        program = generate_schedule(_prefs((0,)), catalog=catalog, now=NOW)
        twice = adapt_program(adapt_program(program, 10, now=NOW), 10, now=NOW)
        assert twice.sessions[0].title == "Full Body A (Light) (Light)"
        assert len(twice.adaptation_log) == 2


# ===========================================================================
# Designer program → training log
# ===========================================================================


class TestLogFromProgram:

    @pytest.fixture
    def designer(self, catalog):
        program = generate_schedule(_prefs((0, 2, 4)), catalog=catalog, now=NOW)
        return program, to_designer_program(program, "u1")

    def test_conversion_shape(self, designer):
        program, dp = designer
        assert dp.program_id == program.program_id
        assert dp.author_id == "u1"
        assert dp.duration_weeks == 1
        days = dp.weeks[0].days
        assert [d.day_number for d in days] == [1, 3, 5]
        assert [d.day_id for d in days] == [s.session_id for s in program.sessions]
        assert [e.exercise_id for e in days[0].exercises] == ["pushup", "back_ext", "plank"]
        assert [len(e.sets) for e in days[0].exercises] == [4, 3, 3]

    def test_log_snapshots_targets(self, designer):
        program, dp = designer
        log = create_log_from_program("u1", "2025-03-10", dp, program.sessions[0].session_id, now=NOW)

        assert log.status == "Planned"
        assert log.workout_title == "Full Body A"
        assert log.program_id == dp.program_id
        assert log.week_id == dp.weeks[0].week_id
        first = log.exercises[0]
        assert [s.set_number for s in first.sets] == [1, 2, 3, 4]
        assert all(s.target_reps == "6-8" and s.target_weight == 0.0 for s in first.sets)
        assert all(s.performed_reps is None and not s.completed for s in first.sets)
        assert log.created_at == "2025-03-10T08:00:00"

    def test_default_day_is_first_day(self, designer):
        _, dp = designer
        day, week_id = find_program_day(dp)
        assert day.day_number == 1
        assert week_id == dp.weeks[0].week_id

    def test_unknown_day_raises(self, designer):
        _, dp = designer
        with pytest.raises(DayNotFoundError, match="Day not found"):
            create_log_from_program("u1", "2025-03-10", dp, "no_such_day")

    def test_rest_day_log(self):
        barbell_only = ExerciseCatalog([
            ExerciseDefinition("bb", "BB", "BB", "Legs", "Barbell", "Beginner", "Compound", "Squat"),
        ])
        dp = to_designer_program(generate_schedule(_prefs((0,)), catalog=barbell_only, now=NOW), "u1")
        assert dp.weeks[0].days[0].is_rest_day
        log = create_log_from_program("u1", "2025-03-10", dp)
        assert log.status == "Rest"
        assert log.exercises == []

    def test_standalone_rest_log(self):
        log = create_rest_log("u1", "2025-03-11", now=NOW)
        assert (log.status, log.workout_title, log.exercises) == ("Rest", "Rest", [])


class TestLogUpdates:

    @pytest.fixture
    def log(self, catalog):
        program = generate_schedule(_prefs((0,)), catalog=catalog, now=NOW)
        return create_log_from_program("u1", "2025-03-10", to_designer_program(program, "u1"), now=NOW)

    def test_single_set_gives_partial(self, log):
        ex = log.exercises[0]
        updated = update_set(log, ex.log_exercise_id, ex.sets[0].set_id,
                             SetUpdate(performed_reps=10, rpe=8, completed=True))
        assert updated.status == "Partial"
        assert updated.exercises[0].sets[0].performed_reps == 10
        assert not updated.exercises[0].completed
        # input untouched
        assert log.status == "Planned"
        assert log.exercises[0].sets[0].performed_reps is None

    def test_all_sets_give_completed(self, log):
        done = _complete_all(log, reps=10)
        assert done.status == "Completed"
        assert all(ex.completed for ex in done.exercises)

    def test_undo_returns_to_planned(self, log):
        ex = log.exercises[0]
        s = ex.sets[0]
        on = update_set(log, ex.log_exercise_id, s.set_id, SetUpdate(completed=True))
        off = update_set(on, ex.log_exercise_id, s.set_id, SetUpdate(completed=False))
        assert off.status == "Planned"

    def test_unknown_set_raises(self, log):
        with pytest.raises(LookupError):
            update_set(log, log.exercises[0].log_exercise_id, "nope", SetUpdate(completed=True))

    def test_unknown_exercise_raises(self, log):
        with pytest.raises(LookupError):
            update_set(log, "nope", "nope", SetUpdate(completed=True))

    def test_invalid_rpe_rejected(self, log):
        ex = log.exercises[0]
        with pytest.raises(ValueError):
            update_set(log, ex.log_exercise_id, ex.sets[0].set_id, SetUpdate(rpe=11))

    def test_dropping_sets_recomputes(self, log):
        ex = log.exercises[0]
        first_done = update_set(log, ex.log_exercise_id, ex.sets[0].set_id, SetUpdate(completed=True))
        trimmed = update_exercise(first_done, ex.log_exercise_id,
                                  sets=[first_done.exercises[0].sets[0]], notes="cut short")
        assert trimmed.exercises[0].completed
        assert trimmed.exercises[0].notes == "cut short"
        assert trimmed.status == "Partial"

    def test_session_feedback(self, log):
        updated = update_log(log, LogUpdate(fatigue_level=7, user_notes="tired"))
        assert (updated.fatigue_level, updated.user_notes) == (7, "tired")
        assert updated.workout_title == log.workout_title

    def test_fatigue_out_of_range(self, log):
        with pytest.raises(ValueError):
            update_log(log, LogUpdate(fatigue_level=11))


# ===========================================================================
# Analytics
# ===========================================================================


class TestPipelineAnalytics:

    def test_two_logged_days(self, catalog):
        program = generate_schedule(_prefs((0, 2, 4)), catalog=catalog, now=NOW)
        dp = to_designer_program(program, "u1")

        mon = create_log_from_program("u1", "2025-03-10", dp, program.sessions[0].session_id)
        ex = mon.exercises[0]  # pushup, 4 sets
        for s in ex.sets:
            mon = update_set(mon, ex.log_exercise_id, s.set_id,
                             SetUpdate(performed_reps=10, completed=True))
        wed = _complete_all(
            create_log_from_program("u1", "2025-03-12", dp, program.sessions[1].session_id),
            reps=8,
        )
        assert (mon.status, wed.status) == ("Partial", "Completed")

        report = generate_analytics_report([wed, mon], "week", today=date(2025, 3, 13), catalog=catalog)

        assert [p.label for p in report.timeline] == ["03/10", "03/12"]
        # bodyweight sets count one load unit per rep: 4*10 and 11*8
        assert [p.volume for p in report.timeline] == [40, 88]
        assert [p.adherence for p in report.timeline] == [60, 100]
        assert [(m.muscle, m.set_volume) for m in report.muscle_stats] == [
            ("Chest", 4), ("Back", 4), ("Triceps", 4), ("Core", 3),
        ]
        summary = report.summary
        assert (summary.total_workouts, summary.completion_rate, summary.total_volume) == (2, 50, 128)
        assert (summary.missed_workouts, summary.best_streak) == (0, 1)
        assert [(i.metric, i.type) for i in report.insights] == [
            ("Volume", "positive"), ("Consistency", "negative"), ("Focus", "neutral"),
        ]


class TestAnalyticsReport:

    def test_empty_range(self):
        report = generate_analytics_report([], "month", today=date(2025, 3, 10),
                                           catalog=ExerciseCatalog([]))
        assert report.timeline == []
        assert report.muscle_stats == []
        assert report.insights == []
        assert report.summary.total_workouts == 0
        assert report.summary.completion_rate == 0

    def test_timeframe_filter(self):
        logs = [_hand_log("2025-02-09", "Completed"), _hand_log("2025-02-10", "Completed")]
        report = generate_analytics_report(logs, "month", today=date(2025, 3, 10),
                                           catalog=ExerciseCatalog([]))
        assert [p.date for p in report.timeline] == ["2025-02-10"]

    def test_year_groups_by_month(self):
        logs = [
            _hand_log("2024-03-01", "Completed"),  # before the window
            _hand_log("2025-01-05", "Completed", rpe=8),
            _hand_log("2025-01-20", "Partial", done=False),
            _hand_log("2025-02-10", "Skipped", done=False),
        ]
        report = generate_analytics_report(logs, "year", today=date(2025, 3, 15),
                                           catalog=ExerciseCatalog([]))

        assert [p.label for p in report.timeline] == ["2025-01", "2025-02"]
        jan, feb = report.timeline
        assert jan.volume == 500
        assert jan.intensity == 40
        assert jan.adherence == 80
        assert (feb.volume, feb.intensity, feb.adherence) == (0, 0, 0)
        assert report.summary.missed_workouts == 1
        assert report.summary.total_workouts == 3

    def test_unlisted_exercise_uses_name_keywords(self):
        logs = [_hand_log("2025-03-09", "Completed", ex_id="custom_1", name="Zercher Squat")]
        report = generate_analytics_report(logs, "week", today=date(2025, 3, 10),
                                           catalog=ExerciseCatalog([]))
        assert [(m.muscle, m.set_volume) for m in report.muscle_stats] == [("Legs", 1)]

    def test_unknown_timeframe_raises(self):
        with pytest.raises(ValueError):
            generate_analytics_report([], "fortnight", today=date(2025, 3, 10),
                                      catalog=ExerciseCatalog([]))


# ===========================================================================
# Nutrition report
# ===========================================================================


def _nday(day: str, consumed: Macros, status: str, target: float = 2000) -> NutritionDayLog:
    return NutritionDayLog(
        log_id=f"n_{day}",
        user_id="u1",
        date=day,
        status=status,
        total_target_macros=Macros(calories=target),
        total_consumed_macros=consumed,
    )


class TestNutritionReport:

    def test_two_days(self):
        logs = [
            _nday("2025-03-11", Macros(1200, 100, 100, 40), "Partial"),
            _nday("2025-03-10", Macros(1900, 150, 200, 60), "Completed"),
        ]
        report = generate_nutrition_report(logs, "week", today=date(2025, 3, 12))

        assert [p.label for p in report.timeline] == ["03/10", "03/11"]
        assert [p.adherence for p in report.timeline] == [95, 60]
        assert [h.status for h in report.heatmap] == ["completed", "partial"]
        s = report.summary
        assert (s.avg_adherence, s.avg_calories, s.calorie_deviation, s.avg_protein, s.best_streak) == (
            78, 1550, -450, 125, 1,
        )
        assert [(m.name, m.value) for m in report.macro_distribution] == [
            ("Protein", 250), ("Carbs", 300), ("Fats", 100),
        ]
        assert report.insights == []

    def test_low_adherence_and_protein(self):
        logs = [_nday("2025-03-10", Macros(1000, 50, 100, 30), "Partial")]
        report = generate_nutrition_report(logs, "week", today=date(2025, 3, 12))

        assert report.heatmap[0].status == "missed"
        assert [(i.metric, i.type) for i in report.insights] == [
            ("Adherence", "negative"), ("Protein", "neutral"),
        ]

    def test_empty(self):
        report = generate_nutrition_report([], "month", today=date(2025, 3, 12))
        assert report.timeline == []
        assert report.insights == []
        assert report.summary.best_streak == 0


# ===========================================================================
# ASCII charts
# ===========================================================================


class TestCharts:

    def test_volume_chart_scales_to_max(self):
        logs = [_hand_log("2025-03-09", "Completed", weight=50), _hand_log("2025-03-10", "Completed")]
        report = generate_analytics_report(logs, "week", today=date(2025, 3, 10),
                                           catalog=ExerciseCatalog([]))
        lines = create_volume_chart(report.timeline, width=10).split("\n")
        assert lines[0] == "Training Volume (load × reps)"
        assert lines[2] == "03/09 │█████ 250.0"
        assert lines[3] == "03/10 │██████████ 500.0"

    def test_empty_charts(self):
        assert create_volume_chart([]) == "No training logs in this timeframe."
        assert create_muscle_split_chart([]) == "No completed sets in this timeframe."
        assert create_calorie_chart([]) == "No nutrition logs in this timeframe."
        assert create_adherence_heatmap([]) == "No nutrition logs in this timeframe."

    def test_calorie_chart_appends_target(self):
        report = generate_nutrition_report(
            [_nday("2025-03-10", Macros(1500), "Partial")], "week", today=date(2025, 3, 12),
        )
        assert create_calorie_chart(report.timeline).split("\n")[2].endswith("1500.0 / 2000")

    def test_heatmap_rows(self):
        days = [_nday(f"2025-03-{d:02d}", Macros(1900), "Completed") for d in range(1, 10)]
        report = generate_nutrition_report(days, "month", today=date(2025, 3, 12))
        lines = create_adherence_heatmap(report.heatmap, per_row=7).split("\n")
        assert lines[0] == "2025-03-01 " + " ".join(["█"] * 7)
        assert lines[1] == "2025-03-08 █ █"
        assert lines[-1].startswith("█ completed")
