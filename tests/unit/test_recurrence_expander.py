"""
Tests for RecurrenceExpander occurrence calculation.
"""

from datetime import date, datetime, time

from autoplanner.models.enums import FrequencyType, IntervalUnit, Weekday
from autoplanner.models.task import RepeatPlan, Task, TimePlanning
from autoplanner.services.recurrence_expander import MAX_RECURRENCE_ITERATIONS, RecurrenceExpander

MONDAY = date(2026, 3, 2)
SUNDAY = date(2026, 3, 8)
WORK_START = time(8, 0)


def _make_recurring(
    frequency: FrequencyType,
    start: datetime | None = datetime(2026, 3, 2, 9, 0),
    interval: int = 1,
    interval_unit: IntervalUnit | None = None,
    selected_days: set[Weekday] | None = None,
    end_date: date | None = None,
    max_occurrences: int | None = None,
) -> Task:
    """Helper to create a recurring task for testing."""
    return Task(
        id=1,
        name="Recurring",
        start_plan=TimePlanning(date_time=start) if start else None,
        duration_minutes=30,
        repeat_plan=RepeatPlan(
            frequency=frequency,
            interval=interval,
            interval_unit=interval_unit,
            selected_days=selected_days or set(),
            end_date=end_date,
            max_occurrences=max_occurrences,
        ),
    )


def _dates(occurrences: list[datetime]) -> list[date]:
    return [occ.date() for occ in occurrences]


class TestDaily:
    def test_every_other_day(self):
        task = _make_recurring(FrequencyType.DAILY, interval=2)
        result = RecurrenceExpander().expand(task, MONDAY, SUNDAY, WORK_START)
        assert _dates(result) == [date(2026, 3, 2), date(2026, 3, 4), date(2026, 3, 6), date(2026, 3, 8)]
        assert all(occ.time() == time(9, 0) for occ in result)

    def test_old_anchor_keeps_phase(self):
        task = _make_recurring(FrequencyType.DAILY, start=datetime(2026, 2, 1, 9, 0), interval=3)
        result = RecurrenceExpander().expand(task, MONDAY, SUNDAY, WORK_START)
        # 2026-02-01 + 30 days = 2026-03-03
        assert _dates(result) == [date(2026, 3, 3), date(2026, 3, 6)]

    def test_end_date_limits(self):
        task = _make_recurring(FrequencyType.DAILY, end_date=date(2026, 3, 4))
        result = RecurrenceExpander().expand(task, MONDAY, SUNDAY, WORK_START)
        assert _dates(result)[-1] == date(2026, 3, 4)
        assert len(result) == 3

    def test_max_occurrences_counts_from_series_start(self):
        task = _make_recurring(
            FrequencyType.DAILY, start=datetime(2026, 2, 28, 9, 0), max_occurrences=3
        )
        result = RecurrenceExpander().expand(task, MONDAY, SUNDAY, WORK_START)
        assert _dates(result) == [MONDAY]

    def test_no_start_uses_window_and_default_time(self):
        task = _make_recurring(FrequencyType.DAILY, start=None)
        result = RecurrenceExpander().expand(task, MONDAY, date(2026, 3, 3), WORK_START)
        assert result == [datetime(2026, 3, 2, 8, 0), datetime(2026, 3, 3, 8, 0)]


class TestWeekly:
    def test_selected_days_in_one_week(self):
        task = _make_recurring(FrequencyType.WEEKLY, selected_days={Weekday.MON, Weekday.FRI})
        result = RecurrenceExpander().expand(task, MONDAY, SUNDAY, WORK_START)
        assert _dates(result) == [date(2026, 3, 2), date(2026, 3, 6)]

    def test_selected_days_every_other_week(self):
        task = _make_recurring(FrequencyType.WEEKLY, interval=2, selected_days={Weekday.MON})
        result = RecurrenceExpander().expand(task, MONDAY, date(2026, 3, 22), WORK_START)
        assert _dates(result) == [date(2026, 3, 2), date(2026, 3, 16)]

    def test_selected_days_with_cap(self):
        task = _make_recurring(
            FrequencyType.WEEKLY,
            start=datetime(2026, 2, 23, 9, 0),
            selected_days={Weekday.MON, Weekday.FRI},
            max_occurrences=3,
        )
        result = RecurrenceExpander().expand(task, MONDAY, SUNDAY, WORK_START)
        assert _dates(result) == [MONDAY]

    def test_without_selected_days_steps_by_weeks(self):
        task = _make_recurring(FrequencyType.WEEKLY, interval=2)
        result = RecurrenceExpander().expand(task, MONDAY, date(2026, 3, 31), WORK_START)
        assert _dates(result) == [date(2026, 3, 2), date(2026, 3, 16), date(2026, 3, 30)]


class TestMonthlyAndYearly:
    def test_month_end_does_not_drift(self):
        task = _make_recurring(FrequencyType.MONTHLY, start=datetime(2026, 1, 31, 9, 0))
        result = RecurrenceExpander().expand(task, date(2026, 1, 1), date(2026, 5, 31), WORK_START)
        assert _dates(result) == [
            date(2026, 1, 31),
            date(2026, 2, 28),
            date(2026, 3, 31),
            date(2026, 4, 30),
            date(2026, 5, 31),
        ]

    def test_yearly_leap_day(self):
        task = _make_recurring(FrequencyType.YEARLY, start=datetime(2024, 2, 29, 9, 0))
        result = RecurrenceExpander().expand(task, date(2026, 1, 1), date(2028, 12, 31), WORK_START)
        assert _dates(result) == [date(2026, 2, 28), date(2027, 2, 28), date(2028, 2, 29)]


class TestCustom:
    def test_custom_months(self):
        task = _make_recurring(
            FrequencyType.CUSTOM,
            start=datetime(2026, 1, 15, 9, 0),
            interval=2,
            interval_unit=IntervalUnit.MONTH,
        )
        result = RecurrenceExpander().expand(task, date(2026, 1, 1), date(2026, 6, 30), WORK_START)
        assert _dates(result) == [date(2026, 1, 15), date(2026, 3, 15), date(2026, 5, 15)]

    def test_custom_without_unit_is_daily(self):
        task = _make_recurring(FrequencyType.CUSTOM, interval=5)
        result = RecurrenceExpander().expand(task, MONDAY, date(2026, 3, 4), WORK_START)
        assert _dates(result) == [date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 4)]


class TestGuards:
    def test_disabled_plan_yields_nothing(self):
        task = _make_recurring(FrequencyType.NONE)
        assert RecurrenceExpander().expand(task, MONDAY, SUNDAY, WORK_START) == []

    def test_iteration_cap_truncates(self):
        task = _make_recurring(FrequencyType.DAILY, start=datetime(2026, 1, 1, 9, 0))
        expansion = RecurrenceExpander().expand_detailed(
            task, date(2026, 1, 1), date(2027, 12, 31), WORK_START
        )
        assert len(expansion.occurrences) == MAX_RECURRENCE_ITERATIONS
        assert expansion.truncated

    def test_date_overflow_truncates(self):
        task = _make_recurring(FrequencyType.YEARLY, start=datetime(9999, 6, 1, 9, 0))
        expansion = RecurrenceExpander().expand_detailed(
            task, date(9999, 1, 1), date(9999, 12, 31), WORK_START
        )
        assert _dates(expansion.occurrences) == [date(9999, 6, 1)]
        assert expansion.truncated
