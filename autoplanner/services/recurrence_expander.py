"""
Recurrence expansion.

Turns a recurring task into the concrete occurrence datetimes that fall
inside a scheduling window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Optional

from autoplanner.core.exceptions import RecurrenceError
from autoplanner.models.enums import FrequencyType, IntervalUnit
from autoplanner.models.task import RepeatPlan, Task
from autoplanner.utils.datetime_utils import add_months, months_between, start_of_week

# Iteration guard for malformed rules. One year of daily occurrences
# exceeds any supported scope.
MAX_RECURRENCE_ITERATIONS = 365


@dataclass
class RecurrenceExpansion:
    """Occurrences of one task plus why the list was cut short, if it was."""

    task_id: int
    occurrences: list[datetime] = field(default_factory=list)
    truncated_reason: Optional[str] = None

    @property
    def truncated(self) -> bool:
        return self.truncated_reason is not None


class RecurrenceExpander:
    """Expands repeat plans into dated occurrences."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def expand(
        self,
        task: Task,
        window_start: date,
        window_end: date,
        default_time: time,
    ) -> list[datetime]:
        """Return the ordered occurrence datetimes of a task inside the window."""
        return self.expand_detailed(task, window_start, window_end, default_time).occurrences

    def expand_detailed(
        self,
        task: Task,
        window_start: date,
        window_end: date,
        default_time: time,
    ) -> RecurrenceExpansion:
        """
        Expand a task's repeat plan.

        Args:
            task: Task with a repeat plan
            window_start: First date of the scheduling window
            window_end: Last date of the scheduling window
            default_time: Time of day used when the task has no exact start

        Returns:
            RecurrenceExpansion with occurrences in chronological order
        """
        expansion = RecurrenceExpansion(task_id=task.id)
        plan = task.repeat_plan
        if plan is None or not plan.is_enabled:
            return expansion

        anchor = task.start_plan.date if task.start_plan and task.start_plan.date else window_start
        occurrence_time = task.start_datetime.time() if task.has_exact_start else default_time
        limit = min(window_end, plan.end_date) if plan.end_date else window_end

        try:
            if plan.frequency == FrequencyType.WEEKLY and plan.selected_days:
                self._expand_weekdays(plan, anchor, window_start, limit, occurrence_time, expansion)
            else:
                self._expand_stepped(plan, anchor, window_start, limit, occurrence_time, expansion)
        except RecurrenceError as exc:
            self._logger.warning(f"Recurrence expansion stopped for task {task.id}: {exc.message}")
            expansion.truncated_reason = exc.message

        self._logger.debug(
            f"Expanded task {task.id} ({plan.frequency.value}): "
            f"{len(expansion.occurrences)} occurrences in {window_start} - {window_end}"
        )
        return expansion

    def _expand_stepped(
        self,
        plan: RepeatPlan,
        anchor: date,
        window_start: date,
        limit: date,
        occurrence_time: time,
        expansion: RecurrenceExpansion,
    ) -> None:
        days_per_step, months_per_step = self._step_size(plan)
        index = self._first_index_on_or_after(
            anchor, window_start, days_per_step, months_per_step, expansion.task_id
        )
        iterations = 0

        while True:
            if plan.max_occurrences is not None and index >= plan.max_occurrences:
                break
            current = self._nth_date(anchor, index, days_per_step, months_per_step, expansion.task_id)
            if current > limit:
                break
            if iterations >= MAX_RECURRENCE_ITERATIONS:
                self._warn_iteration_cap(expansion)
                break
            iterations += 1
            expansion.occurrences.append(datetime.combine(current, occurrence_time))
            index += 1

    def _expand_weekdays(
        self,
        plan: RepeatPlan,
        anchor: date,
        window_start: date,
        limit: date,
        occurrence_time: time,
        expansion: RecurrenceExpansion,
    ) -> None:
        weekdays = {day.index for day in plan.selected_days}
        anchor_week = start_of_week(anchor)
        current = max(anchor, window_start)
        emitted = 0
        if plan.max_occurrences is not None:
            emitted = self._count_weekday_occurrences(plan, anchor, current)
        iterations = 0

        while current <= limit:
            if plan.max_occurrences is not None and emitted >= plan.max_occurrences:
                break
            if iterations >= MAX_RECURRENCE_ITERATIONS:
                self._warn_iteration_cap(expansion)
                break
            iterations += 1
            week_index = (start_of_week(current) - anchor_week).days // 7
            if current.weekday() in weekdays and week_index % plan.interval == 0:
                expansion.occurrences.append(datetime.combine(current, occurrence_time))
                emitted += 1
            try:
                current += timedelta(days=1)
            except OverflowError as exc:
                raise RecurrenceError(str(exc), expansion.task_id) from exc

    @staticmethod
    def _step_size(plan: RepeatPlan) -> tuple[int, int]:
        """(days, months) advanced per step; exactly one of them is non-zero."""
        freq = plan.frequency
        interval = plan.interval
        if freq == FrequencyType.DAILY:
            return interval, 0
        if freq == FrequencyType.WEEKLY:
            return 7 * interval, 0
        if freq == FrequencyType.MONTHLY:
            return 0, interval
        if freq == FrequencyType.YEARLY:
            return 0, 12 * interval
        # CUSTOM
        if plan.interval_unit == IntervalUnit.DAY:
            return interval, 0
        if plan.interval_unit == IntervalUnit.WEEK:
            return 7 * interval, 0
        if plan.interval_unit == IntervalUnit.MONTH:
            return 0, interval
        # Unit missing: fall back to daily
        return 1, 0

    @staticmethod
    def _nth_date(anchor: date, index: int, days_per_step: int, months_per_step: int, task_id: int) -> date:
        """Date of the index-th occurrence, computed from the anchor so clamping never drifts."""
        try:
            if days_per_step:
                return anchor + timedelta(days=index * days_per_step)
            return add_months(anchor, index * months_per_step)
        except OverflowError as exc:
            raise RecurrenceError(f"date out of range: {exc}", task_id) from exc

    def _first_index_on_or_after(
        self, anchor: date, target: date, days_per_step: int, months_per_step: int, task_id: int
    ) -> int:
        """Smallest step index whose date is not before target."""
        if anchor >= target:
            return 0
        if days_per_step:
            return -(-(target - anchor).days // days_per_step)
        index = max(0, months_between(anchor, target) // months_per_step)
        while self._nth_date(anchor, index, 0, months_per_step, task_id) < target:
            index += 1
        return index

    @staticmethod
    def _count_weekday_occurrences(plan: RepeatPlan, anchor: date, before: date) -> int:
        """Occurrences of a weekday-set rule in [anchor, before)."""
        weekdays = sorted(day.index for day in plan.selected_days)
        count = 0
        week = start_of_week(anchor)
        while week < before:
            for weekday in weekdays:
                candidate = week + timedelta(days=weekday)
                if anchor <= candidate < before:
                    count += 1
            week += timedelta(weeks=plan.interval)
        return count

    def _warn_iteration_cap(self, expansion: RecurrenceExpansion) -> None:
        reason = f"Reached {MAX_RECURRENCE_ITERATIONS} iterations; occurrence list truncated"
        self._logger.warning(f"Task {expansion.task_id}: {reason}")
        expansion.truncated_reason = reason
