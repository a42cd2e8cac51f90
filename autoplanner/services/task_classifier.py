"""
Task relevance filtering and grouping.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from autoplanner.models.task import Task


@dataclass
class ClassifiedTasks:
    """Relevant tasks split into disjoint groups (input order preserved)."""

    fixed: list[Task] = field(default_factory=list)
    recurring: list[Task] = field(default_factory=list)
    flexible: list[Task] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.fixed) + len(self.recurring) + len(self.flexible)


def task_fits_scope(
    task: Task, scope_start: date, scope_end: date, now: Optional[datetime] = None
) -> bool:
    """
    Check whether a task overlaps the scheduling window.

    Tasks without any dates are always relevant. A task starting after the
    window or due before it is not, unless it is flexible and its deadline
    already passed at `now`: overdue work stays visible in every scope so
    it can be reported as expired.
    """
    task_start = task.start_plan.date if task.start_plan else None
    task_end = task.end_plan.date if task.end_plan else None

    if task_start is None and task_end is None:
        return True
    if task_start is not None and task_start > scope_end:
        return False
    if task_end is not None and task_end < scope_start:
        overdue = now is not None and task.deadline < now
        return overdue and not task.has_exact_start and not task.is_recurring
    return True


def classify_tasks(
    tasks: list[Task], scope_start: date, scope_end: date, now: Optional[datetime] = None
) -> ClassifiedTasks:
    """
    Filter the snapshot to open, in-window tasks and group them.

    Recurring tasks go to the recurrence expander even when they also carry
    an exact start time; the start time only provides the time of day.
    """
    result = ClassifiedTasks()
    for task in tasks:
        if task.is_completed or not task_fits_scope(task, scope_start, scope_end, now):
            continue
        if task.is_recurring:
            result.recurring.append(task)
        elif task.has_exact_start:
            result.fixed.append(task)
        else:
            result.flexible.append(task)
    return result
