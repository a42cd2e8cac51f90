"""
Urgency scoring for flexible tasks.

Higher scores are placed first. The score mixes the priority tier, deadline
pressure, the user's strategy and a small bonus for tasks starting soon.
"""

from datetime import datetime

from autoplanner.models.enums import PrioritizationStrategy, Priority
from autoplanner.models.task import DEFAULT_TASK_MINUTES, Task
from autoplanner.utils.datetime_utils import whole_hours_between

PRIORITY_BASE_SCORES = {
    Priority.HIGH: 10000.0,
    Priority.MEDIUM: 5000.0,
    Priority.LOW: 1000.0,
    Priority.NONE: 100.0,
}

OVERDUE_BONUS = 50000.0
MIN_SCORE = 0.1


def _deadline_bonus(hours_left: int) -> float:
    """Deadline pressure; divisor is hours_left + 1, never below 1."""
    divisor = max(1, hours_left + 1)
    if hours_left < 0:
        return OVERDUE_BONUS
    if hours_left <= 8:
        return 20000.0 / divisor
    if hours_left <= 24:
        return 10000.0 / divisor
    if hours_left <= 72:
        return 5000.0 / divisor
    return 1000.0 / divisor


def _start_bonus(hours_from_now: int) -> float:
    if 0 < hours_from_now < 48:
        return 200.0 / max(1, hours_from_now + 1)
    if hours_from_now <= 0:
        return 100.0
    return 0.0


def score_task(
    task: Task,
    strategy: PrioritizationStrategy,
    now: datetime,
    default_task_minutes: int = DEFAULT_TASK_MINUTES,
) -> float:
    """
    Calculate the placement score of a flexible task.

    Args:
        task: Task to score
        strategy: User-selected prioritization strategy
        now: Current instant
        default_task_minutes: Duration assumed when the task has none

    Returns:
        Score, always at least MIN_SCORE
    """
    score = PRIORITY_BASE_SCORES.get(task.priority, PRIORITY_BASE_SCORES[Priority.NONE])

    deadline = task.deadline
    if deadline is not None:
        score += _deadline_bonus(whole_hours_between(now, deadline))
    elif task.priority != Priority.HIGH:
        # Undated low-priority work waits
        score *= 0.7

    has_deadline = task.end_plan is not None
    if strategy == PrioritizationStrategy.URGENT_FIRST:
        if has_deadline:
            score *= 1.1
    elif strategy == PrioritizationStrategy.EARLIER_DEADLINES_FIRST:
        if has_deadline:
            score *= 1.05
    elif strategy == PrioritizationStrategy.HIGH_PRIORITY_FIRST:
        if task.priority == Priority.HIGH:
            score *= 1.2
        elif task.priority == Priority.MEDIUM:
            score *= 1.1
    elif strategy == PrioritizationStrategy.SHORT_TASKS_FIRST:
        duration_hours = task.effective_duration_minutes(default_task_minutes) / 60.0
        score += 1000.0 / max(0.1, duration_hours + 0.1)

    if task.start_datetime is not None:
        score += _start_bonus(whole_hours_between(now, task.start_datetime))

    return max(MIN_SCORE, score)
