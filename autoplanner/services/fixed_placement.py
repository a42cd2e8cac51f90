"""
Placement of fixed-time occurrences.

Fixed occurrences are honored verbatim or reported; they are never moved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from autoplanner.models.enums import ConflictType
from autoplanner.models.planner import ConflictItem, ScheduledTaskItem
from autoplanner.models.task import DEFAULT_TASK_MINUTES, Task
from autoplanner.services.timeline import PlacementStatus, Timeline
from autoplanner.utils.datetime_utils import MIDNIGHT


@dataclass
class FixedOccurrence:
    """One requested fixed start of a task (direct or recurrence-expanded)."""

    task: Task
    start: datetime
    order: int = 0


@dataclass
class FixedPlacementReport:
    scheduled: list[ScheduledTaskItem] = field(default_factory=list)
    conflicts: list[ConflictItem] = field(default_factory=list)


def _spans_midnight(start: datetime, end: datetime) -> bool:
    """True when the interval runs into the next date (ending exactly at 00:00 is allowed)."""
    if end.date() == start.date():
        return False
    return not (end.time() == MIDNIGHT and end.date() == start.date() + timedelta(days=1))


class FixedPlacementEngine:
    """Places fixed occurrences onto a timeline in chronological order."""

    def __init__(
        self,
        default_task_minutes: int = DEFAULT_TASK_MINUTES,
        logger: Optional[logging.Logger] = None,
    ):
        self.default_task_minutes = default_task_minutes
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def place_all(
        self,
        occurrences: list[FixedOccurrence],
        timeline: Timeline,
        window_start: date,
        window_end: date,
        tasks_by_id: dict[int, Task],
    ) -> FixedPlacementReport:
        """
        Place every occurrence, earliest first (ties by original task order).

        Args:
            occurrences: Fixed occurrences to place
            timeline: Timeline to mutate
            window_start: First date of the window
            window_end: Last date of the window
            tasks_by_id: Full snapshot, used to name the occupying task of a conflict

        Returns:
            FixedPlacementReport with scheduled items and conflicts
        """
        report = FixedPlacementReport()

        for occurrence in sorted(occurrences, key=lambda occ: (occ.start, occ.order)):
            task = occurrence.task
            start = occurrence.start
            duration = timedelta(minutes=task.effective_duration_minutes(self.default_task_minutes))
            end = start + duration

            if self._is_outside_window(timeline, start, end, window_start, window_end):
                self._logger.debug(f"Fixed occurrence skipped (outside window/hours): task {task.id} at {start}")
                report.conflicts.append(
                    ConflictItem(
                        conflicting_tasks=[task],
                        reason=f"Fixed occurrence at {start.isoformat(timespec='minutes')} "
                        "falls outside working hours or scope",
                        conflict_type=ConflictType.OUTSIDE_WORK_HOURS,
                        conflict_time=start,
                    )
                )
                continue

            result = timeline.place(task.id, start, duration, day=start.date())

            if result.status == PlacementStatus.SUCCESS:
                block = result.blocks[0]
                self._logger.debug(f"Placed fixed task {task.id} at {start}")
                report.scheduled.append(
                    ScheduledTaskItem(
                        task=task,
                        start_time=block.start.time(),
                        end_time=block.end.time(),
                        date=start.date(),
                    )
                )
            elif result.status == PlacementStatus.CONFLICT:
                self._logger.info(
                    f"Conflict placing fixed task {task.id} at {start} "
                    f"(overlaps task {result.conflicting_task_id})"
                )
                involved = [task]
                occupying = tasks_by_id.get(result.conflicting_task_id) if result.conflicting_task_id is not None else None
                if occupying is not None:
                    involved.append(occupying)
                report.conflicts.append(
                    ConflictItem(
                        conflicting_tasks=involved,
                        reason=f"Fixed time slot conflict at {start.isoformat(timespec='minutes')}",
                        conflict_type=ConflictType.FIXED_VS_FIXED,
                        conflict_time=start,
                    )
                )
            elif result.status == PlacementStatus.FAILURE:
                self._logger.info(f"Failed placing fixed task {task.id} at {start}: {result.reason}")
                report.conflicts.append(
                    ConflictItem(
                        conflicting_tasks=[task],
                        reason=result.reason or f"Unknown error placing fixed task at {start}",
                        conflict_type=ConflictType.PLACEMENT_ERROR,
                        conflict_time=start,
                    )
                )

        self._logger.info(
            f"Fixed placement: {len(report.scheduled)} placed, {len(report.conflicts)} conflicts"
        )
        return report

    @staticmethod
    def _is_outside_window(
        timeline: Timeline,
        start: datetime,
        end: datetime,
        window_start: date,
        window_end: date,
    ) -> bool:
        if not window_start <= start.date() <= window_end:
            return True
        if _spans_midnight(start, end):
            return True
        bounds = timeline.bounds(start.date())
        if bounds is None:
            return True
        day_start, day_end = bounds
        return start < day_start or end > day_end
