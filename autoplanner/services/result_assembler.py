"""
Collects placement outcomes into a PlannerOutput.

The assembler is the only place that turns timeline outcomes into
user-facing data; it also owns de-duplication and ordering of the result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional

from autoplanner.models.enums import ConflictType
from autoplanner.models.planner import (
    ConflictItem,
    InfoItem,
    PlannerOutput,
    ScheduledTaskItem,
)
from autoplanner.models.task import Task
from autoplanner.services.fixed_placement import FixedPlacementReport
from autoplanner.services.flexible_placement import (
    CANNOT_FIT_PERIOD_REASON,
    NO_SLOT_REASON,
    FlexiblePlacement,
)
from autoplanner.services.task_classifier import task_fits_scope
from autoplanner.services.timeline import PlacementStatus

NO_SLOT_MESSAGE = "Could not find suitable time slot"
PERIOD_MESSAGE = "Could not fit task into its day period"


@dataclass
class ResultAssembler:
    """Accumulates the pieces of one planning run."""

    now: datetime
    window_start: date
    window_end: date
    tasks_by_id: dict[int, Task] = field(default_factory=dict)
    # Items keyed by timeline date, each with its absolute start for ordering
    scheduled: dict[date, list[tuple[datetime, ScheduledTaskItem]]] = field(default_factory=dict)
    expired: list[Task] = field(default_factory=list)
    conflicts: list[ConflictItem] = field(default_factory=list)
    postponed: list[Task] = field(default_factory=list)
    info_items: list[InfoItem] = field(default_factory=list)

    def add_item(self, item: ScheduledTaskItem, start: Optional[datetime] = None) -> None:
        start = start or datetime.combine(item.date, item.start_time)
        self.scheduled.setdefault(item.date, []).append((start, item))

    def add_fixed(self, report: FixedPlacementReport) -> None:
        for item in report.scheduled:
            self.add_item(item)
        self.conflicts.extend(report.conflicts)

    def add_flexible(self, placements: Iterable[FlexiblePlacement]) -> None:
        """Translate flexible outcomes into schedule items, conflicts or expired tasks."""
        for placement in placements:
            task = placement.task
            result = placement.result

            if result.status == PlacementStatus.SUCCESS:
                for block in result.blocks:
                    self.add_item(
                        ScheduledTaskItem(
                            task=task,
                            start_time=block.start.time(),
                            end_time=block.end.time(),
                            date=block.day or block.start.date(),
                        ),
                        start=block.start,
                    )
            elif result.status == PlacementStatus.CONFLICT:
                involved = [task]
                competitor = self._lookup(result.conflicting_task_id)
                if competitor is not None:
                    involved.append(competitor)
                self.conflicts.append(
                    ConflictItem(
                        conflicting_tasks=involved,
                        reason=result.reason or "Scheduling conflict",
                        conflict_type=ConflictType.PLACEMENT_ERROR,
                        conflict_time=result.conflict_time,
                    )
                )
            elif self._expired_in_window(task):
                self.expired.append(task)
            elif result.reason == CANNOT_FIT_PERIOD_REASON:
                self.conflicts.append(
                    ConflictItem(
                        conflicting_tasks=[task],
                        reason=PERIOD_MESSAGE,
                        conflict_type=ConflictType.CANNOT_FIT_PERIOD,
                    )
                )
            elif result.reason == NO_SLOT_REASON:
                self.conflicts.append(
                    ConflictItem(
                        conflicting_tasks=[task],
                        reason=NO_SLOT_MESSAGE,
                        conflict_type=ConflictType.NO_SLOT_IN_SCOPE,
                    )
                )
            else:
                self.conflicts.append(
                    ConflictItem(
                        conflicting_tasks=[task],
                        reason=result.reason or NO_SLOT_MESSAGE,
                        conflict_type=ConflictType.PLACEMENT_ERROR,
                    )
                )

    def add_unattempted_expired(self, flexible: Iterable[Task], attempted_ids: set[int]) -> None:
        """Expired in-scope flexible tasks that never reached placement."""
        postponed_ids = {task.id for task in self.postponed}
        for task in flexible:
            if task.id in attempted_ids or task.id in postponed_ids:
                continue
            if not task.is_expired(self.now):
                continue
            if task_fits_scope(task, self.window_start, self.window_end, self.now):
                self.expired.append(task)

    def add_postponed(self, tasks: Iterable[Task]) -> None:
        self.postponed.extend(tasks)

    def add_info(self, items: Iterable[InfoItem]) -> None:
        self.info_items.extend(items)

    def build(self) -> PlannerOutput:
        """Produce the deduplicated, ordered output."""
        scheduled = {
            day: [item for _, item in sorted(entries, key=lambda entry: entry[0])]
            for day, entries in sorted(self.scheduled.items())
        }
        return PlannerOutput(
            scheduled_tasks=scheduled,
            unresolved_expired=_unique_by(self.expired, lambda task: task.id),
            unresolved_conflicts=_unique_by(self.conflicts, lambda conflict: conflict.identity_key()),
            postponed_tasks=_unique_by(self.postponed, lambda task: task.id),
            info_items=_unique_by(
                self.info_items,
                lambda info: (info.task.id if info.task else None, info.message),
            ),
        )

    def _lookup(self, task_id: Optional[int]) -> Optional[Task]:
        if task_id is None:
            return None
        return self.tasks_by_id.get(task_id)

    def _expired_in_window(self, task: Task) -> bool:
        deadline = task.deadline
        if deadline is None or deadline >= self.now:
            return False
        # Overdue tasks from before the window count as expired in it
        return deadline.date() <= self.window_end


def _unique_by(items: list, key) -> list:
    """Keep the first item for each key, preserving order."""
    seen = set()
    unique = []
    for item in items:
        marker = key(item)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(item)
    return unique
