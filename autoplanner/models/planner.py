"""
Planner input/output models.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field

from autoplanner.models.enums import (
    ConflictType,
    DayOrganization,
    OverdueTaskHandling,
    PlacementHeuristic,
    PrioritizationStrategy,
    ScheduleScope,
)
from autoplanner.models.task import Task
from autoplanner.utils.datetime_utils import truncate_to_minute


class PlannerInput(BaseModel):
    """Everything one planning run needs besides the current instant."""

    tasks: list[Task] = Field(default_factory=list)
    work_start_time: time = Field(time(8, 0), description="Start of the daily work window")
    work_end_time: time = Field(time(20, 0), description="End of the daily work window")
    schedule_scope: ScheduleScope = ScheduleScope.TODAY
    prioritization_strategy: PrioritizationStrategy = PrioritizationStrategy.URGENT_FIRST
    day_organization: DayOrganization = DayOrganization.MAXIMIZE_PRODUCTIVITY
    placement_heuristic: PlacementHeuristic = PlacementHeuristic.EARLIEST_FIT
    allow_splitting: bool = False
    overdue_task_handling: OverdueTaskHandling = OverdueTaskHandling.MANAGE_WHEN_FREE


class ScheduledTaskItem(BaseModel):
    """One placed block of a task on a specific date."""

    task: Task
    start_time: time
    end_time: time
    date: date


class ConflictItem(BaseModel):
    """A planning problem the caller has to resolve."""

    conflicting_tasks: list[Task]
    reason: str = "Overlap or resource contention"
    conflict_type: ConflictType = ConflictType.PLACEMENT_ERROR
    conflict_time: Optional[datetime] = None

    def identity_key(self) -> tuple:
        """Structural identity used for de-duplication."""
        return (
            tuple(sorted(task.id for task in self.conflicting_tasks)),
            self.reason,
            truncate_to_minute(self.conflict_time),
        )


class InfoItem(BaseModel):
    """Informational note about how a task was handled."""

    task: Optional[Task] = None
    message: str
    relevant_date: Optional[date] = None


class PlannerOutput(BaseModel):
    """Result of one planning run."""

    scheduled_tasks: dict[date, list[ScheduledTaskItem]] = Field(default_factory=dict)
    unresolved_expired: list[Task] = Field(default_factory=list)
    unresolved_conflicts: list[ConflictItem] = Field(default_factory=list)
    postponed_tasks: list[Task] = Field(default_factory=list)
    info_items: list[InfoItem] = Field(default_factory=list)

    @property
    def scheduled_count(self) -> int:
        return sum(len(items) for items in self.scheduled_tasks.values())
