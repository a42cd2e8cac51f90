"""Pydantic models (schemas) for the planner."""

from autoplanner.models.enums import (
    ConflictType,
    DayOrganization,
    DayPeriod,
    FrequencyType,
    IntervalUnit,
    OverdueTaskHandling,
    PlacementHeuristic,
    PrioritizationStrategy,
    Priority,
    ScheduleScope,
    Weekday,
)
from autoplanner.models.task import RepeatPlan, Task, TaskScheduleUpdate, TimePlanning
from autoplanner.models.planner import (
    ConflictItem,
    InfoItem,
    PlannerInput,
    PlannerOutput,
    ScheduledTaskItem,
)

__all__ = [
    # Enums
    "ConflictType",
    "DayOrganization",
    "DayPeriod",
    "FrequencyType",
    "IntervalUnit",
    "OverdueTaskHandling",
    "PlacementHeuristic",
    "PrioritizationStrategy",
    "Priority",
    "ScheduleScope",
    "Weekday",
    # Task
    "RepeatPlan",
    "Task",
    "TaskScheduleUpdate",
    "TimePlanning",
    # Planner
    "ConflictItem",
    "InfoItem",
    "PlannerInput",
    "PlannerOutput",
    "ScheduledTaskItem",
]
