"""
Task model definitions.

Tasks are the planner's input. The engine reads them and never mutates
them; schedule changes flow back to storage through TaskScheduleUpdate.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from autoplanner.models.enums import DayPeriod, FrequencyType, IntervalUnit, Priority, Weekday

DEFAULT_TASK_MINUTES = 60


class TimePlanning(BaseModel):
    """An exact date-time, a symbolic day period, or a date plus a period."""

    date_time: Optional[datetime] = Field(None, description="Exact date-time (or the date for a period)")
    day_period: DayPeriod = Field(DayPeriod.NONE, description="Symbolic time of day")

    @model_validator(mode="after")
    def normalize_all_day(self):
        """All-day plans are anchored to midnight."""
        if self.day_period == DayPeriod.ALLDAY and self.date_time is not None:
            self.date_time = datetime.combine(self.date_time.date(), time.min)
        return self

    @property
    def has_period(self) -> bool:
        return self.day_period != DayPeriod.NONE

    @property
    def date(self) -> Optional[date]:
        return self.date_time.date() if self.date_time else None


class RepeatPlan(BaseModel):
    """Recurrence rule of a task."""

    frequency: FrequencyType = FrequencyType.NONE
    interval: int = Field(1, ge=1, description="Step count in the frequency's unit")
    interval_unit: Optional[IntervalUnit] = Field(
        None, description="Unit of interval, for CUSTOM frequency"
    )
    selected_days: set[Weekday] = Field(
        default_factory=set, description="Weekdays to repeat on, for WEEKLY frequency"
    )
    end_date: Optional[date] = Field(None, description="Last date an occurrence may fall on")
    max_occurrences: Optional[int] = Field(
        None, ge=1, description="Cap on occurrences counted from the first one"
    )

    @property
    def is_enabled(self) -> bool:
        return self.frequency != FrequencyType.NONE


class Task(BaseModel):
    """Task snapshot as seen by the planner."""

    id: int
    name: str = Field(..., max_length=500, description="Task name")
    priority: Priority = Field(Priority.NONE, description="Priority tier")
    start_plan: Optional[TimePlanning] = Field(None, description="Exact start or day period")
    end_plan: Optional[TimePlanning] = Field(None, description="Deadline")
    duration_minutes: Optional[int] = Field(None, description="Planned duration in minutes")
    repeat_plan: Optional[RepeatPlan] = None
    is_completed: bool = False
    allow_splitting: Optional[bool] = Field(
        None, description="Per-task override of the planner's splitting flag"
    )
    scheduled_start_time: Optional[datetime] = Field(None, description="Last persisted plan start")
    scheduled_end_time: Optional[datetime] = Field(None, description="Last persisted plan end")

    @model_validator(mode="after")
    def validate_task(self):
        """Reject blank names, inverted start/deadline and negative durations."""
        if not self.name.strip():
            raise ValueError("Task name must not be empty")
        if self.start_datetime and self.deadline and self.start_datetime > self.deadline:
            raise ValueError("Start must not be after the deadline")
        if self.duration_minutes is not None and self.duration_minutes < 0:
            raise ValueError("Duration must not be negative")
        return self

    @property
    def start_datetime(self) -> Optional[datetime]:
        return self.start_plan.date_time if self.start_plan else None

    @property
    def deadline(self) -> Optional[datetime]:
        return self.end_plan.date_time if self.end_plan else None

    @property
    def has_period(self) -> bool:
        return self.start_plan is not None and self.start_plan.has_period

    @property
    def has_exact_start(self) -> bool:
        """Concrete clock time with no symbolic period."""
        return self.start_datetime is not None and not self.has_period

    @property
    def is_recurring(self) -> bool:
        return self.repeat_plan is not None and self.repeat_plan.is_enabled

    def effective_duration_minutes(self, default_minutes: int = DEFAULT_TASK_MINUTES) -> int:
        if self.duration_minutes is None:
            return max(0, default_minutes)
        return max(0, self.duration_minutes)

    def is_expired(self, now: datetime) -> bool:
        """
        Check whether the task can no longer be done on time.

        A deadline in the past expires the task. Without a deadline, an exact
        start on an earlier day with no explicit duration counts as expired.
        """
        if self.deadline is not None:
            return self.deadline < now
        if self.start_datetime is not None and self.duration_minutes is None:
            return self.start_datetime.date() < now.date()
        return False


class TaskScheduleUpdate(BaseModel):
    """Schedule fields written back to storage after a plan is accepted."""

    scheduled_start_time: datetime
    scheduled_end_time: datetime
