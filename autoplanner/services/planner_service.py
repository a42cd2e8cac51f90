"""
Planner service.

Async glue between task storage and the synchronous PlanGenerator: loads
the snapshot, runs a planning call, and writes accepted plans back.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from autoplanner.core.config import get_settings
from autoplanner.core.exceptions import NotFoundError
from autoplanner.core.logger import setup_logger
from autoplanner.interfaces.task_source import ITaskSink, ITaskSource
from autoplanner.models.planner import PlannerInput, PlannerOutput, ScheduledTaskItem
from autoplanner.models.task import Task, TaskScheduleUpdate
from autoplanner.services.plan_generator import PlanGenerator
from autoplanner.utils.datetime_utils import now_local, parse_time_of_day

logger = setup_logger(__name__)


def _item_bounds(item: ScheduledTaskItem, day_offset: int = 0) -> tuple[datetime, datetime]:
    """Absolute start/end of a scheduled item; an end at or before the start is on the next day."""
    day = item.date + timedelta(days=day_offset)
    start = datetime.combine(day, item.start_time)
    end = datetime.combine(day, item.end_time)
    if end <= start:
        end += timedelta(days=1)
    return start, end


def schedule_updates(output: PlannerOutput) -> dict[int, TaskScheduleUpdate]:
    """
    Collapse a plan into one schedule update per task.

    A split task is stored as the start of its first chunk and the end of
    its last chunk. Items of one date are in start order, so a start time
    earlier than the previous one belongs to the next calendar day (work
    windows that run past midnight).
    """
    spans: dict[int, tuple[datetime, datetime]] = {}
    for items in output.scheduled_tasks.values():
        day_offset = 0
        previous = None
        for item in items:
            if previous is not None and item.start_time < previous:
                day_offset += 1
            previous = item.start_time
            start, end = _item_bounds(item, day_offset)
            current = spans.get(item.task.id)
            if current:
                start = min(start, current[0])
                end = max(end, current[1])
            spans[item.task.id] = (start, end)

    return {
        task_id: TaskScheduleUpdate(scheduled_start_time=start, scheduled_end_time=end)
        for task_id, (start, end) in spans.items()
    }


class PlannerService:
    """Runs planning against a task source and persists results through a sink."""

    def __init__(
        self,
        task_source: ITaskSource,
        task_sink: ITaskSink,
        generator: Optional[PlanGenerator] = None,
    ):
        self._task_source = task_source
        self._task_sink = task_sink
        self._generator = generator or PlanGenerator.from_settings(logger=logger)

    def default_input(self) -> PlannerInput:
        """Planner preferences with the configured work window."""
        settings = get_settings()
        return PlannerInput(
            work_start_time=parse_time_of_day(settings.DEFAULT_WORK_START),
            work_end_time=parse_time_of_day(settings.DEFAULT_WORK_END),
        )

    async def plan(
        self,
        preferences: Optional[PlannerInput] = None,
        now: Optional[datetime] = None,
    ) -> PlannerOutput:
        """
        Generate a plan for the current task snapshot.

        Args:
            preferences: Scheduling preferences; its task list is replaced
                by the source snapshot
            now: Current instant (defaults to local wall-clock time)

        Returns:
            PlannerOutput
        """
        tasks = await self._task_source.list_tasks()
        base = preferences or self.default_input()
        planner_input = base.model_copy(update={"tasks": tasks})
        now = now or now_local()

        logger.info(f"Planning {len(tasks)} tasks at {now.isoformat(timespec='minutes')}")
        return self._generator.generate_plan(planner_input, now)

    async def apply_plan(self, output: PlannerOutput) -> list[Task]:
        """
        Persist the scheduled start/end of every planned task.

        Raises:
            NotFoundError: If a planned task no longer exists in the source
        """
        updates = schedule_updates(output)

        for task_id in updates:
            if await self._task_source.get(task_id) is None:
                raise NotFoundError(f"Task {task_id} not found")

        updated: list[Task] = []
        for task_id, update in updates.items():
            updated.append(await self._task_sink.update_schedule(task_id, update))

        logger.info(f"Applied plan: {len(updated)} tasks updated")
        return updated
