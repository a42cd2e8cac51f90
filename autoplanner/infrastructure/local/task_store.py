"""
In-memory implementation of the task source and sink.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, Optional

from autoplanner.core.exceptions import NotFoundError
from autoplanner.interfaces.task_source import ITaskSink, ITaskSource
from autoplanner.models.task import Task, TaskScheduleUpdate


class InMemoryTaskStore(ITaskSource, ITaskSink):
    """Dict-backed task store keeping insertion order."""

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        """
        Initialize store.

        Args:
            tasks: Optional initial tasks
        """
        self._tasks: dict[int, Task] = {}
        self._lock = asyncio.Lock()
        for task in tasks or ():
            self._tasks[task.id] = task

    async def add(self, task: Task) -> Task:
        async with self._lock:
            self._tasks[task.id] = task
            return task

    async def list_tasks(self, include_completed: bool = False) -> list[Task]:
        """List tasks in insertion order."""
        return [
            task for task in self._tasks.values() if include_completed or not task.is_completed
        ]

    async def get(self, task_id: int) -> Optional[Task]:
        return self._tasks.get(task_id)

    async def update_schedule(self, task_id: int, update: TaskScheduleUpdate) -> Task:
        """Replace the stored task with a copy carrying the new schedule."""
        async with self._lock:
            task = self._tasks.get(task_id)
            if not task:
                raise NotFoundError(f"Task {task_id} not found")

            updated = task.model_copy(update=update.model_dump())
            self._tasks[task_id] = updated
            return updated
