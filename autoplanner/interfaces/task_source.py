"""
Task source and sink interfaces.

The planner reads its snapshot from a source and writes accepted schedules
to a sink. Implementations: in-memory (local)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from autoplanner.models.task import Task, TaskScheduleUpdate


class ITaskSource(ABC):
    """Abstract interface for reading the task snapshot."""

    @abstractmethod
    async def list_tasks(self, include_completed: bool = False) -> list[Task]:
        """
        List tasks for planning.

        Args:
            include_completed: Include completed tasks

        Returns:
            Tasks in stable storage order
        """
        pass

    @abstractmethod
    async def get(self, task_id: int) -> Optional[Task]:
        """
        Get a task by ID.

        Args:
            task_id: Task ID

        Returns:
            Task if found, None otherwise
        """
        pass


class ITaskSink(ABC):
    """Abstract interface for persisting schedule results."""

    @abstractmethod
    async def update_schedule(self, task_id: int, update: TaskScheduleUpdate) -> Task:
        """
        Store the scheduled start/end of a task.

        Args:
            task_id: Task ID
            update: Scheduled start and end

        Returns:
            Updated task

        Raises:
            NotFoundError: If the task does not exist
        """
        pass
