"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class PlannerError(Exception):
    """Base exception for autoplanner."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(PlannerError):
    """Resource not found."""

    pass


class ValidationError(PlannerError):
    """Validation error."""

    pass


class RecurrenceError(PlannerError):
    """Recurrence expansion failed (date arithmetic out of range)."""

    def __init__(self, message: str, task_id: int):
        super().__init__(message, details={"task_id": task_id})
        self.task_id = task_id
