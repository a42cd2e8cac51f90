"""Abstract interfaces for infrastructure abstraction."""

from autoplanner.interfaces.task_source import ITaskSink, ITaskSource

__all__ = [
    "ITaskSource",
    "ITaskSink",
]
