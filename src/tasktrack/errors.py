# src/tasktrack/errors.py

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for task store failures."""


class StorageError(TaskStoreError):
    """
    The backing file could not be located, created, read or written.

    Raised from TaskStore construction (path resolution) and from every
    persisting operation. A corrupt data file on load is the one case the
    store recovers from locally.
    """


class TaskNotFoundError(TaskStoreError, KeyError):
    def __init__(self, task_id: int) -> None:
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"Task not found: {self.task_id}"
