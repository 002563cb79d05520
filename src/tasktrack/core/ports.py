# src/tasktrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the command layer.

Commands depend on this Protocol instead of TaskStore directly, so tests can
hand in an in-memory fake without touching the filesystem.
"""

from typing import Any, Protocol


class TaskRepo(Protocol):
    # Creation / removal (each persists)
    def add_task(self, task: Any) -> int: ...
    def delete_task(self, task_id: int) -> Any: ...

    # Status changes (each persists)
    def start_task(self, task_id: int) -> Any: ...
    def complete_task(self, task_id: int) -> Any: ...
    def cancel_task(self, task_id: int) -> Any: ...

    # Queries (memory only)
    def get_task(self, task_id: int) -> Any | None: ...
    def list_tasks(self, status: Any | None = None) -> list[Any]: ...
    def search_tasks(self, query: str) -> list[Any]: ...
    def get_statistics(self) -> Any: ...

    # Explicit flush after in-place edits
    def save(self) -> None: ...
