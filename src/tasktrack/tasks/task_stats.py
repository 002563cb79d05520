# src/tasktrack/tasks/task_stats.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .task_models import Priority, Status, Task


@dataclass(frozen=True, slots=True)
class TaskStatistics:
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    cancelled: int = 0
    # Urgent and not completed (cancelled urgent tasks still count).
    urgent: int = 0

    @property
    def completion_rate(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.completed / self.total * 100.0


def compute_statistics(tasks: Iterable[Task]) -> TaskStatistics:
    """Single pass over the collection; read-only."""
    counts = {status: 0 for status in Status}
    total = 0
    urgent = 0
    for task in tasks:
        total += 1
        counts[task.status] += 1
        if task.priority == Priority.URGENT and task.status != Status.COMPLETED:
            urgent += 1

    return TaskStatistics(
        total=total,
        completed=counts[Status.COMPLETED],
        pending=counts[Status.PENDING],
        in_progress=counts[Status.IN_PROGRESS],
        cancelled=counts[Status.CANCELLED],
        urgent=urgent,
    )
