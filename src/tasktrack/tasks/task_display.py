# src/tasktrack/tasks/task_display.py

from __future__ import annotations

from .task_models import Task
from .task_stats import TaskStatistics


def display_string(task: Task) -> str:
    """One-line plain-text rendering: symbol, priority, id, title, tags, due date."""
    parts = [task.status.symbol, f"[{task.priority.label}]", str(task.id), "-", task.title]
    if task.tags:
        parts.append(" ".join(f"#{t}" for t in task.tags))
    if task.due_date is not None:
        parts.append(f"due:{task.due_date.strftime('%Y-%m-%d')}")
    return " ".join(parts)


def format_statistics(stats: TaskStatistics) -> str:
    lines = [
        "Task Statistics:",
        f"  Total: {stats.total}",
        f"  Completed: {stats.completed} ({stats.completion_rate:.1f}%)",
        f"  Pending: {stats.pending}",
        f"  In Progress: {stats.in_progress}",
        f"  Cancelled: {stats.cancelled}",
    ]
    if stats.urgent > 0:
        lines.append(f"  Urgent: {stats.urgent}")
    return "\n".join(lines)
