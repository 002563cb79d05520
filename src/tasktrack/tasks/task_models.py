# src/tasktrack/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


def now_local() -> datetime:
    return datetime.now().astimezone()


class Priority(StrEnum):
    """
    Task priority band.

    The stored value is the capitalised name; `rank` gives the sort order
    (most urgent first) and `label` the short display code.
    """

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @property
    def label(self) -> str:
        return _PRIORITY_LABEL[self]

    @classmethod
    def parse(cls, raw: str) -> Priority:
        key = (raw or "").strip().lower()
        for prio, aliases in _PRIORITY_ALIASES.items():
            if key in aliases:
                return prio
        raise ValueError(f"Unknown priority: {raw}")


_PRIORITY_RANK = {
    Priority.URGENT: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}

_PRIORITY_LABEL = {
    Priority.LOW: "LOW",
    Priority.MEDIUM: "MED",
    Priority.HIGH: "HIGH",
    Priority.URGENT: "URGENT",
}

_PRIORITY_ALIASES = {
    Priority.LOW: ("low", "l"),
    Priority.MEDIUM: ("medium", "med", "m"),
    Priority.HIGH: ("high", "h"),
    Priority.URGENT: ("urgent", "u"),
}


class Status(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - transitions are not enforced: start/complete/cancel assign unconditionally
    - nothing moves a task out of COMPLETED/CANCELLED automatically
    """

    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def label(self) -> str:
        return _STATUS_LABEL[self]

    @property
    def symbol(self) -> str:
        return _STATUS_SYMBOL[self]

    @classmethod
    def parse(cls, raw: str) -> Status:
        key = (raw or "").strip().lower().replace("-", "_")
        for status in cls:
            if key in (status.value.lower(), status.label.lower()):
                return status
        raise ValueError(f"Unknown status: {raw}")


_STATUS_LABEL = {
    Status.PENDING: "PENDING",
    Status.IN_PROGRESS: "IN_PROGRESS",
    Status.COMPLETED: "COMPLETED",
    Status.CANCELLED: "CANCELLED",
}

_STATUS_SYMBOL = {
    Status.PENDING: "⏳",
    Status.IN_PROGRESS: "🔄",
    Status.COMPLETED: "✅",
    Status.CANCELLED: "❌",
}


@dataclass(slots=True)
class Task:
    id: int
    title: str
    priority: Priority
    status: Status
    created_at: datetime
    updated_at: datetime

    description: str | None = None
    tags: list[str] = field(default_factory=list)
    completed_at: datetime | None = None
    due_date: datetime | None = None

    @classmethod
    def new(cls, id: int, title: str, priority: Priority) -> Task:
        """Fresh pending task. The id is provisional; TaskStore.add_task replaces it."""
        now = now_local()
        return cls(
            id=id,
            title=title,
            priority=priority,
            status=Status.PENDING,
            created_at=now,
            updated_at=now,
        )

    # ---- builder-style setters ----

    def with_description(self, description: str) -> Task:
        self.description = description
        return self

    def with_tags(self, tags: list[str]) -> Task:
        self.tags = list(tags)
        return self

    def with_due_date(self, due: datetime) -> Task:
        self.due_date = due
        return self

    # ---- status mutators (unguarded) ----

    def complete(self) -> None:
        now = now_local()
        self.status = Status.COMPLETED
        self.completed_at = now
        self.updated_at = now

    def start(self) -> None:
        # completed_at is intentionally left as-is if the task was completed before.
        self.status = Status.IN_PROGRESS
        self.updated_at = now_local()

    def cancel(self) -> None:
        self.status = Status.CANCELLED
        self.updated_at = now_local()

    @property
    def is_open(self) -> bool:
        return self.status not in (Status.COMPLETED, Status.CANCELLED)
