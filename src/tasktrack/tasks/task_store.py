# src/tasktrack/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

from ..errors import StorageError, TaskNotFoundError
from .task_codec import TASKS_FILE_NAME, read_tasks_file, resolve_storage_path, write_tasks_file
from .task_models import Status, Task
from .task_stats import TaskStatistics, compute_statistics

logger = logging.getLogger(__name__)


class TaskStore:
    """
    JSON-file task store.

    The whole collection lives in memory (dict keyed by id) and is mirrored
    to a single JSON file:
    - every persisting call rewrites the whole file
    - a missing file means "empty store"; a corrupt file also degrades to an
      empty store, is logged, and is kept in `load_error`
    - only path resolution (home dir / directory creation) is fatal

    Thread-safety:
    - none; callers sharing a store across threads must hold one lock around
      every call (see AppState.lock)

    Mutating a Task returned by get_task() in place is NOT durable until
    save() (or another persisting call) runs. Prefer start_task /
    complete_task / cancel_task, which persist immediately.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        data_dir: str | Path | None = None,
        file_name: str = TASKS_FILE_NAME,
    ) -> None:
        if path is None:
            self._path = resolve_storage_path(data_dir, file_name)
        else:
            self._path = Path(path).expanduser()
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Failed to create app directory {self._path.parent}") from e

        self._tasks: dict[int, Task] = {}
        self._next_id = 1
        self.load_error: str | None = None

        self._load()
        logger.info("TaskStore ready path=%s total=%s", self._path, len(self._tasks))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    # ---- persistence ----

    def _load(self) -> None:
        try:
            tasks = read_tasks_file(self._path)
        except FileNotFoundError:
            logger.info("No existing data at %s; starting empty.", self._path)
            return
        except StorageError as e:
            self.load_error = str(e)
            logger.warning("Ignoring unreadable tasks file %s (%s); starting empty.", self._path, e)
            return

        self._tasks = tasks
        if tasks:
            self._next_id = max(tasks) + 1
        logger.debug("Loaded %d tasks from %s next_id=%s", len(tasks), self._path, self._next_id)

    def save(self) -> None:
        """Flush the whole collection to disk. Raises StorageError on failure."""
        try:
            write_tasks_file(self._path, self._tasks)
        except StorageError:
            logger.exception("Failed to save tasks to %s", self._path)
            raise

    # ---- public API ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def add_task(self, task: Task) -> int:
        """
        Insert a task under a freshly assigned id and persist.

        The caller-supplied id is overwritten. If the write fails the insert
        is rolled back, but the id is not handed out again.
        """
        if any(t is task for t in self._tasks.values()):
            raise ValueError(f"Task object is already stored as id {task.id}")

        task_id = self._next_id
        self._next_id += 1
        task.id = task_id
        self._tasks[task_id] = task

        try:
            self.save()
        except StorageError:
            del self._tasks[task_id]
            raise

        logger.debug(
            "Task added id=%s priority=%s title=%r",
            task_id,
            task.priority.value,
            task.title,
        )
        return task_id

    def get_task(self, task_id: int) -> Task | None:
        """Live task object (not a copy); in-place edits need save() to persist."""
        return self._tasks.get(task_id)

    def require_task(self, task_id: int) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def delete_task(self, task_id: int) -> Task:
        task = self._tasks.pop(task_id, None)
        if task is None:
            raise TaskNotFoundError(task_id)

        try:
            self.save()
        except StorageError:
            self._tasks[task_id] = task
            raise

        logger.debug("Task deleted id=%s", task_id)
        return task

    def _transition(self, task_id: int, apply: Callable[[Task], None]) -> Task:
        task = self.require_task(task_id)
        before = (task.status, task.updated_at, task.completed_at)
        apply(task)
        try:
            self.save()
        except StorageError:
            task.status, task.updated_at, task.completed_at = before
            raise
        logger.debug("Task status changed id=%s %s -> %s", task_id, before[0].value, task.status.value)
        return task

    def start_task(self, task_id: int) -> Task:
        return self._transition(task_id, Task.start)

    def complete_task(self, task_id: int) -> Task:
        return self._transition(task_id, Task.complete)

    def cancel_task(self, task_id: int) -> Task:
        return self._transition(task_id, Task.cancel)

    def list_tasks(self, status: Status | None = None) -> list[Task]:
        """
        All tasks, optionally only those with `status`.

        Order: most urgent priority first; within a band, newest first.
        """
        tasks = [t for t in self._tasks.values() if status is None or t.status == status]
        tasks.sort(key=lambda t: (-t.created_at.timestamp(), -t.id))
        tasks.sort(key=lambda t: t.priority.rank)
        return tasks

    def search_tasks(self, query: str) -> list[Task]:
        """Case-insensitive substring match on title, description or any tag."""
        q = query.lower()
        out: list[Task] = []
        for task in self._tasks.values():
            if q in task.title.lower():
                out.append(task)
            elif task.description is not None and q in task.description.lower():
                out.append(task)
            elif any(q in tag.lower() for tag in task.tags):
                out.append(task)
        return out

    def get_statistics(self) -> TaskStatistics:
        return compute_statistics(self._tasks.values())
