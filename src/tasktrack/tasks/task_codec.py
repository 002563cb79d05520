# src/tasktrack/tasks/task_codec.py

"""
JSON codec for the task collection.

File layout: one JSON object mapping decimal string ids to task objects:

    {"1": {"id": 1, "title": "...", "description": null, "priority": "High",
           "status": "Pending", "tags": ["a"], "created_at": "<iso>", ...}}

Datetimes are ISO-8601 strings (or null). The whole file is rewritten on
every save: write to a sibling temp file, then os.replace onto the target.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from ..errors import StorageError
from .task_models import Priority, Status, Task

logger = logging.getLogger(__name__)

APP_DIR_NAME = ".task_manager"
TASKS_FILE_NAME = "tasks.json"


def resolve_storage_path(
    data_dir: str | Path | None = None,
    file_name: str = TASKS_FILE_NAME,
) -> Path:
    """
    Return the tasks file path, creating its directory if needed.

    data_dir=None means "<home>/.task_manager". Failing to find the home
    directory or to create the directory is fatal (StorageError).
    """
    if data_dir is None:
        try:
            home = Path.home()
        except RuntimeError as e:
            raise StorageError("Could not find home directory") from e
        app_dir = home / APP_DIR_NAME
    else:
        app_dir = Path(data_dir).expanduser()

    try:
        app_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Failed to create app directory {app_dir}") from e

    return app_dir / file_name


# ---- datetime helpers ----


def _dt_to_str(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _str_to_dt(raw: Any, field_name: str) -> datetime | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise StorageError(f"{field_name}: expected ISO datetime string, got {type(raw).__name__}")
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError as e:
        raise StorageError(f"{field_name}: invalid datetime {raw!r}") from e
    if dt.tzinfo is not None:
        return dt
    # Naive values (hand-edited files) are read as local time.
    try:
        return dt.astimezone()
    except (ValueError, OverflowError, OSError) as e:
        raise StorageError(f"{field_name}: datetime out of range {raw!r}") from e


# ---- task <-> dict ----


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "priority": task.priority.value,
        "status": task.status.value,
        "tags": list(task.tags),
        "created_at": _dt_to_str(task.created_at),
        "updated_at": _dt_to_str(task.updated_at),
        "completed_at": _dt_to_str(task.completed_at),
        "due_date": _dt_to_str(task.due_date),
    }


def task_from_dict(raw: Any) -> Task:
    if not isinstance(raw, dict):
        raise StorageError("Task entry must be a JSON object")

    try:
        task_id = raw["id"]
        title = raw["title"]
        priority_raw = raw["priority"]
        status_raw = raw["status"]
        created_raw = raw["created_at"]
        updated_raw = raw["updated_at"]
    except KeyError as e:
        raise StorageError(f"Task entry is missing field {e.args[0]!r}") from e

    if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id < 0:
        raise StorageError(f"Invalid task id: {task_id!r}")
    if not isinstance(title, str):
        raise StorageError(f"Task {task_id}: title must be a string")

    description = raw.get("description")
    if description is not None and not isinstance(description, str):
        raise StorageError(f"Task {task_id}: description must be a string or null")

    tags = raw.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise StorageError(f"Task {task_id}: tags must be a list of strings")

    try:
        priority = Priority(priority_raw)
        status = Status(status_raw)
    except ValueError as e:
        raise StorageError(f"Task {task_id}: {e}") from e

    created_at = _str_to_dt(created_raw, "created_at")
    updated_at = _str_to_dt(updated_raw, "updated_at")
    if created_at is None or updated_at is None:
        raise StorageError(f"Task {task_id}: created_at/updated_at are required")

    return Task(
        id=task_id,
        title=title,
        priority=priority,
        status=status,
        created_at=created_at,
        updated_at=updated_at,
        description=description,
        tags=list(tags),
        completed_at=_str_to_dt(raw.get("completed_at"), "completed_at"),
        due_date=_str_to_dt(raw.get("due_date"), "due_date"),
    )


# ---- collection <-> text ----


def encode_tasks(tasks: Mapping[int, Task]) -> str:
    payload = {str(task_id): task_to_dict(task) for task_id, task in tasks.items()}
    return json.dumps(payload, ensure_ascii=False, indent=2)


def decode_tasks(text: str) -> dict[int, Task]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StorageError(f"Malformed JSON: {e}") from e
    except RecursionError as e:
        raise StorageError("Malformed JSON: nesting too deep") from e

    if not isinstance(data, dict):
        raise StorageError("Expected a JSON object mapping ids to tasks")

    out: dict[int, Task] = {}
    for key, raw in data.items():
        try:
            task_id = int(key)
        except ValueError as e:
            raise StorageError(f"Invalid task key: {key!r}") from e
        if task_id in out:
            raise StorageError(f"Duplicate task key: {key!r}")
        task = task_from_dict(raw)
        if task.id != task_id:
            raise StorageError(f"Task key {key!r} does not match id {task.id}")
        out[task_id] = task
    return out


# ---- file I/O ----


def read_tasks_file(path: Path) -> dict[int, Task]:
    """
    Load the collection from disk.

    FileNotFoundError propagates unchanged (callers treat it as "no data yet").
    Anything else unreadable or malformed is a StorageError.
    """
    try:
        text = path.read_text("utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"Failed to read tasks file {path}") from e
    return decode_tasks(text)


def write_tasks_file(path: Path, tasks: Mapping[int, Task]) -> None:
    """Rewrite the whole file atomically (temp file + os.replace)."""
    data = encode_tasks(tasks)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(data, "utf-8")
        os.replace(tmp, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise StorageError(f"Failed to write tasks file {path}") from e
    logger.debug("Saved %d tasks to %s", len(tasks), path)
