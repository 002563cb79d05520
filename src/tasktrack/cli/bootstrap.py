# src/tasktrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- resolves the storage location (fatal if it cannot be created),
- wires the concrete TaskStore into AppState.
"""

from __future__ import annotations

import logging

from ..config import Settings, get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings: Settings | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    Raises StorageError if the data directory cannot be resolved or created.
    """
    if settings is None:
        settings = get_settings()

    store = TaskStore(data_dir=settings.data_dir, file_name=settings.tasks_file_name)
    if store.load_error:
        logger.warning("Started with an empty task list: %s", store.load_error)

    return AppState(settings=settings, task_store=store)
