# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasktrack.config import Settings
from tasktrack.core.state import AppState
from tasktrack.tasks.task_store import TaskStore


@pytest.fixture()
def tasks_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "tasks.json"


@pytest.fixture()
def store(tasks_path: Path) -> TaskStore:
    """Real JSON-backed store in a per-test tmp dir."""
    return TaskStore(tasks_path)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings built directly rather than from the environment,
    to keep unit tests isolated and deterministic.
    """
    return Settings(
        app_name="tasktrack-test",
        log_level="DEBUG",
        log_file_enabled=False,
        data_dir=tmp_path / "data",
        tasks_file_name="tasks.json",
    )


@pytest.fixture()
def state(settings: Settings, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store)
