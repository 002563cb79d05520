# tests/test_commands.py

from __future__ import annotations

import pytest

from tasktrack.cli.commands import CommandRegistry, registry
from tasktrack.tasks import task_store as task_store_mod
from tasktrack.tasks.task_models import Priority, Status

from .fakes import FailingWriter


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bb"])

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/BB y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_parses_flags_and_description(state) -> None:
    emitted: list[str] = []
    reply = registry.handle(
        state,
        "/add -p u -t bug,prod -d 2030-01-31 Fix critical bug -- Users report crashes",
        emit=emitted.append,
    )
    assert reply == "Added task #1: Fix critical bug"
    assert emitted == ["Saved task #1."]

    task = state.task_store.get_task(1)
    assert task.priority == Priority.URGENT
    assert task.tags == ["bug", "prod"]
    assert task.description == "Users report crashes"
    assert task.due_date.strftime("%Y-%m-%d") == "2030-01-31"


def test_add_rejects_bad_input(state) -> None:
    assert (registry.handle(state, "/add") or "").startswith("Usage")
    assert "Unknown priority" in (registry.handle(state, "/add -p zz title") or "")
    assert "Invalid due date" in (registry.handle(state, "/add -d tomorrow title") or "")
    assert "Missing value" in (registry.handle(state, "/add title -t") or "")
    assert len(state.task_store.list_tasks()) == 0


def test_list_search_and_status_commands(state) -> None:
    registry.handle(state, "/add -p low -t docs Write docs")
    registry.handle(state, "/add -p urgent Fix bug")

    listing = registry.handle(state, "/list") or ""
    assert listing.index("Fix bug") < listing.index("Write docs")

    assert registry.handle(state, "/done 1") == "Completed task #1: Write docs"
    assert registry.handle(state, "/start 2") == "Started task #2: Fix bug"
    assert state.task_store.get_task(1).status == Status.COMPLETED

    completed = registry.handle(state, "/list completed") or ""
    assert "Write docs" in completed and "Fix bug" not in completed

    found = registry.handle(state, "/search DOCS") or ""
    assert "#docs" in found and "Fix bug" not in found

    stats = registry.handle(state, "/stats") or ""
    assert "Total: 2" in stats
    assert "Completed: 1 (50.0%)" in stats
    assert "Urgent: 1" in stats

    assert registry.handle(state, "/cancel 2") == "Cancelled task #2: Fix bug"
    assert registry.handle(state, "/rm 2") == "Deleted task #2: Fix bug"
    assert state.task_store.get_task(2) is None


def test_errors_become_replies(state, monkeypatch: pytest.MonkeyPatch) -> None:
    assert registry.handle(state, "/done 7") == "Task not found: 7"
    assert registry.handle(state, "/delete abc") == "Error: Invalid task id: abc"
    assert registry.handle(state, "/start") == "Error: Usage: /start <id>"
    assert "Unknown status" in (registry.handle(state, "/list someday") or "")

    monkeypatch.setattr(task_store_mod, "write_tasks_file", FailingWriter())
    assert (registry.handle(state, "/add title") or "").startswith("Storage error:")


def test_help_lists_commands(state) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("add", "list", "search", "start", "done", "cancel", "delete", "stats"):
        assert f"/{name}" in text
