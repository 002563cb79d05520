# tests/test_task_codec.py

from __future__ import annotations

import json
import random
from datetime import timedelta
from pathlib import Path

import pytest

from tasktrack.errors import StorageError
from tasktrack.tasks import task_codec
from tasktrack.tasks.task_codec import (
    decode_tasks,
    encode_tasks,
    read_tasks_file,
    resolve_storage_path,
    write_tasks_file,
)
from tasktrack.tasks.task_models import Priority, Status, Task

from .fakes import BASE_TIME, make_task


def _random_tasks(rng: random.Random, n: int) -> dict[int, Task]:
    words = ["fix", "Bug", "docs", "рефакторинг", "deploy", "", "tea"]
    out: dict[int, Task] = {}
    for i in range(1, n + 1):
        task = make_task(
            i,
            " ".join(rng.choice(words) for _ in range(rng.randint(1, 3))),
            rng.choice(list(Priority)),
            status=rng.choice(list(Status)),
            minutes=rng.randint(0, 10_000),
            description=rng.choice([None, "", "some details"]),
            tags=[rng.choice(words) for _ in range(rng.randint(0, 4))],
        )
        task.updated_at = task.created_at + timedelta(seconds=rng.randint(0, 3600), microseconds=123)
        if rng.random() < 0.5:
            task.completed_at = task.updated_at
        if rng.random() < 0.5:
            task.due_date = BASE_TIME + timedelta(days=rng.randint(-5, 30))
        out[i] = task
    return out


@pytest.mark.parametrize("seed", range(5))
def test_encode_decode_preserves_every_field(seed: int) -> None:
    tasks = _random_tasks(random.Random(seed), 12)
    assert decode_tasks(encode_tasks(tasks)) == tasks


def test_file_layout_uses_string_ids_and_iso_dates() -> None:
    task = make_task(7, "Fix bug", Priority.URGENT, tags=["x", "y"])
    data = json.loads(encode_tasks({7: task}))
    assert list(data) == ["7"]
    entry = data["7"]
    assert entry["id"] == 7
    assert entry["priority"] == "Urgent"
    assert entry["status"] == "Pending"
    assert entry["tags"] == ["x", "y"]
    assert entry["description"] is None
    assert entry["completed_at"] is None
    assert entry["created_at"] == task.created_at.isoformat()


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[]",
        '{"1": "nope"}',
        '{"x": {}}',
        '{"1": {"id": 1, "title": "t"}}',
    ],
)
def test_decode_rejects_malformed_documents(text: str) -> None:
    with pytest.raises(StorageError):
        decode_tasks(text)


def test_decode_rejects_unknown_enum_and_key_mismatch() -> None:
    good = json.loads(encode_tasks({1: make_task(1, "a")}))

    bad_priority = json.loads(json.dumps(good))
    bad_priority["1"]["priority"] = "Critical"
    with pytest.raises(StorageError):
        decode_tasks(json.dumps(bad_priority))

    mismatch = {"2": good["1"]}
    with pytest.raises(StorageError, match="does not match"):
        decode_tasks(json.dumps(mismatch))


def test_naive_datetimes_are_read_as_local_time() -> None:
    doc = json.loads(encode_tasks({1: make_task(1, "a")}))
    doc["1"]["due_date"] = "2024-05-01T10:00:00"
    task = decode_tasks(json.dumps(doc))[1]
    assert task.due_date is not None
    assert task.due_date.tzinfo is not None


def test_write_replaces_whole_file_and_leaves_no_temp(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    write_tasks_file(path, {1: make_task(1, "a"), 2: make_task(2, "b")})
    write_tasks_file(path, {2: make_task(2, "b")})

    assert set(read_tasks_file(path)) == {2}
    assert [p.name for p in tmp_path.iterdir()] == ["tasks.json"]


def test_failed_write_keeps_previous_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "tasks.json"
    write_tasks_file(path, {1: make_task(1, "a")})

    def _boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(task_codec.os, "replace", _boom)
    with pytest.raises(StorageError):
        write_tasks_file(path, {})

    assert set(read_tasks_file(path)) == {1}
    assert not path.with_suffix(".json.tmp").exists()


def test_read_missing_file_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_tasks_file(tmp_path / "missing.json")


def test_resolve_storage_path_creates_directory(tmp_path: Path) -> None:
    path = resolve_storage_path(tmp_path / "a" / "b")
    assert path == tmp_path / "a" / "b" / "tasks.json"
    assert path.parent.is_dir()


def test_resolve_storage_path_defaults_to_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(task_codec.Path, "home", classmethod(lambda cls: tmp_path))
    path = resolve_storage_path()
    assert path == tmp_path / ".task_manager" / "tasks.json"
    assert path.parent.is_dir()


def test_resolve_storage_path_fails_without_home(monkeypatch: pytest.MonkeyPatch) -> None:
    def _no_home(cls):
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(task_codec.Path, "home", classmethod(_no_home))
    with pytest.raises(StorageError, match="home directory"):
        resolve_storage_path()


def test_resolve_storage_path_fails_when_dir_is_a_file(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", "utf-8")
    with pytest.raises(StorageError, match="Failed to create app directory"):
        resolve_storage_path(blocker / "sub")


def test_decode_rejects_keys_that_collide_on_the_same_id() -> None:
    entry = json.loads(encode_tasks({1: make_task(1, "a")}))["1"]
    text = json.dumps({"1": entry, "01": entry})
    with pytest.raises(StorageError, match="Duplicate task key"):
        decode_tasks(text)
