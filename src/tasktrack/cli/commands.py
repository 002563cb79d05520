# src/tasktrack/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..errors import StorageError, TaskNotFoundError
from ..tasks.task_display import display_string, format_statistics
from ..tasks.task_models import Priority, Status, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Store errors (missing id, failed write, bad input) become the reply;
        they do not propagate to the connector.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskNotFoundError as e:
            return str(e)
        except StorageError as e:
            logger.warning("/%s failed: %s", name, e)
            return f"Storage error: {e}"
        except ValueError as e:
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(args: list[str], usage: str) -> int:
    if not args:
        raise ValueError(f"Usage: {usage}")
    try:
        return int(args[0])
    except ValueError:
        raise ValueError(f"Invalid task id: {args[0]}") from None


def _parse_due(raw: str) -> datetime:
    try:
        return datetime.strptime(raw, "%Y-%m-%d").astimezone()
    except ValueError:
        raise ValueError(f"Invalid due date (expected YYYY-MM-DD): {raw}") from None


def _render(tasks: list[Task], empty: str) -> str:
    if not tasks:
        return empty
    return "\n".join(f"  {display_string(t)}" for t in tasks)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /add [-p priority] [-t tag1,tag2] [-d YYYY-MM-DD] title words [-- description]
    """
    priority = Priority.MEDIUM
    tags: list[str] = []
    due: datetime | None = None
    title_words: list[str] = []
    description_words: list[str] = []

    it = iter(args)
    for arg in it:
        if arg == "--":
            description_words = list(it)
            break
        if arg in ("-p", "-t", "-d"):
            value = next(it, None)
            if value is None:
                raise ValueError(f"Missing value for {arg}")
            if arg == "-p":
                priority = Priority.parse(value)
            elif arg == "-t":
                tags.extend(t for t in (p.strip() for p in value.split(",")) if t)
            else:
                due = _parse_due(value)
            continue
        title_words.append(arg)

    title = " ".join(title_words).strip()
    if not title:
        return "Usage: /add [-p priority] [-t tag1,tag2] [-d YYYY-MM-DD] <title> [-- description]"

    task = Task.new(0, title, priority).with_tags(tags)
    if description_words:
        task.with_description(" ".join(description_words))
    if due is not None:
        task.with_due_date(due)

    task_id = state.task_store.add_task(task)
    if emit:
        with contextlib.suppress(Exception):
            emit(f"Saved task #{task_id}.")
    return f"Added task #{task_id}: {title}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list           -> all tasks
    /list <status>  -> only pending / inprogress / completed / cancelled
    """
    status = Status.parse(args[0]) if args else None
    tasks = state.task_store.list_tasks(status)
    header = f"Tasks ({status.label}):" if status else "All tasks:"
    return header + "\n" + _render(tasks, "  (none)")


def cmd_search(state: AppState, args: list[str]) -> str:
    query = " ".join(args)
    tasks = state.task_store.search_tasks(query)
    return f"Search results for {query!r}:\n" + _render(tasks, "  (no matches)")


def cmd_start(state: AppState, args: list[str]) -> str:
    task = state.task_store.start_task(_parse_id(args, "/start <id>"))
    return f"Started task #{task.id}: {task.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    task = state.task_store.complete_task(_parse_id(args, "/done <id>"))
    return f"Completed task #{task.id}: {task.title}"


def cmd_cancel(state: AppState, args: list[str]) -> str:
    task = state.task_store.cancel_task(_parse_id(args, "/cancel <id>"))
    return f"Cancelled task #{task.id}: {task.title}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    task = state.task_store.delete_task(_parse_id(args, "/delete <id>"))
    return f"Deleted task #{task.id}: {task.title}"


def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_statistics(state.task_store.get_statistics())


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add [-p priority] [-t tags] [-d YYYY-MM-DD] <title> [-- description].",
)
registry.register("list", cmd_list, help_text="List tasks: /list [status].", aliases=["ls"])
registry.register("search", cmd_search, help_text="Search title/description/tags: /search <text>.")
registry.register("start", cmd_start, help_text="Mark a task in progress: /start <id>.")
registry.register("done", cmd_done, help_text="Complete a task: /done <id>.", aliases=["complete"])
registry.register("cancel", cmd_cancel, help_text="Cancel a task: /cancel <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("stats", cmd_stats, help_text="Show task statistics.")
