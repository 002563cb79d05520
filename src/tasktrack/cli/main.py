# src/tasktrack/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (opening the task store), then runs
the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import StorageError
from ..logging_setup import setup_logging
from ..tasks.task_codec import resolve_storage_path

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    try:
        # Logs live next to the tasks file.
        data_file = resolve_storage_path(settings.data_dir, settings.tasks_file_name)
    except StorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        log_dir=data_file.parent if settings.log_file_enabled else None,
        console_level=console_level,
    )

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
    except StorageError:
        logger.exception("Failed to open task store.")
        return 1

    run_console_loop(state)
    logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
