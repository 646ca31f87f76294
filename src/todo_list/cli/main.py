# src/todo_list/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console list in the main thread.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import StorageError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # TodoStore uses short-lived sqlite connections per call; close only drops listeners.
    try:
        state.close()
    except Exception:
        logger.debug("State close failed.", exc_info=True)


def main() -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    log_dir = getattr(settings, "data_dir", ".local/todo")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "todo"))

    try:
        state = create_initial_state(settings=settings)
    except StorageError as e:
        logger.error("Cannot open the task list: %s", e)
        print(f"Cannot open the task list: {e}", file=sys.stderr)
        return 1

    try:
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
