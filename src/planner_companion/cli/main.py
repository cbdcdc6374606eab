# src/planner_companion/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, load_dialog_history, save_dialog_history
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        save_dialog_history(state)
    except Exception:
        logger.exception("Failed to save dialog history.")

    if state.focus_session is not None:
        try:
            state.focus_session.close()
        except Exception:
            logger.exception("Failed to stop the focus timer.")

    # The SQLite stores use short-lived connections per call; close() is a no-op hook.
    for store in (state.task_store, state.note_store, state.todo_store):
        try:
            store.close()
        except Exception:
            logger.debug("Store close failed: %r", store, exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/planner")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    logger.info("Starting %s...", getattr(settings, "app_name", "planner"))

    state = create_initial_state(settings=settings)

    if state.save_history:
        state.dialog_history = load_dialog_history(state)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled (PLANNER_CONSOLE_ENABLED=false); nothing to run.")
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
