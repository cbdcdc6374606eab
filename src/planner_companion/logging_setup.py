# src/planner_companion/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_LOGGER = "planner_companion"

# Loggers under these prefixes only reach the console at WARNING+.
# The focus timer runs on a background thread and would interleave with the prompt.
QUIET_PREFIXES = ("planner_companion.focus.",)

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """App logs pass, quiet app components need WARNING, everything else (libraries, py.warnings) ERROR."""

    def __init__(self, quiet_prefixes: tuple[str, ...] = QUIET_PREFIXES) -> None:
        super().__init__()
        self._quiet = quiet_prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(APP_LOGGER + "."):
            return record.levelno >= logging.ERROR
        if record.name.startswith(self._quiet):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/planner",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_file_bytes: int = 2_000_000,
) -> Path:
    """
    Console handler (stderr, filtered) plus a rotating planner.log with everything.
    Replaces existing root handlers, so call it once at startup. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "planner.log"

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = RotatingFileHandler(log_file, maxBytes=max_file_bytes, backupCount=3, encoding="utf-8")
    file_handler.setLevel(file_level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in (console, file_handler):
        h.setFormatter(formatter)
        root.addHandler(h)

    logging.captureWarnings(True)
    return log_file
