# src/planner_companion/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (LLM with offline fallback, SQLite stores),
- persists the assistant dialog history as JSON (optional).
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from ..config import get_settings
from ..core.ports import ChatMessage, LLMClient
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient
from ..notes.note_store import NoteStore
from ..tasks.task_store import CalendarTaskStore
from ..todo.todo_store import TodoStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    files = (settings.tasks_db_path, settings.notes_db_path, settings.todo_db_path, settings.dialog_history_path)
    for directory in {Path(settings.data_dir), *(Path(f).parent for f in files)}:
        directory.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """Build AppState from `settings` (default: get_settings()); no API key means an offline assistant."""
    settings = settings if settings is not None else get_settings()

    _ensure_local_dirs(settings)

    offline = OfflineLLMClient()
    llm_client: LLMClient
    try:
        llm_client = OpenRouterLLMClient(settings)
    except RuntimeError as e:
        logger.info("Assistant runs offline: %s", e)
        llm_client = offline

    return AppState(
        settings=settings,
        llm=llm_client,
        offline_llm=offline,
        task_store=CalendarTaskStore(settings.tasks_db_path),
        note_store=NoteStore(settings.notes_db_path),
        todo_store=TodoStore(settings.todo_db_path),
        save_history=settings.save_history,
    )


_ROLES = ("user", "assistant")


def _history_path(state: AppState) -> Path | None:
    """Where dialog history lives, or None when it is not persisted."""
    raw = getattr(state.settings, "dialog_history_path", None)
    if not state.save_history or not raw:
        return None
    return Path(raw)


def _clean_message(raw: object) -> ChatMessage | None:
    if not isinstance(raw, dict):
        return None
    role = raw.get("role")
    return {"role": role if role in _ROLES else "user", "content": str(raw.get("content", ""))}


def load_dialog_history(state: AppState) -> list[ChatMessage]:
    """Saved history, or [] if it is missing, unreadable or disabled."""
    path = _history_path(state)
    if path is None or not path.exists():
        return []
    try:
        data = json.loads(path.read_text("utf-8"))
    except (OSError, ValueError):
        logger.exception("Failed to load dialog history from %s", path)
        return []

    messages = [m for m in map(_clean_message, data if isinstance(data, list) else []) if m is not None]
    logger.info("Loaded dialog history: %d messages from %s", len(messages), path)
    return messages


def save_dialog_history(state: AppState) -> None:
    """Atomic write (tmp file + rename); the file is made owner-only since it may hold personal plans."""
    path = _history_path(state)
    if path is None:
        return
    tmp = path.with_suffix(".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(json.dumps(state.dialog_history, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, path)
    except OSError:
        logger.exception("Failed to save dialog history to %s", path)
        return
    with contextlib.suppress(OSError):
        os.chmod(path, 0o600)
    logger.info("Saved dialog history: %d messages to %s", len(state.dialog_history), path)
