# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from planner_companion.core.state import AppState
from planner_companion.llm.offline import OfflineLLMClient
from planner_companion.notes.note_store import NoteStore
from planner_companion.tasks.task_store import CalendarTaskStore
from planner_companion.todo.todo_store import TodoStore

from .fakes import FakeLLMClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="planner-test",
        tasks_db_path=tmp_path / "calendar_tasks.sqlite3",
        notes_db_path=tmp_path / "notes.sqlite3",
        todo_db_path=tmp_path / "todo.sqlite3",
        dialog_history_path=tmp_path / "dialog_history.json",
        llm_models=["fake/model"],
        week_starts_monday=False,
        pomodoro_focus_minutes=25,
        pomodoro_break_minutes=5,
        pomodoro_sessions_per_round=4,
        max_dialog_messages=6,
        save_history=True,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> CalendarTaskStore:
    return CalendarTaskStore(settings.tasks_db_path)


@pytest.fixture()
def note_store(settings: SimpleNamespace) -> NoteStore:
    return NoteStore(settings.notes_db_path)


@pytest.fixture()
def todo_store(settings: SimpleNamespace) -> TodoStore:
    return TodoStore(settings.todo_db_path)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    store: CalendarTaskStore,
    note_store: NoteStore,
    todo_store: TodoStore,
) -> Iterator[AppState]:
    """
    AppState wired with deterministic fakes.

    NOTE: the SQLite task store is real because its ordering and
    delete-confirmation behavior is part of what we want to test.
    """
    app = AppState(
        settings=settings,
        llm=FakeLLMClient(),
        offline_llm=OfflineLLMClient(),
        task_store=store,
        note_store=note_store,
        todo_store=todo_store,
        save_history=True,
        selected_day=date(2024, 1, 15),
        displayed_month=date(2024, 1, 1),
    )
    yield app
    if app.focus_session is not None:
        app.focus_session.close()
