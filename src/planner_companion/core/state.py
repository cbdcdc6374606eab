# src/planner_companion/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

from .ports import CalendarTaskRepo, ChatMessage, LLMClient, NoteRepo, TodoRepo

if TYPE_CHECKING:
    from ..focus.focus_session import FocusSession
    from ..study.study_models import StudySession, Subject


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    llm: LLMClient
    offline_llm: LLMClient
    task_store: CalendarTaskRepo
    note_store: NoteRepo
    todo_store: TodoRepo

    save_history: bool

    # The day the calendar is currently showing (new tasks are bound to it).
    selected_day: date = field(default_factory=date.today)
    # First day of the month the grid is showing.
    displayed_month: date = field(default_factory=lambda: date.today().replace(day=1))

    # Study plan of the current run (not persisted).
    study_subjects: list[Subject] = field(default_factory=list)
    study_plan: list[StudySession] = field(default_factory=list)

    # Created on the first /focus command.
    focus_session: FocusSession | None = None

    dialog_history: list[ChatMessage] = field(default_factory=list)
    lock: threading.RLock = field(default_factory=threading.RLock)
