# src/planner_companion/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import date

from ..agenda.day_summary import DaySummary, summarize_day
from ..core.state import AppState
from .task_models import CalendarTask, Recurrence

logger = logging.getLogger(__name__)


def parse_recurrence_text(text: str | None) -> Recurrence:
    """
    Map free user input ("Weekly ", "daily", "") to a Recurrence.
    Anything unrecognized means a one-off task.
    """
    return Recurrence.parse((text or "").strip().lower())


def add_task_for_selected_day(
    state: AppState,
    *,
    title: str,
    recurrence_text: str | None = None,
) -> CalendarTask:
    """
    Convenience helper: create a task anchored on the currently selected day.
    Uses state.task_store (already constructed in bootstrap).
    """
    rec = parse_recurrence_text(recurrence_text)
    task = state.task_store.add_task(title=title, anchor_date=state.selected_day, recurrence=rec)
    logger.info("Added task id=%s on %s (%s)", task.id, state.selected_day, rec.value)
    return task


def summary_for_day(state: AppState, day: date | None = None) -> DaySummary:
    d = state.selected_day if day is None else day
    return summarize_day(state.task_store.list_tasks(), d)


def delete_task(state: AppState, task_id: int, *, confirmed: bool = False) -> bool:
    """Delete a task. Raises RecurringDeleteNotConfirmed for unconfirmed recurring tasks."""
    return state.task_store.delete_task(task_id, confirmed=confirmed)
