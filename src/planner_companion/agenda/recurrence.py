# src/planner_companion/agenda/recurrence.py

"""
Recurrence evaluation for calendar tasks.

Pure functions over (task, day): no I/O, no state, never raises for
well-formed dates. All comparisons are done at day granularity.

Month/year rollover is NOT clamped:
- a monthly task anchored on the 31st is skipped in months without a 31st,
- a yearly task anchored on Feb 29 only occurs in leap years.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from ..tasks.task_models import CalendarTask, Recurrence, as_day


def is_active(task: CalendarTask, day: date | datetime) -> bool:
    """Return True if `task` should appear on `day`."""
    anchor = as_day(task.anchor_date)
    d = as_day(day)

    if d < anchor:
        return False

    rec = Recurrence.parse(task.recurrence)

    if rec is Recurrence.DAILY:
        return True
    if rec is Recurrence.WEEKLY:
        return d.weekday() == anchor.weekday()
    if rec is Recurrence.MONTHLY:
        return d.day == anchor.day
    if rec is Recurrence.YEARLY:
        return (d.month, d.day) == (anchor.month, anchor.day)

    # Recurrence.NONE
    return d == anchor


def tasks_active_on(tasks: Iterable[CalendarTask], day: date | datetime) -> list[CalendarTask]:
    """Every task active on `day`, in the order of `tasks`."""
    d = as_day(day)
    return [t for t in tasks if is_active(t, d)]


def has_any_task(tasks: Iterable[CalendarTask], day: date | datetime) -> bool:
    """Short-circuiting equivalent of bool(tasks_active_on(tasks, day))."""
    d = as_day(day)
    return any(is_active(t, d) for t in tasks)
