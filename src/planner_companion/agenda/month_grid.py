# src/planner_companion/agenda/month_grid.py

from __future__ import annotations

import calendar
from collections.abc import Sequence
from datetime import date, datetime, timedelta

from ..tasks.task_models import CalendarTask, as_day
from .day_summary import DEFAULT_CATEGORY_RULES, CategoryRule, DayKind, summarize_day

SUNDAY = calendar.SUNDAY
MONDAY = calendar.MONDAY

_KIND_MARKS = {
    DayKind.EMPTY: " ",
    DayKind.ONE_OFF: "+",
    DayKind.RECURRING: "*",
}


def month_grid(year: int, month: int, *, first_weekday: int = SUNDAY) -> list[date | None]:
    """
    Cells of a month view: leading None padding so the 1st lands in its
    weekday column, then one date per day of the month.
    """
    first = date(year, month, 1)
    _, n_days = calendar.monthrange(year, month)
    blanks = (first.weekday() - first_weekday) % 7

    cells: list[date | None] = [None] * blanks
    cells.extend(first + timedelta(days=i) for i in range(n_days))
    return cells


def shift_month(day: date | datetime, delta: int) -> date:
    """First day of the month `delta` months away from `day`."""
    d = as_day(day)
    idx = d.year * 12 + (d.month - 1) + int(delta)
    return date(idx // 12, idx % 12 + 1, 1)


def reminder_date(task: CalendarTask, now: datetime | None = None) -> datetime | None:
    """
    The "day before" reminder for a task, as local midnight of anchor - 1 day.
    Returns None when that moment has already passed.
    """
    if now is None:
        now = datetime.now()
    anchor = as_day(task.anchor_date)
    at = datetime.combine(anchor - timedelta(days=1), datetime.min.time())
    if now.tzinfo is not None:
        at = at.astimezone()
    if at <= now:
        return None
    return at


def render_month(
    tasks: Sequence[CalendarTask],
    year: int,
    month: int,
    *,
    first_weekday: int = SUNDAY,
    rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES,
    selected: date | None = None,
) -> str:
    """
    Plain-text month view for the console.

    Each cell is the day number, a kind mark ('*' recurring, '+' one-off) and
    the category marker on a legend line below the grid.
    """
    header_names = [calendar.day_abbr[(first_weekday + i) % 7][:2] for i in range(7)]
    lines = [f"{calendar.month_name[month]} {year}".center(7 * 5), " ".join(f"{n:>4}" for n in header_names)]

    row: list[str] = []
    legend: list[str] = []
    for cell in month_grid(year, month, first_weekday=first_weekday):
        if cell is None:
            row.append("    ")
        else:
            summary = summarize_day(tasks, cell, rules)
            sel = ">" if selected is not None and cell == selected else " "
            row.append(f"{sel}{cell.day:>2}{_KIND_MARKS[summary.kind]}")
            if summary.marker:
                legend.append(f"{cell.day:>2}: {summary.marker} {summary.category.category}")  # type: ignore[union-attr]
        if len(row) == 7:
            lines.append(" ".join(row))
            row = []
    if row:
        lines.append(" ".join(row))

    if legend:
        lines.append("")
        lines.extend(legend)
    return "\n".join(lines)
