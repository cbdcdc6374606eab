# src/planner_companion/agenda/day_summary.py

"""
Day classification used by the month grid and the day-detail list.

Policy:
- a day with any recurring active task is RECURRING, otherwise ONE_OFF
  (EMPTY when nothing is active);
- category rules are scanned in list order; the first rule whose keyword is a
  case-insensitive substring of ANY active task title wins. One category per day.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from ..tasks.task_models import CalendarTask, as_day
from .recurrence import tasks_active_on


class DayKind(StrEnum):
    EMPTY = "empty"
    ONE_OFF = "one_off"
    RECURRING = "recurring"


@dataclass(slots=True, frozen=True)
class CategoryRule:
    keyword: str
    category: str
    marker: str = ""

    def matches(self, title: str) -> bool:
        kw = self.keyword.strip().lower()
        return bool(kw) and kw in (title or "").lower()


_FITNESS = "\U0001f3cb\ufe0f\u200d\u2642\ufe0f"
_BOOKS = "\U0001f4da"
_FOOD = "\U0001f37d\ufe0f"
_DOG = "\U0001f436"
_WALK = "\U0001f6b6\u200d\u2642\ufe0f"
_HOSPITAL = "\U0001f3e5"
_DEADLINE = "\u2757\u2757"

# Order matters: first match wins.
DEFAULT_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("gym", "fitness", _FITNESS),
    CategoryRule("workout", "fitness", _FITNESS),
    CategoryRule("excercise", "fitness", _FITNESS),  # sic, matches legacy titles
    CategoryRule("exercise", "fitness", _FITNESS),
    CategoryRule("study", "study", _BOOKS),
    CategoryRule("read", "study", _BOOKS),
    CategoryRule("eating", "food", _FOOD),
    CategoryRule("eat", "food", _FOOD),
    CategoryRule("food", "food", _FOOD),
    CategoryRule("dog", "pet", _DOG),
    CategoryRule("pet", "pet", _DOG),
    CategoryRule("walk", "walk", _WALK),
    CategoryRule("jog", "walk", _WALK),
    CategoryRule("run", "walk", _WALK),
    CategoryRule("doctor", "health", _HOSPITAL),
    CategoryRule("hospital", "health", _HOSPITAL),
    CategoryRule("exam", "deadline", _DEADLINE),
    CategoryRule("quiz", "deadline", _DEADLINE),
    CategoryRule("assignment", "deadline", _DEADLINE),
)


@dataclass(slots=True, frozen=True)
class DaySummary:
    day: date
    tasks: tuple[CalendarTask, ...]
    kind: DayKind
    category: CategoryRule | None

    @property
    def has_tasks(self) -> bool:
        return bool(self.tasks)

    @property
    def marker(self) -> str:
        return self.category.marker if self.category is not None else ""


def classify_day(active_tasks: Iterable[CalendarTask]) -> DayKind:
    kind = DayKind.EMPTY
    for t in active_tasks:
        if t.is_recurring:
            return DayKind.RECURRING
        kind = DayKind.ONE_OFF
    return kind


def category_for_day(
    active_tasks: Sequence[CalendarTask],
    rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES,
) -> CategoryRule | None:
    for rule in rules:
        if any(rule.matches(t.title) for t in active_tasks):
            return rule
    return None


def summarize_day(
    tasks: Iterable[CalendarTask],
    day: date | datetime,
    rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES,
) -> DaySummary:
    d = as_day(day)
    active = tasks_active_on(tasks, d)
    return DaySummary(
        day=d,
        tasks=tuple(active),
        kind=classify_day(active),
        category=category_for_day(active, rules) if active else None,
    )
