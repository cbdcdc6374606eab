# tests/test_day_summary.py

from __future__ import annotations

from datetime import date

from planner_companion.agenda.day_summary import (
    CategoryRule,
    DayKind,
    category_for_day,
    classify_day,
    summarize_day,
)
from planner_companion.tasks.task_models import Recurrence

from .fakes import make_task

DAY = date(2024, 1, 22)


def test_classify_day_kinds() -> None:
    one_off = make_task("Buy milk", DAY)
    weekly = make_task("Gym", date(2024, 1, 15), Recurrence.WEEKLY)

    assert classify_day([]) is DayKind.EMPTY
    assert classify_day([one_off]) is DayKind.ONE_OFF
    assert classify_day([one_off, weekly]) is DayKind.RECURRING


def test_first_matching_rule_wins_not_first_matching_task() -> None:
    rules = [
        CategoryRule("exam", "deadline", "!!"),
        CategoryRule("gym", "fitness", "G"),
    ]
    tasks = [make_task("Gym session", DAY), make_task("Math EXAM", DAY)]

    rule = category_for_day(tasks, rules)

    assert rule is not None
    assert rule.category == "deadline"


def test_category_match_is_case_insensitive_substring() -> None:
    rules = [CategoryRule("walk", "walk", "W")]

    assert category_for_day([make_task("Evening WALKING tour", DAY)], rules) == rules[0]
    assert category_for_day([make_task("Laundry", DAY)], rules) is None


def test_default_rules_keep_legacy_order() -> None:
    # "study" comes before "exam" in the default list.
    summary = summarize_day([make_task("Study for exam", DAY)], DAY)

    assert summary.category is not None
    assert summary.category.category == "study"
    assert summary.marker == summary.category.marker


def test_summarize_day_only_uses_active_tasks() -> None:
    tasks = [
        make_task("Doctor appointment", date(2024, 1, 21)),
        make_task("Walk the dog", date(2024, 1, 1), Recurrence.DAILY),
    ]

    summary = summarize_day(tasks, DAY)

    assert [t.title for t in summary.tasks] == ["Walk the dog"]
    assert summary.kind is DayKind.RECURRING
    # "dog" is listed before "walk".
    assert summary.category is not None
    assert summary.category.category == "pet"


def test_empty_day_has_no_category() -> None:
    summary = summarize_day([], DAY)

    assert summary.kind is DayKind.EMPTY
    assert summary.category is None
    assert summary.marker == ""
    assert not summary.has_tasks
