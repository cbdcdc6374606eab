# tests/test_recurrence.py

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from planner_companion.agenda.recurrence import has_any_task, is_active, tasks_active_on
from planner_companion.tasks.task_models import Recurrence

from .fakes import make_task


def _days(start: date, n: int) -> list[date]:
    return [start + timedelta(days=i) for i in range(n)]


def test_one_off_task_is_active_on_exactly_its_anchor_day() -> None:
    anchor = date(2024, 3, 10)
    task = make_task("Dentist", anchor)

    active = [d for d in _days(date(2024, 1, 1), 366) if is_active(task, d)]

    assert active == [anchor]


def test_daily_task_is_active_from_anchor_onwards() -> None:
    anchor = date(2024, 2, 20)
    task = make_task("Meditate", anchor, Recurrence.DAILY)

    assert not is_active(task, anchor - timedelta(days=1))
    assert all(is_active(task, d) for d in _days(anchor, 400))


def test_weekly_example_from_a_monday_anchor() -> None:
    task = make_task("Team sync", date(2024, 1, 15), Recurrence.WEEKLY)

    assert is_active(task, date(2024, 1, 8)) is False  # same weekday, before anchor
    assert is_active(task, date(2024, 1, 15)) is True
    assert is_active(task, date(2024, 1, 22)) is True
    assert is_active(task, date(2024, 1, 23)) is False


def test_weekly_task_has_period_seven() -> None:
    anchor = date(2024, 1, 15)
    task = make_task("Team sync", anchor, Recurrence.WEEKLY)

    for d in _days(anchor, 120):
        assert is_active(task, d) == ((d - anchor).days % 7 == 0)


def test_monthly_task_skips_months_without_the_anchor_day() -> None:
    task = make_task("Pay rent", date(2024, 1, 31), Recurrence.MONTHLY)

    assert is_active(task, date(2024, 2, 29)) is False
    assert is_active(task, date(2024, 3, 31)) is True
    assert is_active(task, date(2024, 4, 30)) is False
    assert is_active(task, date(2024, 5, 1)) is False

    active_2024 = [d for d in _days(date(2024, 1, 1), 366) if is_active(task, d)]
    assert [d.month for d in active_2024] == [1, 3, 5, 7, 8, 10, 12]


def test_yearly_task_matches_month_and_day() -> None:
    task = make_task("Christmas", date(2024, 12, 25), Recurrence.YEARLY)

    assert is_active(task, date(2023, 12, 25)) is False
    for year in (2024, 2025, 2026, 2030):
        assert is_active(task, date(year, 12, 25)) is True
        assert is_active(task, date(year, 12, 24)) is False
        assert is_active(task, date(year, 12, 26)) is False


def test_yearly_leap_day_anchor_only_in_leap_years() -> None:
    task = make_task("Leap party", date(2024, 2, 29), Recurrence.YEARLY)

    assert is_active(task, date(2025, 2, 28)) is False
    assert is_active(task, date(2025, 3, 1)) is False
    assert is_active(task, date(2028, 2, 29)) is True


def test_time_of_day_is_ignored() -> None:
    task = make_task("Late call", datetime(2024, 5, 6, 23, 45))

    assert task.anchor_date == date(2024, 5, 6)
    assert is_active(task, datetime(2024, 5, 6, 0, 5)) is True
    assert is_active(task, datetime(2024, 5, 7, 0, 0)) is False


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("fortnightly", Recurrence.NONE),
        ("", Recurrence.NONE),
        (None, Recurrence.NONE),
        (42, Recurrence.NONE),
        ("WEEKLY ", Recurrence.WEEKLY),
        ("Daily", Recurrence.DAILY),
    ],
)
def test_recurrence_parse_is_fail_soft(raw, expected) -> None:
    assert Recurrence.parse(raw) is expected


def test_corrupt_tag_behaves_like_one_off() -> None:
    anchor = date(2024, 6, 1)
    task = make_task("Mystery", anchor, "every-other-tuesday")

    assert task.recurrence is Recurrence.NONE
    assert is_active(task, anchor)
    assert not is_active(task, anchor + timedelta(days=7))


def test_tasks_active_on_preserves_input_order() -> None:
    day = date(2024, 1, 22)
    tasks = [
        make_task("weekly", date(2024, 1, 15), Recurrence.WEEKLY, task_id=1),
        make_task("other day", date(2024, 1, 21), task_id=2),
        make_task("daily", date(2024, 1, 1), Recurrence.DAILY, task_id=3),
        make_task("one-off", day, task_id=4),
    ]

    assert [t.id for t in tasks_active_on(tasks, day)] == [1, 3, 4]


def test_tasks_active_on_is_monotonic_in_its_input() -> None:
    base = [
        make_task("a", date(2024, 1, 1), Recurrence.WEEKLY, task_id=1),
        make_task("b", date(2024, 1, 10), task_id=2),
    ]
    extra = make_task("c", date(2024, 1, 3), Recurrence.DAILY, task_id=3)

    for d in _days(date(2024, 1, 1), 31):
        before = {t.id for t in tasks_active_on(base, d)}
        after = {t.id for t in tasks_active_on([*base, extra], d)}
        assert before <= after


def test_has_any_task_matches_filtered_result() -> None:
    tasks = [
        make_task("weekly", date(2024, 1, 15), Recurrence.WEEKLY),
        make_task("monthly", date(2024, 1, 31), Recurrence.MONTHLY),
    ]

    for d in _days(date(2024, 1, 1), 90):
        assert has_any_task(tasks, d) == bool(tasks_active_on(tasks, d))
    assert has_any_task([], date(2024, 1, 1)) is False
