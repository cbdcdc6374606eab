# tests/test_study_scheduler.py

from __future__ import annotations

from datetime import date, timedelta

from planner_companion.study.study_models import Chapter, Subject
from planner_companion.study.study_scheduler import add_manual_session, generate_study_plan

START = date(2024, 1, 1)


def _subject(name: str, exam: date, n: int) -> Subject:
    return Subject(name=name, exam_date=exam, chapters=[Chapter(f"{name}-{i}") for i in range(1, n + 1)])


def test_chapters_are_spread_over_days_until_exam() -> None:
    subject = _subject("Physics", START + timedelta(days=10), 25)

    sessions = generate_study_plan([subject], start=START)

    # 25 // 10 -> 2 chapters per day, 13 days of work.
    assert len(sessions) == 13
    assert [len(s.chapters) for s in sessions] == [2] * 12 + [1]
    assert [s.date for s in sessions] == [START + timedelta(days=i) for i in range(13)]
    assert [a.chapter.name for s in sessions for a in s.chapters] == [c.name for c in subject.chapters]


def test_every_fifth_day_is_a_break_day() -> None:
    sessions = generate_study_plan([_subject("Bio", START + timedelta(days=30), 12)], start=START)

    assert [i for i, s in enumerate(sessions) if s.is_break_day] == [4, 9]


def test_at_least_one_chapter_per_day() -> None:
    sessions = generate_study_plan([_subject("Art", START + timedelta(days=30), 3)], start=START)

    assert [len(s.chapters) for s in sessions] == [1, 1, 1]


def test_exam_today_or_past_crams_everything_into_the_first_day() -> None:
    past = _subject("History", START - timedelta(days=2), 4)

    (session,) = generate_study_plan([past], start=START)

    assert session.date == START
    assert len(session.chapters) == 4


def test_sessions_sorted_by_date_with_earliest_exam_first() -> None:
    late = _subject("Chem", START + timedelta(days=20), 2)
    early = _subject("Math", START + timedelta(days=5), 2)

    sessions = generate_study_plan([late, early], start=START)

    assert [s.date for s in sessions] == sorted(s.date for s in sessions)
    assert sessions[0].chapters[0].subject_name == "Math"
    assert sessions[1].chapters[0].subject_name == "Chem"


def test_add_manual_session_uses_first_incomplete_chapter() -> None:
    subject = _subject("Math", START + timedelta(days=5), 3)
    subject.chapters[0].is_completed = True
    sessions = generate_study_plan([subject], start=START)

    added = add_manual_session(sessions, subject, START + timedelta(days=1))

    assert added is not None
    assert added.chapters[0].chapter.name == "Math-2"
    assert [s.date for s in sessions] == sorted(s.date for s in sessions)


def test_add_manual_session_when_everything_is_done() -> None:
    subject = _subject("Math", START + timedelta(days=5), 2)
    for ch in subject.chapters:
        ch.is_completed = True
    sessions: list = []

    assert add_manual_session(sessions, subject, START) is None
    assert sessions == []


def test_session_completion_tracks_chapters() -> None:
    subject = _subject("Geo", START + timedelta(days=1), 2)
    (session,) = generate_study_plan([subject], start=START)

    assert not session.is_complete
    for a in session.chapters:
        a.chapter.is_completed = True
    assert session.is_complete
