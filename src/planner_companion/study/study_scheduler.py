# src/planner_companion/study/study_scheduler.py

"""
Exam study-session auto-scheduler.

For each subject (earliest exam first) chapters are spread over the days
left before its exam:

    chapters_per_day = max(1, len(chapters) // max(1, days_until_exam))

Chunk i of a subject lands on start + i days; every fifth generated day
(i % 5 == 4) is flagged as a break day. Sessions of all subjects are merged
and sorted by date (stable, so subjects keep exam order within a day).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, timedelta

from .study_models import ChapterAssignment, StudySession, Subject

logger = logging.getLogger(__name__)

BREAK_EVERY_N_DAYS = 5


def _chunks(items: list, size: int) -> Iterable[list]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


def generate_study_plan(subjects: Iterable[Subject], start: date | None = None) -> list[StudySession]:
    if start is None:
        start = date.today()

    sessions: list[StudySession] = []
    for subject in sorted(subjects, key=lambda s: s.exam_date):
        days_until = (subject.exam_date - start).days
        per_day = max(1, len(subject.chapters) // max(1, days_until))

        for i, chunk in enumerate(_chunks(list(subject.chapters), per_day)):
            sessions.append(
                StudySession(
                    date=start + timedelta(days=i),
                    chapters=[ChapterAssignment(subject_name=subject.name, chapter=ch) for ch in chunk],
                    is_break_day=(i % BREAK_EVERY_N_DAYS == BREAK_EVERY_N_DAYS - 1),
                )
            )

        logger.debug(
            "Planned subject=%s chapters=%d per_day=%d days_until_exam=%d",
            subject.name,
            len(subject.chapters),
            per_day,
            days_until,
        )

    sessions.sort(key=lambda s: s.date)
    return sessions


def add_manual_session(sessions: list[StudySession], subject: Subject, on: date) -> StudySession | None:
    """
    Add a one-chapter session for the subject's first incomplete chapter.
    Returns None (and leaves `sessions` untouched) if every chapter is done.
    """
    chapter = subject.first_incomplete_chapter()
    if chapter is None:
        return None

    session = StudySession(
        date=on,
        chapters=[ChapterAssignment(subject_name=subject.name, chapter=chapter)],
        is_break_day=False,
    )
    sessions.append(session)
    sessions.sort(key=lambda s: s.date)
    return session
