# study/study_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(slots=True)
class Chapter:
    name: str
    is_completed: bool = False


@dataclass(slots=True)
class Subject:
    name: str
    exam_date: date
    chapters: list[Chapter] = field(default_factory=list)

    def first_incomplete_chapter(self) -> Chapter | None:
        for ch in self.chapters:
            if not ch.is_completed:
                return ch
        return None


@dataclass(slots=True)
class ChapterAssignment:
    subject_name: str
    chapter: Chapter


@dataclass(slots=True)
class StudySession:
    date: date
    chapters: list[ChapterAssignment]
    is_break_day: bool = False

    @property
    def is_complete(self) -> bool:
        return all(a.chapter.is_completed for a in self.chapters)
