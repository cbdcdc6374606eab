# todo/todo_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Any) -> Priority:
        """Fail-soft: anything unrecognized is MEDIUM."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return cls.MEDIUM
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.MEDIUM


@dataclass(slots=True, frozen=True)
class TodoItem:
    title: str
    priority: Priority = Priority.MEDIUM
    id: int | None = None
    is_completed: bool = False
    created_at: float = 0.0

    @property
    def display_text(self) -> str:
        box = "x" if self.is_completed else " "
        return f"[{box}] {self.title} ({self.priority.value})"
