# notes/note_models.py

from __future__ import annotations

from dataclasses import dataclass

UNTITLED_NOTE = "Untitled Note"


@dataclass(slots=True, frozen=True)
class Note:
    """A free-text note. Search looks at the title only."""

    title: str
    content: str = ""
    id: int | None = None
    created_at: float = 0.0
    updated_at: float = 0.0

    def matches(self, query: str) -> bool:
        q = (query or "").strip().lower()
        return not q or q in self.title.lower()

    @property
    def preview(self) -> str:
        first = self.content.strip().splitlines()[0] if self.content.strip() else ""
        return first if len(first) <= 60 else first[:57] + "..."


def normalize_title(title: str | None) -> str:
    """Blank titles are saved as UNTITLED_NOTE."""
    t = (title or "").strip()
    return t or UNTITLED_NOTE
