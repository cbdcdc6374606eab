# src/planner_companion/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/LLM providers swappable and makes testing easier.
"""

from datetime import date
from typing import Any, Iterable, Protocol

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""
    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class CalendarTaskRepo(Protocol):
    def count_tasks(self) -> int: ...
    def close(self) -> None: ...
    def list_tasks(self) -> list[Any]: ...
    def get_task(self, task_id: int) -> Any | None: ...

    def add_task(
            self,
            *,
            title: str,
            anchor_date: date,
            recurrence: Any = None,  # Recurrence (kept as Any to avoid import coupling)
    ) -> Any: ...

    def delete_task(self, task_id: int, *, confirmed: bool = False) -> bool: ...


class NoteRepo(Protocol):
    def count_notes(self) -> int: ...
    def close(self) -> None: ...
    def add_note(self, *, title: str | None, content: str = "") -> Any: ...
    def get_note(self, note_id: int) -> Any | None: ...
    def update_note(self, note_id: int, *, title: str | None = None, content: str | None = None) -> Any | None: ...
    def delete_note(self, note_id: int) -> bool: ...
    def list_notes(self) -> list[Any]: ...
    def search_notes(self, query: str) -> list[Any]: ...


class TodoRepo(Protocol):
    def count_items(self) -> int: ...
    def close(self) -> None: ...
    def add_item(self, *, title: str, priority: Any = None) -> Any: ...
    def list_items(self, *, include_completed: bool = True) -> list[Any]: ...
    def set_completed(self, item_id: int, completed: bool = True) -> bool: ...
    def remove_item(self, item_id: int) -> bool: ...
    def remove_by_title(self, title: str) -> int: ...
