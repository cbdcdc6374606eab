# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from planner_companion.core.ports import ChatMessage
from planner_companion.tasks.task_models import CalendarTask, Recurrence


class FakeLLMClient:
    """
    Deterministic LLM client for unit tests.

    - Captures calls for assertions
    - Yields a predefined text as a single chunk
    """

    def __init__(self, next_text: str = "ok") -> None:
        self.next_text = next_text
        self.calls: list[tuple[list[ChatMessage], str]] = []

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        self.calls.append((list(messages), system_prompt))
        yield self.next_text


class FailingLLMClient:
    """LLM client that behaves like an unreachable API (RuntimeError before any text)."""

    def __init__(self, partial: str = "") -> None:
        self.partial = partial
        self.calls = 0

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        self.calls += 1
        if self.partial:
            yield self.partial
        raise RuntimeError("LLM network/timeout error. Try again later or change models.")


def make_task(
    title: str,
    anchor: date,
    recurrence: Recurrence | str = Recurrence.NONE,
    task_id: int | None = None,
) -> CalendarTask:
    return CalendarTask(
        title=title,
        anchor_date=anchor,
        recurrence=Recurrence.parse(recurrence),
        id=task_id,
    )
