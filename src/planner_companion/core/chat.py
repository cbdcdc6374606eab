# src/planner_companion/core/chat.py

"""
Assistant chat orchestration.

This module is transport-agnostic:
- connectors provide inbound text,
- the core builds the prompt (persona + the selected day's tasks) and streams LLM output,
- connectors decide how to display the stream.

Rules:
- if the online client fails before producing any text, the reply comes from the
  offline client instead (network fallback),
- history is updated only after a successful stream completion.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..agenda.day_summary import summarize_day
from ..tasks.task_models import CalendarTask
from .persona import get_system_prompt
from .ports import ChatMessage
from .state import AppState

logger = logging.getLogger(__name__)


def _format_task_line(task: CalendarTask) -> str:
    return f"- [{task.id}] {task.display_text}"


def _build_planner_block(state: AppState) -> str:
    try:
        tasks = state.task_store.list_tasks()
    except Exception:
        logger.exception("Failed to load tasks for the planner block")
        return ""

    summary = summarize_day(tasks, state.selected_day)
    lines = [f"Tasks on {summary.day.isoformat()}:"]
    if summary.tasks:
        lines.extend(_format_task_line(t) for t in summary.tasks)
    else:
        lines.append("- (none)")
    if summary.category is not None:
        lines.append(f"Day category: {summary.category.category}")
    return "<PLANNER>\n" + "\n".join(lines) + "\n</PLANNER>"


def build_system_prompt(state: AppState) -> str:
    system_prompt = get_system_prompt(state.selected_day)
    block = _build_planner_block(state)
    if block:
        system_prompt = f"{system_prompt.strip()}\n\n{block}\n"
    return system_prompt


def stream_reply(state: AppState, user_text: str) -> Iterable[str]:
    """
    Yield assistant text chunks.

    The online client is tried first; a RuntimeError before any text was produced
    switches to state.offline_llm. Errors after partial output are re-raised.
    """
    history = state.dialog_history if state.save_history else []
    messages_for_llm: list[ChatMessage] = [*history, {"role": "user", "content": user_text}]
    system_prompt = build_system_prompt(state)

    assistant_full = ""
    try:
        for piece in state.llm.stream_chat(messages_for_llm, system_prompt):
            if not piece:
                continue
            assistant_full += piece
            yield piece
    except RuntimeError as e:
        if assistant_full:
            raise
        logger.info("Assistant falling back to offline mode: %s", e)
        for piece in state.offline_llm.stream_chat(messages_for_llm, system_prompt):
            if piece:
                assistant_full += piece
                yield piece

    assistant_full = assistant_full.strip()
    if state.save_history and assistant_full:
        state.dialog_history.append({"role": "user", "content": user_text})
        state.dialog_history.append({"role": "assistant", "content": assistant_full})

        max_msgs = int(getattr(state.settings, "max_dialog_messages", 40))
        if len(state.dialog_history) > max_msgs:
            del state.dialog_history[: len(state.dialog_history) - max_msgs]


def generate_reply_text(state: AppState, user_text: str) -> str:
    """Non-streaming helper for connectors that want a full string."""
    return "".join(stream_reply(state, user_text)).strip()
