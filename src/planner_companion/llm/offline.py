# src/planner_companion/llm/offline.py

from __future__ import annotations

from collections.abc import Iterable

from ..core.ports import ChatMessage


class OfflineLLMClient:
    """
    Deterministic assistant used when no API is configured or the network fails.

    Behavior (keyword match on the last user message):
    - "add task"    -> point the user at /add
    - "remove task" -> point the user at /del
    - anything else -> limited-mode notice
    """

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        user_text = ""
        for m in reversed(messages):
            if m["role"] == "user":
                user_text = m["content"]
                break

        q = user_text.lower()
        if "add task" in q:
            yield "Offline Mode: To add a task, please use the manual input (/add <title> | <recurrence>)."
        elif "remove task" in q or "delete task" in q:
            yield "Offline Mode: To remove a task, please use the manual input (/del <id>)."
        else:
            yield "Offline Mode: AI features are limited when not connected."
