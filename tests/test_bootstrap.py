# tests/test_bootstrap.py

from __future__ import annotations

from pathlib import Path

from planner_companion.cli.bootstrap import create_initial_state, load_dialog_history, save_dialog_history
from planner_companion.llm.offline import OfflineLLMClient


def test_without_api_key_assistant_starts_offline(settings, tmp_path: Path) -> None:
    settings.data_dir = tmp_path / "data"
    settings.openrouter_api_key = None
    settings.openrouter_base_url = "https://openrouter.ai/api/v1"

    state = create_initial_state(settings=settings)

    assert isinstance(state.llm, OfflineLLMClient)
    assert settings.data_dir.is_dir()
    assert state.task_store.count_tasks() == 0


def test_dialog_history_roundtrip(state) -> None:
    state.dialog_history = [
        {"role": "user", "content": "plan my week"},
        {"role": "assistant", "content": "Start with Monday."},
    ]
    save_dialog_history(state)

    assert load_dialog_history(state) == state.dialog_history


def test_corrupt_dialog_history_is_ignored(state) -> None:
    Path(state.settings.dialog_history_path).write_text("{not json", "utf-8")

    assert load_dialog_history(state) == []
