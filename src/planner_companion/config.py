# src/planner_companion/config.py

"""Planner settings: environment variables (PLANNER_*), a local .env, then config_local.py.

Nothing here needs a secret: without an API key the assistant simply runs offline.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

ENV_PREFIX = "PLANNER"

DEFAULT_MODELS = [
    "qwen/qwen-2.5-72b-instruct:free",
    "deepseek/deepseek-chat-v3-0324:free",
]

# config_local.py attribute -> Settings field
_LOCAL_OVERRIDES = {
    "CONSOLE_ENABLED": "console_enabled",
    "WEEK_STARTS_MONDAY": "week_starts_monday",
    "SAVE_HISTORY": "save_history",
}


def _raw(suffix: str, *fallbacks: str) -> str | None:
    """First non-blank value of PLANNER_<suffix> or one of the fallback names."""
    for name in (f"{ENV_PREFIX}_{suffix}", *fallbacks):
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _str(suffix: str, default: str) -> str:
    return _raw(suffix) or default


def _flag(suffix: str, default: bool) -> bool:
    value = _raw(suffix)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "y", "on"}


def _int(suffix: str, default: int) -> int:
    value = _raw(suffix)
    try:
        return default if value is None else int(value)
    except ValueError:
        return default


def _path(suffix: str, default: Path) -> Path:
    value = _raw(suffix)
    return default if value is None else Path(value).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str
    log_level: str

    save_history: bool
    console_enabled: bool

    # Assistant (OpenAI-compatible endpoint, OpenRouter by default)
    openrouter_api_key: Optional[str]
    openrouter_base_url: str
    llm_models: List[str]
    extra_headers: Dict[str, str]
    max_dialog_messages: int

    # Local data (gitignored)
    data_dir: Path
    tasks_db_path: Path
    notes_db_path: Path
    todo_db_path: Path
    dialog_history_path: Path

    # Calendar
    week_starts_monday: bool

    # Pomodoro, minutes
    pomodoro_focus_minutes: int
    pomodoro_break_minutes: int
    pomodoro_sessions_per_round: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _str("APP_NAME", "planner")
        data_dir = _path("DATA_DIR", Path(".local/planner"))

        models_raw = _raw("LLM_MODELS")
        models = models_raw.replace(",", " ").split() if models_raw else list(DEFAULT_MODELS)

        return Settings(
            app_name=app_name,
            log_level=_str("LOG_LEVEL", "INFO"),
            save_history=_flag("SAVE_HISTORY", True),
            console_enabled=_flag("CONSOLE_ENABLED", True),
            openrouter_api_key=_raw("OPENROUTER_API_KEY", "OPENROUTER_API_KEY"),
            openrouter_base_url=_str("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"),
            llm_models=models,
            extra_headers={
                "HTTP-Referer": _str("HTTP_REFERER", "https://example.com"),
                "X-Title": _str("APP_TITLE", app_name),
            },
            max_dialog_messages=_int("MAX_DIALOG_MESSAGES", 40),
            data_dir=data_dir,
            tasks_db_path=_path("TASKS_DB_PATH", data_dir / "calendar_tasks.sqlite3"),
            notes_db_path=_path("NOTES_DB_PATH", data_dir / "notes.sqlite3"),
            todo_db_path=_path("TODO_DB_PATH", data_dir / "todo.sqlite3"),
            dialog_history_path=_path("DIALOG_HISTORY_PATH", data_dir / "dialog_history.json"),
            week_starts_monday=_flag("WEEK_STARTS_MONDAY", False),
            pomodoro_focus_minutes=_int("POMODORO_FOCUS_MINUTES", 25),
            pomodoro_break_minutes=_int("POMODORO_BREAK_MINUTES", 5),
            pomodoro_sessions_per_round=_int("POMODORO_SESSIONS_PER_ROUND", 4),
        )


def _apply_local_overrides(settings: Settings) -> Settings:
    """Safe, non-secret overrides from an optional (never committed) config_local.py."""
    try:
        import config_local  # type: ignore
    except ImportError:
        return settings

    changes = {
        field: bool(getattr(config_local, attr))
        for attr, field in _LOCAL_OVERRIDES.items()
        if hasattr(config_local, attr)
    }
    return replace(settings, **changes) if changes else settings


load_dotenv(override=False)

SETTINGS = _apply_local_overrides(Settings.from_env())


def get_settings() -> Settings:
    return SETTINGS
