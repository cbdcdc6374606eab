# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)
"""

ENV_VARS = {
    # App / logging
    "PLANNER_APP_NAME": "App display name (default: planner).",
    "PLANNER_LOG_LEVEL": "Console logging level (default: INFO).",
    # Switches
    "PLANNER_SAVE_HISTORY": "Persist assistant dialog history (true/false, default: true).",
    "PLANNER_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Assistant / OpenRouter
    "PLANNER_OPENROUTER_API_KEY": "OpenRouter API key (without it the assistant runs offline).",
    "PLANNER_OPENROUTER_BASE_URL": "OpenAI-compatible base URL (default: https://openrouter.ai/api/v1).",
    "PLANNER_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "PLANNER_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "PLANNER_APP_TITLE": "Optional OpenRouter metadata header title.",
    "PLANNER_LLM_FIRST_TOKEN_TIMEOUT_SECONDS": "Give up on a model without a first token after N seconds (default: 20).",
    "PLANNER_LLM_READ_TIMEOUT_SECONDS": "HTTP read timeout (default: 25).",
    "PLANNER_LLM_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    # Paths (gitignored)
    "PLANNER_DATA_DIR": "Local data directory (default: .local/planner).",
    "PLANNER_TASKS_DB_PATH": "Calendar task SQLite path (default: <data_dir>/calendar_tasks.sqlite3).",
    "PLANNER_NOTES_DB_PATH": "Notes SQLite path (default: <data_dir>/notes.sqlite3).",
    "PLANNER_TODO_DB_PATH": "To-do list SQLite path (default: <data_dir>/todo.sqlite3).",
    "PLANNER_DIALOG_HISTORY_PATH": "Dialog history JSON path (default: <data_dir>/dialog_history.json).",
    # Calendar
    "PLANNER_WEEK_STARTS_MONDAY": "Month view starts weeks on Monday (default: false, Sunday).",
    # Pomodoro
    "PLANNER_POMODORO_FOCUS_MINUTES": "Focus length, clamped to 15-60 (default: 25).",
    "PLANNER_POMODORO_BREAK_MINUTES": "Short break length, clamped to 3-30 (default: 5). Long break is 3x.",
    "PLANNER_POMODORO_SESSIONS_PER_ROUND": "Focus sessions before a long break (default: 4).",
    # Tuning
    "PLANNER_MAX_DIALOG_MESSAGES": "Max messages kept in assistant history (default: 40).",
}
