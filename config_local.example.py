# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for secrets. This file should contain only safe overrides.
"""

# Example: run without the console (nothing else to run yet)
# CONSOLE_ENABLED = False

# Example: month view with Monday as the first column
# WEEK_STARTS_MONDAY = True

# Example: keep the assistant conversation in memory only
# SAVE_HISTORY = False
