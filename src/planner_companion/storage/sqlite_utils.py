# src/planner_companion/storage/sqlite_utils.py

"""
Small helpers shared by the SQLite stores (calendar tasks, notes, to-dos).

Every store opens a short-lived connection per call and evolves its schema
additively: missing columns are detected with PRAGMA table_info and added
with ALTER TABLE, never dropped or rewritten.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


def connect(db_path: str | Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), timeout=30.0)
    conn.row_factory = sqlite3.Row
    with contextlib.suppress(sqlite3.DatabaseError):
        conn.execute("PRAGMA journal_mode=WAL")
    return conn


def ensure_columns(cur: sqlite3.Cursor, table: str, columns: Mapping[str, str]) -> list[str]:
    """Add every column of `columns` (name -> SQL declaration) the table lacks. Returns the added names."""
    cur.execute(f"PRAGMA table_info({table})")
    existing = {row["name"] for row in cur.fetchall()}

    added: list[str] = []
    for name, decl in columns.items():
        if name in existing:
            continue
        cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
        logger.info("SQLite migration: %s.%s added", table, name)
        added.append(name)
    return added
