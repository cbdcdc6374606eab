# todo/todo_store.py

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path

from ..storage.sqlite_utils import connect, ensure_columns
from .todo_models import Priority, TodoItem

logger = logging.getLogger(__name__)


class TodoStore:
    """
    SQLite to-do list with priorities.

    Items are listed in insertion order. Removing by title drops every
    item with exactly that title.
    """

    def __init__(self, db_path: str | Path = "todo.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TodoStore ready db=%s total=%s", self._db_path, self.count_items())

    def close(self) -> None:
        return

    def _ensure_schema(self) -> None:
        conn = connect(self._db_path)
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS todo_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    created_at REAL NOT NULL
                )
                """
            )
            ensure_columns(cur, "todo_items", {"is_completed": "INTEGER NOT NULL DEFAULT 0"})
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> TodoItem:
        return TodoItem(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            priority=Priority.parse(row["priority"]),
            is_completed=bool(row["is_completed"]),
            created_at=float(row["created_at"] or 0.0),
        )

    def count_items(self) -> int:
        conn = connect(self._db_path)
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM todo_items").fetchone()
            return int(n)
        finally:
            conn.close()

    def add_item(self, *, title: str, priority: Priority | str | None = Priority.MEDIUM) -> TodoItem:
        if not title or not title.strip():
            raise ValueError("title is required")

        prio = Priority.parse(priority)
        now = time.time()
        conn = connect(self._db_path)
        try:
            cur = conn.execute(
                "INSERT INTO todo_items(title, priority, created_at, is_completed) VALUES (?, ?, ?, 0)",
                (title.strip(), prio.value, now),
            )
            conn.commit()
            item = TodoItem(id=int(cur.lastrowid or 0), title=title.strip(), priority=prio, created_at=now)
        finally:
            conn.close()
        logger.debug("Todo added id=%s priority=%s", item.id, prio.value)
        return item

    def list_items(self, *, include_completed: bool = True) -> list[TodoItem]:
        sql = "SELECT * FROM todo_items"
        if not include_completed:
            sql += " WHERE is_completed = 0"
        conn = connect(self._db_path)
        try:
            return [self._row_to_item(r) for r in conn.execute(sql + " ORDER BY id ASC").fetchall()]
        finally:
            conn.close()

    def set_completed(self, item_id: int, completed: bool = True) -> bool:
        conn = connect(self._db_path)
        try:
            cur = conn.execute(
                "UPDATE todo_items SET is_completed = ? WHERE id = ?",
                (1 if completed else 0, int(item_id)),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def remove_item(self, item_id: int) -> bool:
        conn = connect(self._db_path)
        try:
            cur = conn.execute("DELETE FROM todo_items WHERE id = ?", (int(item_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def remove_by_title(self, title: str) -> int:
        """Returns how many items were removed."""
        conn = connect(self._db_path)
        try:
            cur = conn.execute("DELETE FROM todo_items WHERE title = ?", ((title or "").strip(),))
            conn.commit()
            removed = cur.rowcount
        finally:
            conn.close()
        if removed:
            logger.info("Removed %d to-do item(s) titled %r", removed, title)
        return removed
