# tasks/task_store.py

from __future__ import annotations

import json
import logging
import os
import sqlite3
import time
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Any

from ..storage.sqlite_utils import connect, ensure_columns
from .task_models import CalendarTask, Recurrence, as_day, parse_anchor_date

logger = logging.getLogger(__name__)


class RecurringDeleteNotConfirmed(Exception):
    """Deleting a recurring task removes every future occurrence and needs confirmation."""

    def __init__(self, task: CalendarTask) -> None:
        super().__init__(f"Deleting recurring task {task.id} ({task.title!r}) requires confirmation")
        self.task = task


class CalendarTaskStore:
    """
    SQLite calendar task store.

    The collection is append-only in order: list_tasks() returns tasks in
    insertion order, which is the order the calendar shows them in.

    The schema is migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "calendar_tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except Exception:
            total = -1
        logger.info("CalendarTaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        return connect(self._db_path)

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS calendar_tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    anchor_date TEXT NOT NULL,
                    recurrence TEXT NOT NULL DEFAULT 'none',
                    created_at REAL NOT NULL
                )
                """
            )

            ensure_columns(
                cur,
                "calendar_tasks",
                {
                    "recurrence": "TEXT NOT NULL DEFAULT 'none'",
                    "created_at": "REAL NOT NULL DEFAULT 0",
                },
            )

            cur.execute("CREATE INDEX IF NOT EXISTS idx_calendar_tasks_anchor ON calendar_tasks(anchor_date)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> CalendarTask:
        return CalendarTask(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            anchor_date=parse_anchor_date(row["anchor_date"]),
            # Corrupt tags are read back as NONE.
            recurrence=Recurrence.parse(row["recurrence"]),
            created_at=float(row["created_at"] or 0.0),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM calendar_tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        title: str,
        anchor_date: date,
        recurrence: Recurrence | str | None = Recurrence.NONE,
    ) -> CalendarTask:
        if not title or not title.strip():
            raise ValueError("title is required")

        rec = Recurrence.parse(recurrence)
        day = as_day(anchor_date)
        now = time.time()

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO calendar_tasks(title, anchor_date, recurrence, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (title.strip(), day.isoformat(), rec.value, now),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for calendar_tasks insert")
            task = CalendarTask(
                id=int(rowid),
                title=title.strip(),
                anchor_date=day,
                recurrence=rec,
                created_at=now,
            )
            logger.debug("Task added id=%s anchor=%s recurrence=%s", task.id, day, rec.value)
            return task
        finally:
            conn.close()

    def _read_task(self, row: sqlite3.Row) -> CalendarTask | None:
        """Row -> task, or None (logged) when the stored anchor date is unreadable."""
        try:
            return self._row_to_task(row)
        except ValueError:
            logger.warning("Skipping task id=%s with unreadable anchor_date=%r", row["id"], row["anchor_date"])
            return None

    def get_task(self, task_id: int) -> CalendarTask | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM calendar_tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._read_task(row) if row else None
        finally:
            conn.close()

    def list_tasks(self) -> list[CalendarTask]:
        """All readable tasks in insertion order."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM calendar_tasks ORDER BY id ASC")
            tasks = (self._read_task(row) for row in cur.fetchall())
            return [t for t in tasks if t is not None]
        finally:
            conn.close()

    def delete_task(self, task_id: int, *, confirmed: bool = False) -> bool:
        """
        Delete a task by id.

        Recurring tasks are only deleted when confirmed=True, otherwise
        RecurringDeleteNotConfirmed is raised and nothing changes.
        Rows with an unreadable anchor date never show up in the calendar,
        so they are removed without confirmation.
        Returns False if no such row exists.
        """
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM calendar_tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            if row is None:
                return False

            task = self._read_task(row)
            if task is not None and task.is_recurring and not confirmed:
                raise RecurringDeleteNotConfirmed(task)

            cur.execute("DELETE FROM calendar_tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            deleted = cur.rowcount == 1
        finally:
            conn.close()

        if deleted:
            logger.info("Task deleted id=%s recurring=%s", task_id, bool(task and task.is_recurring))
        return deleted

    # ---- record import / export ----

    def import_records(self, records: Iterable[Any]) -> int:
        """
        Append {title, anchorDate, recurrence} records.

        Bad records are skipped (logged), unknown recurrence tags become "none".
        Returns the number of imported tasks.
        """
        imported = 0
        for i, rec in enumerate(records):
            if not isinstance(rec, dict):
                logger.warning("Skipping record #%d: not an object", i)
                continue
            try:
                task = CalendarTask.from_record(rec)
            except ValueError as e:
                logger.warning("Skipping record #%d: %s", i, e)
                continue
            self.add_task(title=task.title, anchor_date=task.anchor_date, recurrence=task.recurrence)
            imported += 1
        logger.info("Imported %d calendar task record(s)", imported)
        return imported

    def export_records(self) -> list[dict[str, Any]]:
        return [t.to_record() for t in self.list_tasks()]

    def import_json(self, path: str | Path) -> int:
        data = json.loads(Path(path).read_text("utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON list of task records in {path}")
        return self.import_records(data)

    def export_json(self, path: str | Path) -> int:
        path = Path(path)
        records = self.export_records()
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(records, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, path)
        logger.info("Exported %d calendar task record(s) to %s", len(records), path)
        return len(records)
