# notes/note_store.py

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path

from ..storage.sqlite_utils import connect, ensure_columns
from .note_models import Note, normalize_title

logger = logging.getLogger(__name__)


class NoteStore:
    """
    SQLite notes store.

    Notes are listed newest first. Search is a case-insensitive substring
    match on the title; an empty query lists everything.
    """

    def __init__(self, db_path: str | Path = "notes.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("NoteStore ready db=%s total=%s", self._db_path, self.count_notes())

    def close(self) -> None:
        return

    def _ensure_schema(self) -> None:
        conn = connect(self._db_path)
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS notes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL DEFAULT '',
                    created_at REAL NOT NULL
                )
                """
            )
            ensure_columns(cur, "notes", {"updated_at": "REAL NOT NULL DEFAULT 0"})
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_note(row: sqlite3.Row) -> Note:
        return Note(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            content=str(row["content"] or ""),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    def count_notes(self) -> int:
        conn = connect(self._db_path)
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM notes").fetchone()
            return int(n)
        finally:
            conn.close()

    def add_note(self, *, title: str | None, content: str = "") -> Note:
        now = time.time()
        clean_title = normalize_title(title)
        conn = connect(self._db_path)
        try:
            cur = conn.execute(
                "INSERT INTO notes(title, content, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (clean_title, content or "", now, now),
            )
            conn.commit()
            note = Note(
                id=int(cur.lastrowid or 0),
                title=clean_title,
                content=content or "",
                created_at=now,
                updated_at=now,
            )
        finally:
            conn.close()
        logger.debug("Note added id=%s", note.id)
        return note

    def get_note(self, note_id: int) -> Note | None:
        conn = connect(self._db_path)
        try:
            row = conn.execute("SELECT * FROM notes WHERE id = ?", (int(note_id),)).fetchone()
            return self._row_to_note(row) if row else None
        finally:
            conn.close()

    def update_note(self, note_id: int, *, title: str | None = None, content: str | None = None) -> Note | None:
        """Change title and/or content; None leaves a field as it is. Returns the saved note."""
        current = self.get_note(note_id)
        if current is None:
            return None

        new_title = current.title if title is None else normalize_title(title)
        new_content = current.content if content is None else content
        now = time.time()

        conn = connect(self._db_path)
        try:
            conn.execute(
                "UPDATE notes SET title = ?, content = ?, updated_at = ? WHERE id = ?",
                (new_title, new_content, now, int(note_id)),
            )
            conn.commit()
        finally:
            conn.close()
        return Note(
            id=current.id,
            title=new_title,
            content=new_content,
            created_at=current.created_at,
            updated_at=now,
        )

    def delete_note(self, note_id: int) -> bool:
        conn = connect(self._db_path)
        try:
            cur = conn.execute("DELETE FROM notes WHERE id = ?", (int(note_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def list_notes(self) -> list[Note]:
        conn = connect(self._db_path)
        try:
            rows = conn.execute("SELECT * FROM notes ORDER BY created_at DESC, id DESC").fetchall()
            return [self._row_to_note(r) for r in rows]
        finally:
            conn.close()

    def search_notes(self, query: str) -> list[Note]:
        return [n for n in self.list_notes() if n.matches(query)]
