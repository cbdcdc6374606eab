# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class Recurrence(StrEnum):
    """
    Recurrence tag of a calendar task.

    Notes:
    - NONE means the task occurs exactly once, on its anchor date.
    - Unknown or corrupt tags always degrade to NONE (never rejected).
    """

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, raw: Any) -> Recurrence:
        if isinstance(raw, cls):
            return raw
        if not raw or not isinstance(raw, str):
            return cls.NONE
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.NONE

    @property
    def is_recurring(self) -> bool:
        return self is not Recurrence.NONE


def as_day(value: date | datetime) -> date:
    """Reduce a date/datetime to its local calendar day (time-of-day is ignored)."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def parse_anchor_date(raw: Any) -> date:
    """
    Parse an anchor date from a persisted record.

    Accepts date/datetime objects, ISO-8601 dates ("2024-01-15")
    and ISO-8601 datetimes ("2024-01-15T09:30:00Z").
    Raises ValueError for anything else.
    """
    if isinstance(raw, (date, datetime)):
        return as_day(raw)
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"anchor date is missing or not a string: {raw!r}")

    s = raw.strip()
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    return as_day(datetime.fromisoformat(s))


@dataclass(slots=True, frozen=True)
class CalendarTask:
    title: str
    anchor_date: date
    recurrence: Recurrence = Recurrence.NONE

    id: int | None = None
    created_at: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "anchor_date", as_day(self.anchor_date))
        object.__setattr__(self, "recurrence", Recurrence.parse(self.recurrence))

    @property
    def is_recurring(self) -> bool:
        return self.recurrence.is_recurring

    @property
    def display_text(self) -> str:
        """Title as shown in the day list, e.g. "Gym (Weekly)"."""
        if self.recurrence.is_recurring:
            return f"{self.title} ({self.recurrence.value.capitalize()})"
        return self.title

    def to_record(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "anchorDate": self.anchor_date.isoformat(),
            "recurrence": self.recurrence.value if self.recurrence.is_recurring else None,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> CalendarTask:
        """
        Build a task from {title, anchorDate, recurrence}.

        Raises ValueError on a blank title or an unparseable anchor date.
        The recurrence tag is never a reason to reject a record.
        """
        title = str(record.get("title") or "").strip()
        if not title:
            raise ValueError("title is required")
        return cls(
            title=title,
            anchor_date=parse_anchor_date(record.get("anchorDate")),
            recurrence=Recurrence.parse(record.get("recurrence")),
        )
