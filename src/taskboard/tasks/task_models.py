# src/taskboard/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any

TaskId = int | str


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Sort rank: High first, Low last."""
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: str | None) -> Priority:
        """Case-insensitive parse; blank means the default (Medium)."""
        if raw is None or not str(raw).strip():
            return cls.MEDIUM
        key = str(raw).strip().lower()
        for p in cls:
            if p.value.lower() == key:
                return p
        raise ValueError(f"Unknown priority: {raw!r} (expected Low, Medium or High)")

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        try:
            return cls.parse(raw)
        except ValueError:
            return cls.MEDIUM


_PRIORITY_RANK = {Priority.HIGH: 1, Priority.MEDIUM: 2, Priority.LOW: 3}


class TaskFilter(StrEnum):
    """
    List views.

    - all:       everything not archived
    - active:    not complete, not archived
    - completed: complete, not archived
    - archived:  archived (complete or not)
    """

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"

    @classmethod
    def parse(cls, raw: str) -> TaskFilter:
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            names = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown filter: {raw!r} (expected one of: {names})") from None


def _parse_date(raw: Any) -> date | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw)[:10])


def _parse_datetime(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    return datetime.fromisoformat(str(raw))


@dataclass(slots=True)
class Task:
    """Client-side, non-authoritative copy of one row from the tasks table."""

    id: TaskId
    user_id: str
    title: str
    description: str | None = None
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM
    is_complete: bool = False
    is_archived: bool = False
    created_at: datetime | None = None

    @property
    def status_label(self) -> str:
        return "Complete" if self.is_complete else "Active"

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Task:
        return cls(
            id=row["id"],
            user_id=str(row.get("user_id") or ""),
            title=str(row.get("title") or ""),
            description=row.get("description"),
            due_date=_parse_date(row.get("due_date")),
            priority=Priority.from_db(row.get("priority")),
            is_complete=bool(row.get("is_complete", False)),
            is_archived=bool(row.get("is_archived", False)),
            created_at=_parse_datetime(row.get("created_at")),
        )
