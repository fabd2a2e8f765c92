# src/taskboard/tasks/task_form.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from .task_models import Priority, Task

TITLE_REQUIRED = "Task title is required."


@dataclass(slots=True)
class TaskForm:
    """
    Input form state for "add task" and "edit task".

    Fields hold raw user text; conversion happens in to_fields().
    """

    title: str = ""
    description: str = ""
    due_date: str = ""
    priority: Priority = Priority.MEDIUM

    def reset(self) -> None:
        self.title = ""
        self.description = ""
        self.due_date = ""
        self.priority = Priority.MEDIUM

    @classmethod
    def from_task(cls, task: Task) -> TaskForm:
        return cls(
            title=task.title,
            description=task.description or "",
            due_date=task.due_date.isoformat() if task.due_date else "",
            priority=task.priority or Priority.MEDIUM,
        )

    def due_date_value(self) -> str | None:
        """Empty input is stored as NULL, never as an empty string."""
        raw = (self.due_date or "").strip()
        if not raw:
            return None
        try:
            return date.fromisoformat(raw).isoformat()
        except ValueError:
            raise ValueError(f"Invalid due date: {raw!r} (expected YYYY-MM-DD)") from None

    def to_fields(self) -> dict[str, Any]:
        """Row fields for insert or update; ValueError carries the user-facing message."""
        title = (self.title or "").strip()
        if not title:
            raise ValueError(TITLE_REQUIRED)
        return {
            "title": title,
            "description": self.description,
            "due_date": self.due_date_value(),
            "priority": Priority.parse(self.priority).value,
        }
