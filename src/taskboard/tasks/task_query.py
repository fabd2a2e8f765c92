# src/taskboard/tasks/task_query.py

"""Filter predicates and client-side ordering for the task list."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .task_models import Task, TaskFilter


def build_criteria(user_id: str, task_filter: TaskFilter) -> dict[str, Any]:
    """Equality criteria for one list view, always scoped to the owner."""
    criteria: dict[str, Any] = {"user_id": user_id}
    if task_filter == TaskFilter.ACTIVE:
        criteria["is_complete"] = False
        criteria["is_archived"] = False
    elif task_filter == TaskFilter.COMPLETED:
        criteria["is_complete"] = True
        criteria["is_archived"] = False
    elif task_filter == TaskFilter.ARCHIVED:
        criteria["is_archived"] = True
    else:
        criteria["is_archived"] = False
    return criteria


def matches_filter(task: Task, task_filter: TaskFilter) -> bool:
    if task_filter == TaskFilter.ACTIVE:
        return not task.is_complete and not task.is_archived
    if task_filter == TaskFilter.COMPLETED:
        return task.is_complete and not task.is_archived
    if task_filter == TaskFilter.ARCHIVED:
        return task.is_archived
    return not task.is_archived


def applies_priority_order(task_filter: TaskFilter) -> bool:
    return task_filter in (TaskFilter.ALL, TaskFilter.ACTIVE)


def sort_by_priority(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable: equal priorities keep the created_at-desc order from the query.
    return sorted(tasks, key=lambda t: t.priority.rank)
