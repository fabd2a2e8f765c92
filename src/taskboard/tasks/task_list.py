# src/taskboard/tasks/task_list.py

from __future__ import annotations

"""
Task list controller.

Every mutation is: one remote write, then one full re-fetch. There is no
local cache reconciliation; `tasks` only changes after a successful fetch.
Failures are surfaced through the Notifier and leave the visible state as-is.
"""

import logging

from ..core.errors import StoreError
from ..core.ports import Confirmer, Notifier, TaskTable
from ..core.session_models import AuthEvent, Session
from .task_form import TaskForm
from .task_models import Priority, Task, TaskFilter, TaskId
from .task_query import applies_priority_order, build_criteria, sort_by_priority

logger = logging.getLogger(__name__)

NOT_LOGGED_IN = "User not logged in."
CONFIRM_DELETE = "Are you sure you want to delete this task?"
CONFIRM_CLEAR_COMPLETED = "Are you sure you want to delete all completed tasks?"


class TaskListController:
    def __init__(self, table: TaskTable, notifier: Notifier, confirmer: Confirmer) -> None:
        self._table = table
        self._notifier = notifier
        self._confirmer = confirmer

        self.session: Session | None = None
        self.filter: TaskFilter = TaskFilter.ALL
        self.tasks: list[Task] = []

        self.form = TaskForm()
        self.edit_form = TaskForm()
        self.editing_id: TaskId | None = None

        # Guards against a duplicate submit while an insert is in flight.
        self.loading = False

    # ---- queries ----

    async def fetch(
            self,
            session: Session | None = None,
            task_filter: TaskFilter | None = None,
    ) -> list[Task] | None:
        """
        Load the current view from the store.

        Returns the new list, or None when the query failed (previous list kept).
        """
        session = session if session is not None else self.session
        task_filter = task_filter if task_filter is not None else self.filter

        if session is None:
            self.tasks = []
            return []

        criteria = build_criteria(session.user.id, task_filter)
        try:
            rows = await self._table.select(criteria, order_by="created_at", descending=True)
        except StoreError as e:
            logger.error("Error fetching tasks: %s", e.message)
            return None

        tasks = [Task.from_row(r) for r in rows]
        if applies_priority_order(task_filter):
            tasks = sort_by_priority(tasks)

        self.tasks = tasks
        logger.debug("Fetched %d tasks filter=%s user=%s", len(tasks), task_filter.value, session.user.id)
        return tasks

    async def on_session_change(self, event: AuthEvent, session: Session | None) -> None:
        self.session = session
        if session is None:
            self.cancel_editing()
            self.form.reset()
        await self.fetch()

    async def set_filter(self, task_filter: TaskFilter) -> list[Task] | None:
        self.filter = task_filter
        return await self.fetch()

    def find(self, task_id: TaskId) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    # ---- create ----

    async def add_task(self, form: TaskForm | None = None) -> Task | None:
        form = form if form is not None else self.form

        if self.loading:
            logger.debug("add_task ignored: insert already in flight")
            return None

        self.loading = True
        try:
            if self.session is None:
                self._notifier.alert(NOT_LOGGED_IN)
                return None

            try:
                fields = form.to_fields()
            except ValueError as e:
                self._notifier.alert(str(e))
                return None

            row = {"user_id": self.session.user.id, **fields}
            try:
                created = await self._table.insert(row)
            except StoreError as e:
                logger.info("Insert failed: %s", e.message)
                self._notifier.alert(e.message)
                return None

            form.reset()
            task = Task.from_row(created)
            logger.info("Task added id=%s priority=%s", task.id, task.priority.value)
        finally:
            self.loading = False

        await self.fetch()
        return task

    # ---- toggles ----

    async def toggle_complete(self, task_id: TaskId, current_status: bool) -> bool:
        return await self._update_one(
            task_id,
            {"is_complete": not current_status},
            error_prefix="Error updating task status: ",
        )

    async def toggle_archive(self, task_id: TaskId, current_status: bool) -> bool:
        return await self._update_one(
            task_id,
            {"is_archived": not current_status},
            error_prefix="Error updating task archive status: ",
        )

    # ---- edit ----

    def start_editing(self, task: Task) -> None:
        self.editing_id = task.id
        self.edit_form = TaskForm.from_task(task)

    def cancel_editing(self) -> None:
        self.editing_id = None
        self.edit_form = TaskForm()

    async def save_edit(self, task_id: TaskId | None = None) -> bool:
        task_id = task_id if task_id is not None else self.editing_id
        if task_id is None:
            self._notifier.alert("No task is being edited.")
            return False

        try:
            patch = self.edit_form.to_fields()
        except ValueError as e:
            self._notifier.alert(str(e))
            return False

        ok = await self._update_one(task_id, patch, error_prefix="Error updating task: ")
        if ok:
            self.cancel_editing()
        return ok

    async def edit_task(
            self,
            task_id: TaskId,
            title: str,
            description: str = "",
            due_date: str = "",
            priority: Priority | str = Priority.MEDIUM,
    ) -> bool:
        try:
            parsed = Priority.parse(priority)
        except ValueError as e:
            self._notifier.alert(str(e))
            return False
        self.editing_id = task_id
        self.edit_form = TaskForm(title=title, description=description, due_date=due_date, priority=parsed)
        return await self.save_edit(task_id)

    # ---- delete ----

    async def delete_task(self, task_id: TaskId) -> bool:
        if not await self._confirmer.confirm(CONFIRM_DELETE):
            return False

        try:
            await self._table.delete({"id": task_id})
        except StoreError as e:
            self._notifier.alert("Error deleting task: " + e.message)
            return False

        logger.info("Task deleted id=%s", task_id)
        if self.editing_id == task_id:
            self.cancel_editing()
        await self.fetch()
        return True

    async def clear_completed(self) -> bool:
        if not await self._confirmer.confirm(CONFIRM_CLEAR_COMPLETED):
            return False

        if self.session is None:
            self._notifier.alert(NOT_LOGGED_IN)
            return False

        try:
            removed = await self._table.delete({"user_id": self.session.user.id, "is_complete": True})
        except StoreError as e:
            self._notifier.alert("Error clearing completed tasks: " + e.message)
            return False

        logger.info("Cleared %d completed tasks user=%s", len(removed), self.session.user.id)
        await self.fetch()
        return True

    # ---- helpers ----

    async def _update_one(self, task_id: TaskId, patch: dict, *, error_prefix: str) -> bool:
        try:
            await self._table.update(patch, {"id": task_id})
        except StoreError as e:
            self._notifier.alert(error_prefix + e.message)
            return False
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(patch))
        await self.fetch()
        return True
