# tests/test_task_list.py

from __future__ import annotations

import asyncio

import pytest

from taskboard.tasks.task_form import TaskForm
from taskboard.tasks.task_list import CONFIRM_CLEAR_COMPLETED, CONFIRM_DELETE, NOT_LOGGED_IN
from taskboard.tasks.task_models import Priority, TaskFilter

from .conftest import sign_in


async def _add(state, title: str, priority: Priority = Priority.MEDIUM, **kw) -> None:
    form = TaskForm(title=title, priority=priority, **kw)
    assert await state.task_list.add_task(form) is not None


@pytest.mark.asyncio
async def test_unauthenticated_holds_no_tasks_and_blocks_add(state, table, notifier) -> None:
    await state.session.start()

    assert state.task_list.tasks == []
    assert await state.task_list.fetch() == []
    assert table.ops("select") == []

    result = await state.task_list.add_task(TaskForm(title="x"))
    assert result is None
    assert notifier.alerts == [NOT_LOGGED_IN]
    assert table.ops("insert") == []


@pytest.mark.asyncio
async def test_login_fetches_once_scoped_to_user(state, table) -> None:
    await sign_in(state)

    selects = table.ops("select")
    assert len(selects) == 1
    assert selects[0] == {"user_id": state.session.session.user.id, "is_archived": False}


@pytest.mark.asyncio
async def test_priority_order_under_all_preserves_recency_within_ties(state) -> None:
    await sign_in(state)
    await _add(state, "low-1", Priority.LOW)
    await _add(state, "high-2", Priority.HIGH)
    await _add(state, "medium-3", Priority.MEDIUM)
    await _add(state, "high-4", Priority.HIGH)

    titles = [t.title for t in state.task_list.tasks]
    assert titles == ["high-4", "high-2", "medium-3", "low-1"]

    await state.task_list.set_filter(TaskFilter.ACTIVE)
    assert [t.title for t in state.task_list.tasks] == ["high-4", "high-2", "medium-3", "low-1"]


@pytest.mark.asyncio
async def test_no_priority_order_under_completed_and_archived(state) -> None:
    await sign_in(state)
    await _add(state, "high-1", Priority.HIGH)
    await _add(state, "low-2", Priority.LOW)
    for t in list(state.task_list.tasks):
        await state.task_list.toggle_complete(t.id, t.is_complete)

    await state.task_list.set_filter(TaskFilter.COMPLETED)
    assert [t.title for t in state.task_list.tasks] == ["low-2", "high-1"]

    await _add(state, "low-3", Priority.LOW)
    await state.task_list.set_filter(TaskFilter.ALL)
    for t in list(state.task_list.tasks):
        await state.task_list.toggle_archive(t.id, t.is_archived)
    await state.task_list.set_filter(TaskFilter.ARCHIVED)
    assert [t.title for t in state.task_list.tasks] == ["low-3", "low-2", "high-1"]


@pytest.mark.asyncio
async def test_every_filter_returns_only_matching_tasks(state) -> None:
    await sign_in(state)
    for title in ("a", "b", "c", "d"):
        await _add(state, title)
    by_title = {t.title: t for t in state.task_list.tasks}
    await state.task_list.toggle_complete(by_title["b"].id, False)
    await state.task_list.toggle_archive(by_title["c"].id, False)
    await state.task_list.toggle_complete(by_title["d"].id, False)
    await state.task_list.toggle_archive(by_title["d"].id, False)

    expected = {
        TaskFilter.ALL: {"a", "b"},
        TaskFilter.ACTIVE: {"a"},
        TaskFilter.COMPLETED: {"b"},
        TaskFilter.ARCHIVED: {"c", "d"},
    }
    for task_filter, titles in expected.items():
        await state.task_list.set_filter(task_filter)
        assert {t.title for t in state.task_list.tasks} == titles, task_filter


@pytest.mark.asyncio
async def test_add_with_empty_due_date_stores_null_and_resets_form(state, table) -> None:
    await sign_in(state)
    form = state.task_list.form
    form.title = "Buy milk"
    form.description = "2 litres"
    form.due_date = ""
    form.priority = Priority.HIGH

    task = await state.task_list.add_task()

    assert task is not None
    assert table.ops("insert")[0]["due_date"] is None
    assert table.rows()[0]["due_date"] is None
    assert form == TaskForm()
    # insert then exactly one re-fetch
    assert [name for name, _ in table.calls][-2:] == ["insert", "select"]


@pytest.mark.asyncio
async def test_add_with_due_date_passes_literal_date(state, table) -> None:
    await sign_in(state)
    await _add(state, "Taxes", due_date="2026-04-30")
    assert table.ops("insert")[0]["due_date"] == "2026-04-30"
    assert state.task_list.tasks[0].due_date.isoformat() == "2026-04-30"


@pytest.mark.asyncio
async def test_add_rejects_blank_title_and_bad_date(state, table, notifier) -> None:
    await sign_in(state)
    assert await state.task_list.add_task(TaskForm(title="   ")) is None
    assert await state.task_list.add_task(TaskForm(title="ok", due_date="31/12/2026")) is None
    assert table.ops("insert") == []
    assert notifier.alerts[0] == "Task title is required."
    assert notifier.alerts[1].startswith("Invalid due date")


@pytest.mark.asyncio
async def test_add_ignores_duplicate_submit_while_loading(state, table) -> None:
    await sign_in(state)
    table.gate = asyncio.Event()

    first = asyncio.create_task(state.task_list.add_task(TaskForm(title="once")))
    await asyncio.sleep(0)
    assert state.task_list.loading is True

    second = await state.task_list.add_task(TaskForm(title="once"))
    assert second is None

    table.gate.set()
    assert await first is not None
    assert state.task_list.loading is False
    assert len(table.ops("insert")) == 1


@pytest.mark.asyncio
async def test_toggle_complete_is_its_own_inverse(state) -> None:
    await sign_in(state)
    await _add(state, "flip")
    task = state.task_list.tasks[0]
    assert task.is_complete is False

    await state.task_list.toggle_complete(task.id, task.is_complete)
    once = state.task_list.find(task.id)
    assert once is not None and once.is_complete is True

    await state.task_list.toggle_complete(once.id, once.is_complete)
    twice = state.task_list.find(task.id)
    assert twice is not None and twice.is_complete is False


@pytest.mark.asyncio
async def test_edit_overwrites_all_fields_and_clears_edit_state(state, table) -> None:
    await sign_in(state)
    await _add(state, "draft", Priority.LOW, description="old", due_date="2026-01-01")
    task = state.task_list.tasks[0]

    state.task_list.start_editing(task)
    assert state.task_list.edit_form.description == "old"
    assert state.task_list.edit_form.due_date == "2026-01-01"

    ok = await state.task_list.edit_task(task.id, "final", "", "", Priority.HIGH)

    assert ok is True
    assert table.ops("update")[-1] == {
        "patch": {"title": "final", "description": "", "due_date": None, "priority": "High"},
        "criteria": {"id": task.id},
    }
    assert state.task_list.editing_id is None
    edited = state.task_list.tasks[0]
    assert (edited.title, edited.due_date, edited.priority) == ("final", None, Priority.HIGH)


@pytest.mark.asyncio
async def test_edit_rejects_blank_title_and_keeps_edit_state(state, table, notifier) -> None:
    await sign_in(state)
    await _add(state, "real")
    task = state.task_list.tasks[0]

    ok = await state.task_list.edit_task(task.id, "   ", "", "", Priority.HIGH)

    assert ok is False
    assert table.ops("update") == []
    assert notifier.alerts == ["Task title is required."]
    assert state.task_list.editing_id == task.id
    assert table.rows()[0]["title"] == "real"

    state.task_list.start_editing(task)
    state.task_list.edit_form.title = ""
    assert await state.task_list.save_edit() is False
    assert table.ops("update") == []


@pytest.mark.asyncio
async def test_delete_without_confirmation_does_nothing(state, table, confirmer) -> None:
    await sign_in(state)
    await _add(state, "keep me")
    before = table.mutation_count
    confirmer.answer = False

    assert await state.task_list.delete_task(state.task_list.tasks[0].id) is False

    assert confirmer.prompts == [CONFIRM_DELETE]
    assert table.mutation_count == before
    assert len(table.rows()) == 1


@pytest.mark.asyncio
async def test_delete_with_confirmation_removes_task(state, table) -> None:
    await sign_in(state)
    await _add(state, "bye")
    assert await state.task_list.delete_task(state.task_list.tasks[0].id) is True
    assert table.rows() == []
    assert state.task_list.tasks == []


@pytest.mark.asyncio
async def test_clear_completed_removes_only_own_completed(state, table) -> None:
    await table.insert({"user_id": "someone-else", "title": "theirs", "is_complete": True})

    await sign_in(state)
    await _add(state, "open")
    await _add(state, "done")
    await _add(state, "done+archived")
    by_title = {t.title: t for t in state.task_list.tasks}
    await state.task_list.toggle_complete(by_title["done"].id, False)
    await state.task_list.toggle_complete(by_title["done+archived"].id, False)
    await state.task_list.toggle_archive(by_title["done+archived"].id, False)

    assert await state.task_list.clear_completed() is True

    remaining = {r["title"] for r in table.rows()}
    assert remaining == {"theirs", "open"}
    assert table.ops("delete")[-1] == {"user_id": state.session.session.user.id, "is_complete": True}


@pytest.mark.asyncio
async def test_clear_completed_without_session_alerts_after_confirmation(
    state, table, notifier, confirmer
) -> None:
    await state.session.start()
    assert await state.task_list.clear_completed() is False
    assert confirmer.prompts == [CONFIRM_CLEAR_COMPLETED]
    assert notifier.alerts == [NOT_LOGGED_IN]
    assert table.ops("delete") == []


@pytest.mark.asyncio
async def test_fetch_failure_keeps_previous_list(state, table) -> None:
    await sign_in(state)
    await _add(state, "visible")
    before = list(state.task_list.tasks)

    table.fail_on.add("select")
    assert await state.task_list.set_filter(TaskFilter.ACTIVE) is None

    assert state.task_list.tasks == before


@pytest.mark.asyncio
async def test_mutation_failure_alerts_and_skips_refetch(state, table, notifier) -> None:
    await sign_in(state)
    await _add(state, "stuck")
    task = state.task_list.tasks[0]
    selects_before = len(table.ops("select"))

    table.fail_on.add("update")
    assert await state.task_list.toggle_complete(task.id, False) is False

    assert notifier.alerts[-1] == "Error updating task status: update failed: permission denied"
    assert len(table.ops("select")) == selects_before
    assert state.task_list.tasks[0].is_complete is False


@pytest.mark.asyncio
async def test_logout_clears_tasks(state) -> None:
    await sign_in(state)
    await _add(state, "private")
    assert state.task_list.tasks

    await state.session.logout()

    assert state.session.session is None
    assert state.task_list.tasks == []
