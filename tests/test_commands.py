# tests/test_commands.py

from __future__ import annotations

import pytest

from taskboard.cli.commands import CommandRegistry, registry
from taskboard.tasks.task_models import Priority, TaskFilter

from .conftest import sign_in


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    seen: dict[str, object] = {}

    async def h2(state, args):
        seen["h2"] = args
        return "h2"

    async def h3(state, args, rest):
        seen["h3"] = rest
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert await reg.handle(state, "/a x y") == "h2"
    assert await reg.handle(state, "/bee one | two") == "h3"
    assert seen == {"h2": ["x", "y"], "h3": "one | two"}


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_help_lists_commands_for_current_view(state) -> None:
    await state.session.start()
    guest_help = await registry.handle(state, "/help")
    assert "/login" in guest_help and "/add" not in guest_help

    await sign_in(state)
    authed_help = await registry.handle(state, "/help")
    assert "/add" in authed_help and "/login" not in authed_help


@pytest.mark.asyncio
async def test_login_command_greets_by_surname(state) -> None:
    await state.session.start()
    await state.auth.sign_up("grace@example.com", "pw", {"display_name": "Grace Brewster Hopper"})

    out = await registry.handle(state, "/login grace@example.com pw")

    assert out.startswith("Welcome, Hopper!")
    assert "No tasks yet. Add one above!" in out


@pytest.mark.asyncio
async def test_add_parses_pipe_separated_fields(state, table) -> None:
    await sign_in(state)

    out = await registry.handle(state, "/add Pay rent | via bank | 2026-11-01 | high")

    row = table.ops("insert")[0]
    assert row["title"] == "Pay rent"
    assert row["description"] == "via bank"
    assert row["due_date"] == "2026-11-01"
    assert row["priority"] == "High"
    assert "Pay rent" in out and "Due: 2026-11-01" in out and "Priority: High" in out


@pytest.mark.asyncio
async def test_add_rejects_unknown_priority(state, table) -> None:
    await sign_in(state)
    out = await registry.handle(state, "/add Thing | | | urgent")
    assert "Unknown priority" in out
    assert table.ops("insert") == []


@pytest.mark.asyncio
async def test_row_numbers_drive_done_edit_and_delete(state, table, confirmer) -> None:
    await sign_in(state)
    await registry.handle(state, "/add first")
    await registry.handle(state, "/add second | | | Low")

    # priority order: "first" (Medium) is row 1, "second" (Low) is row 2
    out = await registry.handle(state, "/done 2")
    assert "[x] second" in out

    out = await registry.handle(state, "/edit 1")
    assert "Editing #1" in out and state.task_list.editing_id is not None
    assert await registry.handle(state, "/cancel") == "Edit cancelled."

    await registry.handle(state, "/edit 1 renamed | - | 2026-12-24 | High")
    renamed = state.task_list.tasks[0]
    assert (renamed.title, renamed.priority, renamed.due_date.isoformat()) == ("renamed", Priority.HIGH, "2026-12-24")

    confirmer.answer = False
    assert await registry.handle(state, "/delete 1") == "Task kept."
    confirmer.answer = True
    await registry.handle(state, "/delete 1")
    assert [r["title"] for r in table.rows()] == ["second"]

    assert "No task #9" in await registry.handle(state, "/done 9")
    assert "Not a task number" in await registry.handle(state, "/archive x")


@pytest.mark.asyncio
async def test_filter_command(state) -> None:
    await sign_in(state)
    assert "Unknown filter" in await registry.handle(state, "/filter later")
    out = await registry.handle(state, "/filter Completed")
    assert state.task_list.filter == TaskFilter.COMPLETED
    assert out.startswith("Your Tasks (completed):")


@pytest.mark.asyncio
async def test_guest_add_shows_not_logged_in(state, notifier) -> None:
    await state.session.start()
    assert await registry.handle(state, "/add anything") == "Task not added."
    assert notifier.alerts == ["User not logged in."]


@pytest.mark.asyncio
async def test_guest_only_commands_refused_while_logged_in(state) -> None:
    await sign_in(state)
    user = state.session.session.user

    out = await registry.handle(state, "/login someone@example.com pw")
    assert out == "Already logged in. Use /logout before /login."
    out = await registry.handle(state, "/signup x@example.com pw X")
    assert out == "Already logged in. Use /logout before /signup."
    assert state.session.session.user == user
