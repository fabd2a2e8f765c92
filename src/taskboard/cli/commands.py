# src/taskboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import cast

from ..core.session_models import greeting_name
from ..core.state import AppState
from ..tasks.task_form import TaskForm
from ..tasks.task_models import Priority, Task, TaskFilter

CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], str], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

# Which view a command belongs to. GUEST commands are refused while signed in;
# AUTHED ones still run for guests so the controllers can report "not logged in".
GUEST = "guest"
AUTHED = "authed"
ANY = "any"


@dataclass(slots=True)
class _Entry:
    handler: CommandHandler
    help_text: str
    mode: str


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, _Entry] = {}
        self._help: dict[str, _Entry] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        mode: str = ANY,
    ) -> None:
        aliases = aliases or []
        entry = _Entry(handler=handler, help_text=help_text, mode=mode)
        key = name.lower()
        self._handlers[key] = entry
        self._help[key] = entry
        for alias in aliases:
            self._handlers[alias.lower()] = entry

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        head, _, rest = line[1:].partition(" ")
        name = head.strip().lower()
        if not name:
            return "Empty command. Use /help to list available commands."

        entry = self._handlers.get(name)
        if not entry:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if entry.mode == GUEST and state.session.is_authenticated:
            return f"Already logged in. Use /logout before /{name}."

        args = rest.split()
        try:
            nparams = len(inspect.signature(entry.handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, entry.handler)
            return await h3(state, args, rest.strip())

        h2 = cast(CommandHandler2, entry.handler)
        return await h2(state, args)

    def build_help(self, authenticated: bool | None = None) -> str:
        lines = ["Available commands:"]
        for name, entry in self._help.items():
            if authenticated is True and entry.mode == GUEST:
                continue
            if authenticated is False and entry.mode == AUTHED:
                continue
            lines.append(f"  /{name} - {entry.help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def format_task(n: int, task: Task) -> str:
    box = "[x]" if task.is_complete else "[ ]"
    lines = [f"{n:>2}. {box} {task.title}"]
    if task.description:
        lines.append(f"      {task.description}")
    details = [f"Status: {task.status_label}", f"Priority: {task.priority.value}"]
    if task.due_date:
        details.insert(0, f"Due: {task.due_date.isoformat()}")
    if task.is_archived:
        details.append("(archived)")
    lines.append("      " + " | ".join(details))
    return "\n".join(lines)


def render_tasks(state: AppState) -> str:
    tl = state.task_list
    header = f"Your Tasks ({tl.filter.value}):"
    if not tl.tasks:
        return f"{header}\n  No tasks yet. Add one above!"
    body = "\n".join(format_task(i, t) for i, t in enumerate(tl.tasks, start=1))
    return f"{header}\n{body}"


def _resolve(state: AppState, args: list[str]) -> Task | str:
    """Map a 1-based row number from the rendered list to a Task (or an error text)."""
    if not args:
        return "Missing task number. Use /list to see numbers."
    try:
        n = int(args[0])
    except ValueError:
        return f"Not a task number: {args[0]!r}."
    tasks = state.task_list.tasks
    if n < 1 or n > len(tasks):
        return f"No task #{n} in the current list."
    return tasks[n - 1]


def _split_fields(text: str) -> list[str]:
    return [p.strip() for p in text.split("|")]


# ---- guest view ----


async def cmd_login(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /login <email> <password>"
    ok = await state.session.login(args[0], args[1])
    if not ok:
        return "Login failed."
    return f"Welcome, {greeting_name(state.session.session)}!\n{render_tasks(state)}"


async def cmd_signup(state: AppState, args: list[str]) -> str:
    if len(args) < 3:
        return "Usage: /signup <email> <password> <display name>"
    ok = await state.session.sign_up(args[0], args[1], " ".join(args[2:]))
    return "Account created. Confirm it, then /login." if ok else "Sign-up failed."


# ---- authenticated view ----


async def cmd_logout(state: AppState, args: list[str]) -> str:
    await state.session.logout()
    return "Logged out."


async def cmd_whoami(state: AppState, args: list[str]) -> str:
    session = state.session.session
    if session is None:
        return "Not logged in. Use /login or /signup."
    name = session.user.display_name or "(no display name)"
    return f"Logged in as {session.user.email or session.user.id} - {name}"


async def cmd_list(state: AppState, args: list[str]) -> str:
    if not state.session.is_authenticated:
        return "Not logged in. Use /login or /signup."
    await state.task_list.fetch()
    return render_tasks(state)


async def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                  -> show current filter
    /filter all|active|completed|archived
    """
    if not args:
        return f"Current filter: {state.task_list.filter.value}. Use /filter all|active|completed|archived."
    try:
        task_filter = TaskFilter.parse(args[0])
    except ValueError as e:
        return str(e)
    await state.task_list.set_filter(task_filter)
    return render_tasks(state)


async def cmd_add(state: AppState, args: list[str], rest: str) -> str:
    """/add <title> [| description [| YYYY-MM-DD [| Low|Medium|High]]]"""
    parts = _split_fields(rest) if rest else []
    form = state.task_list.form
    form.title = parts[0] if parts else ""
    form.description = parts[1] if len(parts) > 1 else ""
    form.due_date = parts[2] if len(parts) > 2 else ""
    try:
        form.priority = Priority.parse(parts[3] if len(parts) > 3 else None)
    except ValueError as e:
        return str(e)

    task = await state.task_list.add_task(form)
    if task is None:
        return "Task not added."
    return render_tasks(state)


async def cmd_done(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    await state.task_list.toggle_complete(task.id, task.is_complete)
    return render_tasks(state)


async def cmd_archive(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    await state.task_list.toggle_archive(task.id, task.is_archived)
    return render_tasks(state)


def _describe_form(form: TaskForm) -> str:
    return (
        f"  title: {form.title}\n"
        f"  description: {form.description or '-'}\n"
        f"  due: {form.due_date or '-'}\n"
        f"  priority: {form.priority.value}"
    )


async def cmd_edit(state: AppState, args: list[str], rest: str) -> str:
    """
    /edit <n>                                   -> open the task in the edit form
    /edit <n> title | description | due | prio  -> overwrite and save

    Empty parts keep the prefilled value, "-" clears description/due date.
    """
    task = _resolve(state, args)
    if isinstance(task, str):
        return task

    tl = state.task_list
    tl.start_editing(task)

    fields_text = rest[len(args[0]):].strip()
    if not fields_text:
        return (
            f"Editing #{args[0]}:\n{_describe_form(tl.edit_form)}\n"
            f"Use /edit {args[0]} <title> | <description> | <due> | <priority> to save, or /cancel."
        )

    parts = _split_fields(fields_text)
    form = tl.edit_form
    if parts[0]:
        form.title = parts[0]
    if len(parts) > 1 and parts[1]:
        form.description = "" if parts[1] == "-" else parts[1]
    if len(parts) > 2 and parts[2]:
        form.due_date = "" if parts[2] == "-" else parts[2]
    if len(parts) > 3 and parts[3]:
        try:
            form.priority = Priority.parse(parts[3])
        except ValueError as e:
            return str(e)

    ok = await tl.save_edit(task.id)
    return render_tasks(state) if ok else "Task not updated."


async def cmd_cancel(state: AppState, args: list[str]) -> str:
    if state.task_list.editing_id is None:
        return "Nothing to cancel."
    state.task_list.cancel_editing()
    return "Edit cancelled."


async def cmd_delete(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if isinstance(task, str):
        return task
    ok = await state.task_list.delete_task(task.id)
    return render_tasks(state) if ok else "Task kept."


async def cmd_clear(state: AppState, args: list[str]) -> str:
    ok = await state.task_list.clear_completed()
    return render_tasks(state) if ok else "Nothing cleared."


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help(state.session.is_authenticated)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("login", cmd_login, help_text="Log in: /login <email> <password>.", mode=GUEST)
registry.register(
    "signup",
    cmd_signup,
    help_text="Create an account: /signup <email> <password> <display name>.",
    mode=GUEST,
)
registry.register("whoami", cmd_whoami, help_text="Show the signed-in user.", mode=AUTHED)
registry.register("logout", cmd_logout, help_text="Log out.", mode=AUTHED)
registry.register("list", cmd_list, help_text="Reload and show tasks.", aliases=["ls"], mode=AUTHED)
registry.register(
    "filter", cmd_filter, help_text="Switch view: /filter all|active|completed|archived.", mode=AUTHED
)
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [| description [| YYYY-MM-DD [| Low|Medium|High]]].",
    mode=AUTHED,
)
registry.register("done", cmd_done, help_text="Toggle complete: /done <n>.", mode=AUTHED)
registry.register("archive", cmd_archive, help_text="Toggle archive: /archive <n>.", mode=AUTHED)
registry.register(
    "edit", cmd_edit, help_text="Edit: /edit <n> [title | description | due | priority].", mode=AUTHED
)
registry.register("cancel", cmd_cancel, help_text="Cancel the current edit.", mode=AUTHED)
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <n>.", aliases=["rm"], mode=AUTHED)
registry.register("clear", cmd_clear, help_text="Delete all completed tasks.", mode=AUTHED)
