# src/taskboard/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.session_models import greeting_name
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsoleNotifier:
    """Notifier port: prints alerts in the console."""

    def alert(self, message: str) -> None:
        _print_ts(f"[!] {message}")


class ConsoleConfirmer:
    """Confirmer port: a [y/N] prompt; anything but yes declines."""

    def __init__(self, input_fn: InputFn = input) -> None:
        self._input = input_fn

    async def confirm(self, prompt: str) -> bool:
        try:
            answer = await asyncio.to_thread(self._input, f"{prompt} [y/N] ")
        except (EOFError, KeyboardInterrupt):
            return False
        return answer.strip().lower() in {"y", "yes"}


def _prompt(state: AppState) -> str:
    session = state.session.session
    if session is None:
        return "guest> "
    return f"{greeting_name(session)} [{state.task_list.filter.value}]> "


async def run_console_loop(state: AppState, *, input_fn: InputFn = input) -> None:
    logger.info("Console connector started (offline=%s).", state.offline)
    _print_ts("[CONSOLE] Task Manager. Use /help for commands. Use /exit to quit.\n")

    if state.session.session is None:
        _print_ts("Not logged in. Use /login <email> <password> or /signup <email> <password> <name>.")
    else:
        _print_ts(f"Welcome, {greeting_name(state.session.session)}!")

    while True:
        try:
            user_input = (await asyncio.to_thread(input_fn, _prompt(state))).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            _print_ts("Commands start with '/'. Use /help to list them.")
            continue

        try:
            response = await command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(f"[{_ts_local()}] {response}")

    logger.info("Console connector finished.")
