# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.backend.offline import OfflineAuthProvider
from taskboard.core.session_controller import SessionController
from taskboard.core.state import AppState
from taskboard.tasks.task_list import TaskListController

from .fakes import FakeConfirmer, FakeNotifier, RecordingTaskTable


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        supabase_url="https://project.supabase.test",
        supabase_anon_key="anon-key",
        supabase_configured=True,
        tasks_table="tasks",
        http_connect_timeout=1.0,
        http_read_timeout=1.0,
        offline_mode=False,
    )


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def confirmer() -> FakeConfirmer:
    return FakeConfirmer(answer=True)


@pytest.fixture()
def table() -> RecordingTaskTable:
    return RecordingTaskTable()


@pytest.fixture()
def auth() -> OfflineAuthProvider:
    return OfflineAuthProvider()


@pytest.fixture()
def state(settings, auth, table, notifier, confirmer) -> AppState:
    """
    AppState wired with the offline auth provider and a recording in-memory table.

    The session controller is not started here; tests call `await state.session.start()`.
    """
    session = SessionController(auth, notifier)
    task_list = TaskListController(table, notifier, confirmer)
    session.add_listener(task_list.on_session_change)
    return AppState(
        settings=settings,
        auth=auth,
        table=table,
        notifier=notifier,
        confirmer=confirmer,
        session=session,
        task_list=task_list,
    )


async def sign_in(state: AppState, email: str = "ada@example.com", name: str = "Ada Lovelace") -> None:
    """Register + log in through the controllers (helper, not a fixture)."""
    await state.session.start()
    await state.auth.sign_up(email, "secret", {"display_name": name})
    assert await state.session.login(email, "secret")
