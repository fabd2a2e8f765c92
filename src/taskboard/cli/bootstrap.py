# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- ensures the local (gitignored) data directory exists,
- picks the backend (Supabase when configured, offline in-memory otherwise),
- wires both controllers so a session change re-fetches the task list.
"""

from __future__ import annotations

import contextlib
import logging

from ..backend.http import build_http_client
from ..backend.offline import InMemoryTaskTable, OfflineAuthProvider
from ..backend.supabase_auth import SupabaseAuth
from ..backend.supabase_tables import SupabaseTaskTable
from ..config import get_settings
from ..core.ports import AuthProvider, Confirmer, Notifier, TaskTable
from ..core.session_controller import SessionController
from ..core.state import AppState
from ..tasks.task_list import TaskListController

logger = logging.getLogger(__name__)


def create_initial_state(
        *,
        notifier: Notifier,
        confirmer: Confirmer,
        settings=None,
        transport=None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). `transport` is handed to httpx (tests).
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    auth: AuthProvider
    table: TaskTable
    http_client = None

    if settings.offline_mode or not settings.supabase_configured:
        logger.warning("Supabase is not configured; using the in-memory offline backend.")
        auth = OfflineAuthProvider()
        table = InMemoryTaskTable()
    else:
        http_client = build_http_client(settings, transport=transport)
        supabase_auth = SupabaseAuth(http_client, anon_key=settings.supabase_anon_key)
        auth = supabase_auth
        table = SupabaseTaskTable(
            http_client,
            anon_key=settings.supabase_anon_key,
            table=settings.tasks_table,
            token_source=supabase_auth.fresh_access_token,
        )
        logger.info("Using Supabase backend url=%s table=%s", settings.supabase_url, settings.tasks_table)

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
        http_client=http_client,
    )


async def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    state.session.close()

    for closer in (state.table.close, state.auth.close):
        try:
            await closer()
        except Exception:
            logger.debug("Backend close failed.", exc_info=True)

    if state.http_client is not None:
        with contextlib.suppress(Exception):
            await state.http_client.aclose()
