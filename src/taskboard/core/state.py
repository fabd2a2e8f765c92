# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_list import TaskListController
from .ports import AuthProvider, Confirmer, Notifier, TaskTable
from .session_controller import SessionController


@dataclass
class AppState:
    settings: Any

    auth: AuthProvider
    table: TaskTable
    notifier: Notifier
    confirmer: Confirmer

    session: SessionController
    task_list: TaskListController

    # Owned HTTP client (Supabase mode only); closed on shutdown.
    http_client: Any = None

    @property
    def offline(self) -> bool:
        return self.http_client is None
