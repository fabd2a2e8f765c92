# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the controllers.

The controllers depend on Protocols instead of concrete implementations.
This keeps the backend (Supabase vs offline) and the presentation layer
(console prompts) swappable and makes testing easier.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from .session_models import AuthEvent, Session, User

Row = dict[str, Any]
# One record of the tasks table, as returned by the store (JSON-like).

SessionListener = Callable[[AuthEvent, Session | None], Awaitable[None]]
Unsubscribe = Callable[[], None]


class AuthProvider(Protocol):
    """
    Hosted auth (email/password).

    Listeners are awaited in subscription order every time the provider's
    session changes (sign-in, sign-out, token refresh).
    """

    async def get_session(self) -> Session | None: ...

    def on_session_change(self, listener: SessionListener) -> Unsubscribe: ...

    async def sign_in_with_password(self, email: str, password: str) -> Session: ...

    async def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> User: ...

    async def sign_out(self) -> None: ...

    async def close(self) -> None: ...


class TaskTable(Protocol):
    """
    Table-like remote resource.

    `criteria` is a conjunction of equality tests: {"user_id": "...", "is_complete": True}.
    """

    async def insert(self, row: Mapping[str, Any]) -> Row: ...

    async def select(
            self,
            criteria: Mapping[str, Any],
            *,
            order_by: str = "created_at",
            descending: bool = True,
    ) -> list[Row]: ...

    async def update(self, patch: Mapping[str, Any], criteria: Mapping[str, Any]) -> list[Row]: ...

    async def delete(self, criteria: Mapping[str, Any]) -> list[Row]: ...

    async def close(self) -> None: ...


class Notifier(Protocol):
    """User-visible messages (errors and notices)."""

    def alert(self, message: str) -> None: ...


class Confirmer(Protocol):
    """Yes/no prompt before destructive actions."""

    async def confirm(self, prompt: str) -> bool: ...
