# src/taskboard/backend/offline.py

from __future__ import annotations

import itertools
import logging
import secrets
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from ..core.errors import AuthError, StoreError
from ..core.ports import Row, SessionListener, Unsubscribe
from ..core.session_models import AuthEvent, Session, User

logger = logging.getLogger(__name__)


class OfflineAuthProvider:
    """
    In-memory auth provider used for demos when Supabase is not configured.

    Behavior:
    - sign_up registers the account but does not sign in (mirrors email confirmation)
    - sign_in_with_password checks the stored password
    - nothing is persisted; restarting the app forgets all accounts
    """

    def __init__(self) -> None:
        self._accounts: dict[str, tuple[str, User]] = {}
        self._session: Session | None = None
        self._listeners: list[SessionListener] = []

    async def get_session(self) -> Session | None:
        return self._session

    def on_session_change(self, listener: SessionListener) -> Unsubscribe:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def _emit(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            await listener(event, self._session)

    async def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> User:
        key = email.strip().lower()
        if not key or not password:
            raise AuthError("Signup requires a valid email and password")
        if key in self._accounts:
            raise AuthError("User already registered")
        user = User(id=f"offline-{len(self._accounts) + 1}", email=key, user_metadata=dict(metadata))
        self._accounts[key] = (password, user)
        logger.info("Offline account created email=%s", key)
        return user

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        account = self._accounts.get(email.strip().lower())
        if account is None or account[0] != password:
            raise AuthError("Invalid login credentials")
        self._session = Session(
            access_token=secrets.token_hex(16),
            user=account[1],
            refresh_token=secrets.token_hex(16),
            expires_at=None,
        )
        await self._emit(AuthEvent.SIGNED_IN)
        return self._session

    async def sign_out(self) -> None:
        self._session = None
        await self._emit(AuthEvent.SIGNED_OUT)

    async def close(self) -> None:
        self._listeners.clear()


class InMemoryTaskTable:
    """
    In-memory `tasks` table with the same defaults as the hosted schema.

    Rows are copied on the way in and out so callers never alias stored state.
    """

    _DEFAULTS: dict[str, Any] = {
        "description": None,
        "due_date": None,
        "priority": "Medium",
        "is_complete": False,
        "is_archived": False,
    }

    def __init__(self, *, clock=None) -> None:
        self._rows: dict[int, Row] = {}
        self._ids = itertools.count(1)
        self._clock = clock or (lambda: datetime.now(UTC))
        self._last_created: datetime | None = None

    @staticmethod
    def _matches(row: Row, criteria: Mapping[str, Any]) -> bool:
        return all(row.get(col) == value for col, value in criteria.items())

    def _next_created_at(self) -> datetime:
        now = self._clock()
        # Keep created_at strictly increasing so ordering is deterministic.
        if self._last_created is not None and now <= self._last_created:
            now = self._last_created + timedelta(microseconds=1)
        self._last_created = now
        return now

    def rows(self) -> list[Row]:
        return [dict(r) for r in self._rows.values()]

    async def insert(self, row: Mapping[str, Any]) -> Row:
        if not str(row.get("title") or "").strip():
            raise StoreError('null value in column "title" violates not-null constraint')
        if not row.get("user_id"):
            raise StoreError('null value in column "user_id" violates not-null constraint')
        task_id = next(self._ids)
        stored: Row = {**self._DEFAULTS, **dict(row)}
        stored["id"] = task_id
        stored["created_at"] = self._next_created_at().isoformat(timespec="microseconds")
        self._rows[task_id] = stored
        return dict(stored)

    async def select(
            self,
            criteria: Mapping[str, Any],
            *,
            order_by: str = "created_at",
            descending: bool = True,
    ) -> list[Row]:
        found = [dict(r) for r in self._rows.values() if self._matches(r, criteria)]
        found.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by), r["id"]), reverse=descending)
        return found

    async def update(self, patch: Mapping[str, Any], criteria: Mapping[str, Any]) -> list[Row]:
        out: list[Row] = []
        for row in self._rows.values():
            if self._matches(row, criteria):
                row.update(patch)
                out.append(dict(row))
        return out

    async def delete(self, criteria: Mapping[str, Any]) -> list[Row]:
        doomed = [tid for tid, row in self._rows.items() if self._matches(row, criteria)]
        return [self._rows.pop(tid) for tid in doomed]

    async def close(self) -> None:
        return
