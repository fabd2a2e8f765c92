# src/taskboard/backend/supabase_auth.py

from __future__ import annotations

"""
Supabase Auth (GoTrue) over its REST API.

The session lives in memory only. Every change of the held session is
broadcast to subscribers, who are awaited in subscription order.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..core.errors import AuthError
from ..core.ports import SessionListener, Unsubscribe
from ..core.session_models import AuthEvent, Session, User
from .http import bearer_headers, error_message

logger = logging.getLogger(__name__)


class SupabaseAuth:
    def __init__(self, client: httpx.AsyncClient, *, anon_key: str) -> None:
        self._client = client
        self._anon_key = anon_key
        self._session: Session | None = None
        self._listeners: list[SessionListener] = []
        self._refresh_lock = asyncio.Lock()

    # ---- subscription ----

    def on_session_change(self, listener: SessionListener) -> Unsubscribe:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def _set_session(self, session: Session | None, event: AuthEvent) -> None:
        self._session = session
        for listener in list(self._listeners):
            await listener(event, session)

    def access_token(self) -> str | None:
        return self._session.access_token if self._session else None

    async def fresh_access_token(self) -> str | None:
        """Access token for table requests, refreshed first when it has expired."""
        session = await self.get_session()
        return session.access_token if session else None

    # ---- low-level ----

    async def _post(self, path: str, payload: dict[str, Any], *, params: dict[str, str] | None = None) -> Any:
        try:
            resp = await self._client.post(
                f"/auth/v1/{path}",
                params=params,
                json=payload,
                headers=bearer_headers(self._anon_key, self.access_token() if path == "logout" else None),
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Auth request failed: {e.__class__.__name__}") from e

        if resp.status_code >= 400:
            raise AuthError(error_message(resp), status_code=resp.status_code)
        if not resp.content:
            return {}
        return resp.json()

    # ---- public API ----

    async def get_session(self) -> Session | None:
        """
        Current session; an expired one is refreshed first (or dropped).

        Concurrent callers share one refresh. Listeners run after the lock is
        released, so a listener may call back into get_session().
        """
        async with self._refresh_lock:
            session = self._session
            if session is None or not session.is_expired():
                return session
            refreshed = await self._refresh(session)

        if refreshed is None:
            await self._set_session(None, AuthEvent.SIGNED_OUT)
        else:
            logger.info("Session refreshed user=%s", refreshed.user.id)
            await self._set_session(refreshed, AuthEvent.TOKEN_REFRESHED)
        return refreshed

    async def _refresh(self, session: Session) -> Session | None:
        if not session.refresh_token:
            return None
        try:
            data = await self._post(
                "token",
                {"refresh_token": session.refresh_token},
                params={"grant_type": "refresh_token"},
            )
        except AuthError as e:
            logger.warning("Session refresh failed: %s", e.message)
            return None
        return Session.from_payload(data)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        data = await self._post(
            "token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        session = Session.from_payload(data)
        logger.info("Signed in user=%s", session.user.id)
        await self._set_session(session, AuthEvent.SIGNED_IN)
        return session

    async def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> User:
        data = await self._post(
            "signup",
            {"email": email, "password": password, "data": dict(metadata)},
        )
        # With email confirmation on, GoTrue returns the bare user object;
        # with autoconfirm it returns a session-shaped body. Never sign in here.
        user_data = data.get("user") if isinstance(data, dict) and "access_token" in data else data
        if not isinstance(user_data, dict) or "id" not in user_data:
            raise AuthError("Unexpected sign-up response")
        user = User.from_payload(user_data)
        logger.info("Signed up user=%s (awaiting confirmation)", user.id)
        return user

    async def sign_out(self) -> None:
        try:
            if self._session is not None:
                await self._post("logout", {})
        except AuthError as e:
            # The local session is dropped either way.
            logger.warning("Remote sign-out failed: %s", e.message)
        finally:
            await self._set_session(None, AuthEvent.SIGNED_OUT)

    async def close(self) -> None:
        self._listeners.clear()
