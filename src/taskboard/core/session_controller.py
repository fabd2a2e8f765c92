# src/taskboard/core/session_controller.py

from __future__ import annotations

"""
Session controller.

Owns "who is signed in". The held session is only ever replaced by
notifications from the auth provider (including the initial one on start),
never directly by login/logout, so there is a single source of truth.
"""

import logging

from .errors import AuthError
from .ports import AuthProvider, Notifier, SessionListener, Unsubscribe
from .session_models import AuthEvent, Session

logger = logging.getLogger(__name__)

SIGN_UP_NOTICE = "Check your email for the login link!"


class SessionController:
    def __init__(self, auth: AuthProvider, notifier: Notifier) -> None:
        self._auth = auth
        self._notifier = notifier
        self._session: Session | None = None
        self._unsubscribe: Unsubscribe | None = None
        self._listeners: list[SessionListener] = []

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def add_listener(self, listener: SessionListener) -> None:
        """Downstream hook, awaited after every held-session replacement."""
        self._listeners.append(listener)

    async def start(self) -> None:
        """Subscribe once, then deliver the current session as INITIAL_SESSION."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._auth.on_session_change(self._handle_session_change)
        try:
            session = await self._auth.get_session()
        except AuthError as e:
            logger.warning("Initial session lookup failed: %s", e.message)
            session = None
        await self._handle_session_change(AuthEvent.INITIAL_SESSION, session)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _handle_session_change(self, event: AuthEvent, session: Session | None) -> None:
        self._session = session
        logger.info(
            "Session change event=%s user=%s",
            event.value,
            session.user.id if session else None,
        )
        for listener in list(self._listeners):
            await listener(event, session)

    # ---- actions ----

    async def login(self, email: str, password: str) -> bool:
        try:
            await self._auth.sign_in_with_password(email.strip(), password)
        except AuthError as e:
            logger.info("Login failed email=%s: %s", email, e.message)
            self._notifier.alert(e.message)
            return False
        return True

    async def sign_up(self, email: str, password: str, display_name: str) -> bool:
        try:
            await self._auth.sign_up(
                email.strip(),
                password,
                {"display_name": display_name.strip()},
            )
        except AuthError as e:
            logger.info("Sign-up failed email=%s: %s", email, e.message)
            self._notifier.alert(e.message)
            return False
        self._notifier.alert(SIGN_UP_NOTICE)
        return True

    async def logout(self) -> None:
        try:
            await self._auth.sign_out()
        except AuthError as e:
            logger.warning("Logout failed: %s", e.message)
            self._notifier.alert(e.message)
