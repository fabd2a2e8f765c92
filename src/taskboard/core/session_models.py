# src/taskboard/core/session_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class AuthEvent(StrEnum):
    """Session-change notifications emitted by an AuthProvider."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


@dataclass(slots=True)
class User:
    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str | None:
        raw = (self.user_metadata or {}).get("display_name")
        if raw is None:
            return None
        name = str(raw).strip()
        return name or None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> User:
        meta = data.get("user_metadata")
        return cls(
            id=str(data["id"]),
            email=data.get("email"),
            user_metadata=meta if isinstance(meta, dict) else {},
        )


@dataclass(slots=True)
class Session:
    """
    Opaque credential bundle issued by the auth provider.

    expires_at is a unix timestamp (seconds), None means "does not expire".
    """

    access_token: str
    user: User
    refresh_token: str | None = None
    expires_at: float | None = None

    def is_expired(self, now: float | None = None) -> bool:
        if self.expires_at is None:
            return False
        if now is None:
            now = datetime.now(UTC).timestamp()
        return float(self.expires_at) <= now

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> Session:
        expires_at = data.get("expires_at")
        if expires_at is None and data.get("expires_in") is not None:
            expires_at = datetime.now(UTC).timestamp() + float(data["expires_in"])
        return cls(
            access_token=str(data["access_token"]),
            user=User.from_payload(data["user"]),
            refresh_token=data.get("refresh_token"),
            expires_at=float(expires_at) if expires_at is not None else None,
        )


def greeting_name(session: Session | None) -> str:
    """Last word of the display name ("Ada Lovelace" -> "Lovelace"), else "User"."""
    if session is None:
        return "User"
    name = session.user.display_name
    if not name:
        return "User"
    parts = name.split()
    return parts[-1] if parts else "User"
