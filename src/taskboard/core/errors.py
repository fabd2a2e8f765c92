# src/taskboard/core/errors.py

"""
Error taxonomy shared by controllers and backends.

- AuthError: bad credentials, duplicate sign-up, expired refresh token.
- StoreError: query/mutation failures (network, permission denial, bad request).

Both carry the backend's message, which is shown to the user verbatim.
Missing-session preconditions are not exceptions: controllers alert and return early.
"""

from __future__ import annotations


class BackendError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthError(BackendError):
    pass


class StoreError(BackendError):
    pass
