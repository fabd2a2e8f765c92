# src/taskboard/backend/supabase_tables.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from ..core.errors import StoreError
from ..core.ports import Row
from .http import bearer_headers, error_message

logger = logging.getLogger(__name__)

TokenSource = Callable[[], Awaitable[str | None]]


async def _anon_only() -> str | None:
    return None


def _encode_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_criteria(criteria: Mapping[str, Any]) -> list[tuple[str, str]]:
    """{"user_id": "u1", "is_complete": True} -> [("user_id", "eq.u1"), ("is_complete", "eq.true")]"""
    params: list[tuple[str, str]] = []
    for col, value in criteria.items():
        op = "is" if value is None else "eq"
        params.append((col, f"{op}.{_encode_value(value)}"))
    return params


class SupabaseTaskTable:
    """
    PostgREST table client (/rest/v1/<table>).

    Requests carry the signed-in user's access token so row-level security
    applies; before sign-in the anon key is used. The token source may refresh an
    expired session before handing the token over.
    """

    def __init__(
            self,
            client: httpx.AsyncClient,
            *,
            anon_key: str,
            table: str = "tasks",
            token_source: TokenSource | None = None,
    ) -> None:
        self._client = client
        self._anon_key = anon_key
        self._table = table
        self._token_source = token_source or _anon_only

    @property
    def path(self) -> str:
        return f"/rest/v1/{self._table}"

    async def _headers(self, *, returning: bool) -> dict[str, str]:
        headers = bearer_headers(self._anon_key, await self._token_source())
        if returning:
            headers["Prefer"] = "return=representation"
        return headers

    async def _request(
            self,
            method: str,
            *,
            params: list[tuple[str, str]],
            json: Any = None,
            returning: bool = True,
    ) -> list[Row]:
        headers = await self._headers(returning=returning)
        try:
            resp = await self._client.request(
                method,
                self.path,
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise StoreError(f"Network error: {e.__class__.__name__}") from e

        if resp.status_code >= 400:
            msg = error_message(resp)
            logger.debug("%s %s failed status=%s: %s", method, self.path, resp.status_code, msg)
            raise StoreError(msg, status_code=resp.status_code)

        if not resp.content:
            return []
        data = resp.json()
        if isinstance(data, dict):
            return [data]
        return list(data or [])

    async def insert(self, row: Mapping[str, Any]) -> Row:
        rows = await self._request("POST", params=[], json=[dict(row)])
        if not rows:
            raise StoreError("Insert returned no row")
        return rows[0]

    async def select(
            self,
            criteria: Mapping[str, Any],
            *,
            order_by: str = "created_at",
            descending: bool = True,
    ) -> list[Row]:
        params = [("select", "*"), *encode_criteria(criteria)]
        params.append(("order", f"{order_by}.{'desc' if descending else 'asc'}"))
        return await self._request("GET", params=params, returning=False)

    async def update(self, patch: Mapping[str, Any], criteria: Mapping[str, Any]) -> list[Row]:
        return await self._request("PATCH", params=encode_criteria(criteria), json=dict(patch))

    async def delete(self, criteria: Mapping[str, Any]) -> list[Row]:
        if not criteria:
            # PostgREST refuses unfiltered deletes; fail early with a clear message.
            raise StoreError("Refusing to delete without a filter")
        return await self._request("DELETE", params=encode_criteria(criteria))

    async def close(self) -> None:
        # The shared AsyncClient is owned (and closed) by the composition root.
        return
