# src/taskboard/backend/http.py

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

_MESSAGE_KEYS = ("msg", "error_description", "message", "error")


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=10.0,
        pool=connect_s,
    )


def build_http_client(settings: Any, *, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """One shared AsyncClient for auth + REST calls against the project URL."""
    timeout = make_timeout(
        float(getattr(settings, "http_connect_timeout", 5.0)),
        float(getattr(settings, "http_read_timeout", 20.0)),
    )
    return httpx.AsyncClient(
        base_url=str(settings.supabase_url),
        timeout=timeout,
        transport=transport,
        headers={"apikey": str(settings.supabase_anon_key)},
    )


def error_message(response: httpx.Response) -> str:
    """
    Pull a human-readable message out of a GoTrue/PostgREST error body.

    GoTrue uses "msg" or "error_description", PostgREST uses "message".
    Falls back to the status line when the body is not JSON.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in _MESSAGE_KEYS:
            val = body.get(key)
            if isinstance(val, str) and val.strip():
                return val.strip()

    text = (response.text or "").strip()
    if text and len(text) <= 200:
        return text
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


def bearer_headers(anon_key: str, access_token: str | None) -> dict[str, str]:
    return {
        "apikey": anon_key,
        "Authorization": f"Bearer {access_token or anon_key}",
    }
