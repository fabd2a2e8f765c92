# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time: without Supabase credentials the app
  starts against the in-memory offline backend.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKBOARD"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Supabase ----
    supabase_url: str
    supabase_anon_key: str
    tasks_table: str

    # ---- HTTP ----
    http_connect_timeout: float
    http_read_timeout: float

    # ---- Switches ----
    offline_mode: bool

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskboard").strip() or "taskboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskboard"))

        # Accept the plain SUPABASE_* names too, they are what the dashboard hands out.
        supabase_url = (_first_env(_k("SUPABASE_URL"), "SUPABASE_URL", default="") or "").strip()
        supabase_anon_key = (
            _first_env(_k("SUPABASE_ANON_KEY"), "SUPABASE_ANON_KEY", default="") or ""
        ).strip()
        tasks_table = _env(_k("TASKS_TABLE"), "tasks").strip() or "tasks"

        connect_timeout = _env_float(_k("HTTP_CONNECT_TIMEOUT_SECONDS"), 5.0)
        read_timeout = _env_float(_k("HTTP_READ_TIMEOUT_SECONDS"), 20.0)

        offline_mode = _env_bool(_k("OFFLINE"), False)
        if not (supabase_url and supabase_anon_key):
            offline_mode = True

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            supabase_url=supabase_url.rstrip("/"),
            supabase_anon_key=supabase_anon_key,
            tasks_table=tasks_table,
            http_connect_timeout=max(0.5, connect_timeout),
            http_read_timeout=max(1.0, read_timeout),
            offline_mode=offline_mode,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
