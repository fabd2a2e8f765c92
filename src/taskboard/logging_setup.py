# src/taskboard/logging_setup.py

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Iterable
from pathlib import Path

# Supabase access tokens and the anon key are JWTs.
_JWT_RE = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]+")
_BEARER_RE = re.compile(r"(?i)(bearer\s+)[^\s'\",]+")
_REFRESH_RE = re.compile(r"(?i)(refresh_token[\"']?\s*[:=]\s*[\"']?)[^\s'\",&}]+")

REDACTED = "***"


class _SecretRedactingFilter(logging.Filter):
    """
    Mask credentials before a record reaches any handler.

    In DEBUG runs the file handler receives httpcore wire traces, which include
    request headers, so bearer tokens would otherwise land in taskboard.log.
    Extra literal secrets (e.g. the configured anon key) can be passed in.
    """

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self._secrets = [s for s in secrets if s]

    def redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        text = _BEARER_RE.sub(rf"\g<1>{REDACTED}", text)
        text = _REFRESH_RE.sub(rf"\g<1>{REDACTED}", text)
        return _JWT_RE.sub(REDACTED, text)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable next to the task list:
    - taskboard logs pass
    - per-request httpx lines ("HTTP Request: GET .../rest/v1/tasks") only at WARNING+
    - everything else (including 'py.warnings') only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "taskboard" or name.startswith("taskboard."):
            return True

        if name == "httpx":
            return record.levelno >= logging.WARNING

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskboard",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    secrets: Iterable[str] = (),
) -> Path:
    """
    Configure logging with:
    - Console handler: filtered for interactive use
    - File handler: full logs for debugging
    Both handlers redact access tokens, refresh tokens and `secrets`.

    Call this ONCE, very early (before first logger.info).
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskboard.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    redactor = _SecretRedactingFilter(secrets)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(redactor)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    fh.addFilter(redactor)
    root.addHandler(fh)

    logging.captureWarnings(True)

    return log_file
