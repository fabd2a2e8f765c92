# src/taskboard/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts the session controller
(which triggers the first task fetch), then runs the console loop.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, shutdown
from ..config import get_settings
from ..connectors.console_connector import ConsoleConfirmer, ConsoleNotifier, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(
        settings=settings,
        notifier=ConsoleNotifier(),
        confirmer=ConsoleConfirmer(),
    )
    try:
        await state.session.start()
        await run_console_loop(state)
    finally:
        await shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(
        log_dir=settings.data_dir,
        console_level=console_level,
        secrets=[settings.supabase_anon_key],
    )

    # HTTP wire traces (headers included) only in DEBUG runs; they are redacted.
    if console_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info("Starting %s...", settings.app_name)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
