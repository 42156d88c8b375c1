# src/taskmaster_client/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console front end on a
single asyncio event loop (session restore first, then the REPL).
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, shutdown
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(state: AppState) -> None:
    try:
        if state.settings.console_enabled:  # type: ignore[attr-defined]
            await run_console_loop(state)
        else:
            # Headless: validate the stored session and report, nothing else.
            restored = await state.session.restore()
            user = state.session.user
            logger.info(
                "Console disabled. Session %s.",
                f"restored for {user.display_name}" if restored and user else "not available",
            )
    finally:
        await shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    # Console logs stay at WARNING+ by default so they don't interleave with the REPL.
    setup_logging(log_dir=settings.data_dir, console_level=max(console_level, logging.WARNING))

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
