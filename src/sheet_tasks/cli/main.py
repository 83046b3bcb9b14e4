# src/sheet_tasks/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, signs in with the configured token,
loads the sheet, then runs the console front end.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..cli.bootstrap import create_initial_state, http_timeout
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks import task_api

logger = logging.getLogger(__name__)


async def _run(settings) -> int:
    async with httpx.AsyncClient(timeout=http_timeout(settings)) as http:
        try:
            state = create_initial_state(settings=settings, http=http)
        except RuntimeError as e:
            logger.error("%s", e)
            return 2

        if state.tokens is not None and state.tokens.token:
            if not await task_api.sign_in(state):
                logger.warning("Initial sign-in failed: %s", state.error)
        else:
            logger.info("No access token configured. Use /login <token> in the console.")

        await run_console_loop(state)
    return 0


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    try:
        code = asyncio.run(_run(settings))
    except KeyboardInterrupt:
        code = 130
    logger.info("Bye.")
    raise SystemExit(code)


if __name__ == "__main__":
    main()
