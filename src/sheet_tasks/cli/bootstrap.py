# src/sheet_tasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the token holder, sheets client, identity provider and task store
  into AppState.
"""

from __future__ import annotations

import logging

import httpx

from ..auth.identity import GoogleIdentityProvider, TokenHolder
from ..config import get_settings
from ..core.state import AppState
from ..sheets.client import GoogleSheetsClient, make_timeout
from ..tasks.task_ids import TaskIdGenerator
from ..tasks.task_store import SheetTaskStore

logger = logging.getLogger(__name__)


def http_timeout(settings) -> httpx.Timeout:
    return make_timeout(settings.connect_timeout_seconds, settings.read_timeout_seconds)


def create_initial_state(*, http: httpx.AsyncClient, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    The caller owns `http` (shared by the sheets client and the identity
    provider) and closes it on shutdown.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    tokens = TokenHolder(settings.access_token)

    sheets = GoogleSheetsClient(
        settings.spreadsheet_id,
        tokens,
        api_key=settings.api_key,
        base_url=settings.sheets_base_url,
        http=http,
    )
    identity = GoogleIdentityProvider(
        tokens,
        userinfo_url=settings.userinfo_url,
        revoke_url=settings.revoke_url,
        http=http,
    )
    repo = SheetTaskStore(
        sheets,
        tasks_sheet=settings.tasks_sheet,
        users_sheet=settings.users_sheet,
        categories_sheet=settings.categories_sheet,
        tasks_sheet_id=settings.tasks_sheet_id,
        id_generator=TaskIdGenerator(settings.task_id_prefix),
        verify_rows=settings.verify_rows,
    )
    logger.info(
        "Task store ready spreadsheet=%s sheet=%r verify_rows=%s",
        sheets.spreadsheet_id,
        settings.tasks_sheet,
        settings.verify_rows,
    )

    return AppState(settings=settings, repo=repo, identity=identity, tokens=tokens)
