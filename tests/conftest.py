# tests/conftest.py

from __future__ import annotations

from itertools import count
from pathlib import Path
from types import SimpleNamespace

import pytest

from sheet_tasks.core.state import AppState
from sheet_tasks.tasks.task_store import SheetTaskStore

from fakes import (
    CATEGORIES_SHEET,
    FIXED_NOW,
    TASKS_SHEET,
    USERS_SHEET,
    FakeIdentityProvider,
    FakeSheetsClient,
    task_grid,
)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="sheet-tasks-test",
        data_dir=tmp_path,
        spreadsheet_id="sheet-123",
        tasks_sheet=TASKS_SHEET,
        users_sheet=USERS_SHEET,
        categories_sheet=CATEGORIES_SHEET,
        tasks_sheet_id=0,
        verify_rows=True,
    )


@pytest.fixture()
def sheets() -> FakeSheetsClient:
    return FakeSheetsClient(
        {
            TASKS_SHEET: task_grid(),
            USERS_SHEET: [
                ["メール", "名前", "役割"],
                ["alice@example.com", "Alice", "admin"],
                ["bob@example.com", "Bob", "member"],
            ],
            CATEGORIES_SHEET: [["カテゴリ"], ["Errand"], ["Work"], ["Admin"]],
        },
        sheet_ids={0: TASKS_SHEET},
    )


@pytest.fixture()
def store(sheets: FakeSheetsClient) -> SheetTaskStore:
    ids = count(1)
    return SheetTaskStore(
        sheets,
        tasks_sheet=TASKS_SHEET,
        users_sheet=USERS_SHEET,
        categories_sheet=CATEGORIES_SHEET,
        id_generator=lambda: f"TASK-{next(ids):04d}",
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: SheetTaskStore) -> AppState:
    """AppState wired to the real store over the in-memory sheet."""
    return AppState(settings=settings, repo=store, identity=FakeIdentityProvider())
