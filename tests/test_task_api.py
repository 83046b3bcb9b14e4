# tests/test_task_api.py

from __future__ import annotations

import pytest

from sheet_tasks.tasks import task_api
from sheet_tasks.tasks.task_models import Status, TaskDraft

from fakes import TASKS_SHEET, http_error


@pytest.mark.asyncio
async def test_load_data_fills_snapshot(state) -> None:
    assert await task_api.load_data(state)

    assert [t.id for t in state.tasks] == ["T1", "T2", "T3"]
    assert [u.name for u in state.users] == ["Alice", "Bob"]
    assert [c.name for c in state.categories] == ["Errand", "Work", "Admin"]
    assert state.error is None
    assert state.loading is False


@pytest.mark.asyncio
async def test_load_failure_keeps_previous_snapshot(state, sheets) -> None:
    await task_api.load_data(state)
    before = list(state.tasks)
    sheets.fail["read_range"] = http_error(401)

    assert not await task_api.load_data(state)

    assert state.tasks == before
    assert state.error is not None
    assert state.error.startswith(task_api.LOAD_FAILED)
    assert "not authorized" in state.error
    assert state.loading is False


@pytest.mark.asyncio
async def test_sign_in_then_load(state) -> None:
    assert await task_api.sign_in(state)

    assert state.user is not None
    assert state.user.email == "alice@example.com"
    assert len(state.tasks) == 3


@pytest.mark.asyncio
async def test_sign_in_failure_surfaces_error(state) -> None:
    state.identity.user = None

    assert not await task_api.sign_in(state)

    assert state.user is None
    assert "no access token" in (state.error or "")


@pytest.mark.asyncio
async def test_sign_out_clears_user_and_tasks(state) -> None:
    await task_api.sign_in(state)
    await task_api.sign_out(state)

    assert state.user is None
    assert state.tasks == []
    assert state.identity.signed_out


@pytest.mark.asyncio
async def test_save_draft_creates_and_reloads(state, sheets) -> None:
    await task_api.load_data(state)

    assert await task_api.save_task(state, TaskDraft(name="Call plumber", assignee="Bob"))

    assert [t.id for t in state.tasks] == ["T1", "T2", "T3", "TASK-0001"]
    assert state.tasks[-1].row == 5
    assert sheets.calls[-3:] == [
        ("read_range", TASKS_SHEET, "A:K"),
        ("read_range", "ユーザーマスタ", "A:C"),
        ("read_range", "カテゴリマスタ", "A:A"),
    ]


@pytest.mark.asyncio
async def test_save_existing_task_overwrites_its_row(state, sheets) -> None:
    await task_api.load_data(state)
    t1 = state.find_task("T1")
    t1.name = "Buy oat milk"

    assert await task_api.save_task(state, t1)

    assert state.find_task("T1").name == "Buy oat milk"
    assert sheets.grids[TASKS_SHEET][1][1] == "Buy oat milk"


@pytest.mark.asyncio
async def test_save_failure_sets_error(state, sheets) -> None:
    await task_api.load_data(state)
    sheets.fail["append_row"] = http_error(500, "POST")

    assert not await task_api.save_task(state, TaskDraft(name="x"))

    assert state.error.startswith(task_api.SAVE_FAILED)
    assert state.loading is False
    assert len(state.tasks) == 3


@pytest.mark.asyncio
async def test_status_change_is_written_and_reloaded(state, sheets) -> None:
    await task_api.load_data(state)

    assert await task_api.change_task_status(state, "T1", Status.IN_PROGRESS)

    assert state.find_task("T1").status is Status.IN_PROGRESS
    assert sheets.grids[TASKS_SHEET][1][8] == "進行中"


@pytest.mark.asyncio
async def test_status_change_rolls_back_on_failure(state, sheets) -> None:
    await task_api.load_data(state)
    snapshot = list(state.tasks)
    sheets.fail["overwrite_row"] = http_error(403, "PUT")

    assert not await task_api.change_task_status(state, "T2", Status.COMPLETED)

    assert state.tasks == snapshot
    assert state.find_task("T2").status is Status.IN_PROGRESS
    assert state.error.startswith(task_api.STATUS_FAILED)


@pytest.mark.asyncio
async def test_status_change_unknown_task(state) -> None:
    await task_api.load_data(state)
    assert not await task_api.change_task_status(state, "nope", Status.COMPLETED)


@pytest.mark.asyncio
async def test_remove_task_respects_confirmation(state, sheets) -> None:
    await task_api.load_data(state)
    t2 = state.find_task("T2")

    assert not await task_api.remove_task(state, t2, confirm=lambda _t: False)
    assert sheets.writes() == []

    async def yes(_t) -> bool:
        return True

    assert await task_api.remove_task(state, t2, confirm=yes)
    assert [t.id for t in state.tasks] == ["T1", "T3"]
    assert state.find_task("T3").row == 3


@pytest.mark.asyncio
async def test_remove_task_with_stale_row_reports_error(state, sheets) -> None:
    await task_api.load_data(state)
    del sheets.grids[TASKS_SHEET][1]

    assert not await task_api.remove_task(state, state.find_task("T3"))

    assert sheets.writes() == []
    assert state.error.startswith(task_api.DELETE_FAILED)
    assert "reload" in state.error
