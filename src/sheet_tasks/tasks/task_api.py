# src/sheet_tasks/tasks/task_api.py

"""
High-level task operations used by the front end.

Every function here catches repository/transport failures, logs them and
surfaces a message through `state.error` instead of raising: the front end is
the caller responsible for user-visible messaging.

Consistency rule: after any write the snapshot is reloaded in full before a
row position is trusted again.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..sheets.client import describe_sheets_error
from .task_models import Status, Task, TaskDraft

logger = logging.getLogger(__name__)

ConfirmDelete = Callable[[Task], bool | Awaitable[bool]]

LOAD_FAILED = "Failed to load data. Reload to try again"
SAVE_FAILED = "Failed to save the task"
STATUS_FAILED = "Failed to update the task status"
DELETE_FAILED = "Failed to delete the task"


def _error_text(prefix: str, err: Exception) -> str:
    return f"{prefix}: {describe_sheets_error(err)}"


async def load_data(state: AppState) -> bool:
    """Fetch tasks, users and categories together; keep the old snapshot on failure."""
    state.loading = True
    state.error = None
    try:
        tasks, users, categories = await asyncio.gather(
            state.repo.fetch_tasks(),
            state.repo.fetch_users(),
            state.repo.fetch_categories(),
        )
    except Exception as e:
        logger.exception("Failed to load data")
        state.error = _error_text(LOAD_FAILED, e)
        return False
    finally:
        state.loading = False

    state.tasks = list(tasks)
    state.users = list(users)
    state.categories = list(categories)
    logger.info(
        "Loaded tasks=%d users=%d categories=%d",
        len(state.tasks),
        len(state.users),
        len(state.categories),
    )
    return True


async def sign_in(state: AppState) -> bool:
    if state.identity is None:
        state.error = "Sign-in is not configured."
        return False
    try:
        state.user = await state.identity.sign_in()
    except Exception as e:
        logger.error("Sign-in failed: %s", e)
        state.user = None
        state.error = str(e) or "Sign-in failed."
        return False
    return await load_data(state)


async def sign_out(state: AppState) -> None:
    if state.identity is not None:
        try:
            await state.identity.sign_out()
        except Exception:
            logger.exception("Sign-out failed")
    state.user = None
    state.tasks = []


async def save_task(state: AppState, item: Task | TaskDraft) -> bool:
    """Create (TaskDraft) or overwrite (Task), then reload."""
    state.loading = True
    try:
        if isinstance(item, Task):
            await state.repo.update_task(item)
        else:
            await state.repo.create_task(item)
    except Exception as e:
        logger.exception("Failed to save task")
        state.error = _error_text(SAVE_FAILED, e)
        state.loading = False
        return False

    return await load_data(state)


async def change_task_status(state: AppState, task_id: str, new_status: Status) -> bool:
    """
    Optimistic status change (kanban move): the snapshot is updated before the
    write and restored exactly on failure.
    """
    current = state.find_task(task_id)
    if current is None:
        logger.warning("change_task_status: unknown task_id=%s", task_id)
        return False
    if current.status == new_status:
        return True

    snapshot = list(state.tasks)
    moved = dataclasses.replace(current, status=new_status)
    state.tasks = [moved if t.id == task_id else t for t in state.tasks]

    try:
        await state.repo.update_task(moved)
    except Exception as e:
        logger.exception("Failed to update task status task_id=%s", task_id)
        state.tasks = snapshot
        state.error = _error_text(STATUS_FAILED, e)
        return False

    return await load_data(state)


async def remove_task(state: AppState, task: Task, confirm: ConfirmDelete | None = None) -> bool:
    """Delete after an optional caller-side confirmation, then reload."""
    if confirm is not None:
        answer = confirm(task)
        if asyncio.iscoroutine(answer) or isinstance(answer, asyncio.Future):
            answer = await answer
        if not answer:
            logger.debug("Delete cancelled task_id=%s", task.id)
            return False

    state.loading = True
    try:
        await state.repo.delete_task(task)
    except Exception as e:
        logger.exception("Failed to delete task task_id=%s", task.id)
        state.error = _error_text(DELETE_FAILED, e)
        state.loading = False
        return False

    return await load_data(state)
