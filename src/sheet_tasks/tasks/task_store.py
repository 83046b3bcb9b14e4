# src/sheet_tasks/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from ..core.ports import SheetsClient
from .task_ids import TaskIdGenerator
from .task_models import Category, Task, TaskDraft, User
from .task_rows import (
    CATEGORY_SPAN,
    TASK_SPAN,
    USER_SPAN,
    cell,
    data_rows,
    row_to_category,
    row_to_task,
    row_to_user,
    task_to_row,
)

logger = logging.getLogger(__name__)


class MissingRowError(ValueError):
    """Update/delete called on a task that was never read back from the sheet."""


class StaleRowError(RuntimeError):
    """The cached row position no longer points at the task (sheet changed since the last fetch)."""

    def __init__(self, task_id: str, row: int, found_id: str) -> None:
        super().__init__(
            f"Row {row} holds {found_id!r}, expected {task_id!r}; reload tasks before writing."
        )
        self.task_id = task_id
        self.row = row
        self.found_id = found_id


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with milliseconds and a trailing Z (2024-01-01T00:00:00.000Z)."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_timestamp(raw: str) -> datetime | None:
    if not raw:
        return None
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


class SheetTaskStore:
    """
    Task repository on top of a spreadsheet.

    The sheet is the only source of truth; this class keeps no state besides
    its configuration. Tasks are addressed by row position, which is only valid
    until the next insert/delete in the tasks sheet: callers reload the whole
    collection after every write.

    With verify_rows=True, update/delete re-read the ID cell of the target row
    first and raise StaleRowError instead of writing the wrong row.
    """

    def __init__(
        self,
        client: SheetsClient,
        *,
        tasks_sheet: str = "タスク",
        users_sheet: str = "ユーザーマスタ",
        categories_sheet: str = "カテゴリマスタ",
        tasks_sheet_id: int = 0,
        id_generator: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
        verify_rows: bool = True,
    ) -> None:
        self._client = client
        self.tasks_sheet = tasks_sheet
        self.users_sheet = users_sheet
        self.categories_sheet = categories_sheet
        self.tasks_sheet_id = int(tasks_sheet_id)
        self._new_id = id_generator or TaskIdGenerator()
        self._clock = clock or (lambda: datetime.now(UTC))
        self.verify_rows = verify_rows

    # ---- low-level helpers ----

    def _now(self) -> str:
        return utc_timestamp(self._clock())

    def _touch(self, prior: str) -> str:
        """New updated_date, never earlier than the prior one."""
        now = self._now()
        prior_dt = _parse_timestamp(prior)
        now_dt = _parse_timestamp(now)
        if prior_dt is not None and now_dt is not None and prior_dt > now_dt:
            return prior
        return now

    @staticmethod
    def _require_row(task: Task) -> int:
        if task.row is None or task.row < 2:
            raise MissingRowError(f"Task {task.id!r} has no valid row position (row={task.row}).")
        return int(task.row)

    async def _check_row(self, task: Task, row: int) -> None:
        if not self.verify_rows:
            return
        values = await self._client.read_range(self.tasks_sheet, f"A{row}")
        found = (cell(values[0], 0) or "") if values else ""
        if found != task.id:
            logger.warning("Stale row for task_id=%s row=%s found=%r", task.id, row, found)
            raise StaleRowError(task.id, row, found)

    # ---- reads ----

    async def fetch_tasks(self) -> list[Task]:
        values = await self._client.read_range(self.tasks_sheet, TASK_SPAN)
        tasks = [row_to_task(r, n) for n, r in data_rows(values)]
        out = [t for t in tasks if t.id]
        logger.debug("Fetched tasks=%d (skipped %d rows without id)", len(out), len(tasks) - len(out))
        return out

    async def fetch_users(self) -> list[User]:
        values = await self._client.read_range(self.users_sheet, USER_SPAN)
        return [row_to_user(r) for _, r in data_rows(values)]

    async def fetch_categories(self) -> list[Category]:
        values = await self._client.read_range(self.categories_sheet, CATEGORY_SPAN)
        return [row_to_category(r) for _, r in data_rows(values)]

    # ---- writes ----

    async def create_task(self, draft: TaskDraft) -> Task:
        """
        Append a new row. The returned task has row=None: its position is only
        known after the next fetch_tasks().
        """
        now = self._now()
        task = Task(
            id=self._new_id(),
            name=draft.name,
            details=draft.details,
            assignee=draft.assignee,
            category=draft.category,
            start_date=draft.start_date,
            due_date=draft.due_date,
            priority=draft.priority,
            status=draft.status,
            created_date=now,
            updated_date=now,
            row=None,
        )
        await self._client.append_row(self.tasks_sheet, TASK_SPAN, task_to_row(task))
        logger.info("Task created id=%s name=%r", task.id, task.name)
        return task

    async def update_task(self, task: Task) -> Task:
        """Overwrite the task's whole row (A..K). No other row is touched."""
        row = self._require_row(task)
        await self._check_row(task, row)

        updated = dataclasses.replace(task, updated_date=self._touch(task.updated_date))
        await self._client.overwrite_row(self.tasks_sheet, row, TASK_SPAN, task_to_row(updated))
        logger.info("Task updated id=%s row=%s status=%s", updated.id, row, updated.status.value)
        return updated

    async def delete_task(self, task: Task) -> None:
        """Structurally remove the task's row; every following row moves up by one."""
        row = self._require_row(task)
        await self._check_row(task, row)

        await self._client.delete_row(self.tasks_sheet_id, row - 1)
        logger.info("Task deleted id=%s row=%s", task.id, row)
