# src/sheet_tasks/tasks/task_rows.py

"""
Column contract between sheet rows and entities.

Tasks sheet (header row + 11 columns, A..K):

    0 id | 1 name | 2 details | 3 assignee | 4 category | 5 start_date |
    6 due_date | 7 priority | 8 status | 9 created_date | 10 updated_date

Users sheet: email | name | role (A..C). Categories sheet: name (A).

row_to_task() and task_to_row() must stay in lockstep: a mismatch does not
raise, it silently shifts data into the wrong columns.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import IntEnum
from typing import Any

from .task_models import Category, Priority, Status, Task, User


class TaskColumn(IntEnum):
    ID = 0
    NAME = 1
    DETAILS = 2
    ASSIGNEE = 3
    CATEGORY = 4
    START_DATE = 5
    DUE_DATE = 6
    PRIORITY = 7
    STATUS = 8
    CREATED_DATE = 9
    UPDATED_DATE = 10


TASK_COLUMN_COUNT = len(TaskColumn)

TASK_SPAN = "A:K"
USER_SPAN = "A:C"
CATEGORY_SPAN = "A:A"

# First sheet line holding data (line 1 is the header).
FIRST_DATA_ROW = 2

# Applied when a cell is missing (short row) or blank.
TASK_FIELD_DEFAULTS: dict[TaskColumn, str] = {
    TaskColumn.ID: "",
    TaskColumn.NAME: "",
    TaskColumn.DETAILS: "",
    TaskColumn.ASSIGNEE: "",
    TaskColumn.CATEGORY: "",
    TaskColumn.START_DATE: "",
    TaskColumn.DUE_DATE: "",
    TaskColumn.PRIORITY: Priority.MEDIUM.value,
    TaskColumn.STATUS: Status.NOT_STARTED.value,
    TaskColumn.CREATED_DATE: "",
    TaskColumn.UPDATED_DATE: "",
}


def cell(row: Sequence[Any], index: int) -> str | None:
    """Raw cell text, or None when the row is too short (Sheets trims trailing blanks)."""
    if index >= len(row):
        return None
    value = row[index]
    return None if value is None else str(value)


def task_cell(row: Sequence[Any], column: TaskColumn) -> str:
    """Cell text with the defaulting policy applied."""
    raw = cell(row, column)
    if not raw:
        return TASK_FIELD_DEFAULTS[column]
    return raw


def data_rows(values: Sequence[Sequence[Any]] | None) -> Iterator[tuple[int, Sequence[Any]]]:
    """
    Yield (row_number, row) for every data row of a grid read from A1.

    Grids with fewer than 2 rows (nothing, or only a header) yield nothing.
    """
    if not values or len(values) < 2:
        return
    for offset, row in enumerate(values[1:]):
        yield offset + FIRST_DATA_ROW, row


def row_to_task(row: Sequence[Any], row_number: int | None) -> Task:
    return Task(
        id=task_cell(row, TaskColumn.ID),
        name=task_cell(row, TaskColumn.NAME),
        details=task_cell(row, TaskColumn.DETAILS),
        assignee=task_cell(row, TaskColumn.ASSIGNEE),
        category=task_cell(row, TaskColumn.CATEGORY),
        start_date=task_cell(row, TaskColumn.START_DATE),
        due_date=task_cell(row, TaskColumn.DUE_DATE),
        priority=Priority.from_cell(task_cell(row, TaskColumn.PRIORITY)),
        status=Status.from_cell(task_cell(row, TaskColumn.STATUS)),
        created_date=task_cell(row, TaskColumn.CREATED_DATE),
        updated_date=task_cell(row, TaskColumn.UPDATED_DATE),
        row=row_number,
    )


def task_to_row(task: Task) -> list[str]:
    out = [""] * TASK_COLUMN_COUNT
    out[TaskColumn.ID] = task.id
    out[TaskColumn.NAME] = task.name
    out[TaskColumn.DETAILS] = task.details
    out[TaskColumn.ASSIGNEE] = task.assignee
    out[TaskColumn.CATEGORY] = task.category
    out[TaskColumn.START_DATE] = task.start_date
    out[TaskColumn.DUE_DATE] = task.due_date
    out[TaskColumn.PRIORITY] = task.priority.value
    out[TaskColumn.STATUS] = task.status.value
    out[TaskColumn.CREATED_DATE] = task.created_date
    out[TaskColumn.UPDATED_DATE] = task.updated_date
    return out


def row_to_user(row: Sequence[Any]) -> User:
    return User(
        email=cell(row, 0) or "",
        name=cell(row, 1) or "",
        role=cell(row, 2) or "",
    )


def row_to_category(row: Sequence[Any]) -> Category:
    return Category(name=cell(row, 0) or "")
