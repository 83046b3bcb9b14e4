# src/sheet_tasks/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Priority(StrEnum):
    """
    Task priority.

    Values are the labels stored in the sheet cells.
    """

    HIGH = "高"
    MEDIUM = "中"
    LOW = "低"

    @classmethod
    def from_cell(cls, raw: str | None) -> Priority:
        return _parse_label(cls, raw, cls.MEDIUM)


class Status(StrEnum):
    """Task lifecycle status (kanban column)."""

    NOT_STARTED = "未着手"
    IN_PROGRESS = "進行中"
    COMPLETED = "完了"

    @classmethod
    def from_cell(cls, raw: str | None) -> Status:
        return _parse_label(cls, raw, cls.NOT_STARTED)


STATUS_ORDER: tuple[Status, ...] = (Status.NOT_STARTED, Status.IN_PROGRESS, Status.COMPLETED)


def _parse_label(enum_cls, raw, default):
    """
    Accept the sheet label ("中") or the member name in any case/spacing
    ("medium", "NotStarted", "not_started"). Anything else -> default.
    """
    if raw is None:
        return default
    s = str(raw).strip()
    if not s:
        return default
    try:
        return enum_cls(s)
    except ValueError:
        pass
    key = s.replace("-", "").replace("_", "").replace(" ", "").lower()
    for member in enum_cls:
        if member.name.replace("_", "").lower() == key:
            return member
    return default


@dataclass(slots=True)
class Task:
    id: str
    name: str
    details: str
    assignee: str
    category: str
    start_date: str
    due_date: str
    priority: Priority
    status: Status
    created_date: str
    updated_date: str

    # 1-based sheet line (header is line 1). Valid only until the next
    # structural change of the sheet; None until the task is read back.
    row: int | None = None


@dataclass(slots=True)
class TaskDraft:
    """A task before it has an identity (id/row/timestamps)."""

    name: str
    details: str = ""
    assignee: str = ""
    category: str = ""
    start_date: str = ""
    due_date: str = ""
    priority: Priority = Priority.MEDIUM
    status: Status = Status.NOT_STARTED


@dataclass(slots=True, frozen=True)
class User:
    email: str
    name: str
    role: str


@dataclass(slots=True, frozen=True)
class Category:
    name: str
