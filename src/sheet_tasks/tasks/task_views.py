# src/sheet_tasks/tasks/task_views.py

"""
Pure view helpers over the in-memory task list: table filtering/sorting,
kanban grouping, gantt bars, and the defaults of the "new task" form.

Nothing here talks to the sheet.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import StrEnum
from typing import Any

from .task_models import STATUS_ORDER, Category, Priority, Status, Task, TaskDraft, User


class ViewMode(StrEnum):
    TABLE = "table"
    KANBAN = "kanban"
    GANTT = "gantt"


# Sortable/editable task fields; camelCase aliases match the sheet app's field names.
TASK_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "details",
    "assignee",
    "category",
    "start_date",
    "due_date",
    "priority",
    "status",
    "created_date",
    "updated_date",
)

_FIELD_ALIASES = {
    "startdate": "start_date",
    "duedate": "due_date",
    "createddate": "created_date",
    "updateddate": "updated_date",
}

EDITABLE_FIELDS = frozenset(
    {"name", "details", "assignee", "category", "start_date", "due_date", "priority", "status"}
)


def normalize_field(name: str) -> str | None:
    key = name.strip()
    if key in TASK_FIELDS:
        return key
    low = key.replace("-", "_").lower()
    if low in TASK_FIELDS:
        return low
    return _FIELD_ALIASES.get(low.replace("_", ""))


@dataclass(slots=True)
class TableQuery:
    search: str = ""
    status: Status | None = None
    assignee: str | None = None
    mine_only: bool = False
    sort_key: str = "created_date"
    descending: bool = True


def toggle_sort(query: TableQuery, key: str) -> TableQuery:
    """Same key flips the order; a new key starts ascending."""
    field = normalize_field(key)
    if field is None:
        raise ValueError(f"Unknown task field: {key}")
    if field == query.sort_key:
        return dataclasses.replace(query, descending=not query.descending)
    return dataclasses.replace(query, sort_key=field, descending=False)


def current_user_name(users: list[User], email: str | None) -> str:
    if not email:
        return ""
    for u in users:
        if u.email == email:
            return u.name
    return ""


def filter_and_sort(
    tasks: list[Task],
    query: TableQuery,
    *,
    users: list[User] | None = None,
    current_email: str | None = None,
) -> list[Task]:
    out = list(tasks)

    if query.search:
        needle = query.search.lower()
        out = [t for t in out if needle in t.name.lower() or needle in t.details.lower()]

    if query.status is not None:
        out = [t for t in out if t.status == query.status]

    if query.assignee:
        out = [t for t in out if t.assignee == query.assignee]

    if query.mine_only:
        me = current_user_name(users or [], current_email)
        # Unknown current user: the filter is ignored, like an unchecked box.
        if me:
            out = [t for t in out if t.assignee == me]

    key = query.sort_key if query.sort_key in TASK_FIELDS else "created_date"
    out.sort(key=lambda t: _sort_value(getattr(t, key)), reverse=query.descending)
    return out


def _sort_value(value: Any) -> Any:
    if isinstance(value, (Priority, Status)):
        return value.value
    return value


def kanban_columns(tasks: list[Task]) -> dict[Status, list[Task]]:
    columns: dict[Status, list[Task]] = {s: [] for s in STATUS_ORDER}
    for t in tasks:
        columns[t.status].append(t)
    return columns


@dataclass(slots=True, frozen=True)
class GanttRow:
    task_id: str
    name: str
    resource: str
    start: date
    end: date
    percent_complete: int


_PERCENT_BY_STATUS = {
    Status.NOT_STARTED: 0,
    Status.IN_PROGRESS: 50,
    Status.COMPLETED: 100,
}


def parse_day(raw: str) -> date | None:
    """Accepts 2024-01-31, 2024/01/31 and full ISO timestamps."""
    s = (raw or "").strip()
    if not s:
        return None
    s = s.replace("/", "-")
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def gantt_rows(tasks: list[Task]) -> list[GanttRow]:
    """
    Bars for tasks with a valid start and due date. A due date not after the
    start date is drawn as a one-day bar.
    """
    rows: list[GanttRow] = []
    for t in tasks:
        start = parse_day(t.start_date)
        end = parse_day(t.due_date)
        if start is None or end is None:
            continue
        if start >= end:
            end = start + timedelta(days=1)
        rows.append(
            GanttRow(
                task_id=t.id,
                name=t.name,
                resource=t.assignee,
                start=start,
                end=end,
                percent_complete=_PERCENT_BY_STATUS.get(t.status, 0),
            )
        )
    return rows


def new_task_draft(
    users: list[User],
    categories: list[Category],
    current_user_display_name: str | None,
    today: date | None = None,
) -> TaskDraft:
    """
    Defaults of the "new task" form: assignee guessed from the signed-in user's
    first name, first category, start today.
    """
    assignee = ""
    first = (current_user_display_name or "").split(" ")[0].lower()
    if first:
        for u in users:
            if first in u.name.lower():
                assignee = u.name
                break

    return TaskDraft(
        name="",
        assignee=assignee,
        category=categories[0].name if categories else "",
        start_date=(today or date.today()).isoformat(),
        due_date="",
        priority=Priority.MEDIUM,
        status=Status.NOT_STARTED,
    )


def apply_fields(item: Task | TaskDraft, fields: dict[str, str]) -> Task | TaskDraft:
    """
    Return a copy of `item` with `key=value` edits applied.

    Raises ValueError for unknown/non-editable fields and invalid
    priority/status values.
    """
    changes: dict[str, Any] = {}
    for raw_key, raw_value in fields.items():
        key = normalize_field(raw_key)
        if key is None or key not in EDITABLE_FIELDS:
            raise ValueError(f"Field is not editable: {raw_key}")
        if key == "priority":
            changes[key] = parse_priority(raw_value)
        elif key == "status":
            changes[key] = parse_status(raw_value)
        else:
            changes[key] = raw_value
    return dataclasses.replace(item, **changes)


def parse_status(raw: str) -> Status:
    value = Status.from_cell(raw)
    if value == Status.NOT_STARTED and not _names(Status.NOT_STARTED, raw):
        raise ValueError(f"Unknown status: {raw}")
    return value


def parse_priority(raw: str) -> Priority:
    value = Priority.from_cell(raw)
    if value == Priority.MEDIUM and not _names(Priority.MEDIUM, raw):
        raise ValueError(f"Unknown priority: {raw}")
    return value


def _names(member: Priority | Status, raw: str) -> bool:
    # from_cell() falls back to the default member; tell a real match from a fallback.
    s = (raw or "").strip()
    key = s.replace("-", "").replace("_", "").replace(" ", "").lower()
    return s == member.value or key == member.name.replace("_", "").lower()
