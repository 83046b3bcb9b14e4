# src/sheet_tasks/cli/render.py

"""Plain-text renderers for the three views."""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence

from ..core.state import AppState
from ..tasks.task_models import Status, Task
from ..tasks.task_views import GanttRow, ViewMode, filter_and_sort, gantt_rows, kanban_columns

GANTT_WIDTH = 40

_TABLE_HEADERS = ("ID", "Name", "Assignee", "Category", "Due", "Priority", "Status", "Updated")


def display_width(text: str) -> int:
    """Terminal cells: wide (CJK) characters take two."""
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in text)


def pad(text: str, width: int) -> str:
    return text + " " * max(0, width - display_width(text))


def truncate(text: str, width: int) -> str:
    if display_width(text) <= width:
        return text
    out = ""
    for ch in text:
        if display_width(out + ch) > width - 1:
            break
        out += ch
    return out + "…"


def _grid(headers: Sequence[str], rows: list[Sequence[str]]) -> str:
    widths = [display_width(h) for h in headers]
    for r in rows:
        for i, c in enumerate(r):
            widths[i] = max(widths[i], display_width(c))
    lines = ["  ".join(pad(h, widths[i]) for i, h in enumerate(headers)).rstrip()]
    lines.append("  ".join("-" * w for w in widths))
    for r in rows:
        lines.append("  ".join(pad(c, widths[i]) for i, c in enumerate(r)).rstrip())
    return "\n".join(lines)


def render_table(tasks: list[Task]) -> str:
    if not tasks:
        return "No tasks."
    rows = [
        (
            t.id,
            truncate(t.name, 32),
            t.assignee,
            t.category,
            t.due_date,
            t.priority.value,
            t.status.value,
            t.updated_date[:10],
        )
        for t in tasks
    ]
    return _grid(_TABLE_HEADERS, rows)


def render_kanban(columns: dict[Status, list[Task]]) -> str:
    blocks = []
    for status, tasks in columns.items():
        lines = [f"[{status.value}] ({len(tasks)})"]
        for t in tasks:
            who = f" @{t.assignee}" if t.assignee else ""
            lines.append(f"  - {t.id} {t.name} ({t.priority.value}){who}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def render_gantt(rows: list[GanttRow], width: int = GANTT_WIDTH) -> str:
    if not rows:
        return "No tasks to chart (a valid start and due date are required)."

    first = min(r.start for r in rows)
    last = max(r.end for r in rows)
    span_days = max(1, (last - first).days)
    label_w = max(display_width(truncate(r.name, 24)) for r in rows)

    lines = [f"{pad('', label_w)}  {first.isoformat()} .. {last.isoformat()}"]
    for r in rows:
        a = round((r.start - first).days / span_days * width)
        b = max(a + 1, round((r.end - first).days / span_days * width))
        done = a + round((b - a) * r.percent_complete / 100)
        bar = " " * a + "#" * (done - a) + "=" * (b - done)
        lines.append(f"{pad(truncate(r.name, 24), label_w)}  |{pad(bar, width)}| {r.percent_complete}%")
    return "\n".join(lines)


def render_current(state: AppState) -> str:
    if state.view_mode == ViewMode.KANBAN:
        return render_kanban(kanban_columns(state.tasks))
    if state.view_mode == ViewMode.GANTT:
        return render_gantt(gantt_rows(state.tasks))
    visible = filter_and_sort(
        state.tasks,
        state.table_query,
        users=state.users,
        current_email=state.user.email if state.user else None,
    )
    return render_table(visible)
