# src/sheet_tasks/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..auth.identity import GoogleUser, TokenHolder
from ..tasks.task_models import Category, Task, User
from ..tasks.task_views import TableQuery, ViewMode
from .ports import IdentityProvider, TaskRepo


@dataclass
class AppState:
    """
    In-memory snapshot of the sheet plus UI state.

    The snapshot is stale as soon as any write is issued: row positions shift
    on insert/delete, so every mutation is followed by a full reload
    (see tasks/task_api.py).
    """

    settings: Any
    repo: TaskRepo
    identity: IdentityProvider | None = None
    tokens: TokenHolder | None = None

    user: GoogleUser | None = None
    tasks: list[Task] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)

    error: str | None = None
    loading: bool = False

    view_mode: ViewMode = ViewMode.TABLE
    table_query: TableQuery = field(default_factory=TableQuery)

    def find_task(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None
