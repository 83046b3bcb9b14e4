# src/sheet_tasks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the spreadsheet transport and the identity provider swappable
and makes testing easier.
"""

from typing import Any, Protocol


class SheetsClient(Protocol):
    """
    Row-oriented access to one spreadsheet.

    `span` is a column span in A1 notation ("A:K"). Rows are 1-based sheet lines,
    `row_index` for structural deletion is 0-based.
    """

    async def read_range(self, sheet: str, span: str) -> list[list[str]]: ...

    async def append_row(self, sheet: str, span: str, values: list[str]) -> None: ...

    async def overwrite_row(self, sheet: str, row: int, span: str, values: list[str]) -> None: ...

    async def delete_row(self, sheet_id: int, row_index: int) -> None: ...


class IdentityProvider(Protocol):
    async def sign_in(self) -> Any: ...  # GoogleUser
    async def sign_out(self) -> None: ...


class TaskRepo(Protocol):
    async def fetch_tasks(self) -> list[Any]: ...
    async def fetch_users(self) -> list[Any]: ...
    async def fetch_categories(self) -> list[Any]: ...

    async def create_task(self, draft: Any) -> Any: ...
    async def update_task(self, task: Any) -> Any: ...
    async def delete_task(self, task: Any) -> None: ...
