# src/sheet_tasks/cli/commands.py

from __future__ import annotations

import dataclasses
import inspect
import logging
import shlex
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import Task, TaskDraft
from ..tasks.task_views import (
    TableQuery,
    ViewMode,
    apply_fields,
    new_task_draft,
    parse_status,
    toggle_sort,
)
from .render import render_current

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /table, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            result = await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_assignments(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """["T1", "name=Buy milk", "status=完了"] -> (["T1"], {"name": ..., "status": ...})."""
    positional: list[str] = []
    fields: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key:
            fields[key] = value
        else:
            positional.append(a)
    return positional, fields


def _after_write(state: AppState, ok: bool, done: str) -> str:
    if ok:
        return f"{done}\n{render_current(state)}"
    return f"[ERROR] {state.error or 'Operation failed.'}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    who = f"{state.user.name} <{state.user.email}>" if state.user else "(signed out)"
    sheet = getattr(state.settings, "spreadsheet_id", "") or "(not set)"
    lines = [
        "Status:",
        f"  User: {who}",
        f"  Spreadsheet: {sheet}",
        f"  Tasks: {len(state.tasks)}  Users: {len(state.users)}  Categories: {len(state.categories)}",
        f"  View: {state.view_mode.value}",
    ]
    if state.error:
        lines.append(f"  Last error: {state.error}")
    return "\n".join(lines)


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /login          -> sign in with the configured token
    /login <token>  -> sign in with a fresh access token
    """
    if args:
        if state.tokens is None:
            return "Token login is not available."
        state.tokens.set(args[0])
    if emit:
        emit("[AUTH] Signing in...")
    ok = await task_api.sign_in(state)
    if not ok:
        return f"[ERROR] {state.error or 'Sign-in failed.'}"
    if state.user is None:
        return "[ERROR] Sign-in returned no user."
    return f"Signed in as {state.user.name} <{state.user.email}>. Loaded {len(state.tasks)} tasks."


async def cmd_logout(state: AppState, args: list[str]) -> str:
    await task_api.sign_out(state)
    return "Signed out."


async def cmd_reload(state: AppState, args: list[str]) -> str:
    ok = await task_api.load_data(state)
    return _after_write(state, ok, f"Reloaded {len(state.tasks)} tasks.")


def cmd_table(state: AppState, args: list[str]) -> str:
    """
    /table                                  -> table view with the current filters
    /table q=milk status=進行中 assignee=Alice mine sort=due_date asc
    /table reset                            -> clear filters
    """
    positional, fields = _split_assignments(args)
    query = state.table_query

    if "reset" in positional:
        query = TableQuery()

    try:
        for key, value in fields.items():
            k = key.lower()
            if k in ("q", "search"):
                query = dataclasses.replace(query, search=value)
            elif k == "status":
                query = dataclasses.replace(query, status=parse_status(value) if value else None)
            elif k == "assignee":
                query = dataclasses.replace(query, assignee=value or None)
            elif k == "sort":
                query = toggle_sort(query, value)
            else:
                return f"Unknown table option: {key}"
    except ValueError as e:
        return str(e)

    if "mine" in positional:
        query = dataclasses.replace(query, mine_only=True)
    if "all" in positional:
        query = dataclasses.replace(query, mine_only=False)
    if "asc" in positional:
        query = dataclasses.replace(query, descending=False)
    if "desc" in positional:
        query = dataclasses.replace(query, descending=True)

    state.table_query = query
    state.view_mode = ViewMode.TABLE
    return render_current(state)


def cmd_kanban(state: AppState, args: list[str]) -> str:
    state.view_mode = ViewMode.KANBAN
    return render_current(state)


def cmd_gantt(state: AppState, args: list[str]) -> str:
    state.view_mode = ViewMode.GANTT
    return render_current(state)


def cmd_view(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Current view: {state.view_mode.value}. Use /view table|kanban|gantt."
    try:
        state.view_mode = ViewMode(args[0].lower())
    except ValueError:
        return "Usage: /view table|kanban|gantt."
    return render_current(state)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add name="Buy milk" due_date=2024-01-02 priority=高 ..."""
    positional, fields = _split_assignments(args)
    if positional and "name" not in fields:
        fields["name"] = " ".join(positional)

    draft = new_task_draft(
        state.users,
        state.categories,
        state.user.name if state.user else None,
    )
    try:
        draft = cast(TaskDraft, apply_fields(draft, fields))
    except ValueError as e:
        return str(e)
    if not draft.name.strip():
        return 'Usage: /add name="Task name" [field=value ...]'

    ok = await task_api.save_task(state, draft)
    return _after_write(state, ok, f"Task added: {draft.name}")


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> field=value ..."""
    positional, fields = _split_assignments(args)
    if not positional or not fields:
        return "Usage: /edit <id> field=value ..."
    task = state.find_task(positional[0])
    if task is None:
        return f"No task with id {positional[0]}."
    try:
        edited = cast(Task, apply_fields(task, fields))
    except ValueError as e:
        return str(e)

    ok = await task_api.save_task(state, edited)
    return _after_write(state, ok, f"Task updated: {edited.id}")


async def cmd_move(state: AppState, args: list[str]) -> str:
    """/move <id> <status>"""
    if len(args) < 2:
        return "Usage: /move <id> 未着手|進行中|完了 (or not_started|in_progress|completed)"
    try:
        status = parse_status(" ".join(args[1:]))
    except ValueError as e:
        return str(e)
    if state.find_task(args[0]) is None:
        return f"No task with id {args[0]}."

    ok = await task_api.change_task_status(state, args[0], status)
    return _after_write(state, ok, f"Task {args[0]} -> {status.value}")


async def cmd_delete(state: AppState, args: list[str]) -> str:
    """/delete <id> yes"""
    if not args:
        return "Usage: /delete <id> yes"
    task = state.find_task(args[0])
    if task is None:
        return f"No task with id {args[0]}."

    confirmed = len(args) > 1 and args[1].lower() in ("yes", "y")
    if not confirmed:
        return f'Delete task "{task.name}"? Confirm with /delete {task.id} yes'

    ok = await task_api.remove_task(state, task, confirm=lambda _t: confirmed)
    return _after_write(state, ok, f"Task deleted: {task.name}")


def cmd_users(state: AppState, args: list[str]) -> str:
    if not state.users:
        return "No users."
    return "\n".join(f"{u.name} <{u.email}> {u.role}".rstrip() for u in state.users)


def cmd_categories(state: AppState, args: list[str]) -> str:
    if not state.categories:
        return "No categories."
    return "\n".join(c.name for c in state.categories)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show signed-in user, counts and last error.")
registry.register("login", cmd_login, help_text="Sign in: /login [access_token].")
registry.register("logout", cmd_logout, help_text="Sign out and revoke the token.")
registry.register("reload", cmd_reload, help_text="Reload everything from the sheet.")
registry.register(
    "table",
    cmd_table,
    help_text="Table view: /table [q=.. status=.. assignee=.. sort=field] [mine|all] [asc|desc] [reset].",
    aliases=["list", "ls"],
)
registry.register("kanban", cmd_kanban, help_text="Kanban view grouped by status.")
registry.register("gantt", cmd_gantt, help_text="Gantt view (tasks with start and due date).")
registry.register("view", cmd_view, help_text="Switch view: /view table|kanban|gantt.")
registry.register("add", cmd_add, help_text='Create a task: /add name="..." [field=value ...].')
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> field=value ...")
registry.register("move", cmd_move, help_text="Change status: /move <id> <status>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id> yes.", aliases=["rm"])
registry.register("users", cmd_users, help_text="List users.")
registry.register("categories", cmd_categories, help_text="List categories.")
