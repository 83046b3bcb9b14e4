# src/sheet_tasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Sheet layout (sheet names, tasks sheet id) is configurable, defaults match the
  spreadsheet template.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SHEET_TASKS"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Google credentials ----
    spreadsheet_id: str
    api_key: str | None
    access_token: str | None

    # ---- Endpoints ----
    sheets_base_url: str
    userinfo_url: str
    revoke_url: str

    # ---- Sheet layout ----
    tasks_sheet: str
    users_sheet: str
    categories_sheet: str
    tasks_sheet_id: int

    # ---- Repository behaviour ----
    task_id_prefix: str
    verify_rows: bool

    # ---- HTTP ----
    connect_timeout_seconds: float
    read_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "sheet-tasks")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/sheet-tasks"))

        spreadsheet_id = (_env(_k("SPREADSHEET_ID"), "") or "").strip()
        api_key = _first_env(_k("API_KEY"), "GOOGLE_API_KEY", default=None)
        # The OAuth flow itself lives outside this app; it hands us a token.
        access_token = _first_env(_k("ACCESS_TOKEN"), "GOOGLE_ACCESS_TOKEN", default=None)

        sheets_base_url = _env(_k("SHEETS_BASE_URL"), "https://sheets.googleapis.com/v4")
        userinfo_url = _env(_k("USERINFO_URL"), "https://www.googleapis.com/oauth2/v3/userinfo")
        revoke_url = _env(_k("REVOKE_URL"), "https://oauth2.googleapis.com/revoke")

        tasks_sheet = _env(_k("TASKS_SHEET"), "タスク")
        users_sheet = _env(_k("USERS_SHEET"), "ユーザーマスタ")
        categories_sheet = _env(_k("CATEGORIES_SHEET"), "カテゴリマスタ")
        tasks_sheet_id = _env_int(_k("TASKS_SHEET_ID"), 0)

        task_id_prefix = _env(_k("TASK_ID_PREFIX"), "TASK-")
        verify_rows = _env_bool(_k("VERIFY_ROWS"), True)

        connect_timeout_seconds = _env_float(_k("CONNECT_TIMEOUT_SECONDS"), 5.0)
        read_timeout_seconds = _env_float(_k("READ_TIMEOUT_SECONDS"), 30.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            spreadsheet_id=spreadsheet_id,
            api_key=api_key,
            access_token=access_token,
            sheets_base_url=sheets_base_url,
            userinfo_url=userinfo_url,
            revoke_url=revoke_url,
            tasks_sheet=tasks_sheet,
            users_sheet=users_sheet,
            categories_sheet=categories_sheet,
            tasks_sheet_id=tasks_sheet_id,
            task_id_prefix=task_id_prefix,
            verify_rows=verify_rows,
            connect_timeout_seconds=connect_timeout_seconds,
            read_timeout_seconds=read_timeout_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
