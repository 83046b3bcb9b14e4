# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real tokens. Put them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "SHEET_TASKS_APP_NAME": "App display name (default: sheet-tasks).",
    "SHEET_TASKS_LOG_LEVEL": "Console logging level (default: INFO).",
    "SHEET_TASKS_DATA_DIR": "Local data directory for logs (default: .local/sheet-tasks).",
    # Google credentials
    "SHEET_TASKS_SPREADSHEET_ID": "Spreadsheet id from the sheet URL (required).",
    "SHEET_TASKS_API_KEY": "Optional API key sent as ?key= (fallback: GOOGLE_API_KEY).",
    "SHEET_TASKS_ACCESS_TOKEN": (
        "OAuth access token with spreadsheets + userinfo.email scopes "
        "(fallback: GOOGLE_ACCESS_TOKEN). Can also be passed with /login <token>."
    ),
    # Endpoints
    "SHEET_TASKS_SHEETS_BASE_URL": "Sheets API base URL (default: https://sheets.googleapis.com/v4).",
    "SHEET_TASKS_USERINFO_URL": "OAuth userinfo endpoint used at sign-in.",
    "SHEET_TASKS_REVOKE_URL": "OAuth token revoke endpoint used at sign-out.",
    # Sheet layout
    "SHEET_TASKS_TASKS_SHEET": "Tasks sheet name (default: タスク).",
    "SHEET_TASKS_USERS_SHEET": "Users sheet name (default: ユーザーマスタ).",
    "SHEET_TASKS_CATEGORIES_SHEET": "Categories sheet name (default: カテゴリマスタ).",
    "SHEET_TASKS_TASKS_SHEET_ID": "Numeric sheet id of the tasks sheet, used for row deletion (default: 0).",
    # Repository behaviour
    "SHEET_TASKS_TASK_ID_PREFIX": "Prefix of generated task ids (default: TASK-).",
    "SHEET_TASKS_VERIFY_ROWS": "Re-read the ID cell before update/delete (true/false, default: true).",
    # HTTP
    "SHEET_TASKS_CONNECT_TIMEOUT_SECONDS": "Connect timeout (default: 5).",
    "SHEET_TASKS_READ_TIMEOUT_SECONDS": "Read timeout (default: 30).",
}
