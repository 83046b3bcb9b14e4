# src/sheet_tasks/sheets/client.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..auth.identity import TokenHolder

logger = logging.getLogger(__name__)

VALUE_INPUT_OPTION = "USER_ENTERED"


def a1_range(sheet: str, span: str) -> str:
    """'Sheet name'!A:K (single quotes inside the name are doubled)."""
    escaped = sheet.replace("'", "''")
    return f"'{escaped}'!{span}"


def row_span(span: str, row: int) -> str:
    """Column span restricted to one row: ("A:K", 5) -> "A5:K5"."""
    first, _, last = span.partition(":")
    last = last or first
    return f"{first}{row}:{last}{row}"


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


def describe_sheets_error(err: Exception) -> str:
    """Short user-facing text for a transport/auth failure."""
    if isinstance(err, httpx.HTTPStatusError):
        code = err.response.status_code
        if code in (401, 403):
            return f"not authorized (HTTP {code}); sign in again"
        if code == 404:
            return "spreadsheet or sheet not found (HTTP 404)"
        if code == 429:
            return "rate-limited by the Sheets API (HTTP 429); try again later"
        return f"Sheets API error (HTTP {code})"
    if isinstance(err, httpx.TimeoutException):
        return "Sheets API timeout"
    if isinstance(err, httpx.TransportError):
        return "network error"
    msg = str(err).strip()
    return msg or err.__class__.__name__


class GoogleSheetsClient:
    """
    Google Sheets REST v4 binding (values.get / values.append / values.update /
    batchUpdate.deleteDimension).

    Every call is a single request: no retries, failures raise httpx errors.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        tokens: TokenHolder,
        *,
        api_key: str | None = None,
        base_url: str = "https://sheets.googleapis.com/v4",
        http: httpx.AsyncClient | None = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 30.0,
    ) -> None:
        if not spreadsheet_id or not spreadsheet_id.strip():
            raise RuntimeError("Spreadsheet id is not set. Set SHEET_TASKS_SPREADSHEET_ID in your .env.")

        self.spreadsheet_id = spreadsheet_id.strip()
        self._tokens = tokens
        self._api_key = api_key
        self._base = base_url.rstrip("/") + "/spreadsheets/" + quote(self.spreadsheet_id, safe="")
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=make_timeout(connect_timeout, read_timeout))

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ---- low-level helpers ----

    def _values_url(self, rng: str, suffix: str = "") -> str:
        return f"{self._base}/values/{quote(rng, safe='')}{suffix}"

    def _params(self, **extra: Any) -> dict[str, Any]:
        params: dict[str, Any] = dict(extra)
        if self._api_key:
            params["key"] = self._api_key
        return params

    async def _send(self, method: str, url: str, *, params: dict[str, Any], json: Any = None) -> dict[str, Any]:
        resp = await self._http.request(
            method,
            url,
            params=params,
            json=json,
            headers=self._tokens.auth_headers(),
        )
        logger.debug("%s %s -> %s", method, url, resp.status_code)
        resp.raise_for_status()
        if not resp.content:
            return {}
        data = resp.json()
        return data if isinstance(data, dict) else {}

    # ---- SheetsClient port ----

    async def read_range(self, sheet: str, span: str) -> list[list[str]]:
        data = await self._send("GET", self._values_url(a1_range(sheet, span)), params=self._params())
        values = data.get("values") or []
        return [["" if c is None else str(c) for c in row] for row in values]

    async def append_row(self, sheet: str, span: str, values: list[str]) -> None:
        await self._send(
            "POST",
            self._values_url(a1_range(sheet, span), ":append"),
            params=self._params(valueInputOption=VALUE_INPUT_OPTION),
            json={"values": [list(values)]},
        )

    async def overwrite_row(self, sheet: str, row: int, span: str, values: list[str]) -> None:
        rng = a1_range(sheet, row_span(span, row))
        await self._send(
            "PUT",
            self._values_url(rng),
            params=self._params(valueInputOption=VALUE_INPUT_OPTION),
            json={"range": rng, "majorDimension": "ROWS", "values": [list(values)]},
        )

    async def delete_row(self, sheet_id: int, row_index: int) -> None:
        body = {
            "requests": [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": int(sheet_id),
                            "dimension": "ROWS",
                            "startIndex": int(row_index),
                            "endIndex": int(row_index) + 1,
                        }
                    }
                }
            ]
        }
        await self._send("POST", f"{self._base}:batchUpdate", params=self._params(), json=body)
