# tests/test_sheets_client.py

from __future__ import annotations

import json

import httpx
import pytest

from sheet_tasks.auth.identity import TokenHolder
from sheet_tasks.sheets.client import (
    GoogleSheetsClient,
    a1_range,
    describe_sheets_error,
    row_span,
)

from fakes import http_error


class Recorder:
    """MockTransport handler that records requests and replies with a canned payload."""

    def __init__(self, status: int = 200, payload: dict | None = None) -> None:
        self.status = status
        self.payload = payload if payload is not None else {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.payload)


def _client(handler: Recorder, **kwargs) -> GoogleSheetsClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleSheetsClient("sheet-123", TokenHolder("tok-1"), http=http, **kwargs)


def test_a1_helpers() -> None:
    assert a1_range("タスク", "A:K") == "'タスク'!A:K"
    assert a1_range("Bob's", "A:A") == "'Bob''s'!A:A"
    assert row_span("A:K", 5) == "A5:K5"
    assert row_span("A", 3) == "A3:A3"


def test_missing_spreadsheet_id_is_a_config_error() -> None:
    with pytest.raises(RuntimeError):
        GoogleSheetsClient("  ", TokenHolder("tok"))


@pytest.mark.asyncio
async def test_read_range_sends_bearer_and_stringifies() -> None:
    rec = Recorder(payload={"range": "x", "values": [["id", "n"], ["T1", 3]]})
    client = _client(rec, api_key="k-1")

    values = await client.read_range("タスク", "A:K")

    assert values == [["id", "n"], ["T1", "3"]]
    (req,) = rec.requests
    assert req.method == "GET"
    assert req.url.path == "/v4/spreadsheets/sheet-123/values/'タスク'!A:K"
    assert req.url.params["key"] == "k-1"
    assert req.headers["Authorization"] == "Bearer tok-1"


@pytest.mark.asyncio
async def test_read_range_without_values_is_empty() -> None:
    client = _client(Recorder(payload={"range": "x", "majorDimension": "ROWS"}))
    assert await client.read_range("タスク", "A:K") == []


@pytest.mark.asyncio
async def test_append_row() -> None:
    rec = Recorder(payload={"updates": {}})
    client = _client(rec)

    await client.append_row("タスク", "A:K", ["T1", "Buy milk"])

    (req,) = rec.requests
    assert req.method == "POST"
    assert req.url.path.endswith("/values/'タスク'!A:K:append")
    assert req.url.params["valueInputOption"] == "USER_ENTERED"
    assert "key" not in req.url.params
    assert json.loads(req.content) == {"values": [["T1", "Buy milk"]]}


@pytest.mark.asyncio
async def test_overwrite_row_targets_one_row() -> None:
    rec = Recorder()
    client = _client(rec)

    await client.overwrite_row("タスク", 5, "A:K", ["T5"] + [""] * 10)

    (req,) = rec.requests
    assert req.method == "PUT"
    assert req.url.path.endswith("/values/'タスク'!A5:K5")
    body = json.loads(req.content)
    assert body["range"] == "'タスク'!A5:K5"
    assert len(body["values"][0]) == 11


@pytest.mark.asyncio
async def test_delete_row_is_structural() -> None:
    rec = Recorder(payload={"replies": [{}]})
    client = _client(rec)

    await client.delete_row(0, 2)

    (req,) = rec.requests
    assert req.method == "POST"
    assert req.url.path == "/v4/spreadsheets/sheet-123:batchUpdate"
    body = json.loads(req.content)
    assert body == {
        "requests": [
            {
                "deleteDimension": {
                    "range": {"sheetId": 0, "dimension": "ROWS", "startIndex": 2, "endIndex": 3}
                }
            }
        ]
    }


@pytest.mark.asyncio
async def test_http_errors_are_raised_without_retry() -> None:
    rec = Recorder(status=403, payload={"error": {"code": 403}})
    client = _client(rec)

    with pytest.raises(httpx.HTTPStatusError):
        await client.delete_row(0, 1)
    assert len(rec.requests) == 1


def test_describe_sheets_error() -> None:
    assert "not authorized" in describe_sheets_error(http_error(401))
    assert "404" in describe_sheets_error(http_error(404))
    assert "rate-limited" in describe_sheets_error(http_error(429))
    assert describe_sheets_error(httpx.ConnectError("boom")) == "network error"
    assert describe_sheets_error(ValueError("bad row")) == "bad row"
