# tests/test_identity.py

from __future__ import annotations

import httpx
import pytest

from sheet_tasks.auth.identity import GoogleIdentityProvider, SignInError, TokenHolder

USERINFO = "https://www.googleapis.com/oauth2/v3/userinfo"
REVOKE = "https://oauth2.googleapis.com/revoke"


def _provider(tokens: TokenHolder, handler) -> GoogleIdentityProvider:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleIdentityProvider(tokens, userinfo_url=USERINFO, revoke_url=REVOKE, http=http)


@pytest.mark.asyncio
async def test_sign_in_reads_userinfo() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"email": "alice@example.com", "name": "Alice Smith", "picture": "https://p/a.png"},
        )

    user = await _provider(TokenHolder("tok-1"), handler).sign_in()

    assert (user.email, user.name, user.picture) == ("alice@example.com", "Alice Smith", "https://p/a.png")
    assert seen[0].headers["Authorization"] == "Bearer tok-1"


@pytest.mark.asyncio
async def test_sign_in_without_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(SignInError):
        await _provider(TokenHolder(None), handler).sign_in()


@pytest.mark.asyncio
async def test_sign_in_rejected_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="invalid_token")

    with pytest.raises(SignInError, match="401"):
        await _provider(TokenHolder("expired"), handler).sign_in()


@pytest.mark.asyncio
async def test_sign_out_revokes_and_clears() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    tokens = TokenHolder("tok-1")
    await _provider(tokens, handler).sign_out()

    assert tokens.token is None
    assert tokens.auth_headers() == {}
    assert seen[0].method == "POST"
    assert seen[0].url.params["token"] == "tok-1"


@pytest.mark.asyncio
async def test_sign_out_clears_even_if_revoke_fails() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    tokens = TokenHolder("tok-1")
    await _provider(tokens, handler).sign_out()

    assert tokens.token is None
