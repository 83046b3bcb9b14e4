# src/sheet_tasks/auth/identity.py

"""
Signed-in identity.

The OAuth consent flow runs outside this app (browser / SDK); it hands over an
access token. The token lives in an explicit TokenHolder shared by the sheets
client and the identity provider.

Profile lookup uses the userinfo endpoint with the bearer token (instead of
decoding an id_token locally).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)


class SignInError(RuntimeError):
    pass


@dataclass(slots=True, frozen=True)
class GoogleUser:
    email: str
    name: str
    picture: str = ""


class TokenHolder:
    """Current OAuth access token (None when signed out)."""

    def __init__(self, token: str | None = None) -> None:
        self._token = (token or "").strip() or None

    @property
    def token(self) -> str | None:
        return self._token

    def set(self, token: str | None) -> None:
        self._token = (token or "").strip() or None

    def clear(self) -> None:
        self._token = None

    def auth_headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}


class GoogleIdentityProvider:
    def __init__(
        self,
        tokens: TokenHolder,
        *,
        userinfo_url: str = "https://www.googleapis.com/oauth2/v3/userinfo",
        revoke_url: str = "https://oauth2.googleapis.com/revoke",
        http: httpx.AsyncClient | None = None,
        timeout: httpx.Timeout | float = 10.0,
    ) -> None:
        self._tokens = tokens
        self._userinfo_url = userinfo_url
        self._revoke_url = revoke_url
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def sign_in(self) -> GoogleUser:
        if not self._tokens.token:
            raise SignInError(
                "Authentication failed: no access token. Set SHEET_TASKS_ACCESS_TOKEN in your .env."
            )

        try:
            resp = await self._http.get(self._userinfo_url, headers=self._tokens.auth_headers())
        except httpx.HTTPError as e:
            logger.error("Error fetching user info: %s", e)
            raise SignInError("Failed to fetch user info (network error).") from e

        if resp.status_code != 200:
            logger.error("Failed to fetch user info: %s %s", resp.status_code, resp.text)
            raise SignInError(f"Failed to fetch user info (HTTP {resp.status_code}).")

        data = resp.json()
        user = GoogleUser(
            email=str(data.get("email") or ""),
            name=str(data.get("name") or ""),
            picture=str(data.get("picture") or ""),
        )
        if not user.email:
            raise SignInError("User info has no email; the token lacks the userinfo.email scope.")

        logger.info("Signed in as %s", user.email)
        return user

    async def sign_out(self) -> None:
        token = self._tokens.token
        if token is None:
            return
        try:
            resp = await self._http.post(
                self._revoke_url,
                params={"token": token},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            if resp.status_code != 200:
                logger.warning("Token revoke returned HTTP %s", resp.status_code)
        except httpx.HTTPError:
            logger.warning("Token revoke failed.", exc_info=True)
        finally:
            self._tokens.clear()
        logger.info("Signed out.")
