"""Async OpenID Connect client for the external identity provider."""
from __future__ import annotations
import aiohttp
import logging
from typing import Any
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """The identity provider could not be reached or rejected the request."""


class IdentityClient:
    def __init__(
        self,
        issuer_url: str,
        client_id: str,
        client_secret: str | None = None,
        scopes: str = "openid email profile",
    ):
        self.issuer_url = issuer_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.scopes = scopes
        self._metadata: dict[str, Any] | None = None
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=30),
            )
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        try:
            async with self.session.request(method, url, **kwargs) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)
        except aiohttp.ClientError as e:
            logger.error(f"Identity provider request to {url} failed: {e}")
            raise IdentityProviderError(str(e)) from e

    async def discover(self) -> dict[str, Any]:
        """Fetch (once) the provider's OpenID configuration document."""
        if self._metadata is None:
            self._metadata = await self._request(
                "GET", f"{self.issuer_url}/.well-known/openid-configuration"
            )
        return self._metadata

    async def authorization_url(self, state: str, redirect_uri: str) -> str:
        metadata = await self.discover()
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "scope": self.scopes,
            "state": state,
            "prompt": "login consent",
        }
        return f"{metadata['authorization_endpoint']}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> dict[str, Any]:
        metadata = await self.discover()
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": self.client_id,
        }
        if self.client_secret:
            form["client_secret"] = self.client_secret
        return await self._request("POST", metadata["token_endpoint"], data=form)

    async def refresh_tokens(self, refresh_token: str) -> dict[str, Any]:
        metadata = await self.discover()
        form = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self.client_id,
        }
        if self.client_secret:
            form["client_secret"] = self.client_secret
        return await self._request("POST", metadata["token_endpoint"], data=form)

    async def fetch_userinfo(self, access_token: str) -> dict[str, Any]:
        metadata = await self.discover()
        claims = await self._request(
            "GET",
            metadata["userinfo_endpoint"],
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if not claims.get("sub"):
            raise IdentityProviderError("userinfo response has no 'sub' claim")
        return claims

    async def end_session_url(self, post_logout_redirect_uri: str) -> str | None:
        """Provider logout URL, or None when the provider does not advertise one."""
        metadata = await self.discover()
        endpoint = metadata.get("end_session_endpoint")
        if not endpoint:
            return None
        params = {
            "client_id": self.client_id,
            "post_logout_redirect_uri": post_logout_redirect_uri,
        }
        return f"{endpoint}?{urlencode(params)}"
