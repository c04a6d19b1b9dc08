"""ThaiID (DOPA Digital ID) integration: authorization URL and code exchange."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx

logger = logging.getLogger(__name__)


class ThaiIDConfigError(RuntimeError):
    """Raised when required provider settings are missing."""


class TokenExchangeError(RuntimeError):
    """Raised when the token endpoint answers with a non-2xx status."""

    def __init__(self, status: int, body: Any) -> None:
        self.status = status
        self.body = body
        error = body if isinstance(body, (dict, list)) else {"body": body}
        super().__init__(f"token_error:{status}:{json.dumps(error, ensure_ascii=False)}")


@dataclass(frozen=True)
class ThaiIDConfig:
    client_id: str = ""
    client_secret: str = ""
    token_url: str = ""
    authorize_url: str = ""
    userinfo_url: str = ""
    scope: str = "pid"
    api_key: str = ""
    callback_url: str = ""  # Explicit redirect_uri override


def _parse_body(resp: httpx.Response) -> Any:
    """JSON body when it parses, raw text otherwise."""
    raw = resp.text
    try:
        return json.loads(raw)
    except ValueError:
        return raw


class ThaiIDClient:
    """Client for the provider's OAuth2 endpoints.

    Built once at startup from an explicit ThaiIDConfig so tests can point
    it at fake endpoints.
    """

    def __init__(self, config: ThaiIDConfig) -> None:
        self.config = config

    def authorization_url(self, redirect_uri: str, state: str | None = None) -> str:
        c = self.config
        if not c.authorize_url or not c.client_id:
            raise ThaiIDConfigError("missing ThaiID configuration")
        params = {
            "response_type": "code",
            "client_id": c.client_id,
            "redirect_uri": redirect_uri,
            "scope": c.scope,
        }
        if state:
            params["state"] = state
        sep = "&" if "?" in c.authorize_url else "?"
        return f"{c.authorize_url}{sep}{urlencode(params)}"

    def _headers(self) -> dict[str, str]:
        c = self.config
        basic = base64.b64encode(f"{c.client_id}:{c.client_secret}".encode()).decode()
        headers = {
            "Authorization": f"Basic {basic}",
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        if c.api_key:
            headers["X-API-Key"] = c.api_key
        return headers

    async def _request_token(
        self, client: httpx.AsyncClient, url: str, code: str, redirect_uri: str
    ) -> tuple[httpx.Response, Any]:
        resp = await client.post(
            url,
            data={
                "grant_type": "authorization_code",
                "redirect_uri": redirect_uri,
                "code": code,
                "scope": self.config.scope,
            },
            headers=self._headers(),
        )
        return resp, _parse_body(resp)

    async def exchange_code(self, code: str, redirect_uri: str) -> Any:
        """Exchange an authorization code for the provider's token payload.

        A 404 from a token URL without a trailing slash is retried once with
        the slash appended; some gateways only route the slashed form.
        """
        c = self.config
        if not c.client_id or not c.client_secret or not c.token_url:
            raise ThaiIDConfigError("missing ThaiID configuration")

        async with httpx.AsyncClient() as client:
            resp, body = await self._request_token(client, c.token_url, code, redirect_uri)

            if resp.status_code == 404 and not c.token_url.endswith("/"):
                logger.info("Token endpoint returned 404, retrying with trailing slash")
                retry, retry_body = await self._request_token(
                    client, f"{c.token_url}/", code, redirect_uri
                )
                if retry.is_success or retry.status_code != 404:
                    resp, body = retry, retry_body

        if not resp.is_success:
            raise TokenExchangeError(resp.status_code, body)

        return body
