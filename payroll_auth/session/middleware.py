"""ASGI session-cookie middleware.

The session lives entirely in the cookie as a signed token. This middleware
verifies the incoming cookie, attaches the payload (or None) to
request.state.session, and on response writes or clears the cookie when a
route issued or destroyed a session.
"""

from __future__ import annotations

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .codec import SessionCodec

COOKIE_NAME = "session"


class SessionMiddleware:
    """ASGI middleware for signed-cookie sessions."""

    def __init__(
        self,
        app: ASGIApp,
        codec: SessionCodec,
        cookie_name: str = COOKIE_NAME,
        https_only: bool = False,
        same_site: str = "lax",
    ) -> None:
        self.app = app
        self.codec = codec
        self.cookie_name = cookie_name
        self.max_age = codec.max_age
        self.https_only = https_only
        self.same_site = same_site

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        conn = HTTPConnection(scope)
        session = self.codec.verify(conn.cookies.get(self.cookie_name))

        scope["state"] = scope.get("state", {})
        scope["state"]["session"] = session
        scope["state"]["session_issued"] = None
        scope["state"]["session_destroyed"] = False

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                issued = scope["state"].get("session_issued")
                destroyed: bool = scope["state"].get("session_destroyed", False)
                headers = MutableHeaders(scope=message)

                if destroyed:
                    headers.append("set-cookie", self._make_cookie("", delete=True))
                elif issued is not None:
                    headers.append("set-cookie", self._make_cookie(self.codec.sign(issued)))

            await send(message)

        await self.app(scope, receive, send_wrapper)

    def _make_cookie(self, value: str, *, delete: bool = False) -> str:
        max_age = 0 if delete else self.max_age
        parts = [
            f"{self.cookie_name}={value}",
            f"Max-Age={max_age}",
            "Path=/",
            "HttpOnly",
            f"SameSite={self.same_site}",
        ]
        if self.https_only:
            parts.append("Secure")
        return "; ".join(parts)
