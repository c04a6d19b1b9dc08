"""FastAPI dependency injection: session access, stores, provider client."""

from __future__ import annotations

from fastapi import HTTPException, Request

from .session import SessionPayload
from .store import LoginAuditLog, UserStore
from .thaiid import ThaiIDClient


def get_session(request: Request) -> SessionPayload | None:
    """Verified session payload from the cookie, or None."""
    return request.state.session


def require_session(request: Request) -> SessionPayload:
    """Require a valid session cookie."""
    session = request.state.session
    if session is None:
        raise HTTPException(status_code=401, detail={"error": "Unauthorized"})
    return session


def issue_session(request: Request, payload: SessionPayload) -> None:
    """Have the session middleware set a freshly signed cookie on the response."""
    request.state.session = payload
    request.state.session_issued = payload


def revoke_issued_session(request: Request) -> None:
    """Drop a session issued earlier in this request so no cookie is written."""
    if request.state.session_issued is not None:
        request.state.session_issued = None
        request.state.session = None


def destroy_session(request: Request) -> None:
    """Mark the session cookie for clearing."""
    request.state.session_destroyed = True
    request.state.session = None


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_audit_log(request: Request) -> LoginAuditLog:
    return request.app.state.audit_log


def get_thaiid_client(request: Request) -> ThaiIDClient:
    return request.app.state.thaiid


def request_origin(request: Request) -> str:
    """Public origin of the request, honouring reverse-proxy headers."""
    proto = request.headers.get("x-forwarded-proto")
    host = request.headers.get("x-forwarded-host") or request.headers.get("host")
    if proto and host:
        return f"{proto}://{host}"
    return f"{request.url.scheme}://{request.url.netloc}"


def callback_redirect_uri(request: Request, thaiid: ThaiIDClient) -> str:
    """redirect_uri sent to the provider; must match between authorize and exchange."""
    return thaiid.config.callback_url or f"{request_origin(request)}/callback"
