"""GET /callback — ThaiID OAuth redirect handler."""

import logging
import re
from urllib.parse import unquote, urljoin

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from .. import ocsf
from ..audit import clamp_username, record_login_attempt
from ..client_ip import extract_client_ip
from ..config import get_settings
from ..dependencies import (
    callback_redirect_uri,
    get_audit_log,
    get_thaiid_client,
    get_user_store,
    issue_session,
    request_origin,
    revoke_issued_session,
)
from ..session import SessionPayload
from ..store import LoginAuditLog, UserRecord, UserStore
from ..thaiid import ThaiIDClient

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_PATH = "/officers"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def redirect_path(user: UserRecord, state: str | None) -> str:
    """Post-login path.

    "user"-status accounts always land on their own officer page; ``state``
    is only honoured for elevated roles.
    """
    if (user.status or "").lower() == "user":
        return f"/officers/{user.cid}"
    if not state:
        return DEFAULT_PATH
    if _BAD_ESCAPE.search(state):
        return state
    try:
        return unquote(state, errors="strict")
    except UnicodeDecodeError:
        return state


@router.get("/callback")
async def thaiid_callback(
    request: Request,
    thaiid: ThaiIDClient = Depends(get_thaiid_client),
    users: UserStore = Depends(get_user_store),
    audit_log: LoginAuditLog = Depends(get_audit_log),
):
    code = request.query_params.get("code")
    state = request.query_params.get("state")
    if not code:
        return JSONResponse({"error": "missing code"}, status_code=400)

    origin = request_origin(request)
    redirect_uri = callback_redirect_uri(request, thaiid)
    if not get_settings().login_audit:
        audit_log = None

    try:
        ipv4 = extract_client_ip(request.headers)
        token = await thaiid.exchange_code(code, redirect_uri)
        pid = token.get("pid") if isinstance(token, dict) else None
        username = clamp_username(pid)

        if not isinstance(pid, str) or not pid:
            await record_login_attempt(audit_log, username=username, logined="N", ipv4=ipv4)
            ocsf.login_event(
                success=False,
                protocol=ocsf.THAIID_PROTOCOL,
                src_ip=ipv4,
                message="ThaiID token has no pid",
            )
            return JSONResponse(
                {"error": "pid_missing_in_token", "token": token}, status_code=400
            )

        user = await users.find_by_cid(pid)
        if user is None:
            await record_login_attempt(audit_log, username=username, logined="N", ipv4=ipv4)
            ocsf.login_event(
                success=False,
                protocol=ocsf.THAIID_PROTOCOL,
                user_cid=pid,
                src_ip=ipv4,
                message="ThaiID login for unknown cid",
            )
            return JSONResponse(
                {
                    "error": "not_found",
                    "message": f"ไม่พบข้อมูล {pid} ในฐานข้อมูล",
                    "pid": pid,
                },
                status_code=404,
            )

        target_url = urljoin(f"{origin}/", redirect_path(user, state))
        response = RedirectResponse(target_url, status_code=302)
        issue_session(request, SessionPayload.from_user(user))

        await record_login_attempt(audit_log, username=username, logined="Y", ipv4=ipv4)
        ocsf.login_event(
            success=True,
            protocol=ocsf.THAIID_PROTOCOL,
            user_cid=user.cid,
            src_ip=ipv4,
            message="ThaiID login succeeded",
        )
        return response

    except Exception as e:
        logger.exception("ThaiID callback failed")
        revoke_issued_session(request)
        ocsf.authentication_event(
            activity_id=ocsf.AuthActivity.AUTHENTICATION_TICKET,
            activity_name="Authentication Ticket",
            status_id=ocsf.Status.FAILURE,
            severity_id=ocsf.Severity.MEDIUM,
            auth_protocol_id=ocsf.AuthProtocol.OAUTH2,
            auth_protocol=ocsf.THAIID_PROTOCOL[1],
            message=f"ThaiID callback failed: {e}",
        )
        return JSONResponse(
            {"error": "callback_failed", "detail": str(e)}, status_code=500
        )
