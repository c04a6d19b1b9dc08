"""POST /api/auth/login — username/password/captcha login."""

import hashlib
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import captcha, ocsf
from ..audit import clamp_username, record_login_attempt
from ..client_ip import extract_client_ip
from ..config import get_settings
from ..dependencies import get_audit_log, get_user_store, issue_session
from ..session import SessionPayload
from ..store import LoginAuditLog, UserStore

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""
    captcha: str = ""


def hash_password(password: str) -> str:
    """Legacy SHA-1 hex digest stored in user.password."""
    return hashlib.sha1(password.strip().encode("utf-8")).hexdigest()


@router.post("/api/auth/login")
async def login(
    request: Request,
    users: UserStore = Depends(get_user_store),
    audit_log: LoginAuditLog = Depends(get_audit_log),
):
    try:
        try:
            body = LoginRequest.model_validate(await request.json())
        except ValueError:
            body = LoginRequest()

        if not body.username or not body.password:
            return JSONResponse(
                {"error": "username and password required"}, status_code=400
            )

        signer: captcha.CaptchaSigner = request.app.state.captcha
        if not signer.verify(body.captcha, request.cookies.get(captcha.COOKIE_NAME)):
            return JSONResponse({"error": "Invalid verification code"}, status_code=401)

        if not get_settings().login_audit:
            audit_log = None
        ipv4 = extract_client_ip(request.headers)
        username = body.username.strip()

        user = await users.find_by_credentials(username, hash_password(body.password))
        if user is None:
            await record_login_attempt(
                audit_log, username=clamp_username(username), logined="N", ipv4=ipv4
            )
            ocsf.login_event(
                success=False,
                protocol=ocsf.PASSWORD_PROTOCOL,
                src_ip=ipv4,
                message="Invalid credentials",
            )
            return JSONResponse({"error": "Invalid credentials"}, status_code=401)

        issue_session(request, SessionPayload.from_user(user))
        await record_login_attempt(
            audit_log, username=clamp_username(username), logined="Y", ipv4=ipv4
        )
        ocsf.login_event(
            success=True,
            protocol=ocsf.PASSWORD_PROTOCOL,
            user_cid=user.cid,
            src_ip=ipv4,
            message="Password login succeeded",
        )
        return {"user": user.public(), "message": "Login successful."}

    except Exception as e:
        logger.exception("Login error")
        return JSONResponse(
            {"error": "Login failed", "detail": str(e)}, status_code=500
        )
