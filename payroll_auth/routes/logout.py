"""POST /api/auth/logout — Clear the session cookie."""

from fastapi import APIRouter, Depends, Request

from .. import ocsf
from ..client_ip import extract_client_ip
from ..dependencies import destroy_session, get_session
from ..session import SessionPayload

router = APIRouter()


@router.post("/api/auth/logout")
async def logout(request: Request, session: SessionPayload | None = Depends(get_session)):
    destroy_session(request)
    ocsf.authentication_event(
        activity_id=ocsf.AuthActivity.LOGOFF,
        activity_name="Logoff",
        status_id=ocsf.Status.SUCCESS,
        severity_id=ocsf.Severity.INFORMATIONAL,
        user_cid=session.cid if session else None,
        src_ip=extract_client_ip(request.headers),
        message="User logged out",
    )
    return {"message": "Logged out successfully"}
