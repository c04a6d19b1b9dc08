"""GET /api/auth/me — Display fields of the current session."""

from fastapi import APIRouter, Depends

from ..dependencies import require_session
from ..session import SessionPayload

router = APIRouter()


@router.get("/api/auth/me")
async def get_me(session: SessionPayload = Depends(require_session)):
    return {
        "user": {
            "fname": session.fname,
            "lname": session.lname,
            "cid": session.cid,
        }
    }
