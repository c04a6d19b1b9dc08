"""GET /api/useronline — Paged listing of login attempts."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..dependencies import get_audit_log, require_session
from ..session import SessionPayload
from ..store import LoginAttemptQuery, LoginAuditLog

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_PAGE_SIZE = 100


def _int_param(value: str | None, default: int) -> int:
    try:
        return int(value) if value else default
    except ValueError:
        return default


def _date_param(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_query(params) -> LoginAttemptQuery:
    logined = (params.get("logined") or "").strip().upper()
    return LoginAttemptQuery(
        username=(params.get("username") or "").strip() or None,
        ipv4=(params.get("ipv4") or "").strip() or None,
        logined=logined if logined in ("Y", "N") else None,
        start_date=_date_param(params.get("startDate")),
        end_date=_date_param(params.get("endDate")),
        page=max(1, _int_param(params.get("page"), 1)),
        page_size=min(MAX_PAGE_SIZE, max(1, _int_param(params.get("pageSize"), 20))),
    )


@router.get("/api/useronline")
async def list_login_attempts(
    request: Request,
    _session: SessionPayload = Depends(require_session),
    audit_log: LoginAuditLog = Depends(get_audit_log),
):
    query = parse_query(request.query_params)
    try:
        items, total = await audit_log.search(query)
    except Exception as e:
        logger.exception("useronline report error")
        return JSONResponse(
            {"error": "ไม่สามารถโหลดข้อมูลการใช้งานได้", "detail": str(e)},
            status_code=500,
        )

    return {
        "items": [a.to_dict() for a in items],
        "total": total,
        "page": query.page,
        "pageSize": query.page_size,
        "totalPages": -(-total // query.page_size),
    }
