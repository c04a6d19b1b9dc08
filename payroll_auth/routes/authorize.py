"""GET /api/auth/thaiid — Start a ThaiID login at the provider's authorize endpoint."""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from ..dependencies import callback_redirect_uri, get_thaiid_client
from ..thaiid import ThaiIDClient, ThaiIDConfigError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/auth/thaiid")
async def thaiid_authorize(
    request: Request,
    thaiid: ThaiIDClient = Depends(get_thaiid_client),
):
    # The post-login path rides along as OAuth state and comes back to /callback
    next_path = request.query_params.get("next")
    state = quote(next_path, safe="") if next_path else None

    try:
        url = thaiid.authorization_url(callback_redirect_uri(request, thaiid), state)
    except ThaiIDConfigError as e:
        logger.error("ThaiID authorize: %s", e)
        return JSONResponse({"error": str(e)}, status_code=500)

    return RedirectResponse(url, status_code=302)
