"""GET /api/auth/captcha — Captcha image plus signed answer cookie."""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from .. import captcha
from ..config import get_settings

router = APIRouter()


@router.get("/api/auth/captcha")
async def get_captcha(request: Request):
    signer: captcha.CaptchaSigner = request.app.state.captcha
    code = captcha.generate_captcha_code()

    response = Response(
        captcha.render_captcha_svg(code),
        media_type="image/svg+xml",
        headers={"Cache-Control": "no-store"},
    )
    response.set_cookie(
        captcha.COOKIE_NAME,
        signer.sign(code),
        max_age=signer.max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=get_settings().session_https_only,
    )
    return response
