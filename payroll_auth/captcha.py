"""Image captcha for the username/password login form."""

from __future__ import annotations

import hmac
import secrets

from itsdangerous import BadSignature, URLSafeTimedSerializer

CAPTCHA_LENGTH = 6
CAPTCHA_CHARS = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CAPTCHA_MAX_AGE = 5 * 60
COOKIE_NAME = "captcha_sig"

_SVG_TEMPLATE = """
<svg xmlns="http://www.w3.org/2000/svg" width="160" height="70">
  <rect width="160" height="70" rx="4" ry="4" fill="#f4f4f4" stroke="#d2d2d2" />
  <text x="50%" y="50%" dominant-baseline="middle" text-anchor="middle"
        font-family="Arial, sans-serif" font-size="32" font-weight="800" fill="#2f51c0">
    {code}
  </text>
</svg>
"""


def generate_captcha_code() -> str:
    return "".join(secrets.choice(CAPTCHA_CHARS) for _ in range(CAPTCHA_LENGTH))


def render_captcha_svg(code: str) -> str:
    return _SVG_TEMPLATE.format(code=code)


class CaptchaSigner:
    """Signs captcha codes into the captcha_sig cookie and checks answers."""

    def __init__(self, secret: str, max_age: int = CAPTCHA_MAX_AGE) -> None:
        self.signer = URLSafeTimedSerializer(secret, salt="captcha")
        self.max_age = max_age

    def sign(self, code: str) -> str:
        return self.signer.dumps(code.upper())

    def verify(self, answer: str | None, signature: str | None) -> bool:
        if not answer or not signature:
            return False
        try:
            expected = self.signer.loads(signature, max_age=self.max_age)
        except BadSignature:
            return False
        return hmac.compare_digest(str(expected).encode(), answer.strip().upper().encode())
