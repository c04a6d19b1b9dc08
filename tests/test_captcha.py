"""Tests for the login captcha."""

import time
from unittest.mock import patch

from payroll_auth.captcha import (
    CAPTCHA_CHARS,
    CAPTCHA_LENGTH,
    CaptchaSigner,
    generate_captcha_code,
    render_captcha_svg,
)


def test_generated_code_shape():
    code = generate_captcha_code()
    assert len(code) == CAPTCHA_LENGTH
    assert all(c in CAPTCHA_CHARS for c in code)


def test_svg_contains_code():
    svg = render_captcha_svg("AB12CD")
    assert svg.strip().startswith("<svg")
    assert "AB12CD" in svg


def test_verify_accepts_case_insensitive_answer():
    signer = CaptchaSigner("s")
    sig = signer.sign("AB23CD")
    assert signer.verify("ab23cd", sig)
    assert signer.verify(" AB23CD ", sig)


def test_verify_rejects_wrong_answer_and_bad_signature():
    signer = CaptchaSigner("s")
    sig = signer.sign("AB23CD")
    assert not signer.verify("ZZZZZZ", sig)
    assert not signer.verify("AB23CD", "forged")
    assert not signer.verify("AB23CD", CaptchaSigner("other").sign("AB23CD"))
    assert not signer.verify("", sig)
    assert not signer.verify("AB23CD", None)
    assert not signer.verify("กขค", sig)


def test_verify_rejects_expired_signature():
    signer = CaptchaSigner("s", max_age=300)
    sig = signer.sign("AB23CD")
    with patch("itsdangerous.timed.time.time", return_value=time.time() + 301):
        assert not signer.verify("AB23CD", sig)


def test_captcha_endpoint_sets_signed_cookie(client):
    resp = client.get("/api/auth/captcha")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("image/svg+xml")
    assert resp.headers["cache-control"] == "no-store"
    cookie = resp.headers["set-cookie"]
    assert cookie.startswith("captcha_sig=")
    assert "HttpOnly" in cookie
    assert "Max-Age=300" in cookie
