"""Shared fixtures for the payroll auth test suite."""

from __future__ import annotations

import json
import time
from typing import Any
from unittest.mock import patch

import jwt
import pytest
from fastapi.testclient import TestClient

from payroll_auth.config import Settings, override_settings
from payroll_auth.main import create_app
from payroll_auth.routes.login import hash_password
from payroll_auth.session import SessionCodec, SessionPayload
from payroll_auth.store import InMemoryLoginAuditLog, InMemoryUserStore, UserRecord
from payroll_auth.thaiid import ThaiIDConfig

TEST_SECRET = "test-secret-key-for-sessions"

ADMIN_CID = "1341500012345"
OFFICER_CID = "3340100456789"


# ── Test Settings ─────────────────────────────────────────────────────────

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        auth_secret=TEST_SECRET,
        app_env="development",
        frontend_url="http://localhost:3000",
        thaiid_client_id="thaiid-client",
        thaiid_client_secret="thaiid-secret",
        thaiid_token_url="https://imauth.bora.dopa.go.th/api/v2/oauth2/token",
        thaiid_authorize_url="https://imauth.bora.dopa.go.th/api/v2/oauth2/auth/",
        thaiid_scope="pid",
    )


@pytest.fixture
def thaiid_config(test_settings) -> ThaiIDConfig:
    return test_settings.thaiid_config()


# ── Stores ────────────────────────────────────────────────────────────────

@pytest.fixture
def admin_user() -> UserRecord:
    return UserRecord(
        id=1,
        cid=ADMIN_CID,
        access_level=1,
        fname="สมชาย",
        lname="ใจดี",
        status="admin",
        username="admin",
        password=hash_password("admin-pass"),
    )


@pytest.fixture
def officer_user() -> UserRecord:
    return UserRecord(
        id=2,
        cid=OFFICER_CID,
        access_level=0,
        fname="สมหญิง",
        lname="รักงาน",
        status="User",
        username="officer",
        password=hash_password("officer-pass"),
    )


@pytest.fixture
def user_store(admin_user, officer_user) -> InMemoryUserStore:
    return InMemoryUserStore([admin_user, officer_user])


@pytest.fixture
def audit_log() -> InMemoryLoginAuditLog:
    return InMemoryLoginAuditLog()


# ── App & Client ──────────────────────────────────────────────────────────

@pytest.fixture
def app(test_settings, user_store, audit_log):
    override_settings(test_settings)
    return create_app(user_store=user_store, audit_log=audit_log)


@pytest.fixture
def client(app) -> TestClient:
    """TestClient with cookie persistence."""
    return TestClient(app, cookies={})


# ── Sessions ──────────────────────────────────────────────────────────────

@pytest.fixture
def codec() -> SessionCodec:
    return SessionCodec(TEST_SECRET)


@pytest.fixture
def make_session_token(codec):
    """Factory for signed session cookie values."""

    def _make(user: UserRecord) -> str:
        return codec.sign(SessionPayload.from_user(user))

    return _make


@pytest.fixture
def expired_session_token(admin_user) -> str:
    now = int(time.time())
    claims = SessionPayload.from_user(admin_user).claims()
    claims.update(iat=now - 9 * 3600, exp=now - 3600)
    return jwt.encode(claims, TEST_SECRET, algorithm="HS256")


@pytest.fixture
def auth_session(client, make_session_token, admin_user):
    """Client carrying a valid session cookie for the admin user."""
    client.cookies.set("session", make_session_token(admin_user))
    return client


# ── Fake token endpoint (httpx boundary) ──────────────────────────────────

class FakeResponse:
    def __init__(self, status_code: int, content: bytes | str | dict | None):
        if isinstance(content, dict):
            content = json.dumps(content)
        if isinstance(content, str):
            content = content.encode()
        self.status_code = status_code
        self._content = content or b""
        self.is_success = 200 <= status_code < 300
        self.text = self._content.decode()

    def json(self):
        return json.loads(self._content)


@pytest.fixture
def token_endpoint():
    """Patch httpx.AsyncClient in the ThaiID module.

    Call the fixture with a mapping URL -> (status, body); unknown URLs
    answer 404. Every POST is recorded in the returned ``calls`` list as a
    dict with url, data and headers.
    """
    calls: list[dict[str, Any]] = []
    patchers = []

    def _install(responses: dict[str, tuple[int, Any]]) -> list[dict[str, Any]]:
        class MockClient:
            """Replaces httpx.AsyncClient as a context manager."""

            def __init__(self, **kwargs):
                pass

            async def __aenter__(self):
                return self

            async def __aexit__(self, *args):
                pass

            async def post(self, url, data=None, headers=None, **kwargs):
                calls.append({"url": url, "data": data, "headers": headers})
                status, body = responses.get(url, (404, {"error": "not found"}))
                return FakeResponse(status, body)

        p = patch("payroll_auth.thaiid.httpx.AsyncClient", MockClient)
        p.start()
        patchers.append(p)
        return calls

    yield _install
    for p in patchers:
        p.stop()
