"""FastAPI auth service for the payroll application.

Issues the signed ``session`` cookie through ThaiID (DOPA Digital ID)
federated login or username/password + captcha login, and serves the small
auth API the payroll pages call.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .captcha import CaptchaSigner
from .config import get_settings
from .routes import authorize, callback, captcha, health, login, logout, me, useronline
from .session import SessionCodec, SessionMiddleware
from .store import (
    InMemoryLoginAuditLog,
    InMemoryUserStore,
    LoginAuditLog,
    SQLLoginAuditLog,
    SQLUserStore,
    UserStore,
    create_db_engine,
)
from .thaiid import ThaiIDClient, ThaiIDConfig

logger = logging.getLogger(__name__)


def create_app(
    *,
    user_store: UserStore | None = None,
    audit_log: LoginAuditLog | None = None,
    thaiid_config: ThaiIDConfig | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        user_store: Custom user lookup (default: SQL when DATABASE_URL is
            set, otherwise in-memory).
        audit_log: Custom login audit log (same default rule).
        thaiid_config: Provider settings (default: built from Settings).
    """
    app = FastAPI(title="Payroll Auth")
    s = get_settings()

    if s.database_url and (user_store is None or audit_log is None):
        engine = create_db_engine(s.database_url)
        user_store = user_store or SQLUserStore(engine)
        audit_log = audit_log or SQLLoginAuditLog(engine)
        logger.info("Stores: SQL")

    app.state.user_store = user_store or InMemoryUserStore()
    app.state.audit_log = audit_log or InMemoryLoginAuditLog()
    app.state.thaiid = ThaiIDClient(thaiid_config or s.thaiid_config())
    app.state.captcha = CaptchaSigner(s.auth_secret)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[s.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Signed-cookie sessions
    app.add_middleware(
        SessionMiddleware,
        codec=SessionCodec(s.auth_secret),
        https_only=s.session_https_only,
    )

    # Routes
    app.include_router(callback.router)
    app.include_router(authorize.router)
    app.include_router(login.router)
    app.include_router(captcha.router)
    app.include_router(me.router)
    app.include_router(logout.router)
    app.include_router(useronline.router)
    app.include_router(health.router)

    return app
