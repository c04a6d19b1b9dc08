"""Best-effort login-attempt audit."""

from __future__ import annotations

import logging

from .store import LoginAttempt, LoginAuditLog

logger = logging.getLogger(__name__)

USERNAME_MAX = 50


def clamp_username(value: object, max_len: int = USERNAME_MAX) -> str | None:
    if not isinstance(value, str):
        return None
    return value[:max_len]


async def record_login_attempt(
    audit_log: LoginAuditLog | None,
    *,
    username: str | None,
    logined: str,
    ipv4: str | None,
) -> bool:
    """Append one row to the login audit. Never raises.

    Returns False when the insert failed (or auditing is off); callers
    ignore the result so a broken audit table cannot turn into a login
    outage.
    """
    if audit_log is None:
        return False
    attempt = LoginAttempt(username=username, password=None, logined=logined, ipv4=ipv4)
    try:
        await audit_log.record(attempt)
    except Exception:
        logger.exception("Login audit insert failed")
        return False
    return True
