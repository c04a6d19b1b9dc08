"""OCSF (Open Cybersecurity Schema Framework) event logging.

Emits structured security events for logins and logouts. Events are logged
to the ``ocsf`` logger as JSON; deployments attach their own handlers.

Usage in route handlers::

    from . import ocsf
    ocsf.authentication_event(
        activity_id=ocsf.AuthActivity.LOGON,
        activity_name="Logon",
        status_id=ocsf.Status.SUCCESS,
        severity_id=ocsf.Severity.INFORMATIONAL,
        user_cid="1234567890123",
        auth_protocol_id=ocsf.AuthProtocol.OAUTH2,
        auth_protocol="ThaiID OAuth 2.0",
        message="ThaiID login succeeded",
    )
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

logger = logging.getLogger("ocsf")


class EventClass:
    AUTHENTICATION = 3001


class AuthActivity:
    LOGON = 1
    LOGOFF = 2
    AUTHENTICATION_TICKET = 3  # OAuth code exchange


class Status:
    SUCCESS = 1
    FAILURE = 2


class Severity:
    INFORMATIONAL = 1
    LOW = 2
    MEDIUM = 3
    HIGH = 4
    CRITICAL = 5


class AuthProtocol:
    UNKNOWN = 0
    PASSWORD = 2
    OAUTH2 = 10


THAIID_PROTOCOL = (AuthProtocol.OAUTH2, "ThaiID OAuth 2.0")
PASSWORD_PROTOCOL = (AuthProtocol.PASSWORD, "Password")

_SEVERITY_NAMES = {
    Severity.INFORMATIONAL: "Informational",
    Severity.LOW: "Low",
    Severity.MEDIUM: "Medium",
    Severity.HIGH: "High",
    Severity.CRITICAL: "Critical",
}

_PRODUCT = {
    "name": "payroll-auth",
    "version": "0.1.0",
    "vendor_name": "Payroll",
}


def emit(event: dict[str, Any]) -> None:
    """Log an OCSF event as JSON.  Never raises."""
    try:
        logger.info(json.dumps(event, default=str, ensure_ascii=False))
    except Exception:
        pass


def authentication_event(
    *,
    activity_id: int,
    activity_name: str,
    status_id: int,
    severity_id: int,
    user_cid: str | None = None,
    src_ip: str | None = None,
    auth_protocol_id: int = AuthProtocol.UNKNOWN,
    auth_protocol: str = "Unknown",
    message: str = "",
) -> None:
    """Emit an OCSF Authentication (3001) event."""
    event: dict[str, Any] = {
        "class_uid": EventClass.AUTHENTICATION,
        "class_name": "Authentication",
        "activity_id": activity_id,
        "activity_name": activity_name,
        "severity_id": severity_id,
        "severity": _SEVERITY_NAMES.get(severity_id, "Unknown"),
        "status_id": status_id,
        "status": "Success" if status_id == Status.SUCCESS else "Failure",
        "time": int(time.time() * 1000),
        "metadata": {"product": _PRODUCT},
        "auth_protocol_id": auth_protocol_id,
        "auth_protocol": auth_protocol,
        "message": message,
    }
    if user_cid:
        event["actor"] = {
            "user": {
                "uid": user_cid,
                "type_id": 1,
                "type": "User",
            }
        }
    if src_ip:
        event["src_endpoint"] = {"ip": src_ip}
    emit(event)


def login_event(
    *,
    success: bool,
    protocol: tuple[int, str],
    message: str,
    user_cid: str | None = None,
    src_ip: str | None = None,
    severity_id: int | None = None,
) -> None:
    """Shorthand for Logon events from the login routes."""
    if severity_id is None:
        severity_id = Severity.INFORMATIONAL if success else Severity.MEDIUM
    authentication_event(
        activity_id=AuthActivity.LOGON,
        activity_name="Logon",
        status_id=Status.SUCCESS if success else Status.FAILURE,
        severity_id=severity_id,
        user_cid=user_cid,
        src_ip=src_ip,
        auth_protocol_id=protocol[0],
        auth_protocol=protocol[1],
        message=message,
    )
