"""User lookup and login-attempt storage backends."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Literal, Protocol, runtime_checkable

Logined = Literal["Y", "N"]


@dataclass
class UserRecord:
    id: int
    cid: str
    access_level: int = 0
    fname: str | None = None
    lname: str | None = None
    status: str | None = None
    username: str | None = None
    password: str | None = None  # Legacy SHA-1 hex digest

    def public(self) -> dict:
        """Columns returned to the browser after a credential login."""
        return {
            "id": self.id,
            "cid": self.cid,
            "accessLevel": self.access_level,
            "fname": self.fname,
            "lname": self.lname,
            "status": self.status,
        }


@dataclass
class LoginAttempt:
    username: str | None
    logined: Logined
    ipv4: str | None
    password: str | None = None
    logindate: datetime | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "logined": self.logined,
            "ipv4": self.ipv4,
            "logindate": self.logindate.isoformat() if self.logindate else None,
        }


@dataclass
class LoginAttemptQuery:
    """Filters and paging for the login-attempt listing."""

    username: str | None = None
    ipv4: str | None = None
    logined: Logined | None = None
    start_date: date | None = None
    end_date: date | None = None
    page: int = 1
    page_size: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def start(self) -> datetime | None:
        if self.start_date is None:
            return None
        return datetime.combine(self.start_date, datetime.min.time())

    @property
    def end(self) -> datetime | None:
        """Last instant of end_date, so the end day is included."""
        if self.end_date is None:
            return None
        return (
            datetime.combine(self.end_date, datetime.min.time())
            + timedelta(days=1)
            - timedelta(milliseconds=1)
        )


@runtime_checkable
class UserStore(Protocol):
    """Read access to the ``user`` table."""

    async def find_by_cid(self, cid: str) -> UserRecord | None:
        ...

    async def find_by_credentials(self, username: str, password_sha1: str) -> UserRecord | None:
        ...


@runtime_checkable
class LoginAuditLog(Protocol):
    """Append-only ``useronline`` table."""

    async def record(self, attempt: LoginAttempt) -> None:
        ...

    async def search(self, query: LoginAttemptQuery) -> tuple[list[LoginAttempt], int]:
        """Return one page of attempts (newest first) and the total match count."""
        ...


class InMemoryUserStore:
    """In-memory user table for development/testing."""

    def __init__(self, users: list[UserRecord] | None = None) -> None:
        self._users: list[UserRecord] = list(users or [])

    def add(self, user: UserRecord) -> None:
        self._users.append(user)

    async def find_by_cid(self, cid: str) -> UserRecord | None:
        return next((u for u in self._users if u.cid == cid), None)

    async def find_by_credentials(self, username: str, password_sha1: str) -> UserRecord | None:
        return next(
            (u for u in self._users if u.username == username and u.password == password_sha1),
            None,
        )


class InMemoryLoginAuditLog:
    """In-memory login audit log for development/testing."""

    def __init__(self) -> None:
        self.attempts: list[LoginAttempt] = []
        self._ids = itertools.count(1)

    async def record(self, attempt: LoginAttempt) -> None:
        attempt.id = next(self._ids)
        if attempt.logindate is None:
            attempt.logindate = datetime.now()
        self.attempts.append(attempt)

    async def search(self, query: LoginAttemptQuery) -> tuple[list[LoginAttempt], int]:
        start, end = query.start, query.end
        rows = [
            a
            for a in self.attempts
            if (not query.username or query.username in (a.username or ""))
            and (not query.ipv4 or query.ipv4 in (a.ipv4 or ""))
            and (not query.logined or a.logined == query.logined)
            and (start is None or (a.logindate and a.logindate >= start))
            and (end is None or (a.logindate and a.logindate <= end))
        ]
        rows.sort(key=lambda a: a.logindate or datetime.min, reverse=True)
        return rows[query.offset : query.offset + query.page_size], len(rows)
