"""SQLAlchemy-backed stores for the ``user`` and ``useronline`` tables.

Queries are plain ``text()`` statements against the existing schema; the
blocking calls run in Starlette's threadpool.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from starlette.concurrency import run_in_threadpool

from .backend import LoginAttempt, LoginAttemptQuery, UserRecord

_USER_COLUMNS = "id, cid, accessLevel, fname, lname, status"


def create_db_engine(url: str) -> Engine:
    return create_engine(url, pool_pre_ping=True, future=True)


def _user_from_row(row: Any) -> UserRecord:
    m = row._mapping
    return UserRecord(
        id=int(m["id"]),
        cid=m["cid"],
        access_level=int(m["accessLevel"] or 0),
        fname=m["fname"],
        lname=m["lname"],
        status=m["status"],
    )


def _as_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


class SQLUserStore:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch_one(self, sql: str, params: dict[str, Any]) -> UserRecord | None:
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), params).first()
        return _user_from_row(row) if row is not None else None

    async def find_by_cid(self, cid: str) -> UserRecord | None:
        return await run_in_threadpool(
            self._fetch_one,
            f"SELECT {_USER_COLUMNS} FROM user WHERE cid = :cid LIMIT 1",
            {"cid": cid},
        )

    async def find_by_credentials(self, username: str, password_sha1: str) -> UserRecord | None:
        return await run_in_threadpool(
            self._fetch_one,
            f"SELECT {_USER_COLUMNS} FROM user "
            "WHERE username = :username AND password = :password LIMIT 1",
            {"username": username, "password": password_sha1},
        )


class SQLLoginAuditLog:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _insert(self, attempt: LoginAttempt) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO useronline (username, password, logined, ipv4, logindate) "
                    "VALUES (:username, :password, :logined, :ipv4, "
                    "COALESCE(:logindate, CURRENT_TIMESTAMP))"
                ),
                {
                    "username": attempt.username,
                    "password": attempt.password,
                    "logined": attempt.logined,
                    "ipv4": attempt.ipv4,
                    "logindate": attempt.logindate,
                },
            )

    async def record(self, attempt: LoginAttempt) -> None:
        await run_in_threadpool(self._insert, attempt)

    def _search(self, query: LoginAttemptQuery) -> tuple[list[LoginAttempt], int]:
        filters: list[str] = []
        params: dict[str, Any] = {}

        if query.username:
            filters.append("username LIKE :username")
            params["username"] = f"%{query.username}%"
        if query.ipv4:
            filters.append("ipv4 LIKE :ipv4")
            params["ipv4"] = f"%{query.ipv4}%"
        if query.logined:
            filters.append("logined = :logined")
            params["logined"] = query.logined
        if query.start is not None:
            filters.append("logindate >= :start")
            params["start"] = query.start
        if query.end is not None:
            filters.append("logindate <= :end")
            params["end"] = query.end

        where = f"WHERE {' AND '.join(filters)}" if filters else ""

        with self._engine.connect() as conn:
            rows = conn.execute(
                text(
                    "SELECT id, username, password, logined, ipv4, logindate "
                    f"FROM useronline {where} "
                    "ORDER BY logindate DESC LIMIT :limit OFFSET :offset"
                ),
                {**params, "limit": query.page_size, "offset": query.offset},
            ).all()
            total = conn.execute(
                text(f"SELECT COUNT(*) AS total FROM useronline {where}"), params
            ).scalar_one()

        items = [
            LoginAttempt(
                id=r._mapping["id"],
                username=r._mapping["username"],
                password=r._mapping["password"],
                logined=r._mapping["logined"],
                ipv4=r._mapping["ipv4"],
                logindate=_as_datetime(r._mapping["logindate"]),
            )
            for r in rows
        ]
        return items, int(total or 0)

    async def search(self, query: LoginAttemptQuery) -> tuple[list[LoginAttempt], int]:
        return await run_in_threadpool(self._search, query)
