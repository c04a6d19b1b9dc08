"""Signed session tokens (HS256 JWT) carried in the session cookie."""

from __future__ import annotations

import time
from typing import Any

import jwt
from pydantic import BaseModel, Field, ValidationError

JWT_ALGORITHM = "HS256"
SESSION_MAX_AGE = 8 * 3600  # 8 hours


class SessionPayload(BaseModel):
    id: int
    cid: str
    access_level: int = Field(0, alias="accessLevel")
    fname: str | None = None
    lname: str | None = None
    status: str | None = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_user(cls, user: Any) -> "SessionPayload":
        return cls(
            id=user.id,
            cid=user.cid,
            access_level=user.access_level,
            fname=user.fname,
            lname=user.lname,
            status=user.status,
        )

    def claims(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class SessionCodec:
    """Signs session payloads into tokens and verifies them back.

    ``verify`` never raises: anything that is not a valid, unexpired token
    signed with our secret yields None.
    """

    def __init__(self, secret: str, max_age: int = SESSION_MAX_AGE) -> None:
        self._secret = secret
        self.max_age = max_age

    def sign(self, payload: SessionPayload) -> str:
        now = int(time.time())
        claims = payload.claims()
        claims["iat"] = now
        claims["exp"] = now + self.max_age
        return jwt.encode(claims, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str | None) -> SessionPayload | None:
        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp"]},
            )
            return SessionPayload.model_validate(claims)
        except (jwt.PyJWTError, ValidationError):
            return None
