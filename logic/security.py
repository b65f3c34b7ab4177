"""Password hashing and bearer token helpers."""

from __future__ import annotations

import time

import jwt
from passlib.context import CryptContext

from logic.errors import Forbidden, Unauthenticated

TOKEN_ALGORITHM = "HS256"

pwd_context = CryptContext(
    schemes=["sha256_crypt"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


class TokenService:
    """Issue and verify HS256 signed tokens carrying a user id in ``sub``."""

    def __init__(self, secret: str, ttl_seconds: int = 3600) -> None:
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self.ttl_seconds = ttl_seconds

    def issue_token(self, user_id: str) -> str:
        issued_at = int(time.time())
        claims = {"sub": user_id, "iat": issued_at, "exp": issued_at + self.ttl_seconds}
        return jwt.encode(claims, self._secret, algorithm=TOKEN_ALGORITHM)

    def verify(self, token: str) -> str:
        """Return the user id of a valid token, raising ``Forbidden`` otherwise."""

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[TOKEN_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.InvalidTokenError as exc:
            raise Forbidden("Invalid or expired token") from exc
        return str(claims["sub"])

    def verify_header(self, authorization: str | None) -> str:
        """Verify an ``Authorization: Bearer <token>`` header value."""

        if not authorization or not authorization.strip():
            raise Unauthenticated("Access token required")
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise Forbidden("Invalid or expired token")
        return self.verify(token.strip())


__all__ = ["TOKEN_ALGORITHM", "TokenService", "hash_password", "verify_password"]
