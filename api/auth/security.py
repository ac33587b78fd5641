"""
Auth security helpers.

- bcrypt password hashing
- stateless bearer tokens (JWT) bound to a `userID`
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

import bcrypt
import jwt

DEV_JWT_SECRET = "dev-change-this-secret-before-deploying"

# bcrypt hashes at most this many bytes of the password.
MAX_PASSWORD_BYTES = 72


class AuthSecurityError(RuntimeError):
    pass


class TokenStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    ABSENT = "absent"


@dataclass(frozen=True)
class TokenCheck:
    status: TokenStatus
    user_id: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return os.environ.get("JWT_SECRET", DEV_JWT_SECRET).strip() or DEV_JWT_SECRET


def jwt_algorithm() -> str:
    return os.environ.get("JWT_ALG", "HS256").strip() or "HS256"


def access_token_expire_minutes() -> int:
    return _env_int("ACCESS_TOKEN_EXPIRE_MIN", 24 * 60)


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    if len(password) > MAX_PASSWORD_BYTES:
        raise AuthSecurityError(f"Password is longer than {MAX_PASSWORD_BYTES} bytes.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    if len(password) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


class TokenService:
    """
    Issues and verifies bearer tokens.

    One instance is built at startup from the environment and shared by every
    request. Verification never raises: callers get a `TokenCheck`.
    """

    def __init__(
        self,
        *,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 24 * 60,
    ) -> None:
        if not (secret or "").strip():
            raise AuthSecurityError("Token signing secret is empty.")
        self._secret = secret
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    @classmethod
    def from_env(cls) -> TokenService:
        return cls(
            secret=jwt_secret(),
            algorithm=jwt_algorithm(),
            expire_minutes=access_token_expire_minutes(),
        )

    def issue(self, user_id: str) -> str:
        subject = (user_id or "").strip()
        if not subject:
            raise AuthSecurityError("Cannot issue a token without a userID.")

        issued_at = now_epoch_s()
        payload: dict[str, Any] = {
            "sub": subject,
            "type": "access",
            "iat": issued_at,
        }
        if self._expire_minutes > 0:
            payload["exp"] = issued_at + (self._expire_minutes * 60)
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        raw = (token or "").strip()
        if not raw:
            raise AuthSecurityError("Access token is empty.")

        try:
            payload = jwt.decode(
                raw,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat"]},
            )
        except jwt.InvalidTokenError as exc:
            raise AuthSecurityError("Invalid access token.") from exc

        token_type = str(payload.get("type") or "").strip().lower()
        if token_type != "access":
            raise AuthSecurityError("Token is not an access token.")

        return payload

    def verify(self, token: str | None) -> TokenCheck:
        if token is None or not token.strip():
            return TokenCheck(TokenStatus.ABSENT)

        try:
            payload = self.decode(token)
        except AuthSecurityError:
            return TokenCheck(TokenStatus.INVALID)

        subject = str(payload.get("sub") or "").strip()
        if not subject:
            return TokenCheck(TokenStatus.INVALID)
        return TokenCheck(TokenStatus.VALID, user_id=subject)
