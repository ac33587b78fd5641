"""
Access rules for per-user resources.

Two steps, always in this order:
1. `authenticate`: turn the raw Authorization header into an acting userID.
2. `authorize_self`: a user may only read their own sub-resources.

There is no admin bypass and no lookup in the user store: a correctly signed,
unexpired token is enough to establish identity.
"""

from __future__ import annotations

from enum import Enum

from .security import TokenCheck, TokenService, TokenStatus


class Access(str, Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Return the token part of "Bearer <token>", or None when the header is
    missing or not a bearer credential.
    """
    raw = (authorization or "").strip()
    if not raw:
        return None

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        return None

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        return None
    return token


def authenticate(authorization: str | None, tokens: TokenService) -> TokenCheck:
    if not (authorization or "").strip():
        return TokenCheck(TokenStatus.ABSENT)

    token = extract_bearer_token(authorization)
    if token is None:
        return TokenCheck(TokenStatus.INVALID)
    return tokens.verify(token)


def authorize_self(acting_user_id: str, target_user_id: str) -> Access:
    if acting_user_id == target_user_id:
        return Access.ALLOWED
    return Access.FORBIDDEN
