"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request, status

from . import service
from .security import TokenService, TokenStatus


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_user_id(
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    check = service.authenticate(authorization, tokens)
    if check.status is TokenStatus.ABSENT:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header.",
        )
    if not check.is_valid or check.user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
        )
    return check.user_id


async def require_self(
    userID: str,
    current_user_id: str = Depends(get_current_user_id),
) -> str:
    """
    Guard for `/users/{userID}/...`: authenticated first, then self-only.
    """
    if service.authorize_self(current_user_id, userID) is not service.Access.ALLOWED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized to access that resource.",
        )
    return userID
