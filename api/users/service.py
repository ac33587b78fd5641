"""
User business logic: registration and login.

bcrypt work runs in a worker thread so a login does not stall the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pymongo.errors import DuplicateKeyError

from auth import security
from auth.schemas import LoginRequest
from core.validation import require_valid

from .repository import UserRepository
from .schemas import UserCreate

logger = logging.getLogger(__name__)


class DuplicateUserError(RuntimeError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"userID {user_id!r} is already registered.")
        self.user_id = user_id


def user_link(user_id: str) -> str:
    return f"/users/{user_id}"


async def register(payload: Any, *, users: UserRepository) -> tuple[str, str]:
    """
    Create a user and return `(document_id, userID)`.

    The existence check and the insert are two separate calls. Two concurrent
    registrations of the same `userID` can both pass the check unless the
    collection carries a unique index on `userID`. When that index exists,
    the losing insert comes back as `DuplicateKeyError` and is reported as a
    duplicate too.
    """
    values = require_valid(payload, UserCreate)
    user_id = values["userID"]

    if await users.user_exists(user_id):
        raise DuplicateUserError(user_id)

    password_hash = await asyncio.to_thread(security.hash_password, values["password"])
    try:
        document_id = await users.create_user(
            user_id=user_id,
            name=values["name"],
            email=values["email"],
            password_hash=password_hash,
        )
    except DuplicateKeyError as exc:
        raise DuplicateUserError(user_id) from exc

    logger.info("user_created user_id=%s", user_id)
    return document_id, user_id


async def login(
    credentials: LoginRequest,
    *,
    users: UserRepository,
    tokens: security.TokenService,
) -> str | None:
    """
    Return a bearer token for valid credentials, otherwise None.
    """
    user = await users.get_user_by_key(credentials.userID, include_password=True)
    if user is None:
        return None

    is_valid = await asyncio.to_thread(
        security.verify_password,
        credentials.password,
        str(user.get("password") or ""),
    )
    if not is_valid:
        logger.info("login_rejected user_id=%s", credentials.userID)
        return None

    return tokens.issue(credentials.userID)
