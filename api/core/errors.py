"""
Shared error taxonomy and the store-error boundary.

Repositories let driver exceptions propagate untouched. Routers wrap their
store work in `store_call(...)`, which logs the original error and replaces it
with a generic 500 so internals never reach the client.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import asyncpg
from fastapi import HTTPException, status
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

# Exceptions that mean "a store failed", as opposed to a bug in our code.
STORE_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    PyMongoError,
    OSError,
)


class StoreError(RuntimeError):
    pass


class PartialFailureError(StoreError):
    """
    A relational row was written but its ownership reference was not.

    Carries enough context to reconcile the orphaned row by hand.
    """

    def __init__(self, *, record_id: int, owner_id: str, field: str) -> None:
        super().__init__(
            f"Record {record_id} was created but not linked to owner {owner_id!r} ({field})."
        )
        self.record_id = record_id
        self.owner_id = owner_id
        self.field = field


@contextmanager
def store_call(detail: str) -> Iterator[None]:
    try:
        yield
    except PartialFailureError as exc:
        # Already logged by the coordinator with reconciliation context.
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        ) from exc
    except (StoreError, *STORE_ERRORS) as exc:
        logger.exception("store_error detail=%r", detail)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        ) from exc
