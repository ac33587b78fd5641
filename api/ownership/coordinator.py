"""
Create a relational record and record its ownership on the user document.

The two stores share no transaction. The steps run strictly in order and stop
at the first failure:

1. validate the payload against the record schema
2. check that the owner exists in the user store (no write if not)
3. insert the relational row and get its id
4. append that id to the owner's owned-resource list

A failure in step 3 leaves nothing behind, so the call is safe to retry. A
failure in step 4 leaves an orphaned row that no user document points to.
That case is logged as `ownership_partial_failure` and raised as
`PartialFailureError`. It is not rolled back or retried here, and a client
retry of the whole call inserts a second row.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import BaseModel

from core.errors import STORE_ERRORS, PartialFailureError
from core.validation import require_valid
from users.repository import SONGS_FIELD

logger = logging.getLogger(__name__)


class OwnerNotFoundError(LookupError):
    def __init__(self, owner_id: str) -> None:
        super().__init__(f"Invalid owner ID: {owner_id}.")
        self.owner_id = owner_id


class RecordStore(Protocol):
    async def insert(self, fields: dict[str, Any]) -> int: ...


class OwnerDirectory(Protocol):
    async def user_exists(self, user_id: str) -> bool: ...

    async def add_owned_record(self, user_id: str, record_id: int, *, field: str = ...) -> bool: ...


async def create_owned_record(
    payload: Any,
    schema: type[BaseModel],
    *,
    records: RecordStore,
    users: OwnerDirectory,
    field: str = SONGS_FIELD,
    owner_key: str = "ownerID",
) -> int:
    values = require_valid(payload, schema)
    owner_id = str(values[owner_key])

    if not await users.user_exists(owner_id):
        raise OwnerNotFoundError(owner_id)

    record_id = await records.insert(values)

    try:
        linked = await users.add_owned_record(owner_id, record_id, field=field)
    except STORE_ERRORS as exc:
        logger.exception(
            "ownership_partial_failure record_id=%s owner_id=%s field=%s",
            record_id,
            owner_id,
            field,
        )
        raise PartialFailureError(record_id=record_id, owner_id=owner_id, field=field) from exc

    if not linked:
        # Owner vanished between the existence check and the append.
        logger.error(
            "ownership_partial_failure record_id=%s owner_id=%s field=%s reason=owner_missing",
            record_id,
            owner_id,
            field,
        )
        raise PartialFailureError(record_id=record_id, owner_id=owner_id, field=field)

    logger.info("owned_record_created record_id=%s owner_id=%s field=%s", record_id, owner_id, field)
    return record_id
