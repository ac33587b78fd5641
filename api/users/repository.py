"""
User persistence helpers (MongoDB `users` collection).

Users are looked up by their business key `userID`, never by `_id`.
"""

from __future__ import annotations

from typing import Any

from pymongo.asynchronous.collection import AsyncCollection

# Owned-resource list on the user document for each record kind.
SONGS_FIELD = "songs"


def _to_public(document: dict[str, Any]) -> dict[str, Any]:
    if "_id" in document:
        document["_id"] = str(document["_id"])
    return document


class UserRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._collection = collection

    async def create_user(
        self,
        *,
        user_id: str,
        name: str,
        email: str,
        password_hash: str,
    ) -> str:
        document = {
            "userID": user_id,
            "name": name,
            "email": email,
            "password": password_hash,
            SONGS_FIELD: [],
        }
        result = await self._collection.insert_one(document)
        return str(result.inserted_id)

    async def ensure_indexes(self) -> None:
        # Concurrent registrations for one userID lose at insert time.
        await self._collection.create_index("userID", unique=True)

    async def get_user_by_key(
        self,
        user_id: str,
        *,
        include_password: bool = False,
    ) -> dict[str, Any] | None:
        """
        Fetch one user by `userID`. The password hash is left out unless the
        caller is checking credentials.
        """
        projection = None if include_password else {"password": 0}
        document = await self._collection.find_one({"userID": user_id}, projection)
        if document is None:
            return None
        return _to_public(document)

    async def user_exists(self, user_id: str) -> bool:
        document = await self._collection.find_one({"userID": user_id}, {"_id": 1})
        return document is not None

    async def add_owned_record(
        self,
        user_id: str,
        record_id: int,
        *,
        field: str = SONGS_FIELD,
    ) -> bool:
        """
        Append `record_id` to the user's owned-resource list.

        Returns False when no user matched (e.g. it was removed in between).
        """
        result = await self._collection.update_one(
            {"userID": user_id},
            {"$push": {field: record_id}},
        )
        return result.matched_count > 0
