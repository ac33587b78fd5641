"""
Document store wiring (MongoDB via pymongo's async client).

Like `core/db.py`, this only builds and tears down the client. The lifespan in
`api/main.py` keeps the database handle on `app.state` and the users feature
asks for its collection through a dependency.
"""

from __future__ import annotations

import os
from urllib.parse import quote_plus

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

USERS_COLLECTION = "users"


def mongo_url() -> str:
    url = os.environ.get("MONGO_URL", "").strip()
    if url:
        return url

    host = os.environ.get("MONGO_HOST", "localhost").strip() or "localhost"
    port = os.environ.get("MONGO_PORT", "27017").strip() or "27017"
    user = os.environ.get("MONGO_USER", "").strip()
    password = os.environ.get("MONGO_PASSWORD", "").strip()
    database = mongo_database()
    if user:
        credentials = f"{quote_plus(user)}:{quote_plus(password)}@"
        return f"mongodb://{credentials}{host}:{port}/{database}"
    return f"mongodb://{host}:{port}/{database}"


def mongo_database() -> str:
    return os.environ.get("MONGO_DATABASE", "music").strip() or "music"


def create_client() -> AsyncMongoClient:
    # The client connects lazily; the first operation surfaces connection errors.
    return AsyncMongoClient(mongo_url(), serverSelectionTimeoutMS=5000)


async def close_client(client: AsyncMongoClient | None) -> None:
    if client is None:
        return None
    await client.close()


def users_collection(database: AsyncDatabase) -> AsyncCollection:
    return database[USERS_COLLECTION]
