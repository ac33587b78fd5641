"""
Song persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

# Payload field -> column. Only these names are ever interpolated into SQL.
_COLUMNS = {
    "ownerID": "owner_id",
    "name": "name",
    "length": "length",
    "artist": "artist",
    "album": "album",
    "genre": "genre",
}

_SELECT = 'SELECT id, owner_id AS "ownerID", name, length, artist, album, genre FROM songs'


def _column_pairs(fields: dict[str, Any]) -> list[tuple[str, Any]]:
    return [(column, fields[key]) for (key, column) in _COLUMNS.items() if key in fields]


class SongRepository:
    def __init__(self, executor: db.Executor) -> None:
        self._executor = executor

    async def count_songs(self) -> int:
        count = await db.fetch_value(self._executor, "SELECT COUNT(*) FROM songs")
        return int(count or 0)

    async def list_songs_page(self, *, limit: int, offset: int) -> list[dict]:
        return await db.fetch_all(
            self._executor,
            f"""
            {_SELECT}
            ORDER BY id
            LIMIT $1
            OFFSET $2
            """,
            limit,
            offset,
        )

    async def insert(self, fields: dict[str, Any]) -> int:
        pairs = _column_pairs(fields)
        if not pairs:
            raise ValueError("No song fields to insert.")
        columns = ", ".join(column for (column, _) in pairs)
        placeholders = ", ".join(f"${i}" for i in range(1, len(pairs) + 1))
        row = await db.fetch_one(
            self._executor,
            f"INSERT INTO songs ({columns}) VALUES ({placeholders}) RETURNING id",
            *(value for (_, value) in pairs),
        )
        if row is None:
            raise RuntimeError("Failed to insert song.")
        return int(row["id"])

    async def get_song_by_id(self, song_id: int) -> dict | None:
        return await db.fetch_one(self._executor, f"{_SELECT} WHERE id = $1", song_id)

    async def replace_song(self, song_id: int, fields: dict[str, Any]) -> bool:
        """
        Overwrite the song's mutable fields. `owner_id` is never touched.
        """
        pairs = [(c, v) for (c, v) in _column_pairs(fields) if c != "owner_id"]
        if not pairs:
            return False
        assignments = ", ".join(f"{column} = ${i}" for i, (column, _) in enumerate(pairs, start=1))
        affected = await db.execute(
            self._executor,
            f"UPDATE songs SET {assignments} WHERE id = ${len(pairs) + 1}",
            *(value for (_, value) in pairs),
            song_id,
        )
        return affected > 0

    async def delete_song(self, song_id: int) -> bool:
        affected = await db.execute(self._executor, "DELETE FROM songs WHERE id = $1", song_id)
        return affected > 0

    async def list_songs_by_owner(self, owner_id: str) -> list[dict]:
        """
        All songs owned by `owner_id`. Does not check that the owner exists.
        """
        return await db.fetch_all(
            self._executor,
            f"{_SELECT} WHERE owner_id = $1 ORDER BY id",
            owner_id,
        )
