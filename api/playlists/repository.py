"""
Playlist entry persistence (raw SQL).
"""

from __future__ import annotations

from core import db

_SELECT = 'SELECT id, song_id AS "songID", user_id AS "userID", name FROM playlists'


class PlaylistRepository:
    def __init__(self, executor: db.Executor) -> None:
        self._executor = executor

    async def list_playlists_by_song(self, song_id: int) -> list[dict]:
        return await db.fetch_all(self._executor, f"{_SELECT} WHERE song_id = $1 ORDER BY id", song_id)

    async def list_playlists_by_user(self, user_id: str) -> list[dict]:
        return await db.fetch_all(self._executor, f"{_SELECT} WHERE user_id = $1 ORDER BY id", user_id)
