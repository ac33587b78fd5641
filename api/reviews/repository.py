"""
Review persistence (raw SQL). Read-only from this service's point of view.
"""

from __future__ import annotations

from core import db

_SELECT = 'SELECT id, song_id AS "songID", user_id AS "userID", rating, review FROM reviews'


class ReviewRepository:
    def __init__(self, executor: db.Executor) -> None:
        self._executor = executor

    async def list_reviews_by_song(self, song_id: int) -> list[dict]:
        return await db.fetch_all(self._executor, f"{_SELECT} WHERE song_id = $1 ORDER BY id", song_id)

    async def list_reviews_by_user(self, user_id: str) -> list[dict]:
        return await db.fetch_all(self._executor, f"{_SELECT} WHERE user_id = $1 ORDER BY id", user_id)
