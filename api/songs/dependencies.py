"""
Store handles for song routes.
"""

from __future__ import annotations

from fastapi import Request

from .repository import SongRepository


def get_song_repository(request: Request) -> SongRepository:
    return SongRepository(request.app.state.pg_pool)
