from __future__ import annotations

from fastapi import Request

from .repository import PlaylistRepository


def get_playlist_repository(request: Request) -> PlaylistRepository:
    return PlaylistRepository(request.app.state.pg_pool)
