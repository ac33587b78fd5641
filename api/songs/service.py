"""
Song business logic, independent of FastAPI routing.
"""

from __future__ import annotations

import os
from typing import Any

from core import pagination
from core.validation import require_valid
from ownership.coordinator import create_owned_record
from playlists.repository import PlaylistRepository
from reviews.repository import ReviewRepository
from users.repository import SONGS_FIELD, UserRepository

from .repository import SongRepository
from .schemas import MAX_INT4, SongCreate, SongReplace

SONGS_PATH = "/songs"


def songs_page_size() -> int:
    raw = os.environ.get("SONGS_PAGE_SIZE", "").strip()
    try:
        size = int(raw) if raw else pagination.DEFAULT_PAGE_SIZE
    except ValueError:
        size = pagination.DEFAULT_PAGE_SIZE
    return size if size > 0 else pagination.DEFAULT_PAGE_SIZE


def parse_page(raw: str | None) -> int:
    """
    Lenient page parsing: anything that is not an integer means page 1.
    Range clamping happens in `pagination.compute_window`.
    """
    try:
        return int((raw or "").strip())
    except ValueError:
        return 1


def song_link(song_id: int) -> str:
    return f"{SONGS_PATH}/{song_id}"


def is_storable_id(song_id: int) -> bool:
    """
    Ids the `serial` column can hold. Anything else cannot exist, so callers
    answer "not found" without a query.
    """
    return 1 <= song_id <= MAX_INT4


async def list_songs_page(
    songs: SongRepository,
    *,
    requested_page: int,
    page_size: int | None = None,
) -> dict[str, Any]:
    total_count = await songs.count_songs()
    window = pagination.compute_window(
        requested_page,
        total_count,
        page_size or songs_page_size(),
    )
    rows = await songs.list_songs_page(limit=window.page_size, offset=window.offset)
    return window.with_records(rows).to_response("songs", SONGS_PATH)


async def create_song(
    payload: Any,
    *,
    songs: SongRepository,
    users: UserRepository,
) -> int:
    return await create_owned_record(
        payload,
        SongCreate,
        records=songs,
        users=users,
        field=SONGS_FIELD,
    )


async def get_song_detail(
    song_id: int,
    *,
    songs: SongRepository,
    reviews: ReviewRepository,
    playlists: PlaylistRepository,
) -> dict[str, Any] | None:
    """
    The song with its reviews and playlist entries nested. Joins run one
    after another and only if the song exists.
    """
    if not is_storable_id(song_id):
        return None
    song = await songs.get_song_by_id(song_id)
    if song is None:
        return None
    song["reviews"] = await reviews.list_reviews_by_song(song_id)
    song["playlists"] = await playlists.list_playlists_by_song(song_id)
    return song


async def replace_song(song_id: int, payload: Any, *, songs: SongRepository) -> bool:
    values = require_valid(payload, SongReplace)
    if not is_storable_id(song_id):
        return False
    return await songs.replace_song(song_id, values)


async def delete_song(song_id: int, *, songs: SongRepository) -> bool:
    if not is_storable_id(song_id):
        return False
    return await songs.delete_song(song_id)
