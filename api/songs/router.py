"""
Song API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from core.errors import store_call
from core.validation import PayloadValidationError
from ownership.coordinator import OwnerNotFoundError
from playlists.dependencies import get_playlist_repository
from playlists.repository import PlaylistRepository
from reviews.dependencies import get_review_repository
from reviews.repository import ReviewRepository
from users.dependencies import get_user_repository
from users.repository import UserRepository

from . import service
from .dependencies import get_song_repository
from .repository import SongRepository

router = APIRouter()


@router.get("/songs")
async def list_songs(
    page: str | None = Query(default=None),
    songs: SongRepository = Depends(get_song_repository),
) -> dict:
    with store_call("Error fetching songs list.  Please try again later."):
        return await service.list_songs_page(songs, requested_page=service.parse_page(page))


@router.post("/songs", status_code=status.HTTP_201_CREATED)
async def create_song(
    payload: Any = Body(default=None),
    songs: SongRepository = Depends(get_song_repository),
    users: UserRepository = Depends(get_user_repository),
) -> dict:
    try:
        with store_call("Error inserting song into DB.  Please try again later."):
            song_id = await service.create_song(payload, songs=songs, users=users)
    except PayloadValidationError as exc:
        raise HTTPException(status_code=400, detail=f"Request body is not a valid song object: {exc}") from exc
    except OwnerNotFoundError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {"id": song_id, "links": {"song": service.song_link(song_id)}}


@router.get("/songs/{song_id}")
async def get_song(
    song_id: int,
    songs: SongRepository = Depends(get_song_repository),
    reviews: ReviewRepository = Depends(get_review_repository),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
) -> dict:
    with store_call("Unable to fetch song.  Please try again later."):
        song = await service.get_song_detail(
            song_id,
            songs=songs,
            reviews=reviews,
            playlists=playlists,
        )
    if song is None:
        raise HTTPException(status_code=404, detail="Song not found.")
    return song


@router.put("/songs/{song_id}")
async def replace_song(
    song_id: int,
    payload: Any = Body(default=None),
    songs: SongRepository = Depends(get_song_repository),
) -> dict:
    try:
        with store_call("Unable to update specified song.  Please try again later."):
            updated = await service.replace_song(song_id, payload, songs=songs)
    except PayloadValidationError as exc:
        raise HTTPException(status_code=400, detail=f"Request body is not a valid song object: {exc}") from exc

    if not updated:
        raise HTTPException(status_code=404, detail="Song not found.")
    return {"links": {"song": service.song_link(song_id)}}


@router.delete("/songs/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_song(
    song_id: int,
    songs: SongRepository = Depends(get_song_repository),
) -> Response:
    with store_call("Unable to delete song.  Please try again later."):
        deleted = await service.delete_song(song_id, songs=songs)
    if not deleted:
        raise HTTPException(status_code=404, detail="Song not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
