"""
User API endpoints.

Everything under `/users/{userID}` requires a bearer token for that same user.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError

from auth import dependencies as auth_dependencies
from auth.schemas import LoginRequest, TokenResponse
from auth.security import AuthSecurityError, TokenService
from core.errors import store_call
from core.validation import PayloadValidationError
from playlists.dependencies import get_playlist_repository
from playlists.repository import PlaylistRepository
from reviews.dependencies import get_review_repository
from reviews.repository import ReviewRepository
from songs.dependencies import get_song_repository
from songs.repository import SongRepository

from . import service
from .dependencies import get_user_repository
from .repository import UserRepository

router = APIRouter()


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: Any = Body(default=None),
    users: UserRepository = Depends(get_user_repository),
) -> dict:
    try:
        with store_call("Failed to insert new user."):
            document_id, user_id = await service.register(payload, users=users)
    except (PayloadValidationError, AuthSecurityError) as exc:
        raise HTTPException(status_code=400, detail=f"Request doesn't contain a valid user: {exc}") from exc
    except service.DuplicateUserError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return {"_id": document_id, "links": {"user": service.user_link(user_id)}}


@router.post("/users/login")
async def login(
    payload: Any = Body(default=None),
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(auth_dependencies.get_token_service),
) -> TokenResponse:
    try:
        credentials = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Request needs a user ID and password.") from exc

    with store_call("Failed to fetch user."):
        token = await service.login(credentials, users=users, tokens=tokens)
    if token is None:
        raise HTTPException(status_code=401, detail="Invalid credentials.")
    return TokenResponse(token=token)


@router.get("/users/{userID}")
async def get_user(
    user_id: str = Depends(auth_dependencies.require_self),
    users: UserRepository = Depends(get_user_repository),
) -> dict:
    with store_call("Failed to fetch user."):
        user = await users.get_user_by_key(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found.")
    return user


@router.get("/users/{userID}/songs")
async def list_user_songs(
    user_id: str = Depends(auth_dependencies.require_self),
    songs: SongRepository = Depends(get_song_repository),
) -> dict:
    with store_call(f"Unable to fetch songs for user {user_id}."):
        rows = await songs.list_songs_by_owner(user_id)
    return {"songs": rows}


@router.get("/users/{userID}/reviews")
async def list_user_reviews(
    user_id: str = Depends(auth_dependencies.require_self),
    reviews: ReviewRepository = Depends(get_review_repository),
) -> dict:
    with store_call("Unable to fetch reviews.  Please try again later."):
        rows = await reviews.list_reviews_by_user(user_id)
    return {"reviews": rows}


@router.get("/users/{userID}/playlists")
async def list_user_playlists(
    user_id: str = Depends(auth_dependencies.require_self),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
) -> dict:
    with store_call("Unable to fetch playlists.  Please try again later."):
        rows = await playlists.list_playlists_by_user(user_id)
    return {"playlists": rows}
