import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from auth.security import TokenService
from fakes import (
    FakePlaylistRepository,
    FakeReviewRepository,
    FakeSongRepository,
    FakeUserRepository,
)
from playlists.dependencies import get_playlist_repository
from reviews.dependencies import get_review_repository
from songs.dependencies import get_song_repository
from users.dependencies import get_user_repository

TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def token_service():
    return TokenService(secret=TEST_SECRET, expire_minutes=60)


@pytest.fixture
def song_repo():
    return FakeSongRepository()


@pytest.fixture
def user_repo():
    repo = FakeUserRepository()
    repo.seed("tom")
    return repo


@pytest.fixture
def review_repo():
    return FakeReviewRepository()


@pytest.fixture
def playlist_repo():
    return FakePlaylistRepository()


@pytest.fixture
def client(song_repo, user_repo, review_repo, playlist_repo, token_service):
    # Importing here keeps the app (and its lifespan) out of pure unit tests.
    from main import app

    app.dependency_overrides[get_song_repository] = lambda: song_repo
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_review_repository] = lambda: review_repo
    app.dependency_overrides[get_playlist_repository] = lambda: playlist_repo
    app.dependency_overrides[auth_dependencies.get_token_service] = lambda: token_service
    try:
        # No context manager: the lifespan (real store connections) never runs.
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_header(token_service):
    def _header(user_id: str) -> dict:
        return {"Authorization": f"Bearer {token_service.issue(user_id)}"}

    return _header
