from pymongo.errors import DuplicateKeyError

from auth import security
from fakes import song_payload
from users.repository import SONGS_FIELD


def _register(client, **overrides):
    body = {"userID": "jerry", "name": "Jerry", "email": "jerry@example.com", "password": "cheese"}
    body.update(overrides)
    return client.post("/users", json=body)


def test_register_user(client, user_repo):
    r = _register(client)
    assert r.status_code == 201
    body = r.json()
    assert body["_id"] == "oid-jerry"
    assert body["links"] == {"user": "/users/jerry"}

    stored = user_repo.documents["jerry"]
    assert stored[SONGS_FIELD] == []
    assert stored["password"] != "cheese"
    assert security.verify_password("cheese", stored["password"])


def test_register_missing_field(client, user_repo):
    r = client.post("/users", json={"userID": "jerry", "name": "Jerry"})
    assert r.status_code == 400
    assert "jerry" not in user_repo.documents


def test_register_duplicate_user(client):
    r = _register(client, userID="tom")
    assert r.status_code == 409


def test_login_and_read_profile(client, user_repo, token_service):
    user_repo.seed("jerry", password_hash=security.hash_password("cheese"))

    r = client.post("/users/login", json={"userID": "jerry", "password": "cheese"})
    assert r.status_code == 200
    token = r.json()["token"]
    assert token_service.verify(token).user_id == "jerry"

    profile = client.get("/users/jerry", headers={"Authorization": f"Bearer {token}"})
    assert profile.status_code == 200
    assert profile.json()["userID"] == "jerry"
    assert "password" not in profile.json()


def test_login_wrong_password(client, user_repo):
    user_repo.seed("jerry", password_hash=security.hash_password("cheese"))
    r = client.post("/users/login", json={"userID": "jerry", "password": "mouse"})
    assert r.status_code == 401


def test_login_unknown_user(client):
    r = client.post("/users/login", json={"userID": "ghost", "password": "x"})
    assert r.status_code == 401


def test_login_missing_credentials(client):
    assert client.post("/users/login", json={"userID": "tom"}).status_code == 400
    assert client.post("/users/login").status_code == 400


def test_profile_not_found(client, auth_header):
    r = client.get("/users/ghost", headers=auth_header("ghost"))
    assert r.status_code == 404


def test_user_songs_lists_only_owned(client, auth_header, song_repo):
    client.post("/songs", json=song_payload())
    song_repo._store(dict(song_payload(owner_id="jerry")))

    r = client.get("/users/tom/songs", headers=auth_header("tom"))
    assert r.status_code == 200
    assert [s["ownerID"] for s in r.json()["songs"]] == ["tom"]


def test_user_reviews_and_playlists(client, auth_header, review_repo, playlist_repo):
    review_repo.rows = [
        {"id": 1, "songID": 1, "userID": "tom", "rating": 4, "review": "nice"},
        {"id": 2, "songID": 1, "userID": "jerry", "rating": 1, "review": "meh"},
    ]
    playlist_repo.rows = [{"id": 3, "songID": 1, "userID": "tom", "name": "mix"}]

    reviews = client.get("/users/tom/reviews", headers=auth_header("tom")).json()
    playlists = client.get("/users/tom/playlists", headers=auth_header("tom")).json()
    assert [r["id"] for r in reviews["reviews"]] == [1]
    assert [p["id"] for p in playlists["playlists"]] == [3]


def test_created_song_appears_in_owner_document(client, auth_header):
    song_id = client.post("/songs", json=song_payload()).json()["id"]
    profile = client.get("/users/tom", headers=auth_header("tom")).json()
    assert profile[SONGS_FIELD] == [song_id]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_register_password_over_bcrypt_limit(client, user_repo):
    r = _register(client, password="x" * 100)
    assert r.status_code == 400
    assert "password" in r.json()["detail"]
    assert "jerry" not in user_repo.documents


def test_register_multibyte_password_over_bcrypt_limit(client, user_repo):
    # 25 three-byte characters: 25 characters but 75 bytes.
    password = "€" * 25
    assert len(password.encode("utf-8")) == 75
    r = _register(client, password=password)
    assert r.status_code == 400
    assert "jerry" not in user_repo.documents


def test_register_password_at_bcrypt_limit(client, user_repo):
    r = _register(client, password="x" * 72)
    assert r.status_code == 201
    assert security.verify_password("x" * 72, user_repo.documents["jerry"]["password"])


def test_register_race_on_unique_index_is_duplicate(client, user_repo):
    async def create_user(**_):
        raise DuplicateKeyError("E11000 duplicate key error collection: users index: userID_1")

    user_repo.create_user = create_user
    r = _register(client)
    assert r.status_code == 409


def test_password_hashing_runs_off_the_event_loop(client, user_repo, monkeypatch):
    import asyncio

    offloaded = []
    to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args, **kwargs):
        offloaded.append(func.__name__)
        return await to_thread(func, *args, **kwargs)

    monkeypatch.setattr("users.service.asyncio.to_thread", recording_to_thread)
    assert _register(client).status_code == 201
    assert client.post("/users/login", json={"userID": "jerry", "password": "cheese"}).status_code == 200
    assert offloaded == ["hash_password", "verify_password"]
