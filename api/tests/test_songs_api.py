import asyncpg
import pytest
from pymongo.errors import AutoReconnect

from fakes import song_payload
from users.repository import SONGS_FIELD


def _seed_songs(song_repo, count):
    for i in range(count):
        song_repo._store(dict(song_payload(name=f"track {i + 1}")))


def test_list_songs_first_page(client, song_repo):
    _seed_songs(song_repo, 25)
    r = client.get("/songs")
    assert r.status_code == 200
    body = r.json()
    assert [s["id"] for s in body["songs"]] == list(range(1, 11))
    assert body["pageNumber"] == 1
    assert body["totalPages"] == 3
    assert body["pageSize"] == 10
    assert body["totalCount"] == 25
    assert body["links"] == {"nextPage": "/songs?page=2", "lastPage": "/songs?page=3"}


@pytest.mark.parametrize("page, expected", [("99", 3), ("-5", 1), ("abc", 1), ("2", 2)])
def test_list_songs_clamps_page(client, song_repo, page, expected):
    _seed_songs(song_repo, 25)
    r = client.get("/songs", params={"page": page})
    assert r.status_code == 200
    assert r.json()["pageNumber"] == expected


def test_list_songs_last_page(client, song_repo):
    _seed_songs(song_repo, 25)
    body = client.get("/songs?page=3").json()
    assert [s["id"] for s in body["songs"]] == [21, 22, 23, 24, 25]
    assert body["links"] == {"prevPage": "/songs?page=2", "firstPage": "/songs?page=1"}


def test_list_songs_empty(client):
    body = client.get("/songs").json()
    assert body["songs"] == []
    assert body["totalPages"] == 1
    assert body["links"] == {}


def test_list_songs_page_size_from_env(client, song_repo, monkeypatch):
    monkeypatch.setenv("SONGS_PAGE_SIZE", "5")
    _seed_songs(song_repo, 12)
    body = client.get("/songs").json()
    assert body["pageSize"] == 5
    assert body["totalPages"] == 3


def test_list_songs_store_error_is_sanitized(client, song_repo):
    song_repo.fail_with = asyncpg.PostgresError("relation songs does not exist")
    r = client.get("/songs")
    assert r.status_code == 500
    assert "relation" not in r.text


def test_create_song(client, song_repo, user_repo):
    r = client.post("/songs", json=song_payload())
    assert r.status_code == 201
    body = r.json()
    assert body == {"id": 1, "links": {"song": "/songs/1"}}
    assert song_repo.rows[1]["ownerID"] == "tom"
    assert user_repo.documents["tom"][SONGS_FIELD] == [1]


def test_create_song_unknown_owner(client, song_repo):
    r = client.post("/songs", json=song_payload(owner_id="ghost"))
    assert r.status_code == 400
    assert "ghost" in r.json()["detail"]
    assert song_repo.rows == {}


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "missing the rest"},
        {"nothing": "known"},
        [],
    ],
)
def test_create_song_invalid_body(client, song_repo, payload):
    r = client.post("/songs", json=payload)
    assert r.status_code == 400
    assert song_repo.rows == {}


def test_create_song_without_body(client):
    assert client.post("/songs").status_code == 400


def test_create_song_malformed_json(client):
    r = client.post("/songs", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400


def test_create_song_insert_failure(client, song_repo, user_repo):
    song_repo.fail_with = asyncpg.PostgresError("boom")
    r = client.post("/songs", json=song_payload())
    assert r.status_code == 500
    assert user_repo.documents["tom"][SONGS_FIELD] == []


def test_create_song_partial_failure_looks_like_store_error(client, song_repo, user_repo):
    user_repo.append_failures = 1
    r = client.post("/songs", json=song_payload())
    assert r.status_code == 500
    assert r.json()["detail"] == "Error inserting song into DB.  Please try again later."
    # The orphaned row is still there.
    assert len(song_repo.rows) == 1


def test_get_song_with_nested_details(client, song_repo, review_repo, playlist_repo):
    _seed_songs(song_repo, 2)
    review_repo.rows = [
        {"id": 1, "songID": 1, "userID": "jerry", "rating": 5, "review": "classic"},
        {"id": 2, "songID": 2, "userID": "jerry", "rating": 3, "review": "ok"},
    ]
    playlist_repo.rows = [{"id": 4, "songID": 1, "userID": "tom", "name": "late night"}]

    r = client.get("/songs/1")
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == 1
    assert [rv["id"] for rv in body["reviews"]] == [1]
    assert [p["id"] for p in body["playlists"]] == [4]


def test_get_song_without_details_has_empty_lists(client, song_repo):
    _seed_songs(song_repo, 1)
    body = client.get("/songs/1").json()
    assert body["reviews"] == []
    assert body["playlists"] == []


def test_get_missing_song(client):
    assert client.get("/songs/42").status_code == 404


def test_replace_song(client, song_repo):
    _seed_songs(song_repo, 1)
    r = client.put("/songs/1", json=song_payload(owner_id="jerry", name="renamed"))
    assert r.status_code == 200
    assert r.json() == {"links": {"song": "/songs/1"}}
    assert song_repo.rows[1]["name"] == "renamed"
    assert song_repo.rows[1]["ownerID"] == "tom"


def test_replace_song_invalid_body(client, song_repo):
    _seed_songs(song_repo, 1)
    assert client.put("/songs/1", json={"name": "only"}).status_code == 400


def test_replace_missing_song(client):
    assert client.put("/songs/5", json=song_payload()).status_code == 404


def test_delete_song(client, song_repo):
    _seed_songs(song_repo, 1)
    r = client.delete("/songs/1")
    assert r.status_code == 204
    assert song_repo.rows == {}


def test_delete_missing_song_is_not_found(client, song_repo):
    _seed_songs(song_repo, 1)
    r = client.delete("/songs/9")
    assert r.status_code == 404
    assert list(song_repo.rows) == [1]


def test_delete_store_error(client, song_repo):
    song_repo.fail_with = AutoReconnect("lost")
    assert client.delete("/songs/1").status_code == 500


@pytest.mark.parametrize("song_id", [2**31, 2**40, 0, -1])
def test_out_of_range_ids_are_not_found_without_a_query(client, song_repo, song_id):
    # Any store access would surface as a 500.
    song_repo.fail_with = asyncpg.PostgresError("value out of int32 range")
    assert client.get(f"/songs/{song_id}").status_code == 404
    assert client.put(f"/songs/{song_id}", json=song_payload()).status_code == 404
    assert client.delete(f"/songs/{song_id}").status_code == 404


def test_largest_serial_id_still_queries(client, song_repo):
    assert client.delete(f"/songs/{2**31 - 1}").status_code == 404
    song_repo.fail_with = asyncpg.PostgresError("boom")
    assert client.delete(f"/songs/{2**31 - 1}").status_code == 500


def test_create_song_length_beyond_int4(client, song_repo):
    r = client.post("/songs", json=song_payload(length=2**40))
    assert r.status_code == 400
    assert song_repo.rows == {}


def test_replace_song_length_beyond_int4(client, song_repo):
    _seed_songs(song_repo, 1)
    assert client.put("/songs/1", json=song_payload(length=2**31)).status_code == 400
