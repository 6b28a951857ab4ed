"""Tests for lyric endpoints."""

import pytest

from cgplayer.core.models.domain.enums import UserRole


@pytest.fixture
async def author(make_user):
    return await make_user("author")


@pytest.fixture
async def song(author, make_song):
    user, _ = author
    return await make_song(user.id, title="Santo")


async def _add(client, headers, song_id, content, **fields):
    response = await client.post("/api/lyrics/", json={"song_id": song_id, "content": content, **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["lyric"]


async def test_create_lyric(client, author, song):
    user, headers = author

    lyric = await _add(client, headers, song.id, "Santo, santo, santo", timestamp=12.5, voice_type="TENOR")

    assert lyric["song_id"] == song.id
    assert lyric["timestamp"] == 12.5
    assert lyric["voice_type"] == "TENOR"
    assert lyric["created_by"] == user.id
    assert lyric["is_active"] is True


async def test_create_for_unknown_song(client, author):
    _, headers = author

    response = await client.post("/api/lyrics/", json={"song_id": "missing", "content": "x"}, headers=headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Song not found"


@pytest.mark.parametrize("payload", [{"content": ""}, {"content": "x", "timestamp": -1}, {"content": "x", "voice_type": "ALTO"}])
async def test_invalid_lyric(client, author, song, payload):
    _, headers = author

    response = await client.post("/api/lyrics/", json={"song_id": song.id, **payload}, headers=headers)

    assert response.status_code == 400


async def test_list_orders_by_timestamp_and_filters_voice(client, author, song):
    _, headers = author
    await _add(client, headers, song.id, "estrofa tenor", timestamp=20, voice_type="TENOR")
    await _add(client, headers, song.id, "coro general", timestamp=5)
    await _add(client, headers, song.id, "estrofa soprano", timestamp=10, voice_type="SOPRANO")

    everything = await client.get(f"/api/lyrics/song/{song.id}", headers=headers)
    tenor = await client.get(f"/api/lyrics/song/{song.id}", params={"voice_type": "TENOR"}, headers=headers)

    assert [lyric["content"] for lyric in everything.json()["lyrics"]] == [
        "coro general",
        "estrofa soprano",
        "estrofa tenor",
    ]
    assert [lyric["content"] for lyric in tenor.json()["lyrics"]] == ["coro general", "estrofa tenor"]


async def test_update_by_author(client, author, song):
    _, headers = author
    lyric = await _add(client, headers, song.id, "primera version", timestamp=1)

    response = await client.put(f"/api/lyrics/{lyric['id']}", json={"content": "segunda version"}, headers=headers)

    assert response.json()["lyric"]["content"] == "segunda version"
    assert response.json()["lyric"]["timestamp"] == 1


async def test_update_by_other_user_is_forbidden(client, author, song, make_user):
    _, headers = author
    _, other_headers = await make_user("other")
    lyric = await _add(client, headers, song.id, "texto")

    response = await client.put(f"/api/lyrics/{lyric['id']}", json={"content": "robado"}, headers=other_headers)

    assert response.status_code == 403


async def test_admin_can_delete_any_lyric(client, author, song, make_user):
    _, headers = author
    _, admin_headers = await make_user("admin", roles=(UserRole.ADMIN,))
    lyric = await _add(client, headers, song.id, "texto")

    response = await client.delete(f"/api/lyrics/{lyric['id']}", headers=admin_headers)
    listing = await client.get(f"/api/lyrics/song/{song.id}", headers=headers)
    again = await client.delete(f"/api/lyrics/{lyric['id']}", headers=admin_headers)

    assert response.json() == {"message": "Lyric deleted successfully"}
    assert listing.json()["lyrics"] == []
    assert again.status_code == 404
