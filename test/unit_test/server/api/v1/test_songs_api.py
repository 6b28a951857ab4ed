"""Tests for song listing, lookup, metadata edits, deletion and streaming."""

from pathlib import Path

import pytest
from sqlalchemy import text

from cgplayer.core.models.domain.enums import UserRole, VoiceType


@pytest.fixture
async def director(make_user):
    return await make_user("director", roles=(UserRole.DIRECTOR,))


@pytest.fixture
async def choir(director, make_song):
    """A container with tenor, soprano and full-choir variants."""
    user, _ = director
    container = await make_song(user.id, title="Aleluya", container=True)
    variants = {
        voice: await make_song(user.id, title="Aleluya", voice_type=voice, parent=container)
        for voice in ("TENOR", "SOPRANO", "CORO")
    }
    return container, variants


class TestListSongs:
    async def test_requires_authentication(self, client):
        response = await client.get("/api/songs/")

        assert response.status_code == 401

    async def test_lists_songs_with_versions(self, client, director, choir):
        container, variants = choir
        _, headers = director

        response = await client.get("/api/songs/", headers=headers)

        songs = {song["id"]: song for song in response.json()["songs"]}
        assert set(songs) == {container.id, *(v.id for v in variants.values())}
        assert {v["voice_type"] for v in songs[container.id]["child_versions"]} == {"TENOR", "SOPRANO", "CORO"}
        assert songs[variants["TENOR"].id]["parent_song"]["id"] == container.id
        assert songs[container.id]["uploader"]["username"] == "director"

    async def test_top_level_only(self, client, director, choir):
        container, _ = choir
        _, headers = director

        response = await client.get("/api/songs/", params={"include_versions": False}, headers=headers)

        assert [song["id"] for song in response.json()["songs"]] == [container.id]

    async def test_missing_songs_table_lists_nothing(self, client, database, director):
        _, headers = director
        async with database.engine.begin() as conn:
            await conn.execute(text("DROP TABLE songs"))

        response = await client.get("/api/songs/", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"songs": []}


class TestSongsForPlaylist:
    async def test_singer_sees_own_voice_and_shared(self, client, choir, make_user):
        _, headers = await make_user("tenorio", voice_types=(VoiceType.TENOR,))

        response = await client.get("/api/songs/for-playlist", headers=headers)

        assert {song["voice_type"] for song in response.json()["songs"]} == {"TENOR", "CORO"}

    async def test_manager_sees_every_variant(self, client, director, choir):
        _, headers = director

        response = await client.get("/api/songs/for-playlist", headers=headers)

        assert len(response.json()["songs"]) == 3

    async def test_search(self, client, director, choir, make_song):
        user, headers = director
        await make_song(user.id, title="Santo", voice_type="BAJO")

        response = await client.get("/api/songs/for-playlist", params={"search": "sant"}, headers=headers)

        assert [song["title"] for song in response.json()["songs"]] == ["Santo (BAJO)"]


class TestGetSong:
    async def test_get_song(self, client, director, choir):
        container, _ = choir
        _, headers = director

        response = await client.get(f"/api/songs/{container.id}", headers=headers)

        assert response.status_code == 200
        assert response.json()["song"]["title"] == "Aleluya"

    async def test_unknown_song(self, client, director):
        _, headers = director

        response = await client.get("/api/songs/missing", headers=headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Song not found"

    async def test_versions_are_filtered_by_voice(self, client, choir, make_user):
        container, _ = choir
        _, headers = await make_user("soprana", voice_types=(VoiceType.SOPRANO,))

        response = await client.get(f"/api/songs/{container.id}/versions", headers=headers)

        assert {v["voice_type"] for v in response.json()["versions"]} == {"SOPRANO", "CORO"}

    async def test_song_without_variants_is_its_own_version(self, client, director, make_song):
        user, headers = director
        song = await make_song(user.id, title="Gloria")

        response = await client.get(f"/api/songs/{song.id}/versions", headers=headers)

        assert [v["id"] for v in response.json()["versions"]] == [song.id]

    async def test_server_info(self, client):
        response = await client.get("/api/songs/info/server")

        assert response.json()["audio_base_url"] == "http://localhost:5000/api/songs/file"


class TestUpdateAndDelete:
    async def test_uploader_can_edit(self, client, make_user, make_song):
        user, headers = await make_user("uploader")
        song = await make_song(user.id, title="Gloria")

        response = await client.patch(f"/api/songs/{song.id}", json={"artist": "Coro Nacional"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["song"]["artist"] == "Coro Nacional"
        assert response.json()["song"]["title"] == "Gloria"

    async def test_other_singer_cannot_edit(self, client, make_user, make_song):
        owner, _ = await make_user("owner")
        _, headers = await make_user("other")
        song = await make_song(owner.id)

        response = await client.patch(f"/api/songs/{song.id}", json={"title": "X"}, headers=headers)

        assert response.status_code == 403

    async def test_empty_title_is_rejected(self, client, director, make_song):
        user, headers = director
        song = await make_song(user.id)

        response = await client.patch(f"/api/songs/{song.id}", json={"title": ""}, headers=headers)

        assert response.status_code == 400

    async def test_null_title_is_rejected(self, client, director, make_song):
        user, headers = director
        song = await make_song(user.id, title="Gloria")

        response = await client.patch(f"/api/songs/{song.id}", json={"title": None}, headers=headers)
        fetched = await client.get(f"/api/songs/{song.id}", headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Validation error"
        assert fetched.json()["song"]["title"] == "Gloria"

    async def test_null_optional_field_clears_it(self, client, director, make_song):
        user, headers = director
        song = await make_song(user.id)
        await client.patch(f"/api/songs/{song.id}", json={"artist": "Coro Nacional"}, headers=headers)

        response = await client.patch(f"/api/songs/{song.id}", json={"artist": None}, headers=headers)

        assert response.status_code == 200
        assert response.json()["song"]["artist"] is None

    async def test_deleting_container_hides_variants(self, client, director, choir):
        container, variants = choir
        _, headers = director

        response = await client.delete(f"/api/songs/{container.id}", headers=headers)
        listing = await client.get("/api/songs/", headers=headers)

        assert response.json() == {"message": "Song deleted successfully"}
        assert listing.json()["songs"] == []

    async def test_delete_keeps_audio_file_on_disk(self, client, settings, director, make_song):
        user, headers = director
        song = await make_song(user.id, content=b"keep-me")

        response = await client.delete(f"/api/songs/{song.id}", headers=headers)

        assert response.status_code == 200
        assert (Path(settings.uploads.upload_dir) / song.file_path).read_bytes() == b"keep-me"

    async def test_deleting_variant_keeps_siblings(self, client, director, choir):
        container, variants = choir
        _, headers = director

        await client.delete(f"/api/songs/{variants['TENOR'].id}", headers=headers)
        response = await client.get(f"/api/songs/{container.id}", headers=headers)

        assert {v["voice_type"] for v in response.json()["song"]["child_versions"]} == {"SOPRANO", "CORO"}

    async def test_delete_twice_is_404(self, client, director, make_song):
        user, headers = director
        song = await make_song(user.id)

        await client.delete(f"/api/songs/{song.id}", headers=headers)
        response = await client.delete(f"/api/songs/{song.id}", headers=headers)

        assert response.status_code == 404


class TestStreaming:
    async def test_full_file_without_auth(self, client, director, make_song):
        user, _ = director
        song = await make_song(user.id, title="Gloria", content=b"a" * 100)

        response = await client.get(f"/api/songs/file/{song.folder_name}/{song.file_name}")

        assert response.status_code == 200
        assert response.content == b"a" * 100
        assert response.headers["accept-ranges"] == "bytes"
        assert response.headers["content-type"] == "audio/mpeg"

    async def test_range_request(self, client, director, make_song):
        user, _ = director
        song = await make_song(user.id, content=bytes(range(200)))

        response = await client.get(
            f"/api/songs/file/{song.folder_name}/{song.file_name}", headers={"Range": "bytes=10-19"}
        )

        assert response.status_code == 206
        assert response.content == bytes(range(10, 20))
        assert response.headers["content-range"] == "bytes 10-19/200"

    async def test_unsatisfiable_range(self, client, director, make_song):
        user, _ = director
        song = await make_song(user.id, content=b"abc")

        response = await client.get(
            f"/api/songs/file/{song.folder_name}/{song.file_name}", headers={"Range": "bytes=10-"}
        )

        assert response.status_code == 416
        assert response.headers["content-range"] == "bytes */3"

    async def test_missing_file(self, client):
        response = await client.get("/api/songs/file/nowhere/missing.mp3")

        assert response.status_code == 404
        assert response.json()["detail"] == "Audio file not found"

    async def test_root_file(self, client, storage):
        storage.songs_root.mkdir(parents=True, exist_ok=True)
        (storage.songs_root / "legacy.m4a").write_bytes(b"old")

        response = await client.get("/api/songs/file-root/legacy.m4a")

        assert response.status_code == 200
        assert response.content == b"old"
        assert response.headers["content-type"] == "audio/mp4"

    async def test_static_uploads_mount(self, client, storage):
        storage.playlists_root.mkdir(parents=True, exist_ok=True)
        (storage.playlists_root / "cover.png").write_bytes(b"png")

        response = await client.get("/uploads/playlists/cover.png")

        assert response.status_code == 200
        assert response.content == b"png"
