"""Unit tests for orphaned song reconciliation."""

from cgplayer.core.database.repositories.songs import SongRepository
from cgplayer.core.models.domain.enums import UserRole
from cgplayer.server.services.maintenance import cleanup_orphaned_songs


async def test_deactivates_songs_with_missing_files(database, storage, make_user, make_song):
    user, _ = await make_user("director", roles=(UserRole.DIRECTOR,))
    present = await make_song(user.id, title="Presente")
    missing = await make_song(user.id, title="Perdida", with_file=False)

    async with database.session() as session:
        report = await cleanup_orphaned_songs(session, storage)

    assert report.missing_files == 1
    assert report.empty_containers == 0
    assert report.deactivated_ids == [missing.id]
    async with database.session() as session:
        repo = SongRepository(session)
        assert await repo.get_active(present.id) is not None
        assert await repo.get_active(missing.id) is None


async def test_container_left_without_variants_is_deactivated(database, storage, make_user, make_song):
    user, _ = await make_user("director", roles=(UserRole.DIRECTOR,))
    kept = await make_song(user.id, title="Coral", container=True)
    await make_song(user.id, title="Coral", voice_type="TENOR", parent=kept)
    await make_song(user.id, title="Coral", voice_type="BAJO", parent=kept, with_file=False)
    emptied = await make_song(user.id, title="Salmo", container=True)
    lost = await make_song(user.id, title="Salmo", voice_type="SOPRANO", parent=emptied, with_file=False)

    async with database.session() as session:
        report = await cleanup_orphaned_songs(session, storage)

    assert report.missing_files == 2
    assert report.empty_containers == 1
    assert lost.id in report.deactivated_ids
    assert emptied.id in report.deactivated_ids
    assert kept.id not in report.deactivated_ids


async def test_nothing_to_do(database, storage, make_user, make_song):
    user, _ = await make_user("director", roles=(UserRole.DIRECTOR,))
    await make_song(user.id)

    async with database.session() as session:
        report = await cleanup_orphaned_songs(session, storage)

    assert report.deactivated_ids == []
