"""
Response assembly.

Entities carry foreign keys only; these helpers batch-load the related rows
(roles, voice profiles, uploaders, variants, playlist items, event program)
and build the read models the routers return.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from cgplayer.core.database.entities.events import Event
from cgplayer.core.database.entities.locations import Location
from cgplayer.core.database.entities.playlists import Playlist
from cgplayer.core.database.entities.songs import Song
from cgplayer.core.database.entities.users import User
from cgplayer.core.database.repositories.events import EventRepository
from cgplayer.core.database.repositories.playlists import PlaylistRepository
from cgplayer.core.database.repositories.songs import SongRepository
from cgplayer.core.database.repositories.users import UserRepository
from cgplayer.core.models.io.common import LocationSummary, SongSummary, UserSummary
from cgplayer.core.models.io.events import EventRead, EventSongRead, SoloistRead
from cgplayer.core.models.io.playlists import PlaylistItemRead, PlaylistRead
from cgplayer.core.models.io.songs import SongRead
from cgplayer.core.models.io.users import UserRead, VoiceProfileRead


async def _locations(session: AsyncSession, location_ids: Sequence[Optional[str]]) -> Dict[str, Location]:
    ids = {location_id for location_id in location_ids if location_id}
    if not ids:
        return {}
    result = await session.execute(select(Location).where(Location.id.in_(ids)))
    return {location.id: location for location in result.scalars().all()}


async def present_users(session: AsyncSession, users: Sequence[User]) -> List[UserRead]:
    repo = UserRepository(session)
    user_ids = [user.id for user in users]
    roles = await repo.roles_for(user_ids)
    profiles = await repo.voice_profiles_for(user_ids)
    locations = await _locations(session, [user.location_id for user in users])

    presented = []
    for user in users:
        location = locations.get(user.location_id) if user.location_id else None
        presented.append(
            UserRead(
                id=user.id,
                email=user.email,
                username=user.username,
                first_name=user.first_name,
                last_name=user.last_name,
                phone=user.phone,
                is_active=user.is_active,
                location_id=user.location_id,
                location=LocationSummary.model_validate(location) if location else None,
                roles=roles.get(user.id, []),
                voice_profiles=[VoiceProfileRead.model_validate(profile) for profile in profiles.get(user.id, [])],
                created_at=user.created_at,
                updated_at=user.updated_at,
            )
        )
    return presented


async def present_user(session: AsyncSession, user: User) -> UserRead:
    return (await present_users(session, [user]))[0]


async def present_songs(session: AsyncSession, songs: Sequence[Song], with_versions: bool = True) -> List[SongRead]:
    """Songs with their uploader, parent and active variants."""
    song_repo = SongRepository(session)
    uploaders = await UserRepository(session).get_many(song.uploaded_by for song in songs)
    parents = await song_repo.get_many(song.parent_song_id for song in songs if song.parent_song_id)
    children = await song_repo.active_children_of(song.id for song in songs) if with_versions else {}

    presented = []
    for song in songs:
        read = SongRead.model_validate(song)
        uploader = uploaders.get(song.uploaded_by)
        parent = parents.get(song.parent_song_id) if song.parent_song_id else None
        read.uploader = UserSummary.model_validate(uploader) if uploader else None
        read.parent_song = SongSummary.model_validate(parent) if parent else None
        read.child_versions = [SongSummary.model_validate(child) for child in children.get(song.id, [])]
        presented.append(read)
    return presented


async def present_song(session: AsyncSession, song: Song) -> SongRead:
    return (await present_songs(session, [song]))[0]


async def present_playlists(session: AsyncSession, playlists: Sequence[Playlist]) -> List[PlaylistRead]:
    """Playlists with owner, ordered items and duration totals."""
    items = await PlaylistRepository(session).items_for(playlist.id for playlist in playlists)
    songs = await SongRepository(session).get_many(
        item.song_id for playlist_items in items.values() for item in playlist_items
    )
    owners = await UserRepository(session).get_many(playlist.user_id for playlist in playlists)

    presented = []
    for playlist in playlists:
        read = PlaylistRead.model_validate(playlist)
        owner = owners.get(playlist.user_id)
        read.owner = UserSummary.model_validate(owner) if owner else None
        read.items = []
        total_duration = 0
        for item in items.get(playlist.id, []):
            song = songs.get(item.song_id)
            if song is not None and song.duration:
                total_duration += song.duration
            read.items.append(
                PlaylistItemRead(
                    id=item.id,
                    order=item.order,
                    added_at=item.added_at,
                    song=SongSummary.model_validate(song) if song else None,
                )
            )
        read.total_songs = len(read.items)
        read.total_duration = total_duration
        presented.append(read)
    return presented


async def present_playlist(session: AsyncSession, playlist: Playlist) -> PlaylistRead:
    return (await present_playlists(session, [playlist]))[0]


async def present_events(session: AsyncSession, events: Sequence[Event]) -> List[EventRead]:
    """Events with location, ordered song program and soloists."""
    repo = EventRepository(session)
    event_ids = [event.id for event in events]
    program = await repo.songs_for(event_ids)
    soloists = await repo.soloists_for(event_ids)
    locations = await _locations(session, [event.location_id for event in events])

    song_ids = {entry.song_id for entries in program.values() for entry in entries}
    song_ids |= {entry.song_id for entries in soloists.values() for entry in entries if entry.song_id}
    songs = await SongRepository(session).get_many(song_ids)
    users = await UserRepository(session).get_many(entry.user_id for entries in soloists.values() for entry in entries)

    def song_summary(song_id: Optional[str]) -> Optional[SongSummary]:
        song = songs.get(song_id) if song_id else None
        return SongSummary.model_validate(song) if song else None

    presented = []
    for event in events:
        location = locations.get(event.location_id) if event.location_id else None
        presented.append(
            EventRead(
                id=event.id,
                title=event.title,
                description=event.description,
                date=event.date,
                category=event.category,
                location_id=event.location_id,
                is_active=event.is_active,
                location=LocationSummary.model_validate(location) if location else None,
                event_songs=[
                    EventSongRead(id=entry.id, order=entry.order, notes=entry.notes, song=song_summary(entry.song_id))
                    for entry in program.get(event.id, [])
                ],
                soloists=[
                    SoloistRead(
                        id=entry.id,
                        soloist_type=entry.soloist_type,
                        notes=entry.notes,
                        user=UserSummary.model_validate(users[entry.user_id]) if entry.user_id in users else None,
                        song=song_summary(entry.song_id),
                    )
                    for entry in soloists.get(event.id, [])
                ],
                created_at=event.created_at,
                updated_at=event.updated_at,
            )
        )
    return presented


async def present_event(session: AsyncSession, event: Event) -> EventRead:
    return (await present_events(session, [event]))[0]
