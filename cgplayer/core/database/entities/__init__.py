"""
Database entity models.

This package contains all database entity models organized by business domain.
Importing it registers every table on ``Base.metadata``.

Modules:
- users: Accounts, role assignments and voice profiles
- locations: Choir locations
- songs: Songs, song containers and voice variants
- playlists: Playlists and their ordered items
- lyrics: Lyric blocks per song
- events: Events, their song program and soloists
"""

from . import events, locations, lyrics, playlists, songs, users
from .events import Event, EventSong, Soloist
from .locations import Location
from .lyrics import Lyric
from .playlists import Playlist, PlaylistItem
from .songs import Song
from .users import User, UserRoleAssignment, VoiceProfile

__all__ = [
    "Event",
    "EventSong",
    "Location",
    "Lyric",
    "Playlist",
    "PlaylistItem",
    "Soloist",
    "Song",
    "User",
    "UserRoleAssignment",
    "VoiceProfile",
    "events",
    "locations",
    "lyrics",
    "playlists",
    "songs",
    "users",
]
