"""
Repository layer.

One repository per aggregate, all sharing ``AsyncBaseRepository``.
"""

from .base import AsyncBaseRepository, QueryBuilder
from .events import EventRepository
from .locations import LocationRepository
from .lyrics import LyricRepository
from .playlists import PlaylistRepository
from .songs import SongRepository
from .users import UserRepository

__all__ = [
    "AsyncBaseRepository",
    "EventRepository",
    "LocationRepository",
    "LyricRepository",
    "PlaylistRepository",
    "QueryBuilder",
    "SongRepository",
    "UserRepository",
]
