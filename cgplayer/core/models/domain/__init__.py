"""Domain enums for cgplayer.

These types are shared between the persistence layer, the API schemas and
the permission checks in the routers.
"""

from .enums import SHARED_VOICE_TYPES, LocationType, SoloistType, UserRole, VoiceType

__all__ = [
    "LocationType",
    "SHARED_VOICE_TYPES",
    "SoloistType",
    "UserRole",
    "VoiceType",
]
