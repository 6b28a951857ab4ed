"""Domain enums shared by entities, schemas and routes."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Roles a user can hold. A user holds one or more of them."""

    ADMIN = "ADMIN"
    DIRECTOR = "DIRECTOR"
    CANTANTE = "CANTANTE"  # Singer


class VoiceType(str, Enum):
    """
    Vocal part classification.

    Used both to tag song variants and to record which parts a singer sings.
    ``CORO`` is the full-choir mix and ``ORIGINAL`` the reference recording;
    every singer may listen to those two.
    """

    SOPRANO = "SOPRANO"
    MESOSOPRANO = "MESOSOPRANO"
    CONTRALTO = "CONTRALTO"
    TENOR = "TENOR"
    BARITONO = "BARITONO"
    BAJO = "BAJO"
    CORO = "CORO"
    ORIGINAL = "ORIGINAL"


SHARED_VOICE_TYPES = (VoiceType.CORO, VoiceType.ORIGINAL)


class LocationType(str, Enum):
    """Choir location groups."""

    SANTIAGO = "SANTIAGO"
    VINA_DEL_MAR = "VINA_DEL_MAR"
    CONCEPCION = "CONCEPCION"
    ANTOFAGASTA = "ANTOFAGASTA"
    VALDIVIA = "VALDIVIA"
    TODOS_LOS_CORISTAS = "TODOS_LOS_CORISTAS"


class SoloistType(str, Enum):
    """Which voices perform a solo."""

    MALE = "MALE"
    FEMALE = "FEMALE"
    BOTH = "BOTH"
