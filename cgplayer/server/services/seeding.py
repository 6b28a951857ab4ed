"""
Data seeding and reset.

- ``bootstrap_default_data``: first-start accounts (admin, director, ten
  singers) and the main location, created only while the users table is empty.
- ``seed_demo_data``: the full demo set used by ``POST /api/admin/seed``
  (seven Chilean locations, two admins, singers spread across cities with
  random names and voices, three events).
- ``reset_database``: deletes every row, children before parents.
"""

from __future__ import annotations

import random
import unicodedata
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from cgplayer.core.database.entities.events import Event, EventSong, Soloist
from cgplayer.core.database.entities.locations import Location
from cgplayer.core.database.entities.lyrics import Lyric
from cgplayer.core.database.entities.playlists import Playlist, PlaylistItem
from cgplayer.core.database.entities.songs import Song
from cgplayer.core.database.entities.users import User, UserRoleAssignment, VoiceProfile
from cgplayer.core.database.repositories.users import UserRepository
from cgplayer.core.database.session import Database
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.domain.enums import LocationType, UserRole, VoiceType
from cgplayer.core.security import hash_password
from cgplayer.server.core.config import Settings

logger = get_logger(__name__)

DEFAULT_LOCATION = {
    "name": "Iglesia Principal",
    "type": LocationType.SANTIAGO.value,
    "address": "Av. Principal 123",
    "city": "Santiago",
    "region": "Metropolitana",
    "country": "Chile",
}

SEED_LOCATIONS = [
    {"name": "Catedral Santiago", "type": "SANTIAGO", "address": "Plaza de Armas s/n", "city": "Santiago", "region": "Metropolitana", "color": "#1e3a8a"},
    {"name": "Viña del Mar", "type": "VINA_DEL_MAR", "address": "Plaza Vergara", "city": "Viña del Mar", "region": "Valparaíso", "color": "#059669"},
    {"name": "Valparaíso", "type": "VINA_DEL_MAR", "address": "Cerro Alegre", "city": "Valparaíso", "region": "Valparaíso", "color": "#059669"},
    {"name": "Concepción", "type": "CONCEPCION", "address": "Plaza de Armas", "city": "Concepción", "region": "Biobío", "color": "#7c3aed"},
    {"name": "Antofagasta", "type": "ANTOFAGASTA", "address": "Plaza Colón", "city": "Antofagasta", "region": "Antofagasta", "color": "#dc2626"},
    {"name": "Valdivia", "type": "VALDIVIA", "address": "Plaza de la República", "city": "Valdivia", "region": "Los Ríos", "color": "#ea580c"},
    {"name": "Todos los Coristas", "type": "TODOS_LOS_CORISTAS", "address": "Nacional", "city": "Nacional", "region": "Nacional", "color": "#6b7280"},
]

# Singers created per city by the demo seed
CITY_DISTRIBUTION = {
    "Santiago": 90,
    "Concepción": 45,
    "Antofagasta": 30,
    "Viña del Mar": 20,
    "Valparaíso": 15,
    "Valdivia": 15,
}

FIRST_NAMES = [
    "María", "Carmen", "Josefa", "Isabel", "Ana", "Francisca", "Teresa", "Rosa", "Soledad", "Elena",
    "Patricia", "Laura", "Mónica", "Beatriz", "Rocío", "Lucía", "Paula", "Claudia", "Andrea", "Sofía",
    "Valentina", "Martina", "Catalina", "Fernanda", "Javiera", "José", "Juan", "Manuel", "Francisco",
    "Antonio", "Pedro", "Luis", "Miguel", "Carlos", "Jorge", "Andrés", "Felipe", "Cristóbal", "Matías",
    "Sebastián", "Diego", "Nicolás", "Tomás", "Joaquín", "Benjamín", "Vicente", "Ignacio", "Gabriel",
]

LAST_NAMES = [
    "García", "González", "Rodríguez", "Fernández", "López", "Martínez", "Sánchez", "Pérez", "Gómez", "Martín",
    "Jiménez", "Ruiz", "Hernández", "Díaz", "Moreno", "Muñoz", "Álvarez", "Romero", "Alonso", "Gutiérrez",
    "Navarro", "Torres", "Domínguez", "Vázquez", "Ramos", "Gil", "Ramírez", "Serrano", "Blanco", "Suárez",
    "Molina", "Morales", "Ortega", "Delgado", "Castro", "Ortiz", "Rubio", "Marín", "Sanz", "Iglesias",
]

SINGER_VOICES = [
    VoiceType.SOPRANO,
    VoiceType.MESOSOPRANO,
    VoiceType.CONTRALTO,
    VoiceType.TENOR,
    VoiceType.BARITONO,
    VoiceType.BAJO,
]

SEED_EVENTS = [
    {
        "title": "Concierto de Navidad 2025",
        "description": "Celebración navideña con coros de todas las regiones",
        "date": datetime(2025, 12, 24, 19, 0),
        "city": "Santiago",
        "category": "Especial",
    },
    {
        "title": "Festival de Pascua",
        "description": "Celebración de la Pascua con música sacra",
        "date": datetime(2026, 4, 12, 18, 0),
        "city": "Concepción",
        "category": "Religioso",
    },
    {
        "title": "Encuentro de Coros del Norte",
        "description": "Encuentro regional de coros del norte de Chile",
        "date": datetime(2025, 9, 15, 16, 0),
        "city": "Antofagasta",
        "category": "Regional",
    },
]

INACTIVE_SINGER_RATIO = 0.15


@dataclass
class SeedSummary:
    total_users: int
    active_users: int
    inactive_users: int
    locations: int
    events: int


def _ascii_token(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch) and ch.isalnum())


async def create_account(
    session: AsyncSession,
    *,
    email: str,
    username: str,
    first_name: str,
    last_name: str,
    password_hash: str,
    roles: Sequence[UserRole],
    voice_types: Iterable[VoiceType] = (),
    location_id: Optional[str] = None,
    is_active: bool = True,
) -> User:
    """Stage a user with its roles and voice profiles (not committed)."""
    user = User(
        email=email,
        username=username,
        first_name=first_name,
        last_name=last_name,
        password_hash=password_hash,
        location_id=location_id,
        is_active=is_active,
    )
    session.add(user)
    await session.flush()
    repo = UserRepository(session)
    await repo.set_roles(user.id, [role.value for role in roles])
    voices = [voice.value for voice in voice_types]
    if voices:
        await repo.set_voice_types(user.id, voices)
    return user


async def bootstrap_default_data(database: Database, settings: Settings) -> bool:
    """Create the first-start accounts when no user exists yet.

    Returns:
        True when data was created
    """
    bootstrap = settings.bootstrap
    rounds = settings.jwt.bcrypt_rounds
    async with database.session() as session:
        existing = (await session.execute(select(func.count(User.id)))).scalar_one()
        if existing:
            logger.debug(f"Skipping default data bootstrap, {existing} users present")
            return False

        location = Location(**DEFAULT_LOCATION)
        session.add(location)
        await session.flush()

        await create_account(
            session,
            email=bootstrap.admin_email,
            username="admin",
            first_name="Admin",
            last_name="Chile Gospel",
            password_hash=hash_password(bootstrap.admin_password, rounds),
            roles=[UserRole.ADMIN],
            location_id=location.id,
        )
        await create_account(
            session,
            email="director@chilegospel.com",
            username="director",
            first_name="Director",
            last_name="Musical",
            password_hash=hash_password(bootstrap.director_password, rounds),
            roles=[UserRole.DIRECTOR],
            location_id=location.id,
        )
        singer_hash = hash_password(bootstrap.singer_password, rounds)
        for number in range(1, bootstrap.singer_count + 1):
            await create_account(
                session,
                email=f"singer{number}@chilegospel.com",
                username=f"singer{number}",
                first_name="Cantante",
                last_name=str(number),
                password_hash=singer_hash,
                roles=[UserRole.CANTANTE],
                voice_types=[SINGER_VOICES[(number - 1) % len(SINGER_VOICES)]],
                location_id=location.id,
            )
        await session.commit()

    logger.info(f"Default data created: admin, director and {bootstrap.singer_count} singers")
    return True


async def reset_database(session: AsyncSession) -> Dict[str, int]:
    """Delete every row, dependents first, and commit.

    Returns:
        Deleted row count per table
    """
    deleted: Dict[str, int] = {}

    async def _purge(name: str, stmt) -> None:
        result = await session.execute(stmt)
        deleted[name] = deleted.get(name, 0) + (result.rowcount or 0)

    await _purge("event_soloists", delete(Soloist))
    await _purge("event_songs", delete(EventSong))
    await _purge("playlist_items", delete(PlaylistItem))
    await _purge("playlists", delete(Playlist))
    await _purge("lyrics", delete(Lyric))
    await _purge("songs", delete(Song).where(Song.parent_song_id != None))  # noqa: E711
    await _purge("songs", delete(Song))
    await _purge("events", delete(Event))
    await _purge("user_voice_profiles", delete(VoiceProfile))
    await _purge("user_roles", delete(UserRoleAssignment))
    await _purge("users", delete(User))
    await _purge("locations", delete(Location))
    await session.commit()
    logger.warning(f"Database reset: {deleted}")
    return deleted


async def _location_for(session: AsyncSession, data: Mapping[str, str]) -> Location:
    stmt = select(Location).where(Location.name == data["name"], Location.city == data["city"])
    location = (await session.execute(stmt)).scalars().first()
    if location is None:
        location = Location(**data)
        session.add(location)
        await session.flush()
    return location


async def _unique_identity(session: AsyncSession, first_name: str, last_name: str, taken: set) -> tuple[str, str]:
    base = f"{_ascii_token(first_name)}.{_ascii_token(last_name)}"
    repo = UserRepository(session)
    candidate, counter = base, 1
    while candidate in taken or await repo.email_taken(f"{candidate}@cgplayer.com"):
        candidate = f"{base}{counter}"
        counter += 1
    taken.add(candidate)
    return f"{candidate}@cgplayer.com", candidate


async def seed_demo_data(
    session: AsyncSession,
    settings: Settings,
    distribution: Optional[Mapping[str, int]] = None,
    rng: Optional[random.Random] = None,
) -> SeedSummary:
    """Insert the demo data set and commit.

    Args:
        session: Database session
        settings: Application settings (bcrypt cost)
        distribution: Singers per city; defaults to ``CITY_DISTRIBUTION``
        rng: Random source, injectable for reproducible seeds
    """
    rng = rng or random.Random()
    distribution = CITY_DISTRIBUTION if distribution is None else distribution
    rounds = settings.jwt.bcrypt_rounds
    repo = UserRepository(session)

    locations: List[Location] = [await _location_for(session, data) for data in SEED_LOCATIONS]

    if await repo.get_by_email("admin@cgplayer.com") is None:
        await create_account(
            session,
            email="admin@cgplayer.com",
            username="admin.cgplayer",
            first_name="Administrador",
            last_name="Sistema",
            password_hash=hash_password("admin123", rounds),
            roles=[UserRole.ADMIN],
        )
    if await repo.get_by_email("admin.cantante@cgplayer.com") is None:
        await create_account(
            session,
            email="admin.cantante@cgplayer.com",
            username="admin.cantante",
            first_name="Director",
            last_name="Musical",
            password_hash=hash_password("admin123", rounds),
            roles=[UserRole.ADMIN, UserRole.CANTANTE],
            voice_types=[VoiceType.BARITONO],
        )

    singer_hash = hash_password("cantante123", rounds)
    taken: set = set()
    created = 0
    for city, count in distribution.items():
        city_locations = [location for location in locations if location.city == city] or locations[:1]
        for _ in range(count):
            first_name = rng.choice(FIRST_NAMES)
            last_name_1, last_name_2 = rng.choice(LAST_NAMES), rng.choice(LAST_NAMES)
            email, username = await _unique_identity(session, first_name, last_name_1, taken)
            await create_account(
                session,
                email=email,
                username=username,
                first_name=first_name,
                last_name=f"{last_name_1} {last_name_2}",
                password_hash=singer_hash,
                roles=[UserRole.CANTANTE],
                voice_types=[rng.choice(SINGER_VOICES)],
                location_id=rng.choice(city_locations).id,
                is_active=rng.random() > INACTIVE_SINGER_RATIO,
            )
            created += 1

    by_city = {location.city: location for location in locations}
    for data in SEED_EVENTS:
        location = by_city.get(data["city"])
        session.add(
            Event(
                title=data["title"],
                description=data["description"],
                date=data["date"],
                category=data["category"],
                location_id=location.id if location else None,
            )
        )

    await session.commit()
    logger.info(f"Demo data seeded: {len(locations)} locations, {created} singers, {len(SEED_EVENTS)} events")

    total = int((await session.execute(select(func.count(User.id)))).scalar_one())
    active = int(
        (await session.execute(select(func.count(User.id)).where(User.is_active == True))).scalar_one()  # noqa: E712
    )
    location_count = int((await session.execute(select(func.count(Location.id)))).scalar_one())
    event_count = int((await session.execute(select(func.count(Event.id)))).scalar_one())
    return SeedSummary(
        total_users=total,
        active_users=active,
        inactive_users=total - active,
        locations=location_count,
        events=event_count,
    )
