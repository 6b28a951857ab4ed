"""
Dashboard Endpoints.

Choir overview for ADMIN and DIRECTOR: membership totals, voice distribution
per location and globally, and the latest events. A DIRECTOR who is not also
ADMIN only sees their own location.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter

from cgplayer.core.database.entities.locations import Location
from cgplayer.core.database.repositories.events import EventRepository
from cgplayer.core.database.repositories.locations import LocationRepository
from cgplayer.core.database.repositories.songs import SongRepository
from cgplayer.core.database.repositories.users import UserRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.domain.enums import VoiceType
from cgplayer.core.models.io.admin import (
    DashboardEvent,
    DashboardResponse,
    DashboardStats,
    DirectorInfo,
    GlobalVoiceCount,
    LocationDashboard,
    VoiceGroup,
    VoiceMember,
)
from cgplayer.server.services.deps import ManagerDep, SessionDep

logger = get_logger(__name__)

router = APIRouter()

DEFAULT_LOCATION_COLOR = "#6b7280"


async def _location_dashboard(users: UserRepository, location: Location) -> LocationDashboard:
    members = await users.list_by_location(location.id)
    profiles = await users.voice_profiles_for(member.id for member in members)

    groups: Dict[str, List[VoiceMember]] = {}
    for member in members:
        for profile in profiles.get(member.id, []):
            groups.setdefault(profile.voice_type, []).append(
                VoiceMember(
                    id=member.id,
                    first_name=member.first_name,
                    last_name=member.last_name,
                    email=member.email,
                    is_active=member.is_active,
                )
            )

    director = await users.find_director(location.id)
    return LocationDashboard(
        location_id=location.id,
        location_name=location.name,
        city=location.city,
        address=location.address or "",
        color=location.color or DEFAULT_LOCATION_COLOR,
        phone=location.phone,
        total_users=len(members),
        active_users=sum(1 for member in members if member.is_active),
        director=DirectorInfo.model_validate(director, from_attributes=True) if director else None,
        voice_distribution=[
            VoiceGroup(voice_type=voice.value, count=len(groups[voice.value]), users=groups[voice.value])
            for voice in VoiceType
            if voice.value in groups
        ],
    )


@router.get("/stats", response_model=DashboardResponse, summary="Dashboard Statistics")
async def dashboard_stats(current: ManagerDep, session: SessionDep) -> DashboardResponse:
    users = UserRepository(session)
    location_repo = LocationRepository(session)
    events = EventRepository(session)

    scope: Optional[str] = None
    if not current.is_admin:
        scope = current.user.location_id
        location = await location_repo.get_by_id(scope) if scope else None
        locations = [location] if location else []
        logger.debug(f"Dashboard for director {current.id} scoped to location {scope}")
    else:
        locations = await location_repo.list_active()

    if current.is_admin:
        total = await users.count()
        active = await users.count({"is_active": True})
        total_events = await events.count_active()
    elif scope:
        total = await users.count({"location_id": scope})
        active = await users.count({"location_id": scope, "is_active": True})
        total_events = await events.count({"location_id": scope, "is_active": True})
    else:
        total = active = total_events = 0

    # A director without a location sees nothing
    visible = current.is_admin or scope is not None
    voice_totals = await users.count_by_voice_type(scope) if visible else {}
    voice_active = await users.count_by_voice_type(scope, active_only=True) if visible else {}
    recent = await events.search(location_id=scope, limit=5) if visible else []
    names = {location.id: location.name for location in await location_repo.list()}

    stats = DashboardStats(
        total_users=total,
        active_users=active,
        inactive_users=total - active,
        total_songs=await SongRepository(session).count_top_level(),
        total_events=total_events,
        locations=[await _location_dashboard(users, location) for location in locations],
        global_voice_distribution=[
            GlobalVoiceCount(
                voice_type=voice.value,
                count=voice_totals.get(voice.value, 0),
                active_count=voice_active.get(voice.value, 0),
            )
            for voice in VoiceType
            if voice.value in voice_totals
        ],
        recent_events=[
            DashboardEvent(
                id=event.id,
                title=event.title,
                category=event.category,
                date=event.date,
                location_name=names.get(event.location_id) if event.location_id else None,
            )
            for event in recent
        ],
    )
    return DashboardResponse(data=stats)
