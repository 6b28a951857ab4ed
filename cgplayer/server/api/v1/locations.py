"""
Location Endpoints.

Public listing with user and event counts; administration is ADMIN only.
A location still referenced by users or events is only deactivated on
delete, otherwise it is removed.
"""

from fastapi import APIRouter, HTTPException, status

from cgplayer.core.database.entities.locations import Location
from cgplayer.core.database.repositories.locations import LocationRepository
from cgplayer.core.database.repositories.users import UserRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.io.locations import (
    LocationCreate,
    LocationDeleteResponse,
    LocationListResponse,
    LocationRead,
    LocationResponse,
    LocationStats,
    LocationUpdate,
    RecentEvent,
)
from cgplayer.server.services.deps import AdminDep, CurrentUserDep, SessionDep

logger = get_logger(__name__)

router = APIRouter()


async def _get_or_404(repo: LocationRepository, location_id: str) -> Location:
    location = await repo.get_by_id(location_id)
    if location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


def _read(location: Location, user_count: int = 0, event_count: int = 0) -> LocationRead:
    read = LocationRead.model_validate(location)
    read.user_count = user_count
    read.event_count = event_count
    return read


@router.get("/", response_model=LocationListResponse, summary="List Locations")
async def list_locations(session: SessionDep) -> LocationListResponse:
    repo = LocationRepository(session)
    locations = await repo.list_active()
    users = await repo.user_counts()
    events = await repo.event_counts()
    return LocationListResponse(
        locations=[_read(location, users.get(location.id, 0), events.get(location.id, 0)) for location in locations]
    )


@router.post("/", response_model=LocationResponse, status_code=status.HTTP_201_CREATED, summary="Create Location")
async def create_location(payload: LocationCreate, current: AdminDep, session: SessionDep) -> LocationResponse:
    data = payload.model_dump()
    data["type"] = payload.type.value
    location = await LocationRepository(session).create(Location(**data))
    logger.info(f"Location {location.id} ({location.name}) created by {current.id}")
    return LocationResponse(location=_read(location))


@router.put("/{location_id}", response_model=LocationResponse, summary="Update Location")
async def update_location(
    location_id: str, payload: LocationUpdate, current: AdminDep, session: SessionDep
) -> LocationResponse:
    repo = LocationRepository(session)
    location = await _get_or_404(repo, location_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("type") is not None:
        changes["type"] = changes["type"].value
    location = await repo.update(location, changes)
    users, events = await repo.reference_counts(location.id)
    return LocationResponse(location=_read(location, users, events))


@router.delete("/{location_id}", response_model=LocationDeleteResponse, summary="Delete Location")
async def delete_location(location_id: str, current: AdminDep, session: SessionDep) -> LocationDeleteResponse:
    repo = LocationRepository(session)
    location = await _get_or_404(repo, location_id)
    users, events = await repo.reference_counts(location.id)
    if users or events:
        await repo.update(location, {"is_active": False})
        logger.info(f"Location {location_id} deactivated by {current.id} ({users} users, {events} events)")
        return LocationDeleteResponse(message="Location deactivated, it is still referenced", soft_deleted=True)

    await repo.delete(location.id)
    logger.info(f"Location {location_id} deleted by {current.id}")
    return LocationDeleteResponse(message="Location deleted successfully", soft_deleted=False)


@router.get("/{location_id}/stats", response_model=LocationStats, summary="Location Statistics")
async def location_stats(location_id: str, _: CurrentUserDep, session: SessionDep) -> LocationStats:
    repo = LocationRepository(session)
    location = await _get_or_404(repo, location_id)
    users = UserRepository(session)
    return LocationStats(
        total_users=await users.count({"location_id": location.id}),
        users_by_role=await users.count_by_role(location.id),
        users_by_voice=await users.count_by_voice_type(location.id),
        recent_events=[RecentEvent.model_validate(event) for event in await repo.recent_events(location.id)],
    )
