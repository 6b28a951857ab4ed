"""
Event Endpoints.

Events with their song program and soloists. Reads are public, writes are
ADMIN only. Every response is wrapped as ``{"success": true, "data": ...}``.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from cgplayer.core.database.base import utc_now
from cgplayer.core.database.entities.events import Event
from cgplayer.core.database.repositories.events import EventRepository
from cgplayer.core.database.repositories.locations import LocationRepository
from cgplayer.core.database.repositories.songs import SongRepository
from cgplayer.core.database.repositories.users import UserRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.io.events import (
    EventCreate,
    EventEnvelope,
    EventListEnvelope,
    EventMessage,
    EventSongsReplace,
    EventSummary,
    EventSummaryEnvelope,
    EventUpdate,
    SoloistsReplace,
)
from cgplayer.server.core import constant
from cgplayer.server.services.deps import AdminDep, CurrentUserDep, SessionDep
from cgplayer.server.services.presenters import present_event, present_events

logger = get_logger(__name__)

router = APIRouter()


def _naive_utc(value: datetime) -> datetime:
    """Stored datetimes are naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _month_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


async def _active_or_404(repo: EventRepository, event_id: str) -> Event:
    event = await repo.get_active(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


async def _check_location(session, location_id: Optional[str]) -> None:
    if location_id and await LocationRepository(session).get_by_id(location_id) is None:
        raise HTTPException(status_code=400, detail="Location not found")


@router.get("/", response_model=EventListEnvelope, summary="List Events")
async def list_events(
    session: SessionDep,
    location_id: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    upcoming: bool = Query(False, description="Only future events, soonest first"),
) -> EventListEnvelope:
    events = await EventRepository(session).search(
        location_id=location_id,
        category=category,
        upcoming_from=utc_now() if upcoming else None,
    )
    return EventListEnvelope(data=await present_events(session, events))


@router.post("/", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED, summary="Create Event")
async def create_event(payload: EventCreate, current: AdminDep, session: SessionDep) -> EventEnvelope:
    await _check_location(session, payload.location_id)
    data = payload.model_dump()
    data["date"] = _naive_utc(payload.date)
    event = await EventRepository(session).create(Event(**data))
    logger.info(f"Event {event.id} ({event.title}) created by {current.id}")
    return EventEnvelope(data=await present_event(session, event))


@router.get("/stats/summary", response_model=EventSummaryEnvelope, summary="Event Statistics")
async def event_summary(_: CurrentUserDep, session: SessionDep) -> EventSummaryEnvelope:
    repo = EventRepository(session)
    now = utc_now()
    month_start, month_end = _month_bounds(now)
    categories = await repo.count_by_category()
    return EventSummaryEnvelope(
        data=EventSummary(
            total_events=await repo.count_active(),
            upcoming_events=await repo.count_active(since=now),
            this_month_events=await repo.count_active(since=month_start, until=month_end),
            category_stats={
                (category or constant.UNCATEGORIZED_EVENT_LABEL): count for category, count in categories.items()
            },
        )
    )


@router.get("/{event_id}", response_model=EventEnvelope, summary="Get Event")
async def get_event(event_id: str, session: SessionDep) -> EventEnvelope:
    event = await _active_or_404(EventRepository(session), event_id)
    return EventEnvelope(data=await present_event(session, event))


@router.put("/{event_id}", response_model=EventEnvelope, summary="Update Event")
async def update_event(event_id: str, payload: EventUpdate, current: AdminDep, session: SessionDep) -> EventEnvelope:
    """Partial update; only the fields present in the body change."""
    repo = EventRepository(session)
    event = await _active_or_404(repo, event_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("date") is not None:
        changes["date"] = _naive_utc(changes["date"])
    await _check_location(session, changes.get("location_id"))
    event = await repo.update(event, changes)
    logger.info(f"Event {event.id} updated by {current.id}: {sorted(changes)}")
    return EventEnvelope(data=await present_event(session, event))


@router.post("/{event_id}/songs", response_model=EventEnvelope, summary="Replace Event Program")
async def replace_event_songs(
    event_id: str, payload: EventSongsReplace, current: AdminDep, session: SessionDep
) -> EventEnvelope:
    repo = EventRepository(session)
    event = await _active_or_404(repo, event_id)
    songs = await SongRepository(session).get_many(entry.song_id for entry in payload.songs)
    unknown = [entry.song_id for entry in payload.songs if entry.song_id not in songs]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Songs not found: {', '.join(unknown)}")
    await repo.replace_songs(event.id, [entry.model_dump() for entry in payload.songs])
    await session.commit()
    logger.info(f"Program of event {event.id} replaced by {current.id} ({len(payload.songs)} songs)")
    return EventEnvelope(data=await present_event(session, event))


@router.post("/{event_id}/soloists", response_model=EventEnvelope, summary="Replace Event Soloists")
async def replace_event_soloists(
    event_id: str, payload: SoloistsReplace, current: AdminDep, session: SessionDep
) -> EventEnvelope:
    repo = EventRepository(session)
    event = await _active_or_404(repo, event_id)
    users = await UserRepository(session).get_many(entry.user_id for entry in payload.soloists)
    unknown = [entry.user_id for entry in payload.soloists if entry.user_id not in users]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Users not found: {', '.join(unknown)}")
    song_ids = [entry.song_id for entry in payload.soloists if entry.song_id]
    songs = await SongRepository(session).get_many(song_ids)
    unknown = [song_id for song_id in song_ids if song_id not in songs]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Songs not found: {', '.join(unknown)}")
    await repo.replace_soloists(
        event.id,
        [{**entry.model_dump(), "soloist_type": entry.soloist_type.value} for entry in payload.soloists],
    )
    await session.commit()
    logger.info(f"Soloists of event {event.id} replaced by {current.id} ({len(payload.soloists)} entries)")
    return EventEnvelope(data=await present_event(session, event))


@router.delete("/{event_id}", response_model=EventMessage, summary="Delete Event")
async def delete_event(event_id: str, current: AdminDep, session: SessionDep) -> EventMessage:
    repo = EventRepository(session)
    event = await _active_or_404(repo, event_id)
    await repo.update(event, {"is_active": False})
    logger.info(f"Event {event_id} deleted by {current.id}")
    return EventMessage(message="Event deleted successfully")
