"""
Lyric Endpoints.

Timestamped lyric blocks per song, either general or for one voice type.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from cgplayer.core.database.entities.lyrics import Lyric
from cgplayer.core.database.repositories.lyrics import LyricRepository
from cgplayer.core.database.repositories.songs import SongRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.domain.enums import VoiceType
from cgplayer.core.models.io.common import MessageResponse
from cgplayer.core.models.io.lyrics import LyricCreate, LyricListResponse, LyricRead, LyricResponse, LyricUpdate
from cgplayer.server.services.deps import CurrentUser, CurrentUserDep, SessionDep

logger = get_logger(__name__)

router = APIRouter()


async def _editable_lyric(repo: LyricRepository, lyric_id: str, current: CurrentUser) -> Lyric:
    lyric = await repo.get_active(lyric_id)
    if lyric is None:
        raise HTTPException(status_code=404, detail="Lyric not found")
    if lyric.created_by != current.id and not current.is_admin:
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    return lyric


@router.post("/", response_model=LyricResponse, status_code=status.HTTP_201_CREATED, summary="Create Lyric")
async def create_lyric(payload: LyricCreate, current: CurrentUserDep, session: SessionDep) -> LyricResponse:
    if await SongRepository(session).get_active(payload.song_id) is None:
        raise HTTPException(status_code=404, detail="Song not found")
    lyric = await LyricRepository(session).create(
        Lyric(
            song_id=payload.song_id,
            content=payload.content,
            timestamp=payload.timestamp,
            voice_type=payload.voice_type.value if payload.voice_type else None,
            created_by=current.id,
        )
    )
    logger.info(f"Lyric {lyric.id} added to song {lyric.song_id} by {current.id}")
    return LyricResponse(lyric=LyricRead.model_validate(lyric))


@router.get("/song/{song_id}", response_model=LyricListResponse, summary="Lyrics Of Song")
async def lyrics_for_song(
    song_id: str,
    _: CurrentUserDep,
    session: SessionDep,
    voice_type: Optional[VoiceType] = Query(None, description="Only this part plus general lyrics"),
) -> LyricListResponse:
    lyrics = await LyricRepository(session).list_for_song(song_id, voice_type.value if voice_type else None)
    return LyricListResponse(lyrics=[LyricRead.model_validate(lyric) for lyric in lyrics])


@router.put("/{lyric_id}", response_model=LyricResponse, summary="Update Lyric")
async def update_lyric(lyric_id: str, payload: LyricUpdate, current: CurrentUserDep, session: SessionDep) -> LyricResponse:
    repo = LyricRepository(session)
    lyric = await _editable_lyric(repo, lyric_id, current)
    changes = payload.model_dump(exclude_unset=True)
    if "voice_type" in changes and changes["voice_type"] is not None:
        changes["voice_type"] = changes["voice_type"].value
    lyric = await repo.update(lyric, changes)
    return LyricResponse(lyric=LyricRead.model_validate(lyric))


@router.delete("/{lyric_id}", response_model=MessageResponse, summary="Delete Lyric")
async def delete_lyric(lyric_id: str, current: CurrentUserDep, session: SessionDep) -> MessageResponse:
    repo = LyricRepository(session)
    lyric = await _editable_lyric(repo, lyric_id, current)
    await repo.update(lyric, {"is_active": False})
    logger.info(f"Lyric {lyric_id} deleted by {current.id}")
    return MessageResponse(message="Lyric deleted successfully")
