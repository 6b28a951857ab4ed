"""
Playlist Endpoints.

Users see their own playlists plus every public one. Only the owner may
change a playlist; for anybody else it does not exist (404).
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status

from cgplayer.core.database.base import new_id
from cgplayer.core.database.entities.playlists import Playlist
from cgplayer.core.database.repositories.playlists import PlaylistRepository
from cgplayer.core.database.repositories.songs import SongRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.io.common import MessageResponse
from cgplayer.core.models.io.playlists import (
    PlaylistListResponse,
    PlaylistResponse,
    PlaylistSongAdd,
    PlaylistUpdate,
)
from cgplayer.server.core import constant
from cgplayer.server.services.deps import CurrentUserDep, SessionDep, StorageDep
from cgplayer.server.services.presenters import present_playlist, present_playlists
from cgplayer.server.services.uploads import UploadRejected, UploadStorage, file_extension, is_allowed_image

logger = get_logger(__name__)

router = APIRouter()

IMAGE_URL_PREFIX = f"/uploads/{constant.PLAYLISTS_DIR_NAME}/"


async def _owned_or_404(repo: PlaylistRepository, playlist_id: str, user_id: str) -> Playlist:
    playlist = await repo.get_owned(playlist_id, user_id)
    if playlist is None:
        raise HTTPException(status_code=404, detail="Playlist not found or not owned by you")
    return playlist


def _image_path(storage: UploadStorage, image_url: Optional[str]) -> Optional[Path]:
    if not image_url or not image_url.startswith(IMAGE_URL_PREFIX):
        return None
    return storage.playlists_root / image_url[len(IMAGE_URL_PREFIX):]


@router.get(
    "/",
    response_model=PlaylistListResponse,
    summary="List Playlists",
    description="Own and public playlists, newest first, with ordered items and totals.",
)
async def list_playlists(current: CurrentUserDep, session: SessionDep) -> PlaylistListResponse:
    playlists = await PlaylistRepository(session).list_visible(current.id)
    return PlaylistListResponse(playlists=await present_playlists(session, playlists))


@router.post(
    "/",
    response_model=PlaylistResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Playlist",
    responses={400: {"description": "Missing name or invalid image"}},
)
async def create_playlist(
    current: CurrentUserDep,
    session: SessionDep,
    storage: StorageDep,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    is_public: bool = Form(False),
    image: Optional[UploadFile] = File(None),
) -> PlaylistResponse:
    """
    Create a playlist from a multipart form. An optional cover ``image`` is
    stored under the playlists upload folder.
    """
    name = (name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Playlist name is required")

    image_path: Optional[Path] = None
    if image is not None and image.filename:
        if not is_allowed_image(image.content_type, image.filename):
            raise HTTPException(
                status_code=400, detail="Only image files are allowed (jpeg, jpg, png, gif, webp)"
            )
        storage.playlists_root.mkdir(parents=True, exist_ok=True)
        image_path = storage.playlists_root / f"playlist_{new_id()}{file_extension(image.filename)}"
        try:
            await storage.save(image, image_path, max_size=storage.max_image_size)
        except UploadRejected as e:
            raise HTTPException(status_code=400, detail=e.message) from e

    playlist = Playlist(
        name=name,
        description=description or None,
        is_public=is_public,
        user_id=current.id,
        image_url=f"{IMAGE_URL_PREFIX}{image_path.name}" if image_path else None,
    )
    try:
        await PlaylistRepository(session).create(playlist)
    except Exception:
        await session.rollback()
        if image_path is not None:
            storage.cleanup_files([image_path])
        raise

    logger.info(f"Playlist {playlist.id} created by {current.id}")
    return PlaylistResponse(playlist=await present_playlist(session, playlist))


@router.get("/search", response_model=PlaylistListResponse, summary="Search Playlists")
async def search_playlists(
    current: CurrentUserDep,
    session: SessionDep,
    q: Optional[str] = Query(None, description="Text in name or description"),
    creator: Optional[str] = Query(None, description="Creator first name, last name or username"),
) -> PlaylistListResponse:
    playlists = await PlaylistRepository(session).search(current.id, q, creator)
    return PlaylistListResponse(playlists=await present_playlists(session, playlists))


@router.get("/{playlist_id}", response_model=PlaylistResponse, summary="Get Playlist")
async def get_playlist(playlist_id: str, current: CurrentUserDep, session: SessionDep) -> PlaylistResponse:
    playlist = await PlaylistRepository(session).get_visible(playlist_id, current.id)
    if playlist is None:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return PlaylistResponse(playlist=await present_playlist(session, playlist))


@router.put("/{playlist_id}", response_model=PlaylistResponse, summary="Update Playlist")
async def update_playlist(
    playlist_id: str, payload: PlaylistUpdate, current: CurrentUserDep, session: SessionDep
) -> PlaylistResponse:
    repo = PlaylistRepository(session)
    playlist = await _owned_or_404(repo, playlist_id, current.id)
    playlist = await repo.update(playlist, payload.model_dump(exclude_unset=True))
    return PlaylistResponse(playlist=await present_playlist(session, playlist))


@router.post(
    "/{playlist_id}/songs",
    response_model=PlaylistResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Song To Playlist",
)
async def add_song(
    playlist_id: str, payload: PlaylistSongAdd, current: CurrentUserDep, session: SessionDep
) -> PlaylistResponse:
    """Append a song at the end of the playlist."""
    repo = PlaylistRepository(session)
    playlist = await _owned_or_404(repo, playlist_id, current.id)
    if await SongRepository(session).get_active(payload.song_id) is None:
        raise HTTPException(status_code=404, detail="Song not found")
    item = await repo.add_song(playlist.id, payload.song_id)
    await session.commit()
    logger.info(f"Song {payload.song_id} added to playlist {playlist.id} at position {item.order}")
    return PlaylistResponse(playlist=await present_playlist(session, playlist))


@router.delete("/{playlist_id}/songs/{song_id}", response_model=PlaylistResponse, summary="Remove Song From Playlist")
async def remove_song(playlist_id: str, song_id: str, current: CurrentUserDep, session: SessionDep) -> PlaylistResponse:
    repo = PlaylistRepository(session)
    playlist = await _owned_or_404(repo, playlist_id, current.id)
    if not await repo.remove_song(playlist.id, song_id):
        raise HTTPException(status_code=404, detail="Song not in playlist")
    await session.commit()
    return PlaylistResponse(playlist=await present_playlist(session, playlist))


@router.delete("/{playlist_id}", response_model=MessageResponse, summary="Delete Playlist")
async def delete_playlist(
    playlist_id: str, current: CurrentUserDep, session: SessionDep, storage: StorageDep
) -> MessageResponse:
    """Remove the playlist, its items and its cover image."""
    repo = PlaylistRepository(session)
    playlist = await _owned_or_404(repo, playlist_id, current.id)
    image_path = _image_path(storage, playlist.image_url)
    await repo.delete_with_items(playlist)
    await session.commit()
    if image_path is not None:
        storage.cleanup_files([image_path])
    logger.info(f"Playlist {playlist_id} deleted by {current.id}")
    return MessageResponse(message="Playlist deleted successfully")
