"""
Song Endpoints.

Listing, metadata edits and soft deletion of songs, the two upload flows and
audio streaming.

Upload flows write files first and commit rows second. Every failure after
the first byte hits the disk removes what was written:

- ``POST /upload``: one file, optionally a voice variant of an existing song
- ``POST /multi-upload``: several files of one song, each assigned a voice
  type; stored as a container row plus one variant row per file

Streaming routes are unauthenticated so ``<audio>`` elements can load them.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import APIRouter, File, Form, Header, HTTPException, Query, UploadFile, status
from sqlalchemy.exc import OperationalError, ProgrammingError

from cgplayer.core.database import new_id
from cgplayer.core.database.entities.songs import CONTAINER_MIME_TYPE, Song
from cgplayer.core.database.repositories.songs import SongRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.domain.enums import VoiceType
from cgplayer.core.models.io.common import MessageResponse, SongSummary
from cgplayer.core.models.io.songs import (
    MultiUploadResponse,
    ServerInfo,
    SongListResponse,
    SongResponse,
    SongUpdate,
    SongUploadResponse,
    SongVersionsResponse,
)
from cgplayer.server.core import constant
from cgplayer.server.services.deps import CurrentUser, CurrentUserDep, SessionDep, SettingsDep, StorageDep
from cgplayer.server.services.presenters import present_song, present_songs
from cgplayer.server.services.streaming import media_type_for, safe_join, stream_audio
from cgplayer.server.services.uploads import (
    TEMPORARY_SUFFIX,
    UploadRejected,
    file_extension,
    generate_file_name,
    is_allowed_audio,
    read_duration,
)

logger = get_logger(__name__)

router = APIRouter()


def _parse_voice_type(value: Optional[str]) -> Optional[VoiceType]:
    if value is None or not value.strip():
        return None
    try:
        return VoiceType(value.strip().upper())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid voice type: {value}") from e


def _check_audio(upload: UploadFile) -> None:
    if not is_allowed_audio(upload.content_type, upload.filename):
        raise HTTPException(
            status_code=400,
            detail=f"Only audio files are allowed. Received: {upload.content_type} ({file_extension(upload.filename)})",
        )


def _stored_mime_type(upload: UploadFile, path: Path) -> str:
    mime = (upload.content_type or "").split(";", 1)[0].strip().lower()
    if not mime or mime == "application/octet-stream":
        return media_type_for(path)
    return mime


def _voice_visible(song: Song, allowed: Optional[List[str]]) -> bool:
    return allowed is None or song.voice_type is None or song.voice_type in allowed


def _check_song_owner(song: Song, current: CurrentUser) -> None:
    if song.uploaded_by != current.id and not current.is_manager:
        raise HTTPException(status_code=403, detail="Insufficient permissions")


def parse_voice_assignments(raw: Optional[str]) -> Dict[str, str]:
    """Read the ``voice_assignments`` form field into ``{filename: voice_type}``.

    Accepts a JSON list of ``{"filename", "voice_type"}`` objects or a JSON
    object mapping file names to voice types.
    """
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail="Invalid voice assignments format") from e

    if isinstance(data, dict):
        return {str(name): str(voice) for name, voice in data.items() if voice}
    if isinstance(data, list):
        assignments = {}
        for entry in data:
            if not isinstance(entry, dict):
                raise HTTPException(status_code=400, detail="Invalid voice assignments format")
            name = entry.get("filename") or entry.get("file_name")
            voice = entry.get("voice_type") or entry.get("voiceType")
            if name and voice:
                assignments[str(name)] = str(voice)
        return assignments
    raise HTTPException(status_code=400, detail="Invalid voice assignments format")


@router.get(
    "/",
    response_model=SongListResponse,
    summary="List Songs",
    description="Active songs, newest first, with uploader, parent and active variants.",
)
async def list_songs(
    _: CurrentUserDep,
    session: SessionDep,
    include_versions: bool = Query(True, description="Include voice variants as separate entries"),
) -> SongListResponse:
    try:
        songs = await SongRepository(session).list_active(include_versions=include_versions)
    except (OperationalError, ProgrammingError) as e:
        logger.warning(f"Songs table unavailable, returning an empty list: {e}")
        return SongListResponse(songs=[])
    return SongListResponse(songs=await present_songs(session, songs))


@router.get(
    "/for-playlist",
    response_model=SongListResponse,
    summary="Songs For Playlists",
    description="Voice variants the current user may add to a playlist.",
)
async def songs_for_playlist(
    current: CurrentUserDep, session: SessionDep, search: Optional[str] = Query(None)
) -> SongListResponse:
    """
    Singers only see their own voice types plus the full-choir and original
    recordings. ADMIN and DIRECTOR see every variant.
    """
    songs = await SongRepository(session).list_variants(current.allowed_voice_types(), search)
    return SongListResponse(songs=await present_songs(session, songs, with_versions=False))


@router.get("/info/server", response_model=ServerInfo, summary="Server Info")
async def server_info(settings: SettingsDep) -> ServerInfo:
    return ServerInfo(host=settings.server_host, port=settings.server_port, audio_base_url=settings.public_audio_base_url)


@router.post(
    "/upload",
    response_model=SongUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Song",
    responses={400: {"description": "Missing or invalid file or field"}},
)
async def upload_song(
    current: CurrentUserDep,
    session: SessionDep,
    storage: StorageDep,
    audio: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    album: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    voice_type: Optional[str] = Form(None),
    parent_song_id: Optional[str] = Form(None),
) -> SongUploadResponse:
    """
    Upload a single audio file.

    With ``voice_type`` the stored title becomes ``"<title> (<voice_type>)"``;
    with ``parent_song_id`` the song is registered as a variant of that song.
    """
    if audio is None or not audio.filename:
        raise HTTPException(status_code=400, detail="No audio file provided")
    _check_audio(audio)
    title = (title or "").strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")
    voice = _parse_voice_type(voice_type)
    repo = SongRepository(session)
    if parent_song_id and await repo.get_active(parent_song_id) is None:
        raise HTTPException(status_code=400, detail="Parent song not found")

    folder_name, folder = storage.create_song_folder(title)
    destination = folder / generate_file_name(title, voice.value if voice else None, file_extension(audio.filename) or None)
    try:
        size = await storage.save(audio, destination)
        song = Song(
            title=f"{title} ({voice.value})" if voice else title,
            artist=artist,
            album=album,
            genre=genre,
            duration=read_duration(destination),
            file_name=destination.name,
            file_path=storage.relative(destination),
            file_size=size,
            mime_type=_stored_mime_type(audio, destination),
            folder_name=folder_name,
            voice_type=voice.value if voice else None,
            parent_song_id=parent_song_id or None,
            uploaded_by=current.id,
        )
        await repo.create(song)
    except UploadRejected as e:
        storage.cleanup_files([destination])
        storage.cleanup_folder(folder)
        logger.warning(f"Upload rejected for user {current.id}: {e.message}")
        raise HTTPException(status_code=400, detail=e.message) from e
    except Exception:
        await session.rollback()
        storage.cleanup_files([destination])
        storage.cleanup_folder(folder)
        logger.error(f"Upload of {audio.filename!r} failed, written files removed", exc_info=True)
        raise

    logger.info(f"Song {song.id} uploaded by {current.id}: {song.file_path}")
    return SongUploadResponse(message="Song uploaded successfully", song=await present_song(session, song))


@router.post(
    "/multi-upload",
    response_model=MultiUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Voice Variants",
    responses={400: {"description": "Missing or invalid files, fields or voice assignments"}},
)
async def multi_upload(
    current: CurrentUserDep,
    session: SessionDep,
    storage: StorageDep,
    settings: SettingsDep,
    audio: Optional[List[UploadFile]] = File(None),
    title: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    album: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    voice_assignments: Optional[str] = Form(None),
) -> MultiUploadResponse:
    """
    Upload every voice part of one song at once.

    ``voice_assignments`` maps each uploaded file name to its voice type. The
    files share one folder; a container row groups one variant row per file.
    """
    files = [upload for upload in (audio or []) if upload.filename]
    if not files:
        raise HTTPException(status_code=400, detail="No audio files provided")
    max_files = settings.uploads.max_files
    if len(files) > max_files:
        raise HTTPException(status_code=400, detail=f"Too many files, the maximum is {max_files}")
    for upload in files:
        _check_audio(upload)
    title = (title or "").strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")

    assignments = parse_voice_assignments(voice_assignments)
    missing = [upload.filename for upload in files if upload.filename not in assignments]
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing voice type assignments for: {', '.join(missing)}")
    voices = [_parse_voice_type(assignments[upload.filename]) for upload in files]

    # Read before the try: a rollback expires the user row loaded in this session
    user_id = current.id
    folder_name, folder = storage.create_song_folder(title)
    written: List[Path] = []
    repo = SongRepository(session)
    try:
        stored = []
        for upload, voice in zip(files, voices):
            extension = file_extension(upload.filename) or constant.DEFAULT_AUDIO_EXTENSION
            temporary = folder / f"{new_id()}{TEMPORARY_SUFFIX}"
            written.append(temporary)
            size = await storage.save(upload, temporary)
            final = storage.rename(temporary, generate_file_name(title, voice.value, extension))
            written[-1] = final
            stored.append((upload, voice, final, size))

        parent = await repo.add(
            Song(
                title=title,
                artist=artist,
                album=album,
                genre=genre,
                file_name=folder_name,
                file_path=storage.relative(folder),
                file_size=sum(size for _, _, _, size in stored),
                mime_type=CONTAINER_MIME_TYPE,
                folder_name=folder_name,
                uploaded_by=user_id,
            )
        )
        children = []
        for upload, voice, path, size in stored:
            children.append(
                await repo.add(
                    Song(
                        title=f"{title} ({voice.value})",
                        artist=artist,
                        album=album,
                        genre=genre,
                        duration=read_duration(path),
                        file_name=path.name,
                        file_path=storage.relative(path),
                        file_size=size,
                        mime_type=_stored_mime_type(upload, path),
                        folder_name=folder_name,
                        voice_type=voice.value,
                        parent_song_id=parent.id,
                        uploaded_by=user_id,
                    )
                )
            )
        await session.commit()
    except UploadRejected as e:
        await session.rollback()
        storage.cleanup_files(written)
        storage.cleanup_folder(folder)
        logger.warning(f"Multi-upload rejected for user {user_id}: {e.message}")
        raise HTTPException(status_code=400, detail=e.message) from e
    except Exception:
        await session.rollback()
        storage.cleanup_files(written)
        storage.cleanup_folder(folder)
        logger.error(f"Multi-upload of {len(files)} files failed, written files removed", exc_info=True)
        raise

    logger.info(f"Container song {parent.id} with {len(children)} variants uploaded by {user_id}")
    return MultiUploadResponse(
        message=f"{len(children)} files uploaded successfully",
        parent_song=await present_song(session, parent),
        songs=await present_songs(session, children, with_versions=False),
    )


@router.get("/file/{folder}/{file_name}", summary="Stream Audio File", responses={206: {"description": "Partial content"}})
async def stream_song_file(
    folder: str, file_name: str, storage: StorageDep, range_header: Optional[str] = Header(None, alias="Range")
):
    """Serve a stored audio file, honouring ``Range`` requests."""
    return stream_audio(safe_join(storage.songs_root, folder, file_name), range_header)


@router.get("/file-root/{file_name}", summary="Stream Root Audio File")
async def stream_root_file(file_name: str, storage: StorageDep, range_header: Optional[str] = Header(None, alias="Range")):
    return stream_audio(safe_join(storage.songs_root, file_name), range_header)


@router.get("/{song_id}", response_model=SongResponse, summary="Get Song", responses={404: {"description": "Song not found"}})
async def get_song(song_id: str, _: CurrentUserDep, session: SessionDep) -> SongResponse:
    song = await SongRepository(session).get_active(song_id)
    if song is None:
        raise HTTPException(status_code=404, detail="Song not found")
    return SongResponse(song=await present_song(session, song))


@router.get("/{song_id}/versions", response_model=SongVersionsResponse, summary="Song Versions")
async def song_versions(song_id: str, current: CurrentUserDep, session: SessionDep) -> SongVersionsResponse:
    """
    Active variants of a song the current user may listen to. A song without
    variants is its own only version.
    """
    repo = SongRepository(session)
    song = await repo.get_active(song_id)
    if song is None:
        raise HTTPException(status_code=404, detail="Song not found")

    allowed = current.allowed_voice_types()
    children = (await repo.active_children_of([song.id])).get(song.id, [])
    candidates = children if children else [song]
    versions = [SongSummary.model_validate(version) for version in candidates if _voice_visible(version, allowed)]
    return SongVersionsResponse(versions=versions)


@router.patch("/{song_id}", response_model=SongResponse, summary="Update Song")
async def update_song(song_id: str, payload: SongUpdate, current: CurrentUserDep, session: SessionDep) -> SongResponse:
    repo = SongRepository(session)
    song = await repo.get_active(song_id)
    if song is None:
        raise HTTPException(status_code=404, detail="Song not found")
    _check_song_owner(song, current)
    song = await repo.update(song, payload.model_dump(exclude_unset=True))
    logger.info(f"Song {song.id} updated by {current.id}")
    return SongResponse(song=await present_song(session, song))


@router.delete("/{song_id}", response_model=MessageResponse, summary="Delete Song")
async def delete_song(song_id: str, current: CurrentUserDep, session: SessionDep) -> MessageResponse:
    """Soft delete. Deleting a container also deactivates its variants; files stay on disk."""
    repo = SongRepository(session)
    song = await repo.get_active(song_id)
    if song is None:
        raise HTTPException(status_code=404, detail="Song not found")
    _check_song_owner(song, current)
    count = await repo.deactivate(song)
    await session.commit()
    logger.info(f"Song {song.id} deleted by {current.id} ({count} rows deactivated)")
    return MessageResponse(message="Song deleted successfully")
