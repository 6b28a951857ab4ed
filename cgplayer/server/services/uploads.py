"""
Upload storage.

File-system side of song and playlist image uploads:

- folder and file naming (``<normalized-title>_<ms>/<title>_<voice>.<ext>``)
- audio / image allow-list checks
- streaming an ``UploadFile`` to disk with a size limit
- best-effort cleanup of written files and of the song folder
- reading the audio duration with mutagen

Nothing here touches the database. The upload routes write files first,
then commit their rows, and call the cleanup helpers on any failure.
"""

from __future__ import annotations

import re
import time
import unicodedata
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile
from mutagen import File as MutagenFile
from mutagen import MutagenError

from cgplayer.core.logging_config import get_logger
from cgplayer.server.core import constant

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-z0-9\-_.]")
_REPEATED_UNDERSCORES = re.compile(r"_+")
_COPY_CHUNK_SIZE = 1024 * 1024

# Suffix of files still being written; never produced by generate_file_name
TEMPORARY_SUFFIX = ".part"


class UploadRejected(Exception):
    """An upload failed validation; ``message`` is safe to return to the client."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def normalize_file_name(name: str) -> str:
    """Turn a title into a file-system safe token.

    Diacritics are stripped, the text is lowercased, every character outside
    ``[a-z0-9-_.]`` becomes ``_``, runs of ``_`` collapse and leading or
    trailing ``_`` are removed.

    >>> normalize_file_name("Canción de Paz!")
    'cancion_de_paz'
    """
    decomposed = unicodedata.normalize("NFD", name)
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = _UNSAFE_CHARS.sub("_", without_marks.lower())
    return _REPEATED_UNDERSCORES.sub("_", cleaned).strip("_")


def voice_file_word(voice_type: Optional[str]) -> Optional[str]:
    """Word used for a voice type in file names; None for ORIGINAL or no voice."""
    if not voice_type:
        return None
    key = voice_type.upper()
    if key == "ORIGINAL":
        return None
    return constant.VOICE_FILE_NAMES.get(key, key.lower())


def generate_file_name(title: str, voice_type: Optional[str] = None, extension: Optional[str] = None) -> str:
    """Stored file name for a song file: ``<title>_<voice><ext>``.

    Args:
        title: Song title
        voice_type: Voice type of the file; ORIGINAL or None leaves the voice part out
        extension: File extension with or without the leading dot (default ``.m4a``)
    """
    ext = (extension or constant.DEFAULT_AUDIO_EXTENSION).lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    base = normalize_file_name(title) or "song"
    voice = voice_file_word(voice_type)
    return f"{base}_{voice}{ext}" if voice else f"{base}{ext}"


def song_folder_name(title: str, timestamp_ms: Optional[int] = None) -> str:
    """Per-upload folder name: normalized title plus a millisecond timestamp."""
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    return f"{normalize_file_name(title) or 'song'}_{stamp}"


def file_extension(filename: Optional[str]) -> str:
    return Path(filename or "").suffix.lower()


def is_allowed_audio(content_type: Optional[str], filename: Optional[str]) -> bool:
    """Accept by MIME type OR by extension."""
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    return mime in constant.ALLOWED_AUDIO_MIME_TYPES or file_extension(filename) in constant.ALLOWED_AUDIO_EXTENSIONS


def is_allowed_image(content_type: Optional[str], filename: Optional[str]) -> bool:
    """Images must match both the MIME and the extension allow-lists."""
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    return mime in constant.ALLOWED_IMAGE_MIME_TYPES and file_extension(filename) in constant.ALLOWED_IMAGE_EXTENSIONS


def read_duration(path: Path) -> Optional[int]:
    """Audio length in whole seconds, or None when the metadata cannot be read."""
    try:
        metadata = MutagenFile(str(path))
    except (MutagenError, OSError) as e:
        logger.debug(f"mutagen could not read {path}: {e}")
        return None
    if metadata is None or getattr(metadata, "info", None) is None:
        logger.debug(f"mutagen found no audio metadata in {path}")
        return None
    length = getattr(metadata.info, "length", None)
    return int(round(length)) if length else None


class UploadStorage:
    """Upload directory layout rooted at ``UPLOAD_DIR``."""

    def __init__(self, root: Path | str, max_file_size: int, max_image_size: int) -> None:
        self.root = Path(root)
        self.max_file_size = max_file_size
        self.max_image_size = max_image_size

    @property
    def songs_root(self) -> Path:
        return self.root / constant.SONGS_DIR_NAME

    @property
    def playlists_root(self) -> Path:
        return self.root / constant.PLAYLISTS_DIR_NAME

    def create_song_folder(self, title: str) -> tuple[str, Path]:
        """Create a fresh folder for one upload.

        Returns:
            The folder name and its absolute path
        """
        folder_name = song_folder_name(title)
        folder = self.songs_root / folder_name
        suffix = 1
        while folder.exists():
            # Same title within the same millisecond
            folder = self.songs_root / f"{folder_name}_{suffix}"
            suffix += 1
        folder.mkdir(parents=True)
        logger.debug(f"Created song folder {folder}")
        return folder.name, folder

    def relative(self, path: Path) -> str:
        """Path relative to the upload root, with forward slashes."""
        return path.relative_to(self.root).as_posix()

    def resolve(self, relative_path: str) -> Path:
        return self.root / relative_path

    async def save(self, upload: UploadFile, destination: Path, max_size: Optional[int] = None) -> int:
        """Stream an upload to ``destination`` enforcing a size limit.

        Returns:
            Number of bytes written

        Raises:
            UploadRejected: The file is larger than the limit (the partial file is removed)
        """
        limit = max_size if max_size is not None else self.max_file_size
        written = 0
        with destination.open("wb") as handle:
            while True:
                chunk = await upload.read(_COPY_CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > limit:
                    break
                handle.write(chunk)
        if written > limit:
            self.cleanup_files([destination])
            raise UploadRejected(f"File {upload.filename} exceeds the maximum size of {limit} bytes")
        return written

    def rename(self, source: Path, target_name: str) -> Path:
        """Rename a file inside its folder; an existing target gets a numeric suffix."""
        target = source.with_name(target_name)
        counter = 1
        while target.exists() and target != source:
            target = source.with_name(f"{Path(target_name).stem}_{counter}{Path(target_name).suffix}")
            counter += 1
        source.rename(target)
        return target

    def cleanup_files(self, paths: Iterable[Path]) -> None:
        """Best-effort removal of written files."""
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove file {path}: {e}")

    def cleanup_folder(self, folder: Optional[Path]) -> None:
        """Remove a song folder if it is empty."""
        if folder is None or not folder.is_dir():
            return
        try:
            if not any(folder.iterdir()):
                folder.rmdir()
        except OSError as e:
            logger.warning(f"Could not remove folder {folder}: {e}")


def get_storage_for(settings) -> UploadStorage:
    """Build the storage for a ``Settings`` instance."""
    uploads = settings.uploads
    return UploadStorage(uploads.upload_dir, uploads.max_file_size, uploads.max_image_size)
