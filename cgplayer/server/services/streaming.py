"""
Audio file streaming with HTTP Range support.

A request with ``Range: bytes=start-end`` gets ``206 Partial Content`` with
``Content-Range``, ``Accept-Ranges`` and the exact ``Content-Length``; any
other request gets the whole file with ``200`` and a one hour cache header.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Tuple

from fastapi import HTTPException, status
from fastapi.responses import FileResponse, Response, StreamingResponse

from cgplayer.core.logging_config import get_logger
from cgplayer.server.core import constant

logger = get_logger(__name__)


def parse_range_header(range_header: str, file_size: int) -> Optional[Tuple[int, int]]:
    """Parse a single ``bytes=`` range into inclusive ``(start, end)`` offsets.

    Supports ``start-end``, open ended ``start-`` and suffix ``-length`` forms.
    Only the first range of a multi-range header is honoured.

    Returns:
        The byte range, or None when the header is malformed or unsatisfiable
    """
    if not range_header or not range_header.startswith("bytes="):
        return None
    range_value = range_header.split("=", 1)[1].strip()
    if "," in range_value:
        range_value = range_value.split(",", 1)[0].strip()
    if "-" not in range_value:
        return None
    start_str, end_str = range_value.split("-", 1)
    try:
        if start_str == "":
            suffix_len = int(end_str)
            if suffix_len <= 0:
                return None
            start = max(file_size - min(suffix_len, file_size), 0)
            end = file_size - 1
        else:
            start = int(start_str)
            end = int(end_str) if end_str else file_size - 1
    except ValueError:
        return None
    end = min(end, file_size - 1)
    if start < 0 or start > end or start >= file_size:
        return None
    return start, end


def iter_file_range(path: Path, start: int, end: int, chunk_size: int = constant.STREAM_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the bytes ``start..end`` (inclusive) of a file."""
    with path.open("rb") as handle:
        handle.seek(start)
        remaining = end - start + 1
        while remaining > 0:
            chunk = handle.read(min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk


def media_type_for(path: Path) -> str:
    return constant.AUDIO_MEDIA_TYPES.get(path.suffix.lower(), constant.DEFAULT_STREAM_MEDIA_TYPE)


def safe_join(root: Path, *parts: str) -> Path:
    """Join path components below ``root``, refusing anything that escapes it."""
    for part in parts:
        if not part or part in (".", "..") or "/" in part or "\\" in part or "\x00" in part:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file path")
    candidate = root.joinpath(*parts)
    if root.resolve() not in candidate.resolve().parents:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file path")
    return candidate


def stream_audio(path: Path, range_header: Optional[str]) -> Response:
    """Build the response for an audio file request.

    Raises:
        HTTPException: 404 when the file does not exist
    """
    if not path.is_file():
        logger.warning(f"Audio file not found: {path}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audio file not found")

    file_size = path.stat().st_size
    media_type = media_type_for(path)

    if range_header:
        byte_range = parse_range_header(range_header, file_size)
        if byte_range is None:
            return Response(
                status_code=416,
                headers={"Content-Range": f"bytes */{file_size}"},
            )
        start, end = byte_range
        headers = {
            "Content-Range": f"bytes {start}-{end}/{file_size}",
            "Accept-Ranges": "bytes",
            "Content-Length": str(end - start + 1),
        }
        return StreamingResponse(
            iter_file_range(path, start, end),
            status_code=status.HTTP_206_PARTIAL_CONTENT,
            headers=headers,
            media_type=media_type,
        )

    return FileResponse(
        path,
        media_type=media_type,
        headers={
            "Accept-Ranges": "bytes",
            "Cache-Control": constant.STREAM_CACHE_CONTROL,
        },
    )
