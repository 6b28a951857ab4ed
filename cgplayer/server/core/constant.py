"""
Application-wide constants.

Fixed values shared by the routers and services: API prefixes, upload
allow-lists and the voice type file-name table.
"""

PROJECT_NAME = "cgplayer"
API_PREFIX = "/api"
API_VERSION = "1.0.0"

SONGS_DIR_NAME = "songs"
PLAYLISTS_DIR_NAME = "playlists"

DEFAULT_AUDIO_EXTENSION = ".m4a"
DEFAULT_STREAM_MEDIA_TYPE = "audio/mpeg"

ALLOWED_AUDIO_MIME_TYPES = frozenset(
    {
        "audio/mpeg",
        "audio/mp3",
        "audio/mpeg3",
        "audio/x-mpeg-3",
        "audio/wav",
        "audio/wave",
        "audio/x-wav",
        "audio/ogg",
        "audio/vorbis",
        "audio/x-ogg",
        "audio/mp4",
        "audio/m4a",
        "audio/mp4a-latm",
        "audio/x-m4a",
        "audio/aac",
        "audio/aacp",
        "audio/x-aac",
        "audio/flac",
        "audio/x-flac",
        "audio/webm",
        "audio/3gpp",
        "audio/amr",
        "audio/basic",
        "audio/midi",
        "audio/x-midi",
        "audio/x-ms-wma",
        # Some mobile browsers send generic binary for recordings
        "application/octet-stream",
    }
)

ALLOWED_AUDIO_EXTENSIONS = frozenset(
    {".mp3", ".m4a", ".wav", ".ogg", ".aac", ".flac", ".wma", ".webm", ".3gp", ".amr"}
)

ALLOWED_IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"})
ALLOWED_IMAGE_EXTENSIONS = frozenset({".jpeg", ".jpg", ".png", ".gif", ".webp"})

AUDIO_MEDIA_TYPES = {
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".wma": "audio/x-ms-wma",
    ".webm": "audio/webm",
    ".3gp": "audio/3gpp",
    ".amr": "audio/amr",
}

# Voice type -> word used in stored file names
VOICE_FILE_NAMES = {
    "SOPRANO": "soprano",
    "MESOSOPRANO": "mesosoprano",
    "CONTRALTO": "contralto",
    "TENOR": "tenor",
    "BARITONO": "baritono",
    "BARITONE": "baritono",
    "BAJO": "bajo",
    "BASS": "bajo",
    "CORO": "coro",
}

STREAM_CHUNK_SIZE = 64 * 1024
STREAM_CACHE_CONTROL = "public, max-age=3600"

UNCATEGORIZED_EVENT_LABEL = "Sin categoría"
