"""
Logging setup for the cgplayer server.

``setup_logging`` installs one console handler on the root logger, plus a
``cgplayer.log`` file handler when ``ENABLE_FILE_LOGGING`` is set, and pins
the levels of the cgplayer packages and of the noisy third-party loggers.
The level normally comes from ``CGPLAYER_LOG_LEVEL`` through the settings;
the format (``simple``, ``detailed`` or ``json``) and the file options are
read from the environment.
"""

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = os.getenv("LOG_FORMAT", "detailed")
LOG_FILE_DIR = os.getenv("LOG_FILE_DIR", "logs")
ENABLE_FILE_LOGGING = os.getenv("ENABLE_FILE_LOGGING", "false").lower() in ("true", "1", "yes")
LOG_FILE_NAME = "cgplayer.log"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"line": %(lineno)d, "message": "%(message)s"}'
)

# Route handlers and services log reads at DEBUG
MODULE_LOG_LEVELS = {
    "cgplayer.core": "INFO",
    "cgplayer.server": "INFO",
    "cgplayer.server.api": "DEBUG",
    "cgplayer.server.services": "DEBUG",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "python_multipart": "WARNING",
    "uvicorn.access": "INFO",
}


def _format_string(fmt: str) -> str:
    if fmt == "json":
        return JSON_FORMAT
    if fmt == "simple":
        return SIMPLE_FORMAT
    return DETAILED_FORMAT


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure logging for the server process. Safe to call more than once.

    Args:
        log_level: Console level; defaults to ``CGPLAYER_LOG_LEVEL`` or INFO
        log_format: ``simple``, ``detailed`` or ``json``; defaults to ``LOG_FORMAT``
        enable_file: Allow the file handler when ``ENABLE_FILE_LOGGING`` is set
    """
    level = (log_level or os.getenv("CGPLAYER_LOG_LEVEL", "INFO")).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(_format_string(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    file_logging = enable_file and ENABLE_FILE_LOGGING
    if file_logging:
        log_dir = Path(LOG_FILE_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(module_level)

    logging.getLogger(__name__).info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; call with ``__name__``."""
    return logging.getLogger(name)
