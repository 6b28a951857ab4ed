"""
Core utilities and configuration for cgplayer.

This package provides core functionality including logging configuration,
security helpers, database setup, and other shared utilities.
"""

from cgplayer.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
