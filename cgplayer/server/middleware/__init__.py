"""
Middleware modules for the cgplayer server.

This package contains custom middleware for request/response logging and
per-client rate limiting.
"""

from .rate_limit import RateLimitMiddleware
from .request_logging import RequestLoggingMiddleware

__all__ = ["RateLimitMiddleware", "RequestLoggingMiddleware"]
