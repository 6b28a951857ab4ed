"""
Rate Limit Middleware for FastAPI.

Fixed-window counter per client IP over every ``/api`` request. Counters live
in process memory, so each worker process limits on its own.
"""

import asyncio
import math
import time
from typing import Callable, Dict, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from cgplayer.core.logging_config import get_logger
from cgplayer.server.core import constant

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed ``max_requests`` within ``window_seconds``."""

    def __init__(
        self,
        app,
        max_requests: int = 100,
        window_seconds: int = 900,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        # client -> (window start, requests seen in the window)
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    async def _hit(self, key: str) -> Tuple[bool, int]:
        """Count one request; returns whether it is allowed and the seconds until the window resets."""
        now = self._clock()
        async with self._lock:
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count)
            if len(self._windows) > 10_000:
                self._prune(now)
        retry_after = max(1, math.ceil(self.window_seconds - (now - started)))
        return count <= self.max_requests, retry_after

    def _prune(self, now: float) -> None:
        expired = [key for key, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not request.url.path.startswith(constant.API_PREFIX):
            return await call_next(request)

        key = self.client_key(request)
        allowed, retry_after = await self._hit(key)
        if not allowed:
            logger.warning(f"Rate limit exceeded for {key}: {request.method} {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={"detail": RATE_LIMIT_MESSAGE},
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
