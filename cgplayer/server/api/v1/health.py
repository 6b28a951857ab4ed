"""
Health Check Endpoints.

This module provides basic system status endpoints (health, ping, version)
used for monitoring and deployment verification.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from cgplayer.server.core import constant

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/ping", response_class=PlainTextResponse, summary="Ping")
async def ping():
    return "pong"


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    """
    Get API version.

    Returns the current semantic version of the API.
    """
    return {"name": constant.PROJECT_NAME, "version": constant.API_VERSION}
