"""
Main Application Entry Point.

This module builds the FastAPI application: the database handle, middleware
(CORS, rate limiting, request logging), exception handlers and all API
routers. ``create_app`` is the factory; the module-level ``app`` is what
uvicorn serves.
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from cgplayer.core.database import Database
from cgplayer.core.logging_config import get_logger, setup_logging
from cgplayer.core.monitoring import initialize_logfire

from .api.v1 import admin, auth, dashboard, events, health, locations, lyrics, playlists, songs, users
from .core import constant
from .core.config import Settings
from .core.config import settings as default_settings
from .exception_handlers import setup_exception_handlers
from .middleware import RateLimitMiddleware, RequestLoggingMiddleware
from .services.seeding import bootstrap_default_data
from .services.uploads import get_storage_for

# Initialize logging
setup_logging(default_settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    This is the modern approach replacing the deprecated @app.on_event decorators.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # Startup
    try:
        logger.info(f"Starting up {constant.PROJECT_NAME} server...")
        if settings.database.create_all:
            await database.create_all()
            logger.info("Database tables ensured")
        if settings.bootstrap.enabled:
            await bootstrap_default_data(database, settings)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info(f"Shutting down {constant.PROJECT_NAME} server...")
    await database.dispose()


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration to run with; the environment-derived settings by default
        database: Database handle to use; built from ``settings`` by default

    Returns:
        The configured FastAPI application
    """
    settings = settings or default_settings
    if database is None:
        database = Database.from_url(settings.database.url, echo=settings.database.echo)

    app = FastAPI(
        title=constant.PROJECT_NAME,
        description="""
        cgplayer Server API

        Backend of the choir media player: accounts and roles, songs with voice
        variants, playlists, lyrics, locations and events, audio upload and streaming.
        """,
        version=constant.API_VERSION,
        openapi_url=f"{constant.API_PREFIX}/openapi.json",
        docs_url=f"{constant.API_PREFIX}/docs",
        redoc_url=f"{constant.API_PREFIX}/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.storage = get_storage_for(settings)

    # Starlette runs the last added middleware first
    app.add_middleware(RequestLoggingMiddleware)
    rate_limit = settings.rate_limit
    if rate_limit.enabled:
        app.add_middleware(
            RateLimitMiddleware,
            max_requests=rate_limit.max_requests,
            window_seconds=rate_limit.window_seconds,
        )
    cors = settings.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )

    setup_exception_handlers(app)
    initialize_logfire(app)

    app.include_router(health.router, prefix=constant.API_PREFIX, tags=["health"])
    app.include_router(auth.router, prefix=f"{constant.API_PREFIX}/auth", tags=["auth"])
    app.include_router(users.router, prefix=f"{constant.API_PREFIX}/users", tags=["users"])
    app.include_router(songs.router, prefix=f"{constant.API_PREFIX}/songs", tags=["songs"])
    app.include_router(playlists.router, prefix=f"{constant.API_PREFIX}/playlists", tags=["playlists"])
    app.include_router(lyrics.router, prefix=f"{constant.API_PREFIX}/lyrics", tags=["lyrics"])
    app.include_router(locations.router, prefix=f"{constant.API_PREFIX}/locations", tags=["locations"])
    app.include_router(events.router, prefix=f"{constant.API_PREFIX}/events", tags=["events"])
    app.include_router(admin.router, prefix=f"{constant.API_PREFIX}/admin", tags=["admin"])
    app.include_router(dashboard.router, prefix=f"{constant.API_PREFIX}/dashboard", tags=["dashboard"])

    app.mount("/uploads", StaticFiles(directory=settings.uploads.upload_dir, check_dir=False), name="uploads")

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    uvicorn.run(
        "cgplayer.server.main:app",
        host=default_settings.server_host,
        port=default_settings.server_port,
        log_level=default_settings.log_level.lower(),
    )
