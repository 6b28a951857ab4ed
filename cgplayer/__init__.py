"""cgplayer.

Backend for a choir media player: singer accounts with roles and voice types,
songs stored as voice variants of a common title, playlists, events with their
program and soloists, rehearsal locations and synchronized lyrics.

Core subpackages
----------------

- ``cgplayer.core``:

  - Logging and optional monitoring.
  - Password hashing and access tokens.
  - SQLModel entities, repositories and API schemas.

- ``cgplayer.server``:

  - The FastAPI application, its routers, middleware and services
    (audio uploads, streaming, seeding, maintenance).
"""
