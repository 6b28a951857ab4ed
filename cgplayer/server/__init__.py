"""
cgplayer Server Package.

This package contains the web server implementation for cgplayer.
It includes the API definition, middleware, service logic, and configuration.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration and fixed constants.
    services: Uploads, streaming, seeding and maintenance logic.
    middleware: Request logging and rate limiting.
    exception_handlers: Global and validation error handlers.
"""
