"""
Global Exception Handlers for the FastAPI Application.

This module provides:

- a global handler that catches all unhandled exceptions and logs detailed
  information including error ID, request context and full traceback
- a request validation handler that reports malformed input as ``400``
- a not-found handler that answers unknown ``/api`` routes with a JSON 404
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cgplayer.core.logging_config import get_logger
from cgplayer.core.monitoring import log_error
from cgplayer.server.core import constant

logger = get_logger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)
    context = {
        "error_id": error_id,
        "method": request.method,
        "path": request.url.path,
        "query_params": dict(request.query_params),
        "client": request.client.host if request.client else "unknown",
        "error_type": type(exc).__name__,
    }

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={**context, "traceback": traceback.format_exc()},
    )
    log_error(type(exc).__name__, str(exc), context)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as ``400`` with the individual errors."""
    errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
    logger.info(f"Validation error in {request.method} {request.url.path}: {len(errors)} error(s)")
    return JSONResponse(status_code=400, content={"detail": "Validation error", "errors": errors})


async def api_not_found_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unmatched routes under the API prefix get a JSON 404; everything else is handled as usual."""
    # Routing misses carry the default "Not Found" detail; handler-raised 404s keep their own
    if exc.status_code == 404 and exc.detail == "Not Found" and request.url.path.startswith(constant.API_PREFIX):
        return JSONResponse(status_code=404, content={"detail": "API route not found"})
    return await http_exception_handler(request, exc)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    This function should be called during application initialization to set up
    all custom exception handlers.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(StarletteHTTPException, api_not_found_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
