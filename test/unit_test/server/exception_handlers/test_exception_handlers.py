"""
Unit tests for server exception handlers.

Tests cover the global 500 handler, request validation reported as 400 and
the JSON 404 for unknown API routes.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from cgplayer.server.exception_handlers import setup_exception_handlers
from cgplayer.server.exception_handlers.global_handler import (
    api_not_found_handler,
    global_exception_handler,
    validation_exception_handler,
)

MODULE = "cgplayer.server.exception_handlers.global_handler"


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/songs/abc"
    request.query_params = {}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    async def test_exception_handler_logs_error(self, mock_request):
        """Test that exception handler logs errors."""
        exc = ValueError("Test error")

        with patch(f"{MODULE}.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

            mock_logger.error.assert_called_once()
            call_args = mock_logger.error.call_args
            assert "Unhandled exception" in call_args[0][0]
            assert call_args[1]["extra"]["error_type"] == "ValueError"

    async def test_exception_handler_returns_500_json(self, mock_request):
        exc = RuntimeError("Test error")

        with patch(f"{MODULE}.logger"):
            response = await global_exception_handler(mock_request, exc)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 500
        body = json.loads(response.body.decode())
        assert body["detail"] == "Internal server error"
        assert body["error_type"] == "RuntimeError"
        assert body["error_id"] == id(exc)

    async def test_exception_handler_without_client(self, mock_request):
        mock_request.client = None

        with patch(f"{MODULE}.logger") as mock_logger:
            await global_exception_handler(mock_request, KeyError("x"))

        assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"

    async def test_exception_handler_forwards_to_monitoring(self, mock_request):
        with patch(f"{MODULE}.logger"), patch(f"{MODULE}.log_error") as mock_log_error:
            await global_exception_handler(mock_request, RuntimeError("disk full"))

        mock_log_error.assert_called_once()
        assert mock_log_error.call_args[0][:2] == ("RuntimeError", "disk full")


class TestValidationExceptionHandler:
    async def test_returns_400_with_errors(self, mock_request):
        exc = RequestValidationError([{"loc": ("body", "email"), "msg": "field required", "type": "missing"}])

        response = await validation_exception_handler(mock_request, exc)

        assert response.status_code == 400
        body = json.loads(response.body.decode())
        assert body["detail"] == "Validation error"
        assert body["errors"][0]["loc"] == ["body", "email"]


class TestApiNotFoundHandler:
    async def test_unknown_api_route(self, mock_request):
        response = await api_not_found_handler(mock_request, StarletteHTTPException(status_code=404))

        assert response.status_code == 404
        assert json.loads(response.body.decode()) == {"detail": "API route not found"}

    async def test_handler_raised_404_keeps_its_detail(self, mock_request):
        exc = StarletteHTTPException(status_code=404, detail="Song not found")

        response = await api_not_found_handler(mock_request, exc)

        assert json.loads(response.body.decode()) == {"detail": "Song not found"}

    async def test_paths_outside_api_keep_default(self, mock_request):
        mock_request.url.path = "/uploads/missing.png"

        response = await api_not_found_handler(mock_request, StarletteHTTPException(status_code=404))

        assert json.loads(response.body.decode()) == {"detail": "Not Found"}


class TestSetupExceptionHandlers:
    @pytest.fixture
    def app(self) -> FastAPI:
        app = FastAPI()
        setup_exception_handlers(app)

        @app.get("/api/items/{item_id}")
        async def get_item(item_id: int):
            if item_id == 0:
                raise HTTPException(status_code=404, detail="Item not found")
            if item_id < 0:
                raise RuntimeError("negative id")
            return {"id": item_id}

        return app

    @pytest.fixture
    async def client(self, app: FastAPI):
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    def test_handlers_registered(self, app: FastAPI):
        assert StarletteHTTPException in app.exception_handlers
        assert RequestValidationError in app.exception_handlers
        assert Exception in app.exception_handlers

    async def test_validation_error_is_400(self, client):
        response = await client.get("/api/items/abc")

        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Validation error"
        assert body["errors"][0]["loc"] == ["path", "item_id"]

    async def test_unknown_api_route_is_json_404(self, client):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"detail": "API route not found"}

    async def test_route_404_keeps_detail(self, client):
        response = await client.get("/api/items/0")

        assert response.status_code == 404
        assert response.json() == {"detail": "Item not found"}

    async def test_unhandled_error_is_500(self, client):
        with patch(f"{MODULE}.logger"):
            response = await client.get("/api/items/-1")

        assert response.status_code == 500
        body = response.json()
        assert body["detail"] == "Internal server error"
        assert body["error_type"] == "RuntimeError"
