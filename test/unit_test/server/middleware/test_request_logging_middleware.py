"""
Unit tests for the request logging middleware.

This test suite covers:
- Request/response processing
- Performance header injection
- Slow request detection
- Error tracking
"""

import itertools
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request
from starlette.responses import Response

from cgplayer.server.middleware.request_logging import RequestLoggingMiddleware

MODULE = "cgplayer.server.middleware.request_logging"


def _mock_request(method: str = "GET", path: str = "/api/songs/") -> AsyncMock:
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.state = MagicMock()
    return request


class TestRequestLoggingMiddlewareDispatch:
    """Test RequestLoggingMiddleware.dispatch method."""

    async def test_middleware_processes_successful_request(self):
        """Successful requests are reported with their status code."""
        middleware = RequestLoggingMiddleware(app=AsyncMock())

        async def call_next(request):
            return Response(content="ok", status_code=200)

        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(_mock_request(), call_next)

        assert response.status_code == 200
        mock_log.assert_called_once()
        kwargs = mock_log.call_args[1]
        assert kwargs["method"] == "GET"
        assert kwargs["path"] == "/api/songs/"
        assert kwargs["status_code"] == 200
        assert kwargs["duration_ms"] >= 0

    async def test_middleware_adds_process_time_header(self):
        middleware = RequestLoggingMiddleware(app=AsyncMock())

        async def call_next(request):
            return Response(status_code=204)

        with patch(f"{MODULE}.log_api_request"):
            response = await middleware.dispatch(_mock_request("DELETE"), call_next)

        assert float(response.headers["X-Process-Time"]) >= 0

    async def test_middleware_warns_about_slow_requests(self):
        middleware = RequestLoggingMiddleware(app=AsyncMock())

        async def call_next(request):
            return Response(status_code=200)

        with patch(f"{MODULE}.log_api_request"), patch(f"{MODULE}.logger") as mock_logger, patch(
            f"{MODULE}.time.time", side_effect=itertools.count(0.0, 2.5)
        ):
            await middleware.dispatch(_mock_request(), call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]
        assert mock_logger.warning.call_args[1]["extra"]["duration_ms"] >= 2500.0

    async def test_middleware_reports_and_reraises_errors(self):
        middleware = RequestLoggingMiddleware(app=AsyncMock())

        async def call_next(request):
            raise RuntimeError("boom")

        with patch(f"{MODULE}.log_api_request") as mock_log, patch(f"{MODULE}.logger") as mock_logger:
            with pytest.raises(RuntimeError, match="boom"):
                await middleware.dispatch(_mock_request("POST", "/api/songs/upload"), call_next)

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[1]["extra"]["error"] == "boom"
        assert mock_log.call_args[1]["status_code"] == 500


async def test_every_response_carries_process_time(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert "x-process-time" in response.headers
