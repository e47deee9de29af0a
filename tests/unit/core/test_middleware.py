"""
Unit Tests for Request Context Middleware.

Tests the RequestContextMiddleware functionality including:
- Request ID generation and propagation
- Source extraction from the X-Client-Source header
- Response timing headers
- Structlog context binding
"""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request
from starlette.responses import Response


class TestRequestContextMiddleware:
    """Tests for RequestContextMiddleware."""

    @pytest.fixture
    def middleware(self):
        from studynotes.core.middleware import RequestContextMiddleware

        return RequestContextMiddleware(MagicMock())

    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.headers = {}
        request.method = "GET"
        request.url = MagicMock()
        request.url.path = "/api/v1/notes"
        request.client = MagicMock()
        request.client.host = "127.0.0.1"
        request.state = MagicMock()
        return request

    # -------------------------------------------------------------------------
    # Source
    # -------------------------------------------------------------------------

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ({}, "web"),
            ({"X-Client-Source": "cli"}, "cli"),
            ({"X-Client-Source": "API"}, "api"),
            ({"X-Client-Source": "custom-client"}, "unknown"),
        ],
    )
    async def test_source_resolution(self, middleware, mock_request, header, expected):
        mock_request.headers = header

        async def call_next(request):
            assert request.state.source == expected
            return Response(content="OK", status_code=200)

        with patch("studynotes.core.middleware.structlog.contextvars") as mock_ctx:
            await middleware.dispatch(mock_request, call_next)

        assert mock_ctx.bind_contextvars.call_args[1]["source"] == expected

    # -------------------------------------------------------------------------
    # X-Request-ID
    # -------------------------------------------------------------------------

    async def test_propagates_incoming_request_id(self, middleware, mock_request):
        mock_request.headers = {"X-Request-ID": "abc-123"}

        async def call_next(request):
            return Response(content="OK", status_code=200)

        with patch("studynotes.core.middleware.structlog.contextvars") as mock_ctx:
            response = await middleware.dispatch(mock_request, call_next)

        assert response.headers["X-Request-ID"] == "abc-123"
        assert mock_request.state.request_id == "abc-123"
        assert mock_ctx.bind_contextvars.call_args[1]["request_id"] == "abc-123"

    async def test_generates_request_id_when_missing(self, middleware, mock_request):
        async def call_next(request):
            return Response(content="OK", status_code=200)

        with patch("studynotes.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(mock_request, call_next)

        assert len(response.headers["X-Request-ID"]) == 36

    async def test_sets_response_time_header(self, middleware, mock_request):
        async def call_next(request):
            return Response(content="OK", status_code=200)

        with patch("studynotes.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(mock_request, call_next)

        assert response.headers["X-Response-Time"].endswith("ms")

    async def test_context_cleared_when_handler_raises(self, middleware, mock_request):
        async def call_next(request):
            raise RuntimeError("boom")

        with patch("studynotes.core.middleware.structlog.contextvars") as mock_ctx:
            with pytest.raises(RuntimeError):
                await middleware.dispatch(mock_request, call_next)

        assert mock_ctx.clear_contextvars.call_count == 2
