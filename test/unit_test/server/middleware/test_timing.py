"""Unit tests for the request timing middleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from chezflora.server.middleware import RequestTimingMiddleware

pytestmark = pytest.mark.asyncio


def _app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestTimingMiddleware)

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    @app.get("/explode")
    async def explode():
        raise RuntimeError("boom")

    return app


async def test_adds_process_time_header_and_logs():
    with patch("chezflora.server.middleware.timing.log_api_request") as mock_log:
        async with AsyncClient(transport=ASGITransport(app=_app()), base_url="http://localhost") as client:
            response = await client.get("/ping")

    assert response.status_code == 200
    assert float(response.headers["X-Process-Time"]) >= 0
    mock_log.assert_called_once()
    kwargs = mock_log.call_args.kwargs
    assert kwargs["method"] == "GET"
    assert kwargs["path"] == "/ping"
    assert kwargs["status_code"] == 200


async def test_slow_request_warns():
    with (
        patch("chezflora.server.middleware.timing.SLOW_REQUEST_MS", -1),
        patch("chezflora.server.middleware.timing.logger") as mock_logger,
    ):
        async with AsyncClient(transport=ASGITransport(app=_app()), base_url="http://localhost") as client:
            await client.get("/ping")

    mock_logger.warning.assert_called_once()
    assert "Slow API request" in mock_logger.warning.call_args[0][0]


async def test_failure_is_logged_with_status_500_and_reraised():
    with (
        patch("chezflora.server.middleware.timing.log_api_request") as mock_log,
        patch("chezflora.server.middleware.timing.logger") as mock_logger,
    ):
        transport = ASGITransport(app=_app(), raise_app_exceptions=True)
        async with AsyncClient(transport=transport, base_url="http://localhost") as client:
            with pytest.raises(RuntimeError, match="boom"):
                await client.get("/explode")

    mock_logger.error.assert_called_once()
    assert mock_log.call_args.kwargs["status_code"] == 500
