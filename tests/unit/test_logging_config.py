"""Tests for structured logging configuration and request middleware."""

import json
import logging
import re
from collections.abc import Generator
from io import StringIO
from typing import Any
from unittest.mock import patch

import pytest
import structlog
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from tenant_edge.logging_config import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None]:
    """Reset structlog state after each test."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)


def _capture_log_output(
    environment: str,
    log_level: str = "DEBUG",
    secrets: tuple[str, ...] = (),
    **event: Any,
) -> str:
    """Configure logging, emit a message, return captured output."""
    configure_logging(environment=environment, log_level=log_level, secrets=secrets)

    stream = StringIO()
    root = logging.getLogger()
    if not root.handlers or not isinstance(root.handlers[0], logging.StreamHandler):
        raise RuntimeError("Expected configure_logging to set up a StreamHandler")

    original_stream = root.handlers[0].stream
    root.handlers[0].stream = stream

    logger = structlog.get_logger()
    logger.info("test_event", **(event or {"key": "value"}))

    root.handlers[0].stream = original_stream
    return stream.getvalue()


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_production_json(self) -> None:
        """Production environment produces valid JSON output."""
        output = _capture_log_output("production")
        parsed = json.loads(output)
        assert parsed["event"] == "test_event"
        assert parsed["key"] == "value"
        assert parsed["level"] == "info"

    def test_configure_development_console(self) -> None:
        """Development environment produces human-readable console output."""
        output = _capture_log_output("development")
        plain = re.sub(r"\x1b\[[0-9;]*m", "", output)
        assert "test_event" in plain
        assert "key=value" in plain

    def test_configure_sets_log_level(self) -> None:
        configure_logging(log_level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_configure_includes_timestamp(self) -> None:
        output = _capture_log_output("production")
        parsed = json.loads(output)
        assert "T" in parsed["timestamp"]

    def test_secrets_are_redacted(self) -> None:
        output = _capture_log_output(
            "production",
            internal_api_secret="s3cret",
            token="abc",
            hostname="acme.example.com",
        )
        parsed = json.loads(output)
        assert parsed["internal_api_secret"] == "***REDACTED***"
        assert parsed["token"] == "***REDACTED***"
        assert parsed["hostname"] == "acme.example.com"
        assert "s3cret" not in output

    def test_nested_header_values_redacted(self) -> None:
        output = _capture_log_output(
            "production",
            headers={"x-internal-secret": "s3cret", "accept": "text/plain"},
        )
        parsed = json.loads(output)
        assert parsed["headers"]["x-internal-secret"] == "***REDACTED***"
        assert parsed["headers"]["accept"] == "text/plain"

    def test_secret_value_masked_in_messages(self) -> None:
        output = _capture_log_output(
            "production",
            secrets=("s3cret",),
            error="Client error for header x-internal-secret: s3cret",
        )
        parsed = json.loads(output)
        assert "s3cret" not in output
        assert parsed["error"].endswith("***REDACTED***")

    def test_stdlib_records_share_context(self) -> None:
        configure_logging(environment="production", log_level="DEBUG")
        root = logging.getLogger()
        stream = StringIO()
        root.handlers[0].stream = stream

        structlog.contextvars.bind_contextvars(tenant_slug="acme")
        try:
            logging.getLogger("uvicorn.error").warning("worker booted")
        finally:
            structlog.contextvars.clear_contextvars()

        parsed = json.loads(stream.getvalue())
        assert parsed["event"] == "worker booted"
        assert parsed["tenant_slug"] == "acme"
        assert parsed["level"] == "warning"

    def test_noisy_libraries_quieted(self) -> None:
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING


class TestRequestLoggingMiddleware:
    """Tests for HTTP request logging middleware."""

    @pytest.fixture()
    def test_app(self) -> FastAPI:
        """Create a minimal FastAPI app with middleware for isolated testing."""
        from tenant_edge.api.middleware import RequestLoggingMiddleware

        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/test-endpoint")
        async def _test_endpoint() -> dict[str, str]:
            return {"ok": "true"}

        @app.get("/tenant-endpoint")
        async def _tenant_endpoint(request: Request) -> dict[str, str]:
            request.state.tenant = type("T", (), {"slug": "acme"})()
            return {"ok": "true"}

        @app.get("/healthz")
        async def _health() -> dict[str, str]:
            return {"status": "ok"}

        return app

    async def _get(self, app: FastAPI, path: str) -> None:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            await client.get(path)

    async def test_middleware_logs_request(self, test_app: FastAPI) -> None:
        """Middleware logs method, path, status_code, latency_ms."""
        with patch("tenant_edge.api.middleware.logger") as mock_logger:
            await self._get(test_app, "/test-endpoint")

        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "http_request"
        assert call_args[1]["method"] == "GET"
        assert call_args[1]["path"] == "/test-endpoint"
        assert call_args[1]["status_code"] == 200
        assert call_args[1]["tenant_slug"] is None
        assert "latency_ms" in call_args[1]

    async def test_middleware_logs_tenant(self, test_app: FastAPI) -> None:
        with patch("tenant_edge.api.middleware.logger") as mock_logger:
            await self._get(test_app, "/tenant-endpoint")

        assert mock_logger.info.call_args[1]["tenant_slug"] == "acme"

    async def test_middleware_skips_health(self, test_app: FastAPI) -> None:
        """Middleware does not log requests to /healthz."""
        with patch("tenant_edge.api.middleware.logger") as mock_logger:
            await self._get(test_app, "/healthz")

        mock_logger.info.assert_not_called()

    async def test_middleware_binds_request_context(self, test_app: FastAPI) -> None:
        seen: dict[str, Any] = {}

        @test_app.get("/context")
        async def _context() -> dict[str, str]:
            seen.update(structlog.contextvars.get_contextvars())
            return {"ok": "true"}

        await self._get(test_app, "/context")

        assert seen["method"] == "GET"
        assert seen["path"] == "/context"
