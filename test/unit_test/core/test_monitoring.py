"""Unit tests for the Logfire monitoring helpers."""

from unittest.mock import MagicMock, patch

from chezflora.core import monitoring


class TestInitializeLogfire:
    def test_disabled_by_default(self):
        with patch.object(monitoring, "LOGFIRE_ENABLED", False), patch.object(monitoring, "logfire") as mock_logfire:
            assert monitoring.initialize_logfire() is False
            mock_logfire.configure.assert_not_called()

    def test_enabled_without_token_warns(self):
        with (
            patch.object(monitoring, "LOGFIRE_ENABLED", True),
            patch.object(monitoring, "LOGFIRE_TOKEN", ""),
            patch.object(monitoring, "logger") as mock_logger,
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire() is False
            mock_logger.warning.assert_called_once()
            mock_logfire.configure.assert_not_called()

    def test_configure_failure_is_logged(self):
        with (
            patch.object(monitoring, "LOGFIRE_ENABLED", True),
            patch.object(monitoring, "LOGFIRE_TOKEN", "token"),
            patch.object(monitoring, "logger") as mock_logger,
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            mock_logfire.configure.side_effect = RuntimeError("boom")
            assert monitoring.initialize_logfire() is False
            mock_logger.error.assert_called_once()

    def test_instruments_app(self):
        app = MagicMock()
        with (
            patch.object(monitoring, "LOGFIRE_ENABLED", True),
            patch.object(monitoring, "LOGFIRE_TOKEN", "token"),
            patch.object(monitoring, "_logfire_active", False),
            patch.object(monitoring, "logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire(app) is True
            assert monitoring.is_logfire_active() is True
            mock_logfire.instrument_sqlalchemy.assert_called_once()
            mock_logfire.instrument_fastapi.assert_called_once_with(app=app)


def test_log_business_event_writes_to_logger():
    with patch.object(monitoring, "logger") as mock_logger, patch.object(monitoring, "_logfire_active", False):
        monitoring.log_business_event("order.created", order_id=7, total="57.80")
        message = mock_logger.info.call_args[0][0]
        assert "order.created" in message
        assert "order_id=7" in message


def test_log_business_event_forwards_to_logfire_when_active():
    with patch.object(monitoring, "logfire") as mock_logfire, patch.object(monitoring, "_logfire_active", True):
        monitoring.log_business_event("quote.sent", quote_id=3)
        mock_logfire.info.assert_called_once_with("Business event {event}", event="quote.sent", quote_id=3)


def test_log_error_includes_context():
    with patch.object(monitoring, "logger") as mock_logger, patch.object(monitoring, "_logfire_active", False):
        monitoring.log_error("ValueError", "bad input", {"path": "/api/v1/cart"})
        assert "/api/v1/cart" in mock_logger.error.call_args[0][0]


def test_log_api_request_debug_line():
    with patch.object(monitoring, "logger") as mock_logger, patch.object(monitoring, "_logfire_active", False):
        monitoring.log_api_request("GET", "/health", 200, 1.5)
        assert "GET /health -> 200" in mock_logger.debug.call_args[0][0]


def test_instrumentation_failure_does_not_block_activation():
    with (
        patch.object(monitoring, "LOGFIRE_ENABLED", True),
        patch.object(monitoring, "LOGFIRE_TOKEN", "token"),
        patch.object(monitoring, "_logfire_active", False),
        patch.object(monitoring, "logger") as mock_logger,
        patch.object(monitoring, "logfire") as mock_logfire,
    ):
        mock_logfire.instrument_sqlalchemy.side_effect = RuntimeError("no engine")
        assert monitoring.initialize_logfire() is True
        mock_logger.warning.assert_called_once()
        mock_logfire.instrument_fastapi.assert_not_called()


class TestBusinessSpan:
    def test_noop_when_inactive(self):
        with patch.object(monitoring, "logfire") as mock_logfire, patch.object(monitoring, "_logfire_active", False):
            with monitoring.business_span("order.checkout", user_id=1):
                pass
            mock_logfire.span.assert_not_called()

    def test_opens_logfire_span_when_active(self):
        with patch.object(monitoring, "logfire") as mock_logfire, patch.object(monitoring, "_logfire_active", True):
            with monitoring.business_span("order.checkout", user_id=1):
                pass
            mock_logfire.span.assert_called_once_with("order.checkout", user_id=1)
