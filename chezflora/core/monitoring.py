"""
Logfire tracing for the storefront.

Logfire is opt-in (``LOGFIRE_ENABLED`` plus a ``LOGFIRE_TOKEN``). Whether or
not it is active, every helper here also writes to the standard logger, so
business events and errors show up in the console and log file either way.
"""

import logging
import os
from contextlib import nullcontext
from typing import Any, ContextManager, Dict, Optional

import logfire
from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


LOGFIRE_ENABLED = _flag("LOGFIRE_ENABLED", "false")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "chezflora-server")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "1.0.0")
LOGFIRE_TRACE_SQLALCHEMY = _flag("LOGFIRE_TRACE_SQLALCHEMY", "true")
LOGFIRE_TRACE_FASTAPI = _flag("LOGFIRE_TRACE_FASTAPI", "true")

_logfire_active = False


def is_logfire_active() -> bool:
    return _logfire_active


def _instrument(label: str, enabled: bool, hook, **kwargs: Any) -> None:
    # Instrumentation failures are logged and skipped
    if not enabled:
        return
    try:
        hook(**kwargs)
    except Exception as e:
        logger.warning(f"Logfire {label} instrumentation failed: {e}")
    else:
        logger.info(f"Logfire {label} instrumentation enabled")


def initialize_logfire(app: Optional[FastAPI] = None) -> bool:
    """
    Configure Logfire and instrument SQLAlchemy and the FastAPI app.

    Returns:
        True when Logfire is now active; False when it is disabled, has no
        token, or ``logfire.configure`` failed.
    """
    global _logfire_active

    if not LOGFIRE_ENABLED:
        logger.info("Logfire disabled (LOGFIRE_ENABLED is not set)")
        return False
    if not LOGFIRE_TOKEN:
        logger.warning("LOGFIRE_ENABLED is set without LOGFIRE_TOKEN; tracing stays off")
        return False

    try:
        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )
    except Exception as e:
        logger.error(f"Logfire configuration failed: {e}", exc_info=True)
        return False

    _instrument("SQLAlchemy", LOGFIRE_TRACE_SQLALCHEMY, logfire.instrument_sqlalchemy)
    _instrument("FastAPI", LOGFIRE_TRACE_FASTAPI and app is not None, logfire.instrument_fastapi, app=app)

    _logfire_active = True
    logger.info(f"Logfire active for {LOGFIRE_SERVICE_NAME} ({LOGFIRE_ENVIRONMENT})")
    return True


def business_span(name: str, **attributes: Any) -> ContextManager[Any]:
    """Span around a multi-step business operation; a no-op while Logfire is off."""
    if _logfire_active:
        return logfire.span(name, **attributes)
    return nullcontext()


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    logger.debug(f"{method} {path} -> {status_code} in {duration_ms:.2f}ms")
    if _logfire_active:
        logfire.info(
            "{method} {path} -> {status_code}",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )


def log_business_event(event: str, **attributes: Any) -> None:
    """
    Record a storefront event such as ``order.created`` or ``quote.sent``.

    Attribute values should be plain ids, statuses or stringified amounts.
    """
    rendered = ", ".join(f"{k}={v}" for k, v in attributes.items())
    logger.info(f"Business event {event}: {rendered}")
    if _logfire_active:
        logfire.info("Business event {event}", event=event, **attributes)


def log_error(error_type: str, error_message: str, context: Optional[Dict[str, Any]] = None) -> None:
    context = context or {}
    logger.error(f"{error_type}: {error_message} context={context}")
    if _logfire_active:
        logfire.error("{error_type}: {error_message}", error_type=error_type, error_message=error_message, **context)
