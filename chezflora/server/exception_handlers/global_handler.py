"""
Fallback exception handlers.

Anything a service did not translate into a ``ChezFloraError`` ends up here:

- ``IntegrityError``: a unique constraint lost a race (two sign-ups with the
  same email, the same product favorited twice at once) and becomes a 409
- any other exception is a bug; it is logged with an error id and the request
  context, reported to monitoring and answered with a 500 quoting that id
"""

import uuid
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from chezflora.core.errors import ChezFloraError
from chezflora.core.logging_config import get_logger
from chezflora.core.monitoring import log_error

from .domain_handler import domain_exception_handler

logger = get_logger(__name__)


def _request_context(request: Request) -> Dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "query_params": dict(request.query_params),
        "client": request.client.host if request.client else "unknown",
    }


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error in {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={"detail": "The request conflicts with existing data", "error_type": "ConflictError"},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all handler for exceptions no other handler claimed.

    The ``error_id`` in the body matches the one in the log line so a
    customer report can be traced back to its stack trace.
    """
    error_id = uuid.uuid4().hex
    error_type = type(exc).__name__
    context = _request_context(request)

    logger.error(
        f"Unhandled exception [{error_id}] in {context['method']} {context['path']}: {exc}",
        exc_info=exc,
        extra={"error_id": error_id, "error_type": error_type, **context},
    )
    log_error(error_type, str(exc), {"error_id": error_id, "path": context["path"]})

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_id": error_id, "error_type": error_type},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the domain, integrity and catch-all handlers on ``app``."""
    app.add_exception_handler(ChezFloraError, domain_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
