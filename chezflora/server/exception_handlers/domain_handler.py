"""
Domain Exception Handler.

Turns the ``ChezFloraError`` hierarchy raised by services into JSON error
responses carrying the status code declared by each exception class.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from chezflora.core.errors import AuthenticationError, ChezFloraError
from chezflora.core.logging_config import get_logger

logger = get_logger(__name__)


async def domain_exception_handler(request: Request, exc: ChezFloraError) -> JSONResponse:
    """
    Render a domain error as ``{"detail", "error_type"}``.

    Args:
        request: The HTTP request that raised the error
        exc: The domain exception

    Returns:
        JSONResponse with the exception's status code
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.error_type} in {request.method} {request.url.path}: {exc.detail}")
    else:
        logger.debug(f"{exc.error_type} in {request.method} {request.url.path}: {exc.detail}")

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_type": exc.error_type},
        headers=headers,
    )
