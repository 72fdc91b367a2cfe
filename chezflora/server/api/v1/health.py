"""
Liveness, readiness and version endpoints, mounted at the root for load balancers.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.logging_config import get_logger
from chezflora.core.models.io import HealthResponse, ReadinessResponse, VersionResponse
from chezflora.server.core import constant

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, summary="Liveness")
async def health_check() -> HealthResponse:
    """The process is up and serving requests."""
    return HealthResponse(status="ok")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness",
    description="Runs a trivial query; answers 503 while the database is unreachable.",
    responses={503: {"description": "Database unavailable"}},
)
async def readiness(response: Response, session: AsyncSession = Depends(get_session)) -> ReadinessResponse:
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Readiness check failed: {e}")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="degraded", database="unavailable")
    return ReadinessResponse(status="ok", database="ok")


@router.get("/version", response_model=VersionResponse, summary="API Version")
async def version() -> VersionResponse:
    return VersionResponse(version=constant.API_VERSION, schema_version=constant.SCHEMA_VERSION)
