"""
Health and version I/O models.
"""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"


class ReadinessResponse(BaseModel):
    status: Literal["ok", "degraded"]
    database: Literal["ok", "unavailable"]


class VersionResponse(BaseModel):
    version: str
    schema_version: str
