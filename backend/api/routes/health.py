"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_container, ServiceContainer
from shared.config import get_settings
from shared.exceptions import NurooError

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    document_backend: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    container: ServiceContainer = Depends(get_container),
) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reads one document to confirm the document store is reachable.
    """
    backend = container.settings.document_backend
    try:
        await container.store.get("organizations", "__readiness__")
    except (NurooError, RuntimeError) as e:
        logger.warning(f"Readiness check failed: {e}")
        return ReadinessResponse(status="degraded", database="unavailable", document_backend=backend)
    return ReadinessResponse(status="ready", database="connected", document_backend=backend)
