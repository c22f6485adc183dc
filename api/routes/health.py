"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from modules.gateway import USERS, GatewayError

from ..dependencies import ServiceContainer, get_container

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    backend: str
    gateway: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_container),
) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=container.settings.app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    container: ServiceContainer = Depends(get_container),
) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Runs a cheap count against the users collection.
    """
    backend = container.settings.gateway_backend
    try:
        await container.gateway.count_documents(USERS)
    except (GatewayError, RuntimeError) as e:
        logger.warning(f"Readiness check failed: {e}")
        return ReadinessResponse(status="degraded", backend=backend, gateway="unavailable")
    return ReadinessResponse(status="ready", backend=backend, gateway="connected")
