"""
cpdtrack Health Routes
======================

Health check endpoints for monitoring and orchestration.
Supports degraded mode when the database is unavailable.

Endpoints:
    GET /health          - Basic health (always returns)
    GET /health/live     - Liveness probe

Author: cpdtrack Team
Version: 1.0.0
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from cpdtrack.config import settings
from cpdtrack.api.dependencies import ServiceContainer


router = APIRouter(tags=["Health"])

# Track startup time for uptime calculation
_start_time = time.time()


class HealthResponse(BaseModel):
    """Service health and store backend."""
    status: str
    service: str
    version: str
    store: str
    uptime_seconds: float
    timestamp: datetime


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns service health and the active store backend.",
)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Status is ``degraded`` when no store backend is available.
    """
    container = ServiceContainer.get_instance()
    backend = container.backend

    return HealthResponse(
        status="healthy" if backend != "unavailable" else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        store=backend,
        uptime_seconds=round(time.time() - _start_time, 3),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/health/live", summary="Liveness Probe")
async def liveness() -> dict:
    """Always returns ok while the process is serving requests."""
    return {"status": "ok"}
