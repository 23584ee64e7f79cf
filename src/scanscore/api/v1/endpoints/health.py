"""Health check endpoints.

Provides liveness and readiness probes for orchestrators and load balancers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from scanscore.cache.redis import check_redis_health
from scanscore.core.config import Settings, get_settings
from scanscore.schemas.enums import HealthStatus
from scanscore.schemas.health import HealthResponse, ReadinessResponse


router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Basic health check to verify the service is running.",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Check if the service is alive. External dependencies are not checked."""
    return HealthResponse(
        status=HealthStatus.HEALTHY,
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Readiness check reporting the state of Redis and the scoring oracle.",
)
async def readiness_check(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ReadinessResponse:
    """Check if the service is ready to handle requests.

    Disabled dependencies are reported but do not degrade the status.
    """
    dependencies: dict[str, str] = {}
    degraded = False

    if settings.redis.enabled:
        dependencies["redis"] = await check_redis_health()
        degraded = dependencies["redis"] != "healthy"
    else:
        dependencies["redis"] = "disabled"

    if settings.llm.enabled:
        has_llm = getattr(request.app.state, "llm_client", None) is not None
        dependencies["llm"] = "configured" if has_llm else "unavailable"
        degraded = degraded or not has_llm
    else:
        dependencies["llm"] = "disabled"

    return ReadinessResponse(
        status=HealthStatus.DEGRADED if degraded else HealthStatus.HEALTHY,
        version=settings.app.version,
        environment=settings.APP_ENV,
        dependencies=dependencies,
    )
