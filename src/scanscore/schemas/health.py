"""Probe response models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field

from scanscore.schemas.base import APIResponse
from scanscore.schemas.enums import HealthStatus


class HealthResponse(APIResponse):
    """Liveness probe."""

    status: HealthStatus = HealthStatus.HEALTHY
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: str
    environment: str


class ReadinessResponse(HealthResponse):
    """Readiness probe with per-dependency status."""

    dependencies: dict[str, str] = Field(default_factory=dict)
