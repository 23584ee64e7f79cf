"""Integration tests for health API endpoints.

Tests cover:
- Health check endpoint
- Readiness check endpoint with dependency status
- Root endpoint and common response headers
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from fastapi import FastAPI
    from httpx import AsyncClient

    from scanscore.core.config import Settings


pytestmark = pytest.mark.integration

PREFIX = "/api/v1/scanscore"


class TestHealthEndpoint:
    """Tests for GET /health."""

    async def test_health_returns_healthy(self, client: AsyncClient) -> None:
        """Should return healthy status."""
        response = await client.get(f"{PREFIX}/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "test"
        assert "version" in data
        assert "timestamp" in data

    async def test_sets_request_id_and_security_headers(self, client: AsyncClient) -> None:
        """Should echo a sane inbound request ID and add security headers."""
        response = await client.get(f"{PREFIX}/health", headers={"X-Request-ID": "probe-1"})

        assert response.headers["X-Request-ID"] == "probe-1"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "X-Process-Time" in response.headers


class TestReadinessEndpoint:
    """Tests for GET /ready."""

    async def test_disabled_dependencies_do_not_degrade(self, client: AsyncClient) -> None:
        """Should report healthy when Redis and the oracle are disabled."""
        response = await client.get(f"{PREFIX}/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["dependencies"] == {"redis": "disabled", "llm": "disabled"}

    async def test_missing_oracle_degrades(
        self,
        app: FastAPI,
        client: AsyncClient,
        settings: Settings,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Should report degraded when the oracle is enabled but not initialized."""
        monkeypatch.setattr(settings.llm, "enabled", True)
        app.state.llm_client = None

        response = await client.get(f"{PREFIX}/ready")

        data = response.json()
        assert data["status"] == "degraded"
        assert data["dependencies"]["llm"] == "unavailable"

    async def test_configured_oracle(
        self,
        app: FastAPI,
        client: AsyncClient,
        settings: Settings,
        mock_llm_client: object,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Should report the oracle as configured once initialized."""
        monkeypatch.setattr(settings.llm, "enabled", True)
        app.state.llm_client = mock_llm_client

        response = await client.get(f"{PREFIX}/ready")

        data = response.json()
        assert data["status"] == "healthy"
        assert data["dependencies"]["llm"] == "configured"


class TestRootEndpoint:
    """Tests for GET /."""

    async def test_root(self, client: AsyncClient) -> None:
        """Should describe the service without exposing docs outside development."""
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json() == {
            "service": "ScanScore Service",
            "version": "0.1.0",
            "docs": "disabled",
        }
