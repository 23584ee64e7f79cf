"""Shared test fixtures and configuration for the ScanScore service tests.

The test environment is selected before any ``scanscore`` import so that the
settings (and the module level rate limiter built from them) load the
``config/environments/test`` overrides: no Redis, no oracle, in-memory
history and rate limiting disabled.
"""

from __future__ import annotations

import os


os.environ["APP_ENV"] = "test"

from collections.abc import AsyncIterator, Callable  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402

from scanscore.core.config import Settings, get_settings  # noqa: E402
from scanscore.factory import create_app  # noqa: E402
from scanscore.llm.models import LLMCompletionResult  # noqa: E402
from scanscore.services.history import InMemoryScanHistoryRepository  # noqa: E402
from tests.factories.scan import make_scan_result  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    """Settings of the test environment."""
    return get_settings()


@pytest.fixture
def completion() -> Callable[[str], LLMCompletionResult]:
    """Build an oracle completion carrying ``raw`` as its text."""

    def _build(raw: str) -> LLMCompletionResult:
        return LLMCompletionResult(raw_response=raw, model="test-model")

    return _build


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """Oracle double; tests set ``generate.return_value`` or ``side_effect``."""
    client = MagicMock()
    client.generate = AsyncMock()
    client.generate_structured = AsyncMock()
    client.initialize = AsyncMock()
    client.shutdown = AsyncMock()
    return client


@pytest.fixture
def mock_off_client() -> MagicMock:
    """Open Food Facts double returning nothing by default."""
    client = MagicMock()
    client.get_product = AsyncMock(return_value=None)
    client.search_product = AsyncMock(return_value=None)
    client.find_product_image = AsyncMock(return_value=None)
    client.find_nutrition = AsyncMock(return_value=None)
    return client


@pytest.fixture
def scan_result_factory() -> Callable[..., Any]:
    return make_scan_result


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Application without lifespan; tests attach services to ``app.state``."""
    application = create_app(settings)
    application.state.history_repository = InMemoryScanHistoryRepository(
        max_entries=settings.history.max_entries
    )
    application.state.analysis_service = None
    application.state.comparison_service = None
    application.state.llm_client = None
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client bound to the app through ``httpx.ASGITransport``."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
