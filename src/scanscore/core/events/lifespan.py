"""Application lifespan event handlers.

This module defines the lifespan context manager that handles:
- Application startup: logging, Redis, oracle client, Open Food Facts client,
  services and the scan history repository
- Application shutdown: close clients and connections

Everything except settings is optional. A missing dependency leaves the
matching ``app.state`` attribute as ``None`` and the routes that need it
answer 503.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from scanscore.cache.redis import close_redis, init_redis
from scanscore.clients.open_food_facts import OpenFoodFactsClient
from scanscore.core.config import Settings, get_settings
from scanscore.llm.client.fallback import FallbackLLMClient
from scanscore.llm.client.ollama import OllamaClient
from scanscore.llm.client.openai import OpenAIClient
from scanscore.observability.logging import get_logger, setup_logging
from scanscore.services.analysis import AnalysisService
from scanscore.services.comparison import ComparisonService
from scanscore.services.history import (
    InMemoryScanHistoryRepository,
    RedisScanHistoryRepository,
)


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI
    from redis.asyncio import Redis

    from scanscore.llm.client.protocol import LLMClientProtocol
    from scanscore.services.history import ScanHistoryRepository

logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup."""
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
        log_file=settings.logging.file,
    )

    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    cache_client = await _init_cache(settings)
    app.state.cache_client = cache_client

    llm_client: LLMClientProtocol | None = None
    if settings.llm.enabled:
        try:
            llm_client = await _init_llm_client(settings, cache_client)
        except Exception:
            logger.exception("Failed to initialize LLM client - analysis unavailable")
    app.state.llm_client = llm_client

    off_client = OpenFoodFactsClient(
        settings.open_food_facts.url,
        timeout=settings.open_food_facts.timeout,
        user_agent=settings.open_food_facts.user_agent,
        cache_client=cache_client,
        cache_ttl=settings.open_food_facts.cache_ttl,
    )
    await off_client.initialize()
    app.state.off_client = off_client

    app.state.analysis_service = AnalysisService(
        llm_client,
        off_client,
        max_alternatives=settings.analysis.max_alternatives,
        enrich_images=settings.analysis.enrich_alternative_images,
        image_lookup_timeout=settings.open_food_facts.image_lookup_timeout,
    )
    app.state.comparison_service = ComparisonService(
        llm_client,
        off_client if settings.comparison.enrich_nutrition else None,
        oracle_timeout=settings.comparison.oracle_timeout,
        lookup_timeout=settings.open_food_facts.image_lookup_timeout,
    )
    app.state.history_repository = _init_history(settings, cache_client)

    logger.info("Application startup complete")


async def _init_cache(settings: Settings) -> Redis[Any] | None:
    """Connect to Redis; the service runs without it."""
    if not settings.redis.enabled:
        logger.info("Redis disabled - caching off, in-memory history")
        return None
    try:
        return await init_redis()
    except Exception:
        logger.exception("Failed to initialize Redis - continuing without cache")
        return None


async def _init_llm_client(
    settings: Settings,
    cache_client: Redis[Any] | None,
) -> LLMClientProtocol:
    """Build the configured provider, wrapped in a FallbackLLMClient."""
    llm = settings.llm
    llm_cache = cache_client if llm.cache.enabled else None

    def build(provider: str) -> LLMClientProtocol:
        if provider == "openai":
            return OpenAIClient(
                api_key=settings.OPENAI_API_KEY,
                model=llm.openai.model,
                base_url=llm.openai.url,
                timeout=llm.openai.timeout,
                max_retries=llm.openai.max_retries,
                cache_client=llm_cache,
                cache_ttl=llm.cache.ttl,
                cache_enabled=llm.cache.enabled,
                requests_per_minute=llm.openai.requests_per_minute,
            )
        if provider == "ollama":
            return OllamaClient(
                base_url=llm.ollama.url,
                model=llm.ollama.model,
                timeout=llm.ollama.timeout,
                max_retries=llm.ollama.max_retries,
                cache_client=llm_cache,
                cache_ttl=llm.cache.ttl,
                cache_enabled=llm.cache.enabled,
            )
        msg = f"Unknown LLM provider: {provider}"
        raise ValueError(msg)

    primary = build(llm.provider)
    secondary: LLMClientProtocol | None = None
    if llm.fallback.enabled and llm.fallback.secondary_provider != llm.provider:
        secondary = build(llm.fallback.secondary_provider)

    client = FallbackLLMClient(
        primary=primary,
        secondary=secondary,
        fallback_enabled=llm.fallback.enabled,
    )
    await client.initialize()

    logger.info(
        "LLM client initialized",
        primary_provider=llm.provider,
        fallback_enabled=llm.fallback.enabled,
        has_fallback=secondary is not None,
    )
    return client


def _init_history(
    settings: Settings,
    cache_client: Redis[Any] | None,
) -> ScanHistoryRepository:
    history = settings.history
    if history.backend == "redis" and cache_client is not None:
        logger.info("Scan history stored in Redis", key_prefix=history.key_prefix)
        return RedisScanHistoryRepository(
            cache_client,
            key_prefix=history.key_prefix,
            max_entries=history.max_entries,
        )
    if history.backend == "redis":
        logger.warning("Redis unavailable - scan history kept in memory")
    return InMemoryScanHistoryRepository(max_entries=history.max_entries)


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services."""
    logger.info("Shutting down application")

    off_client = getattr(app.state, "off_client", None)
    if off_client is not None:
        await off_client.shutdown()

    llm_client = getattr(app.state, "llm_client", None)
    if llm_client is not None:
        await llm_client.shutdown()
        logger.debug("LLM client shutdown")

    await close_redis()
    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings = get_settings()
    await _startup(app, settings)
    yield
    await _shutdown(app)
