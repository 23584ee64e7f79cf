"""Redis connection management.

A single connection pool backs the response caches (oracle, Open Food Facts)
and the scan history repository. Rate limiting talks to Redis through SlowAPI's
own storage and does not use this pool.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from scanscore.core.config import get_settings
from scanscore.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

_cache_pool: ConnectionPool[Any] | None = None
_cache_client: Redis[Any] | None = None


async def init_redis() -> Redis[Any]:
    """Create the cache pool and verify connectivity.

    Raises:
        redis.ConnectionError: If Redis cannot be reached.
    """
    global _cache_pool, _cache_client  # noqa: PLW0603

    settings = get_settings()
    logger.info(
        "Connecting to Redis",
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.cache_db,
    )

    _cache_pool = ConnectionPool.from_url(
        settings.redis_cache_url,
        max_connections=settings.redis.max_connections,
        decode_responses=True,
    )
    _cache_client = redis.Redis(connection_pool=_cache_pool)

    try:
        await _cache_client.ping()
    except redis.ConnectionError:
        logger.exception("Failed to connect to Redis")
        await close_redis()
        raise

    logger.info("Redis connection established")
    return _cache_client


async def close_redis() -> None:
    """Close the cache client and its pool."""
    global _cache_pool, _cache_client  # noqa: PLW0603

    if _cache_client is not None:
        await _cache_client.aclose()
        _cache_client = None
    if _cache_pool is not None:
        await _cache_pool.disconnect()
        _cache_pool = None
    logger.debug("Redis connection closed")


def get_cache_client() -> Redis[Any]:
    """Return the initialized cache client.

    Raises:
        RuntimeError: If ``init_redis`` has not run.
    """
    if _cache_client is None:
        msg = "Redis cache client not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _cache_client


async def check_redis_health() -> str:
    """Return ``healthy``, ``unhealthy`` or ``not_initialized``."""
    if _cache_client is None:
        return "not_initialized"
    try:
        await _cache_client.ping()
    except (redis.ConnectionError, redis.TimeoutError):
        return "unhealthy"
    return "healthy"
