"""Unit tests for Redis client module.

Tests cover:
- Connection pool initialization
- Connection pool closing
- Client getter
- Health checks
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import redis.asyncio as async_redis

import scanscore.cache.redis as redis_module
from scanscore.cache.redis import (
    check_redis_health,
    close_redis,
    get_cache_client,
    init_redis,
)


if TYPE_CHECKING:
    from collections.abc import Generator

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def reset_redis_globals() -> Generator[None]:
    """Reset Redis global state before and after each test."""
    redis_module._cache_pool = None
    redis_module._cache_client = None
    yield
    redis_module._cache_pool = None
    redis_module._cache_client = None


class TestInitRedis:
    """Tests for init_redis."""

    async def test_creates_client_and_pings(self) -> None:
        """Should build the pool from settings and verify connectivity."""
        mock_client = MagicMock()
        mock_client.ping = AsyncMock(return_value=True)

        with (
            patch.object(redis_module.ConnectionPool, "from_url") as from_url,
            patch.object(redis_module.redis, "Redis", return_value=mock_client),
        ):
            client = await init_redis()

        assert client is mock_client
        assert get_cache_client() is mock_client
        assert from_url.call_args.kwargs["decode_responses"] is True

    async def test_connection_failure_cleans_up(self) -> None:
        """Should close the pool and re-raise when Redis is unreachable."""
        mock_client = MagicMock()
        mock_client.ping = AsyncMock(side_effect=async_redis.ConnectionError("refused"))
        mock_client.aclose = AsyncMock()
        mock_pool = MagicMock()
        mock_pool.disconnect = AsyncMock()

        with (
            patch.object(redis_module.ConnectionPool, "from_url", return_value=mock_pool),
            patch.object(redis_module.redis, "Redis", return_value=mock_client),
            pytest.raises(async_redis.ConnectionError),
        ):
            await init_redis()

        mock_client.aclose.assert_awaited_once()
        mock_pool.disconnect.assert_awaited_once()
        assert redis_module._cache_client is None


class TestCloseRedis:
    """Tests for close_redis."""

    async def test_noop_when_not_initialized(self) -> None:
        """Should be safe to call without a connection."""
        await close_redis()

        assert redis_module._cache_client is None


class TestGetCacheClient:
    """Tests for get_cache_client."""

    def test_raises_before_init(self) -> None:
        """Should refuse to hand out a client before init_redis."""
        with pytest.raises(RuntimeError, match="not initialized"):
            get_cache_client()


class TestCheckRedisHealth:
    """Tests for check_redis_health."""

    async def test_not_initialized(self) -> None:
        assert await check_redis_health() == "not_initialized"

    async def test_healthy(self) -> None:
        mock_client = MagicMock()
        mock_client.ping = AsyncMock(return_value=True)
        redis_module._cache_client = mock_client

        assert await check_redis_health() == "healthy"

    async def test_unhealthy(self) -> None:
        mock_client = MagicMock()
        mock_client.ping = AsyncMock(side_effect=async_redis.TimeoutError("slow"))
        redis_module._cache_client = mock_client

        assert await check_redis_health() == "unhealthy"
