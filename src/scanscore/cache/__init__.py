"""Redis connection management and rate limiting."""

from scanscore.cache.rate_limit import (
    analysis_rate_limit,
    limiter,
    setup_rate_limiting,
)
from scanscore.cache.redis import (
    check_redis_health,
    close_redis,
    get_cache_client,
    init_redis,
)


__all__ = [
    "analysis_rate_limit",
    "check_redis_health",
    "close_redis",
    "get_cache_client",
    "init_redis",
    "limiter",
    "setup_rate_limiting",
]
