"""Redis-backed cache of oracle completions."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from scanscore.llm.models import LLMCompletionResult
from scanscore.observability.logging import get_logger


if TYPE_CHECKING:
    from pydantic import BaseModel
    from redis.asyncio import Redis


logger = get_logger(__name__)


class CompletionCache:
    """Stores raw completions keyed by provider, model, prompts and schema.

    Cache failures are logged and treated as misses. Only the raw text is
    stored; the caller re-parses it against its schema on a hit.
    """

    def __init__(
        self,
        provider: str,
        client: Redis[Any] | None,
        *,
        ttl: int = 3600,
        enabled: bool = True,
    ) -> None:
        self.provider = provider
        self.client = client
        self.ttl = ttl
        self.enabled = enabled and client is not None

    def key(
        self,
        *,
        model: str,
        system: str | None,
        prompt: str,
        schema: type[BaseModel] | None,
    ) -> str:
        schema_part = schema.__name__ if schema is not None else ""
        material = f"{self.provider}\x00{model}\x00{system or ''}\x00{prompt}\x00{schema_part}"
        digest = hashlib.sha256(material.encode()).hexdigest()[:24]
        return f"llm:{self.provider}:{digest}"

    async def get(self, key: str) -> LLMCompletionResult | None:
        if not self.enabled or self.client is None:
            return None
        try:
            payload = await self.client.get(key)
        except RedisError as e:
            logger.warning("Failed to read LLM cache", provider=self.provider, error=str(e))
            return None
        if not payload:
            return None
        logger.debug("LLM cache hit", provider=self.provider, cache_key=key)
        cached = LLMCompletionResult.model_validate_json(payload)
        return cached.model_copy(update={"cached": True, "parsed": None})

    async def set(self, key: str, result: LLMCompletionResult) -> None:
        if not self.enabled or self.client is None:
            return
        try:
            await self.client.set(
                key,
                result.model_dump_json(exclude={"parsed"}),
                ex=self.ttl,
            )
        except RedisError as e:
            logger.warning("Failed to write LLM cache", provider=self.provider, error=str(e))
