"""HTTP client for a local or self-hosted Ollama instance.

Used as the development oracle and as the fallback provider. Vision models
(e.g. ``llama3.2-vision``) receive label photos through the ``images`` field.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar, cast

import httpx
from pydantic import BaseModel

from scanscore.llm.client.cache import CompletionCache
from scanscore.llm.exceptions import (
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from scanscore.llm.models import (
    LLMCompletionResult,
    OllamaGenerateRequest,
    OllamaGenerateResponse,
)
from scanscore.llm.parsing import parse_or_raise
from scanscore.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis


logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class OllamaClient:
    """Async client for Ollama ``POST /api/generate``.

    Structured output passes the schema's JSON schema as ``format``; the
    answer is still validated on our side.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: float = 60.0,
        max_retries: int = 1,
        cache_client: Redis[Any] | None = None,
        cache_ttl: int = 3600,
        cache_enabled: bool = False,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self._cache = CompletionCache(
            "ollama", cache_client, ttl=cache_ttl, enabled=cache_enabled
        )
        self._http_client: httpx.AsyncClient | None = None

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/api/generate"

    async def initialize(self) -> None:
        if self._http_client is not None:
            return
        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )
        logger.info(
            "OllamaClient initialized",
            base_url=self.base_url,
            model=self.model,
            timeout=self.timeout,
        )

    async def shutdown(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("OllamaClient shutdown")

    async def _execute_with_retry(
        self,
        request: OllamaGenerateRequest,
        context: str | None,
    ) -> OllamaGenerateResponse:
        if self._http_client is None:
            await self.initialize()
        assert self._http_client is not None

        last_exception: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                response = await self._http_client.post(
                    self.generate_url,
                    json=request.model_dump(exclude_none=True),
                )
                if response.status_code == 429:
                    msg = "Ollama rate limit exceeded"
                    raise LLMRateLimitError(msg)
                response.raise_for_status()
                return OllamaGenerateResponse.model_validate(response.json())

            except httpx.TimeoutException as e:
                last_exception = e
                logger.warning(
                    "Ollama request timeout",
                    attempt=attempt + 1,
                    timeout=self.timeout,
                    context=context,
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Ollama timeout after {self.timeout}s"
                raise LLMTimeoutError(msg) from e

            except httpx.HTTPStatusError as e:
                logger.error(
                    "Ollama request failed",
                    status_code=e.response.status_code,
                    context=context,
                )
                msg = f"Ollama returned {e.response.status_code}"
                raise LLMResponseError(msg) from e

            except httpx.RequestError as e:
                last_exception = e
                logger.warning(
                    "Ollama connection error",
                    attempt=attempt + 1,
                    error=str(e),
                    context=context,
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Cannot connect to Ollama: {e}"
                raise LLMUnavailableError(msg) from e

        msg = "Max retries exceeded"
        raise LLMUnavailableError(msg) from last_exception

    async def generate(
        self,
        prompt: str,
        *,
        model: str | None = None,
        system: str | None = None,
        schema: type[T] | None = None,
        images: list[str] | None = None,
        json_output: bool = False,
        options: dict[str, Any] | None = None,
        skip_cache: bool = False,
        context: str | None = None,
    ) -> LLMCompletionResult:
        """Run a generation. See ``LLMClientProtocol.generate``."""
        use_model = model or self.model

        use_cache = not skip_cache and not images
        cache_key = self._cache.key(model=use_model, system=system, prompt=prompt, schema=schema)
        if use_cache:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                if schema is None:
                    return cached
                return cached.model_copy(
                    update={"parsed": parse_or_raise(cached.raw_response, schema)}
                )

        format_spec: str | dict[str, Any] | None = None
        if schema is not None:
            format_spec = schema.model_json_schema()
        elif json_output:
            format_spec = "json"

        request = OllamaGenerateRequest(
            model=use_model,
            prompt=prompt,
            system=system,
            format=format_spec,
            images=images or None,
            options=options,
        )
        response = await self._execute_with_retry(request, context)
        if not response.response.strip():
            msg = "Ollama returned an empty completion"
            raise LLMResponseError(msg)

        parsed: Any = None
        if schema is not None:
            try:
                parsed = parse_or_raise(response.response, schema)
            except LLMValidationError:
                logger.warning(
                    "Failed to parse structured Ollama output",
                    schema=schema.__name__,
                    context=context,
                    raw_response=response.response[:500],
                )
                raise

        result = LLMCompletionResult(
            raw_response=response.response,
            parsed=parsed,
            model=response.model,
            prompt_tokens=response.prompt_eval_count,
            completion_tokens=response.eval_count,
        )
        if use_cache:
            await self._cache.set(cache_key, result)
        return result

    async def generate_structured(
        self,
        prompt: str,
        schema: type[T],
        *,
        model: str | None = None,
        system: str | None = None,
        images: list[str] | None = None,
        options: dict[str, Any] | None = None,
        skip_cache: bool = False,
        context: str | None = None,
    ) -> T:
        result = await self.generate(
            prompt,
            model=model,
            system=system,
            schema=schema,
            images=images,
            options=options,
            skip_cache=skip_cache,
            context=context,
        )
        if result.parsed is None:
            msg = "Structured generation returned no parsed result"
            raise LLMValidationError(msg)
        return cast("T", result.parsed)
