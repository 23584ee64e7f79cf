"""HTTP client for OpenAI-compatible chat completion APIs.

The primary scoring oracle. Vision input is sent as ``image_url`` content
parts carrying base64 data URLs; structured output uses JSON mode with the
target schema described in the system prompt.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar, cast

import httpx
import orjson
from aiolimiter import AsyncLimiter
from pydantic import BaseModel

from scanscore.llm.client.cache import CompletionCache
from scanscore.llm.exceptions import (
    LLMConfigurationError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from scanscore.llm.models import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    LLMCompletionResult,
)
from scanscore.llm.parsing import parse_or_raise
from scanscore.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis


logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


def schema_instruction(schema: type[BaseModel]) -> str:
    """System prompt suffix describing the required JSON shape."""
    json_schema = orjson.dumps(schema.model_json_schema(by_alias=True)).decode()
    return f"You must respond with a single JSON object matching this JSON schema: {json_schema}"


class OpenAIClient:
    """Async client for ``POST {base_url}/chat/completions``.

    Attributes:
        base_url: API base URL (OpenAI or any compatible gateway).
        model: Default model.
        timeout: HTTP timeout in seconds.
        max_retries: Extra attempts after timeouts, connection errors and 5xx.
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 45.0,
        max_retries: int = 2,
        cache_client: Redis[Any] | None = None,
        cache_ttl: int = 3600,
        cache_enabled: bool = False,
        requests_per_minute: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._cache = CompletionCache(
            "openai", cache_client, ttl=cache_ttl, enabled=cache_enabled
        )
        self._http_client: httpx.AsyncClient | None = None
        # One request every 60/rpm seconds, no initial burst
        self._rate_limiter = AsyncLimiter(1, 60.0 / requests_per_minute)

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    async def initialize(self) -> None:
        """Create the HTTP client.

        Raises:
            LLMConfigurationError: If no API key is configured.
        """
        if self._http_client is not None:
            return
        if not self.api_key:
            msg = "OPENAI_API_KEY is not set"
            raise LLMConfigurationError(msg)

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        logger.info("OpenAIClient initialized", model=self.model, timeout=self.timeout)

    async def shutdown(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("OpenAIClient shutdown")

    def _build_messages(
        self,
        prompt: str,
        system: str | None,
        schema: type[BaseModel] | None,
        images: list[str] | None,
    ) -> list[ChatMessage]:
        system_content = system or ""
        if schema is not None:
            instruction = schema_instruction(schema)
            system_content = f"{system_content}\n\n{instruction}" if system_content else instruction

        messages: list[ChatMessage] = []
        if system_content:
            messages.append(ChatMessage(role="system", content=system_content))

        if images:
            parts: list[dict[str, Any]] = [
                {
                    "type": "image_url",
                    "image_url": {
                        "url": f"data:image/jpeg;base64,{image}",
                        "detail": "high",
                    },
                }
                for image in images
            ]
            parts.append({"type": "text", "text": prompt})
            messages.append(ChatMessage(role="user", content=parts))
        else:
            messages.append(ChatMessage(role="user", content=prompt))
        return messages

    async def _execute_with_retry(
        self,
        request: ChatCompletionRequest,
        context: str | None,
    ) -> ChatCompletionResponse:
        if self._http_client is None:
            await self.initialize()
        assert self._http_client is not None

        payload = request.model_dump(exclude_none=True)
        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            await self._rate_limiter.acquire()
            try:
                response = await self._http_client.post(self.chat_url, json=payload)
                if response.status_code == 429:
                    retry_after = response.headers.get("retry-after", "60")
                    msg = f"OpenAI rate limit exceeded, retry after {retry_after}s"
                    raise LLMRateLimitError(msg)
                response.raise_for_status()
                return ChatCompletionResponse.model_validate(response.json())

            except httpx.TimeoutException as e:
                last_exception = e
                logger.warning(
                    "OpenAI request timeout",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    context=context,
                )
                if attempt < self.max_retries:
                    continue
                msg = f"OpenAI timeout after {self.timeout}s"
                raise LLMTimeoutError(msg) from e

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if status_code >= 500:
                    last_exception = e
                    logger.warning(
                        "OpenAI server error",
                        status_code=status_code,
                        attempt=attempt + 1,
                        context=context,
                    )
                    if attempt < self.max_retries:
                        continue
                    msg = f"OpenAI returned {status_code}"
                    raise LLMUnavailableError(msg) from e
                logger.error("OpenAI request rejected", status_code=status_code, context=context)
                msg = f"OpenAI returned {status_code}"
                raise LLMResponseError(msg) from e

            except httpx.RequestError as e:
                last_exception = e
                logger.warning(
                    "OpenAI connection error",
                    attempt=attempt + 1,
                    error=str(e),
                    context=context,
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Cannot connect to OpenAI: {e}"
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
        """Run a chat completion. See ``LLMClientProtocol.generate``."""
        use_model = model or self.model

        # Image payloads are large and never repeat byte-for-byte
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

        options = options or {}
        request = ChatCompletionRequest(
            model=use_model,
            messages=self._build_messages(prompt, system, schema, images),
            response_format=(
                {"type": "json_object"} if schema is not None or json_output else None
            ),
            temperature=options.get("temperature", 0.1),
            max_completion_tokens=options.get("num_predict"),
        )

        response = await self._execute_with_retry(request, context)
        if not response.choices or not response.choices[0].message.content:
            msg = "OpenAI returned an empty completion"
            raise LLMResponseError(msg)
        raw_response = response.choices[0].message.content

        parsed: Any = None
        if schema is not None:
            try:
                parsed = parse_or_raise(raw_response, schema)
            except LLMValidationError:
                logger.warning(
                    "Failed to parse structured OpenAI output",
                    schema=schema.__name__,
                    context=context,
                    raw_response=raw_response[:500],
                )
                raise

        usage = response.usage
        result = LLMCompletionResult(
            raw_response=raw_response,
            parsed=parsed,
            model=response.model,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
        )
        logger.debug(
            "OpenAI completion",
            context=context,
            model=result.model,
            prompt_tokens=result.prompt_tokens,
            completion_tokens=result.completion_tokens,
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
