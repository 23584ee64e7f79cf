"""Oracle client that retries on a secondary provider when the primary is down."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from scanscore.llm.exceptions import LLMUnavailableError
from scanscore.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from scanscore.llm.client.protocol import LLMClientProtocol
    from scanscore.llm.models import LLMCompletionResult


logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)
R = TypeVar("R")


class FallbackLLMClient:
    """Composes a primary and an optional secondary ``LLMClientProtocol``.

    Only ``LLMUnavailableError`` (connection failures, timeouts, exhausted 5xx
    retries) moves the call to the secondary provider. Validation, HTTP 4xx
    and rate limit errors propagate from the primary unchanged.
    """

    def __init__(
        self,
        primary: LLMClientProtocol,
        secondary: LLMClientProtocol | None = None,
        *,
        fallback_enabled: bool = True,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.fallback_enabled = fallback_enabled

    async def initialize(self) -> None:
        await self.primary.initialize()
        if self.secondary is not None:
            await self.secondary.initialize()
        logger.info(
            "FallbackLLMClient initialized",
            has_secondary=self.secondary is not None,
            fallback_enabled=self.fallback_enabled,
        )

    async def shutdown(self) -> None:
        await self.primary.shutdown()
        if self.secondary is not None:
            await self.secondary.shutdown()

    async def _with_fallback(
        self,
        call: Callable[[LLMClientProtocol], Awaitable[R]],
        context: str | None,
    ) -> R:
        try:
            return await call(self.primary)
        except LLMUnavailableError as e:
            if not self.fallback_enabled or self.secondary is None:
                logger.warning(
                    "Primary LLM unavailable, no fallback configured",
                    context=context,
                    error=str(e),
                )
                raise
            logger.warning(
                "Primary LLM unavailable, falling back to secondary",
                context=context,
                primary_error=str(e),
            )
            return await call(self.secondary)

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
        # Model overrides are provider specific and are not forwarded to the secondary
        async def call(client: LLMClientProtocol) -> LLMCompletionResult:
            return await client.generate(
                prompt,
                model=model if client is self.primary else None,
                system=system,
                schema=schema,
                images=images,
                json_output=json_output,
                options=options,
                skip_cache=skip_cache,
                context=context,
            )

        return await self._with_fallback(call, context)

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
        async def call(client: LLMClientProtocol) -> T:
            return await client.generate_structured(
                prompt,
                schema,
                model=model if client is self.primary else None,
                system=system,
                images=images,
                options=options,
                skip_cache=skip_cache,
                context=context,
            )

        return await self._with_fallback(call, context)
