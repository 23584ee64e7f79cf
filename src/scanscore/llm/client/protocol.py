"""Interface shared by every oracle client, enabling fallback composition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel


if TYPE_CHECKING:
    from scanscore.llm.models import LLMCompletionResult


T = TypeVar("T", bound=BaseModel)


@runtime_checkable
class LLMClientProtocol(Protocol):
    """Protocol for oracle client implementations (OpenAI, Ollama, fallback)."""

    async def initialize(self) -> None: ...

    async def shutdown(self) -> None: ...

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
        """Run one completion.

        Args:
            prompt: User prompt text.
            model: Model override.
            system: Optional system prompt.
            schema: Pydantic model the JSON answer must satisfy; the parsed
                instance is returned in ``parsed``.
            images: Base64-encoded images for vision models.
            json_output: Ask for a JSON object without validating it.
            options: ``temperature`` and ``num_predict`` (max tokens).
            skip_cache: Bypass the response cache.
            context: Label for logs (e.g. "comparison").

        Raises:
            LLMUnavailableError: Provider unreachable (triggers fallback).
            LLMTimeoutError: Request timed out.
            LLMResponseError: HTTP error or empty completion.
            LLMValidationError: Answer does not match ``schema``.
        """
        ...

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
        """Run a completion and return the validated ``schema`` instance."""
        ...
