"""Wire models for the oracle providers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LLMCompletionResult(BaseModel):
    """Provider-independent completion result."""

    model_config = ConfigDict(frozen=True)

    raw_response: str = Field(..., description="Raw text returned by the model")
    parsed: Any | None = Field(
        default=None,
        description="Schema instance when a schema was requested",
    )
    model: str = Field(..., description="Model that produced the completion")
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    cached: bool = False


# =============================================================================
# OpenAI-compatible chat completions
# =============================================================================


class ChatMessage(BaseModel):
    """A chat message; ``content`` is a list of parts for vision input."""

    role: str
    content: str | list[dict[str, Any]]


class ChatCompletionRequest(BaseModel):
    """Body for ``POST /chat/completions``."""

    model: str
    messages: list[ChatMessage]
    response_format: dict[str, str] | None = None
    temperature: float = 0.1
    max_completion_tokens: int | None = None


class ChatUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatChoiceMessage(BaseModel):
    role: str = "assistant"
    content: str | None = None


class ChatChoice(BaseModel):
    index: int = 0
    message: ChatChoiceMessage
    finish_reason: str | None = None


class ChatCompletionResponse(BaseModel):
    """Subset of the chat completions response that the client reads."""

    id: str | None = None
    model: str
    choices: list[ChatChoice]
    usage: ChatUsage | None = None


# =============================================================================
# Ollama
# =============================================================================


class OllamaGenerateRequest(BaseModel):
    """Body for Ollama ``POST /api/generate``."""

    model: str
    prompt: str
    stream: bool = False
    system: str | None = None
    format: str | dict[str, Any] | None = Field(
        default=None,
        description="'json' or a JSON schema dict",
    )
    images: list[str] | None = Field(
        default=None,
        description="Base64-encoded images for multimodal models",
    )
    options: dict[str, Any] | None = None


class OllamaGenerateResponse(BaseModel):
    """Response from Ollama ``POST /api/generate`` (non-streaming)."""

    model: str
    response: str
    done: bool = True
    created_at: str | None = None
    prompt_eval_count: int | None = None
    eval_count: int | None = None
