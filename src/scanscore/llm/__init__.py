"""Scoring oracle integration: provider clients, prompts and output parsing."""

from scanscore.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from scanscore.llm.models import LLMCompletionResult
from scanscore.llm.parsing import ParseErr, ParseOk, parse_json_response


__all__ = [
    "LLMCompletionResult",
    "LLMConfigurationError",
    "LLMError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMUnavailableError",
    "LLMValidationError",
    "ParseErr",
    "ParseOk",
    "parse_json_response",
]
