"""Oracle (LLM) client exceptions.

Services catch these and either degrade (comparison) or surface an
``analysis_failed`` error (product analysis).
"""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for LLM client errors."""


class LLMUnavailableError(LLMError):
    """The provider could not be reached. Triggers fallback to a secondary provider."""


class LLMTimeoutError(LLMUnavailableError):
    """The provider did not answer within the configured timeout."""


class LLMResponseError(LLMError):
    """The provider answered with an HTTP error or an empty completion."""


class LLMValidationError(LLMError):
    """The completion could not be parsed into the expected schema."""


class LLMRateLimitError(LLMError):
    """The provider rejected the request with HTTP 429."""


class LLMConfigurationError(LLMError):
    """The client is missing required configuration such as an API key."""
