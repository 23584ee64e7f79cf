"""Oracle client implementations."""

from scanscore.llm.client.fallback import FallbackLLMClient
from scanscore.llm.client.ollama import OllamaClient
from scanscore.llm.client.openai import OpenAIClient
from scanscore.llm.client.protocol import LLMClientProtocol


__all__ = [
    "FallbackLLMClient",
    "LLMClientProtocol",
    "OllamaClient",
    "OpenAIClient",
]
