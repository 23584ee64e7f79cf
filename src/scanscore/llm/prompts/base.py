"""Base class for oracle prompts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel


class BasePrompt[T: BaseModel](ABC):
    """A prompt template bound to the schema its answer must satisfy.

    Subclasses set ``output_schema`` and ``system_prompt`` and implement
    ``format``. Prompts whose system text depends on the request (user
    preferences, for instance) override ``build_system``.
    """

    output_schema: ClassVar[type[BaseModel]]
    system_prompt: ClassVar[str | None] = None
    temperature: ClassVar[float] = 0.1
    max_tokens: ClassVar[int | None] = None

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Render the user prompt."""
        ...

    def build_system(self, **_kwargs: Any) -> str | None:
        """Render the system prompt."""
        return self.system_prompt

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def get_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"temperature": self.temperature}
        if self.max_tokens is not None:
            options["num_predict"] = self.max_tokens
        return options
