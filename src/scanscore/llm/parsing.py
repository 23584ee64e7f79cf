"""Boundary parsing of oracle output.

Model output is never trusted past this module: callers receive either
``ParseOk`` carrying a validated schema instance or ``ParseErr`` with a
human-readable reason, and decide how to degrade.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import orjson
from pydantic import BaseModel, ValidationError

from scanscore.llm.exceptions import LLMValidationError


_FENCE_OPEN = re.compile(r"^```[a-zA-Z0-9_-]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


@dataclass(frozen=True, slots=True)
class ParseOk[T: BaseModel]:
    value: T


@dataclass(frozen=True, slots=True)
class ParseErr:
    reason: str


type ParseResult[T: BaseModel] = ParseOk[T] | ParseErr


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding Markdown code fence (```json ... ```), if any."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned, count=1))
    return cleaned.strip()


def load_json_object(raw: str) -> dict[str, Any] | ParseErr:
    """Decode fenced or bare JSON, requiring a top-level object."""
    cleaned = strip_code_fences(raw)
    if not cleaned:
        return ParseErr("empty response")
    try:
        data = orjson.loads(cleaned)
    except orjson.JSONDecodeError as e:
        return ParseErr(f"invalid JSON: {e}")
    if not isinstance(data, dict):
        return ParseErr(f"expected a JSON object, got {type(data).__name__}")
    return data


def validate_json_object[T: BaseModel](data: dict[str, Any], schema: type[T]) -> ParseResult[T]:
    """Validate an already decoded object against ``schema``."""
    try:
        return ParseOk(schema.model_validate(data))
    except ValidationError as e:
        return ParseErr(
            f"does not match {schema.__name__}: {e.error_count()} validation error(s)"
        )


def parse_json_response[T: BaseModel](raw: str, schema: type[T]) -> ParseResult[T]:
    """Parse raw model output into ``schema``.

    Example:
        >>> match parse_json_response(text, ComparisonInsights):
        ...     case ParseOk(value=insights): ...
        ...     case ParseErr(reason=reason): ...
    """
    data = load_json_object(raw)
    if isinstance(data, ParseErr):
        return data
    return validate_json_object(data, schema)


def parse_or_raise[T: BaseModel](raw: str, schema: type[T]) -> T:
    """Client-side variant of ``parse_json_response`` raising ``LLMValidationError``."""
    match parse_json_response(raw, schema):
        case ParseOk(value=value):
            return value
        case ParseErr(reason=reason):
            msg = f"Response {reason}"
            raise LLMValidationError(msg)
