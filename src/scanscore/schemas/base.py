"""Shared pydantic configuration for wire models.

Python attributes are snake_case; JSON is camelCase. Pick the base class by
direction and trust level:

    - APIRequest: bodies received from clients (unknown fields ignored)
    - APIResponse: bodies we return (unknown fields rejected)
    - DownstreamResponse: payloads from the oracle or Open Food Facts
      (unknown fields ignored)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Common configuration; inherit from a public subclass instead."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
        use_enum_values=True,
        validate_default=True,
        validate_assignment=True,
    )


class APIRequest(_BaseSchema):
    """Incoming request body. Extra properties are ignored."""

    model_config = ConfigDict(extra="ignore")


class APIResponse(_BaseSchema):
    """Outgoing response body. Only declared properties may be set."""

    model_config = ConfigDict(extra="forbid")


class DownstreamResponse(_BaseSchema):
    """Payload received from an external collaborator. Extra properties are ignored."""

    model_config = ConfigDict(extra="ignore")
