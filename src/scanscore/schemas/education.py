"""Ingredient education schemas.

Background material for flagged ingredients: additive categories with a
one-line concept and a longer explanation, and catalog entries that map an
ingredient (and its label aliases) to a category.
"""

from __future__ import annotations

from pydantic import Field

from scanscore.schemas.base import APIRequest, APIResponse


MAX_FLAG_TERMS = 200


class IngredientCategory(APIResponse):
    """A family of additives explained for consumers."""

    id: str
    name: str
    concept: str = Field(..., description="One-sentence summary")
    detail: str = Field(..., description="Longer explanation with regulatory context")


class EducationEntry(APIResponse):
    """One catalog ingredient."""

    term: str
    aliases: list[str] = Field(default_factory=list)
    category_id: str
    short_explain: str
    regulatory_status: str | None = None


class EducationMatch(APIResponse):
    """Catalog entry and category found for a flag term."""

    ingredient: EducationEntry
    category: IngredientCategory


class MatchedIngredient(APIResponse):
    ingredient: EducationEntry
    flag_term: str = Field(..., description="Flag term as sent by the client")


class CategoryEducation(APIResponse):
    """A category and the flag terms that fell into it."""

    category: IngredientCategory
    matched_ingredients: list[MatchedIngredient] = Field(default_factory=list)


class EducationRequest(APIRequest):
    """Request body for POST /education."""

    flag_terms: list[str] = Field(..., max_length=MAX_FLAG_TERMS)
