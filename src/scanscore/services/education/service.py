"""Lookup of ingredient education for flag terms.

A flag term matches a catalog ingredient when, after lower-casing and
trimming, it equals the ingredient's term or one of its aliases, or either
string contains the other. Catalog order decides between several matches.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scanscore.observability.logging import get_logger
from scanscore.schemas.education import (
    CategoryEducation,
    EducationMatch,
    MatchedIngredient,
)
from scanscore.services.education.constants import CATEGORIES, INGREDIENTS


if TYPE_CHECKING:
    from collections.abc import Iterable

    from scanscore.schemas.education import EducationEntry

logger = get_logger(__name__)

_NAMES: tuple[tuple[EducationEntry, tuple[str, ...]], ...] = tuple(
    (entry, (entry.term.lower(), *(alias.lower() for alias in entry.aliases)))
    for entry in INGREDIENTS
)


def find_education(flag_term: str) -> EducationMatch | None:
    """Return the first catalog ingredient matching ``flag_term``, or None."""
    normalized = flag_term.strip().lower()
    if not normalized:
        return None

    for entry, names in _NAMES:
        if any(name in normalized or normalized in name for name in names):
            category = CATEGORIES.get(entry.category_id)
            if category is not None:
                return EducationMatch(ingredient=entry, category=category)
    return None


def relevant_categories(flag_terms: Iterable[str]) -> list[CategoryEducation]:
    """Group the matched flag terms by category.

    Categories appear in the order their first flag term was seen. The same
    ingredient matched by the same flag term is listed once.
    """
    groups: dict[str, CategoryEducation] = {}
    unmatched = 0

    for flag_term in flag_terms:
        match = find_education(flag_term)
        if match is None:
            unmatched += 1
            continue

        group = groups.get(match.category.id)
        if group is None:
            group = CategoryEducation(category=match.category)
            groups[match.category.id] = group

        already_matched = any(
            m.ingredient.term == match.ingredient.term and m.flag_term == flag_term
            for m in group.matched_ingredients
        )
        if not already_matched:
            group.matched_ingredients.append(
                MatchedIngredient(ingredient=match.ingredient, flag_term=flag_term)
            )

    logger.debug("Grouped flag terms by category", categories=len(groups), unmatched=unmatched)
    return list(groups.values())
