"""Ingredient education package.

Explains flagged ingredients by matching them to a catalog of additives
grouped into categories.
"""

from __future__ import annotations

from scanscore.services.education.constants import CATEGORIES, INGREDIENTS
from scanscore.services.education.service import find_education, relevant_categories


__all__ = [
    "CATEGORIES",
    "INGREDIENTS",
    "find_education",
    "relevant_categories",
]
