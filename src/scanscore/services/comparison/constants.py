"""Comparison engine constants.

Contains:
- The declarative list of breakdown categories compared side by side
- Deterministic explanation and recommendation templates
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final


if TYPE_CHECKING:
    from collections.abc import Callable

    from scanscore.schemas.scan import ScoreBreakdown


# =============================================================================
# Categories
# =============================================================================


@dataclass(frozen=True, slots=True)
class CategoryDefinition:
    """One comparable breakdown component. Lower values are better."""

    key: str
    display_label: str
    extract_value: Callable[[ScoreBreakdown], int | float]


def _macro_penalty(breakdown: ScoreBreakdown) -> int | float:
    return breakdown.macro_penalty if breakdown.macro_penalty is not None else 0


# Keys must match the fields of CategoryComparisonSet.
CATEGORY_DEFINITIONS: Final[tuple[CategoryDefinition, ...]] = (
    CategoryDefinition("additives", "Additives", lambda b: b.additives_penalty),
    CategoryDefinition("nutrition", "Nutrition", lambda b: b.nutrition_penalty),
    CategoryDefinition("processing", "Processing", lambda b: b.processing_penalty),
    CategoryDefinition("macros", "Macros", _macro_penalty),
)


# =============================================================================
# Templates
# =============================================================================

CATEGORY_WIN_TEMPLATE: Final[str] = (
    "{winner} has a lower {label} penalty ({winner_value} vs {loser_value})."
)
CATEGORY_TIE_TEMPLATE: Final[str] = (
    "Both products have the same {label} penalty ({value1} vs {value2})."
)

TIE_RECOMMENDATION: Final[str] = (
    "Both products have similar health profiles. Choose based on your taste preference."
)
WINNER_RECOMMENDATION_TEMPLATE: Final[str] = (
    "{name} is the healthier choice with a higher score."
)

DEFAULT_PRODUCT1_LABEL: Final[str] = "Product 1"
DEFAULT_PRODUCT2_LABEL: Final[str] = "Product 2"
