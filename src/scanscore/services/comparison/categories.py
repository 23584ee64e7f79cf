"""Per-category breakdown comparison."""

from __future__ import annotations

from typing import TYPE_CHECKING

from scanscore.schemas.comparison import CategoryComparison, CategoryComparisonSet
from scanscore.schemas.enums import ComparisonWinner
from scanscore.services.comparison.constants import (
    CATEGORY_DEFINITIONS,
    CATEGORY_TIE_TEMPLATE,
    CATEGORY_WIN_TEMPLATE,
    DEFAULT_PRODUCT1_LABEL,
    DEFAULT_PRODUCT2_LABEL,
    CategoryDefinition,
)


if TYPE_CHECKING:
    from scanscore.schemas.scan import ScoreBreakdown


def _fmt(value: int | float) -> str:
    return f"{value:g}"


def compare_category(
    definition: CategoryDefinition,
    breakdown1: ScoreBreakdown,
    breakdown2: ScoreBreakdown,
    *,
    product1_label: str = DEFAULT_PRODUCT1_LABEL,
    product2_label: str = DEFAULT_PRODUCT2_LABEL,
) -> CategoryComparison:
    """Compare one category; the strictly lower value wins."""
    value1 = definition.extract_value(breakdown1)
    value2 = definition.extract_value(breakdown2)
    label = definition.display_label.lower()

    if value1 < value2:
        winner = ComparisonWinner.PRODUCT1
        explanation = CATEGORY_WIN_TEMPLATE.format(
            winner=product1_label,
            label=label,
            winner_value=_fmt(value1),
            loser_value=_fmt(value2),
        )
    elif value2 < value1:
        winner = ComparisonWinner.PRODUCT2
        explanation = CATEGORY_WIN_TEMPLATE.format(
            winner=product2_label,
            label=label,
            winner_value=_fmt(value2),
            loser_value=_fmt(value1),
        )
    else:
        winner = ComparisonWinner.TIE
        explanation = CATEGORY_TIE_TEMPLATE.format(
            label=label, value1=_fmt(value1), value2=_fmt(value2)
        )

    return CategoryComparison(
        winner=winner,
        product1_value=value1,
        product2_value=value2,
        explanation=explanation,
    )


def compare_categories(
    breakdown1: ScoreBreakdown,
    breakdown2: ScoreBreakdown,
    *,
    product1_label: str = DEFAULT_PRODUCT1_LABEL,
    product2_label: str = DEFAULT_PRODUCT2_LABEL,
) -> CategoryComparisonSet:
    """Compare every category in ``CATEGORY_DEFINITIONS``."""
    return CategoryComparisonSet(
        **{
            definition.key: compare_category(
                definition,
                breakdown1,
                breakdown2,
                product1_label=product1_label,
                product2_label=product2_label,
            )
            for definition in CATEGORY_DEFINITIONS
        }
    )
