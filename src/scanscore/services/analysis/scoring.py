"""Score, tier and normalization rules for analyzed products.

The oracle's own score and tier are advisory only. A ScanResult always
satisfies::

    score == clamp(100 - (additives + nutrition + processing + macro) + green_bonus, 0, 100)
    tier == tier_for_score(score)
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from scanscore.observability.logging import get_logger
from scanscore.schemas.enums import HazardLevel, ScoreTier
from scanscore.schemas.scan import (
    Alternative,
    IngredientFlag,
    NutritionData,
    ScanResult,
    ScoreBreakdown,
)
from scanscore.services.analysis.constants import (
    BASE_SCORE,
    LOWEST_TIER,
    MAX_SCORE,
    MIN_SCORE,
    TIER_THRESHOLDS,
)


if TYPE_CHECKING:
    from collections.abc import Sequence

    from scanscore.llm.prompts.product_analysis import (
        OracleAlternative,
        OracleBreakdown,
        OracleFlag,
        ProductAnalysisOutput,
    )

logger = get_logger(__name__)


def tier_for_score(score: float) -> ScoreTier:
    """Map a 0-100 score to its tier."""
    for threshold, tier in TIER_THRESHOLDS:
        if score >= threshold:
            return tier
    return LOWEST_TIER


def clamp_score(value: float) -> float:
    return max(float(MIN_SCORE), min(float(MAX_SCORE), value))


def as_number(value: float) -> int | float:
    """Integral floats become ints so that ``72.0`` is sent as ``72``."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def expected_score(breakdown: ScoreBreakdown) -> int | float:
    """Score implied by a breakdown, clamped to 0-100."""
    penalties = (
        breakdown.additives_penalty
        + breakdown.nutrition_penalty
        + breakdown.processing_penalty
        + (breakdown.macro_penalty or 0)
    )
    return as_number(clamp_score(BASE_SCORE - penalties + breakdown.green_bonus))


def normalize_breakdown(raw: OracleBreakdown) -> ScoreBreakdown:
    """Take every component as a magnitude; some models report penalties as negatives."""
    return ScoreBreakdown(
        additives_penalty=as_number(abs(raw.additives_penalty)),
        nutrition_penalty=as_number(abs(raw.nutrition_penalty)),
        processing_penalty=as_number(abs(raw.processing_penalty)),
        macro_penalty=as_number(abs(raw.macro_penalty)) if raw.macro_penalty is not None else None,
        green_bonus=as_number(abs(raw.green_bonus)),
    )


def normalize_flags(raw_flags: Sequence[OracleFlag]) -> list[IngredientFlag]:
    flags: list[IngredientFlag] = []
    for raw in raw_flags:
        term = raw.term.strip()
        if not term:
            continue
        try:
            level = HazardLevel(raw.level.strip().lower())
        except ValueError:
            logger.debug("Unknown flag level, using neutral", term=term, level=raw.level)
            level = HazardLevel.NEUTRAL
        flags.append(IngredientFlag(term=term, level=level, explain=raw.explain.strip()))
    return flags


def normalize_alternatives(
    raw_alternatives: Sequence[OracleAlternative],
    limit: int,
) -> list[Alternative]:
    alternatives: list[Alternative] = []
    for raw in raw_alternatives:
        if len(alternatives) >= limit:
            break
        name = raw.name.strip()
        if not name:
            continue
        score = as_number(clamp_score(raw.score))
        alternatives.append(
            Alternative(
                name=name,
                brand=raw.brand.strip(),
                score=score,
                tier=tier_for_score(score),
                key_differences=[item for item in raw.key_differences if item.strip()],
                why_better=raw.why_better.strip(),
            )
        )
    return alternatives


def build_scan_result(
    output: ProductAnalysisOutput,
    *,
    max_alternatives: int = 3,
    image_uri: str | None = None,
    nutrition: NutritionData | None = None,
    fallback_name: str = "Unknown product",
) -> ScanResult:
    """Turn oracle output into a ScanResult with a fresh id and scan date."""
    breakdown = normalize_breakdown(output.breakdown)
    score = expected_score(breakdown)

    if output.score is not None and as_number(clamp_score(output.score)) != score:
        logger.debug(
            "Replacing oracle score with breakdown score",
            oracle_score=output.score,
            score=score,
        )

    return ScanResult(
        id=str(uuid.uuid4()),
        product_name=output.product_name.strip() or fallback_name,
        brand=output.brand.strip(),
        category=output.category.strip(),
        ingredients_raw=output.ingredients_raw.strip(),
        score=score,
        tier=tier_for_score(score),
        breakdown=breakdown,
        flags=normalize_flags(output.flags),
        alternatives=normalize_alternatives(output.alternatives, max_alternatives),
        scan_date=datetime.now(UTC),
        image_uri=image_uri,
        nutrition=nutrition,
    )
