"""Constants for product analysis."""

from __future__ import annotations

from typing import Final

from scanscore.schemas.enums import ScoreTier


MIN_SCORE: Final[int] = 0
MAX_SCORE: Final[int] = 100
BASE_SCORE: Final[int] = 100

# Lower bound (inclusive) of each tier, best first
TIER_THRESHOLDS: Final[tuple[tuple[int, ScoreTier], ...]] = (
    (90, ScoreTier.EXCELLENT),
    (80, ScoreTier.GOOD),
    (70, ScoreTier.DONT_EAT_OFTEN),
    (60, ScoreTier.LIMIT),
    (50, ScoreTier.TREAT),
)
LOWEST_TIER: Final[ScoreTier] = ScoreTier.PROBABLY_AVOID

NOT_FOOD_ERROR: Final[str] = "not_food"
NOT_FOOD_DEFAULT_MESSAGE: Final[str] = (
    "This doesn't appear to be a food label. Please take a clear photo of a "
    "product's ingredient list or nutrition panel."
)
