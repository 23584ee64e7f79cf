"""ScanResult and its parts.

A ScanResult is one analyzed product. It is produced by the analysis service
from oracle output, stored in scan history and sent back by clients as input
to the comparison engine.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import ConfigDict, Field

from scanscore.schemas.base import APIRequest
from scanscore.schemas.enums import HazardLevel, ScoreTier


# Smart-mode unions keep integers as integers on the wire.
Score = Annotated[int, Field(ge=0, le=100)] | Annotated[float, Field(ge=0, le=100)]
NonNegative = Annotated[int, Field(ge=0)] | Annotated[float, Field(ge=0)]


class IngredientFlag(APIRequest):
    """Hazard annotation for one ingredient. Immutable."""

    model_config = ConfigDict(frozen=True)

    term: str = Field(..., min_length=1, description="Ingredient as printed on the label")
    level: HazardLevel
    explain: str = Field(default="", description="Plain-English explanation")

    @property
    def match_key(self) -> str:
        """Key used to match the same ingredient across products."""
        return self.term.strip().lower()


class ScoreBreakdown(APIRequest):
    """Penalty and bonus components of a score, all magnitudes.

    Only the macro penalty may be absent; it reads as 0.
    """

    additives_penalty: NonNegative
    nutrition_penalty: NonNegative
    processing_penalty: NonNegative
    macro_penalty: NonNegative | None = None
    green_bonus: NonNegative


class Alternative(APIRequest):
    """A cleaner product suggested by the oracle."""

    name: str
    brand: str = ""
    score: Score
    tier: ScoreTier
    key_differences: list[str] = Field(default_factory=list)
    why_better: str = ""
    image_url: str | None = None


class NutritionData(APIRequest):
    """Nutrition facts per 100 g; sodium in mg, the rest in g (calories in kcal)."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    sugars: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    fiber: float | None = None
    sodium: float | None = None


class ScanResult(APIRequest):
    """One analyzed product."""

    id: str = Field(..., min_length=1)
    product_name: str
    brand: str = ""
    category: str = ""
    ingredients_raw: str = ""
    score: Score
    tier: ScoreTier
    breakdown: ScoreBreakdown
    flags: list[IngredientFlag] = Field(default_factory=list)
    alternatives: list[Alternative] = Field(default_factory=list)
    scan_date: datetime
    image_uri: str | None = None
    is_favorite: bool | None = None
    nutrition: NutritionData | None = None
