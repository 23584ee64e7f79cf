"""Prompts that score a single product.

Both the photo and the barcode prompt share the same rubric and answer shape.
The oracle's numbers are not trusted: the analysis service recomputes the
score and tier from the returned breakdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Final

from pydantic import Field

from scanscore.schemas.base import DownstreamResponse

from .base import BasePrompt


if TYPE_CHECKING:
    from scanscore.clients.open_food_facts import OpenFoodFactsProduct
    from scanscore.schemas.analysis import UserPreferences


# =============================================================================
# Answer schema
# =============================================================================


class OracleFlag(DownstreamResponse):
    term: str = ""
    level: str = "neutral"
    explain: str = ""


class OracleBreakdown(DownstreamResponse):
    additives_penalty: float = 0
    nutrition_penalty: float = 0
    processing_penalty: float = 0
    macro_penalty: float | None = None
    green_bonus: float = 0


class OracleAlternative(DownstreamResponse):
    name: str = ""
    brand: str = ""
    score: float = 0
    tier: str | None = None
    key_differences: list[str] = Field(default_factory=list)
    why_better: str = ""


class ProductAnalysisOutput(DownstreamResponse):
    """Scored product as returned by the oracle."""

    product_name: str = ""
    brand: str = ""
    category: str = ""
    ingredients_raw: str = ""
    score: float | None = None
    tier: str | None = None
    breakdown: OracleBreakdown
    flags: list[OracleFlag] = Field(default_factory=list)
    alternatives: list[OracleAlternative] = Field(default_factory=list)


# =============================================================================
# Shared prompt text
# =============================================================================

SCORING_RUBRIC: Final[str] = """\
Calculate a deterministic health score 0-100 using this formula:
   - Start at 100
   - Additives penalty (max 45): Red additive = -25 each (cap -45), Yellow = -7 each (cap -21)
   - Nutrition penalty (max 35): Added sugar -0 to -15, Sodium -0 to -10, Sat fat -0 to -10
   - Processing penalty (max 10): minimally processed 0, processed -5, ultra-processed -10
   - Macro penalty (max 10): poor protein/fiber balance for the calories -0 to -10
   - Green bonus (max +10): Whole food markers +4, no added sugar +4, short list <=5 ingredients +2
   - Final score bounded 0-100
Assign a tier: 90-100 "Excellent", 80-89 "Good", 70-79 "Don't eat often", \
60-69 "Limit / rarely", 50-59 "Treat / very infrequent", 0-49 "Probably avoid"
Suggest up to 3 cleaner alternatives in the same category with higher scores.

RED flags (examples): partially hydrogenated oils, potassium bromate, titanium dioxide, BVO, \
artificial colors (Red 40, Yellow 5, Blue 1), nitrites in processed meats
YELLOW flags (examples): artificial sweeteners (sucralose, aspartame, acesulfame K), BHA/BHT, \
high added sugar, excess sodium, natural flavors, carrageenan, HFCS
GREEN signals: whole grains, live cultures, short recognizable ingredient list, \
no artificial colors/sweeteners/preservatives, no added sugar"""

ANSWER_FORMAT: Final[str] = """\
Respond ONLY with valid JSON (no markdown, no backticks) in this exact format:
{
  "productName": "string",
  "brand": "string",
  "category": "string (e.g. Yogurt, Cereal, Snack Bar)",
  "ingredientsRaw": "string (full ingredient list)",
  "score": number,
  "tier": "string (one of the tier labels)",
  "breakdown": {
    "additivesPenalty": number,
    "nutritionPenalty": number,
    "processingPenalty": number,
    "macroPenalty": number,
    "greenBonus": number
  },
  "flags": [
    {"term": "string", "level": "red|yellow|green", "explain": "string (1-2 sentence plain English explanation)"}
  ],
  "alternatives": [
    {"name": "string", "brand": "string", "score": number, "tier": "string", \
"keyDifferences": ["string"], "whyBetter": "string (1 sentence)"}
  ]
}
Report penalties and the bonus as positive magnitudes."""

NOT_FOOD_INSTRUCTION: Final[str] = (
    'If the image is not a food product, return: {"error": "not_food", "message": '
    '"This doesn\'t appear to be a food label. Please take a clear photo of a '
    "product's ingredient list or nutrition panel.\"}"
)

PREFERENCE_LABELS: Final[dict[str, str]] = {
    "avoid_artificial_colors": "artificial colors",
    "avoid_artificial_sweeteners": "artificial sweeteners",
    "avoid_nitrites": "nitrites/nitrates",
    "avoid_trans_fats": "trans fats / partially hydrogenated oils",
    "avoid_bha_bht": "BHA/BHT",
    "avoid_high_fructose_corn_syrup": "high fructose corn syrup",
    "avoid_msg": "MSG / monosodium glutamate",
    "avoid_carrageenan": "carrageenan",
}


def preferences_instruction(preferences: UserPreferences | None) -> str:
    """System prompt suffix listing the ingredients the user avoids, or ""."""
    if preferences is None:
        return ""
    avoided = [
        label for field, label in PREFERENCE_LABELS.items() if getattr(preferences, field)
    ]
    if not avoided:
        return ""
    return (
        "\n\nUSER PREFERENCES: The user wants to AVOID these ingredients "
        f"(escalate them to RED if found): {', '.join(avoided)}"
    )


# =============================================================================
# Prompts
# =============================================================================


class ImageAnalysisPrompt(BasePrompt[ProductAnalysisOutput]):
    """Score a product from a photo of its label (vision)."""

    output_schema: ClassVar[type[ProductAnalysisOutput]] = ProductAnalysisOutput
    max_tokens: ClassVar[int | None] = 4096
    system_prompt: ClassVar[str | None] = (
        "You are a food ingredient analyst. The user will send a photo of a food "
        "product label (ingredient list, nutrition facts, or barcode area). Your job:\n\n"
        "1. Read ALL ingredients from the label\n"
        "2. Identify the product name and brand if visible\n"
        "3. Flag each notable ingredient as red (avoid), yellow (caution), or green "
        "(positive signal)\n"
        f"4. {SCORING_RUBRIC}"
    )

    def build_system(self, **kwargs: Any) -> str | None:
        preferences: UserPreferences | None = kwargs.get("preferences")
        return (
            f"{self.system_prompt}{preferences_instruction(preferences)}\n\n"
            f"{ANSWER_FORMAT}\n\n"
            "If you cannot read the label clearly, still provide your best analysis. "
            f"{NOT_FOOD_INSTRUCTION}"
        )

    def format(self, **_kwargs: Any) -> str:
        return (
            "Analyze this food label. Read all ingredients, flag them, score the "
            "product, and suggest alternatives."
        )


class BarcodeAnalysisPrompt(BasePrompt[ProductAnalysisOutput]):
    """Score a product from its Open Food Facts record."""

    output_schema: ClassVar[type[ProductAnalysisOutput]] = ProductAnalysisOutput
    max_tokens: ClassVar[int | None] = 4096
    system_prompt: ClassVar[str | None] = (
        "You are a food ingredient analyst. The user will send product data looked "
        "up from a barcode. Your job:\n\n"
        "1. Review ALL listed ingredients\n"
        "2. Flag each notable ingredient as red (avoid), yellow (caution), or green "
        "(positive signal)\n"
        f"3. {SCORING_RUBRIC}"
    )

    def build_system(self, **kwargs: Any) -> str | None:
        preferences: UserPreferences | None = kwargs.get("preferences")
        return f"{self.system_prompt}{preferences_instruction(preferences)}\n\n{ANSWER_FORMAT}"

    def format(self, **kwargs: Any) -> str:
        product: OpenFoodFactsProduct = kwargs["product"]
        lines = [
            f"Barcode: {product.barcode}",
            f"Product name: {product.product_name or 'unknown'}",
            f"Brand: {product.brand or 'unknown'}",
            f"Categories: {product.categories or 'unknown'}",
            f"Ingredients: {product.ingredients_text or 'not listed'}",
        ]
        if product.nutrition is not None:
            facts = product.nutrition.model_dump(by_alias=False, exclude_none=True)
            if facts:
                rendered = ", ".join(f"{key}={value}" for key, value in facts.items())
                lines.append(f"Nutrition per 100 g (sodium in mg): {rendered}")
        lines.append(
            "\nScore this product, flag its ingredients, and suggest alternatives."
        )
        return "\n".join(lines)
