"""Comparison service: side-by-side analysis of two scan results.

Provides methods for:
- Validating inbound products before any network call
- Deterministic winner, flag partition and category comparison
- One oracle call for chemical exposures and a recommendation, with a
  templated fallback when the oracle is missing, slow or wrong
- Best-effort nutrition enrichment from Open Food Facts
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Protocol, assert_never

from pydantic import ValidationError

from scanscore.llm.parsing import ParseErr, ParseOk, parse_json_response
from scanscore.llm.prompts.comparison import ComparisonInsights, ComparisonInsightsPrompt
from scanscore.observability.logging import get_logger
from scanscore.schemas.comparison import ComparisonResult
from scanscore.schemas.enums import ComparisonWinner
from scanscore.schemas.scan import NutritionData, ScanResult
from scanscore.services.comparison.categories import compare_categories
from scanscore.services.comparison.constants import (
    TIE_RECOMMENDATION,
    WINNER_RECOMMENDATION_TEMPLATE,
)
from scanscore.services.comparison.exceptions import (
    ComparisonError,
    ComparisonFailedError,
    InvalidProductsError,
)
from scanscore.services.comparison.exposures import classify_exposures
from scanscore.services.comparison.flags import FlagPartition, reconcile_flags


if TYPE_CHECKING:
    from scanscore.llm.client.protocol import LLMClientProtocol

logger = get_logger(__name__)


class NutritionLookup(Protocol):
    """Anything that can find nutrition facts by product name (Open Food Facts)."""

    async def find_nutrition(self, name: str, brand: str | None = None) -> NutritionData | None: ...


def determine_winner(score1: float, score2: float) -> ComparisonWinner:
    if score1 > score2:
        return ComparisonWinner.PRODUCT1
    if score2 > score1:
        return ComparisonWinner.PRODUCT2
    return ComparisonWinner.TIE


def fallback_recommendation(
    winner: ComparisonWinner | str,
    product1: ScanResult,
    product2: ScanResult,
) -> str:
    """Deterministic recommendation used whenever the oracle gives none."""
    if winner == ComparisonWinner.TIE:
        return TIE_RECOMMENDATION
    name = product1.product_name if winner == ComparisonWinner.PRODUCT1 else product2.product_name
    return WINNER_RECOMMENDATION_TEMPLATE.format(name=name)


class ComparisonService:
    """Builds ComparisonResults.

    The service holds no per-request state; concurrent comparisons are
    independent. Scan history is never consulted: products arrive as
    arguments.
    """

    def __init__(
        self,
        llm_client: LLMClientProtocol | None = None,
        nutrition_lookup: NutritionLookup | None = None,
        *,
        oracle_timeout: float = 45.0,
        lookup_timeout: float = 5.0,
    ) -> None:
        """Initialize the service.

        Args:
            llm_client: Oracle client; without one every comparison uses the
                fallback recommendation and reports no exposures.
            nutrition_lookup: Optional source of nutrition facts for products
                that arrive without them.
            oracle_timeout: Upper bound for the oracle call, in seconds.
            lookup_timeout: Upper bound for each nutrition lookup, in seconds.
        """
        self._llm_client = llm_client
        self._nutrition_lookup = nutrition_lookup
        self._oracle_timeout = oracle_timeout
        self._lookup_timeout = lookup_timeout
        self._prompt = ComparisonInsightsPrompt()

    # =========================================================================
    # Entry points
    # =========================================================================

    async def compare_products(self, raw1: Any, raw2: Any) -> ComparisonResult:
        """Validate two inbound products and compare them.

        Raises:
            InvalidProductsError: Either input is not a valid ScanResult.
            ComparisonFailedError: Anything unexpected while comparing.
        """
        product1 = self._validate(raw1, "product1")
        product2 = self._validate(raw2, "product2")

        try:
            return await self.compare(product1, product2)
        except ComparisonError:
            raise
        except Exception as e:
            logger.exception(
                "Comparison failed",
                product1_id=product1.id,
                product2_id=product2.id,
            )
            msg = "Failed to compare products. Please try again."
            raise ComparisonFailedError(msg) from e

    async def compare(self, product1: ScanResult, product2: ScanResult) -> ComparisonResult:
        """Compare two already validated products.

        Oracle and enrichment failures degrade the result but never raise.
        """
        winner = determine_winner(product1.score, product2.score)
        score_difference = abs(product1.score - product2.score)
        partition = reconcile_flags(product1.flags, product2.flags)
        category_comparison = compare_categories(
            product1.breakdown,
            product2.breakdown,
            product1_label=product1.product_name,
            product2_label=product2.product_name,
        )

        insights, enriched1, enriched2 = await asyncio.gather(
            self._request_insights(product1, product2, partition),
            self._with_nutrition(product1),
            self._with_nutrition(product2),
        )

        exposures = classify_exposures(
            partition,
            insights.chemical_exposures if insights is not None else None,
        )
        recommendation = insights.recommendation.strip() if insights is not None else ""
        if not recommendation:
            recommendation = fallback_recommendation(winner, product1, product2)

        logger.info(
            "Products compared",
            winner=winner.value,
            score_difference=score_difference,
            shared_flags=len(partition.shared),
            exposures=len(exposures),
            oracle_used=insights is not None,
        )

        return ComparisonResult(
            product1=enriched1,
            product2=enriched2,
            winner=winner,
            score_difference=score_difference,
            recommendation=recommendation,
            shared_flags=list(partition.shared),
            unique_to_product1=list(partition.unique_to_product1),
            unique_to_product2=list(partition.unique_to_product2),
            chemical_exposures=exposures,
            category_comparison=category_comparison,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _validate(raw: Any, label: str) -> ScanResult:
        if raw is None:
            msg = f"{label} is required"
            raise InvalidProductsError(msg)
        data = raw.model_dump() if isinstance(raw, ScanResult) else raw
        try:
            return ScanResult.model_validate(data)
        except ValidationError as e:
            fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
            logger.info("Rejected invalid product", product=label, fields=fields)
            msg = f"{label} is not a valid scan result (invalid: {', '.join(fields) or 'body'})"
            raise InvalidProductsError(msg) from e

    async def _request_insights(
        self,
        product1: ScanResult,
        product2: ScanResult,
        partition: FlagPartition,
    ) -> ComparisonInsights | None:
        """Ask the oracle once; any failure is logged and reported as None."""
        if self._llm_client is None:
            logger.debug("No oracle configured, using fallback recommendation")
            return None

        concerning = partition.concerning()
        prompt_text = self._prompt.format(
            product1=product1,
            product2=product2,
            shared=concerning.shared,
            unique_to_product1=concerning.unique_to_product1,
            unique_to_product2=concerning.unique_to_product2,
        )

        try:
            completion = await asyncio.wait_for(
                self._llm_client.generate(
                    prompt_text,
                    system=self._prompt.build_system(),
                    json_output=True,
                    options=self._prompt.get_options(),
                    context="comparison",
                ),
                timeout=self._oracle_timeout,
            )
        except TimeoutError:
            logger.warning("Comparison oracle timed out", timeout=self._oracle_timeout)
            return None
        except Exception as e:
            logger.warning(
                "Comparison oracle failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        match parse_json_response(completion.raw_response, ComparisonInsights):
            case ParseOk(value=insights):
                return insights
            case ParseErr(reason=reason):
                logger.warning("Unusable comparison oracle output", reason=reason)
                return None
            case _ as unreachable:
                assert_never(unreachable)

    async def _with_nutrition(self, product: ScanResult) -> ScanResult:
        """Attach nutrition facts when missing; failures leave the product unchanged."""
        if product.nutrition is not None or self._nutrition_lookup is None:
            return product
        try:
            nutrition = await asyncio.wait_for(
                self._nutrition_lookup.find_nutrition(product.product_name, product.brand or None),
                timeout=self._lookup_timeout,
            )
        except Exception as e:
            logger.debug(
                "Nutrition lookup failed",
                product=product.product_name,
                error_type=type(e).__name__,
            )
            return product
        if nutrition is None:
            return product
        return product.model_copy(update={"nutrition": nutrition})
