"""Analysis service: scores a product from a label photo or a barcode.

Provides methods for:
- Vision oracle analysis of a label photo
- Barcode lookup in Open Food Facts followed by a text oracle analysis
- Normalization of the oracle answer into a ScanResult
- Best-effort image lookup for suggested alternatives
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, assert_never

from scanscore.clients.open_food_facts.exceptions import OpenFoodFactsError
from scanscore.llm.exceptions import LLMError
from scanscore.llm.parsing import ParseErr, ParseOk, load_json_object, validate_json_object
from scanscore.llm.prompts.product_analysis import (
    BarcodeAnalysisPrompt,
    ImageAnalysisPrompt,
    ProductAnalysisOutput,
)
from scanscore.observability.logging import get_logger
from scanscore.services.analysis.constants import NOT_FOOD_DEFAULT_MESSAGE, NOT_FOOD_ERROR
from scanscore.services.analysis.exceptions import (
    AnalysisFailedError,
    NotFoodError,
    ProductNotFoundError,
)
from scanscore.services.analysis.scoring import build_scan_result


if TYPE_CHECKING:
    from scanscore.clients.open_food_facts import OpenFoodFactsClient
    from scanscore.llm.client.protocol import LLMClientProtocol
    from scanscore.llm.prompts.base import BasePrompt
    from scanscore.schemas.analysis import UserPreferences
    from scanscore.schemas.scan import Alternative, ScanResult

logger = get_logger(__name__)

_DATA_URL_MARKER = ";base64,"


def strip_data_url(image_base64: str) -> str:
    """Accept both bare base64 and ``data:image/...;base64,`` URLs."""
    image = image_base64.strip()
    if image.startswith("data:") and _DATA_URL_MARKER in image:
        return image.split(_DATA_URL_MARKER, 1)[1]
    return image


class AnalysisService:
    """Produces ScanResults from the scoring oracle.

    Orchestrates:
    1. Oracle call (vision for photos, text for barcode product data)
    2. Boundary parsing and normalization (score and tier recomputed)
    3. Concurrent image lookups for alternatives
    """

    def __init__(
        self,
        llm_client: LLMClientProtocol | None,
        off_client: OpenFoodFactsClient | None = None,
        *,
        max_alternatives: int = 3,
        enrich_images: bool = True,
        image_lookup_timeout: float = 5.0,
    ) -> None:
        """Initialize the service.

        Args:
            llm_client: Scoring oracle. Without one every analysis fails.
            off_client: Open Food Facts client for barcodes and images.
            max_alternatives: Maximum number of alternatives kept.
            enrich_images: Whether to look up alternative images.
            image_lookup_timeout: Upper bound per image lookup, in seconds.
        """
        self._llm_client = llm_client
        self._off_client = off_client
        self._max_alternatives = max_alternatives
        self._enrich_images = enrich_images
        self._image_lookup_timeout = image_lookup_timeout
        self._image_prompt = ImageAnalysisPrompt()
        self._barcode_prompt = BarcodeAnalysisPrompt()

    async def analyze_image(
        self,
        image_base64: str,
        preferences: UserPreferences | None = None,
    ) -> ScanResult:
        """Analyze a label photo.

        Raises:
            NotFoodError: The photo does not show a food label.
            AnalysisFailedError: Oracle missing, failing or unusable.
        """
        image = strip_data_url(image_base64)
        if not image:
            msg = "No image data provided"
            raise AnalysisFailedError(msg)

        output = await self._run_oracle(
            self._image_prompt,
            self._image_prompt.format(),
            preferences=preferences,
            images=[image],
            context="image_analysis",
        )
        result = build_scan_result(output, max_alternatives=self._max_alternatives)
        result = await self._with_alternative_images(result)

        logger.info(
            "Image analyzed",
            product=result.product_name,
            score=result.score,
            flags=len(result.flags),
        )
        return result

    async def analyze_barcode(
        self,
        barcode: str,
        preferences: UserPreferences | None = None,
    ) -> ScanResult:
        """Analyze a product looked up by barcode.

        Raises:
            ProductNotFoundError: Open Food Facts does not know the barcode.
            AnalysisFailedError: Product database or oracle failure.
        """
        barcode = barcode.strip()
        if self._off_client is None:
            msg = "Barcode lookup is not configured"
            raise AnalysisFailedError(msg)

        try:
            product = await self._off_client.get_product(barcode)
        except OpenFoodFactsError as e:
            msg = "Product database is unavailable. Please try again."
            raise AnalysisFailedError(msg, cause=e) from e

        if product is None:
            msg = f"No product found for barcode {barcode}"
            raise ProductNotFoundError(msg, barcode=barcode)

        output = await self._run_oracle(
            self._barcode_prompt,
            self._barcode_prompt.format(product=product),
            preferences=preferences,
            context="barcode_analysis",
        )
        result = build_scan_result(
            output,
            max_alternatives=self._max_alternatives,
            image_uri=product.image_url,
            nutrition=product.nutrition,
            fallback_name=product.product_name or "Unknown product",
        )
        # Label data from the database beats what the oracle repeats back
        updates: dict[str, Any] = {}
        if product.product_name:
            updates["product_name"] = product.product_name
        if product.brand:
            updates["brand"] = product.brand
        if product.ingredients_text and not result.ingredients_raw:
            updates["ingredients_raw"] = product.ingredients_text
        if updates:
            result = result.model_copy(update=updates)

        result = await self._with_alternative_images(result)
        logger.info(
            "Barcode analyzed",
            barcode=barcode,
            product=result.product_name,
            score=result.score,
        )
        return result

    # =========================================================================
    # Oracle
    # =========================================================================

    async def _run_oracle(
        self,
        prompt: BasePrompt[ProductAnalysisOutput],
        prompt_text: str,
        *,
        preferences: UserPreferences | None,
        images: list[str] | None = None,
        context: str,
    ) -> ProductAnalysisOutput:
        if self._llm_client is None:
            msg = "Analysis is not available: no scoring model configured"
            raise AnalysisFailedError(msg)

        try:
            completion = await self._llm_client.generate(
                prompt_text,
                system=prompt.build_system(preferences=preferences),
                images=images,
                json_output=True,
                options=prompt.get_options(),
                context=context,
            )
        except LLMError as e:
            logger.warning(
                "Scoring oracle failed",
                context=context,
                error=str(e),
                error_type=type(e).__name__,
            )
            msg = "Failed to analyze product. Please try again."
            raise AnalysisFailedError(msg, cause=e) from e

        data = load_json_object(completion.raw_response)
        if isinstance(data, ParseErr):
            logger.warning("Unusable scoring oracle output", context=context, reason=data.reason)
            msg = "Failed to analyze product. Please try again."
            raise AnalysisFailedError(msg)

        if data.get("error") == NOT_FOOD_ERROR:
            message = data.get("message")
            if not isinstance(message, str) or not message.strip():
                message = NOT_FOOD_DEFAULT_MESSAGE
            logger.info("Oracle rejected image as not food", context=context)
            raise NotFoodError(message)

        match validate_json_object(data, ProductAnalysisOutput):
            case ParseOk(value=output):
                return output
            case ParseErr(reason=reason):
                logger.warning("Unusable scoring oracle output", context=context, reason=reason)
                msg = "Failed to analyze product. Please try again."
                raise AnalysisFailedError(msg)
            case _ as unreachable:
                assert_never(unreachable)

    # =========================================================================
    # Alternative images
    # =========================================================================

    async def _with_alternative_images(self, result: ScanResult) -> ScanResult:
        if not self._enrich_images or self._off_client is None or not result.alternatives:
            return result

        images = await asyncio.gather(
            *(self._find_image(alternative) for alternative in result.alternatives),
            return_exceptions=True,
        )

        alternatives: list[Alternative] = []
        for alternative, image in zip(result.alternatives, images, strict=True):
            if isinstance(image, BaseException):
                logger.debug(
                    "Alternative image lookup failed",
                    alternative=alternative.name,
                    error_type=type(image).__name__,
                )
                alternatives.append(alternative)
            elif image:
                alternatives.append(alternative.model_copy(update={"image_url": image}))
            else:
                alternatives.append(alternative)
        return result.model_copy(update={"alternatives": alternatives})

    async def _find_image(self, alternative: Alternative) -> str | None:
        assert self._off_client is not None
        return await asyncio.wait_for(
            self._off_client.find_product_image(alternative.name, alternative.brand or None),
            timeout=self._image_lookup_timeout,
        )
