"""Unit tests for AnalysisService.

Tests cover:
- Image analysis and not-food detection
- Barcode analysis through Open Food Facts
- Oracle failure mapping
- Alternative image enrichment
"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from scanscore.clients.open_food_facts import (
    OpenFoodFactsProduct,
    OpenFoodFactsUnavailableError,
)
from scanscore.llm.exceptions import LLMUnavailableError
from scanscore.schemas.analysis import UserPreferences
from scanscore.schemas.scan import NutritionData
from scanscore.services.analysis.exceptions import (
    AnalysisFailedError,
    NotFoodError,
    ProductNotFoundError,
)
from scanscore.services.analysis.service import AnalysisService, strip_data_url
from tests.fixtures.llm_responses import (
    GRANOLA_ANALYSIS_FENCED,
    GRANOLA_ANALYSIS_JSON,
    MISSING_BREAKDOWN_RESPONSE,
    NOT_FOOD_RESPONSE,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def service(mock_llm_client: MagicMock, mock_off_client: MagicMock) -> AnalysisService:
    return AnalysisService(
        mock_llm_client,
        mock_off_client,
        max_alternatives=3,
        enrich_images=True,
        image_lookup_timeout=0.5,
    )


@pytest.fixture
def off_product() -> OpenFoodFactsProduct:
    return OpenFoodFactsProduct(
        barcode="016000275287",
        product_name="Oats 'n Honey Granola Bars",
        brand="Nature Valley",
        categories="Snacks, Cereal bars",
        ingredients_text="Whole Grain Oats, Sugar, Canola Oil",
        image_url="https://images.openfoodfacts.org/granola.jpg",
        nutrition=NutritionData(calories=452, sugars=26.4, sodium=317),
    )


class TestStripDataUrl:
    """Tests for strip_data_url."""

    def test_strips_data_url_prefix(self) -> None:
        """Should remove the data URL header."""
        assert strip_data_url("data:image/jpeg;base64,QUJD") == "QUJD"

    def test_keeps_bare_base64(self) -> None:
        """Should leave bare base64 unchanged."""
        assert strip_data_url(" QUJD ") == "QUJD"


class TestAnalyzeImage:
    """Tests for analyze_image."""

    async def test_returns_normalized_scan_result(
        self, service, mock_llm_client, completion
    ) -> None:
        """Should build a ScanResult from the oracle answer."""
        mock_llm_client.generate.return_value = completion(GRANOLA_ANALYSIS_JSON)

        result = await service.analyze_image("data:image/jpeg;base64,QUJD")

        assert result.product_name == "Chewy Granola Bar"
        assert result.score == 77
        kwargs = mock_llm_client.generate.await_args.kwargs
        assert kwargs["images"] == ["QUJD"]
        assert kwargs["json_output"] is True
        assert kwargs["context"] == "image_analysis"

    async def test_accepts_code_fenced_answer(self, service, mock_llm_client, completion) -> None:
        """Should strip code fences."""
        mock_llm_client.generate.return_value = completion(GRANOLA_ANALYSIS_FENCED)

        result = await service.analyze_image("QUJD")

        assert result.brand == "Nature Valley"

    async def test_preferences_reach_system_prompt(
        self, service, mock_llm_client, completion
    ) -> None:
        """Should list avoided ingredients in the system prompt."""
        mock_llm_client.generate.return_value = completion(GRANOLA_ANALYSIS_JSON)
        preferences = UserPreferences(avoid_msg=True, avoid_trans_fats=False)

        await service.analyze_image("QUJD", preferences)

        system = mock_llm_client.generate.await_args.kwargs["system"]
        assert "USER PREFERENCES" in system
        assert "MSG / monosodium glutamate" in system
        assert "trans fats" not in system

    async def test_not_food(self, service, mock_llm_client, completion) -> None:
        """Should raise NotFoodError with the oracle's message."""
        mock_llm_client.generate.return_value = completion(NOT_FOOD_RESPONSE)

        with pytest.raises(NotFoodError) as exc_info:
            await service.analyze_image("QUJD")

        assert exc_info.value.error_code == "not_food"
        assert exc_info.value.message == "This looks like a shoe."

    @pytest.mark.parametrize("raw", ["not json at all", MISSING_BREAKDOWN_RESPONSE, "[]"])
    async def test_unusable_answer(self, service, mock_llm_client, completion, raw) -> None:
        """Should raise analysis_failed for invalid or incomplete answers."""
        mock_llm_client.generate.return_value = completion(raw)

        with pytest.raises(AnalysisFailedError) as exc_info:
            await service.analyze_image("QUJD")

        assert exc_info.value.error_code == "analysis_failed"

    async def test_oracle_unavailable(self, service, mock_llm_client) -> None:
        """Should wrap oracle errors."""
        mock_llm_client.generate.side_effect = LLMUnavailableError("down")

        with pytest.raises(AnalysisFailedError) as exc_info:
            await service.analyze_image("QUJD")

        assert isinstance(exc_info.value.cause, LLMUnavailableError)

    async def test_no_oracle(self, mock_off_client) -> None:
        """Should fail without an oracle."""
        with pytest.raises(AnalysisFailedError):
            await AnalysisService(None, mock_off_client).analyze_image("QUJD")

    async def test_empty_image(self, service, mock_llm_client) -> None:
        """Should reject an empty image before calling the oracle."""
        with pytest.raises(AnalysisFailedError):
            await service.analyze_image("data:image/jpeg;base64,")
        mock_llm_client.generate.assert_not_awaited()


class TestAnalyzeBarcode:
    """Tests for analyze_barcode."""

    async def test_uses_open_food_facts_product(
        self, service, mock_llm_client, mock_off_client, completion, off_product
    ) -> None:
        """Should prompt with the product data and attach its facts."""
        mock_off_client.get_product.return_value = off_product
        mock_llm_client.generate.return_value = completion(GRANOLA_ANALYSIS_JSON)

        result = await service.analyze_barcode(" 016000275287 ")

        mock_off_client.get_product.assert_awaited_once_with("016000275287")
        prompt = mock_llm_client.generate.await_args.args[0]
        assert "Barcode: 016000275287" in prompt
        assert "Whole Grain Oats, Sugar, Canola Oil" in prompt
        assert result.product_name == "Oats 'n Honey Granola Bars"
        assert result.image_uri == "https://images.openfoodfacts.org/granola.jpg"
        assert result.nutrition is not None
        assert result.nutrition.sodium == 317
        assert mock_llm_client.generate.await_args.kwargs["images"] is None

    async def test_unknown_barcode(self, service, mock_llm_client, mock_off_client) -> None:
        """Should raise not_found without calling the oracle."""
        mock_off_client.get_product.return_value = None

        with pytest.raises(ProductNotFoundError) as exc_info:
            await service.analyze_barcode("0000000000000")

        assert exc_info.value.error_code == "not_found"
        mock_llm_client.generate.assert_not_awaited()

    async def test_open_food_facts_unavailable(self, service, mock_off_client) -> None:
        """Should map database outages to analysis_failed."""
        mock_off_client.get_product.side_effect = OpenFoodFactsUnavailableError("down")

        with pytest.raises(AnalysisFailedError):
            await service.analyze_barcode("016000275287")


class TestAlternativeImages:
    """Tests for alternative image enrichment."""

    async def test_attaches_found_images(
        self, service, mock_llm_client, mock_off_client, completion
    ) -> None:
        """Should set image_url on alternatives with a match."""
        mock_llm_client.generate.return_value = completion(GRANOLA_ANALYSIS_JSON)

        async def find_image(name: str, brand: str | None = None) -> str | None:
            return f"https://img.example/{brand}.jpg" if brand == "RXBAR" else None

        mock_off_client.find_product_image.side_effect = find_image

        result = await service.analyze_image("QUJD")

        assert result.alternatives[0].image_url == "https://img.example/RXBAR.jpg"
        assert result.alternatives[1].image_url is None
        assert mock_off_client.find_product_image.await_count == 3

    async def test_one_failure_does_not_affect_others(
        self, service, mock_llm_client, mock_off_client, completion
    ) -> None:
        """Should ignore failed or slow lookups individually."""
        mock_llm_client.generate.return_value = completion(GRANOLA_ANALYSIS_JSON)

        async def find_image(name: str, brand: str | None = None) -> str | None:
            if brand == "RXBAR":
                raise RuntimeError("boom")
            if brand == "Larabar":
                await asyncio.sleep(5)
            return "https://img.example/kind.jpg"

        mock_off_client.find_product_image.side_effect = find_image

        result = await service.analyze_image("QUJD")

        assert [a.image_url for a in result.alternatives] == [
            None,
            None,
            "https://img.example/kind.jpg",
        ]

    async def test_disabled(self, mock_llm_client, mock_off_client, completion) -> None:
        """Should skip lookups when disabled."""
        mock_llm_client.generate.return_value = completion(GRANOLA_ANALYSIS_JSON)
        service = AnalysisService(mock_llm_client, mock_off_client, enrich_images=False)

        await service.analyze_image("QUJD")

        mock_off_client.find_product_image.assert_not_awaited()
