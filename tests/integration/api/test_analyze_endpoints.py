"""Integration tests for POST /analyze and POST /analyze-barcode."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest

from scanscore.services.analysis import (
    AnalysisFailedError,
    AnalysisService,
    NotFoodError,
    ProductNotFoundError,
)
from tests.factories.scan import make_scan_result
from tests.fixtures.llm_responses import GRANOLA_ANALYSIS_JSON, NOT_FOOD_RESPONSE


if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import FastAPI
    from httpx import AsyncClient

    from scanscore.llm.models import LLMCompletionResult


pytestmark = pytest.mark.integration

ANALYZE_URL = "/api/v1/scanscore/analyze"
BARCODE_URL = "/api/v1/scanscore/analyze-barcode"


@pytest.fixture
def mock_analysis_service(app: FastAPI) -> MagicMock:
    service = MagicMock(spec=AnalysisService)
    service.analyze_image = AsyncMock(return_value=make_scan_result(product_name="Granola"))
    service.analyze_barcode = AsyncMock(return_value=make_scan_result(product_name="RXBAR"))
    app.state.analysis_service = service
    return service


class TestAnalyzeImage:
    """Tests for POST /analyze."""

    async def test_returns_scan_result(
        self,
        client: AsyncClient,
        mock_analysis_service: MagicMock,
    ) -> None:
        """Should return the analyzed product in camelCase."""
        response = await client.post(
            ANALYZE_URL,
            json={"imageBase64": "aGVsbG8=", "preferences": {"avoidMSG": True}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["productName"] == "Granola"
        assert data["tier"] == "Good"
        assert "scanDate" in data
        image, preferences = mock_analysis_service.analyze_image.call_args.args
        assert image == "aGVsbG8="
        assert preferences.avoid_msg is True

    async def test_not_food(self, client: AsyncClient, mock_analysis_service: MagicMock) -> None:
        """Should answer 422 not_food with the oracle's message."""
        mock_analysis_service.analyze_image.side_effect = NotFoodError("This looks like a shoe.")

        response = await client.post(ANALYZE_URL, json={"imageBase64": "aGVsbG8="})

        assert response.status_code == 422
        assert response.json()["error"] == "not_food"
        assert response.json()["message"] == "This looks like a shoe."

    async def test_analysis_failed(
        self,
        client: AsyncClient,
        mock_analysis_service: MagicMock,
    ) -> None:
        """Should answer 502 analysis_failed."""
        mock_analysis_service.analyze_image.side_effect = AnalysisFailedError(
            "Failed to analyze product. Please try again."
        )

        response = await client.post(ANALYZE_URL, json={"imageBase64": "aGVsbG8="})

        assert response.status_code == 502
        assert response.json()["error"] == "analysis_failed"

    async def test_missing_image(
        self,
        client: AsyncClient,
        mock_analysis_service: MagicMock,
    ) -> None:
        """Should reject a body without an image."""
        response = await client.post(ANALYZE_URL, json={})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        mock_analysis_service.analyze_image.assert_not_awaited()

    async def test_service_unavailable(self, client: AsyncClient) -> None:
        """Should answer 503 when analysis is not initialized."""
        response = await client.post(ANALYZE_URL, json={"imageBase64": "aGVsbG8="})

        assert response.status_code == 503


class TestAnalyzeBarcode:
    """Tests for POST /analyze-barcode."""

    async def test_returns_scan_result(
        self,
        client: AsyncClient,
        mock_analysis_service: MagicMock,
    ) -> None:
        """Should analyze the barcode."""
        response = await client.post(BARCODE_URL, json={"barcode": "0722252100900"})

        assert response.status_code == 200
        assert response.json()["productName"] == "RXBAR"
        assert mock_analysis_service.analyze_barcode.call_args.args[0] == "0722252100900"

    async def test_not_found(self, client: AsyncClient, mock_analysis_service: MagicMock) -> None:
        """Should answer 404 not_found for unknown barcodes."""
        mock_analysis_service.analyze_barcode.side_effect = ProductNotFoundError(
            "No product found for barcode 000", barcode="000"
        )

        response = await client.post(BARCODE_URL, json={"barcode": "000"})

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.parametrize("barcode", ["", "abc123", "1" * 33])
    async def test_invalid_barcode(
        self,
        client: AsyncClient,
        mock_analysis_service: MagicMock,
        barcode: str,
    ) -> None:
        """Should reject non-numeric or oversized barcodes."""
        response = await client.post(BARCODE_URL, json={"barcode": barcode})

        assert response.status_code == 422
        mock_analysis_service.analyze_barcode.assert_not_awaited()


class TestAnalyzeEndToEnd:
    """Requests through the real AnalysisService with an oracle double."""

    async def test_image_analysis_recomputes_score(
        self,
        app: FastAPI,
        client: AsyncClient,
        mock_llm_client: MagicMock,
        completion: Callable[[str], LLMCompletionResult],
    ) -> None:
        """Should return the score implied by the breakdown."""
        mock_llm_client.generate.return_value = completion(GRANOLA_ANALYSIS_JSON)
        app.state.analysis_service = AnalysisService(mock_llm_client)

        response = await client.post(ANALYZE_URL, json={"imageBase64": "aGVsbG8="})

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 77
        assert data["tier"] == "Don't eat often"
        assert len(data["alternatives"]) == 3

    async def test_not_food_through_service(
        self,
        app: FastAPI,
        client: AsyncClient,
        mock_llm_client: MagicMock,
        completion: Callable[[str], LLMCompletionResult],
    ) -> None:
        """Should surface the oracle's not-food rejection as 422."""
        mock_llm_client.generate.return_value = completion(NOT_FOOD_RESPONSE)
        app.state.analysis_service = AnalysisService(mock_llm_client)

        response = await client.post(ANALYZE_URL, json={"imageBase64": "aGVsbG8="})

        assert response.status_code == 422
        assert response.json()["message"] == "This looks like a shoe."
