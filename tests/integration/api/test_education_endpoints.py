"""Integration tests for the ingredient education endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from httpx import AsyncClient


pytestmark = pytest.mark.integration

EDUCATION_URL = "/api/v1/scanscore/education"


class TestEducationEndpoints:
    """Tests for /education."""

    async def test_list_categories(self, client: AsyncClient) -> None:
        """Should return every category."""
        response = await client.get(f"{EDUCATION_URL}/categories")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 10
        assert data[0]["id"] == "artificial_sweeteners"
        assert set(data[0]) == {"id", "name", "concept", "detail"}

    async def test_ingredient_education(self, client: AsyncClient) -> None:
        """Should explain a flagged ingredient in camelCase."""
        response = await client.get(f"{EDUCATION_URL}/ingredients/Titanium Dioxide")

        assert response.status_code == 200
        data = response.json()
        assert data["ingredient"]["term"] == "Titanium Dioxide"
        assert data["ingredient"]["categoryId"] == "artificial_colors"
        assert data["ingredient"]["regulatoryStatus"] == "Banned in EU (2022); FDA-approved in US"
        assert data["category"]["name"] == "Artificial Colors"

    async def test_unknown_ingredient(self, client: AsyncClient) -> None:
        """Should answer 404 not_found."""
        response = await client.get(f"{EDUCATION_URL}/ingredients/Whole Grain Oats")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    async def test_relevant_categories(self, client: AsyncClient) -> None:
        """Should group flag terms by category."""
        response = await client.post(
            EDUCATION_URL,
            json={"flagTerms": ["Sodium Nitrite", "Carrageenan", "Oats", "BHA"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert [g["category"]["id"] for g in data] == ["preservatives", "emulsifiers"]
        assert [m["flagTerm"] for m in data[0]["matchedIngredients"]] == [
            "Sodium Nitrite",
            "BHA",
        ]

    async def test_requires_flag_terms(self, client: AsyncClient) -> None:
        """Should reject a body without flag terms."""
        response = await client.post(EDUCATION_URL, json={})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
