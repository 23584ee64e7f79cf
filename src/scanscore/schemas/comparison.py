"""Comparison engine wire models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from scanscore.schemas.base import APIRequest, APIResponse
from scanscore.schemas.enums import ChemicalCategory, ComparisonWinner, FoundIn
from scanscore.schemas.scan import IngredientFlag, ScanResult


class CategoryComparison(APIResponse):
    """Winner of one breakdown category; lower values win."""

    winner: ComparisonWinner
    product1_value: int | float
    product2_value: int | float
    explanation: str


class CategoryComparisonSet(APIResponse):
    additives: CategoryComparison
    nutrition: CategoryComparison
    processing: CategoryComparison
    macros: CategoryComparison


class ChemicalExposureInfo(APIResponse):
    """A concerning ingredient with its category and health implication."""

    term: str
    category: ChemicalCategory
    health_implication: str
    found_in: FoundIn


class ComparisonResult(APIResponse):
    """Side-by-side analysis of two scan results. Never persisted."""

    product1: ScanResult
    product2: ScanResult
    winner: ComparisonWinner
    score_difference: int | float
    recommendation: str
    shared_flags: list[IngredientFlag] = Field(default_factory=list)
    unique_to_product1: list[IngredientFlag] = Field(default_factory=list)
    unique_to_product2: list[IngredientFlag] = Field(default_factory=list)
    chemical_exposures: list[ChemicalExposureInfo] = Field(default_factory=list)
    category_comparison: CategoryComparisonSet


class CompareProductsRequest(APIRequest):
    """Body of ``POST /compare``.

    Products are kept as raw objects so that shape errors surface as
    ``invalid_products`` from the comparison service rather than as generic
    request validation errors.
    """

    product1: dict[str, Any] | None = None
    product2: dict[str, Any] | None = None
