"""Prompt asking the oracle to explain the concerning ingredients of two products."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import Field, field_validator

from scanscore.schemas.base import DownstreamResponse

from .base import BasePrompt


if TYPE_CHECKING:
    from collections.abc import Sequence

    from scanscore.schemas.scan import IngredientFlag, ScanResult


class OracleExposure(DownstreamResponse):
    """One exposure as proposed by the oracle, before classification."""

    term: str = ""
    category: str = "other"
    health_implication: str = ""
    found_in: str | None = None


class ComparisonInsights(DownstreamResponse):
    """Oracle answer: ``{chemicalExposures, recommendation}``."""

    chemical_exposures: list[OracleExposure] = Field(default_factory=list)
    recommendation: str = ""

    @field_validator("chemical_exposures", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("recommendation", mode="before")
    @classmethod
    def _null_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value


def _render_flags(flags: Sequence[IngredientFlag]) -> str:
    if not flags:
        return "  (none)"
    return "\n".join(f"  - {flag.term} [{flag.level}]: {flag.explain}" for flag in flags)


def _render_product(label: str, product: ScanResult) -> str:
    brand = f" by {product.brand}" if product.brand else ""
    return f"{label}: {product.product_name}{brand} (score {product.score}/100, {product.tier})"


class ComparisonInsightsPrompt(BasePrompt[ComparisonInsights]):
    """Categorize concerning ingredients and recommend one of two products.

    Example output:
        {
            "chemicalExposures": [
                {
                    "term": "Brown Sugar Syrup",
                    "category": "chemical_additive",
                    "healthImplication": "Added sugar linked to blood sugar spikes.",
                    "foundIn": "product1"
                }
            ],
            "recommendation": "RXBAR is the better pick: fewer added sugars."
        }
    """

    output_schema: ClassVar[type[ComparisonInsights]] = ComparisonInsights
    temperature: ClassVar[float] = 0.2
    max_tokens: ClassVar[int | None] = 1024
    system_prompt: ClassVar[str | None] = (
        "You are a food safety educator comparing two packaged food products for a "
        "consumer. For every concerning ingredient listed, classify it as one of "
        '"preservative", "artificial_coloring", "chemical_additive" or "other" and '
        "give a one sentence, plain-English health implication. Then write a one to "
        "two sentence recommendation of which product to choose and why.\n\n"
        "Only use the ingredient terms exactly as listed. Respond ONLY with valid "
        "JSON (no markdown, no backticks):\n"
        '{"chemicalExposures": [{"term": "string", "category": "string", '
        '"healthImplication": "string", "foundIn": "both|product1|product2"}], '
        '"recommendation": "string"}'
    )

    def format(self, **kwargs: Any) -> str:
        product1: ScanResult = kwargs["product1"]
        product2: ScanResult = kwargs["product2"]
        shared: Sequence[IngredientFlag] = kwargs.get("shared", ())
        unique1: Sequence[IngredientFlag] = kwargs.get("unique_to_product1", ())
        unique2: Sequence[IngredientFlag] = kwargs.get("unique_to_product2", ())

        return "\n".join(
            [
                _render_product("Product 1", product1),
                _render_product("Product 2", product2),
                "",
                "Concerning ingredients found in both products:",
                _render_flags(shared),
                "Concerning ingredients only in product 1:",
                _render_flags(unique1),
                "Concerning ingredients only in product 2:",
                _render_flags(unique2),
            ]
        )
