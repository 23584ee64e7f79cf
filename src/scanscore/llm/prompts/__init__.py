"""Oracle prompt templates."""

from scanscore.llm.prompts.base import BasePrompt
from scanscore.llm.prompts.comparison import (
    ComparisonInsights,
    ComparisonInsightsPrompt,
    OracleExposure,
)
from scanscore.llm.prompts.product_analysis import (
    BarcodeAnalysisPrompt,
    ImageAnalysisPrompt,
    OracleAlternative,
    OracleBreakdown,
    OracleFlag,
    ProductAnalysisOutput,
    preferences_instruction,
)


__all__ = [
    "BarcodeAnalysisPrompt",
    "BasePrompt",
    "ComparisonInsights",
    "ComparisonInsightsPrompt",
    "ImageAnalysisPrompt",
    "OracleAlternative",
    "OracleBreakdown",
    "OracleExposure",
    "OracleFlag",
    "ProductAnalysisOutput",
    "preferences_instruction",
]
