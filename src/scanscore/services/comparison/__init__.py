"""Comparison service package.

Side-by-side comparison of two scan results: winner, flag partition,
per-category winners, chemical exposures and a recommendation.
"""

from __future__ import annotations

from scanscore.services.comparison.exceptions import (
    ComparisonError,
    ComparisonFailedError,
    InvalidProductsError,
)
from scanscore.services.comparison.service import ComparisonService


__all__ = [
    "ComparisonError",
    "ComparisonFailedError",
    "ComparisonService",
    "InvalidProductsError",
]
