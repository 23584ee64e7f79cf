"""Comparison engine exceptions.

Oracle failures never appear here: they are absorbed into the fallback
recommendation. Only invalid input and unexpected errors reach the caller.
"""

from __future__ import annotations


class ComparisonError(Exception):
    """Base exception for comparison errors."""

    error_code: str = "comparison_failed"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidProductsError(ComparisonError):
    """One of the inputs is not a valid ScanResult. Raised before any network call."""

    error_code = "invalid_products"


class ComparisonFailedError(ComparisonError):
    """Unexpected failure while building the comparison."""

    error_code = "comparison_failed"
