"""Exceptions for the analysis service."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base exception for analysis errors."""

    error_code: str = "analysis_failed"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoodError(AnalysisError):
    """The oracle reported that the image is not a food label."""

    error_code = "not_food"


class ProductNotFoundError(AnalysisError):
    """Open Food Facts does not know the scanned barcode."""

    error_code = "not_found"

    def __init__(self, message: str, barcode: str | None = None) -> None:
        self.barcode = barcode
        super().__init__(message)


class AnalysisFailedError(AnalysisError):
    """The oracle or product database failed, or returned unusable output.

    This can occur when:
    - No oracle is configured or it is unavailable
    - The oracle times out
    - The oracle answer is not valid JSON or misses the breakdown
    """

    error_code = "analysis_failed"

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
