"""Open Food Facts client exceptions."""

from __future__ import annotations


class OpenFoodFactsError(Exception):
    """Base exception for Open Food Facts errors."""


class OpenFoodFactsUnavailableError(OpenFoodFactsError):
    """The API could not be reached or answered with a server error."""
