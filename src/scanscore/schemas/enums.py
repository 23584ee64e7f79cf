"""Enumerations shared by the scan, analysis and comparison schemas."""

from __future__ import annotations

from enum import StrEnum


class HazardLevel(StrEnum):
    """Hazard classification of a single ingredient."""

    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    NEUTRAL = "neutral"


class ScoreTier(StrEnum):
    """Qualitative label derived from a 0-100 score, best first."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    DONT_EAT_OFTEN = "Don't eat often"
    LIMIT = "Limit / rarely"
    TREAT = "Treat / very infrequent"
    PROBABLY_AVOID = "Probably avoid"


class ChemicalCategory(StrEnum):
    """Category of a concerning chemical exposure."""

    PRESERVATIVE = "preservative"
    ARTIFICIAL_COLORING = "artificial_coloring"
    CHEMICAL_ADDITIVE = "chemical_additive"
    OTHER = "other"


class FoundIn(StrEnum):
    """Which compared product(s) contain an exposure."""

    BOTH = "both"
    PRODUCT1 = "product1"
    PRODUCT2 = "product2"


class ComparisonWinner(StrEnum):
    """Winner of an overall or per-category comparison."""

    PRODUCT1 = "product1"
    PRODUCT2 = "product2"
    TIE = "tie"


class HealthStatus(StrEnum):
    """Component health."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
