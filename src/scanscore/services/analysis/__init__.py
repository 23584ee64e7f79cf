"""Analysis service package.

Scores packaged food products from a label photo or a barcode.
"""

from __future__ import annotations

from scanscore.services.analysis.exceptions import (
    AnalysisError,
    AnalysisFailedError,
    NotFoodError,
    ProductNotFoundError,
)
from scanscore.services.analysis.scoring import tier_for_score
from scanscore.services.analysis.service import AnalysisService


__all__ = [
    "AnalysisError",
    "AnalysisFailedError",
    "AnalysisService",
    "NotFoodError",
    "ProductNotFoundError",
    "tier_for_score",
]
