"""Wire schemas."""

from scanscore.schemas.analysis import (
    AnalyzeBarcodeRequest,
    AnalyzeImageRequest,
    UserPreferences,
)
from scanscore.schemas.comparison import (
    CategoryComparison,
    CategoryComparisonSet,
    ChemicalExposureInfo,
    CompareProductsRequest,
    ComparisonResult,
)
from scanscore.schemas.education import (
    CategoryEducation,
    EducationEntry,
    EducationMatch,
    EducationRequest,
    IngredientCategory,
    MatchedIngredient,
)
from scanscore.schemas.enums import (
    ChemicalCategory,
    ComparisonWinner,
    FoundIn,
    HazardLevel,
    HealthStatus,
    ScoreTier,
)
from scanscore.schemas.health import HealthResponse, ReadinessResponse
from scanscore.schemas.history import FavoriteUpdateRequest
from scanscore.schemas.scan import (
    Alternative,
    IngredientFlag,
    NutritionData,
    ScanResult,
    ScoreBreakdown,
)


__all__ = [
    "Alternative",
    "AnalyzeBarcodeRequest",
    "AnalyzeImageRequest",
    "CategoryComparison",
    "CategoryComparisonSet",
    "CategoryEducation",
    "ChemicalCategory",
    "ChemicalExposureInfo",
    "CompareProductsRequest",
    "ComparisonResult",
    "ComparisonWinner",
    "EducationEntry",
    "EducationMatch",
    "EducationRequest",
    "FavoriteUpdateRequest",
    "FoundIn",
    "HazardLevel",
    "HealthResponse",
    "HealthStatus",
    "IngredientCategory",
    "IngredientFlag",
    "MatchedIngredient",
    "NutritionData",
    "ReadinessResponse",
    "ScanResult",
    "ScoreBreakdown",
    "ScoreTier",
    "UserPreferences",
]
