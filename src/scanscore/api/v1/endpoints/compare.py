"""Product comparison endpoint.

Provides:
- POST /compare for a side-by-side analysis of two scan results
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from scanscore.api.dependencies import get_comparison_service
from scanscore.cache.rate_limit import analysis_rate_limit
from scanscore.observability.logging import get_logger
from scanscore.schemas.comparison import CompareProductsRequest, ComparisonResult
from scanscore.services.comparison import (
    ComparisonError,
    ComparisonService,
    InvalidProductsError,
)


logger = get_logger(__name__)

router = APIRouter(tags=["Comparison"])


@router.post(
    "/compare",
    response_model=ComparisonResult,
    summary="Compare two scanned products",
    description=(
        "Determines the healthier of two scan results, partitions their ingredient "
        "flags, compares each score category and explains the chemical exposures "
        "involved. Results are not stored."
    ),
    responses={
        400: {
            "description": "One of the products is missing or not a valid scan result",
            "content": {
                "application/json": {
                    "example": {
                        "error": "invalid_products",
                        "message": "product2 is required",
                    }
                }
            },
        },
        429: {"description": "Rate limit exceeded"},
        500: {
            "description": "Unexpected failure while comparing",
            "content": {
                "application/json": {
                    "example": {
                        "error": "comparison_failed",
                        "message": "Failed to compare products. Please try again.",
                    }
                }
            },
        },
    },
)
@analysis_rate_limit()
async def compare_products(
    request: Request,
    body: CompareProductsRequest,
    service: Annotated[ComparisonService, Depends(get_comparison_service)],
) -> ComparisonResult:
    """Compare two products.

    The scoring model only contributes exposure explanations and the
    recommendation text; when it fails the comparison still succeeds.

    Raises:
        HTTPException: 400 invalid_products, 500 comparison_failed.
    """
    try:
        return await service.compare_products(body.product1, body.product2)
    except ComparisonError as e:
        status_code = (
            status.HTTP_400_BAD_REQUEST
            if isinstance(e, InvalidProductsError)
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        raise HTTPException(
            status_code=status_code,
            detail={"error": e.error_code, "message": e.message},
        ) from e
