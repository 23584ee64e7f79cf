"""Product analysis endpoints.

Provides:
- POST /analyze for scoring a product from a label photo
- POST /analyze-barcode for scoring a product looked up by barcode
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from scanscore.api.dependencies import get_analysis_service
from scanscore.cache.rate_limit import analysis_rate_limit
from scanscore.observability.logging import get_logger
from scanscore.schemas.analysis import AnalyzeBarcodeRequest, AnalyzeImageRequest
from scanscore.schemas.scan import ScanResult
from scanscore.services.analysis import (
    AnalysisError,
    AnalysisService,
    NotFoodError,
    ProductNotFoundError,
)


logger = get_logger(__name__)

router = APIRouter(tags=["Analysis"])

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    404: {"description": "Barcode not found in Open Food Facts"},
    422: {"description": "The image is not a food label, or the body is invalid"},
    429: {"description": "Rate limit exceeded"},
    502: {"description": "Scoring model unavailable or returned unusable output"},
    503: {"description": "Analysis service not available"},
}


def _to_http_exception(error: AnalysisError) -> HTTPException:
    if isinstance(error, NotFoodError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(error, ProductNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(
        status_code=status_code,
        detail={"error": error.error_code, "message": error.message},
    )


@router.post(
    "/analyze",
    response_model=ScanResult,
    summary="Analyze a food label photo",
    description=(
        "Reads the ingredient list from a base64 JPEG of a food label, flags "
        "ingredients, scores the product 0-100 and suggests cleaner alternatives."
    ),
    responses=_ERROR_RESPONSES,
)
@analysis_rate_limit()
async def analyze_image(
    request: Request,
    body: AnalyzeImageRequest,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> ScanResult:
    """Analyze a label photo.

    Raises:
        HTTPException: 422 not_food, 502 analysis_failed.
    """
    try:
        return await service.analyze_image(body.image_base64, body.preferences)
    except AnalysisError as e:
        logger.info("Image analysis rejected", error=e.error_code)
        raise _to_http_exception(e) from e


@router.post(
    "/analyze-barcode",
    response_model=ScanResult,
    summary="Analyze a product by barcode",
    description=(
        "Looks the barcode up in Open Food Facts and scores the product from its "
        "ingredient list and nutrition facts."
    ),
    responses=_ERROR_RESPONSES,
)
@analysis_rate_limit()
async def analyze_barcode(
    request: Request,
    body: AnalyzeBarcodeRequest,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> ScanResult:
    """Analyze a barcode.

    Raises:
        HTTPException: 404 not_found, 502 analysis_failed.
    """
    try:
        return await service.analyze_barcode(body.barcode, body.preferences)
    except AnalysisError as e:
        logger.info("Barcode analysis rejected", barcode=body.barcode, error=e.error_code)
        raise _to_http_exception(e) from e
