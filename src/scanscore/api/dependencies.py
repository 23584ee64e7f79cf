"""FastAPI dependencies for service access.

Services are initialized during application startup and stored in
``app.state``. A missing service answers 503.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Header, HTTPException, Request, status

from scanscore.core.exceptions import ServiceUnavailableException


if TYPE_CHECKING:
    from scanscore.services.analysis import AnalysisService
    from scanscore.services.comparison import ComparisonService
    from scanscore.services.history import ScanHistoryRepository


MAX_DEVICE_ID_LENGTH = 128


async def get_analysis_service(request: Request) -> AnalysisService:
    """Get the analysis service from app state.

    Raises:
        ServiceUnavailableException: 503 if the service is not initialized.
    """
    service: AnalysisService | None = getattr(request.app.state, "analysis_service", None)
    if service is None:
        msg = "Analysis service not available"
        raise ServiceUnavailableException(msg)
    return service


async def get_comparison_service(request: Request) -> ComparisonService:
    """Get the comparison service from app state.

    Raises:
        ServiceUnavailableException: 503 if the service is not initialized.
    """
    service: ComparisonService | None = getattr(request.app.state, "comparison_service", None)
    if service is None:
        msg = "Comparison service not available"
        raise ServiceUnavailableException(msg)
    return service


async def get_history_repository(request: Request) -> ScanHistoryRepository:
    repository: ScanHistoryRepository | None = getattr(
        request.app.state, "history_repository", None
    )
    if repository is None:
        msg = "Scan history not available"
        raise ServiceUnavailableException(msg)
    return repository


async def get_device_id(
    x_device_id: Annotated[
        str | None,
        Header(alias="X-Device-ID", description="Opaque identifier of the client device"),
    ] = None,
) -> str:
    """Device that owns the scan history.

    Raises:
        HTTPException: 400 if the header is missing, blank or too long.
    """
    device_id = (x_device_id or "").strip()
    if not device_id or len(device_id) > MAX_DEVICE_ID_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "missing_device_id",
                "message": (
                    f"X-Device-ID header is required (1-{MAX_DEVICE_ID_LENGTH} characters)"
                ),
            },
        )
    return device_id
