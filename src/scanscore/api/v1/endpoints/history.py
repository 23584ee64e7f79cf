"""Scan history endpoints.

History is scoped to the device named in the ``X-Device-ID`` header.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from scanscore.api.dependencies import get_device_id, get_history_repository
from scanscore.observability.logging import get_logger
from scanscore.schemas.history import FavoriteUpdateRequest
from scanscore.schemas.scan import ScanResult
from scanscore.services.history import ScanHistoryRepository, ScanNotFoundError


logger = get_logger(__name__)

router = APIRouter(prefix="/history", tags=["History"])

DeviceId = Annotated[str, Depends(get_device_id)]
Repository = Annotated[ScanHistoryRepository, Depends(get_history_repository)]


@router.get(
    "",
    response_model=list[ScanResult],
    summary="List scan history",
    description="Scans of the calling device, newest first.",
)
async def list_history(device_id: DeviceId, repository: Repository) -> list[ScanResult]:
    return await repository.list(device_id)


@router.post(
    "",
    response_model=ScanResult,
    status_code=status.HTTP_201_CREATED,
    summary="Save a scan",
    description=(
        "Prepends a scan to the device history. Saving a known id replaces the "
        "stored copy; the oldest scans are evicted beyond the history limit."
    ),
)
async def save_scan(
    scan: ScanResult,
    device_id: DeviceId,
    repository: Repository,
) -> ScanResult:
    saved = await repository.add(device_id, scan)
    logger.info("Scan saved", scan_id=saved.id)
    return saved


@router.patch(
    "/{scan_id}/favorite",
    response_model=ScanResult,
    summary="Mark or unmark a scan as favorite",
    responses={404: {"description": "Scan not found in history"}},
)
async def set_favorite(
    scan_id: str,
    body: FavoriteUpdateRequest,
    device_id: DeviceId,
    repository: Repository,
) -> ScanResult:
    try:
        return await repository.set_favorite(device_id, scan_id, body.is_favorite)
    except ScanNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": e.error_code, "message": e.message},
        ) from e


@router.delete(
    "/{scan_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a scan",
    description="Removing an unknown id is not an error.",
)
async def delete_scan(scan_id: str, device_id: DeviceId, repository: Repository) -> Response:
    await repository.remove(device_id, scan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear scan history",
)
async def clear_history(device_id: DeviceId, repository: Repository) -> Response:
    await repository.clear(device_id)
    logger.info("Scan history cleared")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
