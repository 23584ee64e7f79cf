"""Request models for scan history."""

from __future__ import annotations

from scanscore.schemas.base import APIRequest


class FavoriteUpdateRequest(APIRequest):
    """Body of ``PATCH /history/{scanId}/favorite``."""

    is_favorite: bool
