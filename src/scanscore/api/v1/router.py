"""API v1 router aggregating all endpoint routers.

All endpoints are mounted under /api/v1/scanscore/ via the v1_prefix configuration.
"""

from __future__ import annotations

from fastapi import APIRouter

from scanscore.api.v1.endpoints import analyze, compare, education, health, history


router = APIRouter()

router.include_router(health.router)
router.include_router(analyze.router)
router.include_router(compare.router)
router.include_router(history.router)
router.include_router(education.router)
