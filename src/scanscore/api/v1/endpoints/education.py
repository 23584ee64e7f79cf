"""Ingredient education endpoints.

Provides:
- GET /education/categories for the full category list
- GET /education/ingredients/{term} for the catalog entry behind one flag term
- POST /education for the categories relevant to a set of flag terms
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from scanscore.observability.logging import get_logger
from scanscore.schemas.education import (
    CategoryEducation,
    EducationMatch,
    EducationRequest,
    IngredientCategory,
)
from scanscore.services.education import CATEGORIES, find_education, relevant_categories


logger = get_logger(__name__)

router = APIRouter(prefix="/education", tags=["Education"])


@router.get(
    "/categories",
    response_model=list[IngredientCategory],
    summary="List additive categories",
)
async def list_categories() -> list[IngredientCategory]:
    return list(CATEGORIES.values())


@router.get(
    "/ingredients/{term}",
    response_model=EducationMatch,
    summary="Explain one flagged ingredient",
    description=(
        "Matches the term against catalog ingredients and their label aliases, "
        "case-insensitively and by containment."
    ),
    responses={
        404: {
            "description": "No catalog ingredient matches the term",
            "content": {
                "application/json": {
                    "example": {
                        "error": "not_found",
                        "message": "No education found for 'Oats'",
                    }
                }
            },
        },
    },
)
async def get_ingredient_education(term: str) -> EducationMatch:
    match = find_education(term)
    if match is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "message": f"No education found for '{term}'"},
        )
    return match


@router.post(
    "",
    response_model=list[CategoryEducation],
    summary="Group flag terms by additive category",
    description=(
        "Returns each category that at least one flag term falls into, with the "
        "matched ingredients. Terms without a catalog match are left out."
    ),
)
async def get_relevant_categories(body: EducationRequest) -> list[CategoryEducation]:
    groups = relevant_categories(body.flag_terms)
    logger.debug("Education requested", terms=len(body.flag_terms), categories=len(groups))
    return groups
