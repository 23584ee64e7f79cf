"""Request models for product analysis."""

from __future__ import annotations

from pydantic import Field

from scanscore.schemas.base import APIRequest


class UserPreferences(APIRequest):
    """Ingredients the user wants escalated to red when present."""

    avoid_artificial_colors: bool = False
    avoid_artificial_sweeteners: bool = False
    avoid_nitrites: bool = False
    avoid_trans_fats: bool = True
    avoid_bha_bht: bool = Field(default=False, alias="avoidBHABHT")
    avoid_high_fructose_corn_syrup: bool = False
    avoid_msg: bool = Field(default=False, alias="avoidMSG")
    avoid_carrageenan: bool = False


class AnalyzeImageRequest(APIRequest):
    """Body of ``POST /analyze``."""

    image_base64: str = Field(..., min_length=1, description="Base64 JPEG of the label")
    preferences: UserPreferences | None = None


class AnalyzeBarcodeRequest(APIRequest):
    """Body of ``POST /analyze-barcode``."""

    barcode: str = Field(..., min_length=1, max_length=32, pattern=r"^\s*\d+\s*$")
    preferences: UserPreferences | None = None
