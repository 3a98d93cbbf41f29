"""Pydantic models for the batch image upload response."""

from pydantic import BaseModel, Field

from core.models.image import UploadedAsset


class UploadImagesResponse(BaseModel):
    """Response model for a successful batch upload."""

    data: list[UploadedAsset] = Field(..., description="Stored images, in request order")
