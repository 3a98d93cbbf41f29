"""Pydantic models for the profile photo upload response."""

from pydantic import BaseModel, Field

from core.models.image import UploadedAsset


class UploadPhotoProfileResponse(BaseModel):
    """Response model for a successful profile photo upload."""

    data: UploadedAsset = Field(..., description="The tenant's new profile photo")
