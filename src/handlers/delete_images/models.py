"""Pydantic models for delete images request/response."""

from pydantic import BaseModel, Field

from core.models.image import DeleteResult


class DeleteImagesRequest(BaseModel):
    """Validation model for delete images request."""

    images: list[str] = Field(
        ...,
        min_length=1,
        description="Generated filenames to delete",
    )


class DeleteImagesResponse(BaseModel):
    """Response model for a processed deletion request."""

    data: DeleteResult = Field(..., description="Per-file outcome")
