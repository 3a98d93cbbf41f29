"""Pydantic models for get image request."""

from pydantic import BaseModel, ConfigDict, Field


class GetImageRequest(BaseModel):
    """Validation model for the ``/cdn/{clientID}/{filename}`` path parameters."""

    model_config = ConfigDict(str_strip_whitespace=True)

    client_id: str = Field(..., min_length=1, description="Tenant owning the image")
    filename: str = Field(..., min_length=1, description="Generated filename")
