"""Shared image models."""

from pydantic import BaseModel, Field, StrictInt, StrictStr


class UploadedAsset(BaseModel):
    """Metadata describing one stored upload, returned to the caller."""

    image_url: StrictStr = Field(..., description="CDN path of the stored image (/cdn/<client>/<file>)")
    file_type: StrictStr = Field(..., description="File extension without the leading dot")
    file_size: StrictInt = Field(..., description="Number of bytes written")
    uploaded_at: StrictStr | None = Field(
        None,
        description="ISO-8601 upload timestamp (UTC); not set for profile photos",
    )


class DeleteResult(BaseModel):
    """Per-file outcome of a tenant deletion request."""

    client_id: StrictStr = Field(..., description="Tenant owning the images")
    deleted: list[StrictStr] = Field(default_factory=list, description="Files removed")
    failed: list[StrictStr] = Field(
        default_factory=list,
        description="Files that were absent or could not be removed",
    )


class ClearResult(BaseModel):
    """Outcome of purging every entry in a tenant directory."""

    removed: list[StrictStr] = Field(default_factory=list)
    failed: list[StrictStr] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
