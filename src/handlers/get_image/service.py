"""Business logic for serving stored images."""

from __future__ import annotations

from aws_lambda_powertools import Logger

from core.config import ServiceConfig
from core.storage.factory import build_storage_layout
from core.storage.layout import StorageLayout
from core.utils.mime import content_type_for_filename

logger = Logger(UTC=True)


class GetService:
    """Locates an image across the configured roots and reads it."""

    def __init__(self, layout: StorageLayout) -> None:
        self.layout = layout

    @classmethod
    def from_config(cls, config: ServiceConfig) -> GetService:
        return cls(build_storage_layout(config))

    def get_image(self, filename: str, tenant_id: str) -> str:
        """Return the location of ``filename``; the upload root wins over the profile root.

        Raises:
            ValidationError: If the tenant ID or filename is unsafe
            NotFoundError: If no root holds the file
            StorageError: If a lookup fails
        """
        return self.layout.resolve_read_path(tenant_id, filename)

    def load_image(self, filename: str, tenant_id: str) -> tuple[bytes, str]:
        """Return the image bytes and the content type derived from its extension."""
        location = self.get_image(filename, tenant_id)
        content = self.layout.read_file(location)

        logger.debug(
            "Image loaded",
            extra={"client_id": tenant_id, "file_name": filename, "size": len(content)},
        )
        return content, content_type_for_filename(filename)
