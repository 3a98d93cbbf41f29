"""Business logic for image upload operations.

This module validates the tenant, provisions its directory, assigns each
upload a fresh filename and writes it through the storage layout, optionally
resizing and re-encoding the image on the way.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import BinaryIO

from aws_lambda_powertools import Logger

from core.config import ServiceConfig
from core.imaging.transcoder import ImageTranscoder
from core.models.errors import StorageError, ValidationError
from core.models.image import UploadedAsset
from core.storage.factory import build_storage_layout
from core.storage.layout import StorageLayout, validate_tenant_id
from core.utils.constants import (
    CDN_URL_PREFIX,
    ERROR_CODE_DIRECTORY_CLEAR_FAILED,
    format_file_size,
)
from core.utils.mime import normalized_extension
from core.utils.multipart import UploadedFile
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class UploadService:
    """Application service responsible for image uploads.

    This service orchestrates:
    - Tenant validation (before any I/O)
    - Directory provisioning under the upload or profile root
    - Optional resize / re-encode of each image
    - Unique filename assignment and the write itself
    """

    def __init__(
        self,
        layout: StorageLayout,
        *,
        transcoder: ImageTranscoder | None = None,
    ) -> None:
        self.layout = layout
        self.transcoder = transcoder

    @classmethod
    def from_config(cls, config: ServiceConfig) -> UploadService:
        transcoder = ImageTranscoder.from_config(config) if config.resize_enabled else None
        return cls(build_storage_layout(config), transcoder=transcoder)

    @staticmethod
    def generate_filename(extension: str) -> str:
        """Generate a unique filename keeping ``extension``."""
        return f"{uuid.uuid4().hex}{extension}"

    @staticmethod
    def build_image_url(tenant_id: str, filename: str) -> str:
        return f"{CDN_URL_PREFIX}/{tenant_id}/{filename}"

    def _prepare(self, upload: UploadedFile) -> tuple[BinaryIO, str]:
        if self.transcoder is None:
            return upload.stream, normalized_extension(upload.filename)
        return self.transcoder.transcode(upload.stream)

    def _store(
        self,
        directory: str,
        tenant_id: str,
        upload: UploadedFile,
        *,
        uploaded_at: str | None,
    ) -> UploadedAsset:
        stream, extension = self._prepare(upload)
        filename = self.generate_filename(extension)
        size = self.layout.write_file(directory, filename, stream)

        logger.info(
            "Image stored",
            extra={
                "client_id": tenant_id,
                "original_filename": upload.filename,
                "file_name": filename,
                "size": format_file_size(size),
            },
        )

        return UploadedAsset(
            image_url=self.build_image_url(tenant_id, filename),
            file_type=extension.lstrip("."),
            file_size=size,
            uploaded_at=uploaded_at,
        )

    def upload_images(self, files: Sequence[UploadedFile], tenant_id: str) -> list[UploadedAsset]:
        """Store every file under the tenant's upload directory.

        The first failure aborts the batch. Files already written are left
        in place.

        Args:
            files: Uploaded files in request order
            tenant_id: Tenant owning the uploads

        Returns:
            One asset per input file, in input order

        Raises:
            ValidationError: If the tenant is invalid, no file was given,
                or an image cannot be decoded for resizing
            StorageError: If the directory or a file cannot be written
        """
        validate_tenant_id(tenant_id)

        if not files:
            raise ValidationError(message="No files uploaded")

        logger.info(
            "Uploading images",
            extra={"client_id": tenant_id, "count": len(files)},
        )

        directory = self.layout.resolve_write_dir(self.layout.upload_root, tenant_id)

        return [
            self._store(directory, tenant_id, upload, uploaded_at=utc_now_iso())
            for upload in files
        ]

    def upload_photo_profile(self, upload: UploadedFile, tenant_id: str) -> UploadedAsset:
        """Replace the tenant's profile photo with ``upload``.

        The tenant's profile directory is emptied first so only the new
        photo remains. The purge and the write are not atomic.

        Raises:
            ValidationError: If the tenant is invalid
            StorageError: If the purge or the write fails
        """
        validate_tenant_id(tenant_id)

        directory = self.layout.resolve_write_dir(self.layout.profile_root, tenant_id)

        cleared = self.layout.clear_dir(directory)
        if not cleared.ok:
            logger.error(
                "Failed to clear previous profile photo",
                extra={"client_id": tenant_id, "failed": cleared.failed},
            )
            raise StorageError(
                message="Unable to replace profile photo",
                error_code=ERROR_CODE_DIRECTORY_CLEAR_FAILED,
                details={"client_id": tenant_id},
            )

        return self._store(directory, tenant_id, upload, uploaded_at=None)
