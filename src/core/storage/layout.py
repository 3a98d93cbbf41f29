"""Tenant directory layout across the configured storage roots.

Every stored image lives at ``<root>/<tenant_id>/<filename>``. Two roots are
configured: the general upload root and the profile-photo root. Reads check
them in that order, so the upload root always wins when a name exists in
both.
"""

from __future__ import annotations

import re
from typing import BinaryIO

from aws_lambda_powertools import Logger

from core.config import ServiceConfig
from core.models.errors import NotFoundError, StorageError, ValidationError
from core.models.image import ClearResult
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ERROR_CODE_DIRECTORY_CREATE_FAILED,
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_IMAGE_READ_FAILED,
    ERROR_CODE_IMAGE_WRITE_FAILED,
    ERROR_CODE_INVALID_FILENAME,
    ERROR_CODE_INVALID_TENANT,
    TENANT_ID_MAX_LENGTH,
    TENANT_ID_PATTERN,
)

logger = Logger(UTC=True)

_TENANT_ID_RE = re.compile(TENANT_ID_PATTERN)
_FORBIDDEN_FILENAME_CHARS = ("/", "\\", "\x00")


def validate_tenant_id(tenant_id: str | None) -> str:
    """Return ``tenant_id`` if it is safe to use as a single path segment.

    Raises:
        ValidationError: If it is empty or could escape its root
    """
    if not tenant_id:
        raise ValidationError(
            message="clientID is required",
            error_code=ERROR_CODE_INVALID_TENANT,
        )

    if len(tenant_id) > TENANT_ID_MAX_LENGTH or not _TENANT_ID_RE.fullmatch(tenant_id):
        raise ValidationError(
            message="Invalid client ID",
            error_code=ERROR_CODE_INVALID_TENANT,
            details={"client_id": tenant_id[:TENANT_ID_MAX_LENGTH]},
        )

    return tenant_id


def validate_filename(filename: str | None) -> str:
    """Return ``filename`` if it is a single leaf component.

    Raises:
        ValidationError: If it is empty, a dot entry, or contains a separator
    """
    if not filename or filename in (".", ".."):
        raise ValidationError(
            message="Invalid filename",
            error_code=ERROR_CODE_INVALID_FILENAME,
        )

    if any(char in filename for char in _FORBIDDEN_FILENAME_CHARS):
        raise ValidationError(
            message="Invalid filename",
            error_code=ERROR_CODE_INVALID_FILENAME,
            details={"filename": filename},
        )

    return filename


class StorageLayout:
    """Resolves, provisions and searches tenant directories."""

    def __init__(
        self,
        storage: ImageStorageRepository,
        *,
        upload_root: str,
        profile_root: str,
    ) -> None:
        self.storage = storage
        self.upload_root = upload_root
        self.profile_root = profile_root

    @classmethod
    def from_config(cls, config: ServiceConfig, storage: ImageStorageRepository) -> StorageLayout:
        return cls(
            storage,
            upload_root=config.upload_dir,
            profile_root=config.profile_upload_dir,
        )

    @property
    def read_roots(self) -> tuple[str, ...]:
        """Roots in lookup priority order."""
        return (self.upload_root, self.profile_root)

    def tenant_dir(self, root: str, tenant_id: str) -> str:
        return self.storage.join(root, validate_tenant_id(tenant_id))

    def file_location(self, root: str, tenant_id: str, filename: str) -> str:
        return self.storage.join(root, validate_tenant_id(tenant_id), validate_filename(filename))

    def resolve_write_dir(self, root: str, tenant_id: str) -> str:
        """Return the tenant directory under ``root``, creating it if absent.

        Raises:
            ValidationError: If the tenant ID is unsafe
            StorageError: If the directory cannot be created
        """
        location = self.tenant_dir(root, tenant_id)

        try:
            self.storage.make_dirs(location)
        except OSError as exc:
            logger.exception(
                "Failed to provision tenant directory",
                extra={"client_id": tenant_id, "root": root},
            )
            raise StorageError(
                message="Unable to prepare storage directory",
                error_code=ERROR_CODE_DIRECTORY_CREATE_FAILED,
                details={"client_id": tenant_id},
            ) from exc

        return location

    def clear_dir(self, location: str) -> ClearResult:
        """Remove every entry in ``location``.

        A failed removal is logged and reported in ``ClearResult.failed``;
        it never stops the remaining removals.
        """
        result = ClearResult()

        try:
            entries = self.storage.list_dir(location)
        except OSError:
            logger.exception("Failed to list directory for purge")
            result.failed.append(location)
            return result

        for name in entries:
            try:
                self.storage.remove(self.storage.join(location, name))
            except OSError as exc:
                logger.warning(
                    "Failed to remove file during purge",
                    extra={"file_name": name, "error": str(exc)},
                )
                result.failed.append(name)
            else:
                result.removed.append(name)

        logger.debug(
            "Directory purged",
            extra={"removed": len(result.removed), "failed": len(result.failed)},
        )
        return result

    def resolve_read_path(self, tenant_id: str, filename: str) -> str:
        """Return the location of ``filename`` in the first root that has it.

        Raises:
            ValidationError: If the tenant ID or filename is unsafe
            NotFoundError: If no root holds the file
            StorageError: If a lookup fails
        """
        validate_tenant_id(tenant_id)
        validate_filename(filename)

        for root in self.read_roots:
            location = self.file_location(root, tenant_id, filename)
            try:
                if self.storage.exists(location):
                    return location
            except OSError as exc:
                logger.exception(
                    "Storage lookup failed",
                    extra={"client_id": tenant_id, "file_name": filename},
                )
                raise StorageError(
                    message="Unable to read image",
                    error_code=ERROR_CODE_IMAGE_READ_FAILED,
                    details={"filename": filename},
                ) from exc

        logger.info(
            "Image not found in any root",
            extra={"client_id": tenant_id, "file_name": filename},
        )
        raise NotFoundError(
            message="file not found",
            error_code=ERROR_CODE_IMAGE_NOT_FOUND,
            details={"filename": filename},
        )

    def read_file(self, location: str) -> bytes:
        """Return the bytes stored at ``location``.

        Raises:
            NotFoundError: If the file vanished after lookup
            StorageError: If the read fails
        """
        try:
            return self.storage.read_bytes(location)
        except FileNotFoundError as exc:
            raise NotFoundError(
                message="file not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
            ) from exc
        except OSError as exc:
            logger.exception("Failed to read image")
            raise StorageError(
                message="Unable to read image",
                error_code=ERROR_CODE_IMAGE_READ_FAILED,
            ) from exc

    def write_file(self, directory: str, filename: str, stream: BinaryIO) -> int:
        """Copy ``stream`` to ``directory/filename`` and return the bytes written.

        Raises:
            StorageError: If the file cannot be written
        """
        location = self.storage.join(directory, validate_filename(filename))

        try:
            return self.storage.write_stream(location, stream)
        except OSError as exc:
            logger.exception("Failed to write image", extra={"file_name": filename})
            raise StorageError(
                message="Unable to save image",
                error_code=ERROR_CODE_IMAGE_WRITE_FAILED,
                details={"filename": filename},
            ) from exc

    def delete_file(self, root: str, tenant_id: str, filename: str) -> None:
        """Remove ``root/tenant_id/filename``.

        Raises:
            ValidationError: If the tenant ID or filename is unsafe
            NotFoundError: If the file does not exist
            StorageError: If the lookup or removal fails
        """
        location = self.file_location(root, tenant_id, filename)

        try:
            if not self.storage.exists(location):
                raise NotFoundError(
                    message="file not found",
                    error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                    details={"filename": filename},
                )
            self.storage.remove(location)
        except FileNotFoundError as exc:
            raise NotFoundError(
                message="file not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"filename": filename},
            ) from exc
        except OSError as exc:
            raise StorageError(
                message="Unable to delete image",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"filename": filename},
            ) from exc
