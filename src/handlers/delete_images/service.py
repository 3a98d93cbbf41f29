"""Business logic for image deletion.

Shared by the HTTP handler and the message-bus listener; both call
``DeleteService.delete_images``.
"""

from __future__ import annotations

from collections.abc import Iterable

from aws_lambda_powertools import Logger

from core.config import ServiceConfig
from core.models.errors import NotFoundError, StorageError, ValidationError
from core.models.image import DeleteResult
from core.storage.factory import build_storage_layout
from core.storage.layout import StorageLayout, validate_tenant_id

logger = Logger(UTC=True)


class DeleteService:
    """Removes a tenant's images from the general upload root."""

    def __init__(self, layout: StorageLayout) -> None:
        self.layout = layout

    @classmethod
    def from_config(cls, config: ServiceConfig) -> DeleteService:
        return cls(build_storage_layout(config))

    def delete_images(self, tenant_id: str, filenames: Iterable[str]) -> DeleteResult:
        """Delete each named file, collecting per-file outcomes.

        A missing, unsafe or undeletable name is recorded in ``failed``;
        it never stops the remaining deletions. Both lists keep input order.
        """
        names = list(filenames)
        result = DeleteResult(client_id=tenant_id or "")

        try:
            validate_tenant_id(tenant_id)
        except ValidationError:
            logger.warning(
                "Delete requested for invalid tenant",
                extra={"client_id": tenant_id, "count": len(names)},
            )
            result.failed.extend(names)
            return result

        for name in names:
            try:
                self.layout.delete_file(self.layout.upload_root, tenant_id, name)
            except (ValidationError, NotFoundError) as exc:
                logger.info(
                    "Image not deleted",
                    extra={"client_id": tenant_id, "file_name": name, "reason": exc.message},
                )
                result.failed.append(name)
            except StorageError:
                logger.exception(
                    "Image removal failed",
                    extra={"client_id": tenant_id, "file_name": name},
                )
                result.failed.append(name)
            else:
                result.deleted.append(name)

        logger.info(
            "Delete request processed",
            extra={
                "client_id": tenant_id,
                "deleted": len(result.deleted),
                "failed": len(result.failed),
            },
        )
        return result
