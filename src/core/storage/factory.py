"""Builds the storage backend selected by configuration."""

from core.config import ServiceConfig
from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.infrastructure.local.local_image_storage import LocalImageStorage
from core.repositories.storage_repository import ImageStorageRepository
from core.storage.layout import StorageLayout
from core.utils.constants import STORAGE_BACKEND_S3


def build_image_storage(config: ServiceConfig) -> ImageStorageRepository:
    if config.storage_backend == STORAGE_BACKEND_S3:
        return S3ImageStorage(S3Adapter.from_config(config))
    return LocalImageStorage()


def build_storage_layout(config: ServiceConfig) -> StorageLayout:
    return StorageLayout.from_config(config, build_image_storage(config))
