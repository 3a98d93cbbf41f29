"""S3-backed implementation of ImageStorageRepository.

Roots become key prefixes and tenant "directories" are implicit, so
``make_dirs`` has nothing to do. Client errors are translated into the
``OSError`` family the storage contract promises.
"""

from typing import BinaryIO

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.mime import content_type_for_filename

logger = Logger(UTC=True)

_MISSING_KEY_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class _CountingReader:
    """File-like wrapper that counts the bytes handed to boto3."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        chunk = self._stream.read(size)
        self.bytes_read += len(chunk)
        return chunk


def _is_missing(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES


class S3ImageStorage(ImageStorageRepository):
    """Image storage implementation backed by Amazon S3."""

    def __init__(self, adapter: S3Adapter) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter

    def join(self, *parts: str) -> str:
        segments: list[str] = []
        for part in parts:
            cleaned = part.strip("/")
            while cleaned.startswith("./"):
                cleaned = cleaned[2:]
            if cleaned and cleaned != ".":
                segments.append(cleaned)
        return "/".join(segments)

    def make_dirs(self, location: str) -> None:
        logger.debug("Prefix needs no provisioning", extra={"prefix": location})

    def list_dir(self, location: str) -> list[str]:
        prefix = f"{location.rstrip('/')}/"

        try:
            names = [
                key[len(prefix) :]
                for key in self._s3.iter_keys(prefix=prefix)
                if "/" not in key[len(prefix) :]
            ]
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 listing failed", extra={"prefix": prefix})
            raise OSError(f"Unable to list {prefix}") from exc

        return sorted(names)

    def exists(self, location: str) -> bool:
        try:
            self._s3.head_object(key=location)
        except ClientError as exc:
            if _is_missing(exc):
                return False
            logger.error("S3 head_object failed", extra={"key": location})
            raise OSError(f"Unable to stat {location}") from exc
        except BotoCoreError as exc:
            raise OSError(f"Unable to stat {location}") from exc

        return True

    def write_stream(self, location: str, stream: BinaryIO) -> int:
        reader = _CountingReader(stream)

        try:
            self._s3.upload_fileobj(
                key=location,
                fileobj=reader,  # type: ignore[arg-type]
                content_type=content_type_for_filename(location),
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 upload failed", extra={"key": location})
            raise OSError(f"Unable to write {location}") from exc

        logger.debug(
            "Image uploaded to S3",
            extra={"key": location, "size": reader.bytes_read},
        )
        return reader.bytes_read

    def read_bytes(self, location: str) -> bytes:
        try:
            response = self._s3.get_object(key=location)
            body: bytes = response["Body"].read()
        except ClientError as exc:
            if _is_missing(exc):
                raise FileNotFoundError(location) from exc
            logger.error("S3 download failed", extra={"key": location})
            raise OSError(f"Unable to read {location}") from exc
        except BotoCoreError as exc:
            raise OSError(f"Unable to read {location}") from exc

        return body

    def remove(self, location: str) -> None:
        try:
            self._s3.delete_object(key=location)
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 deletion failed", extra={"key": location})
            raise OSError(f"Unable to delete {location}") from exc
