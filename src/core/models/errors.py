"""Custom exception classes for the image CDN service."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_CACHE_BACKEND,
    ERROR_CODE_CACHE_DESERIALIZATION,
    ERROR_CODE_CACHE_SERIALIZATION,
    ERROR_CODE_INVALID_TOKEN,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORAGE,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """
    Base exception for all image service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when request input is missing or malformed."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class AuthError(ImageServiceError):
    """Raised when a bearer token is missing, invalid, expired or lacks claims."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVALID_TOKEN,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(ImageServiceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StorageError(ImageServiceError):
    """Raised when a disk or object-store operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class CacheBackendError(ImageServiceError):
    """Raised when the cache store cannot be reached or rejects a command."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CACHE_BACKEND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class SerializationError(ImageServiceError):
    """Raised when a value cannot be encoded to JSON for caching."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CACHE_SERIALIZATION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class DeserializationError(ImageServiceError):
    """Raised when a cached blob cannot be decoded into the requested shape."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CACHE_DESERIALIZATION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
