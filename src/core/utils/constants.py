"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_INVALID_TENANT = "INVALID_TENANT"
ERROR_CODE_INVALID_FILENAME = "INVALID_FILENAME"
ERROR_CODE_INVALID_FORM = "INVALID_FORM"
ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT = "UNSUPPORTED_IMAGE_FORMAT"

# Authentication Errors
ERROR_CODE_MISSING_TOKEN = "MISSING_TOKEN"
ERROR_CODE_INVALID_TOKEN = "INVALID_TOKEN"
ERROR_CODE_INVALID_CLAIMS = "INVALID_TOKEN_CLAIMS"
ERROR_CODE_TOKEN_REVOKED = "TOKEN_REVOKED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
ERROR_CODE_CACHE_MISS = "CACHE_MISS"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_DIRECTORY_CREATE_FAILED = "DIRECTORY_CREATE_FAILED"
ERROR_CODE_DIRECTORY_CLEAR_FAILED = "DIRECTORY_CLEAR_FAILED"
ERROR_CODE_IMAGE_WRITE_FAILED = "IMAGE_WRITE_FAILED"
ERROR_CODE_IMAGE_READ_FAILED = "IMAGE_READ_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"

# Cache Errors
ERROR_CODE_CACHE_BACKEND = "CACHE_BACKEND_ERROR"
ERROR_CODE_CACHE_SERIALIZATION = "CACHE_SERIALIZATION_ERROR"
ERROR_CODE_CACHE_DESERIALIZATION = "CACHE_DESERIALIZATION_ERROR"


# ============================================================================
# Upload Constraints
# ============================================================================

UPLOAD_FORM_FIELD = "images"
PROFILE_UPLOAD_FORM_FIELD = "image"

CDN_URL_PREFIX = "/cdn"

MAX_FORM_SIZE = 10 * 1024 * 1024  # 10MB

DIRECTORY_MODE = 0o777

# Pillow format name -> file extension written to disk
TRANSCODE_FORMAT_EXTENSION_MAP: Final[dict[str, str]] = {
    "JPEG": ".jpeg",
    "PNG": ".png",
    "WEBP": ".webp",
}

DEFAULT_RESIZE_WIDTH = 800
DEFAULT_RESIZE_HEIGHT = 600
DEFAULT_JPEG_QUALITY = 80


# ============================================================================
# Content Types
# ============================================================================

EXTENSION_CONTENT_TYPE_MAP: Final[dict[str, str]] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}

FALLBACK_CONTENT_TYPE = "application/octet-stream"

CDN_CACHE_CONTROL = "public, max-age=86400"


# ============================================================================
# Identity Constraints
# ============================================================================

TENANT_ID_PATTERN = r"^[a-zA-Z0-9_-]+$"
TENANT_ID_MAX_LENGTH = 128

AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "

DEFAULT_JWT_ALGORITHM = "HS256"


# ============================================================================
# Cache Keys
# ============================================================================

CACHE_KEY_TOKEN = "token"
CACHE_KEY_SEPARATOR = ":"


# ============================================================================
# Message Bus
# ============================================================================

IMAGE_DELETE_CHANNEL = "asset.image.delete"


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization"
EXPOSE_HEADERS = "Content-Type,Content-Length,Cache-Control"
DEFAULT_CONTENT_TYPE = "application/json"


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_APP_PORT = "APP_PORT"
ENV_JWT_SECRET = "JWT_SECRET"
ENV_JWT_ALGORITHM = "JWT_ALGORITHM"
ENV_REDIS_HOST = "REDIS_HOST"
ENV_REDIS_PORT = "REDIS_PORT"
ENV_REDIS_DB = "REDIS_DB"
ENV_REDIS_PASSWORD = "REDIS_PASSWORD"
ENV_MESSAGE_BUS_URL = "MESSAGE_BUS_URL"
ENV_UPLOAD_DIR = "UPLOAD_DIR"
ENV_PROFILE_UPLOAD_DIR = "PROFILE_UPLOAD_DIR"
ENV_STORAGE_BACKEND = "STORAGE_BACKEND"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_RESIZE_ENABLED = "IMAGE_RESIZE_ENABLED"
ENV_IMAGE_RESIZE_WIDTH = "IMAGE_RESIZE_WIDTH"
ENV_IMAGE_RESIZE_HEIGHT = "IMAGE_RESIZE_HEIGHT"
ENV_IMAGE_JPEG_QUALITY = "IMAGE_JPEG_QUALITY"
ENV_TOKEN_CACHE_CHECK = "TOKEN_CACHE_CHECK"
ENV_CACHE_DEFAULT_TTL_SECONDS = "CACHE_DEFAULT_TTL_SECONDS"

DEFAULT_APP_PORT = 8181
DEFAULT_REDIS_HOST = "localhost"
DEFAULT_REDIS_PORT = 6379
DEFAULT_MESSAGE_BUS_URL = "redis://localhost:6379/0"
DEFAULT_UPLOAD_DIR = "./uploads"
DEFAULT_PROFILE_UPLOAD_DIR = "./uploads/profile"
DEFAULT_AWS_REGION = "us-east-1"

STORAGE_BACKEND_LOCAL = "local"
STORAGE_BACKEND_S3 = "s3"

REDIS_CONNECT_RETRIES = 5
REDIS_RETRY_DELAY_SECONDS = 2.0
REDIS_SOCKET_TIMEOUT_SECONDS = 5.0


# ============================================================================
# Helper Functions
# ============================================================================


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
