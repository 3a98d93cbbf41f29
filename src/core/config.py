"""Service configuration.

Configuration is loaded from the environment once, at the edge of the
process (Lambda handler or worker entrypoint), and then handed to services
through their constructors.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from aws_lambda_powertools import Logger
from pydantic import Field, SecretStr, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.constants import (
    DEFAULT_APP_PORT,
    DEFAULT_AWS_REGION,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_JWT_ALGORITHM,
    DEFAULT_MESSAGE_BUS_URL,
    DEFAULT_PROFILE_UPLOAD_DIR,
    DEFAULT_REDIS_HOST,
    DEFAULT_REDIS_PORT,
    DEFAULT_RESIZE_HEIGHT,
    DEFAULT_RESIZE_WIDTH,
    DEFAULT_UPLOAD_DIR,
    ENV_APP_PORT,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_CACHE_DEFAULT_TTL_SECONDS,
    ENV_IMAGE_JPEG_QUALITY,
    ENV_IMAGE_RESIZE_ENABLED,
    ENV_IMAGE_RESIZE_HEIGHT,
    ENV_IMAGE_RESIZE_WIDTH,
    ENV_IMAGE_S3_BUCKET_NAME,
    ENV_JWT_ALGORITHM,
    ENV_JWT_SECRET,
    ENV_MESSAGE_BUS_URL,
    ENV_PROFILE_UPLOAD_DIR,
    ENV_REDIS_DB,
    ENV_REDIS_HOST,
    ENV_REDIS_PASSWORD,
    ENV_REDIS_PORT,
    ENV_STORAGE_BACKEND,
    ENV_TOKEN_CACHE_CHECK,
    ENV_UPLOAD_DIR,
    STORAGE_BACKEND_LOCAL,
)

logger = Logger(UTC=True)

class ServiceConfig(BaseSettings):
    """Immutable configuration shared by handlers, services and workers.

    Each field is read from the environment variable named by its alias.
    Empty variables count as unset.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )

    app_port: int = Field(DEFAULT_APP_PORT, ge=1, le=65535, validation_alias=ENV_APP_PORT)

    jwt_secret: SecretStr = Field(
        ...,
        validation_alias=ENV_JWT_SECRET,
        description="Shared secret used to verify bearer tokens",
    )
    jwt_algorithm: str = Field(DEFAULT_JWT_ALGORITHM, validation_alias=ENV_JWT_ALGORITHM)

    redis_host: str = Field(DEFAULT_REDIS_HOST, validation_alias=ENV_REDIS_HOST)
    redis_port: int = Field(DEFAULT_REDIS_PORT, ge=1, le=65535, validation_alias=ENV_REDIS_PORT)
    redis_db: int = Field(0, ge=0, validation_alias=ENV_REDIS_DB)
    redis_password: SecretStr | None = Field(None, validation_alias=ENV_REDIS_PASSWORD)
    cache_default_ttl_seconds: int = Field(
        0,
        ge=0,
        validation_alias=ENV_CACHE_DEFAULT_TTL_SECONDS,
        description="0 disables expiry",
    )

    message_bus_url: str = Field(DEFAULT_MESSAGE_BUS_URL, validation_alias=ENV_MESSAGE_BUS_URL)

    upload_dir: str = Field(DEFAULT_UPLOAD_DIR, validation_alias=ENV_UPLOAD_DIR)
    profile_upload_dir: str = Field(DEFAULT_PROFILE_UPLOAD_DIR, validation_alias=ENV_PROFILE_UPLOAD_DIR)
    storage_backend: Literal["local", "s3"] = Field(STORAGE_BACKEND_LOCAL, validation_alias=ENV_STORAGE_BACKEND)
    s3_bucket_name: str | None = Field(None, validation_alias=ENV_IMAGE_S3_BUCKET_NAME)
    aws_endpoint_url: str | None = Field(None, validation_alias=ENV_AWS_ENDPOINT_URL)
    aws_region: str = Field(DEFAULT_AWS_REGION, validation_alias=ENV_AWS_REGION)

    resize_enabled: bool = Field(False, validation_alias=ENV_IMAGE_RESIZE_ENABLED)
    resize_width: int = Field(DEFAULT_RESIZE_WIDTH, gt=0, validation_alias=ENV_IMAGE_RESIZE_WIDTH)
    resize_height: int = Field(DEFAULT_RESIZE_HEIGHT, gt=0, validation_alias=ENV_IMAGE_RESIZE_HEIGHT)
    jpeg_quality: int = Field(DEFAULT_JPEG_QUALITY, ge=1, le=95, validation_alias=ENV_IMAGE_JPEG_QUALITY)

    token_cache_check: bool = Field(False, validation_alias=ENV_TOKEN_CACHE_CHECK)

    @field_validator("storage_backend", mode="before")
    @classmethod
    def _lower_backend(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServiceConfig:
        """Build configuration from environment variables.

        Reads the process environment unless ``environ`` is given, in which
        case only that mapping is consulted. Unset variables fall back to the
        documented defaults. ``JWT_SECRET`` has no default and must be
        provided. Booleans accept ``1/0``, ``true/false``, ``yes/no`` and
        ``on/off``; anything else is rejected.

        Raises:
            RuntimeError: If a value is missing or malformed
        """
        try:
            if environ is None:
                config = cls()
            else:
                config = cls.model_validate({key: value for key, value in environ.items() if value != ""})
        except PydanticValidationError as exc:
            logger.error(
                "Invalid service configuration",
                extra={"fields": [".".join(str(x) for x in err["loc"]) for err in exc.errors()]},
            )
            raise RuntimeError("Invalid service configuration") from exc

        logger.debug(
            "Configuration loaded",
            extra={
                "storage_backend": config.storage_backend,
                "upload_dir": config.upload_dir,
                "profile_upload_dir": config.profile_upload_dir,
                "redis_host": config.redis_host,
            },
        )
        return config
