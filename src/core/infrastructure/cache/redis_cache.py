"""Redis-backed implementation of KeyValueCache."""

import json
from typing import Any

import redis
from aws_lambda_powertools import Logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.config import ServiceConfig
from core.infrastructure.adapters.redis_adapter import create_redis_client
from core.models.errors import (
    CacheBackendError,
    DeserializationError,
    NotFoundError,
    SerializationError,
)
from core.repositories.cache_repository import KeyValueCache, ModelT
from core.utils.constants import (
    CACHE_KEY_SEPARATOR,
    CACHE_KEY_TOKEN,
    ERROR_CODE_CACHE_MISS,
)

logger = Logger(UTC=True)


def build_cache_key(key: str, tenant_id: str) -> str:
    """Return the namespaced Redis key ``<key>:<tenant_id>``."""
    return f"{key}{CACHE_KEY_SEPARATOR}{tenant_id}"


class RedisKeyValueCache(KeyValueCache):
    """Key-value cache backed by a Redis client.

    Every call is a single round-trip; there is no local caching layer.
    """

    def __init__(self, client: redis.Redis, *, default_ttl: int = 0) -> None:
        """Create the cache.

        Args:
            client: Redis client created with ``decode_responses=True``
            default_ttl: Expiry in seconds for saved values; ``0`` keeps them forever
        """
        self._redis = client
        self._ttl = default_ttl or None

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "RedisKeyValueCache":
        return cls(create_redis_client(config), default_ttl=config.cache_default_ttl_seconds)

    def save(self, key: str, tenant_id: str, value: Any) -> None:
        redis_key = build_cache_key(key, tenant_id)

        try:
            if isinstance(value, BaseModel):
                payload = value.model_dump_json()
            else:
                payload = json.dumps(value, allow_nan=False)
        except (TypeError, ValueError) as exc:
            logger.error("Failed to serialize cache value", extra={"key": redis_key})
            raise SerializationError(
                message="Unable to serialize value for caching",
                details={"key": redis_key},
            ) from exc

        try:
            self._redis.set(redis_key, payload, ex=self._ttl)
        except redis.RedisError as exc:
            logger.exception("Cache write failed", extra={"key": redis_key})
            raise CacheBackendError(
                message="Unable to write to cache",
                details={"key": redis_key},
            ) from exc

        logger.debug("Cache SET", extra={"key": redis_key})

    def get(self, key: str, tenant_id: str, model: type[ModelT] | None = None) -> Any:
        redis_key = build_cache_key(key, tenant_id)

        try:
            raw = self._redis.get(redis_key)
        except redis.RedisError as exc:
            logger.exception("Cache read failed", extra={"key": redis_key})
            raise CacheBackendError(
                message="Unable to read from cache",
                details={"key": redis_key},
            ) from exc

        if raw is None:
            logger.debug("Cache MISS", extra={"key": redis_key})
            raise NotFoundError(
                message=f"No data found for key: {redis_key}",
                error_code=ERROR_CODE_CACHE_MISS,
                details={"key": redis_key},
            )

        try:
            if model is not None:
                return model.model_validate_json(raw)
            return json.loads(raw)
        except (PydanticValidationError, ValueError) as exc:
            logger.error("Failed to deserialize cache value", extra={"key": redis_key})
            raise DeserializationError(
                message="Cached value has an unexpected format",
                details={"key": redis_key},
            ) from exc

    def delete(self, key: str, tenant_id: str) -> None:
        redis_key = build_cache_key(key, tenant_id)

        try:
            self._redis.delete(redis_key)
        except redis.RedisError as exc:
            logger.exception("Cache delete failed", extra={"key": redis_key})
            raise CacheBackendError(
                message="Unable to delete from cache",
                details={"key": redis_key},
            ) from exc

    def save_token(self, tenant_id: str, token: str) -> None:
        redis_key = build_cache_key(CACHE_KEY_TOKEN, tenant_id)

        try:
            self._redis.set(redis_key, token, ex=self._ttl)
        except redis.RedisError as exc:
            logger.exception("Token write failed", extra={"tenant_id": tenant_id})
            raise CacheBackendError(
                message="Unable to store token",
                details={"tenant_id": tenant_id},
            ) from exc

    def get_token(self, tenant_id: str) -> str:
        redis_key = build_cache_key(CACHE_KEY_TOKEN, tenant_id)

        try:
            token = self._redis.get(redis_key)
        except redis.RedisError as exc:
            logger.exception("Token lookup failed", extra={"tenant_id": tenant_id})
            raise CacheBackendError(
                message="Unable to read token from cache",
                details={"tenant_id": tenant_id},
            ) from exc

        return token or ""

    def delete_token(self, tenant_id: str) -> None:
        self.delete(CACHE_KEY_TOKEN, tenant_id)
