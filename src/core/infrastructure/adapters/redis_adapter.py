"""Thin adapter for creating Redis clients."""

import time

import redis
from aws_lambda_powertools import Logger

from core.config import ServiceConfig
from core.utils.constants import (
    REDIS_CONNECT_RETRIES,
    REDIS_RETRY_DELAY_SECONDS,
    REDIS_SOCKET_TIMEOUT_SECONDS,
)

logger = Logger(UTC=True)


def create_redis_client(config: ServiceConfig) -> redis.Redis:
    """Build a Redis client from configuration (no network I/O)."""
    return redis.Redis(
        host=config.redis_host,
        port=config.redis_port,
        db=config.redis_db,
        password=config.redis_password.get_secret_value() if config.redis_password else None,
        decode_responses=True,
        socket_connect_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
    )


def connect_with_retry(
    client: redis.Redis,
    *,
    retries: int = REDIS_CONNECT_RETRIES,
    delay: float = REDIS_RETRY_DELAY_SECONDS,
) -> redis.Redis:
    """Ping ``client`` until it answers.

    Raises:
        redis.ConnectionError: If every attempt fails
    """
    last_error: redis.RedisError | None = None

    for attempt in range(1, retries + 1):
        try:
            client.ping()
            logger.info("Connected to Redis", extra={"attempt": attempt})
            return client
        except (redis.ConnectionError, redis.TimeoutError) as exc:
            last_error = exc
            logger.warning(
                "Retrying Redis connection",
                extra={"attempt": attempt, "error": str(exc)},
            )
            if attempt < retries:
                time.sleep(delay)

    raise redis.ConnectionError(
        f"Failed to connect to Redis after {retries} attempts"
    ) from last_error
