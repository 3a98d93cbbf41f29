from unittest.mock import MagicMock, patch

import pytest
import redis

from core.config import ServiceConfig
from core.infrastructure.adapters.redis_adapter import connect_with_retry, create_redis_client


class TestCreateRedisClient:
    def test_uses_configured_connection(self):
        config = ServiceConfig.from_env(
            {
                "JWT_SECRET": "x" * 32,
                "REDIS_HOST": "cache.internal",
                "REDIS_PORT": "6380",
                "REDIS_DB": "2",
                "REDIS_PASSWORD": "hunter2",
            }
        )

        client = create_redis_client(config)
        kwargs = client.connection_pool.connection_kwargs

        assert kwargs["host"] == "cache.internal"
        assert kwargs["port"] == 6380
        assert kwargs["db"] == 2
        assert kwargs["password"] == "hunter2"
        assert kwargs["decode_responses"] is True


class TestConnectWithRetry:
    def test_returns_client_once_ping_succeeds(self):
        client = MagicMock()
        client.ping.side_effect = [redis.ConnectionError("down"), True]

        with patch("core.infrastructure.adapters.redis_adapter.time.sleep") as sleep:
            assert connect_with_retry(client, retries=3, delay=0.5) is client

        assert client.ping.call_count == 2
        sleep.assert_called_once_with(0.5)

    def test_raises_after_all_attempts(self):
        client = MagicMock()
        client.ping.side_effect = redis.TimeoutError("slow")

        with patch("core.infrastructure.adapters.redis_adapter.time.sleep") as sleep:
            with pytest.raises(redis.ConnectionError, match="3 attempts"):
                connect_with_retry(client, retries=3, delay=0.1)

        assert client.ping.call_count == 3
        assert sleep.call_count == 2
