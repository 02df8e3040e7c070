# tests/infra/test_redis_client.py
"""
Тесты для клиента Redis.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from cleaning_market.core.orders.models import Order
from cleaning_market.infra.redis_client import RedisClient


class TestRedisClient:
    """Тесты для RedisClient."""

    @pytest.fixture
    def redis_client(self) -> RedisClient:
        """Новый экземпляр RedisClient с мок-клиентом redis."""
        RedisClient._instance = None
        client = RedisClient()
        client._client = MagicMock()
        client._client.get = AsyncMock(return_value=None)
        client._client.set = AsyncMock(return_value=True)
        client._client.delete = AsyncMock(return_value=1)
        client._client.ping = AsyncMock(return_value=True)
        return client

    def test_singleton(self) -> None:
        RedisClient._instance = None

        assert RedisClient() is RedisClient()

    def test_client_not_initialized(self) -> None:
        RedisClient._instance = None

        with pytest.raises(RuntimeError, match="Redis клиент не инициализирован"):
            _ = RedisClient().client

    def test_make_key_uses_namespace(self, redis_client: RedisClient) -> None:
        assert redis_client._make_key("order:42") == "cleaning:order:42"

        redis_client._namespace = "cleaning_test"
        assert redis_client._make_key("order:42") == "cleaning_test:order:42"

    @pytest.mark.asyncio
    async def test_set_with_ttl(self, redis_client: RedisClient) -> None:
        await redis_client.set("order:42", "{}", ttl=60)

        redis_client._client.set.assert_called_once_with("cleaning:order:42", "{}", ex=60)

    @pytest.mark.asyncio
    async def test_model_roundtrip(self, redis_client: RedisClient, make_order) -> None:
        order = make_order()

        await redis_client.set_model("order:42", order, ttl=60)
        stored_json = redis_client._client.set.call_args.args[1]
        redis_client._client.get.return_value = stored_json

        restored = await redis_client.get_model("order:42", Order)

        assert restored == order

    @pytest.mark.asyncio
    async def test_get_model_miss(self, redis_client: RedisClient) -> None:
        assert await redis_client.get_model("order:1", Order) is None

    @pytest.mark.asyncio
    async def test_get_model_corrupted_is_miss(self, redis_client: RedisClient) -> None:
        """Повреждённая запись в кэше считается промахом."""
        redis_client._client.get.return_value = "{not json"

        assert await redis_client.get_model("order:1", Order) is None

    @pytest.mark.asyncio
    async def test_health_check_failure(self, redis_client: RedisClient) -> None:
        redis_client._client.ping.side_effect = ConnectionError("down")

        assert await redis_client.health_check() is False
