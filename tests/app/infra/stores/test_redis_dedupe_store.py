"""Testes do RedisDedupeStore com mock."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from utils.errors import InfrastructureError, RedisConnectionError


class TestRedisDedupeStore:
    """Testes do RedisDedupeStore."""

    @pytest.mark.asyncio
    async def test_is_duplicate_false_when_key_created(self) -> None:
        """SET NX criou a chave: evento novo."""
        mock_redis = MagicMock()
        mock_redis.set = AsyncMock(return_value=True)
        store = RedisDedupeStore(mock_redis, ttl_seconds=600)

        assert await store.is_duplicate("dm:mid:M1") is False
        mock_redis.set.assert_awaited_once_with("dedupe:dm:mid:M1", "1", nx=True, ex=600)

    @pytest.mark.asyncio
    async def test_is_duplicate_true_when_key_exists(self) -> None:
        """SET NX retorna None quando a chave já existia."""
        mock_redis = MagicMock()
        mock_redis.set = AsyncMock(return_value=None)
        store = RedisDedupeStore(mock_redis)

        assert await store.is_duplicate("dm:mid:M1") is True

    @pytest.mark.asyncio
    async def test_connection_failure_raises_infrastructure_error(self) -> None:
        mock_redis = MagicMock()
        mock_redis.set = AsyncMock(side_effect=ConnectionError("refused"))
        store = RedisDedupeStore(mock_redis)

        with pytest.raises(RedisConnectionError) as exc_info:
            await store.is_duplicate("k")

        assert isinstance(exc_info.value, InfrastructureError)

    @pytest.mark.asyncio
    async def test_cleanup_async_does_not_touch_redis(self) -> None:
        mock_redis = MagicMock()
        store = RedisDedupeStore(mock_redis)

        await store.cleanup_async()

        mock_redis.assert_not_called()
        mock_redis.delete.assert_not_called()
