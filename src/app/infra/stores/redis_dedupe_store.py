"""Redis Dedupe Store: janela de dedupe compartilhada entre instâncias.

Usa SET NX EX (set if not exists, com expiração) para check-and-insert
atômico mesmo com vários processos recebendo o mesmo webhook.

Contrato de Keys:
    As keys são chaves de idempotência (ex.: "dm:mid:<mid>", hashes).
    Keys são logadas parcialmente em DEBUG.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.dedupe import AsyncDedupeProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

# Prefixo para namespace de dedupe
DEDUPE_PREFIX = "dedupe:"


def _mask(key: str) -> str:
    return key[:12] + "..." if len(key) > 12 else key


class RedisDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe usando Redis.

    Args:
        async_redis_client: Cliente redis.asyncio
        ttl_seconds: Janela de dedupe; o próprio Redis expira as chaves
    """

    def __init__(self, async_redis_client: AsyncRedis, ttl_seconds: int = 600) -> None:
        self._async_redis = async_redis_client
        self._ttl_seconds = ttl_seconds

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{DEDUPE_PREFIX}{key}"

    async def is_duplicate(self, key: str) -> bool:
        """Verifica e marca chave atomicamente.

        SET NX retorna True se criou (novo), None se já existia (duplicado).

        Raises:
            RedisConnectionError: Falha de comunicação com o Redis
        """
        try:
            was_set = await self._async_redis.set(
                self._key(key), "1", nx=True, ex=self._ttl_seconds
            )
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar dedupe no Redis") from exc

        is_duplicate = not was_set
        if is_duplicate:
            logger.debug("dedupe_duplicate_detected", extra={"key": _mask(key)})
        return is_duplicate

    async def cleanup_async(self) -> None:
        """Nada a fazer: expiração fica a cargo do Redis (EX)."""
