"""Factories: criação e wiring das implementações concretas.

Monta, a partir das settings, os componentes de vida longa do processo:
janela de dedupe, executor de entrega, roteador de tópicos, notificador,
cliente Graph API e o dispatcher.
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from api.connectors.instagram.graph_client import InstagramGraphClient
from api.connectors.telegram.http_client import TelegramHttpClient
from app.bootstrap.clients import create_async_redis_client, create_http_client
from app.infra.stores import MemoryDedupeStore, RedisDedupeStore, TopicCacheStore
from app.services.telegram_delivery import TelegramDeliveryService
from app.services.telegram_notifier import TelegramNotifier
from app.services.topic_router import TopicRouter
from app.use_cases.instagram import DispatchInstagramEventUseCase

if TYPE_CHECKING:
    import httpx

    from app.protocols.dedupe import AsyncDedupeProtocol
    from config.settings import (
        BaseSettings,
        DedupeSettings,
        InstagramSettings,
        TelegramSettings,
    )

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Dedupe Store Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_dedupe_store(
    settings: DedupeSettings,
    redis_client: Any | None = None,
) -> AsyncDedupeProtocol:
    """Cria store de dedupe conforme DEDUPE_BACKEND.

    - "memory": MemoryDedupeStore (padrão; janela por processo)
    - "redis": RedisDedupeStore (várias instâncias)
    """
    if settings.backend == "redis":
        if redis_client is None:
            msg = "DEDUPE_BACKEND=redis requer cliente Redis"
            raise ValueError(msg)
        logger.info("dedupe_store_created", extra={"backend": "redis"})
        return RedisDedupeStore(redis_client, ttl_seconds=settings.ttl_seconds)

    logger.info(
        "dedupe_store_created",
        extra={"backend": "memory", "max_entries": settings.max_entries},
    )
    return MemoryDedupeStore(ttl_seconds=settings.ttl_seconds, max_entries=settings.max_entries)


# ──────────────────────────────────────────────────────────────────────────────
# Telegram Factories
# ──────────────────────────────────────────────────────────────────────────────


def create_telegram_delivery(
    settings: TelegramSettings,
    http_client: httpx.AsyncClient,
) -> TelegramDeliveryService:
    """Cria executor de entrega (sem transporte quando falta o bot token)."""
    transport = (
        TelegramHttpClient(settings.bot_token, http_client, settings.api_base_url)
        if settings.bot_token
        else None
    )
    return TelegramDeliveryService(
        transport=transport,
        chat_id=settings.chat_id,
        max_attempts=settings.max_attempts,
        retry_delay_seconds=settings.retry_delay_seconds,
    )


def create_topic_router(
    settings: TelegramSettings,
    delivery: TelegramDeliveryService,
) -> TopicRouter:
    """Cria roteador de tópicos com cache persistido em disco."""
    return TopicRouter(
        delivery=delivery,
        store=TopicCacheStore(settings.topic_cache_path),
        enabled=settings.enable_topics,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Container do processo
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class RelayContainer:
    """Componentes de vida longa montados no startup."""

    dispatcher: DispatchInstagramEventUseCase
    telegram_delivery: TelegramDeliveryService
    topic_router: TopicRouter
    telegram_http: httpx.AsyncClient
    instagram_http: httpx.AsyncClient
    redis_client: Any | None = None

    async def aclose(self) -> None:
        """Fecha clientes HTTP e Redis."""
        await self.telegram_http.aclose()
        await self.instagram_http.aclose()
        if self.redis_client is not None:
            with contextlib.suppress(Exception):
                await self.redis_client.aclose()


def create_relay_container(
    *,
    base: BaseSettings,
    dedupe: DedupeSettings,
    instagram: InstagramSettings,
    telegram: TelegramSettings,
) -> RelayContainer:
    """Monta o grafo completo de dependências do relay."""
    redis_client = (
        create_async_redis_client(base.redis_url) if dedupe.backend == "redis" else None
    )
    telegram_http = create_http_client(telegram.request_timeout_seconds, name="telegram")
    instagram_http = create_http_client(instagram.request_timeout_seconds, name="instagram")

    delivery = create_telegram_delivery(telegram, telegram_http)
    topic_router = create_topic_router(telegram, delivery)
    notifier = TelegramNotifier(delivery=delivery, topic_router=topic_router)

    dispatcher = DispatchInstagramEventUseCase(
        dedupe=create_dedupe_store(dedupe, redis_client),
        notifier=notifier,
        graph=InstagramGraphClient(instagram, instagram_http),
        own_ig_user_id=instagram.ig_user_id,
        auto_reply_text=instagram.auto_reply_text,
    )
    return RelayContainer(
        dispatcher=dispatcher,
        telegram_delivery=delivery,
        topic_router=topic_router,
        telegram_http=telegram_http,
        instagram_http=instagram_http,
        redis_client=redis_client,
    )
