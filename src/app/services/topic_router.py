"""Roteamento de notificações para tópicos do fórum do Telegram.

Tópicos são criados sob demanda (um por topic_key) e cacheados em disco.
Falhas de criação ficam em cache negativo (0) pelo resto da execução.
Se o chat não é fórum ou o bot não tem permissão, o roteamento por
tópico é desligado para o processo inteiro e tudo vai para o chat geral.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from utils.errors import TopicCacheStorageError

if TYPE_CHECKING:
    from app.infra.stores.topic_cache_store import TopicCacheStore
    from app.protocols.telegram import TelegramDeliveryProtocol

logger = logging.getLogger(__name__)

TOPIC_TITLE_PREFIX = "IG | "
TOPIC_TITLE_MAX_LENGTH = 120

# Substrings (minúsculas) que indicam que o chat nunca aceitará tópicos
FORUM_UNAVAILABLE_MARKERS: tuple[str, ...] = (
    "not a forum",
    "chat is not a forum",
    "not enough rights",
    "topic_deleted",
)


def build_topic_name(topic_key: str, topic_title: str = "") -> str:
    """Nome do tópico: "IG | <título>", limitado a 120 caracteres."""
    return f"{TOPIC_TITLE_PREFIX}{topic_title or topic_key}"[:TOPIC_TITLE_MAX_LENGTH]


def is_forum_unavailable(description: str | None) -> bool:
    """True se a descrição do erro indica fórum indisponível/sem permissão."""
    lowered = (description or "").lower()
    return any(marker in lowered for marker in FORUM_UNAVAILABLE_MARKERS)


class TopicRouter:
    """Resolve topic_key -> message_thread_id.

    Args:
        delivery: Executor de entrega (createForumTopic)
        store: Persistência do cache (None = só memória)
        enabled: TELEGRAM_ENABLE_TOPICS
    """

    def __init__(
        self,
        *,
        delivery: TelegramDeliveryProtocol,
        store: TopicCacheStore | None = None,
        enabled: bool = True,
    ) -> None:
        self._delivery = delivery
        self._store = store
        self._enabled = enabled
        self._forum_available = True
        self._cache: dict[str, int] = store.load() if store is not None else {}
        self._lock = asyncio.Lock()

    @property
    def forum_available(self) -> bool:
        return self._forum_available

    @property
    def cached_topics(self) -> dict[str, int]:
        """Cópia do cache atual (inclui falhas registradas como 0)."""
        return dict(self._cache)

    async def resolve_thread(self, topic_key: str, topic_title: str = "") -> int | None:
        """Retorna o thread id do tópico, criando-o se necessário.

        Args:
            topic_key: Categoria (ex.: "posts", "story", "dm.message")
            topic_title: Título legível para o tópico novo

        Returns:
            Thread id positivo, ou None para enviar ao chat geral.
        """
        if not self._enabled or not self._forum_available or not topic_key:
            return None

        if topic_key in self._cache:
            return self._cache[topic_key] or None

        async with self._lock:
            # Outra task pode ter criado o tópico enquanto esperávamos
            if topic_key in self._cache:
                return self._cache[topic_key] or None
            if not self._forum_available:
                return None
            return await self._create_topic(topic_key, topic_title)

    async def _create_topic(self, topic_key: str, topic_title: str) -> int | None:
        result = await self._delivery.create_forum_topic(build_topic_name(topic_key, topic_title))

        thread_id = None
        if result.ok and isinstance(result.result, dict):
            thread_id = result.result.get("message_thread_id")

        if isinstance(thread_id, int) and thread_id > 0:
            self._cache[topic_key] = thread_id
            self._persist()
            logger.info(
                "telegram_topic_created",
                extra={"topic_key": topic_key, "thread_id": thread_id},
            )
            return thread_id

        if is_forum_unavailable(result.description):
            if self._forum_available:
                logger.warning(
                    "telegram_forum_unavailable",
                    extra={"topic_key": topic_key, "description": result.description},
                )
            self._forum_available = False
        else:
            logger.error(
                "telegram_topic_create_failed",
                extra={"topic_key": topic_key, "description": result.description},
            )
        self._cache[topic_key] = 0
        return None

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            self._store.save(self._cache)
        except TopicCacheStorageError:
            logger.exception(
                "topic_cache_save_failed",
                extra={"path": str(self._store.path)},
            )
