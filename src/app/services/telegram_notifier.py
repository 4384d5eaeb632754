"""Fachada de notificação: resolve o tópico e entrega via Bot API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.services.telegram_delivery import DeliveryResult, TelegramDeliveryService
    from app.services.topic_router import TopicRouter

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """Envia notificações HTML e arquivos para o tópico da categoria."""

    def __init__(self, *, delivery: TelegramDeliveryService, topic_router: TopicRouter) -> None:
        self._delivery = delivery
        self._topic_router = topic_router

    async def _thread_for(self, topic_key: str, topic_title: str) -> int | None:
        # Sem config, createForumTopic falharia igual; vai direto ao no-op
        if not self._delivery.is_configured:
            return None
        return await self._topic_router.resolve_thread(topic_key, topic_title)

    async def send_html(
        self,
        text: str,
        topic_key: str = "",
        topic_title: str = "",
    ) -> DeliveryResult:
        """Envia texto em parse_mode HTML, sem preview de links."""
        thread_id = await self._thread_for(topic_key, topic_title)
        result = await self._delivery.send(
            "sendMessage",
            {
                "text": text,
                "parse_mode": "HTML",
                "disable_web_page_preview": True,
            },
            thread_id=thread_id,
        )
        if not result.ok:
            logger.warning(
                "telegram_notification_failed",
                extra={
                    "method": "sendMessage",
                    "topic_key": topic_key,
                    "description": result.description,
                },
            )
        return result

    async def send_file(
        self,
        method: str,
        field_name: str,
        content: bytes,
        filename: str,
        content_type: str,
        *,
        caption: str | None = None,
        parse_mode: str | None = None,
        supports_streaming: bool = False,
        topic_key: str = "",
        topic_title: str = "",
    ) -> DeliveryResult:
        """Envia arquivo (foto, vídeo, voz, documento) para o tópico."""
        thread_id = await self._thread_for(topic_key, topic_title)
        extra_fields: dict[str, str | bool | None] = {
            "caption": caption,
            "parse_mode": parse_mode,
            "supports_streaming": supports_streaming,
        }
        result = await self._delivery.send_file(
            method,
            field_name,
            content,
            filename,
            content_type,
            extra_fields,
            thread_id=thread_id,
        )
        if not result.ok:
            logger.warning(
                "telegram_file_send_failed",
                extra={
                    "method": method,
                    "topic_key": topic_key,
                    "size_bytes": len(content),
                    "description": result.description,
                },
            )
        return result
