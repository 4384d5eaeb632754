"""Protocolos de envio para o Telegram Bot API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.services.telegram_delivery import DeliveryResult


class TelegramDeliveryProtocol(Protocol):
    """Contrato mínimo do executor de entrega (retry incluso)."""

    @property
    def is_configured(self) -> bool: ...

    async def send(
        self,
        method: str,
        payload: dict[str, Any],
        *,
        thread_id: int | None = None,
        chat_id: str | None = None,
    ) -> DeliveryResult: ...

    async def send_file(
        self,
        method: str,
        field_name: str,
        content: bytes,
        filename: str,
        content_type: str,
        extra_fields: dict[str, Any] | None = None,
        *,
        thread_id: int | None = None,
    ) -> DeliveryResult: ...

    async def create_forum_topic(self, name: str) -> DeliveryResult: ...


class TelegramNotifierProtocol(Protocol):
    """Fachada usada pelo dispatcher: resolve tópico e envia."""

    async def send_html(
        self,
        text: str,
        topic_key: str = "",
        topic_title: str = "",
    ) -> DeliveryResult: ...

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
    ) -> DeliveryResult: ...
