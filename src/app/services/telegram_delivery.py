"""Executor de entrega ao Telegram com retry limitado.

Nunca levanta exceção para falhas esperadas (config ausente, HTTP,
rejeição da API): o chamador recebe DeliveryResult(ok=False) e decide
o fallback (ex.: reenviar como documento).
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from api.connectors.telegram.errors import TelegramApiError
from app.observability import get_correlation_id, record_delivery, record_latency

if TYPE_CHECKING:
    from api.connectors.telegram.http_client import TelegramHttpClient

logger = logging.getLogger(__name__)

CONFIG_MISSING_DESCRIPTION = "Telegram config missing"

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Resultado de uma chamada ao Bot API (após retries)."""

    ok: bool
    result: Any = None
    description: str | None = None
    attempts: int = 0


class TelegramDeliveryService:
    """Envia mensagens/arquivos ao chat configurado.

    Args:
        transport: Cliente HTTP do Bot API (None quando não há bot token)
        chat_id: Chat de destino padrão
        max_attempts: Tentativas por chamada (inclui a primeira)
        retry_delay_seconds: Atraso linear: tentativa N espera N × delay
        sleep: Função de espera (injetável em testes)
    """

    def __init__(
        self,
        *,
        transport: TelegramHttpClient | None,
        chat_id: str,
        max_attempts: int = 3,
        retry_delay_seconds: float = 1.0,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._transport = transport
        self._chat_id = chat_id
        self._max_attempts = max(1, max_attempts)
        self._retry_delay_seconds = retry_delay_seconds
        self._sleep = sleep
        self._config_warning_logged = False

    @property
    def is_configured(self) -> bool:
        return self._transport is not None and bool(self._chat_id)

    @property
    def has_bot_token(self) -> bool:
        return self._transport is not None

    async def send(
        self,
        method: str,
        payload: dict[str, Any],
        *,
        thread_id: int | None = None,
        chat_id: str | None = None,
    ) -> DeliveryResult:
        """Envia chamada JSON (ex.: sendMessage).

        Args:
            method: Método do Bot API
            payload: Campos do método (sem chat_id)
            thread_id: Tópico do fórum, quando resolvido
            chat_id: Sobrescreve o chat configurado
        """
        target_chat = chat_id or self._chat_id
        transport = self._transport
        if transport is None or not target_chat:
            return self._config_missing(method)

        body: dict[str, Any] = {"chat_id": target_chat, **payload}
        if thread_id:
            body["message_thread_id"] = thread_id

        return await self._with_retry(method, lambda: transport.call(method, body))

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
    ) -> DeliveryResult:
        """Envia arquivo via multipart (sendPhoto, sendVideo, sendVoice, sendDocument)."""
        transport = self._transport
        if transport is None or not self._chat_id:
            return self._config_missing(method)

        fields: dict[str, str] = {"chat_id": self._chat_id}
        if thread_id:
            fields["message_thread_id"] = str(thread_id)
        for name, value in (extra_fields or {}).items():
            if value is None or value is False:
                continue
            fields[name] = "true" if value is True else str(value)

        files = {field_name: (filename, content, content_type)}
        return await self._with_retry(
            method,
            lambda: transport.call_multipart(method, fields, files),
        )

    async def create_forum_topic(self, name: str) -> DeliveryResult:
        """Cria tópico no fórum do chat configurado (createForumTopic)."""
        return await self.send("createForumTopic", {"name": name})

    def _config_missing(self, method: str) -> DeliveryResult:
        if not self._config_warning_logged:
            self._config_warning_logged = True
            logger.warning(
                "telegram_config_missing",
                extra={
                    "method": method,
                    "has_bot_token": self._transport is not None,
                    "has_chat_id": bool(self._chat_id),
                },
            )
        return DeliveryResult(ok=False, description=CONFIG_MISSING_DESCRIPTION)

    async def _with_retry(
        self,
        method: str,
        call: Callable[[], Awaitable[Any]],
    ) -> DeliveryResult:
        correlation_id = get_correlation_id()
        started_at = time.perf_counter()
        last_error: TelegramApiError | None = None
        attempt = 0

        for attempt in range(1, self._max_attempts + 1):
            try:
                result = await call()
            except TelegramApiError as exc:
                last_error = exc
                if not exc.is_retryable or attempt >= self._max_attempts:
                    break
                delay = attempt * self._retry_delay_seconds
                logger.info(
                    "telegram_retry_scheduled",
                    extra={
                        "method": method,
                        "attempt": attempt,
                        "delay_seconds": delay,
                        "error_code": exc.error_code,
                        "retry_after": exc.retry_after,
                    },
                )
                await self._sleep(delay)
                continue

            record_delivery(method, ok=True, attempts=attempt, correlation_id=correlation_id)
            record_latency(
                "telegram_delivery",
                method,
                (time.perf_counter() - started_at) * 1000,
                correlation_id,
            )
            return DeliveryResult(ok=True, result=result, attempts=attempt)

        description = last_error.description if last_error else "unknown_error"
        logger.warning(
            "telegram_send_failed",
            extra={
                "method": method,
                "attempts": attempt,
                "error_code": last_error.error_code if last_error else None,
                "retryable": last_error.is_retryable if last_error else None,
            },
        )
        record_delivery(method, ok=False, attempts=attempt, correlation_id=correlation_id)
        return DeliveryResult(ok=False, description=description, attempts=attempt)
