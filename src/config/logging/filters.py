"""Filters de logging para injeção de contexto e mascaramento de segredos.

Campos injetados:
- correlation_id: ID de rastreamento da requisição do webhook
- service: Nome do serviço (ex: ig_telegram_relay)

Segredos mascarados:
- token do bot Telegram embutido em URLs (bot<id>:<hash>)
- access_token da Graph API em query strings
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

_BOT_TOKEN_RE = re.compile(r"bot\d+:[A-Za-z0-9_-]+")
_ACCESS_TOKEN_RE = re.compile(r"(access_token=)[^&\s\"']+")

REDACTED = "***"


def redact_secrets(text: str) -> str:
    """Mascara token do bot e access_token em um texto livre."""
    text = _BOT_TOKEN_RE.sub(f"bot{REDACTED}", text)
    return _ACCESS_TOKEN_RE.sub(rf"\g<1>{REDACTED}", text)


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Importante: nunca adicionar payloads brutos de DM nos logs.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona correlation_id e service ao record.

        Se correlation_id já foi passado via `extra`, preserva o valor.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SecretRedactionFilter(logging.Filter):
    """Remove tokens de mensagens já formatadas (ex.: URLs logadas pelo httpx)."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_secrets(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True
