"""Settings específicas de Telegram.

Configurações de entrega via Bot API (chat de destino, tópicos, retries).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Constantes da Telegram Bot API
TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"
DEFAULT_TOPIC_CACHE_PATH: str = ".telegram-topic-cache.json"


@dataclass(frozen=True)
class TelegramSettings:
    """Configurações do canal Telegram.

    Attributes:
        bot_token: Token do bot Telegram (obtido via @BotFather)
        chat_id: Chat/grupo de destino das notificações
        enable_topics: Roteia notificações para tópicos do fórum
        topic_cache_path: Arquivo JSON com o mapa topic_key -> thread_id
        api_base_url: URL base da API
        request_timeout_seconds: Timeout para requisições HTTP
        max_attempts: Tentativas por envio (inclui a primeira)
        retry_delay_seconds: Base do backoff linear entre tentativas
        admin_token: Token exigido pelo endpoint manual de envio
    """

    # Credenciais
    bot_token: str = ""
    chat_id: str = ""

    # Tópicos
    enable_topics: bool = True
    topic_cache_path: str = DEFAULT_TOPIC_CACHE_PATH

    # API
    api_base_url: str = TELEGRAM_API_BASE_URL

    # Timeouts e retries
    request_timeout_seconds: float = 30.0
    max_attempts: int = 3
    retry_delay_seconds: float = 1.0

    # Endpoint manual
    admin_token: str = ""

    @property
    def is_configured(self) -> bool:
        """True quando token e chat de destino estão presentes."""
        return bool(self.bot_token and self.chat_id)

    def validate(self) -> list[str]:
        """Valida configurações mínimas de Telegram."""
        errors: list[str] = []
        if not self.bot_token:
            errors.append("TELEGRAM_BOT_TOKEN não configurado")
        if not self.chat_id:
            errors.append("TELEGRAM_CHAT_ID não configurado")
        if self.request_timeout_seconds <= 0:
            errors.append("TELEGRAM_REQUEST_TIMEOUT_SECONDS deve ser > 0")
        if self.max_attempts < 1:
            errors.append("TELEGRAM_MAX_ATTEMPTS deve ser >= 1")
        if self.retry_delay_seconds < 0:
            errors.append("TELEGRAM_RETRY_DELAY_SECONDS deve ser >= 0")
        return errors


def _load_from_env() -> TelegramSettings:
    """Carrega TelegramSettings de variáveis de ambiente."""
    return TelegramSettings(
        bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        chat_id=os.getenv("TELEGRAM_CHAT_ID", os.getenv("CHAT_ID", "")),
        enable_topics=os.getenv("TELEGRAM_ENABLE_TOPICS", "true").lower() != "false",
        topic_cache_path=os.getenv("TELEGRAM_TOPIC_CACHE_PATH", DEFAULT_TOPIC_CACHE_PATH),
        api_base_url=os.getenv("TELEGRAM_API_BASE_URL", TELEGRAM_API_BASE_URL),
        request_timeout_seconds=float(os.getenv("TELEGRAM_REQUEST_TIMEOUT_SECONDS", "30")),
        max_attempts=int(os.getenv("TELEGRAM_MAX_ATTEMPTS", "3")),
        retry_delay_seconds=float(os.getenv("TELEGRAM_RETRY_DELAY_SECONDS", "1.0")),
        admin_token=os.getenv("RELAY_ADMIN_TOKEN", ""),
    )


@lru_cache(maxsize=1)
def get_telegram_settings() -> TelegramSettings:
    """Retorna instância cacheada de TelegramSettings."""
    return _load_from_env()
