"""Settings específicas de Instagram.

Configurações do webhook Instagram e da Graph API (Meta).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Constantes da Graph API para Instagram
INSTAGRAM_API_VERSION: str = "v21.0"
GRAPH_FACEBOOK_BASE_URL: str = "https://graph.facebook.com"
GRAPH_INSTAGRAM_BASE_URL: str = "https://graph.instagram.com"

DEFAULT_AUTO_REPLY_TEXT = "Salom! Sizga tez orada javob beramiz."


@dataclass(frozen=True)
class InstagramSettings:
    """Configurações do canal Instagram.

    Attributes:
        verify_token: Token para verificação do webhook (hub.verify_token)
        app_secret: Secret do app Meta para validação HMAC de payloads
        access_token: Token de acesso à Graph API
        ig_user_id: ID da própria conta (mensagens dela são ignoradas)
        auto_reply_text: Texto da resposta automática para DMs
        api_version: Versão da Graph API
        facebook_base_url: URL base graph.facebook.com
        instagram_base_url: URL base graph.instagram.com
        request_timeout_seconds: Timeout para requisições HTTP
        media_max_size_bytes: Tamanho máximo de mídia baixada
    """

    # Credenciais
    verify_token: str = ""
    app_secret: str = ""
    access_token: str = ""
    ig_user_id: str = ""

    # Resposta automática
    auto_reply_text: str = DEFAULT_AUTO_REPLY_TEXT

    # API
    api_version: str = INSTAGRAM_API_VERSION
    facebook_base_url: str = GRAPH_FACEBOOK_BASE_URL
    instagram_base_url: str = GRAPH_INSTAGRAM_BASE_URL

    # Timeouts e limites
    request_timeout_seconds: float = 30.0
    media_max_size_bytes: int = 50 * 1024 * 1024  # limite de upload do Bot API

    @property
    def facebook_endpoint(self) -> str:
        """URL graph.facebook.com com versão."""
        return f"{self.facebook_base_url}/{self.api_version}"

    @property
    def instagram_endpoint(self) -> str:
        """URL graph.instagram.com com versão."""
        return f"{self.instagram_base_url}/{self.api_version}"

    @property
    def messages_endpoint(self) -> str:
        """URL para envio de DMs pela própria conta."""
        return f"{self.instagram_endpoint}/me/messages"

    def validate(self) -> list[str]:
        """Valida configurações mínimas de Instagram."""
        errors: list[str] = []
        if not self.verify_token:
            errors.append("INSTAGRAM_VERIFY_TOKEN não configurado")
        if not self.app_secret:
            errors.append("META_APP_SECRET não configurado")
        if not self.access_token:
            errors.append("INSTAGRAM_ACCESS_TOKEN não configurado")
        if self.request_timeout_seconds <= 0:
            errors.append("INSTAGRAM_REQUEST_TIMEOUT_SECONDS deve ser > 0")
        return errors


def _load_from_env() -> InstagramSettings:
    """Carrega InstagramSettings de variáveis de ambiente."""
    return InstagramSettings(
        verify_token=os.getenv("INSTAGRAM_VERIFY_TOKEN", ""),
        app_secret=os.getenv("META_APP_SECRET", ""),
        access_token=os.getenv("INSTAGRAM_ACCESS_TOKEN", ""),
        ig_user_id=os.getenv("INSTAGRAM_IG_USER_ID", ""),
        auto_reply_text=os.getenv("INSTAGRAM_AUTO_REPLY_TEXT", DEFAULT_AUTO_REPLY_TEXT),
        api_version=os.getenv("INSTAGRAM_API_VERSION", INSTAGRAM_API_VERSION),
        facebook_base_url=os.getenv("INSTAGRAM_FACEBOOK_BASE_URL", GRAPH_FACEBOOK_BASE_URL),
        instagram_base_url=os.getenv("INSTAGRAM_API_BASE_URL", GRAPH_INSTAGRAM_BASE_URL),
        request_timeout_seconds=float(os.getenv("INSTAGRAM_REQUEST_TIMEOUT_SECONDS", "30")),
        media_max_size_bytes=int(
            os.getenv("INSTAGRAM_MEDIA_MAX_SIZE_BYTES", str(50 * 1024 * 1024))
        ),
    )


@lru_cache(maxsize=1)
def get_instagram_settings() -> InstagramSettings:
    """Retorna instância cacheada de InstagramSettings."""
    return _load_from_env()
