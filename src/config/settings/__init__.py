"""Agregador de settings do relay Instagram → Telegram.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    DedupeBackend,
    DedupeSettings,
    Environment,
    get_base_settings,
    get_dedupe_settings,
)

# Channel-specific settings
from config.settings.instagram import (
    DEFAULT_AUTO_REPLY_TEXT,
    INSTAGRAM_API_VERSION,
    InstagramSettings,
    get_instagram_settings,
)
from config.settings.telegram import (
    TELEGRAM_API_BASE_URL,
    TelegramSettings,
    get_telegram_settings,
)

__all__ = [
    # Constants
    "DEFAULT_AUTO_REPLY_TEXT",
    "INSTAGRAM_API_VERSION",
    "TELEGRAM_API_BASE_URL",
    # Base
    "BaseSettings",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    # Channels
    "InstagramSettings",
    "TelegramSettings",
    "get_base_settings",
    "get_dedupe_settings",
    "get_instagram_settings",
    "get_telegram_settings",
]
