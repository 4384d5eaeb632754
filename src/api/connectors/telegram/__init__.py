"""Telegram Bot API: transporte HTTP e erros."""

from .errors import TelegramApiError, is_retryable_code
from .http_client import DEFAULT_API_BASE_URL, TelegramHttpClient

__all__ = [
    "DEFAULT_API_BASE_URL",
    "TelegramApiError",
    "TelegramHttpClient",
    "is_retryable_code",
]
