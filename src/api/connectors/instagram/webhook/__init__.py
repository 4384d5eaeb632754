"""Webhook Instagram: autenticação e parsing do POST."""

from .envelope import (
    InstagramWebhookEnvelope,
    InvalidJsonError,
    InvalidSignatureError,
    WebhookRequestError,
    open_webhook_envelope,
)

__all__ = [
    "InstagramWebhookEnvelope",
    "InvalidJsonError",
    "InvalidSignatureError",
    "WebhookRequestError",
    "open_webhook_envelope",
]
