"""Envelope do webhook Instagram: corpo assinado, parseado e resumido.

A rota só precisa saber se aceita (200) ou rejeita (401/400) o POST; o
dispatcher recebe o payload. Cada erro carrega a resposta HTTP que a
Meta deve ver, para que a rota não precise mapear exceções uma a uma.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..signature import verify_meta_signature

if TYPE_CHECKING:
    from collections.abc import Mapping

EXPECTED_OBJECT = "instagram"


class WebhookRequestError(ValueError):
    """POST rejeitado antes do dispatch."""

    status_code = 400
    response_text = "Bad Request"

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidSignatureError(WebhookRequestError):
    """X-Hub-Signature-256 ausente, malformada ou divergente."""

    status_code = 401
    response_text = "Invalid signature"


class InvalidJsonError(WebhookRequestError):
    """Corpo que não é um objeto JSON."""


@dataclass(frozen=True, slots=True)
class InstagramWebhookEnvelope:
    """POST aceito: payload para o dispatcher e metadados para log."""

    payload: dict[str, Any]
    body_size: int
    signature_skipped: bool = False

    @property
    def object_type(self) -> str | None:
        value = self.payload.get("object")
        return str(value) if value is not None else None

    @property
    def entry_count(self) -> int:
        entries = self.payload.get("entry")
        return len(entries) if isinstance(entries, list) else 0

    @property
    def is_instagram(self) -> bool:
        # Payloads de outros objetos ainda são encaminhados (diagnóstico)
        return self.object_type == EXPECTED_OBJECT


def open_webhook_envelope(
    raw_body: bytes,
    headers: Mapping[str, str],
    *,
    app_secret: str | None,
    allow_unsigned: bool = False,
) -> InstagramWebhookEnvelope:
    """Autentica e parseia o corpo de um POST do webhook.

    Args:
        raw_body: Corpo bruto (a assinatura é calculada sobre ele)
        headers: Headers recebidos
        app_secret: META_APP_SECRET
        allow_unsigned: Sem secret, aceita sem verificar (apenas development)

    Raises:
        InvalidSignatureError: Assinatura inválida ou secret ausente
        InvalidJsonError: Corpo não é um objeto JSON
    """
    signature = verify_meta_signature(
        raw_body,
        headers,
        app_secret,
        allow_unsigned=allow_unsigned,
    )
    if not signature.valid:
        raise InvalidSignatureError(signature.error or "invalid_signature")

    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    return InstagramWebhookEnvelope(
        payload=payload,
        body_size=len(raw_body),
        signature_skipped=signature.skipped,
    )
