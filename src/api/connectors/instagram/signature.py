"""Validação de assinatura HMAC-SHA256 dos webhooks Meta.

Header: X-Hub-Signature-256: sha256=<hex>, calculado sobre o corpo bruto
com o App Secret. Comparação em tempo constante.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

SIGNATURE_HEADER = "x-hub-signature-256"
SIGNATURE_PREFIX = "sha256="


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação de assinatura."""

    valid: bool
    skipped: bool = False
    error: str | None = None


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None


def verify_meta_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
    *,
    allow_unsigned: bool = False,
) -> SignatureResult:
    """Verifica X-Hub-Signature-256 contra o App Secret.

    Args:
        raw_body: Corpo bruto do request
        headers: Headers recebidos
        secret: META_APP_SECRET (vazio/None = não configurado)
        allow_unsigned: Sem secret, aceita o payload (apenas development)

    Returns:
        SignatureResult; skipped=True quando a verificação não foi feita.
    """
    if not secret:
        if allow_unsigned:
            return SignatureResult(valid=True, skipped=True)
        return SignatureResult(valid=False, error="missing_app_secret")

    signature = _header(headers, SIGNATURE_HEADER)
    if not signature:
        return SignatureResult(valid=False, error="missing_signature")
    if not signature.startswith(SIGNATURE_PREFIX):
        return SignatureResult(valid=False, error="malformed_signature")

    expected = signature[len(SIGNATURE_PREFIX):]
    computed = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    if not hmac.compare_digest(computed, expected):
        return SignatureResult(valid=False, error="signature_mismatch")
    return SignatureResult(valid=True)
