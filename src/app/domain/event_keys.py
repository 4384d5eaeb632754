"""Derivação de chaves de idempotência para eventos do webhook.

Preferência por identificadores naturais (mid, watermark, media_id);
na falta deles, hash do conteúdo canônico (chaves ordenadas).
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from app.domain.instagram_events import MessagingKind, change_field

HASH_LENGTH = 24

# Ordem de preferência do identificador dentro de change.value
CHANGE_ID_FIELDS: tuple[str, ...] = ("media_id", "comment_id", "id", "target_id", "event_id")


def hash_object(value: Any) -> str:
    """Primeiros 24 hex do SHA-256 do JSON canônico de `value`.

    Canônico: chaves ordenadas recursivamente, separadores compactos, UTF-8.
    Valores não serializáveis viram str().
    """
    canonical = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def _nested(event: dict[str, Any], field: str, attr: str) -> Any:
    container = event.get(field)
    if isinstance(container, dict):
        return container.get(attr)
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def derive_messaging_key(event: dict[str, Any], kind: MessagingKind) -> str:
    """Chave de um evento entry[].messaging[].

    Args:
        event: Evento de DM bruto
        kind: Tipo já classificado (usado no fallback por hash)

    Returns:
        Ex.: "dm:mid:M1", "dm:read:U1:123", "dm.postback:<hash>"
    """
    mid = _nested(event, "message", "mid")
    if mid:
        return f"dm:mid:{mid}"

    reaction_mid = _nested(event, "reaction", "mid")
    if reaction_mid:
        action = _text(_nested(event, "reaction", "action"))
        return f"dm:reaction:{reaction_mid}:{action}"

    sender_id = _text(_nested(event, "sender", "id"))

    read_watermark = _nested(event, "read", "watermark")
    if read_watermark:
        return f"dm:read:{sender_id}:{read_watermark}"

    delivery_watermark = _nested(event, "delivery", "watermark")
    if delivery_watermark:
        return f"dm:delivery:{sender_id}:{delivery_watermark}"

    return f"{kind}:{hash_object(event)}"


def derive_change_key(change: dict[str, Any]) -> str:
    """Chave de um change: "change:<field>:<id>" ou hash do change inteiro."""
    field = change_field(change)
    value = change.get("value")
    if isinstance(value, dict):
        for id_field in CHANGE_ID_FIELDS:
            identifier = value.get(id_field)
            if identifier:
                return f"change:{field}:{identifier}"
    return f"change:{field}:{hash_object(change)}"


def derive_entry_key(entry: Any) -> str:
    """Chave de uma entry sem changes nem messaging."""
    return f"entry:unknown:{hash_object(entry)}"
