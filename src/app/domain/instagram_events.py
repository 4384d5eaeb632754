"""Classificação de eventos do webhook Instagram.

O webhook entrega dois formatos dentro de cada entry:
- entry[].changes[]: {"field": ..., "value": {...}} (comentários, menções, mídia)
- entry[].messaging[]: eventos de DM com campos opcionais mutuamente exclusivos

A classificação atribui o tipo uma única vez; o dispatcher e a derivação
de chaves trabalham a partir desse tipo, sem checar campos soltos.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

UNKNOWN_ENTRY_TYPE = "entry.unknown"


class MessagingKind(StrEnum):
    """Tipo semântico de um evento entry[].messaging[]."""

    MESSAGE_ECHO = "dm.message_echo"
    MESSAGE = "dm.message"
    READ = "dm.read"
    REACTION = "dm.reaction"
    DELIVERY = "dm.delivery"
    POSTBACK = "dm.postback"
    OPTIN = "dm.optin"
    REFERRAL = "dm.referral"
    OTHER = "dm.other"


# Classificados, mas nunca viram notificação no Telegram
IGNORED_KINDS: frozenset[MessagingKind] = frozenset(
    {
        MessagingKind.READ,
        MessagingKind.DELIVERY,
        MessagingKind.MESSAGE_ECHO,
        MessagingKind.OTHER,
    }
)

# Ordem importa: primeiro campo presente define o tipo
_KIND_BY_FIELD: tuple[tuple[str, MessagingKind], ...] = (
    ("read", MessagingKind.READ),
    ("reaction", MessagingKind.REACTION),
    ("delivery", MessagingKind.DELIVERY),
    ("postback", MessagingKind.POSTBACK),
    ("optin", MessagingKind.OPTIN),
    ("referral", MessagingKind.REFERRAL),
)


def classify_messaging(event: dict[str, Any]) -> MessagingKind:
    """Classifica um evento de DM (função pura)."""
    message = event.get("message")
    if message:
        if isinstance(message, dict) and message.get("is_echo"):
            return MessagingKind.MESSAGE_ECHO
        return MessagingKind.MESSAGE
    for field, kind in _KIND_BY_FIELD:
        if event.get(field):
            return kind
    return MessagingKind.OTHER


def change_field(change: dict[str, Any]) -> str:
    """Retorna o field de um change, com fallback "unknown"."""
    field = change.get("field")
    return str(field) if field else "unknown"


def classify_change(change: dict[str, Any]) -> str:
    """Classifica um change como "change.<field>"."""
    return f"change.{change_field(change)}"


def is_ignored(kind: MessagingKind) -> bool:
    """True para recibos de leitura/entrega, ecos e eventos sem formato."""
    return kind in IGNORED_KINDS


def entry_changes(entry: dict[str, Any]) -> list[dict[str, Any]]:
    """Lista de changes de uma entry (vazia se ausente ou mal formada)."""
    changes = entry.get("changes")
    if not isinstance(changes, list):
        return []
    return [change for change in changes if isinstance(change, dict)]


def entry_messaging(entry: dict[str, Any]) -> list[dict[str, Any]]:
    """Lista de eventos messaging de uma entry (vazia se ausente)."""
    messaging = entry.get("messaging")
    if not isinstance(messaging, list):
        return []
    return [event for event in messaging if isinstance(event, dict)]
