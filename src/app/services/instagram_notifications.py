"""Formatação das notificações Instagram para o Telegram (parse_mode HTML).

Funções puras: recebem dados já extraídos e devolvem texto HTML.
Todo conteúdo vindo do Instagram passa por escape_html.
Textos visíveis ao usuário final ficam em uzbeque (idioma do público).
"""

from __future__ import annotations

import html
import json
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

SHORT_JSON_MAX_LENGTH = 2500
TRUNCATE_DEFAULT_LENGTH = 900
CAPTION_MAX_LENGTH = 950

EMPTY_TEXT_PLACEHOLDER = "Media/Boshqa narsa"
UNKNOWN_NAME = "Noma'lum"
UNKNOWN_VALUE = "noma'lum"
PAGE_PLACEHOLDER = "Instagram sahifa"
URL_NOT_FOUND = "URL topilmadi"

MEDIA_STORY_TITLE = "Yangi Story (Instagram)"
MEDIA_POST_TITLE = "Yangi Post (Instagram)"

PROFILE_BASE_URL = "https://instagram.com/"


@dataclass(frozen=True, slots=True)
class TelegramFileMethod:
    """Método do Bot API e nome do campo multipart do arquivo."""

    method: str
    field: str


SEND_PHOTO = TelegramFileMethod("sendPhoto", "photo")
SEND_VIDEO = TelegramFileMethod("sendVideo", "video")
SEND_VOICE = TelegramFileMethod("sendVoice", "voice")
SEND_DOCUMENT = TelegramFileMethod("sendDocument", "document")

_METHOD_BY_ATTACHMENT_TYPE: dict[str, TelegramFileMethod] = {
    "image": SEND_PHOTO,
    "sticker": SEND_PHOTO,
    "video": SEND_VIDEO,
    "reel": SEND_VIDEO,
    "audio": SEND_VOICE,
    "voice_clip": SEND_VOICE,
}


# ──────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────


def escape_html(value: Any) -> str:
    return html.escape("" if value is None else str(value), quote=True)


def short_json(value: Any, max_length: int = SHORT_JSON_MAX_LENGTH) -> str:
    """JSON indentado, cortado em max_length com "..." no fim."""
    text = json.dumps(value, indent=2, ensure_ascii=False, default=str)
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."


def truncate_text(text: str, max_length: int = TRUNCATE_DEFAULT_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."


def normalize_text(text: Any) -> str:
    """Texto de notificação; vazio vira "Media/Boshqa narsa"."""
    if not isinstance(text, str):
        return EMPTY_TEXT_PLACEHOLDER
    return text.strip() or EMPTY_TEXT_PLACEHOLDER


def extract_message_text(text: Any) -> str:
    """Texto da DM sem espaços nas pontas ("" se ausente)."""
    return text.strip() if isinstance(text, str) else ""


def extension_from_content_type(content_type: str, fallback: str) -> str:
    """Extensão a partir do subtipo MIME: "image/png; x=y" -> "png"."""
    _, _, subtype = content_type.partition("/")
    extension = subtype.split(";", 1)[0].strip()
    return extension or fallback


def resolve_attachment_method(attachment_type: str) -> TelegramFileMethod:
    """Método de envio por tipo de anexo; desconhecidos viram documento."""
    return _METHOD_BY_ATTACHMENT_TYPE.get(attachment_type, SEND_DOCUMENT)


def _payload(attachment: dict[str, Any]) -> dict[str, Any]:
    payload = attachment.get("payload")
    return payload if isinstance(payload, dict) else {}


def attachment_url(attachment: dict[str, Any]) -> str:
    """URL do anexo: payload.url, link, src ou attachment_url."""
    payload = _payload(attachment)
    for field in ("url", "link", "src", "attachment_url"):
        value = payload.get(field)
        if value:
            return str(value)
    return ""


def share_url(attachment: dict[str, Any]) -> str:
    payload = _payload(attachment)
    for field in ("url", "link", "permalink_url"):
        value = payload.get(field)
        if value:
            return str(value)
    return ""


def profile_link(
    username: str | None,
    user_id: str | None,
    *,
    display_name: str | None = None,
    fallback_prefix: str = "ID",
) -> str:
    """Link HTML para o perfil Instagram.

    Com username: "Nome (@user)" ou só "user". Sem username, o rótulo
    mostra o ID com prefixo e o link aponta para a home do Instagram.
    """
    if username:
        escaped_username = escape_html(username)
        label = (
            f"{escape_html(display_name)} (@{escaped_username})"
            if display_name
            else escaped_username
        )
        return f'<a href="{PROFILE_BASE_URL}{quote(username, safe="")}">{label}</a>'

    identifier = escape_html(user_id) if user_id else UNKNOWN_VALUE
    return f'<a href="{PROFILE_BASE_URL}">{fallback_prefix}: {identifier}</a>'


# ──────────────────────────────────────────────────────────────
# Mensagens
# ──────────────────────────────────────────────────────────────


def format_unknown_payload(payload: Any) -> str:
    return (
        "<b>Instagram Event</b>\n"
        "Turi: <code>entry.unknown</code>\n\n"
        f"<pre>{escape_html(short_json(payload))}</pre>"
    )


def format_unknown_entry(entry: Any) -> str:
    return (
        "<b>Instagram Entry Event</b>\n"
        "Turi: <code>entry.unknown</code>\n\n"
        f"<pre>{escape_html(short_json(entry))}</pre>"
    )


def format_generic_change(change_type: str, change: dict[str, Any]) -> str:
    return (
        "<b>Instagram Event</b>\n"
        f"Turi: <code>{escape_html(change_type)}</code>\n\n"
        f"<pre>{escape_html(short_json(change))}</pre>"
    )


def format_change_notification(user_link: str, text: Any) -> str:
    """Comentário/menção com autor identificado (change.value.from)."""
    return (
        "<b>Yangi bildirishnoma (Instagram)</b>\n"
        f"Kimdan: {user_link}\n\n"
        f"Xabar: {escape_html(normalize_text(text))}"
    )


def format_media_post(media_info: dict[str, Any] | None, *, is_story: bool) -> str:
    """Aviso de novo post/story com legenda e permalink."""
    info = media_info or {}
    username = info.get("username") or ""
    caption = info.get("caption") or ""
    permalink = info.get("permalink") or ""

    user_link = (
        f'<a href="{PROFILE_BASE_URL}{quote(str(username), safe="")}">{escape_html(username)}</a>'
        if username
        else PAGE_PLACEHOLDER
    )
    title = MEDIA_STORY_TITLE if is_story else MEDIA_POST_TITLE

    text = f"<b>{title}</b>\nKimdan: {user_link}"
    if caption:
        text += f"\n\n{escape_html(caption)}"
    if permalink:
        text += f"\n\n{escape_html(permalink)}"
    return text


def format_dm_text(user_link: str, text: str) -> str:
    return (
        "<b>Yangi xabar (Instagram DM)</b>\n"
        f"Kimdan: {user_link}\n\n"
        f"Xabar: {escape_html(text)}"
    )


def format_dm_attachment_caption(user_link: str, attachment_type: str) -> str:
    return (
        "<b>Instagram DM</b>\n"
        f"Kimdan: {user_link}\n"
        f"Turi: <code>{escape_html(attachment_type)}</code>"
    )


def format_dm_share(caption: str, attachment: dict[str, Any]) -> str:
    """Anexo "share": só título e link, sem download."""
    title = _payload(attachment).get("title") or ""
    url = share_url(attachment)
    message = caption
    if title:
        message += f"\nSarlavha: {escape_html(title)}"
    message += f"\n\n{escape_html(url)}" if url else f"\n\n{URL_NOT_FOUND}"
    return message


def format_attachment_without_url(caption: str, attachment: dict[str, Any]) -> str:
    return f"{caption}\n\n<b>{URL_NOT_FOUND}</b>\n<pre>{escape_html(short_json(attachment))}</pre>"


def format_attachment_link_fallback(caption: str, url: str) -> str:
    """Download ou todos os envios falharam: manda só o link."""
    return f"{caption}\n\nYuborib bo'lmadi.\nURL: {escape_html(url)}"


def format_dm_reaction(sender_label: str, emoji: str) -> str:
    return (
        "<b>Instagram DM Reaction</b>\n"
        f"Kimdan: <code>{escape_html(sender_label)}</code>\n"
        f"Reaksiya: {escape_html(emoji)}"
    )


def format_generic_dm_event(
    event_type: str,
    sender_id: str,
    recipient_id: str,
    event: dict[str, Any],
) -> str:
    return (
        "<b>Instagram DM Event</b>\n"
        f"Turi: <code>{escape_html(event_type)}</code>\n"
        f"Kimdan: <code>{escape_html(sender_id)}</code>\n"
        f"Kimga: <code>{escape_html(recipient_id)}</code>\n\n"
        f"<pre>{escape_html(short_json(event))}</pre>"
    )
