"""Encaminhamento de arquivos (mídia de posts e anexos de DM) ao Telegram.

Download e reenvio são best-effort: falhas viram log (posts) ou uma
mensagem só com o link (anexos de DM).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from api.connectors.instagram.graph_client import MediaDownloadError
from app.services.instagram_notifications import (
    CAPTION_MAX_LENGTH,
    SEND_DOCUMENT,
    SEND_PHOTO,
    SEND_VIDEO,
    attachment_url,
    extension_from_content_type,
    format_attachment_link_fallback,
    format_attachment_without_url,
    format_dm_attachment_caption,
    format_dm_share,
    format_media_post,
    resolve_attachment_method,
    truncate_text,
)
from config.logging import log_fallback

if TYPE_CHECKING:
    from app.protocols import InstagramGraphProtocol, TelegramNotifierProtocol

logger = logging.getLogger(__name__)

STORY_MEDIA_TYPE = "STORY"
VIDEO_MEDIA_TYPES = frozenset({"VIDEO", "REELS"})

STORY_TOPIC = ("story", "Stories")
POSTS_TOPIC = ("posts", "Posts")


async def forward_media_change(
    media_id: str,
    *,
    graph: InstagramGraphProtocol,
    notifier: TelegramNotifierProtocol,
) -> str:
    """Notifica post/story novo e reenvia o arquivo da mídia.

    Returns:
        topic_key usado ("story" ou "posts")
    """
    media_info = await graph.get_media_info(media_id)
    if media_info is None:
        log_fallback(logger, "media_info", reason="unavailable")
        media_info = {}
    media_type = str(media_info.get("media_type") or "").upper()
    is_story = media_type == STORY_MEDIA_TYPE
    topic_key, topic_title = STORY_TOPIC if is_story else POSTS_TOPIC

    await notifier.send_html(
        format_media_post(media_info, is_story=is_story),
        topic_key=topic_key,
        topic_title=topic_title,
    )

    media_url = media_info.get("media_url") or media_info.get("thumbnail_url")
    if not media_url:
        return topic_key

    try:
        download = await graph.download_bytes(str(media_url))
    except MediaDownloadError as exc:
        logger.error(
            "instagram_media_download_failed",
            extra={"media_type": media_type, "reason": exc.reason},
        )
        return topic_key

    target = SEND_VIDEO if media_type in VIDEO_MEDIA_TYPES else SEND_PHOTO
    extension = extension_from_content_type(download.content_type, "jpg")
    result = await notifier.send_file(
        target.method,
        target.field,
        download.content,
        f"media.{extension}",
        download.content_type,
        parse_mode="HTML",
        supports_streaming=True,
        topic_key=topic_key,
        topic_title=topic_title,
    )
    if not result.ok:
        logger.error(
            "instagram_media_forward_failed",
            extra={"method": target.method, "description": result.description},
        )
    return topic_key


async def forward_dm_attachment(
    attachment: dict[str, Any],
    *,
    user_link: str,
    topic_key: str,
    graph: InstagramGraphProtocol,
    notifier: TelegramNotifierProtocol,
) -> bool:
    """Reenvia um anexo de DM conforme o tipo.

    share -> mensagem com link; sem URL -> dump JSON; demais -> download
    e envio específico, depois sendDocument, por fim mensagem só com link.

    Returns:
        True se o arquivo chegou como arquivo (não como fallback)
    """
    attachment_type = str(attachment.get("type") or "file").lower()
    caption = format_dm_attachment_caption(user_link, attachment_type)

    if attachment_type == "share":
        await notifier.send_html(
            format_dm_share(caption, attachment),
            topic_key=topic_key,
            topic_title=topic_key,
        )
        return False

    url = attachment_url(attachment)
    if not url:
        await notifier.send_html(
            format_attachment_without_url(caption, attachment),
            topic_key=topic_key,
            topic_title=topic_key,
        )
        return False

    try:
        download = await graph.download_bytes(url)
    except MediaDownloadError as exc:
        logger.error(
            "instagram_attachment_download_failed",
            extra={"attachment_type": attachment_type, "reason": exc.reason},
        )
    else:
        if await _send_attachment_file(
            attachment_type,
            download.content,
            download.content_type,
            caption=truncate_text(caption, CAPTION_MAX_LENGTH),
            topic_key=topic_key,
            notifier=notifier,
        ):
            return True

    await notifier.send_html(
        format_attachment_link_fallback(caption, url),
        topic_key=topic_key,
        topic_title=topic_key,
    )
    return False


async def _send_attachment_file(
    attachment_type: str,
    content: bytes,
    content_type: str,
    *,
    caption: str,
    topic_key: str,
    notifier: TelegramNotifierProtocol,
) -> bool:
    filename = f"file.{extension_from_content_type(content_type, 'bin')}"
    targets = [resolve_attachment_method(attachment_type)]
    if targets[0] != SEND_DOCUMENT:
        targets.append(SEND_DOCUMENT)

    description = None
    for target in targets:
        result = await notifier.send_file(
            target.method,
            target.field,
            content,
            filename,
            content_type,
            caption=caption,
            parse_mode="HTML",
            supports_streaming=True,
            topic_key=topic_key,
            topic_title=topic_key,
        )
        if result.ok:
            return True
        description = result.description

    logger.error(
        "instagram_attachment_forward_failed",
        extra={"attachment_type": attachment_type, "description": description},
    )
    return False
