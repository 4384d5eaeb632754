"""Use case: despacha um payload de webhook Instagram para o Telegram.

Fluxo por sub-evento (em ordem de chegada, sem paralelismo):
    recebido -> classificado -> duplicado (descarta)
                             -> novo -> enriquece -> formata -> roteia -> entrega

A janela de dedupe é podada após cada chave nova registrada (inclusive de
recibos ignorados), nunca após duplicados. Falha de infraestrutura em um
sub-evento é logada e não interrompe os seguintes.
Falhas de enriquecimento viram placeholders; nunca abortam a notificação.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.domain.event_keys import derive_change_key, derive_entry_key, derive_messaging_key
from app.domain.instagram_events import (
    UNKNOWN_ENTRY_TYPE,
    MessagingKind,
    change_field,
    classify_change,
    classify_messaging,
    entry_changes,
    entry_messaging,
    is_ignored,
)
from app.observability import record_event_outcome, record_latency
from app.services.instagram_notifications import (
    UNKNOWN_NAME,
    extract_message_text,
    format_change_notification,
    format_dm_reaction,
    format_dm_text,
    format_generic_change,
    format_generic_dm_event,
    format_unknown_entry,
    format_unknown_payload,
    profile_link,
)
from app.use_cases.instagram._media_forwarding import forward_dm_attachment, forward_media_change
from config.logging import log_fallback
from config.settings.instagram import DEFAULT_AUTO_REPLY_TEXT
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from app.protocols import (
        AsyncDedupeProtocol,
        InstagramGraphProtocol,
        TelegramNotifierProtocol,
    )

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Contagem de sub-eventos por desfecho."""

    processed: int = 0
    duplicates: int = 0
    ignored: int = 0
    unknown: int = 0
    failed: int = 0


@dataclass(slots=True)
class _Tally:
    processed: int = 0
    duplicates: int = 0
    ignored: int = 0
    unknown: int = 0
    failed: int = 0

    def freeze(self) -> DispatchResult:
        return DispatchResult(
            processed=self.processed,
            duplicates=self.duplicates,
            ignored=self.ignored,
            unknown=self.unknown,
            failed=self.failed,
        )


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class DispatchInstagramEventUseCase:
    """Orquestra dedupe, enriquecimento e entrega dos eventos Instagram.

    Instância única por processo (estado de dedupe vive no store injetado).

    Args:
        dedupe: Janela de dedupe (memória ou Redis)
        notifier: Fachada Telegram (tópico + entrega)
        graph: Cliente Graph API (user/media info, download, auto-resposta)
        own_ig_user_id: ID da própria conta; DMs vindas dela são ignoradas
        auto_reply_text: Texto enviado de volta a cada DM nova
    """

    def __init__(
        self,
        *,
        dedupe: AsyncDedupeProtocol,
        notifier: TelegramNotifierProtocol,
        graph: InstagramGraphProtocol,
        own_ig_user_id: str = "",
        auto_reply_text: str = DEFAULT_AUTO_REPLY_TEXT,
    ) -> None:
        self._dedupe = dedupe
        self._notifier = notifier
        self._graph = graph
        self._own_ig_user_id = own_ig_user_id
        self._auto_reply_text = auto_reply_text

    async def execute(
        self,
        payload: dict[str, Any],
        correlation_id: str = "",
    ) -> DispatchResult:
        """Processa todas as entries do payload.

        Args:
            payload: Corpo do webhook já autenticado e parseado
            correlation_id: ID de correlação da requisição

        Returns:
            DispatchResult com as contagens
        """
        started_at = time.perf_counter()
        tally = _Tally()

        entries = payload.get("entry")
        if not isinstance(entries, list):
            await self._notifier.send_html(
                format_unknown_payload(payload),
                topic_key=UNKNOWN_ENTRY_TYPE,
                topic_title=UNKNOWN_ENTRY_TYPE,
            )
            tally.unknown += 1
            record_event_outcome(UNKNOWN_ENTRY_TYPE, "forwarded", correlation_id)
        else:
            for entry in entries:
                await self._process_entry(entry, tally, correlation_id)

        result = tally.freeze()
        latency_ms = (time.perf_counter() - started_at) * 1000
        record_latency("dispatcher", "execute", latency_ms, correlation_id)
        logger.info(
            "instagram_event_dispatched",
            extra={
                "object": payload.get("object"),
                "processed": result.processed,
                "duplicates": result.duplicates,
                "ignored": result.ignored,
                "unknown": result.unknown,
                "failed": result.failed,
            },
        )
        return result

    async def _is_new(self, key: str, event_type: str, tally: _Tally, correlation_id: str) -> bool:
        if await self._dedupe.is_duplicate(key):
            tally.duplicates += 1
            record_event_outcome(event_type, "duplicate", correlation_id)
            return False
        await self._dedupe.cleanup_async()
        return True

    async def _guarded(
        self,
        step: Awaitable[None],
        event_type: str,
        tally: _Tally,
        correlation_id: str,
    ) -> None:
        """Executa um sub-evento; erro de infraestrutura não derruba os demais."""
        try:
            await step
        except InfrastructureError as exc:
            tally.failed += 1
            record_event_outcome(event_type, "failed", correlation_id)
            logger.error(
                "instagram_subevent_failed",
                extra={
                    "event_type": event_type,
                    "error_type": type(exc).__name__,
                    "correlation_id": correlation_id,
                },
            )

    async def _process_entry(self, entry: Any, tally: _Tally, correlation_id: str) -> None:
        entry_dict = _as_dict(entry)
        changes = entry_changes(entry_dict)
        messaging = entry_messaging(entry_dict)

        if not changes and not messaging:
            await self._guarded(
                self._process_unknown_entry(entry, tally, correlation_id),
                UNKNOWN_ENTRY_TYPE,
                tally,
                correlation_id,
            )
            return

        for change in changes:
            await self._guarded(
                self._process_change(change, tally, correlation_id),
                classify_change(change),
                tally,
                correlation_id,
            )

        for event in messaging:
            await self._guarded(
                self._process_messaging(event, tally, correlation_id),
                classify_messaging(event),
                tally,
                correlation_id,
            )

    async def _process_unknown_entry(self, entry: Any, tally: _Tally, correlation_id: str) -> None:
        key = derive_entry_key(entry)
        if not await self._is_new(key, UNKNOWN_ENTRY_TYPE, tally, correlation_id):
            return
        await self._notifier.send_html(
            format_unknown_entry(entry),
            topic_key=UNKNOWN_ENTRY_TYPE,
            topic_title=UNKNOWN_ENTRY_TYPE,
        )
        tally.unknown += 1
        record_event_outcome(UNKNOWN_ENTRY_TYPE, "forwarded", correlation_id)

    # ──────────────────────────────────────────────────────────────
    # entry[].changes[]
    # ──────────────────────────────────────────────────────────────

    async def _process_change(
        self,
        change: dict[str, Any],
        tally: _Tally,
        correlation_id: str,
    ) -> None:
        change_type = classify_change(change)
        if not await self._is_new(derive_change_key(change), change_type, tally, correlation_id):
            return

        value = _as_dict(change.get("value"))
        media_id = value.get("media_id")
        sender = value.get("from")

        if change_field(change) == "media" and media_id:
            await forward_media_change(str(media_id), graph=self._graph, notifier=self._notifier)
        elif isinstance(sender, dict) and sender:
            user_link = profile_link(
                sender.get("username"),
                _text_or_none(sender.get("id")),
                fallback_prefix="Foydalanuvchi ID",
            )
            await self._notifier.send_html(
                format_change_notification(user_link, value.get("text")),
                topic_key=change_type,
                topic_title=change_type,
            )
        else:
            await self._notifier.send_html(
                format_generic_change(change_type, change),
                topic_key=change_type,
                topic_title=change_type,
            )

        tally.processed += 1
        record_event_outcome(change_type, "forwarded", correlation_id)

    # ──────────────────────────────────────────────────────────────
    # entry[].messaging[]
    # ──────────────────────────────────────────────────────────────

    async def _process_messaging(
        self,
        event: dict[str, Any],
        tally: _Tally,
        correlation_id: str,
    ) -> None:
        kind = classify_messaging(event)
        key = derive_messaging_key(event, kind)

        if is_ignored(kind):
            # Registra a chave para que recibos repetidos também sejam descartados
            if not await self._dedupe.is_duplicate(key):
                await self._dedupe.cleanup_async()
            tally.ignored += 1
            record_event_outcome(kind, "ignored", correlation_id)
            return

        if not await self._is_new(key, kind, tally, correlation_id):
            return

        sender_id = _text_or_none(_as_dict(event.get("sender")).get("id"))
        if not sender_id or (self._own_ig_user_id and sender_id == self._own_ig_user_id):
            tally.ignored += 1
            record_event_outcome(kind, "skipped", correlation_id)
            return

        if kind is MessagingKind.MESSAGE:
            forwarded = await self._process_dm_message(event, sender_id)
        elif kind is MessagingKind.REACTION:
            await self._process_dm_reaction(event, sender_id)
            forwarded = True
        else:
            recipient_id = _text_or_none(_as_dict(event.get("recipient")).get("id")) or ""
            await self._notifier.send_html(
                format_generic_dm_event(kind, sender_id, recipient_id, event),
                topic_key=kind.value,
                topic_title=kind.value,
            )
            forwarded = True

        if forwarded:
            tally.processed += 1
            record_event_outcome(kind, "forwarded", correlation_id)
        else:
            tally.ignored += 1
            record_event_outcome(kind, "skipped", correlation_id)

    async def _process_dm_message(self, event: dict[str, Any], sender_id: str) -> bool:
        message = _as_dict(event.get("message"))
        text = extract_message_text(message.get("text"))
        raw_attachments = message.get("attachments")
        attachments = (
            [item for item in raw_attachments if isinstance(item, dict)]
            if isinstance(raw_attachments, list)
            else []
        )
        if not text and not attachments:
            return False

        user_info = await self._sender_info(sender_id)
        user_link = profile_link(
            user_info.get("username") or "",
            sender_id,
            display_name=user_info.get("name") or UNKNOWN_NAME,
            fallback_prefix="ID",
        )
        topic_key = MessagingKind.MESSAGE.value

        if text:
            await self._notifier.send_html(
                format_dm_text(user_link, text),
                topic_key=topic_key,
                topic_title=topic_key,
            )

        for attachment in attachments:
            await forward_dm_attachment(
                attachment,
                user_link=user_link,
                topic_key=topic_key,
                graph=self._graph,
                notifier=self._notifier,
            )

        await self._graph.send_direct_reply(sender_id, self._auto_reply_text)
        return True

    async def _sender_info(self, sender_id: str) -> dict[str, Any]:
        user_info = await self._graph.get_user_info(sender_id)
        if user_info is None:
            log_fallback(logger, "user_info", reason="unavailable")
            return {}
        return user_info

    async def _process_dm_reaction(self, event: dict[str, Any], sender_id: str) -> None:
        user_info = await self._sender_info(sender_id)
        sender_label = user_info.get("username") or sender_id
        emoji = _as_dict(event.get("reaction")).get("reaction") or ""
        topic_key = MessagingKind.REACTION.value
        await self._notifier.send_html(
            format_dm_reaction(sender_label, str(emoji)),
            topic_key=topic_key,
            topic_title=topic_key,
        )


def _text_or_none(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
