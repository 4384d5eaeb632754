"""Protocolo do cliente Instagram Graph API (enriquecimento best-effort)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from api.connectors.instagram.graph_client import MediaDownload


class InstagramGraphProtocol(Protocol):
    """Consultas e envios ao Graph API.

    get_user_info/get_media_info retornam None em falha; download_bytes
    levanta MediaDownloadError; send_direct_reply só registra falhas.
    """

    async def get_user_info(self, user_id: str) -> dict[str, Any] | None: ...

    async def get_media_info(self, media_id: str) -> dict[str, Any] | None: ...

    async def download_bytes(self, url: str) -> MediaDownload: ...

    async def send_direct_reply(self, recipient_id: str, text: str) -> None: ...
