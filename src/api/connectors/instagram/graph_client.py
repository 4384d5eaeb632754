"""Cliente Instagram Graph API (enriquecimento best-effort e auto-resposta).

Consultas de usuário/mídia retornam None em qualquer falha; o chamador
segue com placeholders. Download de mídia levanta MediaDownloadError
para que o chamador escolha o fallback (mensagem só com link).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from config.settings import InstagramSettings

logger = logging.getLogger(__name__)

USER_FIELDS = "name,username"
MEDIA_FIELDS = "id,caption,media_type,media_url,thumbnail_url,permalink,timestamp,username"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class MediaDownloadError(Exception):
    """Falha ao baixar mídia (HTTP não-2xx, rede ou tamanho excedido)."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


@dataclass(frozen=True, slots=True)
class MediaDownload:
    """Bytes baixados e o content-type informado pela origem."""

    content: bytes
    content_type: str


class InstagramGraphClient:
    """Chamadas à Graph API com httpx.AsyncClient compartilhado.

    Args:
        settings: InstagramSettings (token, versões, limites)
        http_client: Cliente httpx com timeout limitado
    """

    def __init__(self, settings: InstagramSettings, http_client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http_client

    async def _get_json(self, url: str, fields: str) -> dict[str, Any] | None:
        params = {"fields": fields, "access_token": self._settings.access_token}
        response = await self._http.get(url, params=params)
        if response.is_error:
            logger.info(
                "instagram_graph_lookup_rejected",
                extra={"status_code": response.status_code},
            )
            return None
        data = response.json()
        return data if isinstance(data, dict) else None

    async def get_user_info(self, user_id: str) -> dict[str, Any] | None:
        """Busca name/username de um usuário (None em falha)."""
        if not self._settings.access_token:
            logger.warning("instagram_access_token_missing", extra={"operation": "user_info"})
            return None
        url = f"{self._settings.instagram_endpoint}/{user_id}"
        try:
            return await self._get_json(url, USER_FIELDS)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "instagram_user_info_failed",
                extra={"error_type": type(exc).__name__},
            )
            return None

    async def get_media_info(self, media_id: str) -> dict[str, Any] | None:
        """Busca metadados de mídia; tenta graph.facebook.com e depois graph.instagram.com."""
        if not self._settings.access_token:
            logger.warning("instagram_access_token_missing", extra={"operation": "media_info"})
            return None

        for base in (self._settings.facebook_endpoint, self._settings.instagram_endpoint):
            try:
                data = await self._get_json(f"{base}/{media_id}", MEDIA_FIELDS)
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning(
                    "instagram_media_info_failed",
                    extra={"error_type": type(exc).__name__},
                )
                continue
            if data is not None:
                return data
        return None

    async def download_bytes(self, url: str) -> MediaDownload:
        """Baixa mídia respeitando o limite de tamanho.

        Raises:
            MediaDownloadError: Status não-2xx, falha de rede ou mídia grande demais
        """
        headers: dict[str, str] = {}
        if self._settings.access_token:
            headers["Authorization"] = f"Bearer {self._settings.access_token}"

        max_size = self._settings.media_max_size_bytes
        try:
            async with self._http.stream("GET", url, headers=headers) as response:
                if response.is_error:
                    raise MediaDownloadError(
                        f"Download failed with status {response.status_code}",
                        status_code=response.status_code,
                    )
                content_length = response.headers.get("content-length")
                if content_length and content_length.isdigit() and int(content_length) > max_size:
                    raise MediaDownloadError("media_too_large")

                chunks: list[bytes] = []
                total = 0
                async for chunk in response.aiter_bytes():
                    total += len(chunk)
                    if total > max_size:
                        raise MediaDownloadError("media_too_large")
                    chunks.append(chunk)
                content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        except httpx.HTTPError as exc:
            raise MediaDownloadError(f"download_error: {type(exc).__name__}") from exc

        return MediaDownload(content=b"".join(chunks), content_type=content_type)

    async def send_direct_reply(self, recipient_id: str, text: str) -> None:
        """Envia DM de resposta pela própria conta (falhas só logadas)."""
        if not self._settings.access_token:
            logger.warning("instagram_access_token_missing", extra={"operation": "auto_reply"})
            return

        try:
            response = await self._http.post(
                self._settings.messages_endpoint,
                json={"recipient": {"id": recipient_id}, "message": {"text": text}},
                headers={"Authorization": f"Bearer {self._settings.access_token}"},
            )
        except httpx.HTTPError as exc:
            logger.error(
                "instagram_auto_reply_failed",
                extra={"error_type": type(exc).__name__},
            )
            return

        if response.is_error:
            logger.error(
                "instagram_auto_reply_failed",
                extra={"status_code": response.status_code, "response": response.text[:500]},
            )
            return
        logger.info("instagram_auto_reply_sent")
