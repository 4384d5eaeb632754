"""Cliente HTTP do Telegram Bot API (uma chamada, sem retry).

Retry e fallback ficam no serviço de entrega; aqui só transporte e
parsing da resposta {ok, result, description, error_code}.

O token do bot faz parte da URL e nunca é logado nem incluído em erros.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from api.connectors.telegram.errors import TelegramApiError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.telegram.org"

# (filename, conteúdo, content-type)
FilePart = tuple[str, bytes, str]


class TelegramHttpClient:
    """Transporte JSON/multipart para o Bot API.

    Args:
        bot_token: Token do bot
        http_client: httpx.AsyncClient compartilhado (timeout configurado nele)
        api_base_url: Base do Bot API (sobrescrevível para testes/proxy)
    """

    def __init__(
        self,
        bot_token: str,
        http_client: httpx.AsyncClient,
        api_base_url: str = DEFAULT_API_BASE_URL,
    ) -> None:
        self._bot_token = bot_token
        self._http = http_client
        self._api_base_url = api_base_url.rstrip("/")

    def _url(self, method: str) -> str:
        return f"{self._api_base_url}/bot{self._bot_token}/{method}"

    async def call(self, method: str, payload: dict[str, Any]) -> Any:
        """Chama um método com corpo JSON.

        Returns:
            Campo `result` da resposta

        Raises:
            TelegramApiError: Falha de rede, HTTP ou ok=false
        """
        try:
            response = await self._http.post(self._url(method), json=payload)
        except httpx.HTTPError as exc:
            raise _transport_error(method, exc) from exc
        return _parse_response(method, response)

    async def call_multipart(
        self,
        method: str,
        fields: dict[str, str],
        files: dict[str, FilePart],
    ) -> Any:
        """Chama um método com multipart/form-data (envio de arquivos)."""
        try:
            response = await self._http.post(self._url(method), data=fields, files=files)
        except httpx.HTTPError as exc:
            raise _transport_error(method, exc) from exc
        return _parse_response(method, response)


def _transport_error(method: str, exc: httpx.HTTPError) -> TelegramApiError:
    kind = "timeout" if isinstance(exc, httpx.TimeoutException) else "network_error"
    logger.debug(
        "telegram_transport_error",
        extra={"method": method, "error_type": type(exc).__name__},
    )
    return TelegramApiError(f"{kind}: {type(exc).__name__}")


def _parse_response(method: str, response: httpx.Response) -> Any:
    status_code = response.status_code
    try:
        data = response.json()
    except ValueError:
        data = None

    if not isinstance(data, dict):
        # Corpo ilegível: status 2xx sem JSON conta como transitório
        error_code = None if status_code < 400 else status_code
        raise TelegramApiError(f"invalid_response: HTTP {status_code}", error_code=error_code)

    if data.get("ok") is True and status_code < 400:
        return data.get("result")

    description = str(data.get("description") or f"HTTP {status_code}")
    error_code = data.get("error_code")
    if not isinstance(error_code, int):
        error_code = status_code
    parameters = data.get("parameters")
    retry_after = parameters.get("retry_after") if isinstance(parameters, dict) else None

    logger.debug(
        "telegram_api_rejected",
        extra={"method": method, "error_code": error_code, "http_status": status_code},
    )
    raise TelegramApiError(description, error_code=error_code, retry_after=retry_after)
