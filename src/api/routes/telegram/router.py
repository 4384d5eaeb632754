"""Endpoint manual de envio ao Telegram (operação/suporte).

POST /telegram/send-message {chat_id, message} envia texto simples para
qualquer chat. Exige header X-Relay-Token igual a RELAY_ADMIN_TOKEN;
sem token configurado o endpoint fica fechado.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, Header, Request, status
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from config.settings import get_telegram_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class SendTelegramMessageRequest(BaseModel):
    """Corpo do envio manual (aceita chat_id ou chatId)."""

    model_config = ConfigDict(extra="ignore")

    chat_id: str = Field(min_length=1, validation_alias=AliasChoices("chat_id", "chatId"))
    message: str = Field(min_length=1)


def _is_authorized(provided: str | None, expected: str) -> bool:
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


@router.post("/send-message")
async def send_message(
    body: SendTelegramMessageRequest,
    request: Request,
    x_relay_token: str | None = Header(default=None),
) -> JSONResponse:
    """Envia `message` para `chat_id` via Bot API (com retry).

    Returns:
        200 {"status": "sent"}, 403 sem autorização, 400 falha de envio.
    """
    settings = get_telegram_settings()
    if not _is_authorized(x_relay_token, settings.admin_token):
        logger.warning("telegram_manual_send_forbidden")
        return JSONResponse({"detail": "Forbidden"}, status_code=status.HTTP_403_FORBIDDEN)

    delivery = getattr(request.app.state, "telegram_delivery", None)
    if delivery is None or not delivery.has_bot_token:
        return JSONResponse(
            {"detail": "Telegram bot token is not configured"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    result = await delivery.send("sendMessage", {"text": body.message}, chat_id=body.chat_id)
    if not result.ok:
        logger.warning(
            "telegram_manual_send_failed",
            extra={"description": result.description, "attempts": result.attempts},
        )
        return JSONResponse(
            {"detail": result.description or "Failed to send message"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    logger.info("telegram_manual_send_ok", extra={"attempts": result.attempts})
    return JSONResponse({"status": "sent"})
