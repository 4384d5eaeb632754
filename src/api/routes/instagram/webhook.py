"""Endpoints de webhook do Instagram.

Endpoints:
- GET /instagram/webhook: verificação de webhook (Meta challenge)
- POST /instagram/webhook: recebimento de eventos

Fluxo:
1. GET: Meta envia challenge, respondemos com hub.challenge
2. POST: validamos assinatura, respondemos EVENT_RECEIVED e processamos
   em background (a Meta reenvia rapidamente se a resposta demorar)

Segurança:
- Validação HMAC obrigatória em POST (exceto em development sem secret)
"""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response, status

from api.connectors.instagram.webhook import WebhookRequestError, open_webhook_envelope
from api.routes.instagram.webhook_runtime import dispatch_in_background
from app.observability import correlation_scope
from config.settings import get_base_settings, get_instagram_settings

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

router = APIRouter()

EVENT_RECEIVED = "EVENT_RECEIVED"
SUBSCRIBE_MODE = "subscribe"


def _plain(content: str, status_code: int) -> Response:
    return Response(content=content, media_type="text/plain", status_code=status_code)


def _challenge_answer(params: Mapping[str, str], verify_token: str) -> str | None:
    """hub.challenge a devolver, ou None se modo ou token não conferem."""
    if not verify_token or params.get("hub.mode") != SUBSCRIBE_MODE:
        return None
    provided = params.get("hub.verify_token") or ""
    if not hmac.compare_digest(provided.encode("utf-8"), verify_token.encode("utf-8")):
        return None
    return params.get("hub.challenge") or ""


@router.get("/webhook")
async def verify_webhook(request: Request) -> Response:
    """Verificação de webhook: responde ao challenge da Meta.

    Query params esperados:
    - hub.mode: deve ser "subscribe"
    - hub.verify_token: deve corresponder a INSTAGRAM_VERIFY_TOKEN
    - hub.challenge: valor a retornar

    Returns:
        Texto do challenge ou erro 400.
    """
    settings = get_instagram_settings()
    challenge = _challenge_answer(request.query_params, settings.verify_token)
    if challenge is None:
        logger.warning(
            "webhook_verification_failed",
            extra={
                "hub_mode": request.query_params.get("hub.mode"),
                "verify_token_configured": bool(settings.verify_token),
            },
        )
        return _plain("Invalid verify token", status.HTTP_400_BAD_REQUEST)

    logger.info("webhook_verified")
    return _plain(challenge, status.HTTP_200_OK)


@router.post("/webhook")
async def receive_webhook(request: Request) -> Response:
    """Recebimento de eventos do Instagram.

    Returns:
        200 EVENT_RECEIVED, 401 assinatura inválida, 400 corpo inválido.
    """
    with correlation_scope(request.headers.get("x-correlation-id")) as correlation_id:
        settings = get_instagram_settings()
        raw_body = await request.body()

        try:
            envelope = open_webhook_envelope(
                raw_body,
                request.headers,
                app_secret=settings.app_secret or None,
                allow_unsigned=get_base_settings().is_development,
            )
        except WebhookRequestError as exc:
            logger.warning(
                "webhook_rejected",
                extra={
                    "correlation_id": correlation_id,
                    "reason": exc.reason,
                    "status_code": exc.status_code,
                },
            )
            return _plain(exc.response_text, exc.status_code)

        if envelope.signature_skipped:
            logger.warning(
                "webhook_signature_skipped",
                extra={"reason": "META_APP_SECRET ausente"},
            )

        logger.info(
            "webhook_received",
            extra={
                "correlation_id": correlation_id,
                "object": envelope.object_type,
                "entries": envelope.entry_count,
                "payload_size": envelope.body_size,
            },
        )
        if not envelope.is_instagram:
            logger.warning("webhook_unexpected_object", extra={"object": envelope.object_type})

        dispatch_in_background(
            payload=envelope.payload,
            correlation_id=correlation_id,
            dispatcher=getattr(request.app.state, "dispatcher", None),
        )
        return _plain(EVENT_RECEIVED, status.HTTP_200_OK)
