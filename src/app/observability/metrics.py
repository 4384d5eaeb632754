"""Registro de métricas via structured logging.

As métricas são logs estruturados, agregáveis depois pelo coletor de logs.

Métricas suportadas:
- Latência: tempo de processamento por componente/operação
- Entrega: resultado de cada chamada ao Bot API (método, ok, tentativas)
- Evento: desfecho de cada sub-evento do webhook (enviado, duplicado, ignorado)

Uso:
    from app.observability.metrics import record_latency, record_delivery

    start = time.perf_counter()
    # ... operação ...
    record_latency("dispatcher", "execute", (time.perf_counter() - start) * 1000)

    record_delivery("sendMessage", ok=True, attempts=1)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "dispatcher", "telegram_delivery")
        operation: Nome da operação (ex: "execute", "send")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_delivery(
    method: str,
    ok: bool,
    attempts: int,
    correlation_id: str | None = None,
) -> None:
    """Registra resultado de uma chamada ao Telegram Bot API.

    Args:
        method: Método do Bot API (ex: "sendMessage", "sendPhoto")
        ok: True se a chamada terminou com sucesso
        attempts: Número de tentativas consumidas
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_delivery",
        extra={
            "metric_type": "delivery",
            "component": "telegram_delivery",
            "method": method,
            "ok": ok,
            "attempts": attempts,
            "correlation_id": correlation_id,
        },
    )


def record_event_outcome(
    event_type: str,
    outcome: str,
    correlation_id: str | None = None,
) -> None:
    """Registra desfecho de um sub-evento do webhook.

    Args:
        event_type: Tipo semântico (ex: "dm.message", "change.comments")
        outcome: "forwarded", "duplicate", "ignored", "skipped" ou "failed"
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_event_outcome",
        extra={
            "metric_type": "event_outcome",
            "component": "dispatcher",
            "event_type": event_type,
            "outcome": outcome,
            "correlation_id": correlation_id,
        },
    )
