"""Runtime do webhook Instagram: dispatch em background depois do 200.

A Meta reenvia o POST quando a resposta demora, então o dispatcher roda
fora do request. Cada task leva o dispatcher vigente no momento do POST e
reabre o escopo do correlation_id, para que todos os logs do dispatch
fiquem ligados à requisição que os originou.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from app.observability import correlation_scope
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from app.use_cases.instagram import DispatchInstagramEventUseCase

logger = logging.getLogger(__name__)

MAX_CONCURRENT_DISPATCHES = 100


class RelayDispatchPool:
    """Dispatches em andamento, limitados por semáforo e drenados no shutdown."""

    def __init__(self, max_concurrent: int = MAX_CONCURRENT_DISPATCHES) -> None:
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._tasks: set[asyncio.Task[None]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def submit(
        self,
        dispatcher: DispatchInstagramEventUseCase,
        payload: dict[str, Any],
        correlation_id: str,
    ) -> asyncio.Task[None]:
        task = asyncio.create_task(
            self._dispatch(dispatcher, payload, correlation_id),
            name=f"instagram-dispatch-{correlation_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info(
            "webhook_dispatch_scheduled",
            extra={"correlation_id": correlation_id, "active_tasks": len(self._tasks)},
        )
        return task

    async def _dispatch(
        self,
        dispatcher: DispatchInstagramEventUseCase,
        payload: dict[str, Any],
        correlation_id: str,
    ) -> None:
        # O webhook já respondeu 200: falhas aqui só podem ser logadas
        async with self._semaphore:
            with correlation_scope(correlation_id):
                try:
                    await dispatcher.execute(payload, correlation_id=correlation_id)
                except InfrastructureError as exc:
                    logger.error(
                        "webhook_dispatch_infra_failed",
                        extra={
                            "correlation_id": correlation_id,
                            "error_type": type(exc).__name__,
                        },
                    )
                except Exception:
                    logger.exception(
                        "webhook_dispatch_failed",
                        extra={"correlation_id": correlation_id},
                    )

    async def drain(self, timeout_seconds: float) -> int:
        """Aguarda os dispatches pendentes; cancela os que estouram o prazo.

        Returns:
            Quantidade de tasks canceladas.
        """
        if not self._tasks:
            return 0

        pending_now = list(self._tasks)
        logger.info(
            "webhook_dispatch_drain_started",
            extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return 0

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning(
            "webhook_dispatch_drain_cancelled",
            extra={"cancelled_tasks": len(pending)},
        )
        return len(pending)


_pool = RelayDispatchPool()


def dispatch_in_background(
    *,
    payload: dict[str, Any],
    correlation_id: str,
    dispatcher: DispatchInstagramEventUseCase | None,
) -> bool:
    """Agenda o dispatch; False se o dispatcher não foi inicializado."""
    if dispatcher is None:
        logger.warning(
            "webhook_dispatcher_unavailable",
            extra={"correlation_id": correlation_id},
        )
        return False

    _pool.submit(dispatcher, payload, correlation_id)
    return True


async def drain_background_tasks(timeout_seconds: float = 30.0) -> None:
    """Chamado no shutdown do lifespan."""
    await _pool.drain(timeout_seconds)
